"""Nested pydantic-settings configuration for the application.

Each group reads its own ``CONCIERGE_<GROUP>_*`` env vars, e.g.
``AppSettings().llm.model`` is driven by ``CONCIERGE_LLM_MODEL``.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from concierge_ai import contract


class LLMConfig(BaseSettings):
    """LLM backend configuration.

    Env vars use ``CONCIERGE_LLM_`` prefix::

        export CONCIERGE_LLM_PROVIDER=openai
        export CONCIERGE_LLM_MODEL=gpt-4o-mini
    """

    model_config = {"env_prefix": "CONCIERGE_LLM_"}

    provider: Literal["openai", "anthropic", "litellm", "ollama"] = "openai"
    api_key: str = "no-key"
    model: str = "gpt-4o-mini"
    temperature: float = 0.7
    max_tokens: int = 4096
    timeout: float = 120.0
    max_retries: int = Field(default=3, ge=1)
    retry_base_delay: float = 0.5
    retry_max_delay: float = 4.0
    retry_jitter_factor: float = 0.5


class GenerationConfig(BaseSettings):
    """Report generation and quality-gate configuration.

    Env vars use ``CONCIERGE_GENERATION_`` prefix.
    """

    model_config = {"env_prefix": "CONCIERGE_GENERATION_"}

    max_attempts: int = Field(default=contract.MAX_ATTEMPTS, ge=1)
    fallback_model: Optional[str] = None
    min_words: int = contract.MIN_WORDS
    min_blueprint_rows: int = Field(default=contract.MIN_BLUEPRINT_ROWS, ge=1)
    reference_date: date = contract.REFERENCE_DATE
    dose_sentinel: str = contract.DOSE_SENTINEL
    banned_rationale_tokens: tuple[str, ...] = contract.BANNED_RATIONALE_TOKENS


class EnrichmentConfig(BaseSettings):
    """Post-validation enrichment configuration.

    Env vars use ``CONCIERGE_ENRICHMENT_`` prefix.
    """

    model_config = {"env_prefix": "CONCIERGE_ENRICHMENT_"}

    amazon_tag: str = "concierge-20"
    evidence_index_path: Optional[Path] = None
    catalog_path: Optional[Path] = None
    citations_per_item: int = 2
    attach_shopping_links: bool = True
    attach_citations: bool = True


class SafetyConfig(BaseSettings):
    """Safety rule evaluator configuration.

    Env vars use ``CONCIERGE_SAFETY_`` prefix.
    """

    model_config = {"env_prefix": "CONCIERGE_SAFETY_"}

    rules_cache_ttl_seconds: float = 300.0
    rules_path: Optional[Path] = None


class PersistenceConfig(BaseSettings):
    """Persistence configuration.

    Env vars use ``CONCIERGE_PERSISTENCE_`` prefix.
    """

    model_config = {"env_prefix": "CONCIERGE_PERSISTENCE_"}

    backend: Literal["file", "memory"] = "file"
    store_path: Path = Path("./data")


class ObservabilityConfig(BaseSettings):
    """Observability configuration.

    Env vars use ``CONCIERGE_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "CONCIERGE_OBSERVABILITY_"}

    service_name: str = "concierge-ai"
    log_level: str = "INFO"


class APIConfig(BaseSettings):
    """HTTP API metadata.

    Env vars use ``CONCIERGE_API_`` prefix.
    """

    model_config = {"env_prefix": "CONCIERGE_API_"}

    title: str = "Concierge AI"
    description: str = "Personalized supplement report generation with structural quality gates."


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs.

    Each sub-config reads its own ``CONCIERGE_<GROUP>_*`` env vars.
    """

    llm: LLMConfig = LLMConfig()
    generation: GenerationConfig = GenerationConfig()
    enrichment: EnrichmentConfig = EnrichmentConfig()
    safety: SafetyConfig = SafetyConfig()
    persistence: PersistenceConfig = PersistenceConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
    api: APIConfig = APIConfig()
