"""Shared fixtures for concierge-ai tests."""

from __future__ import annotations

from typing import Iterator

import pytest

from concierge_ai.core.config import EnrichmentConfig, GenerationConfig, LLMConfig
from concierge_ai.enrichment.affiliate import CatalogEntry, CatalogLinkResolver
from concierge_ai.enrichment.enricher import Enricher
from concierge_ai.enrichment.evidence import EvidenceIndex
from concierge_ai.models import Submission
from concierge_ai.prompts import registry


@pytest.fixture(autouse=True)
def _reset_prompt_registry() -> Iterator[None]:
    registry.reset()
    yield
    registry.reset()


@pytest.fixture
def submission() -> Submission:
    return Submission.model_validate(
        {
            "id": "sub-123",
            "user_email": "alex@example.com",
            "name": "Alex",
            "dob": "1985-10-02",
            "sex_at_birth": "female",
            "pregnant": "no",
            "weight": "150",
            "goals": [{"name": "Better sleep"}, "More energy"],
            "health_conditions": [{"name": "Hypothyroidism"}],
            "medications": [{"name": "Levothyroxine"}],
            "supplements": [{"name": "Magnesium"}, {"name": "Vitamin C"}],
            "tier": "premium",
            "brand_pref": "clean",
        }
    )


@pytest.fixture
def llm_config() -> LLMConfig:
    """No real key and no backoff sleeps."""
    return LLMConfig(
        api_key="test-key",
        model="gpt-4o-mini",
        max_retries=3,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        timeout=5.0,
    )


@pytest.fixture
def generation_config() -> GenerationConfig:
    return GenerationConfig()


@pytest.fixture
def enrichment_config() -> EnrichmentConfig:
    return EnrichmentConfig(amazon_tag="test-20")


@pytest.fixture
def evidence_index() -> EvidenceIndex:
    return EvidenceIndex(
        {
            "magnesium (glycinate)": [
                {"url": "https://pubmed.ncbi.nlm.nih.gov/23853635/"},
                {"url": "https://doi.org/10.3390/nu12123672"},
                {"url": "https://pubmed.ncbi.nlm.nih.gov/11111111/"},
            ],
            "creatine (monohydrate)": [
                {"url": "https://pubmed.ncbi.nlm.nih.gov/28615996/"},
                {"url": "https://example.com/blog/creatine"},
            ],
        }
    )


@pytest.fixture
def resolver() -> CatalogLinkResolver:
    catalog = [
        CatalogEntry(
            ingredient="Magnesium",
            product_name="Magnesium Glycinate 200",
            link_default="https://www.amazon.com/dp/B000MAG",
            link_clean="https://www.amazon.com/dp/B000MAGCLEAN",
            link_partner="https://partner.example.com/magnesium",
        ),
        CatalogEntry(ingredient="Vitamin D", link_budget="https://www.amazon.com/dp/B000VITD"),
    ]
    return CatalogLinkResolver(catalog, amazon_tag="test-20")


@pytest.fixture
def enricher(resolver: CatalogLinkResolver, evidence_index: EvidenceIndex, enrichment_config: EnrichmentConfig) -> Enricher:
    return Enricher(resolver, evidence_index, enrichment_config)
