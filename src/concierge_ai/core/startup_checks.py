"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from concierge_ai.core.config import AppSettings

log = logging.getLogger(__name__)

# Providers that run locally and do not require an API key
_NO_KEY_PROVIDERS = frozenset({"ollama"})


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_api_key(settings)
    _check_generation(settings)
    _check_persistence(settings)


def _check_api_key(settings: AppSettings) -> None:
    """Reject placeholder API keys for providers that need real ones."""
    if settings.llm.provider not in _NO_KEY_PROVIDERS:
        if settings.llm.api_key in ("no-key", ""):
            raise ValueError(
                f"CONCIERGE_LLM_API_KEY is required for provider '{settings.llm.provider}'. "
                f"Set it via environment variable or secrets manager."
            )


def _check_generation(settings: AppSettings) -> None:
    """Warn when the word-count gate is effectively disabled."""
    if settings.generation.min_words <= 0:
        log.warning(
            "CONCIERGE_GENERATION_MIN_WORDS=%d disables the word-count gate; "
            "truncated reports will only be caught by the terminator check.",
            settings.generation.min_words,
        )


def _check_persistence(settings: AppSettings) -> None:
    """Warn about file persistence in containerized environments."""
    is_container = bool(
        os.environ.get("ECS_CONTAINER_METADATA_URI")
        or os.environ.get("KUBERNETES_SERVICE_HOST")
    )
    if is_container and settings.persistence.backend == "file":
        log.warning(
            "CONCIERGE_PERSISTENCE_BACKEND=file in a container environment. "
            "Reports will be lost on container restart."
        )
