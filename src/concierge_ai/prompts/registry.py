"""Prompt registry: routes lookups to the configured backend.

Usage::

    # Default (file backend, auto-configured on first call):
    prompt = get_prompt("report", "generation", "REPORT_SYSTEM_PROMPT")

    # Explicit backend (e.g. in tests):
    from concierge_ai.prompts import configure
    configure(backend=my_backend)
"""

from __future__ import annotations

import logging

from concierge_ai.prompts.backends.file_backend import FilePromptBackend
from concierge_ai.prompts.backends.protocol import IPromptBackend

logger = logging.getLogger(__name__)

# ── Module-level state ──────────────────────────────────────────────

_backend: IPromptBackend | None = None


# ── Public API ──────────────────────────────────────────────────────


def configure(*, backend: IPromptBackend | None = None) -> None:
    """Initialize the registry. Defaults to the file backend.

    If never called, the first ``get_prompt()`` call auto-configures.
    """
    global _backend
    _backend = backend if backend is not None else FilePromptBackend()
    logger.debug("Prompt registry configured with %s", type(_backend).__name__)


def get_prompt(domain: str, category: str, name: str) -> str:
    """Look up a prompt template by domain, category, and name.

    Raises:
        KeyError: If the prompt is not found.
    """
    if _backend is None:
        configure()
    assert _backend is not None
    return _backend.get(domain, category, name)


def reset() -> None:
    """Reset the registry to unconfigured state (for testing)."""
    global _backend
    _backend = None
