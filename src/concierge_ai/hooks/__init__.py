"""Process-level hooks: structured logging setup."""

from __future__ import annotations

from concierge_ai.hooks.logging_config import setup_logging

__all__ = ["setup_logging"]
