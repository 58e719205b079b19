"""Prompt management: registry, composer, and report templates."""

from __future__ import annotations

from concierge_ai.prompts.composer import PromptPair, compose_prompts, compute_age
from concierge_ai.prompts.registry import configure, get_prompt, reset

__all__ = [
    "PromptPair",
    "compose_prompts",
    "compute_age",
    "configure",
    "get_prompt",
    "reset",
]
