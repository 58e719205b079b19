"""Hybrid safety rule evaluator: dynamic rules first, static rules as fallback."""

from __future__ import annotations

import logging
from typing import Optional

from concierge_ai.models import SafetyProfile, SafetyWarning
from concierge_ai.safety.cache import InteractionRulesCache
from concierge_ai.safety.rules import evaluate_rules, evaluate_static

log = logging.getLogger(__name__)


class SafetyRuleEvaluator:
    """Produces interaction warnings for a client profile.

    With no rule cache, or when the rule source fails or matches nothing,
    the built-in static rules are used instead.
    """

    def __init__(self, cache: Optional[InteractionRulesCache] = None) -> None:
        self._cache = cache

    @property
    def cache(self) -> Optional[InteractionRulesCache]:
        return self._cache

    async def evaluate(self, profile: SafetyProfile) -> list[SafetyWarning]:
        if self._cache is None:
            return evaluate_static(profile)
        try:
            rules = await self._cache.get()
        except Exception:
            log.exception("Interaction rule source failed; using static rules")
            return evaluate_static(profile)

        warnings = evaluate_rules(rules, profile)
        if warnings:
            return warnings
        log.debug("No dynamic interaction rules matched; using static rules")
        return evaluate_static(profile)
