"""Safety rule evaluation: interaction warnings for a client profile."""

from __future__ import annotations

from concierge_ai.safety.annotate import apply_safety_warnings
from concierge_ai.safety.cache import InteractionRulesCache
from concierge_ai.safety.evaluator import SafetyRuleEvaluator
from concierge_ai.safety.rules import InteractionRule, evaluate_rules, evaluate_static
from concierge_ai.safety.sources import IInteractionRulesSource, JsonFileRulesSource, MemoryRulesSource

__all__ = [
    "IInteractionRulesSource",
    "InteractionRule",
    "InteractionRulesCache",
    "JsonFileRulesSource",
    "MemoryRulesSource",
    "SafetyRuleEvaluator",
    "apply_safety_warnings",
    "evaluate_rules",
    "evaluate_static",
]
