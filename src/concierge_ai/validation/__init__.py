"""Structural validation of generated report drafts.

Usage::

    from concierge_ai.validation import run_validators
    result = run_validators(markdown)
    if not result.passed:
        print(result.failure_names)
"""

from __future__ import annotations

from concierge_ai.validation.engine import ValidationEngine, run_validators
from concierge_ai.validation.models import ValidationCheck, ValidationResult

__all__ = [
    "ValidationCheck",
    "ValidationEngine",
    "ValidationResult",
    "run_validators",
]
