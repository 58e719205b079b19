"""Validation engine: runs every structural check against a draft."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from concierge_ai.validation.checks.citations import check_citations
from concierge_ai.validation.checks.structure import check_terminator, check_word_count
from concierge_ai.validation.checks.tables import (
    check_blueprint_narrative,
    check_blueprint_table,
    check_recommended_table,
)
from concierge_ai.validation.models import ValidationCheck, ValidationResult

if TYPE_CHECKING:
    from concierge_ai.core.config import GenerationConfig

log = logging.getLogger(__name__)


class ValidationEngine:
    """Evaluates drafts against the document contract.

    Validation is pure computation with no model calls.  Each check runs
    independently so a single draft reports every failure at once.
    """

    def __init__(self, config: GenerationConfig | None = None) -> None:
        if config is None:
            from concierge_ai.core.config import GenerationConfig

            config = GenerationConfig()
        self._config = config

    @property
    def config(self) -> GenerationConfig:
        return self._config

    def _checks(self) -> list[tuple[ValidationCheck, Callable[[str], bool]]]:
        cfg = self._config
        return [
            (ValidationCheck.WORD_COUNT, lambda md: check_word_count(md, min_words=cfg.min_words)),
            (
                ValidationCheck.BLUEPRINT_TABLE,
                lambda md: check_blueprint_table(
                    md,
                    min_rows=cfg.min_blueprint_rows,
                    banned_tokens=tuple(cfg.banned_rationale_tokens),
                ),
            ),
            (ValidationCheck.BLUEPRINT_NARRATIVE, check_blueprint_narrative),
            (ValidationCheck.RECOMMENDED_TABLE, check_recommended_table),
            (ValidationCheck.CITATIONS, check_citations),
            (ValidationCheck.TERMINATOR, check_terminator),
        ]

    def validate(self, markdown: str) -> ValidationResult:
        """Run all checks and return a fresh result."""
        outcomes = {check: bool(fn(markdown)) for check, fn in self._checks()}
        result = ValidationResult(outcomes=outcomes)
        log.debug(
            "Validated draft (%d chars): %s",
            len(markdown),
            "passed" if result.passed else "failed " + ", ".join(result.failure_names),
        )
        return result


def run_validators(markdown: str, config: GenerationConfig | None = None) -> ValidationResult:
    """Convenience wrapper around :class:`ValidationEngine`."""
    return ValidationEngine(config).validate(markdown)
