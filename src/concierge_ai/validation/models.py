"""Validation data models: check names and per-draft results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ValidationCheck(str, Enum):
    """Named structural checks run against every draft."""

    WORD_COUNT = "word-count"
    BLUEPRINT_TABLE = "blueprint-table"
    BLUEPRINT_NARRATIVE = "blueprint-narrative"
    RECOMMENDED_TABLE = "recommended-table"
    CITATIONS = "citations"
    TERMINATOR = "terminator"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of every check for one draft. Recomputed per attempt, never mutated."""

    outcomes: dict[ValidationCheck, bool] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return all(self.outcomes.get(check, False) for check in ValidationCheck)

    @property
    def failures(self) -> list[ValidationCheck]:
        """Failed checks in declaration order."""
        return [check for check in ValidationCheck if not self.outcomes.get(check, False)]

    @property
    def failure_names(self) -> list[str]:
        return [check.value for check in self.failures]

    def __getitem__(self, check: ValidationCheck) -> bool:
        return self.outcomes.get(check, False)
