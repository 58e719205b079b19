"""Pydantic data models for concierge-ai."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field, field_validator

# ── Intake submission ────────────────────────────────────────────────


def _names(value: Any) -> list[str]:
    """Flatten child rows that arrive as strings or ``{"name": ...}`` objects."""
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    names: list[str] = []
    for item in value:
        if isinstance(item, str):
            name = item
        elif isinstance(item, dict):
            name = item.get("name") or ""
        else:
            name = getattr(item, "name", "") or ""
        name = name.strip()
        if name:
            names.append(name)
    return names


class Submission(BaseModel):
    """Normalized intake questionnaire record. Read-only for the pipeline."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    email: Optional[str] = Field(default=None, validation_alias=AliasChoices("email", "user_email"))
    name: Optional[str] = None
    dob: Optional[str] = None
    sex: Optional[str] = Field(default=None, validation_alias=AliasChoices("sex", "sex_at_birth"))
    pregnant: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[float] = None
    goals: list[str] = Field(default_factory=list)
    conditions: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("conditions", "health_conditions", "healthConditions"),
    )
    medications: list[str] = Field(default_factory=list)
    supplements: list[str] = Field(default_factory=list)
    hormones: list[str] = Field(default_factory=list)
    tier: Literal["budget", "mid", "premium"] = "budget"
    energy_rating: Optional[float] = None
    sleep_rating: Optional[float] = None
    dosing_pref: Optional[str] = None
    brand_pref: Optional[str] = None

    @field_validator("goals", "conditions", "medications", "supplements", "hormones", mode="before")
    @classmethod
    def _flatten_names(cls, value: Any) -> list[str]:
        return _names(value)

    @field_validator("weight", "energy_rating", "sleep_rating", mode="before")
    @classmethod
    def _number_or_none(cls, value: Any) -> Optional[float]:
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None

    @field_validator("tier", mode="before")
    @classmethod
    def _default_tier(cls, value: Any) -> str:
        return value or "budget"


class AffiliatePreferences(BaseModel):
    """Purchase preferences passed to the affiliate link resolver."""

    brand_pref: Optional[str] = None
    is_premium: bool = False

    @classmethod
    def from_submission(cls, submission: Submission) -> AffiliatePreferences:
        return cls(brand_pref=submission.brand_pref, is_premium=submission.tier == "premium")


# ── Model usage ──────────────────────────────────────────────────────


class TokenUsage(BaseModel):
    """Token counters reported by a single model call."""

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: TokenUsage) -> TokenUsage:
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )


# ── Safety ───────────────────────────────────────────────────────────


class SafetyProfile(BaseModel):
    """Subset of a submission consulted by the safety rule evaluator."""

    medications: list[str] = Field(default_factory=list)
    supplements: list[str] = Field(default_factory=list)
    conditions: list[str] = Field(default_factory=list)
    pregnant: Optional[str] = None

    @classmethod
    def from_submission(cls, submission: Submission) -> SafetyProfile:
        return cls(
            medications=list(submission.medications),
            supplements=list(submission.supplements),
            conditions=list(submission.conditions),
            pregnant=submission.pregnant,
        )


class SafetyWarning(BaseModel):
    """A single interaction or contraindication warning."""

    model_config = ConfigDict(frozen=True)

    code: str
    severity: Literal["info", "warning", "danger"]
    message: str
    recommendation: str = ""
    refs: list[str] = Field(default_factory=list)


# ── Final report ─────────────────────────────────────────────────────


class FinalReport(BaseModel):
    """The document handed to enrichment and then to the report store.

    Created once per generation request and never edited afterwards; a
    correction is a new report.
    """

    model_config = ConfigDict(frozen=True)

    submission_id: str
    markdown: str
    usage: list[TokenUsage] = Field(default_factory=list)
    failures: list[str] = Field(default_factory=list)
    model: str = ""
    attempts: int = 0
    salvaged: bool = False
    safety_warnings: list[SafetyWarning] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_usage(self) -> TokenUsage:
        total = TokenUsage()
        for call in self.usage:
            total = total + call
        return total

    @property
    def needs_review(self) -> bool:
        return bool(self.failures)


class StoredReport(BaseModel):
    """A persisted report together with its store-assigned identity."""

    report_id: str
    report: FinalReport
