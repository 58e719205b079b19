"""Interaction rules: the dynamic rule record and the static fallback rules."""

from __future__ import annotations

from typing import Iterable, Optional

from pydantic import BaseModel, Field

from concierge_ai.models import SafetyProfile, SafetyWarning

THYROID_MEDS = ("levothyroxine", "liothyronine", "thyroid")
ANTICOAGULANTS = ("warfarin", "eliquis", "xarelto", "apixaban")
DIABETES_MEDS = ("metformin", "insulin", "glipizide")
LIVER_CONDITIONS = ("liver", "hepatitis", "cirrhosis")
KIDNEY_CONDITIONS = ("renal", "kidney")


def includes_any(haystack: Iterable[str], needles: Iterable[str]) -> bool:
    """Case-insensitive substring match of any needle in any haystack entry."""
    lowered = [h.lower() for h in haystack]
    return any(n.lower() in h for h in lowered for n in needles if n)


def is_pregnant(profile: SafetyProfile) -> bool:
    return (profile.pregnant or "").strip().lower() == "yes"


class InteractionRule(BaseModel):
    """One row of the interaction table, keyed by supplement ingredient."""

    ingredient: str
    binds_thyroid_meds: bool = False
    anticoagulants_bleeding_risk: bool = False
    diabetes_meds_additive: bool = False
    pregnancy_caution: bool = False
    liver_disease_caution: bool = False
    kidney_disease_caution: bool = False
    notes: Optional[str] = None
    refs: list[str] = Field(default_factory=list)


def evaluate_rules(rules: Iterable[InteractionRule], profile: SafetyProfile) -> list[SafetyWarning]:
    """Warnings produced by dynamic rules whose ingredient the client takes."""
    out: list[SafetyWarning] = []
    for rule in rules:
        if not rule.ingredient or not includes_any(profile.supplements, [rule.ingredient]):
            continue
        name = rule.ingredient
        refs = list(rule.refs)

        if rule.binds_thyroid_meds and includes_any(profile.medications, THYROID_MEDS):
            out.append(SafetyWarning(
                code="thyroid_spacing",
                severity="warning",
                message=f"{name} may bind thyroid meds.",
                recommendation=rule.notes or "Separate by 4 hours.",
                refs=refs,
            ))
        if rule.anticoagulants_bleeding_risk and includes_any(profile.medications, ANTICOAGULANTS):
            out.append(SafetyWarning(
                code="bleeding_risk",
                severity="warning",
                message=f"{name} may increase bleeding risk.",
                recommendation=rule.notes or "Monitor closely.",
                refs=refs,
            ))
        if rule.diabetes_meds_additive and includes_any(profile.medications, DIABETES_MEDS):
            out.append(SafetyWarning(
                code="blood_sugar_additive",
                severity="warning",
                message=f"{name} may lower blood glucose further.",
                recommendation=rule.notes or "Monitor glucose levels.",
                refs=refs,
            ))
        if rule.pregnancy_caution and is_pregnant(profile):
            out.append(SafetyWarning(
                code="pregnancy_caution",
                severity="danger",
                message=f"{name} not recommended during pregnancy.",
                recommendation=rule.notes or "Avoid unless prescribed.",
                refs=refs,
            ))
        if rule.liver_disease_caution and includes_any(profile.conditions, LIVER_CONDITIONS):
            out.append(SafetyWarning(
                code="liver_caution",
                severity="warning",
                message=f"{name} may stress the liver.",
                recommendation=rule.notes or "Use cautiously.",
                refs=refs,
            ))
        if rule.kidney_disease_caution and includes_any(profile.conditions, KIDNEY_CONDITIONS):
            out.append(SafetyWarning(
                code="kidney_caution",
                severity="warning",
                message=f"{name} may increase kidney workload.",
                recommendation=rule.notes or "Stay hydrated, avoid high doses.",
                refs=refs,
            ))
    return out


def evaluate_static(profile: SafetyProfile) -> list[SafetyWarning]:
    """Built-in rules used when the dynamic rule source is unavailable."""
    out: list[SafetyWarning] = []

    if includes_any(profile.medications, THYROID_MEDS) and includes_any(
        profile.supplements, ("calcium", "iron", "magnesium", "zinc")
    ):
        out.append(SafetyWarning(
            code="thyroid_spacing",
            severity="warning",
            message="Mineral supplements (Ca, Fe, Mg, Zn) can bind thyroid meds and reduce absorption.",
            recommendation="Take thyroid meds on an empty stomach; separate by at least 4 hours.",
        ))

    if includes_any(profile.medications, ANTICOAGULANTS) and includes_any(
        profile.supplements, ("fish oil", "omega", "garlic", "ginkgo", "vitamin e")
    ):
        out.append(SafetyWarning(
            code="bleeding_risk",
            severity="warning",
            message="Certain supplements (omega-3s, garlic, ginkgo, vitamin E) may increase bleeding risk.",
            recommendation="Consult your clinician and monitor for bruising or bleeding.",
        ))

    if is_pregnant(profile) and includes_any(
        profile.supplements, ("vitamin a", "retinol", "licorice", "dong quai")
    ):
        out.append(SafetyWarning(
            code="pregnancy_caution",
            severity="danger",
            message="Some botanicals and high-dose vitamin A are unsafe in pregnancy.",
            recommendation="Avoid retinol and uterotonic herbs unless cleared by your provider.",
        ))

    if includes_any(profile.conditions, ("liver", "hepatitis")) and includes_any(
        profile.supplements, ("kava", "green tea extract", "black cohosh")
    ):
        out.append(SafetyWarning(
            code="liver_caution",
            severity="warning",
            message="Certain botanicals can stress the liver.",
            recommendation="Avoid them or monitor liver enzymes periodically.",
        ))

    return out
