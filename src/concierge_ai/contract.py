"""Report document contract: required headings, markers, and thresholds.

The generated markdown is the only structural format this package owns.
Validators, salvage transforms, and prompt templates all read from here so
the three stay in agreement.
"""

from __future__ import annotations

import re
from datetime import date

# ── Headings ────────────────────────────────────────────────────────

INTRO_HEADING = "## Intro Summary"
CONTRAINDICATIONS_HEADING = "## Contraindications & Med Interactions"
BLUEPRINT_HEADING = "## Your Blueprint Recommendations"
RECOMMENDED_HEADING = "## Recommended Stack"
REFERENCES_HEADING = "## Evidence & References"
SHOPPING_HEADING = "## Shopping Links"
FOLLOW_UP_HEADING = "## Follow-up Plan"

TERMINATOR = "## END"

HEADINGS: tuple[str, ...] = (
    INTRO_HEADING,
    "## Goals",
    CONTRAINDICATIONS_HEADING,
    "## Current Stack",
    BLUEPRINT_HEADING,
    RECOMMENDED_HEADING,
    "## Dosing & Notes",
    REFERENCES_HEADING,
    SHOPPING_HEADING,
    FOLLOW_UP_HEADING,
    "## Lifestyle Prescriptions",
    "## Longevity Levers",
    "## This Week Try",
    TERMINATOR,
)

# ── Thresholds ──────────────────────────────────────────────────────

MIN_WORDS = 1800
MIN_BLUEPRINT_ROWS = 10
MAX_ATTEMPTS = 2
REFERENCE_DATE = date(2025, 9, 21)

DOSE_SENTINEL = "See Dosing & Notes"

BANNED_RATIONALE_TOKENS: tuple[str, ...] = (
    "tbd",
    "todo",
    "n/a",
    "placeholder",
    "lorem ipsum",
    "insert",
    "xxx",
    "...",
    "???",
)

# Only PubMed and DOI links count as references. Matched against a whole URL.
CITATION_URL_RE = re.compile(
    r"https?://(?:pubmed\.ncbi\.nlm\.nih\.gov/\d+/?|(?:dx\.)?doi\.org/10\.\S+)",
    re.IGNORECASE,
)

# ── Salvage text ────────────────────────────────────────────────────

BLUEPRINT_RATIONALE = (
    "Aligned with your goals and intake profile; dose and timing are in the Recommended Stack."
)
BLUEPRINT_NARRATIVE = (
    "These picks are ranked by expected impact for your stated goals and current routine. "
    "Review the Recommended Stack and Dosing & Notes sections before starting anything new."
)
SYNERGY_NARRATIVE = (
    "Take these items as listed in Dosing & Notes, spacing minerals away from thyroid "
    "medication and pairing fat-soluble nutrients with a meal for better absorption."
)
