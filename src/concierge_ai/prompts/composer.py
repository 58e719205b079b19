"""Prompt composer: turns a submission into the system/user prompt pair.

Pure and deterministic. The derived client view flattens child rows and adds
``age`` and ``today`` computed against a fixed reference date, so the same
submission always yields the same prompts.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any, Optional

from concierge_ai import contract
from concierge_ai.prompts.registry import get_prompt

if TYPE_CHECKING:
    from concierge_ai.core.config import GenerationConfig
    from concierge_ai.models import Submission


@dataclass(frozen=True)
class PromptPair:
    system: str
    user: str


def compute_age(dob: Optional[str], reference: date = contract.REFERENCE_DATE) -> Optional[int]:
    """Whole years between ``dob`` and ``reference``.

    Returns ``None`` for a missing or unparseable date of birth, or one that
    falls after the reference date.
    """
    if not dob:
        return None
    try:
        born = date.fromisoformat(dob.strip()[:10])
    except ValueError:
        return None
    if born > reference:
        return None
    years = reference.year - born.year
    if (reference.month, reference.day) < (born.month, born.day):
        years -= 1
    return years


def client_view(submission: Submission, reference: date = contract.REFERENCE_DATE) -> dict[str, Any]:
    view = submission.model_dump(mode="json")
    view["age"] = compute_age(submission.dob, reference)
    view["today"] = reference.isoformat()
    return view


def compose_prompts(submission: Submission, *, config: GenerationConfig | None = None) -> PromptPair:
    """Build the prompt pair for one generation request."""
    if config is None:
        from concierge_ai.core.config import GenerationConfig

        config = GenerationConfig()

    headings = "\n".join(h for h in contract.HEADINGS if h != contract.TERMINATOR)
    system = get_prompt("report", "generation", "REPORT_SYSTEM_PROMPT").format(
        headings=headings,
        min_words=config.min_words,
        min_rows=config.min_blueprint_rows,
        dose_sentinel=config.dose_sentinel,
        terminator=contract.TERMINATOR,
    )
    client_json = json.dumps(client_view(submission, config.reference_date), indent=2)
    user = get_prompt("report", "generation", "REPORT_USER_PROMPT").format(client_json=client_json)
    return PromptPair(system=system, user=user)
