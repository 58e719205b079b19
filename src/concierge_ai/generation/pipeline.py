"""Report pipeline: bounded quality retries, salvage, and final-guard annotation.

States per request::

    GENERATING -> VALIDATING -> ACCEPTED
                             -> RETRYING  -> GENERATING
                             -> EXHAUSTED -> salvage -> annotate

Quality failures never raise. Only a transport failure from the model client
propagates to the caller.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

from concierge_ai.core.config import GenerationConfig
from concierge_ai.models import FinalReport, SafetyWarning, TokenUsage
from concierge_ai.prompts.composer import compose_prompts
from concierge_ai.safety.annotate import apply_safety_warnings
from concierge_ai.salvage.repairs import salvage_draft
from concierge_ai.validation.engine import ValidationEngine

if TYPE_CHECKING:
    from concierge_ai.enrichment.enricher import Enricher
    from concierge_ai.inference.client import LLMClient
    from concierge_ai.models import Submission

log = logging.getLogger(__name__)

NEEDS_REVIEW_PREFIX = "> **Needs review:**"


class GenerationState(str, Enum):
    GENERATING = "generating"
    VALIDATING = "validating"
    RETRYING = "retrying"
    ACCEPTED = "accepted"
    EXHAUSTED = "exhausted"


def needs_review_banner(failures: list[str]) -> str:
    return (
        f"{NEEDS_REVIEW_PREFIX} this report did not pass every automated quality check "
        f"({', '.join(failures)}). A specialist will review it before you act on it."
    )


def annotate_failures(markdown: str, failures: list[str]) -> str:
    """Prepend the needs-review banner. No-op when nothing failed or already annotated."""
    if not failures or markdown.lstrip().startswith(NEEDS_REVIEW_PREFIX):
        return markdown
    return f"{needs_review_banner(failures)}\n\n{markdown}"


class ReportPipeline:
    """Turns a submission into a structurally guaranteed report."""

    def __init__(
        self,
        client: LLMClient,
        *,
        enricher: Optional[Enricher] = None,
        config: Optional[GenerationConfig] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._client = client
        self._enricher = enricher
        self._config = config or GenerationConfig()
        self._engine = ValidationEngine(self._config)
        self._timeout = timeout

    @staticmethod
    def _transition(submission_id: str, attempt: int, state: GenerationState, detail: str = "") -> None:
        log.info(
            "Report %s attempt %d -> %s%s",
            submission_id,
            attempt,
            state.value,
            f" ({detail})" if detail else "",
        )

    async def generate(
        self,
        submission: Submission,
        *,
        safety_warnings: Iterable[SafetyWarning] = (),
    ) -> FinalReport:
        """Generate, validate, retry, salvage and enrich one report.

        Raises:
            LLMClientError: When the model client exhausts its transport retries
                or fails non-transiently.
        """
        cfg = self._config
        prompts = compose_prompts(submission, config=cfg)
        usage: list[TokenUsage] = []
        draft = ""
        model = ""
        salvaged = False
        attempts = 0

        for attempt in range(1, cfg.max_attempts + 1):
            attempts = attempt
            self._transition(submission.id, attempt, GenerationState.GENERATING)
            model_override = cfg.fallback_model if attempt > 1 and cfg.fallback_model else None
            result = await self._client.complete(
                prompts.system,
                prompts.user,
                model=model_override,
                timeout=self._timeout,
            )
            usage.append(result.usage)
            draft = result.content
            model = result.model or model_override or self._client.model
            if result.truncated:
                log.warning("Report %s attempt %d hit the output token limit", submission.id, attempt)

            self._transition(submission.id, attempt, GenerationState.VALIDATING)
            validation = self._engine.validate(draft)
            if validation.passed:
                self._transition(submission.id, attempt, GenerationState.ACCEPTED)
                break
            detail = ", ".join(validation.failure_names)
            if attempt < cfg.max_attempts:
                self._transition(submission.id, attempt, GenerationState.RETRYING, detail)
        else:
            self._transition(submission.id, attempts, GenerationState.EXHAUSTED, detail)
            draft = salvage_draft(draft, config=cfg)
            salvaged = True
            validation = self._engine.validate(draft)
            if validation.failures:
                log.warning(
                    "Report %s needs review after salvage: %s",
                    submission.id,
                    ", ".join(validation.failure_names),
                )
            else:
                log.info("Report %s passed all checks after salvage", submission.id)

        failures = validation.failure_names
        warnings = list(safety_warnings)
        markdown = annotate_failures(draft, failures)
        markdown = apply_safety_warnings(markdown, warnings)
        if self._enricher is not None:
            markdown = self._enricher.enrich(markdown, submission)

        return FinalReport(
            submission_id=submission.id,
            markdown=markdown,
            usage=usage,
            failures=failures,
            model=model,
            attempts=attempts,
            salvaged=salvaged,
            safety_warnings=warnings,
        )
