"""Integration tests for the report pipeline: retries, salvage, annotation, enrichment."""

from __future__ import annotations

import pytest

from concierge_ai import contract
from concierge_ai.core.config import GenerationConfig, LLMConfig
from concierge_ai.enrichment.enricher import Enricher
from concierge_ai.exceptions import NonRetryableError, RetryableError
from concierge_ai.generation import NEEDS_REVIEW_PREFIX, ReportPipeline, annotate_failures
from concierge_ai.inference.client import LLMClient
from concierge_ai.inference.protocols import InferenceResult
from concierge_ai.models import SafetyWarning, Submission
from concierge_ai.validation import run_validators
from tests.fakes.drafts import SUPPLEMENTS, build_draft
from tests.fakes.fake_inference import FakeInferenceBackend, StatusError, fake_usage


def _pipeline(
    backend: FakeInferenceBackend,
    llm_config: LLMConfig,
    *,
    enricher: Enricher | None = None,
    config: GenerationConfig | None = None,
) -> ReportPipeline:
    return ReportPipeline(LLMClient(backend, llm_config), enricher=enricher, config=config)


def _list_only_recommended() -> list[str]:
    bullets = [f"- {name} — 1 serving daily" for name in SUPPLEMENTS[:6]]
    numbered = [f"{i}. {name}: with breakfast" for i, name in enumerate(SUPPLEMENTS[6:10], start=1)]
    return bullets + numbered


class TestAcceptedFirstAttempt:
    async def test_valid_draft_accepted(self, submission: Submission, llm_config: LLMConfig) -> None:
        draft = build_draft()
        backend = FakeInferenceBackend([draft])

        report = await _pipeline(backend, llm_config).generate(submission)

        assert len(backend.calls) == 1
        assert report.failures == []
        assert report.attempts == 1
        assert not report.salvaged
        assert not report.needs_review
        assert report.markdown == draft
        assert NEEDS_REVIEW_PREFIX not in report.markdown
        assert report.model == "gpt-4o-mini"
        assert report.total_usage.total_tokens == 150

    async def test_prompts_sent(self, submission: Submission, llm_config: LLMConfig) -> None:
        backend = FakeInferenceBackend([build_draft()])
        await _pipeline(backend, llm_config).generate(submission)

        messages = backend.calls[0]["messages"]
        assert messages[0]["role"] == "system"
        assert contract.BLUEPRINT_HEADING in messages[0]["content"]
        assert '"id": "sub-123"' in messages[1]["content"]


class TestQualityRetry:
    async def test_second_attempt_accepted(self, submission: Submission, llm_config: LLMConfig) -> None:
        backend = FakeInferenceBackend([build_draft(words=50), build_draft()])

        report = await _pipeline(backend, llm_config).generate(submission)

        assert len(backend.calls) == 2
        assert report.attempts == 2
        assert report.failures == []
        assert not report.salvaged
        assert len(report.usage) == 2
        assert report.total_usage.total_tokens == 300

    async def test_fallback_model_on_retry(self, submission: Submission, llm_config: LLMConfig) -> None:
        backend = FakeInferenceBackend([build_draft(words=50), build_draft()])
        config = GenerationConfig(fallback_model="gpt-4o")

        report = await _pipeline(backend, llm_config, config=config).generate(submission)

        assert [call["model"] for call in backend.calls] == ["gpt-4o-mini", "gpt-4o"]
        assert report.model == "gpt-4o"

    async def test_attempt_budget_respected(self, submission: Submission, llm_config: LLMConfig) -> None:
        backend = FakeInferenceBackend([build_draft(words=50)])
        config = GenerationConfig(max_attempts=3)

        report = await _pipeline(backend, llm_config, config=config).generate(submission)

        assert len(backend.calls) == 3
        assert report.failures == ["word-count"]

    async def test_model_reported_by_backend(self, submission: Submission, llm_config: LLMConfig) -> None:
        result = InferenceResult(content=build_draft(), usage=fake_usage(90), model="gpt-4o-mini-2024-07-18")
        report = await _pipeline(FakeInferenceBackend([result]), llm_config).generate(submission)
        assert report.model == "gpt-4o-mini-2024-07-18"
        assert report.total_usage.total_tokens == 90


class TestTruncatedDraftSalvaged:
    """Both attempts stop before the end marker; salvage appends it."""

    async def test_terminator_salvaged(self, submission: Submission, llm_config: LLMConfig) -> None:
        truncated = InferenceResult(
            content=build_draft(terminator=False),
            finish_reason="max_output_reached",
            usage=fake_usage(),
        )
        backend = FakeInferenceBackend([truncated])

        report = await _pipeline(backend, llm_config).generate(submission)

        assert len(backend.calls) == 2
        assert report.salvaged
        assert report.failures == []
        assert report.markdown.rstrip().endswith(contract.TERMINATOR)
        assert report.markdown.count(contract.TERMINATOR) == 1


class TestListOnlyDraftSalvaged:
    """The model wrote the Recommended Stack as a list and skipped the blueprint."""

    async def test_tables_rebuilt_from_list(self, submission: Submission, llm_config: LLMConfig) -> None:
        draft = build_draft(blueprint=[], recommended=_list_only_recommended())
        backend = FakeInferenceBackend([draft])

        report = await _pipeline(backend, llm_config).generate(submission)

        assert len(backend.calls) == 2
        assert report.salvaged
        assert report.failures == []
        assert run_validators(report.markdown).passed
        for name in SUPPLEMENTS[:10]:
            assert f"| {name} |" in report.markdown
        assert contract.BLUEPRINT_NARRATIVE in report.markdown
        assert contract.SYNERGY_NARRATIVE in report.markdown


class TestSalvageFallsShort:
    """Too few names to rebuild the blueprint: the report ships flagged for review."""

    async def test_needs_review_banner(self, submission: Submission, llm_config: LLMConfig) -> None:
        draft = build_draft(blueprint=[], recommended=["- Zinc", "- Magnesium", "- Vitamin D3"])
        backend = FakeInferenceBackend([draft])

        report = await _pipeline(backend, llm_config).generate(submission)

        assert report.salvaged
        assert report.needs_review
        assert "blueprint-table" in report.failures
        assert report.failures == ["blueprint-table", "blueprint-narrative"]
        assert report.markdown.startswith(NEEDS_REVIEW_PREFIX)
        assert "blueprint-table, blueprint-narrative" in report.markdown.split("\n", 1)[0]
        # Names come only from the draft.
        assert "| Zinc | See Dosing & Notes | |" in report.markdown
        assert "Ashwagandha" not in report.markdown

    def test_annotation_idempotent(self) -> None:
        once = annotate_failures("## Intro Summary", ["citations"])
        assert annotate_failures(once, ["citations"]) == once
        assert annotate_failures("## Intro Summary", []) == "## Intro Summary"


class TestTransportFailures:
    async def test_non_retryable_propagates(self, submission: Submission, llm_config: LLMConfig) -> None:
        backend = FakeInferenceBackend([StatusError(401)])
        with pytest.raises(NonRetryableError):
            await _pipeline(backend, llm_config).generate(submission)
        assert len(backend.calls) == 1

    async def test_exhausted_transport_retries_propagate(
        self, submission: Submission, llm_config: LLMConfig
    ) -> None:
        backend = FakeInferenceBackend([StatusError(503)])
        with pytest.raises(RetryableError):
            await _pipeline(backend, llm_config).generate(submission)
        assert len(backend.calls) == llm_config.max_retries

    async def test_transient_error_then_quality_retry(self, submission: Submission, llm_config: LLMConfig) -> None:
        backend = FakeInferenceBackend([StatusError(429), build_draft(words=50), build_draft()])
        report = await _pipeline(backend, llm_config).generate(submission)
        assert len(backend.calls) == 3
        assert report.attempts == 2
        assert report.failures == []


class TestFinalStages:
    async def test_safety_warnings_rendered(self, submission: Submission, llm_config: LLMConfig) -> None:
        warning = SafetyWarning(
            code="thyroid_spacing",
            severity="warning",
            message="Minerals can bind thyroid meds.",
            recommendation="Separate by 4 hours.",
        )
        backend = FakeInferenceBackend([build_draft()])

        report = await _pipeline(backend, llm_config).generate(submission, safety_warnings=[warning])

        assert report.safety_warnings == [warning]
        assert "- **Caution:** Minerals can bind thyroid meds. Separate by 4 hours." in report.markdown
        assert report.failures == []

    async def test_enrichment_applied_once(
        self, submission: Submission, llm_config: LLMConfig, enricher: Enricher
    ) -> None:
        backend = FakeInferenceBackend([build_draft()])

        report = await _pipeline(backend, llm_config, enricher=enricher).generate(submission)

        assert report.markdown.count("https://partner.example.com/magnesium") == 1
        assert "https://doi.org/10.3390/nu12123672" in report.markdown
        assert enricher.enrich(report.markdown, submission) == report.markdown

    async def test_enrichment_runs_on_flagged_reports(
        self, submission: Submission, llm_config: LLMConfig, enricher: Enricher
    ) -> None:
        draft = build_draft(blueprint=[], recommended=["- Creatine"])
        backend = FakeInferenceBackend([draft])

        report = await _pipeline(backend, llm_config, enricher=enricher).generate(submission)

        assert report.needs_review
        assert "https://pubmed.ncbi.nlm.nih.gov/28615996/" in report.markdown
