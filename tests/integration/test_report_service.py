"""Integration tests for ReportService wiring and persistence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from concierge_ai.core.config import AppSettings, EnrichmentConfig, LLMConfig, SafetyConfig
from concierge_ai.exceptions import NonRetryableError, ReportNotFoundError, SubmissionNotFoundError
from concierge_ai.generation import ReportPipeline
from concierge_ai.inference.client import LLMClient
from concierge_ai.models import Submission
from concierge_ai.persistence import MemoryPersistenceBackend
from concierge_ai.safety import InteractionRule, InteractionRulesCache, MemoryRulesSource, SafetyRuleEvaluator
from concierge_ai.services.report_service import ReportService
from concierge_ai.services.report_store import ReportStore
from concierge_ai.services.submission_store import SubmissionStore
from tests.fakes.drafts import build_draft
from tests.fakes.fake_inference import FakeInferenceBackend, StatusError
from tests.fakes.fake_persistence import FakePersistenceBackend


def _service(
    backend: FakeInferenceBackend,
    llm_config: LLMConfig,
    store: FakePersistenceBackend,
    safety: SafetyRuleEvaluator | None = None,
) -> ReportService:
    pipeline = ReportPipeline(LLMClient(backend, llm_config))
    return ReportService(SubmissionStore(store), ReportStore(store), pipeline, safety)


class TestGenerateReport:
    async def test_generates_and_persists(self, submission: Submission, llm_config: LLMConfig) -> None:
        store = FakePersistenceBackend()
        service = _service(FakeInferenceBackend([build_draft()]), llm_config, store)
        service.submissions.put(submission)

        stored = await service.generate_report("sub-123")

        assert stored.report.submission_id == "sub-123"
        assert store.exists(f"reports/{stored.report_id}")
        assert service.get_report(stored.report_id).markdown == stored.report.markdown

    async def test_static_safety_warnings_applied(self, submission: Submission, llm_config: LLMConfig) -> None:
        store = FakePersistenceBackend()
        service = _service(FakeInferenceBackend([build_draft()]), llm_config, store)
        service.submissions.put(submission)

        stored = await service.generate_report("sub-123")

        assert [w.code for w in stored.report.safety_warnings] == ["thyroid_spacing"]
        assert "bind thyroid meds" in stored.report.markdown

    async def test_dynamic_rules_used(self, submission: Submission, llm_config: LLMConfig) -> None:
        rule = InteractionRule(ingredient="Magnesium", binds_thyroid_meds=True, notes="Take 4h after thyroid meds.")
        safety = SafetyRuleEvaluator(InteractionRulesCache(MemoryRulesSource([rule])))
        store = FakePersistenceBackend()
        service = _service(FakeInferenceBackend([build_draft()]), llm_config, store, safety)
        service.submissions.put(submission)

        stored = await service.generate_report("sub-123")

        assert "Take 4h after thyroid meds." in stored.report.markdown

    async def test_each_request_persists_new_report(self, submission: Submission, llm_config: LLMConfig) -> None:
        store = FakePersistenceBackend()
        service = _service(FakeInferenceBackend([build_draft()]), llm_config, store)
        service.submissions.put(submission)

        first = await service.generate_report("sub-123")
        second = await service.generate_report("sub-123")

        assert first.report_id != second.report_id
        assert len(service.reports.list_for_submission("sub-123")) == 2

    async def test_flagged_report_still_persisted(self, submission: Submission, llm_config: LLMConfig) -> None:
        store = FakePersistenceBackend()
        draft = build_draft(citations=["- Blog: https://example.com/post"])
        service = _service(FakeInferenceBackend([draft]), llm_config, store)
        service.submissions.put(submission)

        stored = await service.generate_report("sub-123")

        assert service.get_report(stored.report_id).failures == ["citations"]


class TestFailures:
    async def test_unknown_submission(self, llm_config: LLMConfig) -> None:
        backend = FakeInferenceBackend([build_draft()])
        service = _service(backend, llm_config, FakePersistenceBackend())
        with pytest.raises(SubmissionNotFoundError):
            await service.generate_report("missing")
        assert backend.calls == []

    async def test_transport_failure_persists_nothing(self, submission: Submission, llm_config: LLMConfig) -> None:
        store = FakePersistenceBackend()
        service = _service(FakeInferenceBackend([StatusError(400)]), llm_config, store)
        service.submissions.put(submission)
        saves_before = store.saves

        with pytest.raises(NonRetryableError):
            await service.generate_report("sub-123")

        assert store.saves == saves_before
        assert store.list_keys("reports/") == []

    def test_unknown_report(self, llm_config: LLMConfig) -> None:
        service = _service(FakeInferenceBackend(), llm_config, FakePersistenceBackend())
        with pytest.raises(ReportNotFoundError):
            service.get_report("nope")


class TestFromSettings:
    async def test_wires_all_collaborators(self, submission: Submission, tmp_path: Path) -> None:
        evidence_path = tmp_path / "evidence.json"
        evidence_path.write_text(
            json.dumps({"creatine (monohydrate)": [{"url": "https://pubmed.ncbi.nlm.nih.gov/28615996/"}]})
        )
        rules_path = tmp_path / "rules.json"
        rules_path.write_text(json.dumps([{"ingredient": "Vitamin C", "kidney_disease_caution": True}]))
        settings = AppSettings(
            llm=LLMConfig(api_key="sk-test", retry_base_delay=0.0, retry_max_delay=0.0),
            enrichment=EnrichmentConfig(amazon_tag="wired-20", evidence_index_path=evidence_path),
            safety=SafetyConfig(rules_path=rules_path),
        )
        backend = MemoryPersistenceBackend()
        inference = FakeInferenceBackend([build_draft()])

        service = ReportService.from_settings(settings, backend=backend, inference_backend=inference)
        service.submissions.put(submission)
        stored = await service.generate_report("sub-123")

        markdown = stored.report.markdown
        assert "- Creatine Monohydrate: https://pubmed.ncbi.nlm.nih.gov/28615996/" in markdown
        assert "tag=wired-20" in markdown
        # No kidney condition on file, so the dynamic rule is silent and static rules apply.
        assert [w.code for w in stored.report.safety_warnings] == ["thyroid_spacing"]
        assert backend.list_keys("reports/") == [f"reports/{stored.report_id}"]
