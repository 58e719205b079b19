"""Report service: submission lookup -> safety -> pipeline -> report store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from concierge_ai.enrichment.affiliate import CatalogLinkResolver
from concierge_ai.enrichment.enricher import Enricher
from concierge_ai.enrichment.evidence import EvidenceIndex
from concierge_ai.generation.pipeline import ReportPipeline
from concierge_ai.inference.client import LLMClient
from concierge_ai.inference.realtime import RealTimeBackend
from concierge_ai.models import FinalReport, SafetyProfile, StoredReport
from concierge_ai.persistence import create_persistence_backend
from concierge_ai.safety.cache import InteractionRulesCache
from concierge_ai.safety.evaluator import SafetyRuleEvaluator
from concierge_ai.safety.sources import JsonFileRulesSource
from concierge_ai.services.report_store import ReportStore
from concierge_ai.services.submission_store import SubmissionStore

if TYPE_CHECKING:
    from concierge_ai.core.config import AppSettings
    from concierge_ai.inference.protocols import IInferenceBackend
    from concierge_ai.persistence.protocols import IPersistenceBackend

log = logging.getLogger(__name__)


class ReportService:
    """Generates and persists one report per request.

    Concurrent requests for the same submission are independent and may
    each persist a report.
    """

    def __init__(
        self,
        submissions: SubmissionStore,
        reports: ReportStore,
        pipeline: ReportPipeline,
        safety: Optional[SafetyRuleEvaluator] = None,
    ) -> None:
        self._submissions = submissions
        self._reports = reports
        self._pipeline = pipeline
        self._safety = safety or SafetyRuleEvaluator()

    @property
    def submissions(self) -> SubmissionStore:
        return self._submissions

    @property
    def reports(self) -> ReportStore:
        return self._reports

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        backend: Optional[IPersistenceBackend] = None,
        inference_backend: Optional[IInferenceBackend] = None,
    ) -> ReportService:
        """Wire every collaborator from application settings."""
        store_backend = backend or create_persistence_backend(settings.persistence)

        llm = settings.llm
        api_key = llm.api_key if llm.api_key != "no-key" else None
        client = LLMClient(inference_backend or RealTimeBackend(api_key=api_key), llm)

        enrichment = settings.enrichment
        evidence = (
            EvidenceIndex.from_json(enrichment.evidence_index_path)
            if enrichment.evidence_index_path
            else EvidenceIndex()
        )
        resolver = (
            CatalogLinkResolver.from_json(enrichment.catalog_path, amazon_tag=enrichment.amazon_tag)
            if enrichment.catalog_path
            else CatalogLinkResolver(amazon_tag=enrichment.amazon_tag)
        )
        enricher = Enricher(resolver, evidence, enrichment)

        cache = None
        if settings.safety.rules_path:
            cache = InteractionRulesCache(
                JsonFileRulesSource(settings.safety.rules_path),
                ttl_seconds=settings.safety.rules_cache_ttl_seconds,
            )

        pipeline = ReportPipeline(client, enricher=enricher, config=settings.generation, timeout=llm.timeout)
        return cls(
            SubmissionStore(store_backend),
            ReportStore(store_backend),
            pipeline,
            SafetyRuleEvaluator(cache),
        )

    async def generate_report(self, submission_id: str) -> StoredReport:
        """Generate, persist and return a report for ``submission_id``.

        Raises:
            SubmissionNotFoundError: If the submission does not exist.
            LLMClientError: If the model call fails at the transport level.
        """
        submission = self._submissions.get(submission_id)
        warnings = await self._safety.evaluate(SafetyProfile.from_submission(submission))
        if warnings:
            log.info("Submission %s has %d safety warnings", submission_id, len(warnings))

        report = await self._pipeline.generate(submission, safety_warnings=warnings)
        report_id = self._reports.save(report)
        return StoredReport(report_id=report_id, report=report)

    def get_report(self, report_id: str) -> FinalReport:
        return self._reports.load(report_id)
