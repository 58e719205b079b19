"""Report persistence: store-assigned ids, lookup, and per-submission listing."""

from __future__ import annotations

import logging
import uuid

from concierge_ai.exceptions import ReportNotFoundError
from concierge_ai.models import FinalReport, StoredReport
from concierge_ai.persistence.protocols import REPORTS_PREFIX, IPersistenceBackend

log = logging.getLogger(__name__)


class ReportStore:
    """Persist ``FinalReport`` documents. Reports are never overwritten."""

    prefix = REPORTS_PREFIX

    def __init__(self, backend: IPersistenceBackend) -> None:
        self._backend = backend

    def _key(self, report_id: str) -> str:
        return f"{self.prefix}{report_id}"

    def save(self, report: FinalReport) -> str:
        """Persist ``report`` under a fresh id and return that id."""
        report_id = uuid.uuid4().hex
        self._backend.save(self._key(report_id), report.model_dump_json(indent=2))
        log.info(
            "Saved report %s for submission %s (failures=%d, tokens=%d)",
            report_id,
            report.submission_id,
            len(report.failures),
            report.total_usage.total_tokens,
        )
        return report_id

    def load(self, report_id: str) -> FinalReport:
        try:
            data = self._backend.load(self._key(report_id))
        except KeyError as e:
            raise ReportNotFoundError(report_id) from e
        return FinalReport.model_validate_json(data)

    def list_for_submission(self, submission_id: str) -> list[StoredReport]:
        """All reports for ``submission_id``, oldest first."""
        found: list[StoredReport] = []
        for key in self._backend.list_keys(self.prefix):
            report = FinalReport.model_validate_json(self._backend.load(key))
            if report.submission_id == submission_id:
                found.append(StoredReport(report_id=key[len(self.prefix):], report=report))
        return sorted(found, key=lambda stored: stored.report.created_at)
