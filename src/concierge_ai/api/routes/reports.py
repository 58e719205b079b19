"""Report generation and lookup endpoints."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from concierge_ai.models import FinalReport, SafetyWarning, TokenUsage
from concierge_ai.services.report_service import ReportService

router = APIRouter(tags=["reports"])


class GenerateReportRequest(BaseModel):
    """Request to generate a report for a stored submission."""

    submission_id: str = Field(min_length=1)


class ReportResponse(BaseModel):
    """A generated or stored report."""

    report_id: str
    submission_id: str
    markdown: str
    needs_review: bool
    failures: list[str] = Field(default_factory=list)
    model: str = ""
    attempts: int = 0
    salvaged: bool = False
    usage: TokenUsage
    safety_warnings: list[SafetyWarning] = Field(default_factory=list)
    created_at: datetime

    @classmethod
    def from_report(cls, report_id: str, report: FinalReport) -> ReportResponse:
        return cls(
            report_id=report_id,
            submission_id=report.submission_id,
            markdown=report.markdown,
            needs_review=report.needs_review,
            failures=report.failures,
            model=report.model,
            attempts=report.attempts,
            salvaged=report.salvaged,
            usage=report.total_usage,
            safety_warnings=report.safety_warnings,
            created_at=report.created_at,
        )


def _service(req: Request) -> ReportService:
    return req.app.state.report_service


@router.post("/reports", response_model=ReportResponse, status_code=201)
async def generate_report(request: GenerateReportRequest, req: Request) -> ReportResponse:
    """Generate and persist a report. Quality failures still return 201 with ``needs_review``."""
    stored = await _service(req).generate_report(request.submission_id)
    return ReportResponse.from_report(stored.report_id, stored.report)


@router.get("/reports/{report_id}", response_model=ReportResponse)
async def get_report(report_id: str, req: Request) -> ReportResponse:
    report = _service(req).get_report(report_id)
    return ReportResponse.from_report(report_id, report)
