"""concierge-ai: personalized supplement reports behind structural quality gates.

Typical use::

    from concierge_ai import AppSettings, ReportService

    service = ReportService.from_settings(AppSettings())
    stored = await service.generate_report("submission-id")
    print(stored.report.markdown)
"""

from __future__ import annotations

from concierge_ai.core.config import AppSettings, GenerationConfig, LLMConfig
from concierge_ai.enrichment.enricher import Enricher
from concierge_ai.exceptions import (
    ConciergeError,
    LLMClientError,
    MalformedResponseError,
    NonRetryableError,
    RetryableError,
    SubmissionNotFoundError,
)
from concierge_ai.generation.pipeline import ReportPipeline
from concierge_ai.inference.client import LLMClient
from concierge_ai.models import FinalReport, SafetyWarning, StoredReport, Submission, TokenUsage
from concierge_ai.prompts.composer import compose_prompts
from concierge_ai.salvage.repairs import salvage_draft
from concierge_ai.services.report_service import ReportService
from concierge_ai.validation.engine import run_validators

__all__ = [
    "AppSettings",
    "ConciergeError",
    "Enricher",
    "FinalReport",
    "GenerationConfig",
    "LLMClient",
    "LLMClientError",
    "LLMConfig",
    "MalformedResponseError",
    "NonRetryableError",
    "ReportPipeline",
    "ReportService",
    "RetryableError",
    "SafetyWarning",
    "StoredReport",
    "Submission",
    "SubmissionNotFoundError",
    "TokenUsage",
    "compose_prompts",
    "run_validators",
    "salvage_draft",
]
