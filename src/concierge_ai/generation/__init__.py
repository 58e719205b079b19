"""Report generation: the retry controller around prompt, model and validators."""

from __future__ import annotations

from concierge_ai.generation.pipeline import (
    NEEDS_REVIEW_PREFIX,
    GenerationState,
    ReportPipeline,
    annotate_failures,
)

__all__ = ["NEEDS_REVIEW_PREFIX", "GenerationState", "ReportPipeline", "annotate_failures"]
