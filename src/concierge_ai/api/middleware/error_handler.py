"""Global exception handlers mapping domain exceptions to HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from concierge_ai.exceptions import (
    ConciergeError,
    LLMClientError,
    ReportNotFoundError,
    SubmissionNotFoundError,
)

log = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register exception-to-HTTP-status mappings."""

    @app.exception_handler(SubmissionNotFoundError)
    async def handle_submission_not_found(request: Request, exc: SubmissionNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc), "type": "submission_not_found"})

    @app.exception_handler(ReportNotFoundError)
    async def handle_report_not_found(request: Request, exc: ReportNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc), "type": "report_not_found"})

    @app.exception_handler(LLMClientError)
    async def handle_llm_error(request: Request, exc: LLMClientError) -> JSONResponse:
        log.error("Model call failed for %s: %s", request.url.path, exc)
        return JSONResponse(status_code=502, content={"error": str(exc), "type": "model_error"})

    @app.exception_handler(ConciergeError)
    async def handle_generic_error(request: Request, exc: ConciergeError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": str(exc), "type": "concierge_error"})
