"""FastAPI application with lifespan management."""

from __future__ import annotations

import importlib.metadata
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from concierge_ai.api.middleware.error_handler import register_error_handlers
from concierge_ai.api.routes import health, reports
from concierge_ai.core.config import APIConfig, AppSettings
from concierge_ai.core.startup_checks import validate_settings
from concierge_ai.hooks import setup_logging
from concierge_ai.prompts import configure as configure_prompts
from concierge_ai.services.report_service import ReportService


def _get_version() -> str:
    """Read package version from installed metadata, with dev fallback."""
    try:
        return importlib.metadata.version("concierge-ai")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0-dev"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup/shutdown lifecycle.

    A ``report_service`` already placed on ``app.state`` (e.g. by tests) is kept.
    """
    if getattr(app.state, "report_service", None) is None:
        settings = AppSettings()
        validate_settings(settings)
        setup_logging(settings.observability)
        configure_prompts()
        app.state.settings = settings
        app.state.report_service = ReportService.from_settings(settings)
    yield


def create_app(report_service: Optional[ReportService] = None) -> FastAPI:
    api_config = APIConfig()
    application = FastAPI(
        title=api_config.title,
        description=api_config.description,
        version=_get_version(),
        lifespan=lifespan,
    )
    application.state.report_service = report_service
    register_error_handlers(application)
    application.include_router(health.router)
    application.include_router(reports.router, prefix="/api")
    return application


app = create_app()
