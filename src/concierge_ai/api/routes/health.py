"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe: always 200 while the process is up."""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request) -> dict[str, str]:
    """Readiness probe: the report service has been wired."""
    if getattr(request.app.state, "report_service", None) is None:
        return {"status": "starting"}
    return {"status": "ready"}
