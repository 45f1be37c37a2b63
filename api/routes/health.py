"""
Health check endpoint.

Used by the orchestrator's liveness/readiness probes. Does not touch the
order store or the queue.
"""
from fastapi import APIRouter, Depends

from core.settings import AppSettings, get_app_settings


router = APIRouter()


@router.get("/health")
async def health_check(settings: AppSettings = Depends(get_app_settings)):
    """Return service status and the deployed version (APP_VERSION)."""
    return {
        "status": "ok",
        "version": settings.service.app_version,
    }
