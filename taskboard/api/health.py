# taskboard/api/health.py
"""
Health check endpoints.
"""
from datetime import datetime, timezone

from fastapi import APIRouter

from taskboard.core.config import settings
from taskboard.db import get_connection_error, is_connected

router = APIRouter(tags=["Health"])


@router.get("/healthz")
async def healthz():
    """Simple liveness check."""
    return {"ok": True, "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/api/health")
async def api_health():
    """API health check, including database connectivity."""
    body = {
        "status": "healthy",
        "version": settings.VERSION,
        "database": "connected" if is_connected() else "unavailable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if not is_connected() and get_connection_error():
        body["status"] = "degraded"
    return body
