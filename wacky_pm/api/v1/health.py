"""
Health check endpoints.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends

from wacky_pm.api.deps import get_session_manager
from wacky_pm.core.config import settings
from wacky_pm.services.session_manager import SessionManager

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """
    Basic health check endpoint.
    Returns application status.
    """
    return {
        "status": "healthy",
        "app": settings.app_name,
        "environment": settings.app_env,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/ready")
async def readiness_check(
    session_manager: SessionManager = Depends(get_session_manager),
) -> dict[str, Any]:
    """
    Readiness check endpoint.
    Reports the number of open brainstorming sessions.
    """
    sessions = await session_manager.list_sessions(limit=10_000)
    checks = {
        "app": True,
        "session_store": True,
    }

    return {
        "status": "ready" if all(checks.values()) else "not_ready",
        "checks": checks,
        "open_sessions": len(sessions),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """
    Liveness check endpoint.
    Simple check that the application is running.
    """
    return {"status": "alive"}
