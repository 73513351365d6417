"""
Health check endpoints.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from budgetvault.core.config import settings
from budgetvault.core.database import is_database_healthy

router = APIRouter()


@router.get("")
async def health_check() -> Dict[str, str]:
    """
    Basic health check endpoint.

    Returns:
        Dict[str, str]: Health status and timestamp.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@router.get("/ready")
async def readiness_check() -> Dict[str, Any]:
    """
    Readiness check endpoint that verifies the database is reachable.

    Returns:
        Dict[str, Any]: Readiness status.
    """
    db_healthy = await is_database_healthy()

    checks = {
        "database": "healthy" if db_healthy else "unhealthy",
    }

    all_healthy = all(status == "healthy" for status in checks.values())

    return {
        "status": "ready" if all_healthy else "not_ready",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }
