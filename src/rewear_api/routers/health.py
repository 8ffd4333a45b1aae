"""Health check router for API server monitoring.

This module provides health check endpoints for monitoring the API server
status and database connectivity.
"""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from .. import __version__
from ..database import check_database_connection, get_database_info
from ..dependencies import AppSettings, DatabaseSession

SERVICE_NAME = "rewear-api"

router = APIRouter(
    prefix="/api/health",
    tags=["health"],
    responses={
        500: {"description": "Internal server error"},
        503: {"description": "Service unavailable"},
    },
)


def _timestamp() -> str:
    return datetime.utcnow().isoformat() + "Z"


@router.get(
    "",
    response_model=dict[str, Any],
    summary="Basic health check",
    description="Returns basic health status of the API server",
)
async def health_check() -> dict[str, Any]:
    """Basic health check endpoint.

    Example:
        {
            "status": "healthy",
            "timestamp": "2024-01-01T12:00:00Z",
            "service": "rewear-api",
            "version": "1.0.0"
        }
    """
    return {
        "status": "healthy",
        "timestamp": _timestamp(),
        "service": SERVICE_NAME,
        "version": __version__,
    }


@router.get(
    "/detailed",
    response_model=dict[str, Any],
    summary="Detailed health check with database connectivity",
    description="Returns detailed health status including database connectivity check",
)
async def detailed_health_check(session: DatabaseSession, settings: AppSettings):
    """Detailed health check with database connectivity.

    Responds 503 with the same body shape when the database does not answer.

    Args:
        session: Database session for connectivity testing
        settings: Application settings

    Returns:
        Detailed health status information
    """
    health_status: dict[str, Any] = {
        "status": "healthy",
        "timestamp": _timestamp(),
        "service": SERVICE_NAME,
        "version": __version__,
        "environment": settings.environment,
    }

    if check_database_connection(session):
        health_status["database"] = {"status": "connected", "info": get_database_info()}
        return health_status

    health_status["status"] = "unhealthy"
    health_status["database"] = {
        "status": "disconnected",
        "error": "Database connection failed",
    }
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=health_status)
