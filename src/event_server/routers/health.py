"""Health check router for event server monitoring.

This module provides health check endpoints for monitoring the server
status, database connectivity, and system information.
"""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, get_settings
from ..database import check_database_connection, get_database_info

SERVICE_NAME = "event-server"

router = APIRouter(
    prefix="/api/health",
    tags=["health"],
    responses={
        500: {"description": "Internal server error"},
        503: {"description": "Service unavailable"},
    },
)

# Connectivity check kept at the path clients already use
db_router = APIRouter(prefix="/api", tags=["health"])


def _timestamp() -> str:
    return datetime.utcnow().isoformat() + "Z"


@router.get(
    "",
    response_model=dict[str, Any],
    summary="Basic health check",
    description="Returns basic health status of the event server",
)
async def health_check() -> dict[str, Any]:
    """Basic health check endpoint.

    Returns:
        Dict[str, Any]: Health status information

    Example:
        {
            "status": "healthy",
            "timestamp": "2024-01-01T12:00:00Z",
            "service": "event-server",
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
async def detailed_health_check(
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Detailed health check with database connectivity.

    Args:
        settings: Application settings

    Returns:
        Dict[str, Any]: Detailed health status information

    Raises:
        HTTPException: 503 if the database is unreachable
    """
    if not check_database_connection():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unavailable - database connectivity issues",
        )

    return {
        "status": "healthy",
        "timestamp": _timestamp(),
        "service": SERVICE_NAME,
        "version": __version__,
        "environment": settings.environment,
        "database": {
            "status": "connected",
            "info": get_database_info(),
        },
    }


@router.get(
    "/ready",
    response_model=dict[str, Any],
    summary="Readiness probe",
    description="Kubernetes-style readiness probe for deployment health checks",
)
async def readiness_probe() -> dict[str, Any]:
    """Readiness probe for Kubernetes deployments.

    Raises:
        HTTPException: 503 if the database is unreachable
    """
    if not check_database_connection():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not ready - database unavailable",
        )

    return {"ready": True, "timestamp": _timestamp()}


@router.get(
    "/live",
    response_model=dict[str, Any],
    summary="Liveness probe",
    description="Kubernetes-style liveness probe for container health checks",
)
async def liveness_probe() -> dict[str, Any]:
    """Liveness probe for Kubernetes deployments."""
    return {"alive": True, "timestamp": _timestamp()}


@db_router.get(
    "/test-db-connection",
    summary="Database connection test",
    description="Runs a trivial query against the database",
)
async def test_db_connection() -> JSONResponse:
    """Report whether the database answers ``SELECT 1``.

    The cause of a failure is only logged.
    """
    if check_database_connection():
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={"message": "Database connection successful"},
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Database connection failed"},
    )
