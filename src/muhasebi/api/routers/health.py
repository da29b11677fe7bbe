"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter

from muhasebi import __version__
from muhasebi.api.schemas.health import HealthResponse, HealthStatus

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Basic health check",
    description="Returns basic liveness status. No tenant header required.",
)
async def health_check() -> HealthResponse:
    """Basic liveness check endpoint.

    Returns 200 if the application is running, regardless of
    database health.
    """
    return HealthResponse(
        status=HealthStatus.HEALTHY,
        version=__version__,
        timestamp=datetime.now(UTC),
    )
