"""Health check endpoints.

Provides health status for Cloud Run probes and monitoring.
"""

from fastapi import APIRouter

from storefront import __version__
from storefront.config import settings
from storefront.infra.database import verify_db_connection
from storefront.infra.logging import get_logger
from storefront.schemas.common import HealthResponse

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Basic health check.

    Returns 200 if service is running.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.environment,
        checks={},
    )


@router.get("/health/ready", response_model=HealthResponse)
async def health_ready() -> HealthResponse:
    """Readiness check.

    Verifies the database is reachable. Used by Cloud Run to determine if
    the service can accept traffic.
    """
    checks = {"database": await verify_db_connection()}
    all_healthy = all(checks.values())
    if not all_healthy:
        logger.warning("Readiness check degraded", checks=checks)

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        version=__version__,
        environment=settings.environment,
        checks=checks,
    )
