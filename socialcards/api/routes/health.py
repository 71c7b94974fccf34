"""
Health Routes
=============

FastAPI routes for health check endpoints.
"""

from fastapi import APIRouter

from socialcards.config.cache import check_cache_health
from socialcards.config.settings import get_settings
from socialcards.models.schemas import HealthStatus

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> HealthStatus:
    """Health check including the cache store."""
    settings = get_settings()
    components = await check_cache_health()
    all_healthy = all(components.values())

    return HealthStatus(
        status="healthy" if all_healthy else "unhealthy",
        version=settings.app_version,
        environment=settings.environment,
        components={name: "healthy" if ok else "unhealthy" for name, ok in components.items()},
    )
