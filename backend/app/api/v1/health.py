"""Health check endpoint."""

from fastapi import APIRouter, Depends

from app.analytics import AnalyticsStore
from app.clients.catalog import CatalogClient
from app.dependencies import get_analytics_store, get_catalog_client
from app.schemas import HealthCheckResponse
from app.services.cache_service import CacheService, get_cache

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    catalog: CatalogClient = Depends(get_catalog_client),
    store: AnalyticsStore = Depends(get_analytics_store),
    cache: CacheService = Depends(get_cache),
):
    """Return service health status.

    Checks:
    - Catalog credentials are configured
    - Analytics store can be read
    - Redis (cache) answers a ping

    The catalog and analytics are required; Redis is optional.
    """
    catalog_status = "ok" if catalog.configured else "error: TMDB_API_KEY not set"
    analytics_status = "ok" if await store.health_check() else "error: store unreachable"
    redis_status = "ok" if await cache.health_check() else "error: ping failed"

    services = {
        "catalog": catalog_status,
        "analytics": analytics_status,
        "redis": redis_status,
    }

    overall_status = "ok" if catalog_status == analytics_status == "ok" else "degraded"

    return HealthCheckResponse(
        status=overall_status,
        catalog=catalog_status,
        analytics=analytics_status,
        redis=redis_status,
        services=services,
    )
