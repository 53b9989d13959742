"""Trending movies endpoint."""

from fastapi import APIRouter, Depends

from app.config import settings
from app.dependencies import get_trending_service
from app.schemas import ApiResponse, TrendingEntry
from app.services.cache_service import CacheService, get_cache
from app.services.trending_service import TrendingService

router = APIRouter()


@router.get("", response_model=ApiResponse)
async def get_trending(
    service: TrendingService = Depends(get_trending_service),
    cache: CacheService = Depends(get_cache),
):
    """Most searched terms, one per movie, best first.

    Best effort: an unreachable analytics store yields an empty list.
    Non-empty lists are cached for TRENDING_CACHE_TTL seconds.
    """
    cache_key = f"trending:limit={service.display_limit}"

    cached = await cache.get_json(cache_key)
    if cached:
        return ApiResponse(status="success", data=[TrendingEntry.model_validate(e) for e in cached])

    trending = await service.get_trending()

    # An empty list may just mean the store was down; don't pin it
    if trending:
        await cache.set_json(
            cache_key,
            [e.model_dump(mode="json") for e in trending],
            ttl=settings.TRENDING_CACHE_TTL,
        )

    return ApiResponse(status="success", data=trending)
