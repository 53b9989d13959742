"""Genre list endpoint."""

from fastapi import APIRouter, Depends

from app.config import settings
from app.dependencies import get_genre_service
from app.schemas import ApiResponse, Genre
from app.services.cache_service import CacheService, get_cache
from app.services.genre_service import GenreService

router = APIRouter()

GENRES_CACHE_KEY = "genres:movie"


@router.get("", response_model=ApiResponse)
async def list_genres(
    genres: GenreService = Depends(get_genre_service),
    cache: CacheService = Depends(get_cache),
):
    """Movie genre list. Cached in Redis for a day; empty if the catalog is unreachable."""
    cached = await cache.get_json(GENRES_CACHE_KEY)
    if cached:
        return ApiResponse(status="success", data=[Genre.model_validate(g) for g in cached])

    await genres.load()
    data = genres.genres

    if data:
        await cache.set_json(
            GENRES_CACHE_KEY,
            [g.model_dump() for g in data],
            ttl=settings.GENRE_CACHE_TTL,
        )

    return ApiResponse(status="success", data=data)
