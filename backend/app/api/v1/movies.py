"""Movie search, discover and detail endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Path, Query

from app.clients.catalog import CatalogClient
from app.core.exceptions import CatalogError, NotFoundError
from app.dependencies import get_analytics_service, get_catalog_client, get_genre_service
from app.schemas import ApiResponse, MovieResponse, PaginationMeta
from app.services.analytics_service import AnalyticsService
from app.services.genre_service import GenreService
from app.state.pagination import PageWindow

router = APIRouter()


@router.get("", response_model=ApiResponse)
async def list_movies(
    background_tasks: BackgroundTasks,
    q: str = Query("", description="Search query; empty lists popular movies"),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    catalog: CatalogClient = Depends(get_catalog_client),
    analytics: AnalyticsService = Depends(get_analytics_service),
    genres: GenreService = Depends(get_genre_service),
):
    """Search the catalog, or discover popular movies when ``q`` is empty.

    A search that returns results is counted towards trending. The write
    runs after the response is sent and never affects it.
    """
    try:
        result = await catalog.fetch_movies(q, page=page)
    except CatalogError as e:
        raise HTTPException(status_code=502, detail=e.user_message)

    term = q.strip()
    if term and result.results:
        background_tasks.add_task(analytics.record_search, term, result.results[0])

    await genres.load()
    window = PageWindow.build(result.page, result.total_pages)

    return ApiResponse(
        status="success",
        data=[MovieResponse.from_movie(m, genres.resolve(m.genre_ids)) for m in result.results],
        meta=PaginationMeta(
            page=window.current_page,
            total_pages=window.total_pages,
            visible_pages=window.pages,
            has_previous=window.has_previous,
            has_next=window.has_next,
        ),
    )


@router.get("/{movie_id}", response_model=ApiResponse)
async def get_movie(
    movie_id: int = Path(..., ge=1),
    catalog: CatalogClient = Depends(get_catalog_client),
    genres: GenreService = Depends(get_genre_service),
):
    """Full movie record, with genres flattened to ids and resolved to names."""
    try:
        movie = await catalog.get_movie(movie_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except CatalogError as e:
        raise HTTPException(status_code=502, detail=e.user_message)

    await genres.load()
    return ApiResponse(
        status="success",
        data=MovieResponse.from_movie(movie, genres.resolve(movie.genre_ids)),
    )
