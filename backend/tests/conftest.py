"""Pytest configuration and shared fixtures."""

from typing import Callable, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.clients.catalog import CatalogClient
from app.models import Base
from app.schemas.movie import Genre, Movie, MoviePage

CATALOG_BASE_URL = "https://catalog.test/3"


@pytest.fixture
def anyio_backend():
    """Use asyncio as the async backend for tests."""
    return "asyncio"


def make_movie(movie_id: int, title: Optional[str] = None, **overrides) -> Movie:
    data = {
        "id": movie_id,
        "title": title or f"Movie {movie_id}",
        "overview": "An overview.",
        "poster_path": f"/poster{movie_id}.jpg",
        "release_date": "1999-03-31",
        "original_language": "en",
        "vote_average": 8.2,
        "vote_count": 1200,
        "popularity": 64.5,
        "genre_ids": [28, 878],
    }
    data.update(overrides)
    return Movie.model_validate(data)


def make_page(movies: List[Movie], total_pages: int = 1, page: int = 1) -> MoviePage:
    return MoviePage(page=page, results=movies, total_pages=total_pages)


def movie_payload(movie_id: int, **overrides) -> Dict:
    return make_movie(movie_id, **overrides).model_dump(mode="json")


GENRES = [
    Genre(id=28, name="Action"),
    Genre(id=18, name="Drama"),
    Genre(id=878, name="Science Fiction"),
]


@pytest.fixture
def genres() -> List[Genre]:
    return list(GENRES)


@pytest.fixture
def catalog_factory() -> Callable[[Callable[[httpx.Request], httpx.Response]], CatalogClient]:
    """Build a CatalogClient whose HTTP calls are answered by ``handler``."""

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> CatalogClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return CatalogClient(
            api_key="test-token",
            base_url=CATALOG_BASE_URL,
            http_client=http_client,
        )

    return _factory


@pytest_asyncio.fixture
async def session_factory():
    """In-memory SQLite database for the analytics tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()
