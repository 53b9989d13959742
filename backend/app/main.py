"""MovieScout Backend -- FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.router import api_v1_router
from app.config import settings
from app.dependencies import get_genre_service, shutdown_dependencies
from app.services.cache_service import get_cache_service

logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


async def _create_analytics_tables() -> None:
    """The database analytics backend keeps its counters in a local table."""
    from app.db.session import engine
    from app.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _startup() -> None:
    logger.info(
        f"Starting MovieScout API ({settings.ENVIRONMENT}, analytics={settings.ANALYTICS_BACKEND})"
    )

    if settings.ANALYTICS_BACKEND == "database":
        try:
            await _create_analytics_tables()
        except Exception as e:
            logger.error(f"Analytics table setup failed: {e}", exc_info=True)

    # Shared by every request; a failed load is retried lazily
    genre_count = len(await get_genre_service().load())
    if genre_count:
        logger.info(f"Genre catalog ready ({genre_count} genres)")
    else:
        logger.warning("Genre catalog unavailable, genre names stay empty until it loads")

    if not await get_cache_service().health_check():
        logger.warning("Redis unreachable, serving without a response cache")


async def _shutdown() -> None:
    logger.info("Stopping MovieScout API")
    await shutdown_dependencies()
    await get_cache_service().close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await _startup()
    yield
    await _shutdown()


app = FastAPI(
    title="MovieScout API",
    description="Movie search, discovery and trending API",
    version=API_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:5173"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {
        "name": "MovieScout API",
        "version": API_VERSION,
        "health": "/api/v1/health",
        "docs": "/docs" if settings.DEBUG else None,
    }
