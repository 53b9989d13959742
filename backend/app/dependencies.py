"""FastAPI dependency injection providers.

Clients and services are process-wide singletons: the genre catalog is
loaded once and shared, and the HTTP clients keep their connection pools
between requests. ``shutdown_dependencies`` closes them on app shutdown.
"""

from typing import Optional

from app.analytics import AnalyticsStore, create_analytics_store
from app.clients.catalog import CatalogClient
from app.services.analytics_service import AnalyticsService
from app.services.genre_service import GenreService
from app.services.trending_service import TrendingService

_catalog_client: Optional[CatalogClient] = None
_analytics_store: Optional[AnalyticsStore] = None
_genre_service: Optional[GenreService] = None


def get_catalog_client() -> CatalogClient:
    global _catalog_client

    if _catalog_client is None:
        _catalog_client = CatalogClient()
    return _catalog_client


def get_analytics_store() -> AnalyticsStore:
    global _analytics_store

    if _analytics_store is None:
        _analytics_store = create_analytics_store()
    return _analytics_store


def get_analytics_service() -> AnalyticsService:
    return AnalyticsService(get_analytics_store())


def get_trending_service() -> TrendingService:
    return TrendingService(get_analytics_service())


def get_genre_service() -> GenreService:
    global _genre_service

    if _genre_service is None:
        _genre_service = GenreService(get_catalog_client())
    return _genre_service


async def shutdown_dependencies() -> None:
    """Close the shared HTTP clients and forget every singleton."""
    global _catalog_client, _analytics_store, _genre_service

    if _catalog_client is not None:
        await _catalog_client.aclose()
    if _analytics_store is not None:
        await _analytics_store.aclose()

    _catalog_client = None
    _analytics_store = None
    _genre_service = None
