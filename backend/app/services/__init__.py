"""Services module for business logic and data operations.

Services sit between the external clients (catalog, analytics store,
Redis) and the consumers (HTTP API, search controller).
"""

from app.services.analytics_service import AnalyticsService
from app.services.genre_service import GenreService, resolve_genre_names, summarize_genres
from app.services.trending_service import TrendingService, aggregate_trending

__all__ = [
    "AnalyticsService",
    "GenreService",
    "resolve_genre_names",
    "summarize_genres",
    "TrendingService",
    "aggregate_trending",
]
