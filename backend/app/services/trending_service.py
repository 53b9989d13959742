"""Trending movies built from search analytics.

The analytics store ranks search terms, but several terms can lead to the
same movie. Trending keeps the best-ranked row per movie and shows a
bounded number of them.
"""

from typing import Iterable, List

import structlog

from app.analytics.base import SearchMetricRow
from app.config import settings
from app.schemas.search import TrendingEntry
from app.services.analytics_service import AnalyticsService

logger = structlog.get_logger(__name__)


def aggregate_trending(
    rows: Iterable[SearchMetricRow],
    limit: int = 5,
) -> List[TrendingEntry]:
    """Deduplicate count-ordered rows by movie and keep the first ``limit``.

    ``rows`` must already be ordered by count, highest first; the first row
    seen for a movie is its best-ranked one and wins.
    """
    entries: List[TrendingEntry] = []
    seen_movie_ids = set()

    for row in rows:
        if row.movie_id in seen_movie_ids:
            continue
        seen_movie_ids.add(row.movie_id)
        entries.append(
            TrendingEntry(
                rank=len(entries) + 1,
                search_term=row.search_term,
                count=row.count,
                movie_id=row.movie_id,
                poster_url=row.poster_url,
            )
        )
        if len(entries) >= limit:
            break

    return entries


class TrendingService:
    """Loads the trending list. Best-effort: failures yield an empty list."""

    def __init__(
        self,
        analytics: AnalyticsService,
        fetch_limit: int = settings.TRENDING_FETCH_LIMIT,
        display_limit: int = settings.TRENDING_DISPLAY_LIMIT,
    ):
        self.analytics = analytics
        self.fetch_limit = fetch_limit
        self.display_limit = display_limit
        self.logger = logger.bind(service="trending_service")

    async def get_trending(self) -> List[TrendingEntry]:
        try:
            rows = await self.analytics.get_top_searches(limit=self.fetch_limit)
        except Exception as e:
            self.logger.error("trending_fetch_failed", error=str(e))
            return []

        trending = aggregate_trending(rows, limit=self.display_limit)
        self.logger.info("trending_loaded", rows=len(rows), entries=len(trending))
        return trending
