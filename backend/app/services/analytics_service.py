"""Search analytics service: records successful searches and reads rankings."""

from typing import List, Optional

import structlog

from app.analytics.base import AnalyticsStore, SearchMetricRow
from app.schemas.movie import Movie

logger = structlog.get_logger(__name__)


class AnalyticsService:
    """Increment-or-create logic on top of any ``AnalyticsStore``.

    Writes are best-effort: a broken analytics backend must never affect
    the search results the user sees, so ``record_search`` logs and
    swallows store failures.
    """

    def __init__(self, store: AnalyticsStore):
        """Initialize analytics service.

        Args:
            store: Backend holding the search-term counters
        """
        self.store = store
        self.logger = logger.bind(service="analytics_service", backend=store.backend)

    async def record_search(self, search_term: str, movie: Movie) -> Optional[SearchMetricRow]:
        """Count a search that produced results.

        Increments the term's counter if a row exists, otherwise creates one
        pointing at ``movie`` (the first result).

        Args:
            search_term: The query as searched
            movie: First movie the query returned

        Returns:
            The updated or created row, or None if nothing was recorded
        """
        term = search_term.strip()
        if not term:
            return None

        try:
            existing = await self.store.find_by_term(term)

            if existing:
                row = await self.store.increment(existing)
                self.logger.debug("search_term_incremented", search_term=term, count=row.count)
            else:
                poster_url = movie.poster_url if movie.poster_path else None
                row = await self.store.create(term, movie.id, poster_url)
                self.logger.debug("search_term_created", search_term=term, movie_id=movie.id)

            return row

        except Exception as e:
            # Analytics failures never reach the user
            self.logger.error(
                "search_tracking_failed",
                search_term=term,
                error=str(e),
            )
            return None

    async def get_top_searches(self, limit: int = 10) -> List[SearchMetricRow]:
        """Return up to ``limit`` rows ordered by count, highest first.

        Raises:
            AnalyticsError: If the store cannot be read
        """
        self.logger.info("fetching_top_searches", limit=limit)
        rows = await self.store.list_top(limit)
        self.logger.info("top_searches_fetched", count=len(rows))
        return rows
