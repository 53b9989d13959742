"""Base analytics store interface.

Every search-analytics backend implements ``AnalyticsStore``. The four
primitives mirror what the store supports remotely: ranked read, exact
lookup, create and increment. Increment-or-create logic lives one level up
in ``AnalyticsService`` so it is shared by all backends.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

import structlog


@dataclass(frozen=True)
class SearchMetricRow:
    """Normalized analytics row returned by all stores."""

    row_id: str  # Store-specific row identifier
    search_term: str
    count: int
    movie_id: int
    poster_url: Optional[str] = None

    def __post_init__(self):
        """Validate data after initialization."""
        if not self.search_term:
            raise ValueError("search_term is required")
        if self.count < 1:
            raise ValueError("count must be at least 1")


class AnalyticsStore(ABC):
    """Abstract base class for search-analytics backends."""

    backend: str = ""  # Must be overridden in subclass (e.g. "appwrite")

    def __init__(self):
        self.logger = structlog.get_logger(analytics_backend=self.backend)

    @abstractmethod
    async def list_top(self, limit: int) -> List[SearchMetricRow]:
        """Return up to ``limit`` rows ordered by count, highest first.

        Raises:
            AnalyticsError: If the store cannot be read
        """

    @abstractmethod
    async def find_by_term(self, search_term: str) -> Optional[SearchMetricRow]:
        """Return the row for an exact search term, or None."""

    @abstractmethod
    async def create(
        self, search_term: str, movie_id: int, poster_url: Optional[str]
    ) -> SearchMetricRow:
        """Create a new row with ``count=1``."""

    @abstractmethod
    async def increment(self, row: SearchMetricRow) -> SearchMetricRow:
        """Increase ``row``'s count by one and return the updated row."""

    async def health_check(self) -> bool:
        """Check that the store can be read.

        Returns:
            True if healthy, False otherwise
        """
        try:
            await self.list_top(1)
            return True
        except Exception as e:
            self.logger.error("health_check_failed", error=str(e))
            return False

    async def aclose(self) -> None:
        """Release any resources held by the store."""
