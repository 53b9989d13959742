"""SQLAlchemy-backed analytics store.

Keeps search counters in the ``search_metrics`` table of any database
SQLAlchemy's async engine supports (Postgres in production, SQLite locally).
"""

import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.analytics.base import AnalyticsStore, SearchMetricRow
from app.core.exceptions import AnalyticsError
from app.models.search_metric import SearchMetric


class DatabaseAnalyticsStore(AnalyticsStore):
    """Search analytics stored in a relational table.

    Each operation runs in its own short session so a failed write never
    leaves a half-open transaction behind.
    """

    backend = "database"

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        super().__init__()
        self.session_factory = session_factory

    async def list_top(self, limit: int) -> List[SearchMetricRow]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(SearchMetric)
                    .order_by(SearchMetric.count.desc(), SearchMetric.created_at.asc())
                    .limit(limit)
                )
                return [self._to_row(m) for m in result.scalars().all()]
        except SQLAlchemyError as e:
            raise AnalyticsError(self.backend, str(e)) from e

    async def find_by_term(self, search_term: str) -> Optional[SearchMetricRow]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(SearchMetric).where(SearchMetric.search_term == search_term)
                )
                metric = result.scalar_one_or_none()
                return self._to_row(metric) if metric else None
        except SQLAlchemyError as e:
            raise AnalyticsError(self.backend, str(e)) from e

    async def create(
        self, search_term: str, movie_id: int, poster_url: Optional[str]
    ) -> SearchMetricRow:
        try:
            async with self.session_factory() as session:
                metric = SearchMetric(
                    search_term=search_term,
                    count=1,
                    movie_id=movie_id,
                    poster_url=poster_url,
                )
                session.add(metric)
                await session.commit()
                self.logger.debug("search_metric_created", search_term=search_term)
                return self._to_row(metric)
        except SQLAlchemyError as e:
            raise AnalyticsError(self.backend, str(e)) from e

    async def increment(self, row: SearchMetricRow) -> SearchMetricRow:
        try:
            async with self.session_factory() as session:
                metric = await session.get(SearchMetric, self._parse_id(row.row_id))
                if metric is None:
                    raise AnalyticsError(self.backend, f"row {row.row_id} vanished")
                metric.count = row.count + 1
                await session.commit()
                self.logger.debug(
                    "search_metric_incremented",
                    search_term=metric.search_term,
                    count=metric.count,
                )
                return self._to_row(metric)
        except SQLAlchemyError as e:
            raise AnalyticsError(self.backend, str(e)) from e

    def _parse_id(self, row_id: str) -> uuid.UUID:
        try:
            return uuid.UUID(row_id)
        except ValueError as e:
            raise AnalyticsError(self.backend, f"invalid row id {row_id!r}") from e

    @staticmethod
    def _to_row(metric: SearchMetric) -> SearchMetricRow:
        return SearchMetricRow(
            row_id=str(metric.id),
            search_term=metric.search_term,
            count=metric.count,
            movie_id=metric.movie_id,
            poster_url=metric.poster_url,
        )
