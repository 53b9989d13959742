"""Search term counters backing the trending list."""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class SearchMetric(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """One row per distinct search term.

    Created on the first search for a term that returned results and
    incremented on every repeat. The movie and poster are those of the
    first result the term produced when the row was created.
    """

    __tablename__ = "search_metrics"

    search_term: Mapped[str] = mapped_column(
        String(200),
        unique=True,
        index=True,
        nullable=False,
        comment="Search term as typed (dedup key)"
    )

    count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        index=True,
        comment="How many successful searches used this term"
    )

    movie_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Catalog id of the first result"
    )
    poster_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        comment="Poster URL of the first result"
    )

    def __repr__(self) -> str:
        return f"<SearchMetric(id={self.id}, search_term='{self.search_term}', count={self.count})>"
