"""Search analytics and trending Pydantic schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class TrendingEntry(BaseModel):
    """A trending movie derived from search popularity counters."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    rank: int
    search_term: str
    count: int
    movie_id: int
    poster_url: Optional[str] = None
