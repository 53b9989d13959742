"""SQLAlchemy models for MovieScout.

All models are imported here so metadata discovery sees every table.
"""

from app.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from app.models.search_metric import SearchMetric

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "SearchMetric",
]
