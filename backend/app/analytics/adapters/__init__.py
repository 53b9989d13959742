"""Analytics store adapters."""

from .appwrite import AppwriteAnalyticsStore
from .database import DatabaseAnalyticsStore


__all__ = ["AppwriteAnalyticsStore", "DatabaseAnalyticsStore"]
