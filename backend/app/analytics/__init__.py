"""Search analytics stores: ranked search-term counters behind one interface."""

from .base import AnalyticsStore, SearchMetricRow
from .factory import create_analytics_store


__all__ = ["AnalyticsStore", "SearchMetricRow", "create_analytics_store"]
