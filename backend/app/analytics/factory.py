"""Factory for creating the configured analytics store."""

from typing import Dict, Optional, Type

import structlog

from app.analytics.adapters import AppwriteAnalyticsStore, DatabaseAnalyticsStore
from app.analytics.base import AnalyticsStore
from app.config import settings


logger = structlog.get_logger(__name__)

STORE_REGISTRY: Dict[str, Type[AnalyticsStore]] = {
    AppwriteAnalyticsStore.backend: AppwriteAnalyticsStore,
    DatabaseAnalyticsStore.backend: DatabaseAnalyticsStore,
}


def create_analytics_store(backend: Optional[str] = None) -> AnalyticsStore:
    """Create the analytics store named by ``backend`` (or ``ANALYTICS_BACKEND``).

    Raises:
        ValueError: If the backend name is not registered
    """
    backend = (backend or settings.ANALYTICS_BACKEND).lower()
    store_class = STORE_REGISTRY.get(backend)
    if store_class is None:
        raise ValueError(
            f"Unknown analytics backend '{backend}'; expected one of {sorted(STORE_REGISTRY)}"
        )

    if store_class is DatabaseAnalyticsStore:
        from app.db.session import async_session_factory

        store: AnalyticsStore = DatabaseAnalyticsStore(async_session_factory)
    else:
        store = store_class()

    logger.info("analytics_store_created", backend=backend)
    return store
