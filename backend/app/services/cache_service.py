"""Redis cache for catalog-derived API responses.

Only data that is slow to change is cached (the genre list and the trending
strip). Redis is optional: when it is unreachable every read is a miss and
every write is a no-op, so endpoints fall through to their live source.
"""

import json
from typing import Any, Optional

import structlog
from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError

from app.config import settings

logger = structlog.get_logger(__name__)


class CacheService:
    """Thin async wrapper over a lazily created Redis connection."""

    def __init__(self, redis_url: str, socket_timeout: float = 2.0):
        self.redis_url = redis_url
        self.socket_timeout = socket_timeout
        self._redis: Optional[Redis] = None
        self.logger = logger.bind(service="cache_service")

    def _client(self) -> Redis:
        if self._redis is None:
            self._redis = from_url(
                self.redis_url,
                decode_responses=True,
                socket_connect_timeout=self.socket_timeout,
                socket_timeout=self.socket_timeout,
            )
        return self._redis

    async def get(self, key: str) -> Optional[str]:
        """Raw string value for ``key``, or None on a miss or Redis failure."""
        try:
            value = await self._client().get(key)
        except (RedisError, OSError) as e:
            self.logger.warning("cache_get_failed", key=key, error=str(e))
            return None

        self.logger.debug("cache_hit" if value else "cache_miss", key=key)
        return value

    async def set(self, key: str, value: str, ttl: int) -> bool:
        try:
            await self._client().set(key, value, ex=ttl)
        except (RedisError, OSError) as e:
            self.logger.warning("cache_set_failed", key=key, error=str(e))
            return False
        return True

    async def get_json(self, key: str) -> Optional[Any]:
        """Decoded JSON value for ``key``. A corrupt entry counts as a miss."""
        raw = await self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            self.logger.warning("cache_entry_corrupt", key=key)
            return None

    async def set_json(self, key: str, value: Any, ttl: int) -> bool:
        return await self.set(key, json.dumps(value), ttl)

    async def health_check(self) -> bool:
        try:
            return bool(await self._client().ping())
        except (RedisError, OSError) as e:
            self.logger.error("redis_health_check_failed", error=str(e))
            return False

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            self.logger.info("redis_connection_closed")


_cache_instance: Optional[CacheService] = None


def get_cache_service() -> CacheService:
    """Process-wide cache instance, created on first use."""
    global _cache_instance

    if _cache_instance is None:
        _cache_instance = CacheService(settings.REDIS_URL)
    return _cache_instance


async def get_cache() -> CacheService:
    """FastAPI dependency returning the shared cache."""
    return get_cache_service()
