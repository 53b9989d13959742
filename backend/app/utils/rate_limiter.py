"""Per-host token-bucket rate limiting for outbound API calls."""

import asyncio
import time
from typing import Dict, Optional


class TokenBucket:
    """Starts full, refills at ``rate`` tokens per second up to ``capacity``."""

    def __init__(self, rate: float, capacity: float):
        self.rate = rate
        self.capacity = capacity
        self.tokens = capacity
        self.updated_at = time.monotonic()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = time.monotonic()
        self.tokens = min(self.capacity, self.tokens + (now - self.updated_at) * self.rate)
        self.updated_at = now

    async def acquire(self, tokens: float = 1.0) -> None:
        """Take ``tokens``, sleeping until enough have accumulated."""
        async with self._lock:
            self._refill()
            while self.tokens < tokens:
                await asyncio.sleep((tokens - self.tokens) / self.rate)
                self._refill()
            self.tokens -= tokens


class HostRateLimiter:
    """One bucket per upstream host.

    A burst of catalog lookups never starves analytics writes, and vice versa.
    """

    # Requests per minute
    HOST_LIMITS_RPM: Dict[str, int] = {
        # TMDB tolerates about 50 req/s; stay well under it
        "api.themoviedb.org": 1200,
        "cloud.appwrite.io": 600,
    }
    DEFAULT_RPM = 600

    def __init__(self, limits_rpm: Optional[Dict[str, int]] = None):
        self.limits_rpm = {**self.HOST_LIMITS_RPM, **(limits_rpm or {})}
        self._buckets: Dict[str, TokenBucket] = {}

    def bucket_for(self, host: str) -> TokenBucket:
        bucket = self._buckets.get(host)
        if bucket is None:
            rpm = self.limits_rpm.get(host, self.DEFAULT_RPM)
            # Bursts up to a tenth of the per-minute budget
            bucket = TokenBucket(rate=rpm / 60.0, capacity=max(2.0, rpm / 10.0))
            self._buckets[host] = bucket
        return bucket

    async def acquire(self, host: str) -> None:
        await self.bucket_for(host).acquire()
