"""Shared utilities for outbound HTTP: rate limiting and retries."""

from .rate_limiter import HostRateLimiter, TokenBucket
from .retry import http_retry


__all__ = [
    "HostRateLimiter",
    "TokenBucket",
    "http_retry",
]
