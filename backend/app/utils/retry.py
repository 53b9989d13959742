"""Retry policy for outbound HTTP requests."""

import logging

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.config import settings

# tenacity logs through the stdlib logging API
logger = logging.getLogger(__name__)


# Only connection-level failures are retried. A non-2xx status is a definite
# answer and is surfaced straight away.
http_retry = retry(
    stop=stop_after_attempt(settings.HTTP_MAX_RETRIES),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
    retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
