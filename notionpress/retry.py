"""Exponential backoff for flaky network calls."""

import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_SECONDS = 1.0
MAX_DELAY_SECONDS = 30.0
RETRYABLE_STATUS_CODES = frozenset({408, 409, 425, 429, 500, 502, 503, 504})


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY_SECONDS,
    label: str = "operation",
    retryable: Callable[[Exception], bool] | None = None,
) -> T:
    """Await `fn()` until it succeeds or `max_attempts` is used up.

    Args:
        fn: Zero-argument coroutine factory, called once per attempt.
        max_attempts: Total attempts including the first one.
        base_delay: Seconds before the first retry; doubles each attempt.
        label: Used in log messages.
        retryable: Optional predicate; errors it rejects are raised immediately.

    Raises:
        The last exception once all attempts have failed.
    """
    max_attempts = max(max_attempts, 1)
    attempt = 0
    while True:
        try:
            return await fn()
        except Exception as e:
            if retryable is not None and not retryable(e):
                logger.error(f"{label}: failed with non-retryable error: {e}")
                raise
            attempt += 1
            if attempt >= max_attempts:
                logger.error(f"{label}: failed after {max_attempts} attempts. Last error: {e}")
                raise
            delay = min(base_delay * (2 ** (attempt - 1)), MAX_DELAY_SECONDS)
            wait_time = delay + random.uniform(0, delay * 0.5)
            logger.warning(f"{label}: attempt {attempt}/{max_attempts} failed ({e}), retrying in {wait_time:.1f}s")
            await asyncio.sleep(wait_time)


def is_retryable_http_error(error: Exception) -> bool:
    """Retry transport failures and throttling/server statuses, not client errors."""
    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        return status_code in RETRYABLE_STATUS_CODES
    return True
