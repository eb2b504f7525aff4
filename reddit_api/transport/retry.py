"""Opt-in retry policy for the single-request primitive."""

import asyncio
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar, cast

from reddit_api.errors import StatusError, TransportError
from reddit_api.transport.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")
AsyncFunc = Callable[..., Awaitable[T]]


class ConsecutiveErrorTracker:
    """Counts back-to-back server errors so a failing backend is abandoned quickly."""

    def __init__(self, threshold: int, metrics=None):
        """
        Initialize the error tracker.

        Args:
            threshold: Number of consecutive 5xx errors after which retrying stops
            metrics: Optional Prometheus exporter
        """
        self.threshold = threshold
        self.consecutive_errors = 0
        self.metrics = metrics

    def record_error(self) -> None:
        self.consecutive_errors += 1
        logger.warning(f"Consecutive server errors: {self.consecutive_errors}/{self.threshold}")
        if self.metrics:
            self.metrics.record_api_error("5xx")

    def record_success(self) -> None:
        if self.consecutive_errors > 0:
            logger.info(f"Resetting consecutive server error count (was {self.consecutive_errors})")
            self.consecutive_errors = 0

    def should_abort(self) -> bool:
        return self.consecutive_errors >= self.threshold


def with_exponential_backoff(
    max_retries: int = 0,
    initial_backoff: float = 1.0,
    max_backoff: float = 32.0,
    backoff_factor: float = 2.0,
    error_tracker: Optional[ConsecutiveErrorTracker] = None,
    rate_limiter: Optional[RateLimiter] = None,
) -> Callable[[AsyncFunc[T]], AsyncFunc[T]]:
    """
    Decorator retrying an async request with exponential backoff.

    Transport errors and 5xx responses are retried up to ``max_retries``
    times. 4xx responses are never retried, except 429 when a rate limiter
    is supplied: the limiter waits out ``Retry-After`` and the call is
    repeated without consuming a retry.

    Args:
        max_retries: Maximum number of retry attempts (0 disables retrying)
        initial_backoff: Initial backoff time in seconds
        max_backoff: Maximum backoff time in seconds
        backoff_factor: Multiplier for backoff time between retries
        error_tracker: Optional tracker for consecutive 5xx errors
        rate_limiter: Optional rate limiter for handling 429 responses

    Returns:
        Decorator function
    """
    def decorator(func: AsyncFunc[T]) -> AsyncFunc[T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            retries = 0
            backoff = initial_backoff

            while True:
                try:
                    result = await func(*args, **kwargs)
                except StatusError as e:
                    if e.status_code == 429 and rate_limiter:
                        await rate_limiter.backoff(e.response.headers.get("Retry-After"))
                        continue

                    if e.status_code < 500:
                        raise

                    if error_tracker:
                        error_tracker.record_error()
                        if error_tracker.should_abort():
                            logger.critical(
                                f"Giving up after {error_tracker.consecutive_errors} "
                                f"consecutive server errors"
                            )
                            raise
                    failure: Exception = e
                except TransportError as e:
                    failure = e
                else:
                    if error_tracker:
                        error_tracker.record_success()
                    return result

                if retries >= max_retries:
                    if max_retries:
                        logger.error(f"Max retries ({max_retries}) exceeded: {failure}")
                    raise failure

                logger.warning(
                    f"Request failed: {failure}. "
                    f"Retrying in {backoff:.2f}s ({retries + 1}/{max_retries})"
                )
                await asyncio.sleep(backoff)
                retries += 1
                backoff = min(backoff * backoff_factor, max_backoff)

        return cast(AsyncFunc[T], wrapper)
    return decorator
