"""Client-side throttling driven by Reddit's ``x-ratelimit-*`` headers."""

import asyncio
import logging
import time
from typing import Mapping, Optional

from reddit_api.config import RateLimitConfig

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SEC = 60.0


class RateLimiter:
    """
    Spaces requests and pauses when Reddit reports the quota is nearly spent.

    One limiter is shared by everything that talks through the same client,
    so its bookkeeping is guarded by a lock.
    """

    def __init__(self, config: RateLimitConfig):
        """
        Initialize the rate limiter with configuration.

        Args:
            config: Rate limiting configuration
        """
        self.config = config
        self.remaining_calls: Optional[float] = None
        self.reset_at: Optional[float] = None
        self.last_request_at = 0.0
        self.min_interval = 60.0 / config.max_requests_per_minute
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait until the next request may be sent."""
        async with self._lock:
            wait = self.min_interval - (time.monotonic() - self.last_request_at)
            if wait > 0:
                await asyncio.sleep(wait)

            if (
                self.remaining_calls is not None
                and self.reset_at is not None
                and self.remaining_calls < self.config.min_remaining_calls
            ):
                wait = self.reset_at - time.monotonic() + self.config.sleep_buffer_sec
                if wait > 0:
                    logger.info(
                        f"Only {self.remaining_calls:.0f} calls left in this window, "
                        f"sleeping {wait:.2f}s until reset"
                    )
                    await asyncio.sleep(wait)
                self._forget_window()

            self.last_request_at = time.monotonic()

    def observe(self, headers: Mapping[str, str]) -> None:
        """
        Record the quota Reddit reported on a response.

        Args:
            headers: Response headers (httpx headers are case-insensitive)
        """
        remaining = headers.get("x-ratelimit-remaining")
        reset = headers.get("x-ratelimit-reset")

        if remaining is not None:
            try:
                self.remaining_calls = float(remaining)
            except ValueError:
                logger.warning(f"Ignoring malformed x-ratelimit-remaining: {remaining!r}")

        if reset is not None:
            try:
                self.reset_at = time.monotonic() + float(reset)
            except ValueError:
                logger.warning(f"Ignoring malformed x-ratelimit-reset: {reset!r}")

    async def backoff(self, retry_after: Optional[str] = None) -> None:
        """
        Sleep after a 429 response.

        Args:
            retry_after: Value of the Retry-After header, if any
        """
        try:
            wait = float(retry_after) if retry_after else DEFAULT_RETRY_AFTER_SEC
        except ValueError:
            wait = DEFAULT_RETRY_AFTER_SEC
        wait += self.config.sleep_buffer_sec

        logger.warning(f"Rate limited (429), waiting {wait:.2f}s")
        await asyncio.sleep(wait)
        self._forget_window()

    def _forget_window(self) -> None:
        self.remaining_calls = None
        self.reset_at = None
