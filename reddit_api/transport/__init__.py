"""Request resilience: retry policy and rate limiting."""

from reddit_api.transport.rate_limiter import RateLimiter
from reddit_api.transport.retry import ConsecutiveErrorTracker, with_exponential_backoff

__all__ = ["ConsecutiveErrorTracker", "RateLimiter", "with_exponential_backoff"]
