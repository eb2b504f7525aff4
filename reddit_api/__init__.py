"""Async client for the Reddit REST API."""

from reddit_api.client import Reddit, RedditBuilder
from reddit_api.config import Config, MonitoringConfig, RateLimitConfig, RetryConfig
from reddit_api.errors import (
    APIError,
    DeserializationError,
    PreconditionError,
    RedditError,
    StatusError,
    TransportError,
)
from reddit_api.me import Me
from reddit_api.options import FeedOptions, TimePeriod
from reddit_api.pagination import AfterState, End, ListingStream, Next, Start
from reddit_api.subreddit import Subreddit, Subreddits
from reddit_api.user import User

__version__ = "0.1.0"

__all__ = [
    "APIError",
    "AfterState",
    "Config",
    "DeserializationError",
    "End",
    "FeedOptions",
    "ListingStream",
    "Me",
    "MonitoringConfig",
    "Next",
    "PreconditionError",
    "RateLimitConfig",
    "Reddit",
    "RedditBuilder",
    "RedditError",
    "RetryConfig",
    "Start",
    "StatusError",
    "Subreddit",
    "Subreddits",
    "TimePeriod",
    "TransportError",
    "User",
]
