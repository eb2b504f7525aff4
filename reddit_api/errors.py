"""Exception hierarchy for Reddit API failures.

Callers can tell a network failure (``TransportError``) from an error page
(``StatusError``) from schema drift (``DeserializationError``).
"""

from typing import Any, List, Optional

import httpx


class RedditError(Exception):
    """Base class for all errors raised by this package."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class TransportError(RedditError):
    """The HTTP call itself failed (DNS, connection, TLS, timeout)."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class StatusError(RedditError):
    """The server answered with a non-success status. The raw response is kept."""

    def __init__(self, response: httpx.Response, message: Optional[str] = None):
        self.response = response
        self.status_code = response.status_code
        super().__init__(message or f"HTTP {response.status_code}: {response.text[:200]}")

    @property
    def body(self) -> str:
        return self.response.text


class DeserializationError(RedditError):
    """The body was not JSON, or did not match the expected shape."""

    def __init__(self, message: str, body: Optional[str] = None):
        super().__init__(message)
        self.body = body


class PreconditionError(RedditError, ValueError):
    """An operation was invoked without the configuration it requires."""


class APIError(RedditError):
    """Reddit accepted the request but reported errors in the JSON body."""

    def __init__(self, errors: List[Any]):
        self.errors = errors
        super().__init__(f"Reddit API returned errors: {errors}")
