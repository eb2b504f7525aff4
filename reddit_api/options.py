"""Query options shared by listing endpoints."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from reddit_api.errors import PreconditionError


class TimePeriod(str, Enum):
    """Time window for ``top``/``controversial`` listings (the ``t`` parameter)."""

    NOW = "hour"
    TODAY = "day"
    THIS_WEEK = "week"
    THIS_MONTH = "month"
    THIS_YEAR = "year"
    ALL_TIME = "all"


@dataclass
class FeedOptions:
    """
    Pagination and filtering for a single listing request.

    Only one of ``after``/``before`` may be given: both are anchors.
    """

    after: Optional[str] = None
    before: Optional[str] = None
    count: Optional[int] = None
    limit: Optional[int] = None
    period: Optional[TimePeriod] = None

    def params(self) -> Dict[str, Any]:
        if self.after and self.before:
            raise PreconditionError("Only one of after/before may be set")

        params: Dict[str, Any] = {}
        if self.after:
            params["after"] = self.after
        if self.before:
            params["before"] = self.before
        if self.count is not None:
            params["count"] = self.count
        if self.limit is not None:
            params["limit"] = self.limit
        if self.period is not None:
            params["t"] = TimePeriod(self.period).value
        return params


def listing_params(limit: Optional[int] = None, options: Optional[FeedOptions] = None, **extra: Any) -> Dict[str, Any]:
    """Merge an explicit ``limit`` with ``FeedOptions`` and endpoint-specific parameters."""
    params = options.params() if options else {}
    if limit is not None:
        params["limit"] = limit
    params.update({key: value for key, value in extra.items() if value is not None})
    return params
