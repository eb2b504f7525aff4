"""
Cursor-based pagination over Reddit listings.

Reddit pages listings with an ``after`` anchor: each page names the item
to continue after, and the last page has none. ``ListingStream`` turns that
into one lazy sequence of items, fetching a page only once the previous
page's items have all been handed to the consumer.

A stream moves through three cursor states::

    Start(anchor) --page with after--> Next(after) --page without after--> End

and each page fetch resolves to one of three outcomes: ``More`` (items plus
the next cursor), ``Done`` (cursor was ``End``) or ``Failed`` (the request
raised). ``Failed`` is never confused with ``Done``: a strict stream
re-raises the error, a lenient one ends and leaves it on ``stream.error``.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import (
    AsyncIterator,
    Awaitable,
    Callable,
    Deque,
    Generic,
    List,
    Optional,
    TypeVar,
    Union,
)

from reddit_api.errors import RedditError
from reddit_api.models.base import Listing

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Start:
    """Initial state. ``anchor=None`` begins at the newest item."""

    anchor: Optional[str] = None


@dataclass(frozen=True)
class Next:
    """Continue after the anchor returned by the previous page."""

    anchor: str


@dataclass(frozen=True)
class End:
    """Terminal state; nothing more is fetched."""


AfterState = Union[Start, Next, End]


@dataclass(frozen=True)
class More(Generic[T]):
    items: List[T]
    next_cursor: AfterState


@dataclass(frozen=True)
class Done:
    pass


@dataclass(frozen=True)
class Failed:
    error: RedditError


PageOutcome = Union[More, Done, Failed]

# Fetches the listing page that follows ``anchor`` (None = first page)
PageFetcher = Callable[[Optional[str]], Awaitable[Listing]]


async def fetch_page(fetcher: PageFetcher, cursor: AfterState) -> PageOutcome:
    """
    Advance the cursor by one page.

    Args:
        fetcher: Coroutine function returning the listing after an anchor
        cursor: Current position

    Returns:
        ``Done`` for ``End``, ``Failed`` if the fetch raised a ``RedditError``,
        otherwise ``More`` with the unwrapped children and the next cursor
    """
    if isinstance(cursor, End):
        return Done()

    try:
        listing = await fetcher(cursor.anchor)
    except RedditError as e:
        return Failed(e)

    next_cursor: AfterState = Next(listing.after) if listing.after else End()
    return More(listing.unwrap(), next_cursor)


class ListingStream(AsyncIterator[T]):
    """
    Lazy, single-use async iterator over every item of a listing.

    Usage::

        async for submission in user.items():
            print(submission.title)

    Attributes:
        cursor: Cursor of the next page to fetch. After a failure it still
            points at the failed page, so a new stream can resume from it.
        error: The error that ended the stream, if any.
        exhausted: True once the last page has been consumed.
        pages: Number of pages fetched so far.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        cursor: Optional[AfterState] = None,
        strict: bool = True,
        metrics=None,
        description: str = "listing",
    ):
        """
        Args:
            fetcher: Coroutine function returning the listing after an anchor
            cursor: Starting cursor (defaults to ``Start(None)``)
            strict: Re-raise page failures; otherwise end quietly and keep ``error``
            metrics: Optional Prometheus exporter
            description: Label used in log messages
        """
        self.cursor: AfterState = cursor if cursor is not None else Start()
        self.strict = strict
        self.error: Optional[RedditError] = None
        self.exhausted = False
        self.pages = 0
        self._fetcher = fetcher
        self._metrics = metrics
        self._description = description
        self._buffer: Deque[T] = deque()
        self._finished = False

    def __aiter__(self) -> "ListingStream[T]":
        return self

    async def __anext__(self) -> T:
        while not self._buffer:
            if self._finished:
                raise StopAsyncIteration

            outcome = await fetch_page(self._fetcher, self.cursor)

            if isinstance(outcome, Done):
                self._finished = True
                self.exhausted = True
                logger.info(f"Finished {self._description} after {self.pages} page(s)")
                raise StopAsyncIteration

            if isinstance(outcome, Failed):
                self._finished = True
                self.error = outcome.error
                logger.warning(
                    f"Stopped {self._description} on page {self.pages + 1} "
                    f"at {self.cursor}: {outcome.error}"
                )
                if self.strict:
                    raise outcome.error
                raise StopAsyncIteration

            self.pages += 1
            if self._metrics:
                self._metrics.record_page_fetched()
            logger.debug(f"Fetched page {self.pages} of {self._description} ({len(outcome.items)} items)")

            self._buffer.extend(outcome.items)
            self.cursor = outcome.next_cursor

        return self._buffer.popleft()

    async def collect(self, max_items: Optional[int] = None) -> List[T]:
        """
        Drain the stream into a list.

        Args:
            max_items: Stop after this many items (no further page is requested)

        Returns:
            The items, in server order
        """
        items: List[T] = []
        if max_items is not None and max_items <= 0:
            return items

        async for item in self:
            items.append(item)
            if max_items is not None and len(items) >= max_items:
                break
        return items
