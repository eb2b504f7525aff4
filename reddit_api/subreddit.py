"""Accessors for a single subreddit and for subreddit discovery."""

import logging
from typing import TYPE_CHECKING, Optional

from pydantic import ValidationError

from reddit_api.errors import DeserializationError, PreconditionError
from reddit_api.models.base import Thing
from reddit_api.models.comment import CommentData, Comments
from reddit_api.models.submission import SubmissionData, Submissions
from reddit_api.models.subreddit import Moderators, SubredditData, Subreddits as SubredditListing
from reddit_api.options import FeedOptions, listing_params
from reddit_api.pagination import AfterState, ListingStream

if TYPE_CHECKING:
    from reddit_api.client import Reddit

logger = logging.getLogger(__name__)

SORTS = ("hot", "rising", "top", "new", "controversial")


class Subreddit:
    """
    Read access to one subreddit.

    Usage::

        golang = Subreddit(reddit, "golang")
        top = await golang.top(100)
        for submission in top.data.unwrap():
            print(submission.title)
    """

    def __init__(self, client: "Reddit", name: str):
        self.client = client
        self.name = name

    def _path(self, resource: str) -> str:
        return f"r/{self.name}/{resource}.json"

    async def about(self) -> Thing[SubredditData]:
        return await self.client.get(self._path("about"), Thing[SubredditData])

    async def moderators(self) -> Moderators:
        return await self.client.get(self._path("about/moderators"), Moderators)

    async def _listing(
        self,
        sort: str,
        limit: Optional[int] = None,
        options: Optional[FeedOptions] = None,
    ) -> Submissions:
        return await self.client.get(self._path(sort), Submissions, params=listing_params(limit, options))

    async def hot(self, limit: Optional[int] = None, options: Optional[FeedOptions] = None) -> Submissions:
        return await self._listing("hot", limit, options)

    async def rising(self, limit: Optional[int] = None, options: Optional[FeedOptions] = None) -> Submissions:
        return await self._listing("rising", limit, options)

    async def top(self, limit: Optional[int] = None, options: Optional[FeedOptions] = None) -> Submissions:
        return await self._listing("top", limit, options)

    async def latest(self, limit: Optional[int] = None, options: Optional[FeedOptions] = None) -> Submissions:
        return await self._listing("new", limit, options)

    async def controversial(
        self, limit: Optional[int] = None, options: Optional[FeedOptions] = None
    ) -> Submissions:
        return await self._listing("controversial", limit, options)

    async def latest_comments(self, depth: Optional[int] = None, limit: Optional[int] = None) -> Comments:
        """Newest comments across the whole subreddit."""
        return await self.client.get(self._path("comments"), Comments, params={"depth": depth, "limit": limit})

    async def article_comments(
        self,
        article: str,
        depth: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Comments:
        """
        Comment tree of one submission.

        Reddit answers with ``[submission listing, comment listing]``; only the
        comment listing is returned.

        Args:
            article: Submission ID without the ``t3_`` prefix
            depth: Maximum reply depth
            limit: Maximum number of top-level comments
        """
        path = self._path(f"comments/{article}")
        payload = await self.client.get(path, params={"depth": depth, "limit": limit})

        if not isinstance(payload, list) or len(payload) < 2:
            logger.warning(f"GET {path} did not return a submission/comments pair")
            raise DeserializationError(f"Expected [submission, comments] from {path}", str(payload)[:200])
        try:
            return Comments.model_validate(payload[1])
        except ValidationError as e:
            raise DeserializationError(f"Comment listing from {path} is malformed: {e}") from e

    async def search(
        self,
        query: str,
        limit: Optional[int] = None,
        options: Optional[FeedOptions] = None,
    ) -> Submissions:
        """Search submissions restricted to this subreddit."""
        params = listing_params(limit, options, q=query, restrict_sr=1)
        return await self.client.get(self._path("search"), Submissions, params=params)

    def stream(
        self,
        sort: str = "new",
        cursor: Optional[AfterState] = None,
        limit: Optional[int] = None,
        strict: bool = True,
    ) -> ListingStream[SubmissionData]:
        """
        Lazily walk every submission of a listing, page by page.

        Args:
            sort: One of hot, rising, top, new, controversial
            cursor: Where to start (defaults to the first page)
            limit: Page size
            strict: Raise page failures instead of ending silently
        """
        if sort not in SORTS:
            raise PreconditionError(f"Unknown sort {sort!r}, expected one of {', '.join(SORTS)}")
        return self.client.stream(self._path(sort), SubmissionData, cursor=cursor, limit=limit, strict=strict)


class Subreddits:
    """Subreddit discovery: search, popular and newly created subreddits."""

    def __init__(self, client: "Reddit"):
        self.client = client

    async def search(
        self,
        name: str,
        limit: Optional[int] = None,
        options: Optional[FeedOptions] = None,
    ) -> SubredditListing:
        params = listing_params(limit, options, q=name)
        return await self.client.get("subreddits/search.json", SubredditListing, params=params)

    async def popular(self, limit: Optional[int] = None, options: Optional[FeedOptions] = None) -> SubredditListing:
        return await self.client.get("subreddits/popular.json", SubredditListing, params=listing_params(limit, options))

    async def new(self, limit: Optional[int] = None, options: Optional[FeedOptions] = None) -> SubredditListing:
        return await self.client.get("subreddits/new.json", SubredditListing, params=listing_params(limit, options))
