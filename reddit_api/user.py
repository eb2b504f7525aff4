"""Accessor for a user's public profile and post history."""

from typing import TYPE_CHECKING, Optional

from reddit_api.models.comment import CommentData, Comments
from reddit_api.models.submission import SubmissionData, Submissions
from reddit_api.models.user import Overview, UserAbout
from reddit_api.options import FeedOptions, listing_params
from reddit_api.pagination import AfterState, ListingStream

if TYPE_CHECKING:
    from reddit_api.client import Reddit


class User:
    """
    Read access to one user.

    ``items`` and ``comment_items`` walk the whole history lazily::

        async for submission in User(reddit, "spez").items():
            print(submission.title)
    """

    def __init__(self, client: "Reddit", name: str):
        self.client = client
        self.name = name

    def _path(self, resource: str) -> str:
        return f"user/{self.name}/{resource}.json"

    async def overview(self, options: Optional[FeedOptions] = None) -> Overview:
        """Comments and submissions, newest first, in one mixed listing."""
        return await self.client.get(self._path("overview"), Overview, params=listing_params(options=options))

    async def submitted(self, options: Optional[FeedOptions] = None) -> Submissions:
        return await self.client.get(self._path("submitted"), Submissions, params=listing_params(options=options))

    async def comments(self, options: Optional[FeedOptions] = None) -> Comments:
        return await self.client.get(self._path("comments"), Comments, params=listing_params(options=options))

    async def about(self) -> UserAbout:
        return await self.client.get(self._path("about"), UserAbout)

    def items(
        self,
        cursor: Optional[AfterState] = None,
        limit: Optional[int] = None,
        strict: bool = True,
    ) -> ListingStream[SubmissionData]:
        return self.client.stream(self._path("submitted"), SubmissionData, cursor=cursor, limit=limit, strict=strict)

    def comment_items(
        self,
        cursor: Optional[AfterState] = None,
        limit: Optional[int] = None,
        strict: bool = True,
    ) -> ListingStream[CommentData]:
        return self.client.stream(self._path("comments"), CommentData, cursor=cursor, limit=limit, strict=strict)
