"""Data model for Reddit comments (``t1`` things) and comment trees."""

from typing import List, Optional, Union

from reddit_api.models.base import Listing, RedditModel, Thing


class CommentData(RedditModel):
    """A comment. ``more`` placeholders in a tree parse into this model too."""

    id: Optional[str] = None
    name: Optional[str] = None
    author: Optional[str] = None
    body: Optional[str] = None
    body_html: Optional[str] = None
    subreddit: Optional[str] = None
    subreddit_id: Optional[str] = None
    link_id: Optional[str] = None
    parent_id: Optional[str] = None
    link_title: Optional[str] = None  # only on user comment listings
    link_url: Optional[str] = None
    permalink: Optional[str] = None
    score: Optional[int] = None
    ups: Optional[int] = None
    downs: Optional[int] = None
    depth: Optional[int] = None
    created: Optional[float] = None
    created_utc: Optional[float] = None
    edited: Optional[Union[bool, float]] = None
    stickied: Optional[bool] = None
    distinguished: Optional[str] = None
    # Reddit sends "" when a comment has no replies
    replies: Optional[Union["CommentReplies", str]] = None


class CommentReplyListing(RedditModel):
    after: Optional[str] = None
    before: Optional[str] = None
    children: List["CommentThing"] = []


class CommentReplies(RedditModel):
    kind: str
    data: CommentReplyListing


class CommentThing(RedditModel):
    kind: str
    data: CommentData


CommentData.model_rebuild()
CommentReplyListing.model_rebuild()

Comments = Thing[Listing[CommentData]]
