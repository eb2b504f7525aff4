"""Data model for Reddit submissions (``t3`` things)."""

from typing import Optional, Union

from reddit_api.models.base import Listing, RedditModel, Thing


class SubmissionData(RedditModel):
    """
    A single Reddit submission.

    Only ``id`` and ``name`` are reliably present on every payload; the rest
    depends on the endpoint and the caller's authentication.
    """

    id: Optional[str] = None  # base36 ID, e.g. "q4jbfq"
    name: Optional[str] = None  # fullname, e.g. "t3_q4jbfq"; used as the pagination anchor
    title: Optional[str] = None
    author: Optional[str] = None  # "[deleted]" for removed accounts
    subreddit: Optional[str] = None
    subreddit_id: Optional[str] = None
    selftext: Optional[str] = None
    selftext_html: Optional[str] = None
    url: Optional[str] = None
    permalink: Optional[str] = None
    domain: Optional[str] = None
    thumbnail: Optional[str] = None
    link_flair_text: Optional[str] = None
    author_flair_text: Optional[str] = None
    score: Optional[int] = None
    ups: Optional[int] = None
    downs: Optional[int] = None
    upvote_ratio: Optional[float] = None
    num_comments: Optional[int] = None
    gilded: Optional[int] = None
    created: Optional[float] = None
    created_utc: Optional[float] = None
    edited: Optional[Union[bool, float]] = None  # False, or the edit timestamp
    over_18: Optional[bool] = None
    spoiler: Optional[bool] = None
    stickied: Optional[bool] = None
    locked: Optional[bool] = None
    archived: Optional[bool] = None
    is_self: Optional[bool] = None
    is_video: Optional[bool] = None
    distinguished: Optional[str] = None


Submissions = Thing[Listing[SubmissionData]]
