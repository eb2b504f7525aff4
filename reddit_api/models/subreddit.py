"""Data models for subreddits (``t5`` things) and their moderators."""

from typing import List, Optional

from reddit_api.models.base import Listing, RedditModel, Thing


class SubredditData(RedditModel):
    """Subreddit metadata as returned by ``about`` and search endpoints."""

    id: Optional[str] = None
    name: Optional[str] = None
    display_name: Optional[str] = None
    display_name_prefixed: Optional[str] = None
    title: Optional[str] = None
    public_description: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    subreddit_type: Optional[str] = None
    subscribers: Optional[int] = None
    accounts_active: Optional[int] = None
    created: Optional[float] = None
    created_utc: Optional[float] = None
    over18: Optional[bool] = None
    quarantine: Optional[bool] = None
    user_is_subscriber: Optional[bool] = None
    user_is_moderator: Optional[bool] = None


class ModeratorData(RedditModel):
    id: Optional[str] = None
    name: Optional[str] = None
    date: Optional[float] = None
    mod_permissions: List[str] = []
    author_flair_text: Optional[str] = None


class ModeratorList(RedditModel):
    children: List[ModeratorData] = []


Subreddits = Thing[Listing[SubredditData]]
Moderators = Thing[ModeratorList]
