"""Typed response models for the Reddit API."""

from reddit_api.models.auth import AuthData
from reddit_api.models.base import Listing, RedditModel, Thing
from reddit_api.models.comment import CommentData, Comments, CommentThing
from reddit_api.models.submission import SubmissionData, Submissions
from reddit_api.models.subreddit import (
    ModeratorData,
    ModeratorList,
    Moderators,
    SubredditData,
    Subreddits,
)
from reddit_api.models.user import (
    Inbox,
    MeData,
    MessageData,
    Overview,
    OverviewListing,
    UserAbout,
    UserAboutData,
)

__all__ = [
    "AuthData",
    "CommentData",
    "CommentThing",
    "Comments",
    "Inbox",
    "Listing",
    "MeData",
    "MessageData",
    "ModeratorData",
    "ModeratorList",
    "Moderators",
    "Overview",
    "OverviewListing",
    "RedditModel",
    "SubmissionData",
    "Submissions",
    "SubredditData",
    "Subreddits",
    "Thing",
    "UserAbout",
    "UserAboutData",
]
