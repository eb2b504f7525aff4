"""Data models for users, the logged-in account, inbox messages and overviews."""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from reddit_api.models.base import Listing, RedditModel, Thing
from reddit_api.models.comment import CommentData
from reddit_api.models.submission import SubmissionData


class UserAboutData(RedditModel):
    """Public profile of a user (``/user/<name>/about``)."""

    id: Optional[str] = None
    name: Optional[str] = None
    created: Optional[float] = None
    created_utc: Optional[float] = None
    link_karma: Optional[int] = None
    comment_karma: Optional[int] = None
    total_karma: Optional[int] = None
    icon_img: Optional[str] = None
    is_gold: Optional[bool] = None
    is_mod: Optional[bool] = None
    is_employee: Optional[bool] = None
    verified: Optional[bool] = None
    has_verified_email: Optional[bool] = None


class MeData(UserAboutData):
    """The account behind a password-grant session (``/api/v1/me``)."""

    inbox_count: Optional[int] = None
    has_mail: Optional[bool] = None
    has_mod_mail: Optional[bool] = None
    over_18: Optional[bool] = None
    pref_nightmode: Optional[bool] = None


class MessageData(RedditModel):
    id: Optional[str] = None
    name: Optional[str] = None
    author: Optional[str] = None
    dest: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    body_html: Optional[str] = None
    context: Optional[str] = None
    subreddit: Optional[str] = None
    parent_id: Optional[str] = None
    first_message_name: Optional[str] = None
    created: Optional[float] = None
    created_utc: Optional[float] = None
    new: Optional[bool] = None
    was_comment: Optional[bool] = None
    distinguished: Optional[str] = None


class OverviewComment(BaseModel):
    kind: Literal["t1"]
    data: CommentData


class OverviewSubmission(BaseModel):
    kind: Literal["t3"]
    data: SubmissionData


OverviewItem = Annotated[Union[OverviewComment, OverviewSubmission], Field(discriminator="kind")]


class OverviewListing(BaseModel):
    """A user's mixed feed of comments and submissions."""

    after: Optional[str] = None
    before: Optional[str] = None
    dist: Optional[int] = None
    modhash: Optional[str] = None
    children: List[OverviewItem] = Field(default_factory=list)

    def unwrap(self) -> List[Union[CommentData, SubmissionData]]:
        return [child.data for child in self.children]


Overview = Thing[OverviewListing]
UserAbout = Thing[UserAboutData]
Inbox = Thing[Listing[MessageData]]
