"""
Logged-in user session.

A ``Me`` is returned by ``Reddit.login()``. It borrows the client's HTTP
connection pool and sends its own bearer token on every request, so the
client's application token is left untouched.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Union

from reddit_api.errors import APIError, PreconditionError
from reddit_api.models.submission import SubmissionData, Submissions
from reddit_api.models.user import Inbox, MeData
from reddit_api.options import FeedOptions, listing_params
from reddit_api.pagination import AfterState, ListingStream

if TYPE_CHECKING:
    from reddit_api.client import Reddit

logger = logging.getLogger(__name__)


class Me:
    """Account actions for the user whose password grant produced ``access_token``."""

    def __init__(self, client: "Reddit", access_token: str):
        self.client = client
        self.access_token = access_token
        self.base_url = client.config.authenticated_url

    @property
    def username(self) -> Optional[str]:
        return self.client.config.username

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    async def _get(self, path: str, model=None, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.get(path, model, params=params, headers=self.headers, base_url=self.base_url)

    async def _post(self, path: str, form: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST a form with ``api_type=json`` and check the embedded error list.

        Returns:
            The ``json.data`` object of the response (empty if absent)

        Raises:
            APIError: If ``json.errors`` is not empty
        """
        form = {key: value for key, value in form.items() if value is not None}
        form["api_type"] = "json"
        payload = await self.client.post(path, data=form, headers=self.headers, base_url=self.base_url)

        body = payload.get("json", {}) if isinstance(payload, dict) else {}
        errors = body.get("errors") or []
        if errors:
            logger.warning(f"POST {path} rejected: {errors}")
            raise APIError(errors)
        return body.get("data") or {}

    def _user_path(self, resource: str) -> str:
        if not self.username:
            raise PreconditionError("username must be configured to read account listings")
        return f"user/{self.username}/{resource}.json"

    async def me(self) -> MeData:
        return await self._get("api/v1/me", MeData)

    async def submit_text(self, title: str, text: str, sr: str) -> Dict[str, Any]:
        """Create a self post in subreddit ``sr``."""
        return await self._post("api/submit", {"kind": "self", "title": title, "text": text, "sr": sr})

    async def submit_link(self, title: str, link: str, sr: str) -> Dict[str, Any]:
        """Create a link post in subreddit ``sr``."""
        return await self._post("api/submit", {"kind": "link", "title": title, "url": link, "sr": sr})

    async def comment(self, text: str, parent: str) -> Dict[str, Any]:
        """
        Reply to a submission or comment.

        Args:
            text: Markdown body
            parent: Fullname of the parent, e.g. ``t3_abc123`` or ``t1_def456``
        """
        return await self._post("api/comment", {"text": text, "thing_id": parent})

    async def compose_message(self, username: str, subject: str, body: str) -> Dict[str, Any]:
        return await self._post("api/compose", {"to": username, "subject": subject, "text": body})

    async def inbox(self, options: Optional[FeedOptions] = None) -> Inbox:
        return await self._get("message/inbox.json", Inbox, params=listing_params(options=options))

    async def unread(self, options: Optional[FeedOptions] = None) -> Inbox:
        return await self._get("message/unread.json", Inbox, params=listing_params(options=options))

    async def mark_read(self, ids: Union[str, Iterable[str]]) -> None:
        await self._post("api/read_message", {"id": _join_ids(ids)})

    async def mark_unread(self, ids: Union[str, Iterable[str]]) -> None:
        await self._post("api/unread_message", {"id": _join_ids(ids)})

    async def saved(self, options: Optional[FeedOptions] = None) -> Submissions:
        return await self._get(self._user_path("saved"), Submissions, params=listing_params(options=options))

    async def upvoted(self, options: Optional[FeedOptions] = None) -> Submissions:
        return await self._get(self._user_path("upvoted"), Submissions, params=listing_params(options=options))

    async def downvoted(self, options: Optional[FeedOptions] = None) -> Submissions:
        return await self._get(self._user_path("downvoted"), Submissions, params=listing_params(options=options))

    def saved_items(
        self,
        cursor: Optional[AfterState] = None,
        limit: Optional[int] = None,
        strict: bool = True,
    ) -> ListingStream[SubmissionData]:
        return self.client.stream(
            self._user_path("saved"),
            SubmissionData,
            cursor=cursor,
            limit=limit,
            strict=strict,
            headers=self.headers,
            base_url=self.base_url,
        )


def _join_ids(ids: Union[str, Iterable[str]]) -> str:
    """Reddit takes a comma-separated list of fullnames."""
    if isinstance(ids, str):
        return ids
    return ",".join(ids)
