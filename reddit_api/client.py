"""Reddit API client with OAuth handling."""

import copy
import logging
from contextlib import nullcontext
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from reddit_api.config import Config
from reddit_api.errors import (
    APIError,
    DeserializationError,
    PreconditionError,
    RedditError,
    StatusError,
    TransportError,
)
from reddit_api.me import Me
from reddit_api.models.auth import AuthData
from reddit_api.models.base import Listing, Thing
from reddit_api.pagination import AfterState, ListingStream
from reddit_api.transport.rate_limiter import RateLimiter
from reddit_api.transport.retry import ConsecutiveErrorTracker, with_exponential_backoff

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def decode(response: httpx.Response, model: Optional[Type[M]] = None) -> Any:
    """
    Parse a response body, optionally into a pydantic model.

    Raises:
        DeserializationError: If the body is not JSON or does not match ``model``
    """
    try:
        payload = response.json()
    except ValueError as e:
        raise DeserializationError(f"Response body is not valid JSON: {e}", response.text) from e

    if model is None:
        return payload

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise DeserializationError(
            f"Response does not match {model.__name__}: {e.error_count()} validation error(s)",
            response.text,
        ) from e


async def request_token(
    http: httpx.AsyncClient,
    config: Config,
    form: Dict[str, str],
    metrics=None,
) -> str:
    """
    Exchange credentials for a bearer token at the OAuth endpoint.

    Args:
        http: HTTP client carrying the User-Agent header
        config: Configuration holding client_id/client_secret for Basic auth
        form: Form body; must include ``grant_type``
        metrics: Optional Prometheus exporter

    Returns:
        The access token

    Raises:
        TransportError: If the POST could not be sent
        StatusError: If the endpoint answered anything but 200
        APIError: If Reddit answered 200 with an OAuth error body
        DeserializationError: If the body carries no usable token
    """
    grant_type = form["grant_type"]
    logger.debug(f"Requesting {grant_type} token from {config.token_url}")

    try:
        response = await http.post(
            config.token_url,
            data=form,
            auth=(config.client_id or "", config.client_secret or ""),
        )
    except httpx.RequestError as e:
        if metrics:
            metrics.record_token_exchange(grant_type, success=False)
        raise TransportError(f"Token request failed: {e}", e) from e

    if response.status_code != 200:
        if metrics:
            metrics.record_token_exchange(grant_type, success=False)
        logger.error(f"Token request ({grant_type}) rejected with HTTP {response.status_code}")
        raise StatusError(response)

    # Reddit reports a bad password grant as 200 with {"error": "invalid_grant"}
    payload = decode(response)
    if isinstance(payload, dict) and "error" in payload and "access_token" not in payload:
        if metrics:
            metrics.record_token_exchange(grant_type, success=False)
        raise APIError([payload["error"]])

    try:
        auth_data = AuthData.model_validate(payload)
    except ValidationError as e:
        raise DeserializationError(f"Token response has no access_token: {e}", response.text) from e

    if metrics:
        metrics.record_token_exchange(grant_type, success=True)
    return auth_data.access_token


class Reddit:
    """
    HTTP client for making requests to the Reddit API.

    Built by ``RedditBuilder``. Owns one ``httpx.AsyncClient`` whose default
    headers carry the User-Agent and, for authenticated clients, the bearer
    token. Accessors (``Subreddit``, ``User``, ...) and ``Me`` sessions borrow
    it and share its connection pool.
    """

    def __init__(self, http: httpx.AsyncClient, config: Config, metrics=None):
        self._http = http
        self._config = config
        self.metrics = metrics

        self.rate_limiter = RateLimiter(config.rate_limit) if config.rate_limit.enabled else None
        self.error_tracker = ConsecutiveErrorTracker(config.retry.failure_threshold)
        self._send = with_exponential_backoff(
            max_retries=config.retry.max_retries,
            initial_backoff=config.retry.initial_backoff,
            max_backoff=config.retry.max_backoff,
            backoff_factor=config.retry.backoff_factor,
            error_tracker=self.error_tracker,
            rate_limiter=self.rate_limiter,
        )(self._send_once)

    @property
    def config(self) -> Config:
        """The client's configuration. Treat as read-only."""
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def access_token(self) -> Optional[str]:
        return self._config.access_token

    @property
    def read_only(self) -> bool:
        return self._config.access_token is None

    @property
    def headers(self) -> httpx.Headers:
        return self._http.headers

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._http

    def url(self, path: str, base_url: Optional[str] = None) -> str:
        """Join ``path`` onto the base URL (or an explicit root)."""
        return f"{(base_url or self._config.base_url).rstrip('/')}/{path.lstrip('/')}"

    async def _send_once(
        self,
        method: str,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        if self.rate_limiter:
            await self.rate_limiter.acquire()

        if self.metrics:
            self.metrics.record_request(method, httpx.URL(url).path)
            timer = self.metrics.time_request()
        else:
            timer = None

        logger.debug(f"{method} {url} params={params}")
        try:
            with timer if timer else nullcontext():
                response = await self._http.request(method, url, params=params, data=data, headers=headers)
        except httpx.RequestError as e:
            if self.metrics:
                self.metrics.record_api_error("transport")
            raise TransportError(f"{method} {url} failed: {e}", e) from e

        if self.rate_limiter:
            self.rate_limiter.observe(response.headers)

        if not response.is_success:
            if self.metrics:
                status = response.status_code
                self.metrics.record_api_error("5xx" if status >= 500 else str(status))
            logger.warning(f"{method} {url} returned HTTP {response.status_code}")
            raise StatusError(response)

        return response

    async def request(
        self,
        method: str,
        path: str,
        model: Optional[Type[M]] = None,
        params: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        base_url: Optional[str] = None,
    ) -> Any:
        """
        Send one request and decode the JSON body.

        Args:
            method: HTTP method
            path: Path relative to the base URL, e.g. ``r/rust/hot.json``
            model: Pydantic model to validate the body into (raw JSON if None)
            params: Query parameters; ``None`` values are dropped
            data: Form body
            headers: Per-request headers overriding the client defaults
            base_url: Alternative endpoint root

        Raises:
            TransportError, StatusError, DeserializationError
        """
        if params:
            params = {key: value for key, value in params.items() if value is not None}
        response = await self._send(method, self.url(path, base_url), params=params, data=data, headers=headers)
        try:
            return decode(response, model)
        except DeserializationError:
            if self.metrics:
                self.metrics.record_api_error("deserialization")
            logger.warning(f"{method} {path} returned an unexpected body")
            raise

    async def get(self, path: str, model: Optional[Type[M]] = None, **kwargs: Any) -> Any:
        return await self.request("GET", path, model, **kwargs)

    async def post(self, path: str, model: Optional[Type[M]] = None, **kwargs: Any) -> Any:
        return await self.request("POST", path, model, **kwargs)

    def stream(
        self,
        path: str,
        item_model: Type[Any],
        cursor: Optional[AfterState] = None,
        limit: Optional[int] = None,
        params: Optional[Mapping[str, Any]] = None,
        strict: bool = True,
        **request_kwargs: Any,
    ) -> ListingStream:
        """
        Walk a listing endpoint page by page.

        Args:
            path: Listing path, e.g. ``user/spez/submitted.json``
            item_model: Model of each child's ``data``
            cursor: Where to start (``Start(None)`` = newest)
            limit: Page size sent as ``limit``
            params: Extra query parameters sent with every page
            strict: Raise page failures instead of ending silently
            request_kwargs: Passed through to ``request`` (headers, base_url)

        Returns:
            A lazy, single-use ``ListingStream``
        """
        page_model = Thing[Listing[item_model]]

        async def fetch(anchor: Optional[str]) -> Listing:
            query = dict(params or {})
            query["limit"] = limit
            query["after"] = anchor
            page = await self.get(path, page_model, params=query, **request_kwargs)
            return page.data

        return ListingStream(fetch, cursor, strict=strict, metrics=self.metrics, description=path)

    async def login(self) -> Me:
        """
        Log in as the configured user with the password grant.

        Returns:
            A ``Me`` session sharing this client's connection pool

        Raises:
            PreconditionError: If username/password or client credentials are missing
            TransportError, StatusError, APIError, DeserializationError
        """
        config = self._config
        if not config.username or not config.password:
            raise PreconditionError("login requires username and password to be configured")
        if not config.client_id or not config.client_secret:
            raise PreconditionError("login requires client_id and client_secret to be configured")

        form = {
            "grant_type": "password",
            "username": config.username,
            "password": config.password,
        }
        token = await request_token(self._http, config, form, self.metrics)
        logger.info(f"Logged in as {config.username}")
        return Me(self, token)

    async def aclose(self) -> None:
        """Close the underlying HTTP client and release its connections."""
        logger.debug("Closing Reddit client")
        await self._http.aclose()

    async def __aenter__(self) -> "Reddit":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


class RedditBuilder:
    """
    Builder for configured ``Reddit`` clients.

    Leave ``client_id``/``client_secret`` unset for a read-only client::

        reddit = await RedditBuilder().user_agent("linux:myapp:v1.0 (by /u/me)").build()

    Set both to authenticate with the client-credentials grant; add
    ``username``/``password`` to be able to ``login()`` afterwards.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        metrics=None,
    ):
        """
        Args:
            config: Starting configuration (copied, never mutated)
            transport: Custom httpx transport, e.g. ``httpx.MockTransport`` in tests
            metrics: Optional ``PrometheusExporter``
        """
        self.config = copy.deepcopy(config) if config else Config()
        self._transport = transport
        self._metrics = metrics

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> "RedditBuilder":
        return cls(config, **kwargs)

    def user_agent(self, user_agent: str) -> "RedditBuilder":
        self.config.user_agent = user_agent
        return self

    def client_id(self, client_id: str) -> "RedditBuilder":
        self.config.client_id = client_id or None
        return self

    def client_secret(self, client_secret: str) -> "RedditBuilder":
        self.config.client_secret = client_secret or None
        return self

    def username(self, username: str) -> "RedditBuilder":
        self.config.username = username
        return self

    def password(self, password: str) -> "RedditBuilder":
        self.config.password = password
        return self

    def _http_client(self, config: Config) -> httpx.AsyncClient:
        headers = {
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        }
        return httpx.AsyncClient(headers=headers, timeout=config.timeout, transport=self._transport)

    async def build(self) -> Reddit:
        """
        Build the client, exchanging client credentials for a token if configured.

        Returns:
            A ready ``Reddit`` client

        Raises:
            PreconditionError: If only one of client_id/client_secret is set
            TransportError: If the token request could not be sent
            StatusError: If the token endpoint answered anything but 200
            DeserializationError: If the token response was malformed
        """
        # Each build owns its own copy so clients never share mutable config
        config = copy.deepcopy(self.config)

        if config.read_only:
            config.base_url = config.public_url
            # A token is never sent without credentials
            config.access_token = None
            logger.info("No client credentials configured, building read-only client")
            return Reddit(self._http_client(config), config, self._metrics)

        if config.client_id is None or config.client_secret is None:
            raise PreconditionError("client_id and client_secret must be set together")

        http = self._http_client(config)
        try:
            token = await request_token(http, config, {"grant_type": "client_credentials"}, self._metrics)
        except RedditError:
            await http.aclose()
            raise

        http.headers["Authorization"] = f"Bearer {token}"
        config.access_token = token
        config.base_url = config.authenticated_url
        logger.info("Authenticated with client credentials")
        return Reddit(http, config, self._metrics)
