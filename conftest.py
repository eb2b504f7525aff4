"""Project-level pytest configuration and shared fixtures."""

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from reddit_api.config import Config

TOKEN_RESPONSE = {
    "access_token": "app-token",
    "token_type": "bearer",
    "expires_in": 86400,
    "scope": "*",
}


def submission(id: str, title: str = "", subreddit: str = "golang", **extra: Any) -> Dict[str, Any]:
    """A ``t3`` thing as Reddit serializes it."""
    data = {"id": id, "name": f"t3_{id}", "title": title or f"Submission {id}", "subreddit": subreddit, "score": 1}
    data.update(extra)
    return {"kind": "t3", "data": data}


def comment(id: str, body: str = "", **extra: Any) -> Dict[str, Any]:
    """A ``t1`` thing as Reddit serializes it."""
    data = {"id": id, "name": f"t1_{id}", "body": body or f"Comment {id}", "replies": ""}
    data.update(extra)
    return {"kind": "t1", "data": data}


def listing(children: List[Dict[str, Any]], after: Optional[str] = None) -> Dict[str, Any]:
    """A listing page wrapping ``children``."""
    return {
        "kind": "Listing",
        "data": {
            "after": after,
            "before": None,
            "dist": len(children),
            "modhash": "",
            "children": children,
        },
    }


class RecordingTransport(httpx.MockTransport):
    """``httpx.MockTransport`` that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def config() -> Config:
    """Read-only configuration with a test user agent."""
    return Config(user_agent="test:reddit_api:v0 (by /u/tester)")


@pytest.fixture
def credentials_config(config: Config) -> Config:
    config.client_id = "client-id"
    config.client_secret = "client-secret"
    return config


@pytest.fixture
def login_config(credentials_config: Config) -> Config:
    credentials_config.username = "tester"
    credentials_config.password = "hunter2"
    return credentials_config


@pytest.fixture
def make_transport() -> Callable[[Callable[[httpx.Request], httpx.Response]], RecordingTransport]:
    return RecordingTransport


@pytest.fixture
def token_handler() -> Callable[[httpx.Request], Optional[httpx.Response]]:
    """Answers the token endpoint with ``TOKEN_RESPONSE``; returns None for other paths."""

    def handle(request: httpx.Request) -> Optional[httpx.Response]:
        if request.url.path == "/api/v1/access_token":
            return httpx.Response(200, json=TOKEN_RESPONSE)
        return None

    return handle
