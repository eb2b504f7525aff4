"""Tests for the Subreddit and Subreddits accessors."""

import httpx
import pytest

from conftest import comment, listing, submission
from reddit_api.client import RedditBuilder
from reddit_api.errors import DeserializationError, PreconditionError, StatusError
from reddit_api.options import FeedOptions, TimePeriod
from reddit_api.pagination import Start
from reddit_api.subreddit import Subreddit, Subreddits


def subreddit_thing(name):
    return {"kind": "t5", "data": {"display_name": name, "subscribers": 100, "title": name.title()}}


class TestSubreddit:
    """Test cases for Subreddit listings."""

    @pytest.mark.asyncio
    async def test_read_only_top(self, config, make_transport):
        body = listing([submission("x1", "First"), submission("x2", "Second")])
        transport = make_transport(lambda request: httpx.Response(200, json=body))

        async with await RedditBuilder(config, transport=transport).build() as reddit:
            top = await Subreddit(reddit, "golang").top(100)

        children = top.data.unwrap()
        assert [child.id for child in children] == ["x1", "x2"]
        assert [child.title for child in children] == ["First", "Second"]
        assert len(transport.requests) == 1
        assert str(transport.requests[0].url) == "https://www.reddit.com/r/golang/top.json?limit=100"

    @pytest.mark.asyncio
    async def test_sort_paths(self, config, make_transport):
        transport = make_transport(lambda request: httpx.Response(200, json=listing([])))

        async with await RedditBuilder(config, transport=transport).build() as reddit:
            rust = Subreddit(reddit, "rust")
            await rust.hot()
            await rust.rising()
            await rust.latest()
            await rust.controversial()

        assert transport.paths() == [
            "/r/rust/hot.json",
            "/r/rust/rising.json",
            "/r/rust/new.json",
            "/r/rust/controversial.json",
        ]

    @pytest.mark.asyncio
    async def test_feed_options(self, config, make_transport):
        transport = make_transport(lambda request: httpx.Response(200, json=listing([])))
        options = FeedOptions(after="t3_abc", count=25, period=TimePeriod.THIS_WEEK)

        async with await RedditBuilder(config, transport=transport).build() as reddit:
            await Subreddit(reddit, "rust").top(10, options)

        params = transport.requests[0].url.params
        assert params["after"] == "t3_abc"
        assert params["count"] == "25"
        assert params["t"] == "week"
        assert params["limit"] == "10"
        assert "before" not in params

    @pytest.mark.asyncio
    async def test_after_and_before_are_exclusive(self, config, make_transport):
        transport = make_transport(lambda request: httpx.Response(200, json=listing([])))

        async with await RedditBuilder(config, transport=transport).build() as reddit:
            with pytest.raises(PreconditionError):
                await Subreddit(reddit, "rust").hot(options=FeedOptions(after="t3_a", before="t3_b"))

        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_authenticated_client_uses_oauth_host(self, credentials_config, token_handler, make_transport):
        def handler(request):
            return token_handler(request) or httpx.Response(200, json=listing([submission("a")]))

        transport = make_transport(handler)

        async with await RedditBuilder(credentials_config, transport=transport).build() as reddit:
            await Subreddit(reddit, "rust").hot(5)

        request = transport.requests[1]
        assert request.url.host == "oauth.reddit.com"
        assert request.headers["Authorization"] == "Bearer app-token"

    @pytest.mark.asyncio
    async def test_about_and_moderators(self, config, make_transport):
        def handler(request):
            if request.url.path.endswith("/about/moderators.json"):
                return httpx.Response(200, json={
                    "kind": "UserList",
                    "data": {"children": [{"name": "mod1", "mod_permissions": ["all"]}]},
                })
            return httpx.Response(200, json=subreddit_thing("rust"))

        async with await RedditBuilder(config, transport=make_transport(handler)).build() as reddit:
            rust = Subreddit(reddit, "rust")
            about = await rust.about()
            moderators = await rust.moderators()

        assert about.data.display_name == "rust"
        assert about.data.subscribers == 100
        assert moderators.data.children[0].name == "mod1"
        assert moderators.data.children[0].mod_permissions == ["all"]

    @pytest.mark.asyncio
    async def test_latest_comments(self, config, make_transport):
        transport = make_transport(lambda request: httpx.Response(200, json=listing([comment("c1")])))

        async with await RedditBuilder(config, transport=transport).build() as reddit:
            comments = await Subreddit(reddit, "rust").latest_comments(depth=2, limit=10)

        assert comments.data.unwrap()[0].body == "Comment c1"
        assert transport.requests[0].url.path == "/r/rust/comments.json"
        assert transport.requests[0].url.params["depth"] == "2"

    @pytest.mark.asyncio
    async def test_article_comments_returns_comment_listing(self, config, make_transport):
        nested = comment("c1", replies=listing([comment("c2")]))
        body = [listing([submission("abc")]), listing([nested])]
        transport = make_transport(lambda request: httpx.Response(200, json=body))

        async with await RedditBuilder(config, transport=transport).build() as reddit:
            comments = await Subreddit(reddit, "rust").article_comments("abc", limit=5)

        top = comments.data.unwrap()[0]
        assert top.id == "c1"
        assert top.replies.data.children[0].data.id == "c2"
        assert transport.requests[0].url.path == "/r/rust/comments/abc.json"
        assert "depth" not in transport.requests[0].url.params

    @pytest.mark.asyncio
    async def test_article_comments_unexpected_shape(self, config, make_transport):
        transport = make_transport(lambda request: httpx.Response(200, json=listing([])))

        async with await RedditBuilder(config, transport=transport).build() as reddit:
            with pytest.raises(DeserializationError):
                await Subreddit(reddit, "rust").article_comments("abc")

    @pytest.mark.asyncio
    async def test_search_is_restricted(self, config, make_transport):
        transport = make_transport(lambda request: httpx.Response(200, json=listing([submission("a")])))

        async with await RedditBuilder(config, transport=transport).build() as reddit:
            await Subreddit(reddit, "rust").search("async", 20)

        params = transport.requests[0].url.params
        assert transport.requests[0].url.path == "/r/rust/search.json"
        assert params["q"] == "async"
        assert params["restrict_sr"] == "1"
        assert params["limit"] == "20"

    @pytest.mark.asyncio
    async def test_missing_subreddit(self, config, make_transport):
        transport = make_transport(lambda request: httpx.Response(404, json={"error": 404}))

        async with await RedditBuilder(config, transport=transport).build() as reddit:
            with pytest.raises(StatusError) as exc_info:
                await Subreddit(reddit, "doesnotexist").hot()

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_stream(self, config, make_transport):
        pages = {
            None: listing([submission("a"), submission("b")], after="t3_b"),
            "t3_b": listing([submission("c")]),
        }
        transport = make_transport(
            lambda request: httpx.Response(200, json=pages[request.url.params.get("after")])
        )

        async with await RedditBuilder(config, transport=transport).build() as reddit:
            stream = Subreddit(reddit, "rust").stream(limit=2)
            items = [item.id async for item in stream]

        assert items == ["a", "b", "c"]
        first, second = transport.requests
        assert first.url.path == "/r/rust/new.json"
        assert "after" not in first.url.params
        assert first.url.params["limit"] == "2"
        assert second.url.params["after"] == "t3_b"

    @pytest.mark.asyncio
    async def test_stream_rejects_unknown_sort(self, config, make_transport):
        async with await RedditBuilder(config, transport=make_transport(lambda r: httpx.Response(200))).build() as reddit:
            with pytest.raises(PreconditionError):
                Subreddit(reddit, "rust").stream(sort="best", cursor=Start())


class TestSubreddits:
    """Test cases for subreddit discovery."""

    @pytest.mark.asyncio
    async def test_search(self, config, make_transport):
        body = listing([subreddit_thing("cats"), subreddit_thing("catpictures")])
        transport = make_transport(lambda request: httpx.Response(200, json=body))

        async with await RedditBuilder(config, transport=transport).build() as reddit:
            result = await Subreddits(reddit).search("cats", 50)

        assert [s.display_name for s in result.data.unwrap()] == ["cats", "catpictures"]
        request = transport.requests[0]
        assert request.url.path == "/subreddits/search.json"
        assert request.url.params["q"] == "cats"
        assert request.url.params["limit"] == "50"

    @pytest.mark.asyncio
    async def test_popular_and_new(self, config, make_transport):
        transport = make_transport(lambda request: httpx.Response(200, json=listing([])))

        async with await RedditBuilder(config, transport=transport).build() as reddit:
            subreddits = Subreddits(reddit)
            await subreddits.popular(5)
            await subreddits.new()

        assert transport.paths() == ["/subreddits/popular.json", "/subreddits/new.json"]
