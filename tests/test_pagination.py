"""Tests for the pagination stream."""

import httpx
import pytest

from conftest import listing, submission
from reddit_api.errors import StatusError, TransportError
from reddit_api.models.submission import Submissions
from reddit_api.pagination import Done, End, Failed, ListingStream, More, Next, Start, fetch_page


def page(ids, after=None):
    return Submissions.model_validate(listing([submission(i) for i in ids], after)).data


NEVER = object()


class FakeFetcher:
    """Serves listing pages in order and records the anchors it was asked for."""

    def __init__(self, pages, fail_on=NEVER):
        self.pages = {anchor: result for anchor, result in pages}
        self.fail_on = fail_on
        self.anchors = []

    async def __call__(self, anchor):
        self.anchors.append(anchor)
        if anchor == self.fail_on:
            raise StatusError(httpx.Response(500, text="boom"))
        return self.pages[anchor]


THREE_PAGES = [
    (None, page(["a", "b"], after="t3_b")),
    ("t3_b", page(["c", "d"], after="t3_d")),
    ("t3_d", page(["e"])),
]


async def ids(stream):
    return [item.id async for item in stream]


class TestFetchPage:
    """Test cases for a single cursor step."""

    @pytest.mark.asyncio
    async def test_end_is_done_without_fetching(self):
        fetcher = FakeFetcher([])

        outcome = await fetch_page(fetcher, End())

        assert isinstance(outcome, Done)
        assert fetcher.anchors == []

    @pytest.mark.asyncio
    async def test_page_with_after_moves_to_next(self):
        outcome = await fetch_page(FakeFetcher(THREE_PAGES), Start())

        assert isinstance(outcome, More)
        assert [item.id for item in outcome.items] == ["a", "b"]
        assert outcome.next_cursor == Next("t3_b")

    @pytest.mark.asyncio
    async def test_last_page_moves_to_end(self):
        outcome = await fetch_page(FakeFetcher(THREE_PAGES), Next("t3_d"))

        assert outcome.next_cursor == End()

    @pytest.mark.asyncio
    async def test_failure_is_not_done(self):
        outcome = await fetch_page(FakeFetcher(THREE_PAGES, fail_on="t3_b"), Next("t3_b"))

        assert isinstance(outcome, Failed)
        assert isinstance(outcome.error, StatusError)


class TestListingStream:
    """Test cases for ListingStream."""

    @pytest.mark.asyncio
    async def test_yields_every_page_in_order(self):
        fetcher = FakeFetcher(THREE_PAGES)
        stream = ListingStream(fetcher)

        assert await ids(stream) == ["a", "b", "c", "d", "e"]
        # Nothing is requested past the last page
        assert fetcher.anchors == [None, "t3_b", "t3_d"]
        assert stream.pages == 3
        assert stream.exhausted
        assert stream.error is None
        assert stream.cursor == End()

    @pytest.mark.asyncio
    async def test_fetches_lazily(self):
        fetcher = FakeFetcher(THREE_PAGES)
        stream = ListingStream(fetcher)

        assert (await stream.__anext__()).id == "a"
        assert (await stream.__anext__()).id == "b"
        assert fetcher.anchors == [None]

        assert (await stream.__anext__()).id == "c"
        assert fetcher.anchors == [None, "t3_b"]

    @pytest.mark.asyncio
    async def test_single_page(self):
        fetcher = FakeFetcher([(None, page(["only"]))])

        assert await ids(ListingStream(fetcher)) == ["only"]
        assert fetcher.anchors == [None]

    @pytest.mark.asyncio
    async def test_start_with_anchor(self):
        fetcher = FakeFetcher(THREE_PAGES)

        assert await ids(ListingStream(fetcher, Start("t3_b"))) == ["c", "d", "e"]
        assert fetcher.anchors == ["t3_b", "t3_d"]

    @pytest.mark.asyncio
    async def test_end_cursor_yields_nothing(self):
        fetcher = FakeFetcher(THREE_PAGES)
        stream = ListingStream(fetcher, End())

        assert await ids(stream) == []
        assert fetcher.anchors == []
        assert stream.exhausted

    @pytest.mark.asyncio
    async def test_empty_listing(self):
        fetcher = FakeFetcher([(None, page([]))])
        stream = ListingStream(fetcher)

        assert await ids(stream) == []
        assert stream.exhausted

    @pytest.mark.asyncio
    async def test_lenient_failure_ends_and_keeps_error(self):
        fetcher = FakeFetcher(THREE_PAGES, fail_on="t3_b")
        stream = ListingStream(fetcher, strict=False)

        assert await ids(stream) == ["a", "b"]
        assert isinstance(stream.error, StatusError)
        assert stream.error.status_code == 500
        assert not stream.exhausted
        # The cursor still points at the page that failed
        assert stream.cursor == Next("t3_b")

    @pytest.mark.asyncio
    async def test_strict_failure_raises_after_earlier_items(self):
        fetcher = FakeFetcher(THREE_PAGES, fail_on="t3_d")
        stream = ListingStream(fetcher)
        seen = []

        with pytest.raises(StatusError):
            async for item in stream:
                seen.append(item.id)

        assert seen == ["a", "b", "c", "d"]
        assert stream.cursor == Next("t3_d")
        assert stream.pages == 2

    @pytest.mark.asyncio
    async def test_failure_on_first_page(self):
        fetcher = FakeFetcher(THREE_PAGES, fail_on=None)
        stream = ListingStream(fetcher, strict=False)

        assert await ids(stream) == []
        assert isinstance(stream.error, StatusError)
        assert stream.cursor == Start()

    @pytest.mark.asyncio
    async def test_resume_from_failed_cursor(self):
        failing = FakeFetcher(THREE_PAGES, fail_on="t3_b")
        first = ListingStream(failing, strict=False)
        assert await ids(first) == ["a", "b"]

        healthy = FakeFetcher(THREE_PAGES)
        assert await ids(ListingStream(healthy, first.cursor)) == ["c", "d", "e"]

    @pytest.mark.asyncio
    async def test_not_restartable(self):
        fetcher = FakeFetcher(THREE_PAGES)
        stream = ListingStream(fetcher)
        await ids(stream)

        assert await ids(stream) == []
        assert len(fetcher.anchors) == 3

    @pytest.mark.asyncio
    async def test_failed_stream_stays_finished(self):
        fetcher = FakeFetcher(THREE_PAGES, fail_on="t3_b")
        stream = ListingStream(fetcher, strict=False)
        await ids(stream)

        assert await ids(stream) == []
        assert fetcher.anchors == [None, "t3_b"]

    @pytest.mark.asyncio
    async def test_transport_errors_are_page_failures(self):
        async def unreachable(anchor):
            raise TransportError("connection refused")

        stream = ListingStream(unreachable, strict=False)

        assert await ids(stream) == []
        assert isinstance(stream.error, TransportError)

    @pytest.mark.asyncio
    async def test_collect_stops_without_extra_pages(self):
        fetcher = FakeFetcher(THREE_PAGES)
        stream = ListingStream(fetcher)

        items = await stream.collect(max_items=2)

        assert [item.id for item in items] == ["a", "b"]
        assert fetcher.anchors == [None]

    @pytest.mark.asyncio
    async def test_collect_everything(self):
        items = await ListingStream(FakeFetcher(THREE_PAGES)).collect()

        assert len(items) == 5

    @pytest.mark.asyncio
    async def test_collect_zero(self):
        fetcher = FakeFetcher(THREE_PAGES)

        assert await ListingStream(fetcher).collect(0) == []
        assert fetcher.anchors == []
