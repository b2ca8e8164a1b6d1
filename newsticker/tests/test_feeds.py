"""
Tests for the per-feed fetcher.
"""

import asyncio
from datetime import datetime, timezone

import aiohttp
import pytest

from newsticker.database.models import DBFeed
from newsticker.feeds import FeedParseError, FeedParser

from conftest import StubFeedParser, entry

ATOM = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example</title>
  <entry>
    <title>Atom headline</title>
    <link href="https://example.com/atom/1"/>
    <id>tag:example.com,2025:1</id>
    <updated>2025-01-02T00:00:00Z</updated>
  </entry>
</feed>"""


def make_feed(url: str) -> DBFeed:
    return DBFeed(
        id=url.rsplit("/", 1)[-1],
        dashboard_id="default",
        url=url,
        name="",
        logo=None,
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )


class TestParse:
    """Tests for FeedParser.parse."""

    def test_parses_atom(self):
        entries = FeedParser().parse(ATOM)
        assert len(entries) == 1
        assert entries[0].title == "Atom headline"

    def test_rejects_non_feed(self):
        with pytest.raises(FeedParseError):
            FeedParser().parse(b"this is not a feed <<<")


class TestFetchEntries:
    """Tests for failure isolation in fetch_entries."""

    @pytest.mark.asyncio
    async def test_returns_entries(self):
        parser = StubFeedParser()
        parser.responses["https://ok.example.com/rss"] = [entry("1", "2025-01-01T00:00:00Z")]

        entries = await parser.fetch_entries(make_feed("https://ok.example.com/rss"))

        assert len(entries) == 1

    @pytest.mark.asyncio
    async def test_network_error_gives_no_entries(self):
        parser = StubFeedParser()
        parser.responses["https://down.example.com/rss"] = aiohttp.ClientError("refused")

        assert await parser.fetch_entries(make_feed("https://down.example.com/rss")) == []

    @pytest.mark.asyncio
    async def test_parse_error_gives_no_entries(self):
        parser = StubFeedParser()
        parser.responses["https://bad.example.com/rss"] = FeedParseError("junk")

        assert await parser.fetch_entries(make_feed("https://bad.example.com/rss")) == []

    @pytest.mark.asyncio
    async def test_timeout_gives_no_entries(self):
        parser = StubFeedParser(timeout=0.05)
        parser.delays["https://slow.example.com/rss"] = 1
        parser.responses["https://slow.example.com/rss"] = [entry("1", "2025-01-01T00:00:00Z")]

        assert await parser.fetch_entries(make_feed("https://slow.example.com/rss")) == []

    @pytest.mark.asyncio
    async def test_no_retry(self):
        """A failed feed is fetched once per call."""
        parser = StubFeedParser()
        parser.responses["https://down.example.com/rss"] = aiohttp.ClientError("refused")

        await parser.fetch_entries(make_feed("https://down.example.com/rss"))

        assert parser.calls == ["https://down.example.com/rss"]


class TestFetchMultiple:
    """Tests for concurrent fetching."""

    @pytest.mark.asyncio
    async def test_results_line_up_with_feeds(self):
        parser = StubFeedParser()
        parser.responses["https://a.example.com/rss"] = [entry("a", "2025-01-01T00:00:00Z")]
        parser.responses["https://b.example.com/rss"] = aiohttp.ClientError("refused")
        parser.responses["https://c.example.com/rss"] = [
            entry("c1", "2025-01-01T00:00:00Z"),
            entry("c2", "2025-01-01T00:00:00Z"),
        ]
        feeds = [make_feed(f"https://{x}.example.com/rss") for x in "abc"]

        results = await parser.fetch_multiple(feeds)

        assert [len(r) for r in results] == [1, 0, 2]

    @pytest.mark.asyncio
    async def test_fetches_run_concurrently(self):
        """Two slow feeds should take about as long as one."""
        parser = StubFeedParser(timeout=2)
        feeds = [make_feed(f"https://{x}.example.com/rss") for x in "ab"]
        for feed in feeds:
            parser.delays[feed.url] = 0.2

        loop = asyncio.get_running_loop()
        started = loop.time()
        await parser.fetch_multiple(feeds)

        assert loop.time() - started < 0.39

    @pytest.mark.asyncio
    async def test_empty_feed_list(self):
        assert await StubFeedParser().fetch_multiple([]) == []
