"""
Pytest fixtures for backend tests.
"""

import asyncio
import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from newsticker.aggregator import TickerAggregator
from newsticker.broadcast import BroadcastGateway
from newsticker.cache import TickerCache
from newsticker.config import state
from newsticker.database import Database
from newsticker.feeds import FeedParser
from newsticker.server import app
from newsticker.services import build_snapshot


def entry(entry_id: str, published: str, title: str | None = None, link: str | None = None) -> dict:
    """A raw feed entry as a plain mapping."""
    return {
        "id": entry_id,
        "title": title if title is not None else f"Item {entry_id}",
        "link": link if link is not None else f"https://news.example.com/{entry_id}",
        "published": published,
    }


class StubFeedParser(FeedParser):
    """
    FeedParser whose network fetch is replaced by canned responses.

    responses maps url -> list of entries, or an exception to raise.
    delays maps url -> seconds to sleep before answering (for timeouts).
    """

    def __init__(self, timeout: float = 0.5):
        super().__init__(timeout=timeout)
        self.responses: dict[str, list | Exception] = {}
        self.delays: dict[str, float] = {}
        self.calls: list[str] = []

    async def fetch(self, url: str) -> list:
        self.calls.append(url)
        delay = self.delays.get(url)
        if delay:
            await asyncio.sleep(delay)
        response = self.responses.get(url, [])
        if isinstance(response, Exception):
            raise response
        return list(response)


class FakeConnection:
    """Anything with async send_json can subscribe to the gateway."""

    def __init__(self, fail: bool = False):
        self.messages: list[dict] = []
        self.fail = fail

    async def send_json(self, data):
        if self.fail:
            raise ConnectionError("connection closed")
        self.messages.append(data)

    def events(self) -> list[str]:
        return [m["event"] for m in self.messages]

    def last(self, event: str):
        """Payload of the most recent message with this event name."""
        for message in reversed(self.messages):
            if message["event"] == event:
                return message["data"]
        raise AssertionError(f"No {event} message received")


class FakeClock:
    """Manually advanced clock for scheduler tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        yield Path(f.name)
    # Cleanup
    for suffix in ("", "-wal", "-shm"):
        if os.path.exists(f.name + suffix):
            os.unlink(f.name + suffix)


@pytest.fixture
def test_db(temp_db_path):
    """Create a test database instance."""
    db = Database(temp_db_path)
    yield db


@pytest.fixture
def feed_parser():
    return StubFeedParser()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ticker(test_db, feed_parser, clock):
    """Ticker core wired together on a test database, without any transport."""
    cache = TickerCache(clock=clock)
    gateway = BroadcastGateway()
    aggregator = TickerAggregator(test_db, feed_parser, cache, gateway)
    gateway.set_snapshot_provider(lambda dashboard_id: build_snapshot(test_db, aggregator, dashboard_id))
    return SimpleNamespace(
        db=test_db,
        feed_parser=feed_parser,
        cache=cache,
        gateway=gateway,
        aggregator=aggregator,
        clock=clock,
    )


@pytest.fixture
def client(temp_db_path, feed_parser):
    """Create a test client with isolated database and a stubbed feed parser."""
    # Store original state
    original = (
        state.db, state.feed_parser, state.cache,
        state.gateway, state.aggregator, state.scheduler,
    )

    # Set up test state with fresh instances; no background scheduler
    test_db = Database(temp_db_path)
    state.db = test_db
    state.feed_parser = feed_parser
    state.cache = TickerCache()
    state.gateway = BroadcastGateway()
    state.aggregator = TickerAggregator(test_db, feed_parser, state.cache, state.gateway)
    state.scheduler = None
    aggregator = state.aggregator
    state.gateway.set_snapshot_provider(lambda dashboard_id: build_snapshot(test_db, aggregator, dashboard_id))

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    # Restore original state
    (
        state.db, state.feed_parser, state.cache,
        state.gateway, state.aggregator, state.scheduler,
    ) = original


@pytest.fixture
def client_with_data(client, feed_parser):
    """Test client with a second dashboard holding two feeds and a content item."""
    feed_parser.responses["https://a.example.com/rss"] = [
        entry("a1", "2025-01-02T00:00:00Z"),
        entry("a2", "2025-01-01T00:00:00Z"),
    ]
    feed_parser.responses["https://b.example.com/rss"] = [
        entry("b1", "2025-01-03T00:00:00Z"),
    ]

    client.post("/api/dashboards", json={"id": "lobby", "name": "Lobby"})
    feed_a = client.post(
        "/api/feeds?dashboard=lobby", json={"url": "https://a.example.com/rss", "name": "A"}
    ).json()
    feed_b = client.post(
        "/api/feeds?dashboard=lobby", json={"url": "https://b.example.com/rss", "name": "B"}
    ).json()
    content = client.post(
        "/api/content?dashboard=lobby", json={"url": "https://example.com/page", "title": "Page"}
    ).json()

    yield client, {
        "dashboard_id": "lobby",
        "feed_ids": [feed_a["id"], feed_b["id"]],
        "content_id": content["id"],
    }
