"""
Feed Parser - Fetch and parse RSS/Atom feeds for the ticker.

Handles:
- RSS 2.0 and Atom 1.0 formats
- A hard timeout per feed
- Failure isolation: one broken feed never fails a dashboard's refresh
"""

import asyncio
import logging
from typing import Any

import aiohttp
import feedparser

from .database.models import DBFeed

logger = logging.getLogger(__name__)


class FeedParseError(ValueError):
    """Raised when a feed document cannot be parsed into entries."""


class FeedParser:
    """Fetches and parses one feed at a time. Safe to share across tasks."""

    def __init__(self, timeout: float = 15, user_agent: str | None = None):
        self.timeout = timeout
        self.user_agent = user_agent or "News Ticker/1.0"

    async def fetch(self, url: str) -> list[Any]:
        """
        Fetch and parse a feed URL.

        Returns:
            The raw feedparser entries, in document order

        Raises:
            aiohttp.ClientError: On network or HTTP status errors
            FeedParseError: If the document is not a usable feed
        """
        headers = {"User-Agent": self.user_agent}

        async with aiohttp.ClientSession() as session:
            async with session.get(
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as resp:
                resp.raise_for_status()
                content = await resp.read()

        return self.parse(content)

    def parse(self, content: bytes | str) -> list[Any]:
        """Parse feed content using feedparser."""
        parsed = feedparser.parse(content)

        # feedparser sets bozo for recoverable issues too; only fail when nothing came out
        if parsed.bozo and not parsed.entries:
            raise FeedParseError(f"Failed to parse feed: {parsed.get('bozo_exception')}")

        return list(parsed.entries)

    async def fetch_entries(self, feed: DBFeed) -> list[Any]:
        """
        Fetch one feed source, treating any failure as zero entries.

        Network errors, malformed documents and timeouts are logged and
        swallowed here. There is no retry; the next refresh cycle is the retry.
        """
        try:
            entries = await asyncio.wait_for(self.fetch(feed.url), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Timed out fetching feed {feed.url} for dashboard {feed.dashboard_id} "
                f"after {self.timeout}s"
            )
            return []
        except Exception as e:
            logger.warning(
                f"Error fetching feed {feed.url} for dashboard {feed.dashboard_id}: {e}"
            )
            return []

        logger.debug(f"Fetched {len(entries)} entries from {feed.url}")
        return entries

    async def fetch_multiple(self, feeds: list[DBFeed]) -> list[list[Any]]:
        """
        Fetch several feed sources concurrently.

        Waits for every fetch to settle. The result lines up with `feeds`;
        a failed source contributes an empty list.
        """
        results = await asyncio.gather(
            *[self.fetch_entries(feed) for feed in feeds],
            return_exceptions=True,
        )
        settled = []
        for feed, result in zip(feeds, results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                logger.warning(f"Unexpected error fetching feed {feed.url}: {result}")
                settled.append([])
            else:
                settled.append(result)
        return settled
