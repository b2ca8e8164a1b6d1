"""
Ticker Aggregator - Build one dashboard's ticker from all of its feeds.

A refresh cycle reads the dashboard's feeds and config, fetches every feed
concurrently, normalizes and ranks the entries, replaces the cached ticker
and pushes the new list to live subscribers.

At most one cycle per dashboard runs at a time. A refresh requested while
another is in flight waits for it and then runs.
"""

import asyncio
import logging
from datetime import datetime
from typing import TYPE_CHECKING

from .exceptions import DashboardNotFoundError
from .normalizer import TickerItem, normalize_entry, rank_items

if TYPE_CHECKING:
    from .broadcast import BroadcastGateway
    from .cache import TickerCache
    from .database import Database
    from .feeds import FeedParser

logger = logging.getLogger(__name__)


class TickerAggregator:
    """Runs refresh cycles and owns all writes to the ticker cache."""

    def __init__(
        self,
        db: "Database",
        feed_parser: "FeedParser",
        cache: "TickerCache",
        gateway: "BroadcastGateway",
    ):
        self.db = db
        self.feed_parser = feed_parser
        self.cache = cache
        self.gateway = gateway
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock(self, dashboard_id: str) -> asyncio.Lock:
        lock = self._locks.get(dashboard_id)
        if lock is None:
            lock = self._locks[dashboard_id] = asyncio.Lock()
        return lock

    def is_refreshing(self, dashboard_id: str) -> bool:
        """Whether a refresh cycle for this dashboard is in flight."""
        lock = self._locks.get(dashboard_id)
        return lock is not None and lock.locked()

    def current_items(self, dashboard_id: str) -> list[TickerItem]:
        """Cached ticker items. Never touches the network."""
        return self.cache.items(dashboard_id)

    async def refresh(
        self,
        dashboard_id: str,
        started_at: datetime | None = None,
    ) -> list[TickerItem]:
        """
        Run one refresh cycle for a dashboard.

        Args:
            dashboard_id: Dashboard to refresh
            started_at: Refresh time to record in the cache; defaults to
                when the cycle finishes

        Returns:
            The ranked, truncated ticker items now in the cache

        Raises:
            DashboardNotFoundError: If the dashboard does not exist
        """
        async with self._lock(dashboard_id):
            return await self._run(dashboard_id, started_at)

    async def clear(self, dashboard_id: str, notify: bool = True) -> None:
        """
        Empty a dashboard's ticker right away.

        Does not wait for an in-flight cycle; that cycle re-checks the
        dashboard before writing, so it cannot bring the items back.
        """
        self.cache.clear(dashboard_id)
        logger.info(f"Cleared ticker for dashboard {dashboard_id}")
        if notify:
            await self.gateway.emit_ticker(dashboard_id, [])

    def forget(self, dashboard_id: str) -> None:
        """Drop cached state and the lock of a deleted dashboard."""
        self.cache.clear(dashboard_id)
        lock = self._locks.get(dashboard_id)
        if lock is not None and not lock.locked():
            del self._locks[dashboard_id]

    async def _run(self, dashboard_id: str, started_at: datetime | None) -> list[TickerItem]:
        config = self.db.get_config(dashboard_id)

        if not config.ticker_enabled:
            self.cache.set(dashboard_id, [], refreshed_at=started_at)
            await self.gateway.emit_ticker(dashboard_id, [])
            return []

        feeds = self.db.get_feeds(dashboard_id)
        results = await self.feed_parser.fetch_multiple(feeds)

        items = [
            normalize_entry(entry, feed)
            for feed, entries in zip(feeds, results)
            for entry in entries
        ]
        ranked = rank_items(items, config.max_ticker_items)

        # Config may have changed while the fetches were running
        try:
            latest = self.db.get_config(dashboard_id)
        except DashboardNotFoundError:
            logger.info(f"Dashboard {dashboard_id} deleted during refresh, discarding result")
            self.cache.clear(dashboard_id)
            return []
        if not latest.ticker_enabled:
            ranked = []
        elif latest.max_ticker_items < len(ranked):
            ranked = ranked[:latest.max_ticker_items]

        self.cache.set(dashboard_id, ranked, refreshed_at=started_at)
        failed = sum(1 for feed, entries in zip(feeds, results) if not entries)
        logger.debug(
            f"Refreshed dashboard {dashboard_id}: {len(ranked)} items "
            f"from {len(feeds)} feeds ({failed} empty or failed)"
        )

        await self.gateway.emit_ticker(dashboard_id, ranked)
        return ranked
