"""
Ticker Refresh Scheduler.

Background task that periodically refreshes every dashboard whose ticker is
due. One loop serves all dashboards; its period is the smallest refresh
interval among the enabled dashboards, so a fast dashboard is never starved
by a slow global tick.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

from .exceptions import DashboardNotFoundError

if TYPE_CHECKING:
    from .aggregator import TickerAggregator
    from .database import Database


logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RefreshScheduler:
    """
    Background scheduler for ticker refreshes.

    Two states: idle (no loop task) and running (one loop task). The loop is
    torn down and started again by rearm() when the minimum refresh interval
    changes.
    """

    def __init__(
        self,
        db: "Database",
        aggregator: "TickerAggregator",
        min_tick_seconds: float = 1.0,
        grace_seconds: float = 5.0,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.db = db
        self.aggregator = aggregator
        self.min_tick_seconds = min_tick_seconds
        self.grace_seconds = grace_seconds
        self._clock = clock
        self._task: asyncio.Task | None = None
        self._running = False
        self._interval_ms: int | None = None
        self._in_flight: dict[str, asyncio.Task] = {}
        # start, stop and rearm swap the loop task; only one may run at a time
        self._lifecycle_lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def interval_ms(self) -> int | None:
        """The minimum refresh interval the loop is armed with."""
        return self._interval_ms

    @property
    def interval_seconds(self) -> float:
        """Sleep between ticks."""
        if self._interval_ms is None:
            return self.min_tick_seconds
        return max(self._interval_ms / 1000, self.min_tick_seconds)

    async def start(self):
        """Start the refresh loop. The first tick runs immediately."""
        async with self._lifecycle_lock:
            if self._running:
                return

            self._interval_ms = self.db.get_min_ticker_refresh_interval()
            self._running = True
            self._task = asyncio.create_task(self._tick_loop())
            logger.info(f"Ticker refresh scheduler started (interval: {self.interval_seconds}s)")

    async def stop(self):
        """
        Stop the loop and abandon in-flight refreshes.

        Waits at most grace_seconds for cancelled refreshes to unwind.
        """
        async with self._lifecycle_lock:
            self._running = False
            await self._cancel_loop()

            pending = list(self._in_flight.values())
            for task in pending:
                task.cancel()
            if pending:
                _, still_pending = await asyncio.wait(pending, timeout=self.grace_seconds)
                if still_pending:
                    logger.warning(
                        f"{len(still_pending)} ticker refreshes did not stop within "
                        f"{self.grace_seconds}s"
                    )
            self._in_flight.clear()

            logger.info("Ticker refresh scheduler stopped")

    async def rearm(self) -> bool:
        """
        Re-arm the loop if the minimum refresh interval changed.

        Call after anything that can change it: config updates, feed
        additions and removals, dashboard deletion. In-flight refreshes are
        left running.

        Returns:
            True if the loop was restarted
        """
        async with self._lifecycle_lock:
            if not self._running:
                return False

            new_interval = self.db.get_min_ticker_refresh_interval()
            if new_interval == self._interval_ms:
                return False

            await self._cancel_loop()
            self._interval_ms = new_interval
            self._task = asyncio.create_task(self._tick_loop())
            logger.info(f"Ticker refresh interval updated to {self.interval_seconds}s")
            return True

    def is_due(self, dashboard_id: str, now: datetime | None = None) -> bool:
        """Whether a dashboard's last refresh is older than its refresh interval."""
        refreshed_at = self.aggregator.cache.refreshed_at(dashboard_id)
        if refreshed_at is None:
            return True
        config = self.db.get_config(dashboard_id)
        now = now or self._clock()
        elapsed_ms = (now - refreshed_at).total_seconds() * 1000
        return elapsed_ms >= config.ticker_refresh_interval

    def tick(self) -> list[asyncio.Task]:
        """
        Start a refresh for every due dashboard.

        Each dashboard refreshes in its own task. A dashboard whose previous
        refresh is still running is skipped this tick.

        Returns:
            The refresh tasks started by this tick
        """
        now = self._clock()
        started = []

        for dashboard_id in self.db.get_ticker_enabled_dashboards():
            if dashboard_id in self._in_flight or self.aggregator.is_refreshing(dashboard_id):
                logger.debug(f"Refresh for dashboard {dashboard_id} still running, skipping")
                continue
            try:
                due = self.is_due(dashboard_id, now)
            except DashboardNotFoundError:
                continue
            if not due:
                continue

            task = asyncio.create_task(self._refresh(dashboard_id, now))
            self._in_flight[dashboard_id] = task
            task.add_done_callback(lambda t, d=dashboard_id: self._finished(d, t))
            started.append(task)

        if started:
            logger.debug(f"Scheduler tick: refreshing {len(started)} dashboards")
        return started

    def _finished(self, dashboard_id: str, task: asyncio.Task):
        if self._in_flight.get(dashboard_id) is task:
            del self._in_flight[dashboard_id]

    async def _refresh(self, dashboard_id: str, started_at: datetime):
        """
        Refresh one dashboard. Failures are logged and retried next tick.

        The cache records the tick time rather than the finish time, so the
        next tick one interval later finds the dashboard due again.
        """
        try:
            await self.aggregator.refresh(dashboard_id, started_at=started_at)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception(f"Scheduled refresh failed for dashboard {dashboard_id}: {e}")

    async def _tick_loop(self):
        """Main scheduling loop."""
        while self._running:
            try:
                self.tick()
            except Exception as e:
                logger.exception(f"Error in ticker refresh loop: {e}")

            await asyncio.sleep(self.interval_seconds)

    async def _cancel_loop(self):
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
