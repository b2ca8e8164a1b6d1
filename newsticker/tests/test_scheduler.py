"""
Tests for the ticker refresh scheduler.
"""

import asyncio

import pytest

from newsticker.scheduler import RefreshScheduler

from conftest import entry

FEED_URL = "https://a.example.com/rss"


@pytest.fixture
def scheduler(ticker):
    return RefreshScheduler(
        ticker.db,
        ticker.aggregator,
        min_tick_seconds=0.01,
        grace_seconds=0.5,
        clock=ticker.clock,
    )


def add_dashboard(ticker, dashboard_id: str, interval_ms: int = 60000, enabled: bool = True):
    ticker.db.add_dashboard(dashboard_id)
    ticker.db.add_feed(dashboard_id, FEED_URL)
    ticker.db.update_config(dashboard_id, ticker_refresh_interval=interval_ms, ticker_enabled=enabled)
    ticker.feed_parser.responses[FEED_URL] = [entry("1", "2025-01-01T00:00:00Z")]


class TestTick:
    """Tests for selecting and refreshing due dashboards."""

    @pytest.mark.asyncio
    async def test_never_refreshed_dashboards_are_due(self, ticker, scheduler):
        add_dashboard(ticker, "d1")

        tasks = scheduler.tick()
        await asyncio.gather(*tasks)

        assert len(tasks) == 1
        assert len(ticker.aggregator.current_items("d1")) == 1

    @pytest.mark.asyncio
    async def test_skips_disabled_and_feedless_dashboards(self, ticker, scheduler):
        add_dashboard(ticker, "off", enabled=False)
        ticker.db.add_dashboard("empty")

        assert scheduler.tick() == []

    @pytest.mark.asyncio
    async def test_respects_each_dashboards_interval(self, ticker, scheduler):
        add_dashboard(ticker, "fast", interval_ms=1000)
        add_dashboard(ticker, "slow", interval_ms=60000)
        await asyncio.gather(*scheduler.tick())

        ticker.clock.advance(seconds=2)
        await asyncio.gather(*scheduler.tick())

        assert ticker.feed_parser.calls.count(FEED_URL) == 3
        assert not scheduler.is_due("slow")
        assert scheduler.is_due("fast") is False

    @pytest.mark.asyncio
    async def test_due_exactly_at_interval(self, ticker, scheduler):
        add_dashboard(ticker, "d1", interval_ms=1000)
        await asyncio.gather(*scheduler.tick())

        ticker.clock.advance(milliseconds=999)
        assert not scheduler.is_due("d1")
        ticker.clock.advance(milliseconds=1)
        assert scheduler.is_due("d1")

    @pytest.mark.asyncio
    async def test_fetch_latency_does_not_delay_next_run(self, ticker, scheduler, monkeypatch):
        """A scheduled refresh is stamped with its tick time, not its finish time."""
        add_dashboard(ticker, "d1", interval_ms=1000)
        stub_fetch = ticker.feed_parser.fetch

        async def slow_fetch(url):
            ticker.clock.advance(milliseconds=200)
            return await stub_fetch(url)

        monkeypatch.setattr(ticker.feed_parser, "fetch", slow_fetch)
        tick_time = ticker.clock.now
        await asyncio.gather(*scheduler.tick())

        assert ticker.cache.refreshed_at("d1") == tick_time
        ticker.clock.advance(milliseconds=800)
        assert scheduler.is_due("d1")

    @pytest.mark.asyncio
    async def test_out_of_cycle_refresh_is_stamped_when_done(self, ticker, scheduler):
        add_dashboard(ticker, "d1", interval_ms=1000)
        ticker.clock.advance(seconds=5)

        await ticker.aggregator.refresh("d1")

        assert ticker.cache.refreshed_at("d1") == ticker.clock.now

    @pytest.mark.asyncio
    async def test_in_flight_refresh_is_skipped(self, ticker, scheduler):
        """A due dashboard still refreshing from the last tick is coalesced."""
        add_dashboard(ticker, "d1")
        ticker.feed_parser.delays[FEED_URL] = 0.1

        first = scheduler.tick()
        second = scheduler.tick()
        await asyncio.gather(*first)

        assert len(first) == 1
        assert second == []
        assert ticker.feed_parser.calls == [FEED_URL]

    @pytest.mark.asyncio
    async def test_out_of_cycle_refresh_is_skipped(self, ticker, scheduler):
        add_dashboard(ticker, "d1")
        ticker.feed_parser.delays[FEED_URL] = 0.1
        manual = asyncio.create_task(ticker.aggregator.refresh("d1"))
        await asyncio.sleep(0.01)

        assert scheduler.tick() == []
        await manual

    @pytest.mark.asyncio
    async def test_one_failing_dashboard_does_not_stop_others(self, ticker, scheduler, caplog):
        add_dashboard(ticker, "bad")
        add_dashboard(ticker, "good")
        real_refresh = ticker.aggregator.refresh

        async def flaky_refresh(dashboard_id, started_at=None):
            if dashboard_id == "bad":
                raise RuntimeError("merge exploded")
            return await real_refresh(dashboard_id, started_at=started_at)

        ticker.aggregator.refresh = flaky_refresh

        await asyncio.gather(*scheduler.tick())

        assert len(ticker.aggregator.current_items("good")) == 1
        assert "merge exploded" in caplog.text

    @pytest.mark.asyncio
    async def test_no_due_dashboards(self, scheduler):
        assert scheduler.tick() == []


class TestLifecycle:
    """Tests for start, stop and rearm."""

    @pytest.mark.asyncio
    async def test_start_ticks_immediately(self, ticker, scheduler):
        add_dashboard(ticker, "d1")

        await scheduler.start()
        await asyncio.sleep(0.05)

        assert scheduler.is_running
        assert len(ticker.aggregator.current_items("d1")) == 1
        await scheduler.stop()
        assert not scheduler.is_running

    @pytest.mark.asyncio
    async def test_interval_is_minimum_enabled_interval(self, ticker, scheduler):
        add_dashboard(ticker, "d1", interval_ms=5000)
        add_dashboard(ticker, "d2", interval_ms=2000)
        add_dashboard(ticker, "off", interval_ms=1000, enabled=False)

        await scheduler.start()
        try:
            assert scheduler.interval_ms == 2000
            assert scheduler.interval_seconds == 2
        finally:
            await scheduler.stop()

    @pytest.mark.asyncio
    async def test_default_interval_without_dashboards(self, scheduler):
        await scheduler.start()
        try:
            assert scheduler.interval_ms == 300000
        finally:
            await scheduler.stop()

    @pytest.mark.asyncio
    async def test_interval_floor(self, ticker):
        add_dashboard(ticker, "d1", interval_ms=1)
        scheduler = RefreshScheduler(ticker.db, ticker.aggregator, min_tick_seconds=1)

        await scheduler.start()
        try:
            assert scheduler.interval_seconds == 1
        finally:
            await scheduler.stop()

    @pytest.mark.asyncio
    async def test_rearm_on_interval_change(self, ticker, scheduler):
        add_dashboard(ticker, "d1", interval_ms=60000)
        await scheduler.start()
        try:
            assert await scheduler.rearm() is False

            ticker.db.update_config("d1", ticker_refresh_interval=1000)

            assert await scheduler.rearm() is True
            assert scheduler.interval_ms == 1000
            assert scheduler.is_running
        finally:
            await scheduler.stop()

    @pytest.mark.asyncio
    async def test_refreshes_once_per_interval(self, ticker):
        """With slow fetches the dashboard still refreshes on every tick."""
        add_dashboard(ticker, "d1", interval_ms=200)
        ticker.feed_parser.delays[FEED_URL] = 0.02
        scheduler = RefreshScheduler(ticker.db, ticker.aggregator, min_tick_seconds=0.01)

        await scheduler.start()
        await asyncio.sleep(1.1)
        await scheduler.stop()

        # Ticks at 0, 0.2, ... 1.0s; every other one would be skipped if
        # fetch time counted against the interval
        assert ticker.feed_parser.calls.count(FEED_URL) >= 5

    @pytest.mark.asyncio
    async def test_concurrent_rearms_leave_one_loop(self, ticker, scheduler):
        """Two config changes rearming at once must not orphan a loop task."""
        add_dashboard(ticker, "d1", interval_ms=60000)
        await scheduler.start()
        first_loop = scheduler._task
        ticker.db.update_config("d1", ticker_refresh_interval=1000)

        results = await asyncio.gather(scheduler.rearm(), scheduler.rearm())

        assert sorted(results) == [False, True]
        assert first_loop.done()
        loops = [t for t in asyncio.all_tasks() if t.get_coro().__name__ == "_tick_loop"]
        assert loops == [scheduler._task]

        await scheduler.stop()
        loops = [t for t in asyncio.all_tasks() if t.get_coro().__name__ == "_tick_loop"]
        assert all(t.done() for t in loops)

    @pytest.mark.asyncio
    async def test_stop_waits_for_rearm_in_progress(self, ticker, scheduler):
        add_dashboard(ticker, "d1", interval_ms=60000)
        await scheduler.start()
        ticker.db.update_config("d1", ticker_refresh_interval=1000)

        await asyncio.gather(scheduler.rearm(), scheduler.stop())

        assert not scheduler.is_running
        assert scheduler._task is None

    @pytest.mark.asyncio
    async def test_rearm_while_idle_is_noop(self, ticker, scheduler):
        add_dashboard(ticker, "d1", interval_ms=1000)
        assert await scheduler.rearm() is False
        assert not scheduler.is_running

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_loop(self, scheduler):
        await scheduler.start()
        task = scheduler._task
        await scheduler.start()
        assert scheduler._task is task
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_stop_abandons_slow_refreshes(self, ticker, scheduler):
        """Shutdown must not wait for a hanging fetch."""
        add_dashboard(ticker, "d1")
        ticker.feed_parser.timeout = 30
        ticker.feed_parser.delays[FEED_URL] = 30

        await scheduler.start()
        await asyncio.sleep(0.02)
        assert ticker.aggregator.is_refreshing("d1")

        loop = asyncio.get_running_loop()
        started = loop.time()
        await scheduler.stop()

        assert loop.time() - started < 1
        assert not ticker.aggregator.is_refreshing("d1")
