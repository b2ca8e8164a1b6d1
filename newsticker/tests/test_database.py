"""
Tests for the SQLite store.
"""

import pytest

from newsticker.database import Database
from newsticker.exceptions import DashboardNotFoundError


class TestDashboards:
    """Tests for dashboard storage."""

    def test_default_dashboard_created(self, test_db):
        dashboard = test_db.get_dashboard("default")
        assert dashboard is not None
        assert test_db.get_config("default").ticker_enabled is True

    def test_reopen_keeps_single_default(self, temp_db_path):
        Database(temp_db_path)
        db = Database(temp_db_path)
        assert [d.id for d in db.get_dashboards()] == ["default"]

    def test_add_creates_config(self, test_db):
        test_db.add_dashboard("d1", "One")
        config = test_db.get_config("d1")
        assert config.rotation_interval == 30000
        assert config.ticker_refresh_interval == 300000
        assert config.max_ticker_items == 50

    def test_delete_cascades(self, test_db):
        test_db.add_dashboard("d1")
        test_db.add_feed("d1", "https://example.com/rss")
        test_db.add_content("d1", "https://example.com/page")

        assert test_db.delete_dashboard("d1") is True

        assert test_db.get_feeds("d1") == []
        assert test_db.get_content("d1") == []
        with pytest.raises(DashboardNotFoundError):
            test_db.get_config("d1")

    def test_delete_unknown(self, test_db):
        assert test_db.delete_dashboard("missing") is False


class TestFeeds:
    """Tests for feed storage."""

    def test_add_feed_defaults(self, test_db):
        feed = test_db.add_feed("default", "https://example.com/rss")
        assert feed.name == "https://example.com/rss"
        assert feed.logo is None
        assert len(feed.id) == 36

    def test_feeds_scoped_to_dashboard(self, test_db):
        test_db.add_dashboard("d1")
        feed = test_db.add_feed("d1", "https://example.com/rss")

        assert test_db.get_feed(feed.id, "default") is None
        assert test_db.delete_feed(feed.id, "default") is False
        assert test_db.count_feeds("d1") == 1

    def test_update_feed(self, test_db):
        feed = test_db.add_feed("default", "https://example.com/rss", "Old", "https://example.com/l.png")

        updated = test_db.update_feed(feed.id, "default", name="New", clear_logo=True)

        assert updated.name == "New"
        assert updated.url == "https://example.com/rss"
        assert updated.logo is None

    def test_update_missing_feed(self, test_db):
        assert test_db.update_feed("missing", "default", name="x") is None


class TestConfig:
    """Tests for config storage and polling queries."""

    def test_unknown_dashboard_raises(self, test_db):
        with pytest.raises(DashboardNotFoundError):
            test_db.get_config("missing")

    def test_partial_update(self, test_db):
        test_db.update_config("default", max_ticker_items=5)
        config = test_db.update_config("default", ticker_enabled=False)
        assert config.max_ticker_items == 5
        assert config.ticker_enabled is False
        assert test_db.get_config("default") == config

    def test_enabled_dashboards_need_feeds(self, test_db):
        test_db.add_dashboard("with_feed")
        test_db.add_dashboard("without_feed")
        test_db.add_dashboard("disabled")
        test_db.add_feed("with_feed", "https://example.com/a")
        test_db.add_feed("with_feed", "https://example.com/b")
        test_db.add_feed("disabled", "https://example.com/a")
        test_db.update_config("disabled", ticker_enabled=False)

        assert test_db.get_ticker_enabled_dashboards() == ["with_feed"]

    def test_min_interval(self, test_db):
        assert test_db.get_min_ticker_refresh_interval() == 300000

        test_db.add_dashboard("d1")
        test_db.add_feed("d1", "https://example.com/a")
        test_db.update_config("d1", ticker_refresh_interval=60000)
        test_db.update_config("default", ticker_refresh_interval=1000)

        # default has no feeds, so it does not count
        assert test_db.get_min_ticker_refresh_interval() == 60000
