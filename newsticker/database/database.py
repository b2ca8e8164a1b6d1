"""
Database facade - provides unified access to all repositories.

The ticker core only reads through this facade (feeds, config, polling
candidates). Everything else is used by the request layer.
"""

from pathlib import Path

from .connection import DatabaseConnection, DEFAULT_DASHBOARD_ID
from .dashboard_repository import DashboardRepository
from .feed_repository import FeedRepository
from .content_repository import ContentRepository
from .config_repository import ConfigRepository
from .migration import import_legacy_json
from .models import DBConfig, DBContent, DBDashboard, DBFeed


class Database:
    """
    Unified database access facade.

    Creates the default dashboard on open, so it always exists.
    """

    DEFAULT_DASHBOARD_ID = DEFAULT_DASHBOARD_ID

    def __init__(self, db_path: Path, legacy_data_dir: Path | None = None):
        self._connection = DatabaseConnection(db_path)

        # Initialize repositories
        self.dashboards = DashboardRepository(self._connection)
        self.feeds = FeedRepository(self._connection)
        self.content = ContentRepository(self._connection)
        self.config = ConfigRepository(self._connection)

        if legacy_data_dir is not None:
            import_legacy_json(self._connection, legacy_data_dir)
        self._connection.ensure_default_dashboard()

    # ─────────────────────────────────────────────────────────────
    # Dashboard operations (delegated to DashboardRepository)
    # ─────────────────────────────────────────────────────────────

    def get_dashboards(self) -> list[DBDashboard]:
        return self.dashboards.get_all()

    def get_dashboard(self, dashboard_id: str) -> DBDashboard | None:
        return self.dashboards.get(dashboard_id)

    def add_dashboard(
        self,
        dashboard_id: str,
        name: str | None = None,
        description: str | None = None
    ) -> DBDashboard:
        return self.dashboards.add(dashboard_id, name, description)

    def update_dashboard(
        self,
        dashboard_id: str,
        name: str | None = None,
        description: str | None = None
    ) -> DBDashboard | None:
        return self.dashboards.update(dashboard_id, name, description)

    def delete_dashboard(self, dashboard_id: str) -> bool:
        return self.dashboards.delete(dashboard_id)

    # ─────────────────────────────────────────────────────────────
    # Feed operations (delegated to FeedRepository)
    # ─────────────────────────────────────────────────────────────

    def get_feeds(self, dashboard_id: str) -> list[DBFeed]:
        return self.feeds.get_all(dashboard_id)

    def get_feed(self, feed_id: str, dashboard_id: str) -> DBFeed | None:
        return self.feeds.get(feed_id, dashboard_id)

    def add_feed(
        self,
        dashboard_id: str,
        url: str,
        name: str | None = None,
        logo: str | None = None
    ) -> DBFeed:
        return self.feeds.add(dashboard_id, url, name, logo)

    def update_feed(
        self,
        feed_id: str,
        dashboard_id: str,
        url: str | None = None,
        name: str | None = None,
        logo: str | None = None,
        clear_logo: bool = False
    ) -> DBFeed | None:
        return self.feeds.update(feed_id, dashboard_id, url, name, logo, clear_logo)

    def delete_feed(self, feed_id: str, dashboard_id: str) -> bool:
        return self.feeds.delete(feed_id, dashboard_id)

    def count_feeds(self, dashboard_id: str) -> int:
        return self.feeds.count(dashboard_id)

    # ─────────────────────────────────────────────────────────────
    # Content operations (delegated to ContentRepository)
    # ─────────────────────────────────────────────────────────────

    def get_content(self, dashboard_id: str) -> list[DBContent]:
        return self.content.get_all(dashboard_id)

    def get_content_item(self, content_id: str, dashboard_id: str) -> DBContent | None:
        return self.content.get(content_id, dashboard_id)

    def add_content(
        self,
        dashboard_id: str,
        url: str,
        title: str | None = None,
        content_type: str | None = None
    ) -> DBContent:
        return self.content.add(dashboard_id, url, title, content_type)

    def update_content(
        self,
        content_id: str,
        dashboard_id: str,
        url: str | None = None,
        title: str | None = None,
        content_type: str | None = None
    ) -> DBContent | None:
        return self.content.update(content_id, dashboard_id, url, title, content_type)

    def delete_content(self, content_id: str, dashboard_id: str) -> bool:
        return self.content.delete(content_id, dashboard_id)

    # ─────────────────────────────────────────────────────────────
    # Config operations (delegated to ConfigRepository)
    # ─────────────────────────────────────────────────────────────

    def get_config(self, dashboard_id: str) -> DBConfig:
        return self.config.get(dashboard_id)

    def update_config(
        self,
        dashboard_id: str,
        rotation_interval: int | None = None,
        ticker_refresh_interval: int | None = None,
        max_ticker_items: int | None = None,
        ticker_enabled: bool | None = None
    ) -> DBConfig:
        return self.config.update(
            dashboard_id, rotation_interval, ticker_refresh_interval, max_ticker_items, ticker_enabled
        )

    def get_ticker_enabled_dashboards(self) -> list[str]:
        return self.config.get_ticker_enabled_dashboards()

    def get_min_ticker_refresh_interval(self) -> int:
        return self.config.get_min_ticker_refresh_interval()
