"""
Config repository - per-dashboard timing and ticker configuration.
"""

from ..exceptions import DashboardNotFoundError
from .connection import DatabaseConnection
from .converters import row_to_config
from .models import DBConfig, DEFAULT_TICKER_REFRESH_INTERVAL


class ConfigRepository:
    """Repository for dashboard configuration."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get(self, dashboard_id: str) -> DBConfig:
        """
        Get a dashboard's configuration.

        Raises:
            DashboardNotFoundError: If the dashboard does not exist
        """
        with self._db.conn() as conn:
            row = conn.execute(
                """SELECT c.* FROM config c
                   JOIN dashboards d ON d.id = c.dashboard_id
                   WHERE c.dashboard_id = ?""",
                (dashboard_id,)
            ).fetchone()
            if row:
                return row_to_config(row)

            exists = conn.execute(
                "SELECT 1 FROM dashboards WHERE id = ?", (dashboard_id,)
            ).fetchone()
            if not exists:
                raise DashboardNotFoundError(dashboard_id)

            # Repair a dashboard that lost its config row (pre-cascade databases)
            conn.execute("INSERT INTO config (dashboard_id) VALUES (?)", (dashboard_id,))
            return DBConfig(dashboard_id=dashboard_id)

    def update(
        self,
        dashboard_id: str,
        rotation_interval: int | None = None,
        ticker_refresh_interval: int | None = None,
        max_ticker_items: int | None = None,
        ticker_enabled: bool | None = None,
    ) -> DBConfig:
        """
        Apply a partial update. None leaves the field unchanged.

        Raises:
            DashboardNotFoundError: If the dashboard does not exist
        """
        current = self.get(dashboard_id)
        if rotation_interval is not None:
            current.rotation_interval = rotation_interval
        if ticker_refresh_interval is not None:
            current.ticker_refresh_interval = ticker_refresh_interval
        if max_ticker_items is not None:
            current.max_ticker_items = max_ticker_items
        if ticker_enabled is not None:
            current.ticker_enabled = ticker_enabled

        with self._db.conn() as conn:
            conn.execute(
                """UPDATE config SET rotation_interval = ?, ticker_refresh_interval = ?,
                   max_ticker_items = ?, ticker_enabled = ? WHERE dashboard_id = ?""",
                (current.rotation_interval, current.ticker_refresh_interval,
                 current.max_ticker_items, int(current.ticker_enabled), dashboard_id)
            )
        return current

    def get_ticker_enabled_dashboards(self) -> list[str]:
        """IDs of dashboards with the ticker enabled and at least one feed."""
        with self._db.conn() as conn:
            rows = conn.execute("""
                SELECT DISTINCT d.id
                FROM dashboards d
                JOIN config c ON d.id = c.dashboard_id
                JOIN feeds f ON d.id = f.dashboard_id
                WHERE c.ticker_enabled = 1
                ORDER BY d.id
            """).fetchall()
            return [row["id"] for row in rows]

    def get_min_ticker_refresh_interval(self) -> int:
        """
        Smallest refresh interval (ms) among dashboards that are polled.

        Falls back to the default interval when no dashboard qualifies.
        """
        with self._db.conn() as conn:
            row = conn.execute("""
                SELECT MIN(c.ticker_refresh_interval) AS min_interval
                FROM config c
                JOIN feeds f ON c.dashboard_id = f.dashboard_id
                WHERE c.ticker_enabled = 1
            """).fetchone()
            if row is None or row["min_interval"] is None:
                return DEFAULT_TICKER_REFRESH_INTERVAL
            return int(row["min_interval"])
