"""
Dashboard repository - CRUD operations for dashboards.
"""

from .connection import DatabaseConnection, utc_now_iso
from .converters import row_to_dashboard
from .models import DBDashboard


class DashboardRepository:
    """Repository for dashboard operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get(self, dashboard_id: str) -> DBDashboard | None:
        """Get single dashboard by ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM dashboards WHERE id = ?", (dashboard_id,)
            ).fetchone()
            return row_to_dashboard(row) if row else None

    def get_all(self) -> list[DBDashboard]:
        """Get all dashboards in creation order."""
        with self._db.conn() as conn:
            rows = conn.execute(
                "SELECT * FROM dashboards ORDER BY created_at, id"
            ).fetchall()
            return [row_to_dashboard(row) for row in rows]

    def add(self, dashboard_id: str, name: str | None = None, description: str | None = None) -> DBDashboard:
        """
        Create a dashboard together with its config row.

        Both inserts share one transaction, so a dashboard never exists
        without its configuration.
        """
        with self._db.conn() as conn:
            conn.execute(
                "INSERT INTO dashboards (id, name, description, created_at) VALUES (?, ?, ?, ?)",
                (dashboard_id, name or dashboard_id, description or "", utc_now_iso())
            )
            conn.execute("INSERT INTO config (dashboard_id) VALUES (?)", (dashboard_id,))
        return self.get(dashboard_id)

    def update(
        self,
        dashboard_id: str,
        name: str | None = None,
        description: str | None = None
    ) -> DBDashboard | None:
        """Update dashboard details. Returns None if the dashboard does not exist."""
        with self._db.conn() as conn:
            if name:
                conn.execute("UPDATE dashboards SET name = ? WHERE id = ?", (name, dashboard_id))
            if description is not None:
                conn.execute(
                    "UPDATE dashboards SET description = ? WHERE id = ?", (description, dashboard_id)
                )
        return self.get(dashboard_id)

    def delete(self, dashboard_id: str) -> bool:
        """Delete a dashboard. Feeds, content and config go with it (cascade)."""
        with self._db.conn() as conn:
            cursor = conn.execute("DELETE FROM dashboards WHERE id = ?", (dashboard_id,))
            return cursor.rowcount > 0
