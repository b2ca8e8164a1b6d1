"""
Feed repository - CRUD operations for feed sources.
"""

import uuid

from .connection import DatabaseConnection, utc_now_iso
from .converters import row_to_feed
from .models import DBFeed


class FeedRepository:
    """Repository for feed source operations. Every query is scoped to a dashboard."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(
        self,
        dashboard_id: str,
        url: str,
        name: str | None = None,
        logo: str | None = None,
        feed_id: str | None = None,
        created_at: str | None = None,
    ) -> DBFeed:
        """Add a new feed to a dashboard. Name defaults to the url."""
        feed_id = feed_id or str(uuid.uuid4())
        with self._db.conn() as conn:
            conn.execute(
                """INSERT INTO feeds (id, dashboard_id, name, url, logo, created_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (feed_id, dashboard_id, name or url, url, logo or None, created_at or utc_now_iso())
            )
        return self.get(feed_id, dashboard_id)

    def get(self, feed_id: str, dashboard_id: str) -> DBFeed | None:
        """Get single feed by ID within a dashboard."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM feeds WHERE id = ? AND dashboard_id = ?",
                (feed_id, dashboard_id)
            ).fetchone()
            return row_to_feed(row) if row else None

    def get_all(self, dashboard_id: str) -> list[DBFeed]:
        """Get all feeds of a dashboard."""
        with self._db.conn() as conn:
            rows = conn.execute(
                "SELECT * FROM feeds WHERE dashboard_id = ? ORDER BY created_at, id",
                (dashboard_id,)
            ).fetchall()
            return [row_to_feed(row) for row in rows]

    def count(self, dashboard_id: str) -> int:
        """Number of feeds subscribed by a dashboard."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS c FROM feeds WHERE dashboard_id = ?", (dashboard_id,)
            ).fetchone()
            return row["c"]

    def update(
        self,
        feed_id: str,
        dashboard_id: str,
        url: str | None = None,
        name: str | None = None,
        logo: str | None = None,
        clear_logo: bool = False,
    ) -> DBFeed | None:
        """Update feed details. Use clear_logo=True to remove the logo."""
        with self._db.conn() as conn:
            if url:
                conn.execute(
                    "UPDATE feeds SET url = ? WHERE id = ? AND dashboard_id = ?",
                    (url, feed_id, dashboard_id)
                )
            if name:
                conn.execute(
                    "UPDATE feeds SET name = ? WHERE id = ? AND dashboard_id = ?",
                    (name, feed_id, dashboard_id)
                )
            if clear_logo:
                conn.execute(
                    "UPDATE feeds SET logo = NULL WHERE id = ? AND dashboard_id = ?",
                    (feed_id, dashboard_id)
                )
            elif logo:
                conn.execute(
                    "UPDATE feeds SET logo = ? WHERE id = ? AND dashboard_id = ?",
                    (logo, feed_id, dashboard_id)
                )
        return self.get(feed_id, dashboard_id)

    def delete(self, feed_id: str, dashboard_id: str) -> bool:
        """Delete a feed. Returns False if it was not found."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                "DELETE FROM feeds WHERE id = ? AND dashboard_id = ?", (feed_id, dashboard_id)
            )
            return cursor.rowcount > 0
