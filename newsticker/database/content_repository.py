"""
Content repository - CRUD operations for the rotating content playlist.
"""

import uuid

from .connection import DatabaseConnection, utc_now_iso
from .converters import row_to_content
from .models import DBContent


class ContentRepository:
    """Repository for content playlist operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(
        self,
        dashboard_id: str,
        url: str,
        title: str | None = None,
        content_type: str | None = None,
        content_id: str | None = None,
        created_at: str | None = None,
    ) -> DBContent:
        """Add a content item. Title defaults to the url, type to 'webpage'."""
        content_id = content_id or str(uuid.uuid4())
        with self._db.conn() as conn:
            conn.execute(
                """INSERT INTO content (id, dashboard_id, url, title, type, created_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (content_id, dashboard_id, url, title or url, content_type or "webpage",
                 created_at or utc_now_iso())
            )
        return self.get(content_id, dashboard_id)

    def get(self, content_id: str, dashboard_id: str) -> DBContent | None:
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM content WHERE id = ? AND dashboard_id = ?",
                (content_id, dashboard_id)
            ).fetchone()
            return row_to_content(row) if row else None

    def get_all(self, dashboard_id: str) -> list[DBContent]:
        with self._db.conn() as conn:
            rows = conn.execute(
                "SELECT * FROM content WHERE dashboard_id = ? ORDER BY created_at, id",
                (dashboard_id,)
            ).fetchall()
            return [row_to_content(row) for row in rows]

    def update(
        self,
        content_id: str,
        dashboard_id: str,
        url: str | None = None,
        title: str | None = None,
        content_type: str | None = None,
    ) -> DBContent | None:
        """Update a content item. Empty values leave the field unchanged."""
        fields = {"url": url, "title": title, "type": content_type}
        with self._db.conn() as conn:
            for column, value in fields.items():
                if value:
                    conn.execute(
                        f"UPDATE content SET {column} = ? WHERE id = ? AND dashboard_id = ?",
                        (value, content_id, dashboard_id)
                    )
        return self.get(content_id, dashboard_id)

    def delete(self, content_id: str, dashboard_id: str) -> bool:
        with self._db.conn() as conn:
            cursor = conn.execute(
                "DELETE FROM content WHERE id = ? AND dashboard_id = ?", (content_id, dashboard_id)
            )
            return cursor.rowcount > 0
