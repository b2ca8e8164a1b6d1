"""
Database connection management and schema initialization.
"""

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

DEFAULT_DASHBOARD_ID = "default"
DEFAULT_DASHBOARD_NAME = "Default Dashboard"


class DatabaseConnection:
    """Manages database connection and schema."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def conn(self) -> Iterator[sqlite3.Connection]:
        """Get database connection with row factory. Commits on success."""
        connection = sqlite3.connect(self.db_path)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        try:
            yield connection
            connection.commit()
        except Exception:
            connection.rollback()
            raise
        finally:
            connection.close()

    def _init_schema(self):
        """Initialize database schema."""
        with self.conn() as connection:
            connection.execute("PRAGMA journal_mode = WAL")
            connection.executescript("""
                CREATE TABLE IF NOT EXISTS dashboards (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    description TEXT DEFAULT '',
                    created_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS feeds (
                    id TEXT PRIMARY KEY,
                    dashboard_id TEXT NOT NULL REFERENCES dashboards(id) ON DELETE CASCADE,
                    name TEXT NOT NULL,
                    url TEXT NOT NULL,
                    logo TEXT,
                    created_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS content (
                    id TEXT PRIMARY KEY,
                    dashboard_id TEXT NOT NULL REFERENCES dashboards(id) ON DELETE CASCADE,
                    url TEXT NOT NULL,
                    title TEXT NOT NULL,
                    type TEXT DEFAULT 'webpage',
                    created_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS config (
                    dashboard_id TEXT PRIMARY KEY REFERENCES dashboards(id) ON DELETE CASCADE,
                    rotation_interval INTEGER NOT NULL DEFAULT 30000,
                    ticker_refresh_interval INTEGER NOT NULL DEFAULT 300000,
                    max_ticker_items INTEGER NOT NULL DEFAULT 50,
                    ticker_enabled INTEGER NOT NULL DEFAULT 1
                );

                CREATE INDEX IF NOT EXISTS idx_feeds_dashboard ON feeds(dashboard_id);
                CREATE INDEX IF NOT EXISTS idx_content_dashboard ON content(dashboard_id);
            """)

    def ensure_default_dashboard(self):
        """Create the default dashboard and its config row if either is missing."""
        with self.conn() as connection:
            connection.execute(
                """INSERT OR IGNORE INTO dashboards (id, name, description, created_at)
                   VALUES (?, ?, ?, ?)""",
                (DEFAULT_DASHBOARD_ID, DEFAULT_DASHBOARD_NAME, "Default dashboard", utc_now_iso())
            )
            connection.execute(
                "INSERT OR IGNORE INTO config (dashboard_id) VALUES (?)",
                (DEFAULT_DASHBOARD_ID,)
            )


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()
