"""
Database row converters - convert SQLite rows to dataclasses.
"""

import sqlite3
from datetime import datetime, timezone

from .models import DBConfig, DBContent, DBDashboard, DBFeed


def _parse_timestamp(value: str | None) -> datetime:
    """Parse a stored ISO timestamp, falling back to now for bad rows."""
    if value:
        try:
            parsed = datetime.fromisoformat(value)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
        except ValueError:
            pass
    return datetime.now(timezone.utc)


def row_to_dashboard(row: sqlite3.Row) -> DBDashboard:
    """Convert a database row to a DBDashboard."""
    return DBDashboard(
        id=row["id"],
        name=row["name"],
        description=row["description"] or "",
        created_at=_parse_timestamp(row["created_at"]),
    )


def row_to_feed(row: sqlite3.Row) -> DBFeed:
    """Convert a database row to a DBFeed."""
    return DBFeed(
        id=row["id"],
        dashboard_id=row["dashboard_id"],
        url=row["url"],
        name=row["name"] or row["url"],
        logo=row["logo"] or None,
        created_at=_parse_timestamp(row["created_at"]),
    )


def row_to_content(row: sqlite3.Row) -> DBContent:
    """Convert a database row to a DBContent."""
    return DBContent(
        id=row["id"],
        dashboard_id=row["dashboard_id"],
        url=row["url"],
        title=row["title"] or row["url"],
        type=row["type"] or "webpage",
        created_at=_parse_timestamp(row["created_at"]),
    )


def row_to_config(row: sqlite3.Row) -> DBConfig:
    """Convert a database row to a DBConfig."""
    return DBConfig(
        dashboard_id=row["dashboard_id"],
        rotation_interval=int(row["rotation_interval"]),
        ticker_refresh_interval=int(row["ticker_refresh_interval"]),
        max_ticker_items=int(row["max_ticker_items"]),
        ticker_enabled=bool(row["ticker_enabled"]),
    )
