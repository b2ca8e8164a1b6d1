"""
One-shot import of the legacy JSON data layout into SQLite.

Older deployments kept their data as JSON files:

    <data_dir>/dashboards.json
    <data_dir>/dashboards/<id>/feeds.json, content.json, config.json
    <data_dir>/feeds.json, content.json, config.json   (pre-dashboard, default only)

The import only runs against an empty database and is a single transaction.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from .connection import DatabaseConnection, DEFAULT_DASHBOARD_ID, DEFAULT_DASHBOARD_NAME, utc_now_iso
from .models import DEFAULT_MAX_TICKER_ITEMS, DEFAULT_ROTATION_INTERVAL, DEFAULT_TICKER_REFRESH_INTERVAL

logger = logging.getLogger(__name__)

LEGACY_FILES = ("feeds.json", "content.json", "config.json")


def _read_json(path: Path | None, default: Any) -> Any:
    """Read a JSON file, returning default when missing or unreadable."""
    if path is None:
        return default
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Skipping unreadable legacy file {path}: {e}")
        return default


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _has_legacy_data(data_dir: Path) -> bool:
    return (
        (data_dir / "dashboards.json").exists()
        or (data_dir / "dashboards").is_dir()
        or any((data_dir / name).exists() for name in LEGACY_FILES)
    )


def _collect_dashboards(data_dir: Path) -> list[dict]:
    """Dashboards from dashboards.json plus any dashboard directory it does not list."""
    dashboards = _read_json(data_dir / "dashboards.json", [])
    if not isinstance(dashboards, list):
        dashboards = []
    dashboards = [d for d in dashboards if isinstance(d, dict) and d.get("id")]
    known = {d["id"] for d in dashboards}

    dashboards_dir = data_dir / "dashboards"
    if dashboards_dir.is_dir():
        for entry in sorted(dashboards_dir.iterdir()):
            if entry.is_dir() and entry.name not in known:
                dashboards.append({
                    "id": entry.name,
                    "name": f"{entry.name.capitalize()} Dashboard",
                })

    if not dashboards:
        dashboards.append({
            "id": DEFAULT_DASHBOARD_ID,
            "name": DEFAULT_DASHBOARD_NAME,
            "description": "Default dashboard",
        })
    return dashboards


def _resolve(data_dir: Path, dashboard_id: str, filename: str) -> Path | None:
    """Per-dashboard file first, then the flat pre-dashboard file for default."""
    per_dashboard = data_dir / "dashboards" / dashboard_id / filename
    if per_dashboard.exists():
        return per_dashboard
    if dashboard_id == DEFAULT_DASHBOARD_ID and (data_dir / filename).exists():
        return data_dir / filename
    return None


def _import_dashboard(conn: sqlite3.Connection, data_dir: Path, dashboard: dict):
    dashboard_id = dashboard["id"]
    now = utc_now_iso()
    conn.execute(
        "INSERT OR IGNORE INTO dashboards (id, name, description, created_at) VALUES (?, ?, ?, ?)",
        (dashboard_id, dashboard.get("name") or dashboard_id, dashboard.get("description") or "",
         dashboard.get("createdAt") or now)
    )

    for feed in _read_json(_resolve(data_dir, dashboard_id, "feeds.json"), []):
        if not isinstance(feed, dict) or not feed.get("id") or not feed.get("url"):
            continue
        conn.execute(
            """INSERT OR IGNORE INTO feeds (id, dashboard_id, name, url, logo, created_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (str(feed["id"]), dashboard_id, feed.get("name") or feed["url"], feed["url"],
             feed.get("logo") or None, feed.get("createdAt") or now)
        )

    for item in _read_json(_resolve(data_dir, dashboard_id, "content.json"), []):
        if not isinstance(item, dict) or not item.get("id") or not item.get("url"):
            continue
        conn.execute(
            """INSERT OR IGNORE INTO content (id, dashboard_id, url, title, type, created_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (str(item["id"]), dashboard_id, item["url"], item.get("title") or item["url"],
             item.get("type") or "webpage", item.get("createdAt") or now)
        )

    cfg = _read_json(_resolve(data_dir, dashboard_id, "config.json"), {})
    if not isinstance(cfg, dict):
        cfg = {}
    conn.execute(
        """INSERT OR IGNORE INTO config
           (dashboard_id, rotation_interval, ticker_refresh_interval, max_ticker_items, ticker_enabled)
           VALUES (?, ?, ?, ?, ?)""",
        (dashboard_id,
         _as_int(cfg.get("rotationInterval"), DEFAULT_ROTATION_INTERVAL),
         _as_int(cfg.get("tickerRefreshInterval"), DEFAULT_TICKER_REFRESH_INTERVAL),
         _as_int(cfg.get("maxTickerItems"), DEFAULT_MAX_TICKER_ITEMS),
         0 if cfg.get("tickerEnabled") is False else 1)
    )


def import_legacy_json(db: DatabaseConnection, data_dir: Path) -> int:
    """
    Import legacy JSON data when the database has no dashboards yet.

    Returns:
        Number of dashboards imported (0 when skipped)
    """
    with db.conn() as conn:
        count = conn.execute("SELECT COUNT(*) AS c FROM dashboards").fetchone()["c"]
    if count > 0 or not data_dir.is_dir() or not _has_legacy_data(data_dir):
        return 0

    logger.info(f"Importing legacy JSON data from {data_dir}")
    dashboards = _collect_dashboards(data_dir)
    with db.conn() as conn:
        for dashboard in dashboards:
            _import_dashboard(conn, data_dir, dashboard)

    logger.info(f"Legacy import complete: {len(dashboards)} dashboard(s)")
    return len(dashboards)
