"""
Database module - SQLite storage for dashboards, feeds, content and config.

Uses repository pattern for better separation of concerns.
"""

from .connection import DatabaseConnection, DEFAULT_DASHBOARD_ID
from .models import DBConfig, DBContent, DBDashboard, DBFeed
from .dashboard_repository import DashboardRepository
from .feed_repository import FeedRepository
from .content_repository import ContentRepository
from .config_repository import ConfigRepository
from .database import Database

__all__ = [
    "Database",
    "DatabaseConnection",
    "DEFAULT_DASHBOARD_ID",
    "DBConfig",
    "DBContent",
    "DBDashboard",
    "DBFeed",
    "DashboardRepository",
    "FeedRepository",
    "ContentRepository",
    "ConfigRepository",
]
