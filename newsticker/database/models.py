"""
Database models - dataclasses for database entities.
"""

from dataclasses import dataclass
from datetime import datetime

DEFAULT_ROTATION_INTERVAL = 30000
DEFAULT_TICKER_REFRESH_INTERVAL = 300000
DEFAULT_MAX_TICKER_ITEMS = 50


@dataclass
class DBDashboard:
    id: str
    name: str
    description: str
    created_at: datetime


@dataclass
class DBFeed:
    id: str
    dashboard_id: str
    url: str
    name: str  # Display name, defaults to the url
    logo: str | None
    created_at: datetime

    @property
    def display_name(self) -> str:
        return self.name or self.url


@dataclass
class DBContent:
    id: str
    dashboard_id: str
    url: str
    title: str
    type: str
    created_at: datetime


@dataclass
class DBConfig:
    dashboard_id: str
    rotation_interval: int = DEFAULT_ROTATION_INTERVAL  # ms
    ticker_refresh_interval: int = DEFAULT_TICKER_REFRESH_INTERVAL  # ms
    max_ticker_items: int = DEFAULT_MAX_TICKER_ITEMS
    ticker_enabled: bool = True
