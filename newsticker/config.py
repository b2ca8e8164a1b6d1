"""
Configuration and application state management.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from fastapi import HTTPException

if TYPE_CHECKING:
    from .aggregator import TickerAggregator
    from .broadcast import BroadcastGateway
    from .cache import TickerCache
    from .database import Database
    from .feeds import FeedParser
    from .scheduler import RefreshScheduler

# Load environment variables
load_dotenv()


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


class Config:
    """Application configuration from environment."""
    DB_PATH: Path = Path(os.getenv("DB_PATH", "./data/news-ticker.db"))
    # Legacy JSON data (dashboards.json, dashboards/<id>/*.json) imported on first start
    DATA_DIR: Path = Path(os.getenv("DATA_DIR", "./data"))
    IMPORT_LEGACY_JSON: bool = _parse_bool(os.getenv("IMPORT_LEGACY_JSON"), default=True)

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Feed fetching
    FEED_TIMEOUT_SECONDS: float = float(os.getenv("FEED_TIMEOUT_SECONDS", "15"))
    USER_AGENT: str = os.getenv("USER_AGENT", "News Ticker/1.0")
    BLOCK_PRIVATE_FEED_URLS: bool = _parse_bool(os.getenv("BLOCK_PRIVATE_FEED_URLS"), default=True)

    # Scheduler
    MIN_TICK_SECONDS: float = float(os.getenv("MIN_TICK_SECONDS", "1"))
    SHUTDOWN_GRACE_SECONDS: float = float(os.getenv("SHUTDOWN_GRACE_SECONDS", "5"))


config = Config()


class AppState:
    """Shared application state."""
    db: "Database | None" = None
    feed_parser: "FeedParser | None" = None
    cache: "TickerCache | None" = None
    gateway: "BroadcastGateway | None" = None
    aggregator: "TickerAggregator | None" = None
    scheduler: "RefreshScheduler | None" = None


state = AppState()


def get_db() -> "Database":
    """Dependency to get database instance."""
    if not state.db:
        raise HTTPException(status_code=500, detail="Database not initialized")
    return state.db


def get_aggregator() -> "TickerAggregator":
    """Dependency to get the ticker aggregator."""
    if not state.aggregator:
        raise HTTPException(status_code=500, detail="Ticker aggregator not initialized")
    return state.aggregator


def get_gateway() -> "BroadcastGateway":
    """Dependency to get the broadcast gateway."""
    if not state.gateway:
        raise HTTPException(status_code=500, detail="Broadcast gateway not initialized")
    return state.gateway
