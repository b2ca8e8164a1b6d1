"""
News Ticker API Server

FastAPI application providing:
- Dashboard management
- Feed and content management per dashboard
- Per-dashboard config
- Cached ticker reads and manual refresh
- Live updates over WebSocket
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .aggregator import TickerAggregator
from .broadcast import BroadcastGateway
from .cache import TickerCache
from .config import config, state
from .database import Database
from .feeds import FeedParser
from .routes import (
    config_router,
    content_router,
    dashboards_router,
    feeds_router,
    live_router,
    misc_router,
    ticker_router,
)
from .scheduler import RefreshScheduler
from .services import build_snapshot

logger = logging.getLogger(__name__)


def init_state() -> None:
    """Build the process singletons: store, cache, gateway, aggregator, scheduler."""
    state.db = Database(
        config.DB_PATH,
        legacy_data_dir=config.DATA_DIR if config.IMPORT_LEGACY_JSON else None,
    )
    state.feed_parser = FeedParser(
        timeout=config.FEED_TIMEOUT_SECONDS,
        user_agent=config.USER_AGENT,
    )
    state.cache = TickerCache()
    state.gateway = BroadcastGateway()
    state.aggregator = TickerAggregator(state.db, state.feed_parser, state.cache, state.gateway)
    state.scheduler = RefreshScheduler(
        state.db,
        state.aggregator,
        min_tick_seconds=config.MIN_TICK_SECONDS,
        grace_seconds=config.SHUTDOWN_GRACE_SECONDS,
    )

    db, aggregator = state.db, state.aggregator
    state.gateway.set_snapshot_provider(lambda dashboard_id: build_snapshot(db, aggregator, dashboard_id))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup application resources."""
    # Startup - skip if already initialized (e.g., by tests)
    if state.db is None:
        logging.basicConfig(
            level=config.LOG_LEVEL.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        init_state()
        logger.info(f"Database ready at {config.DB_PATH}")

    if state.scheduler:
        await state.scheduler.start()

    yield

    # Shutdown
    if state.scheduler:
        await state.scheduler.stop()


app = FastAPI(
    title="News Ticker API",
    version="1.0.0",
    lifespan=lifespan
)

# Include routers
app.include_router(misc_router)
app.include_router(live_router)
app.include_router(dashboards_router, prefix="/api")
app.include_router(feeds_router, prefix="/api")
app.include_router(content_router, prefix="/api")
app.include_router(config_router, prefix="/api")
app.include_router(ticker_router, prefix="/api")
