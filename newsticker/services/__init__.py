"""
Service layer for business logic.

Services encapsulate business logic, keeping routes as thin HTTP adapters.
Each service receives its dependencies via constructor injection.

Usage in routes:
    from ..services import FeedServiceDep

    @router.get("/feeds")
    async def list_feeds(service: FeedServiceDep, dashboard: DashboardParam):
        return service.list_feeds(dashboard)
"""

from typing import Annotated

from fastapi import Depends, Query

from ..aggregator import TickerAggregator
from ..broadcast import BroadcastGateway
from ..config import config, state, get_aggregator, get_db, get_gateway
from ..database import Database, DEFAULT_DASHBOARD_ID

from .config_service import ConfigService
from .content_service import ContentService
from .dashboard_service import DashboardService
from .feed_service import FeedService
from .ticker_service import TickerService, build_snapshot

__all__ = [
    # Services
    "ConfigService",
    "ContentService",
    "DashboardService",
    "FeedService",
    "TickerService",
    "build_snapshot",
    # Dependency factories
    "get_config_service",
    "get_content_service",
    "get_dashboard_service",
    "get_feed_service",
    "get_ticker_service",
    # Type aliases for dependency injection
    "ConfigServiceDep",
    "ContentServiceDep",
    "DashboardServiceDep",
    "FeedServiceDep",
    "TickerServiceDep",
    "DashboardParam",
    "get_dashboard_id",
]


def get_ticker_service(
    db: Annotated[Database, Depends(get_db)],
    aggregator: Annotated[TickerAggregator, Depends(get_aggregator)],
) -> TickerService:
    """Dependency to get TickerService instance."""
    return TickerService(db=db, aggregator=aggregator, scheduler=state.scheduler)


def get_dashboard_service(
    db: Annotated[Database, Depends(get_db)],
    ticker: Annotated[TickerService, Depends(get_ticker_service)],
) -> DashboardService:
    """Dependency to get DashboardService instance."""
    return DashboardService(db=db, ticker=ticker)


def get_feed_service(
    db: Annotated[Database, Depends(get_db)],
    ticker: Annotated[TickerService, Depends(get_ticker_service)],
) -> FeedService:
    """Dependency to get FeedService instance."""
    return FeedService(db=db, ticker=ticker, block_private_urls=config.BLOCK_PRIVATE_FEED_URLS)


def get_content_service(
    db: Annotated[Database, Depends(get_db)],
    gateway: Annotated[BroadcastGateway, Depends(get_gateway)],
) -> ContentService:
    """Dependency to get ContentService instance."""
    return ContentService(db=db, gateway=gateway)


def get_config_service(
    db: Annotated[Database, Depends(get_db)],
    ticker: Annotated[TickerService, Depends(get_ticker_service)],
    gateway: Annotated[BroadcastGateway, Depends(get_gateway)],
) -> ConfigService:
    """Dependency to get ConfigService instance."""
    return ConfigService(db=db, ticker=ticker, gateway=gateway)


TickerServiceDep = Annotated[TickerService, Depends(get_ticker_service)]
DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]
FeedServiceDep = Annotated[FeedService, Depends(get_feed_service)]
ContentServiceDep = Annotated[ContentService, Depends(get_content_service)]
ConfigServiceDep = Annotated[ConfigService, Depends(get_config_service)]


def get_dashboard_id(dashboard: str | None = Query(default=None)) -> str:
    """Target dashboard of a request: ?dashboard=<id>, "default" when omitted."""
    return dashboard or DEFAULT_DASHBOARD_ID


DashboardParam = Annotated[str, Depends(get_dashboard_id)]
