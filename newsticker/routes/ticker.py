"""
Ticker routes: cached ticker items and manual refresh.
"""

from fastapi import APIRouter

from ..schemas import TickerItemResponse
from ..services import DashboardParam, TickerServiceDep

router = APIRouter(prefix="/ticker", tags=["ticker"])


@router.get("")
async def get_ticker(service: TickerServiceDep, dashboard: DashboardParam) -> list[TickerItemResponse]:
    """Cached ticker items, newest first. Never waits on a feed fetch."""
    return [TickerItemResponse.from_item(i) for i in service.current_items(dashboard)]


@router.post("/refresh")
async def refresh_ticker(service: TickerServiceDep, dashboard: DashboardParam) -> list[TickerItemResponse]:
    """Refresh the ticker now and return the new items."""
    items = await service.refresh_now(dashboard)
    return [TickerItemResponse.from_item(i) for i in items]
