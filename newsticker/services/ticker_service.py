"""
Ticker service: reads and out-of-cycle refreshes of a dashboard's ticker.

Also used by the feed, config and dashboard services for the refresh and
scheduler re-arm that follow their mutations.
"""

import logging
from typing import TYPE_CHECKING, Any

from ..database import Database
from ..exceptions import require_dashboard
from ..normalizer import TickerItem
from ..schemas import ConfigResponse, ContentResponse, dump_all

if TYPE_CHECKING:
    from ..aggregator import TickerAggregator
    from ..scheduler import RefreshScheduler

logger = logging.getLogger(__name__)


class TickerService:
    """Service for ticker reads and refresh triggers."""

    def __init__(
        self,
        db: Database,
        aggregator: "TickerAggregator",
        scheduler: "RefreshScheduler | None" = None,
    ):
        self.db = db
        self.aggregator = aggregator
        self.scheduler = scheduler

    def current_items(self, dashboard_id: str) -> list[TickerItem]:
        """
        Cached ticker items for a dashboard.

        Raises:
            HTTPException: If the dashboard does not exist
        """
        require_dashboard(self.db.get_dashboard(dashboard_id))
        return self.aggregator.current_items(dashboard_id)

    async def refresh_now(self, dashboard_id: str) -> list[TickerItem]:
        """
        Refresh a dashboard's ticker outside the schedule and return it.

        Waits for an in-flight refresh of the same dashboard first.

        Raises:
            HTTPException: If the dashboard does not exist
        """
        require_dashboard(self.db.get_dashboard(dashboard_id))
        return await self.aggregator.refresh(dashboard_id)

    async def refresh_after_change(self, dashboard_id: str) -> None:
        """
        Refresh after a feed change when the ticker is enabled, then re-arm.

        A failed refresh is logged; the change that triggered it still stands.
        """
        if self.db.get_config(dashboard_id).ticker_enabled:
            try:
                await self.aggregator.refresh(dashboard_id)
            except Exception as e:
                logger.error(f"Failed to refresh feeds for dashboard {dashboard_id}: {e}")
        await self.rearm()

    async def clear(self, dashboard_id: str) -> None:
        """Empty the ticker now and tell subscribers."""
        await self.aggregator.clear(dashboard_id)

    async def rearm(self) -> None:
        if self.scheduler:
            await self.scheduler.rearm()


def build_snapshot(db: Database, aggregator: "TickerAggregator", dashboard_id: str) -> dict[str, Any]:
    """Current ticker, content and config of a dashboard, as sent to a new subscriber."""
    return {
        "ticker": [item.to_dict() for item in aggregator.current_items(dashboard_id)],
        "content": dump_all([ContentResponse.from_db(c) for c in db.get_content(dashboard_id)]),
        "config": ConfigResponse.from_db(db.get_config(dashboard_id)).model_dump(),
    }
