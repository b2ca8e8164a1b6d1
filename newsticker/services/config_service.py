"""
Config service: per-dashboard timing configuration.

Turning the ticker off empties it immediately; turning it on refreshes it
immediately when the dashboard has feeds. Either way the scheduler is
re-armed, since the minimum refresh interval may have changed.
"""

import logging
from typing import TYPE_CHECKING

from ..broadcast import BroadcastGateway
from ..database import Database
from ..database.models import DBConfig
from ..exceptions import require_dashboard
from ..schemas import ConfigResponse, ConfigUpdateRequest

if TYPE_CHECKING:
    from .ticker_service import TickerService

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for config business logic."""

    def __init__(self, db: Database, ticker: "TickerService", gateway: BroadcastGateway):
        self.db = db
        self.ticker = ticker
        self.gateway = gateway

    def get_config(self, dashboard_id: str) -> DBConfig:
        require_dashboard(self.db.get_dashboard(dashboard_id))
        return self.db.get_config(dashboard_id)

    async def update_config(self, dashboard_id: str, request: ConfigUpdateRequest) -> DBConfig:
        """
        Apply a partial config update and its ticker side effects.

        Raises:
            HTTPException: If the dashboard does not exist
        """
        require_dashboard(self.db.get_dashboard(dashboard_id))

        config = self.db.update_config(
            dashboard_id,
            rotation_interval=request.rotation_interval,
            ticker_refresh_interval=request.ticker_refresh_interval,
            max_ticker_items=request.max_ticker_items,
            ticker_enabled=request.ticker_enabled,
        )

        if request.ticker_enabled is not None:
            if not config.ticker_enabled:
                await self.ticker.clear(dashboard_id)
            elif self.db.count_feeds(dashboard_id) > 0:
                await self.ticker.refresh_after_change(dashboard_id)
        await self.ticker.rearm()

        await self.gateway.emit_config(dashboard_id, ConfigResponse.from_db(config).model_dump())
        logger.debug(f"Updated config for dashboard {dashboard_id}")
        return config
