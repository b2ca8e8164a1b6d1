"""
Dashboard service: business logic for dashboard management.

Dashboards are the tenants of the ticker. Every dashboard owns its feeds,
content playlist and config; deleting it removes all of them.
"""

import logging
import re
from typing import TYPE_CHECKING

from fastapi import HTTPException

from ..database import Database, DEFAULT_DASHBOARD_ID
from ..database.models import DBDashboard
from ..exceptions import require_dashboard

if TYPE_CHECKING:
    from .ticker_service import TickerService

logger = logging.getLogger(__name__)

DASHBOARD_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


class DashboardService:
    """Service for dashboard-related business logic."""

    def __init__(self, db: Database, ticker: "TickerService"):
        self.db = db
        self.ticker = ticker

    def list_dashboards(self) -> list[DBDashboard]:
        return self.db.get_dashboards()

    def get_dashboard(self, dashboard_id: str) -> DBDashboard:
        return require_dashboard(self.db.get_dashboard(dashboard_id))

    def create_dashboard(
        self,
        dashboard_id: str | None,
        name: str | None = None,
        description: str | None = None,
    ) -> DBDashboard:
        """
        Create a dashboard with a default config.

        Raises:
            HTTPException: 400 for a missing or malformed id, 409 if it exists
        """
        if not dashboard_id:
            raise HTTPException(status_code=400, detail="Dashboard ID is required")
        if not DASHBOARD_ID_PATTERN.match(dashboard_id):
            raise HTTPException(
                status_code=400,
                detail="Invalid dashboard ID format. Use only letters, numbers, dashes, and underscores."
            )
        if self.db.get_dashboard(dashboard_id):
            raise HTTPException(status_code=409, detail="Dashboard with this ID already exists")

        dashboard = self.db.add_dashboard(dashboard_id, name, description)
        logger.info(f"Created dashboard {dashboard_id}")
        return dashboard

    def update_dashboard(
        self,
        dashboard_id: str,
        name: str | None = None,
        description: str | None = None,
    ) -> DBDashboard:
        require_dashboard(self.db.get_dashboard(dashboard_id))
        return require_dashboard(self.db.update_dashboard(dashboard_id, name, description))

    async def delete_dashboard(self, dashboard_id: str) -> None:
        """
        Delete a dashboard and everything it owns, and empty its ticker.

        Raises:
            HTTPException: 400 for the default dashboard, 404 if unknown
        """
        if dashboard_id == DEFAULT_DASHBOARD_ID:
            raise HTTPException(status_code=400, detail="Cannot delete default dashboard")
        if not self.db.delete_dashboard(dashboard_id):
            raise HTTPException(status_code=404, detail="Dashboard not found")

        await self.ticker.clear(dashboard_id)
        self.ticker.aggregator.forget(dashboard_id)
        await self.ticker.rearm()
        logger.info(f"Deleted dashboard {dashboard_id}")
