"""
Feed service: business logic for a dashboard's feed sources.

Every change to a dashboard's feeds refreshes its ticker right away (when
the ticker is enabled) instead of waiting for the scheduler.
"""

from typing import TYPE_CHECKING

from fastapi import HTTPException

from ..database import Database
from ..database.models import DBFeed
from ..exceptions import require_dashboard, require_feed
from ..url_validator import validate_url_or_raise_http

if TYPE_CHECKING:
    from .ticker_service import TickerService


class FeedService:
    """Service for feed-related business logic."""

    def __init__(
        self,
        db: Database,
        ticker: "TickerService",
        block_private_urls: bool = True,
    ):
        self.db = db
        self.ticker = ticker
        self.block_private_urls = block_private_urls

    def list_feeds(self, dashboard_id: str) -> list[DBFeed]:
        return self.db.get_feeds(dashboard_id)

    def _validate_url(self, url: str) -> str:
        return validate_url_or_raise_http(url, block_private=self.block_private_urls)

    def _validate_logo(self, logo: str) -> str:
        return validate_url_or_raise_http(logo, label="logo URL")

    async def add_feed(
        self,
        dashboard_id: str,
        url: str | None,
        name: str | None = None,
        logo: str | None = None,
    ) -> DBFeed:
        """
        Subscribe a dashboard to a feed.

        Args:
            dashboard_id: Owning dashboard
            url: Feed URL (http/https)
            name: Display name, defaults to the url
            logo: Optional logo URL

        Returns:
            The created feed

        Raises:
            HTTPException: 400 for a bad url or logo, 404 for an unknown dashboard
        """
        if not url:
            raise HTTPException(status_code=400, detail="URL is required")
        url = self._validate_url(url)
        if logo:
            logo = self._validate_logo(logo)

        require_dashboard(self.db.get_dashboard(dashboard_id))

        feed = self.db.add_feed(dashboard_id, url, name or None, logo or None)
        await self.ticker.refresh_after_change(dashboard_id)
        return feed

    async def update_feed(
        self,
        dashboard_id: str,
        feed_id: str,
        url: str | None = None,
        name: str | None = None,
        logo: str | None = None,
    ) -> DBFeed:
        """
        Update a feed. None keeps a field; an empty logo removes it.

        Raises:
            HTTPException: 400 for a bad url or logo, 404 if the feed is unknown
        """
        if url:
            url = self._validate_url(url)
        if logo:
            logo = self._validate_logo(logo)

        clear_logo = logo == ""
        feed = require_feed(self.db.update_feed(
            feed_id,
            dashboard_id,
            url=url or None,
            name=name or None,
            logo=None if clear_logo else logo,
            clear_logo=clear_logo,
        ))

        await self.ticker.refresh_after_change(dashboard_id)
        return feed

    async def delete_feed(self, dashboard_id: str, feed_id: str) -> None:
        """
        Unsubscribe a dashboard from a feed.

        Raises:
            HTTPException: If the feed is unknown
        """
        if not self.db.delete_feed(feed_id, dashboard_id):
            raise HTTPException(status_code=404, detail="Feed not found")

        await self.ticker.refresh_after_change(dashboard_id)
