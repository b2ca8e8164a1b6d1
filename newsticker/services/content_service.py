"""
Content service: the rotating playlist of each dashboard.

Content is passed through untouched; every change is pushed to the
dashboard's live viewers as the full playlist.
"""

from fastapi import HTTPException

from ..broadcast import BroadcastGateway
from ..database import Database
from ..database.models import DBContent
from ..exceptions import require_content, require_dashboard
from ..schemas import ContentResponse, dump_all
from ..url_validator import validate_url_or_raise_http


class ContentService:
    """Service for content playlist business logic."""

    def __init__(self, db: Database, gateway: BroadcastGateway):
        self.db = db
        self.gateway = gateway

    def list_content(self, dashboard_id: str) -> list[DBContent]:
        return self.db.get_content(dashboard_id)

    async def add_content(
        self,
        dashboard_id: str,
        url: str | None,
        title: str | None = None,
        content_type: str | None = None,
    ) -> DBContent:
        """
        Append an item to a dashboard's playlist.

        Raises:
            HTTPException: 400 for a bad url, 404 for an unknown dashboard
        """
        if not url:
            raise HTTPException(status_code=400, detail="URL is required")
        url = validate_url_or_raise_http(url)
        require_dashboard(self.db.get_dashboard(dashboard_id))

        item = self.db.add_content(dashboard_id, url, title or None, content_type or None)
        await self.broadcast(dashboard_id)
        return item

    async def update_content(
        self,
        dashboard_id: str,
        content_id: str,
        url: str | None = None,
        title: str | None = None,
        content_type: str | None = None,
    ) -> DBContent:
        if url:
            url = validate_url_or_raise_http(url)

        item = require_content(self.db.update_content(
            content_id, dashboard_id, url or None, title or None, content_type or None
        ))
        await self.broadcast(dashboard_id)
        return item

    async def delete_content(self, dashboard_id: str, content_id: str) -> None:
        if not self.db.delete_content(content_id, dashboard_id):
            raise HTTPException(status_code=404, detail="Content not found")
        await self.broadcast(dashboard_id)

    async def broadcast(self, dashboard_id: str) -> int:
        """Push the dashboard's full playlist to its subscribers."""
        content = [ContentResponse.from_db(c) for c in self.db.get_content(dashboard_id)]
        return await self.gateway.emit_content(dashboard_id, dump_all(content))
