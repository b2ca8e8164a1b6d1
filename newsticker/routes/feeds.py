"""
Feed routes: a dashboard's feed sources.

The target dashboard is the `dashboard` query parameter ("default" when omitted).
"""

from fastapi import APIRouter

from ..schemas import AddFeedRequest, FeedResponse, MessageResponse, UpdateFeedRequest
from ..services import DashboardParam, FeedServiceDep

router = APIRouter(prefix="/feeds", tags=["feeds"])


@router.get("")
async def list_feeds(service: FeedServiceDep, dashboard: DashboardParam) -> list[FeedResponse]:
    """List a dashboard's feeds."""
    return [FeedResponse.from_db(f) for f in service.list_feeds(dashboard)]


@router.post("", status_code=201)
async def add_feed(
    request: AddFeedRequest,
    service: FeedServiceDep,
    dashboard: DashboardParam
) -> FeedResponse:
    """Subscribe to a feed. The ticker refreshes before this returns."""
    feed = await service.add_feed(dashboard, request.url, request.name, request.logo)
    return FeedResponse.from_db(feed)


@router.put("/{feed_id}")
async def update_feed(
    feed_id: str,
    request: UpdateFeedRequest,
    service: FeedServiceDep,
    dashboard: DashboardParam
) -> FeedResponse:
    """Update a feed's url, name or logo."""
    feed = await service.update_feed(dashboard, feed_id, request.url, request.name, request.logo)
    return FeedResponse.from_db(feed)


@router.delete("/{feed_id}")
async def remove_feed(
    feed_id: str,
    service: FeedServiceDep,
    dashboard: DashboardParam
) -> MessageResponse:
    """Unsubscribe from a feed."""
    await service.delete_feed(dashboard, feed_id)
    return MessageResponse(message="Feed deleted")
