"""
Pydantic models for API request/response validation.
"""

from typing import Annotated, Any

from pydantic import BaseModel, Field, StrictBool, StrictInt

from .database import DBConfig, DBContent, DBDashboard, DBFeed
from .normalizer import TickerItem


# ─────────────────────────────────────────────────────────────
# Dashboard Schemas
# ─────────────────────────────────────────────────────────────

class DashboardResponse(BaseModel):
    id: str
    name: str
    description: str
    created_at: str

    @classmethod
    def from_db(cls, dashboard: DBDashboard) -> "DashboardResponse":
        return cls(
            id=dashboard.id,
            name=dashboard.name,
            description=dashboard.description,
            created_at=dashboard.created_at.isoformat(),
        )


class CreateDashboardRequest(BaseModel):
    """Request to create a dashboard. The id is checked by the service (400)."""
    id: str | None = None
    name: str | None = None
    description: str | None = None


class UpdateDashboardRequest(BaseModel):
    name: str | None = None
    description: str | None = None


# ─────────────────────────────────────────────────────────────
# Feed Schemas
# ─────────────────────────────────────────────────────────────

class FeedResponse(BaseModel):
    """Feed source subscribed by a dashboard."""
    id: str
    dashboard_id: str
    url: str
    name: str
    logo: str | None
    created_at: str

    @classmethod
    def from_db(cls, feed: DBFeed) -> "FeedResponse":
        return cls(
            id=feed.id,
            dashboard_id=feed.dashboard_id,
            url=feed.url,
            name=feed.display_name,
            logo=feed.logo,
            created_at=feed.created_at.isoformat(),
        )


class AddFeedRequest(BaseModel):
    url: str | None = None
    name: str | None = None
    logo: str | None = None


class UpdateFeedRequest(BaseModel):
    """Partial feed update. An empty logo removes it."""
    url: str | None = None
    name: str | None = None
    logo: str | None = None


# ─────────────────────────────────────────────────────────────
# Content Schemas
# ─────────────────────────────────────────────────────────────

class ContentResponse(BaseModel):
    """Playlist entry rotated by the dashboard client."""
    id: str
    dashboard_id: str
    url: str
    title: str
    type: str
    created_at: str

    @classmethod
    def from_db(cls, item: DBContent) -> "ContentResponse":
        return cls(
            id=item.id,
            dashboard_id=item.dashboard_id,
            url=item.url,
            title=item.title,
            type=item.type,
            created_at=item.created_at.isoformat(),
        )


class AddContentRequest(BaseModel):
    url: str | None = None
    title: str | None = None
    type: str | None = None


class UpdateContentRequest(BaseModel):
    url: str | None = None
    title: str | None = None
    type: str | None = None


# ─────────────────────────────────────────────────────────────
# Config Schemas
# ─────────────────────────────────────────────────────────────

PositiveInt = Annotated[StrictInt, Field(gt=0)]
NonNegativeInt = Annotated[StrictInt, Field(ge=0)]


class ConfigResponse(BaseModel):
    """Per-dashboard timing configuration. Intervals are in milliseconds."""
    rotation_interval: int
    ticker_refresh_interval: int
    max_ticker_items: int
    ticker_enabled: bool

    @classmethod
    def from_db(cls, config: DBConfig) -> "ConfigResponse":
        return cls(
            rotation_interval=config.rotation_interval,
            ticker_refresh_interval=config.ticker_refresh_interval,
            max_ticker_items=config.max_ticker_items,
            ticker_enabled=config.ticker_enabled,
        )


class ConfigUpdateRequest(BaseModel):
    """Partial config update. Omitted fields keep their current value."""
    rotation_interval: PositiveInt | None = None
    ticker_refresh_interval: PositiveInt | None = None
    max_ticker_items: NonNegativeInt | None = None
    ticker_enabled: StrictBool | None = None


# ─────────────────────────────────────────────────────────────
# Ticker Schemas
# ─────────────────────────────────────────────────────────────

class TickerItemResponse(BaseModel):
    id: str
    title: str
    link: str
    published_at: str
    feed_name: str
    feed_id: str
    feed_logo: str | None = None

    @classmethod
    def from_item(cls, item: TickerItem) -> "TickerItemResponse":
        return cls(**item.to_dict())


# ─────────────────────────────────────────────────────────────
# Generic
# ─────────────────────────────────────────────────────────────

class MessageResponse(BaseModel):
    message: str


def dump_all(models: list[BaseModel]) -> list[dict[str, Any]]:
    """JSON-ready dicts for broadcast payloads, same shape as the REST reads."""
    return [m.model_dump() for m in models]
