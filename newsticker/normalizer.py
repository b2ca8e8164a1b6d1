"""
Item Normalizer - Turn loosely structured feed entries into ticker items.

Handles:
- feedparser entries and plain mappings alike
- Missing ids, titles, links and dates (each falls back to a fixed default)
- Ranking newest first and truncating to a dashboard's item budget
"""

import calendar
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Mapping

from .database.models import DBFeed

DEFAULT_TITLE = "No title"

# Raw date fields, in the order they are consulted
_PARSED_DATE_FIELDS = ("published_parsed", "updated_parsed")
_TEXT_DATE_FIELDS = ("published", "updated", "pubDate", "isoDate")


@dataclass
class TickerItem:
    """One displayable ticker entry derived from a feed entry."""
    id: str
    title: str
    link: str
    published_at: datetime  # Always timezone-aware UTC
    feed_name: str
    feed_id: str
    feed_logo: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation used by the REST and live layers."""
        return {
            "id": self.id,
            "title": self.title,
            "link": self.link,
            "published_at": self.published_at.isoformat(),
            "feed_name": self.feed_name,
            "feed_id": self.feed_id,
            "feed_logo": self.feed_logo,
        }


def _get(entry: Any, key: str) -> Any:
    """Read a field from a feedparser entry or a plain mapping."""
    if isinstance(entry, Mapping):
        try:
            return entry.get(key)
        except Exception:
            return None
    return getattr(entry, key, None)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _from_struct_time(value: Any) -> datetime | None:
    """feedparser's *_parsed fields are UTC struct_time tuples."""
    if not value:
        return None
    try:
        return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse an RFC 822 or ISO 8601 date string (or epoch number) to aware UTC.

    Returns None when the value cannot be understood.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            return None

    raw = _text(value)
    if not raw:
        return None

    parsed = None
    try:
        parsed = datetime.fromisoformat(raw[:-1] + "+00:00" if raw.endswith("Z") else raw)
    except ValueError:
        try:
            parsed = parsedate_to_datetime(raw)
        except (TypeError, ValueError, IndexError, OverflowError):
            return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        # Offset pushes the instant past datetime.min or datetime.max
        return None


def _published_at(entry: Any) -> datetime:
    for field in _PARSED_DATE_FIELDS:
        published = _from_struct_time(_get(entry, field))
        if published:
            return published
    for field in _TEXT_DATE_FIELDS:
        published = parse_datetime(_get(entry, field))
        if published:
            return published
    return datetime.now(timezone.utc)


def _native_id(entry: Any) -> str:
    """Source-provided id, else the link, else the current epoch milliseconds."""
    for field in ("id", "guid", "link"):
        value = _text(_get(entry, field))
        if value:
            return value
    return str(int(time.time() * 1000))


def normalize_entry(entry: Any, feed: DBFeed) -> TickerItem:
    """
    Convert one raw feed entry into a ticker item.

    Never raises: every missing or malformed field degrades to its default.
    """
    return TickerItem(
        id=f"{feed.id}-{_native_id(entry)}",
        title=_text(_get(entry, "title")) or DEFAULT_TITLE,
        link=_text(_get(entry, "link")),
        published_at=_published_at(entry),
        feed_name=feed.display_name,
        feed_id=feed.id,
        feed_logo=feed.logo or None,
    )


def rank_items(items: list[TickerItem], limit: int) -> list[TickerItem]:
    """
    Sort newest first and keep at most `limit` items.

    Items with equal publication instants have no guaranteed relative order.
    """
    ranked = sorted(items, key=lambda item: item.published_at, reverse=True)
    return ranked[:max(limit, 0)]
