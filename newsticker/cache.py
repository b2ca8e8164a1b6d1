"""
Ticker Cache - In-process store of each dashboard's latest ticker items.

Entries are never persisted: a restart begins with an empty cache and every
dashboard reads as "no items, never refreshed" until its first refresh.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from .normalizer import TickerItem


@dataclass
class TickerCacheEntry:
    items: list[TickerItem] = field(default_factory=list)
    refreshed_at: datetime | None = None  # None until the first refresh


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TickerCache:
    """
    Dashboard id -> latest ranked ticker items and refresh time.

    Writes replace the whole entry (last writer wins). The aggregator
    serializes refreshes per dashboard, so writes for one dashboard never race.
    """

    def __init__(self, clock: Callable[[], datetime] = _utc_now):
        self._clock = clock
        self._entries: dict[str, TickerCacheEntry] = {}

    def get(self, dashboard_id: str) -> TickerCacheEntry:
        """Read an entry. Unknown dashboards read as empty and never refreshed."""
        entry = self._entries.get(dashboard_id)
        if entry is None:
            return TickerCacheEntry()
        return TickerCacheEntry(items=list(entry.items), refreshed_at=entry.refreshed_at)

    def items(self, dashboard_id: str) -> list[TickerItem]:
        return self.get(dashboard_id).items

    def refreshed_at(self, dashboard_id: str) -> datetime | None:
        return self.get(dashboard_id).refreshed_at

    def set(
        self,
        dashboard_id: str,
        items: list[TickerItem],
        refreshed_at: datetime | None = None,
    ) -> TickerCacheEntry:
        """
        Replace a dashboard's items and record the refresh time.

        refreshed_at defaults to now. Scheduled refreshes pass the time the
        cycle was started so fetch latency does not push back the next run.
        """
        entry = TickerCacheEntry(
            items=list(items),
            refreshed_at=refreshed_at or self._clock(),
        )
        self._entries[dashboard_id] = entry
        return entry

    def clear(self, dashboard_id: str) -> None:
        """Drop a dashboard's items and refresh time."""
        self._entries.pop(dashboard_id, None)

    def __contains__(self, dashboard_id: str) -> bool:
        return dashboard_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
