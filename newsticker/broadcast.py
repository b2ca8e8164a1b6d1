"""
Broadcast Gateway - Push ticker, content and config updates to live viewers.

Keeps an explicit subscriber set per dashboard. The transport layer (the
WebSocket route) only calls subscribe/unsubscribe/disconnect; anything with
an async ``send_json`` method can be a connection.

Messages look like:
    {"event": "ticker:update:<dashboard_id>", "dashboard": "<dashboard_id>", "data": ...}
"""

import asyncio
import logging
from typing import Any, Callable, Protocol

from .normalizer import TickerItem

logger = logging.getLogger(__name__)

TICKER = "ticker"
CONTENT = "content"
CONFIG = "config"
EVENT_KINDS = (TICKER, CONTENT, CONFIG)


class Connection(Protocol):
    async def send_json(self, data: Any) -> None: ...


# dashboard_id -> {"ticker": [...], "content": [...], "config": {...}}
SnapshotProvider = Callable[[str], dict[str, Any]]


def event_name(kind: str, dashboard_id: str) -> str:
    return f"{kind}:update:{dashboard_id}"


def make_message(kind: str, dashboard_id: str, data: Any) -> dict[str, Any]:
    return {"event": event_name(kind, dashboard_id), "dashboard": dashboard_id, "data": data}


class BroadcastGateway:
    """Per-dashboard fan-out of live updates. Never sends across dashboards."""

    def __init__(self, snapshot_provider: SnapshotProvider | None = None):
        self._snapshot_provider = snapshot_provider
        self._subscribers: dict[str, set[Connection]] = {}
        # Sends to one connection go out one at a time, in order
        self._send_locks: dict[Connection, asyncio.Lock] = {}

    def set_snapshot_provider(self, provider: SnapshotProvider) -> None:
        """Register the callback that returns a dashboard's current state."""
        self._snapshot_provider = provider

    # ─────────────────────────────────────────────────────────────
    # Membership
    # ─────────────────────────────────────────────────────────────

    async def subscribe(self, connection: Connection, dashboard_id: str) -> None:
        """
        Join a dashboard's subscriber set and replay its current state.

        The replay goes to this connection only, before any later broadcast,
        so new viewers never wait for the next refresh. The connection's send
        lock is held for the whole replay: an update emitted meanwhile is
        delivered after it and so is never overwritten by older state.
        """
        self._subscribers.setdefault(dashboard_id, set()).add(connection)
        logger.info(
            f"Subscriber joined dashboard {dashboard_id} "
            f"(total: {len(self._subscribers[dashboard_id])})"
        )

        if self._snapshot_provider is None:
            return
        async with self._send_lock(connection):
            snapshot = self._snapshot_provider(dashboard_id)
            for kind in EVENT_KINDS:
                if kind in snapshot:
                    message = make_message(kind, dashboard_id, snapshot[kind])
                    if not await self._deliver(connection, message):
                        return

    def unsubscribe(self, connection: Connection, dashboard_id: str) -> None:
        """Leave one dashboard's subscriber set."""
        members = self._subscribers.get(dashboard_id)
        if not members:
            return
        members.discard(connection)
        if not members:
            del self._subscribers[dashboard_id]

    def disconnect(self, connection: Connection) -> None:
        """Remove a connection from every dashboard it joined."""
        for dashboard_id in list(self._subscribers):
            self.unsubscribe(connection, dashboard_id)
        self._send_locks.pop(connection, None)

    def subscribers(self, dashboard_id: str) -> set[Connection]:
        return set(self._subscribers.get(dashboard_id, ()))

    def subscriber_count(self, dashboard_id: str | None = None) -> int:
        if dashboard_id is not None:
            return len(self._subscribers.get(dashboard_id, ()))
        return len({c for members in self._subscribers.values() for c in members})

    # ─────────────────────────────────────────────────────────────
    # Broadcasts
    # ─────────────────────────────────────────────────────────────

    async def emit(self, kind: str, dashboard_id: str, data: Any) -> int:
        """
        Send an update to a dashboard's subscribers.

        Returns the number of connections that received it.
        """
        connections = list(self._subscribers.get(dashboard_id, ()))
        if not connections:
            return 0

        message = make_message(kind, dashboard_id, data)
        results = await asyncio.gather(
            *[self._send(connection, message) for connection in connections],
            return_exceptions=True,
        )
        success_count = sum(1 for r in results if r is True)

        if success_count < len(connections):
            logger.debug(
                f"Broadcast {message['event']}: {success_count}/{len(connections)} subscribers"
            )
        return success_count

    async def emit_ticker(self, dashboard_id: str, items: list[TickerItem]) -> int:
        return await self.emit(TICKER, dashboard_id, [item.to_dict() for item in items])

    async def emit_content(self, dashboard_id: str, content: list[dict[str, Any]]) -> int:
        return await self.emit(CONTENT, dashboard_id, content)

    async def emit_config(self, dashboard_id: str, config: dict[str, Any]) -> int:
        return await self.emit(CONFIG, dashboard_id, config)

    def _send_lock(self, connection: Connection) -> asyncio.Lock:
        lock = self._send_locks.get(connection)
        if lock is None:
            lock = self._send_locks[connection] = asyncio.Lock()
        return lock

    async def _send(self, connection: Connection, message: dict[str, Any]) -> bool:
        """Send to one connection, after any replay or send already under way."""
        async with self._send_lock(connection):
            return await self._deliver(connection, message)

    async def _deliver(self, connection: Connection, message: dict[str, Any]) -> bool:
        """Send now. A failed connection is dropped everywhere."""
        try:
            await connection.send_json(message)
            return True
        except Exception as e:
            logger.warning(f"Dropping subscriber after failed send: {e}")
            self.disconnect(connection)
            return False
