"""
Live updates over WebSocket.

Client messages:
    {"type": "dashboard:request", "dashboard": "<id>"}  subscribe, replays current state
    {"type": "dashboard:leave", "dashboard": "<id>"}    unsubscribe
    {"type": "ping"}                                     answered with {"type": "pong"}

Server messages are the broadcast events ("ticker:update:<id>" and friends),
plus "dashboard:error:<id>" when a requested dashboard does not exist.
"""

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..config import state
from ..database import DEFAULT_DASHBOARD_ID
from ..exceptions import DashboardNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["live"])


def dashboard_error(dashboard_id: str, error: str) -> dict:
    return {
        "event": f"dashboard:error:{dashboard_id}",
        "dashboard": dashboard_id,
        "data": {"error": error},
    }


@router.websocket("/ws")
async def live_updates(websocket: WebSocket):
    """Subscribe to one or more dashboards' live updates."""
    await websocket.accept()

    gateway = state.gateway
    db = state.db
    if gateway is None or db is None:
        await websocket.close(code=1011)
        return

    client_id = f"{websocket.client}"
    logger.info(f"Client connected: {client_id}")

    try:
        while True:
            message = await websocket.receive_text()
            try:
                data = json.loads(message)
            except json.JSONDecodeError:
                continue
            if not isinstance(data, dict):
                continue

            msg_type = data.get("type", "")
            dashboard_id = data.get("dashboard") or DEFAULT_DASHBOARD_ID

            if msg_type == "ping":
                await websocket.send_json({"type": "pong"})
            elif msg_type == "dashboard:request":
                if not isinstance(dashboard_id, str) or db.get_dashboard(dashboard_id) is None:
                    await websocket.send_json(dashboard_error(str(dashboard_id), "Dashboard not found"))
                    continue
                try:
                    await gateway.subscribe(websocket, dashboard_id)
                except DashboardNotFoundError:
                    gateway.unsubscribe(websocket, dashboard_id)
                    await websocket.send_json(
                        dashboard_error(dashboard_id, "Failed to load dashboard data")
                    )
            elif msg_type == "dashboard:leave" and isinstance(dashboard_id, str):
                gateway.unsubscribe(websocket, dashboard_id)

    except WebSocketDisconnect:
        pass
    finally:
        gateway.disconnect(websocket)
        logger.info(f"Client disconnected: {client_id}")
