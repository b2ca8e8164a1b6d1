"""
Miscellaneous routes: health check.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from ..config import state

router = APIRouter(tags=["misc"])


@router.get("/health")
async def health_check() -> dict:
    """Service health check."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "scheduler_running": bool(state.scheduler and state.scheduler.is_running),
    }
