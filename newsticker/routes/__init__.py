"""
API route modules.
"""

from .config import router as config_router
from .content import router as content_router
from .dashboards import router as dashboards_router
from .feeds import router as feeds_router
from .live import router as live_router
from .misc import router as misc_router
from .ticker import router as ticker_router

__all__ = [
    "config_router",
    "content_router",
    "dashboards_router",
    "feeds_router",
    "live_router",
    "misc_router",
    "ticker_router",
]
