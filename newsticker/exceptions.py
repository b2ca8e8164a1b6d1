"""
Domain errors and HTTP exception utilities for common error patterns.

Provides helper functions to reduce boilerplate for common 404 errors.
"""

from typing import TypeVar

from fastapi import HTTPException

T = TypeVar("T")


class DashboardNotFoundError(LookupError):
    """
    Raised when the store or ticker core is asked about an unknown dashboard.

    Request handlers check dashboard existence before calling the core, so
    seeing this outside a handler means a caller forgot to.
    """

    def __init__(self, dashboard_id: str):
        super().__init__(f"Dashboard not found: {dashboard_id}")
        self.dashboard_id = dashboard_id


def require_resource(resource: T | None, detail: str = "Resource not found") -> T:
    """
    Raise 404 if resource is None, otherwise return the resource.

    Usage:
        feed = require_resource(db.get_feed(id, dashboard_id), "Feed not found")
    """
    if resource is None:
        raise HTTPException(status_code=404, detail=detail)
    return resource


def require_dashboard(dashboard: T | None) -> T:
    """Raise 404 if dashboard is None."""
    return require_resource(dashboard, "Dashboard not found")


def require_feed(feed: T | None) -> T:
    """Raise 404 if feed is None."""
    return require_resource(feed, "Feed not found")


def require_content(item: T | None) -> T:
    """Raise 404 if content item is None."""
    return require_resource(item, "Content not found")
