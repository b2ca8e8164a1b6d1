"""
Dashboard routes: create, list, update and delete dashboards.
"""

from fastapi import APIRouter

from ..schemas import (
    CreateDashboardRequest,
    DashboardResponse,
    MessageResponse,
    UpdateDashboardRequest,
)
from ..services import DashboardServiceDep

router = APIRouter(prefix="/dashboards", tags=["dashboards"])


@router.get("")
async def list_dashboards(service: DashboardServiceDep) -> list[DashboardResponse]:
    """List all dashboards."""
    return [DashboardResponse.from_db(d) for d in service.list_dashboards()]


@router.post("", status_code=201)
async def create_dashboard(
    request: CreateDashboardRequest,
    service: DashboardServiceDep
) -> DashboardResponse:
    """Create a dashboard. Its config starts with the defaults."""
    dashboard = service.create_dashboard(request.id, request.name, request.description)
    return DashboardResponse.from_db(dashboard)


@router.get("/{dashboard_id}")
async def get_dashboard(dashboard_id: str, service: DashboardServiceDep) -> DashboardResponse:
    return DashboardResponse.from_db(service.get_dashboard(dashboard_id))


@router.put("/{dashboard_id}")
async def update_dashboard(
    dashboard_id: str,
    request: UpdateDashboardRequest,
    service: DashboardServiceDep
) -> DashboardResponse:
    """Update a dashboard's name or description."""
    dashboard = service.update_dashboard(dashboard_id, request.name, request.description)
    return DashboardResponse.from_db(dashboard)


@router.delete("/{dashboard_id}")
async def delete_dashboard(dashboard_id: str, service: DashboardServiceDep) -> MessageResponse:
    """Delete a dashboard with its feeds, content and config."""
    await service.delete_dashboard(dashboard_id)
    return MessageResponse(message="Dashboard deleted")
