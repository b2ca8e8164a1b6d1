"""
Config routes: a dashboard's rotation and ticker settings.
"""

from fastapi import APIRouter

from ..schemas import ConfigResponse, ConfigUpdateRequest
from ..services import ConfigServiceDep, DashboardParam

router = APIRouter(prefix="/config", tags=["config"])


@router.get("")
async def get_config(service: ConfigServiceDep, dashboard: DashboardParam) -> ConfigResponse:
    return ConfigResponse.from_db(service.get_config(dashboard))


@router.post("")
async def update_config(
    request: ConfigUpdateRequest,
    service: ConfigServiceDep,
    dashboard: DashboardParam
) -> ConfigResponse:
    """
    Update config. Omitted fields are left unchanged.

    Disabling the ticker empties it for live viewers right away;
    enabling it refreshes the ticker when the dashboard has feeds.
    """
    config = await service.update_config(dashboard, request)
    return ConfigResponse.from_db(config)
