"""
Content routes: a dashboard's rotating playlist.
"""

from fastapi import APIRouter

from ..schemas import AddContentRequest, ContentResponse, MessageResponse, UpdateContentRequest
from ..services import ContentServiceDep, DashboardParam

router = APIRouter(prefix="/content", tags=["content"])


@router.get("")
async def list_content(service: ContentServiceDep, dashboard: DashboardParam) -> list[ContentResponse]:
    return [ContentResponse.from_db(c) for c in service.list_content(dashboard)]


@router.post("", status_code=201)
async def add_content(
    request: AddContentRequest,
    service: ContentServiceDep,
    dashboard: DashboardParam
) -> ContentResponse:
    item = await service.add_content(dashboard, request.url, request.title, request.type)
    return ContentResponse.from_db(item)


@router.put("/{content_id}")
async def update_content(
    content_id: str,
    request: UpdateContentRequest,
    service: ContentServiceDep,
    dashboard: DashboardParam
) -> ContentResponse:
    item = await service.update_content(dashboard, content_id, request.url, request.title, request.type)
    return ContentResponse.from_db(item)


@router.delete("/{content_id}")
async def delete_content(
    content_id: str,
    service: ContentServiceDep,
    dashboard: DashboardParam
) -> MessageResponse:
    await service.delete_content(dashboard, content_id)
    return MessageResponse(message="Content deleted")
