"""System Routes — settings (including the registration switch) and global announcements.

Invariants:
    - PUT on a setting upserts it; GET of an unset key -> 404
    - /registration always answers, reading an unset switch as open
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from unierp.api.dependencies import get_system_service
from unierp.schemas.announcements import (
    AnnouncementCreate, AnnouncementResponse, AnnouncementUpdate,
)
from unierp.schemas.system import SettingResponse, SettingUpdate
from unierp.services.system_service import SystemService

router = APIRouter(prefix="/api/v1/system", tags=["system"])


@router.get("/settings", response_model=list[SettingResponse])
async def list_settings(system: SystemService = Depends(get_system_service)):
    return await system.list_settings()


@router.get("/settings/{key}", response_model=SettingResponse)
async def get_setting(key: str, system: SystemService = Depends(get_system_service)):
    return await system.get_setting(key)


@router.put("/settings/{key}", response_model=SettingResponse)
async def put_setting(
    key: str,
    body: SettingUpdate,
    system: SystemService = Depends(get_system_service),
):
    return await system.put_setting(key, body)


@router.get("/registration")
async def registration_status(system: SystemService = Depends(get_system_service)):
    return {"registration_open": await system.registration_open()}


@router.get("/announcements", response_model=list[AnnouncementResponse])
async def list_announcements(
    include_hidden: bool = False,
    system: SystemService = Depends(get_system_service),
):
    return await system.list_announcements(include_hidden)


@router.post(
    "/announcements",
    response_model=AnnouncementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_announcement(
    body: AnnouncementCreate, system: SystemService = Depends(get_system_service),
):
    return await system.create_announcement(body)


@router.get("/announcements/{announcement_id}", response_model=AnnouncementResponse)
async def get_announcement(
    announcement_id: UUID, system: SystemService = Depends(get_system_service),
):
    return await system.get_announcement(announcement_id)


@router.patch("/announcements/{announcement_id}", response_model=AnnouncementResponse)
async def update_announcement(
    announcement_id: UUID,
    body: AnnouncementUpdate,
    system: SystemService = Depends(get_system_service),
):
    return await system.update_announcement(announcement_id, body)


@router.delete(
    "/announcements/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_announcement(
    announcement_id: UUID, system: SystemService = Depends(get_system_service),
):
    await system.delete_announcement(announcement_id)
