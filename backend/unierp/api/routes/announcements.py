"""Course Announcement Routes — post to an offering, revise, remove, read feeds."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from unierp.api.dependencies import get_announcement_service
from unierp.schemas.announcements import (
    CourseAnnouncementCreate, CourseAnnouncementResponse, CourseAnnouncementUpdate,
)
from unierp.services.announcement_service import AnnouncementService

router = APIRouter(prefix="/api/v1", tags=["announcements"])


@router.get("/announcements", response_model=list[CourseAnnouncementResponse])
async def list_announcements(
    announcements: AnnouncementService = Depends(get_announcement_service),
):
    return await announcements.list_all()


@router.get(
    "/offerings/{offering_id}/announcements",
    response_model=list[CourseAnnouncementResponse],
)
async def offering_announcements(
    offering_id: UUID,
    announcements: AnnouncementService = Depends(get_announcement_service),
):
    return await announcements.list_for_offering(offering_id)


@router.post(
    "/offerings/{offering_id}/announcements",
    response_model=CourseAnnouncementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_announcement(
    offering_id: UUID,
    body: CourseAnnouncementCreate,
    announcements: AnnouncementService = Depends(get_announcement_service),
):
    return await announcements.create(offering_id, body)


@router.get(
    "/students/{student_id}/announcements",
    response_model=list[CourseAnnouncementResponse],
)
async def student_announcements(
    student_id: UUID,
    announcements: AnnouncementService = Depends(get_announcement_service),
):
    """Visible announcements of the offerings the student is enrolled in."""
    return await announcements.list_for_student(student_id)


@router.get(
    "/announcements/{announcement_id}", response_model=CourseAnnouncementResponse,
)
async def get_announcement(
    announcement_id: UUID,
    announcements: AnnouncementService = Depends(get_announcement_service),
):
    return await announcements.get(announcement_id)


@router.patch(
    "/announcements/{announcement_id}", response_model=CourseAnnouncementResponse,
)
async def update_announcement(
    announcement_id: UUID,
    body: CourseAnnouncementUpdate,
    announcements: AnnouncementService = Depends(get_announcement_service),
):
    return await announcements.update(announcement_id, body)


@router.delete(
    "/announcements/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_announcement(
    announcement_id: UUID,
    announcements: AnnouncementService = Depends(get_announcement_service),
):
    await announcements.delete(announcement_id)
