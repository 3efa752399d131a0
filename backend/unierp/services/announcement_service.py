"""Announcement Service — notices posted to the students of a course offering.

Invariants:
    - Every announcement belongs to an existing offering
    - A student's feed covers only offerings they are currently enrolled in, and
      only announcements inside their visibility window
    - Listings put pinned announcements first, then newest first
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from unierp.core.coursework import check_visibility_window, is_visible
from unierp.core.domain_types import EnrollmentStatus
from unierp.core.errors import BusinessRuleError, ErrorContext, ResourceNotFoundError
from unierp.models.announcement import Announcement
from unierp.models.course import Course
from unierp.models.course_offering import CourseOffering
from unierp.models.enrollment import Enrollment
from unierp.models.user import User
from unierp.schemas.announcements import (
    CourseAnnouncementCreate, CourseAnnouncementResponse, CourseAnnouncementUpdate,
)
from unierp.schemas.partial_update import apply_update

logger = logging.getLogger(__name__)

Author = aliased(User)


def _response(
    a: Announcement, course_id: str, course_name: str, author: str | None,
) -> CourseAnnouncementResponse:
    return CourseAnnouncementResponse(
        id=a.id,
        course_offering_id=a.course_offering_id,
        course_id=course_id,
        course_name=course_name,
        title=a.title,
        content=a.content,
        priority=a.priority,
        is_pinned=a.is_pinned,
        attachment_urls=list(a.attachment_urls or []),
        visible_from=a.visible_from,
        visible_until=a.visible_until,
        created_by=a.created_by,
        creator_name=author,
        created_at=a.created_at,
    )


class AnnouncementService:
    """Course announcements: post, revise, remove and list."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> list[CourseAnnouncementResponse]:
        result = await self.db.execute(self._query())
        return [_response(*row) for row in result.all()]

    async def list_for_offering(
        self, offering_id: UUID,
    ) -> list[CourseAnnouncementResponse]:
        await self._require_offering_row(offering_id)
        result = await self.db.execute(
            self._query().where(Announcement.course_offering_id == offering_id),
        )
        return [_response(*row) for row in result.all()]

    async def list_for_student(
        self, student_id: UUID, now: datetime | None = None,
    ) -> list[CourseAnnouncementResponse]:
        now = now or datetime.now(timezone.utc)
        result = await self.db.execute(
            self._query()
            .join(
                Enrollment,
                Enrollment.course_offering_id == Announcement.course_offering_id,
            )
            .where(Enrollment.student_id == student_id)
            .where(Enrollment.status == EnrollmentStatus.ENROLLED.value),
        )
        return [
            _response(*row) for row in result.all()
            if is_visible(now, row[0].visible_from, row[0].visible_until)
        ]

    async def get(self, announcement_id: UUID) -> CourseAnnouncementResponse:
        result = await self.db.execute(
            self._query()
            .where(Announcement.id == announcement_id)
            .execution_options(populate_existing=True),
        )
        row = result.one_or_none()
        if row is None:
            raise ResourceNotFoundError("Announcement", str(announcement_id))
        return _response(*row)

    async def create(
        self, offering_id: UUID, body: CourseAnnouncementCreate,
    ) -> CourseAnnouncementResponse:
        await self._require_offering_row(offering_id)
        announcement = Announcement(course_offering_id=offering_id, **body.model_dump())
        self.db.add(announcement)
        await self.db.commit()
        logger.info(
            f"Announcement posted: {announcement.title}",
            extra={"offering_id": offering_id},
        )
        return await self.get(announcement.id)

    async def update(
        self, announcement_id: UUID, body: CourseAnnouncementUpdate,
    ) -> CourseAnnouncementResponse:
        announcement = await self._require_row(announcement_id)
        apply_update(announcement, body, "announcement")
        try:
            check_visibility_window(
                announcement.visible_from, announcement.visible_until,
            )
        except BusinessRuleError:
            await self.db.rollback()
            raise
        await self.db.commit()
        return await self.get(announcement_id)

    async def delete(self, announcement_id: UUID) -> None:
        announcement = await self._require_row(announcement_id)
        await self.db.delete(announcement)
        await self.db.commit()

    # ─── Helpers ────────────────────────────────────────────────

    @staticmethod
    def _query():
        return (
            select(Announcement, Course.id, Course.name, Author.name)
            .join(CourseOffering, CourseOffering.id == Announcement.course_offering_id)
            .join(Course, Course.id == CourseOffering.course_id)
            .outerjoin(Author, Author.id == Announcement.created_by)
            .order_by(Announcement.is_pinned.desc(), Announcement.created_at.desc())
        )

    async def _require_offering_row(self, offering_id: UUID) -> CourseOffering:
        offering = await self.db.get(CourseOffering, offering_id)
        if offering is None:
            raise ResourceNotFoundError(
                "Course offering", str(offering_id),
                ErrorContext(offering_id=str(offering_id)),
            )
        return offering

    async def _require_row(self, announcement_id: UUID) -> Announcement:
        announcement = await self.db.get(Announcement, announcement_id)
        if announcement is None:
            raise ResourceNotFoundError("Announcement", str(announcement_id))
        return announcement
