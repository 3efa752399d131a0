"""Catalog Service — courses, prerequisite edges, offerings and schedule slots.

Invariants:
    - Updates apply only the fields a *Update schema reports as explicitly set
    - An empty update raises EmptyUpdateError; a missing row raises ResourceNotFoundError
    - A course cannot list itself as a prerequisite
    - A schedule slot's end_time stays after its start_time after any partial update
    - Every write commits before returning
"""

import logging
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from unierp.core.domain_types import EnrollmentStatus
from unierp.core.errors import (
    BusinessRuleError, ErrorContext, ResourceNotFoundError,
)
from unierp.models.course import Course
from unierp.models.course_offering import CourseOffering
from unierp.models.course_schedule import CourseSchedule
from unierp.models.enrollment import Enrollment
from unierp.models.prerequisite import Prerequisite
from unierp.schemas.catalog import (
    CourseCreate, CourseUpdate, OfferingCreate, OfferingResponse, OfferingUpdate,
    PrerequisiteCreate, PrerequisiteResponse, ScheduleCreate, ScheduleResponse,
    ScheduleUpdate,
)
from unierp.schemas.partial_update import apply_update

logger = logging.getLogger(__name__)


class CatalogService:
    """CRUD for the course catalog."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Courses ────────────────────────────────────────────────

    async def list_courses(self) -> list[Course]:
        result = await self.db.execute(
            select(Course).order_by(Course.department, Course.id),
        )
        return list(result.scalars().all())

    async def get_course(self, course_id: str) -> Course:
        course = await self.db.get(Course, course_id)
        if course is None:
            raise ResourceNotFoundError(
                "Course", course_id, ErrorContext(course_id=course_id),
            )
        return course

    async def create_course(self, body: CourseCreate) -> Course:
        if await self.db.get(Course, body.id) is not None:
            raise BusinessRuleError(
                f"Course '{body.id}' already exists", "COURSE_EXISTS",
                ErrorContext(course_id=body.id),
            )
        course = Course(**body.model_dump())
        self.db.add(course)
        await self.db.commit()
        await self.db.refresh(course)
        logger.info("Course created", extra={"course_id": course.id})
        return course

    async def update_course(self, course_id: str, body: CourseUpdate) -> Course:
        course = await self.get_course(course_id)
        apply_update(course, body, "course")
        await self.db.commit()
        await self.db.refresh(course)
        return course

    async def delete_course(self, course_id: str) -> None:
        course = await self.get_course(course_id)
        await self.db.delete(course)
        await self.db.commit()
        logger.info("Course deleted", extra={"course_id": course_id})

    # ─── Prerequisites ──────────────────────────────────────────

    async def list_prerequisites(self, course_id: str) -> list[PrerequisiteResponse]:
        await self.get_course(course_id)
        result = await self.db.execute(
            select(Prerequisite, Course.name)
            .join(Course, Course.id == Prerequisite.prerequisite_id)
            .where(Prerequisite.course_id == course_id)
            .order_by(Prerequisite.prerequisite_id),
        )
        return [
            PrerequisiteResponse(
                course_id=edge.course_id,
                prerequisite_id=edge.prerequisite_id,
                prerequisite_name=name,
                min_grade=edge.min_grade,
            )
            for edge, name in result.all()
        ]

    async def add_prerequisite(
        self, course_id: str, body: PrerequisiteCreate,
    ) -> PrerequisiteResponse:
        course = await self.get_course(course_id)
        if body.prerequisite_id == course.id:
            raise BusinessRuleError(
                "A course cannot be its own prerequisite", "SELF_PREREQUISITE",
                ErrorContext(course_id=course_id),
            )
        required = await self.get_course(body.prerequisite_id)
        edge = await self.db.get(Prerequisite, (course.id, required.id))
        if edge is None:
            edge = Prerequisite(course_id=course.id, prerequisite_id=required.id)
            self.db.add(edge)
        edge.min_grade = body.min_grade
        await self.db.commit()
        return PrerequisiteResponse(
            course_id=course.id,
            prerequisite_id=required.id,
            prerequisite_name=required.name,
            min_grade=edge.min_grade,
        )

    async def remove_prerequisite(self, course_id: str, prerequisite_id: str) -> None:
        edge = await self.db.get(Prerequisite, (course_id, prerequisite_id))
        if edge is None:
            raise ResourceNotFoundError(
                "Prerequisite", f"{course_id}->{prerequisite_id}",
                ErrorContext(course_id=course_id),
            )
        await self.db.delete(edge)
        await self.db.commit()

    # ─── Offerings ──────────────────────────────────────────────

    async def list_offerings(self) -> list[OfferingResponse]:
        result = await self.db.execute(
            select(CourseOffering, self._enrolled_count())
            .join(Course, Course.id == CourseOffering.course_id)
            .order_by(
                CourseOffering.year.desc(), CourseOffering.semester,
                Course.department, Course.id,
            )
            .execution_options(populate_existing=True),
        )
        return [self._offering_response(o, count) for o, count in result.all()]

    async def get_offering(self, offering_id: UUID) -> OfferingResponse:
        result = await self.db.execute(
            select(CourseOffering, self._enrolled_count())
            .where(CourseOffering.id == offering_id)
            .execution_options(populate_existing=True),
        )
        row = result.one_or_none()
        if row is None:
            raise ResourceNotFoundError(
                "Course offering", str(offering_id),
                ErrorContext(offering_id=str(offering_id)),
            )
        offering, count = row
        return self._offering_response(offering, count)

    async def create_offering(self, body: OfferingCreate) -> OfferingResponse:
        await self.get_course(body.course_id)
        offering = CourseOffering(**body.model_dump(exclude={"schedules"}))
        offering.schedules = [
            CourseSchedule(
                day_of_week=slot.day_of_week.value,
                start_time=slot.start_time,
                end_time=slot.end_time,
                room_number=slot.room_number,
                schedule_type=slot.schedule_type,
            )
            for slot in body.schedules
        ]
        self.db.add(offering)
        await self.db.commit()
        logger.info(
            "Offering created",
            extra={"offering_id": offering.id, "course_id": offering.course_id},
        )
        return await self.get_offering(offering.id)

    async def update_offering(
        self, offering_id: UUID, body: OfferingUpdate,
    ) -> OfferingResponse:
        offering = await self._require_offering_row(offering_id)
        apply_update(offering, body, "course offering")
        await self.db.commit()
        return await self.get_offering(offering_id)

    # ─── Schedule slots ─────────────────────────────────────────

    async def add_schedule(
        self, offering_id: UUID, body: ScheduleCreate,
    ) -> ScheduleResponse:
        await self._require_offering_row(offering_id)
        schedule = CourseSchedule(
            course_offering_id=offering_id,
            day_of_week=body.day_of_week.value,
            start_time=body.start_time,
            end_time=body.end_time,
            room_number=body.room_number,
            schedule_type=body.schedule_type,
        )
        self.db.add(schedule)
        await self.db.commit()
        await self.db.refresh(schedule)
        return ScheduleResponse.model_validate(schedule)

    async def update_schedule(
        self, schedule_id: UUID, body: ScheduleUpdate,
    ) -> ScheduleResponse:
        schedule = await self._require_schedule_row(schedule_id)
        apply_update(schedule, body, "schedule slot")
        if schedule.end_time <= schedule.start_time:
            await self.db.rollback()
            raise BusinessRuleError(
                "end_time must be after start_time", "INVALID_TIME_RANGE",
            )
        await self.db.commit()
        await self.db.refresh(schedule)
        return ScheduleResponse.model_validate(schedule)

    async def delete_schedule(self, schedule_id: UUID) -> None:
        schedule = await self._require_schedule_row(schedule_id)
        await self.db.delete(schedule)
        await self.db.commit()

    # ─── Helpers ────────────────────────────────────────────────

    @staticmethod
    def _enrolled_count():
        return (
            select(func.count())
            .select_from(Enrollment)
            .where(Enrollment.course_offering_id == CourseOffering.id)
            .where(Enrollment.status == EnrollmentStatus.ENROLLED.value)
            .correlate(CourseOffering)
            .scalar_subquery()
        )

    @staticmethod
    def _offering_response(offering: CourseOffering, count: int) -> OfferingResponse:
        return OfferingResponse(
            id=offering.id,
            course_id=offering.course_id,
            course_name=offering.course.name,
            credits=offering.course.credits,
            professor_id=offering.professor_id,
            semester=offering.semester,
            year=offering.year,
            max_students=offering.max_students,
            location=offering.location,
            registration_open=offering.registration_open,
            enrolled_count=count or 0,
            schedules=[
                ScheduleResponse.model_validate(s) for s in offering.schedules
            ],
        )

    async def _require_offering_row(self, offering_id: UUID) -> CourseOffering:
        offering = await self.db.get(CourseOffering, offering_id)
        if offering is None:
            raise ResourceNotFoundError(
                "Course offering", str(offering_id),
                ErrorContext(offering_id=str(offering_id)),
            )
        return offering

    async def _require_schedule_row(self, schedule_id: UUID) -> CourseSchedule:
        schedule = await self.db.get(CourseSchedule, schedule_id)
        if schedule is None:
            raise ResourceNotFoundError("Schedule slot", str(schedule_id))
        return schedule
