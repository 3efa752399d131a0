"""Enrollment Service — student enrollments, rosters, grading, history, GPA, timetable.

Invariants:
    - Grade updates go through EnrollmentUpdate (explicit partial update)
    - Status changes obey the enrollment lifecycle (core/enrollment_lifecycle.py)
    - GPA counts only completed enrollments that carry a grade
    - Timetable shows only "enrolled" offerings
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from unierp.core.domain_types import EnrollmentStatus
from unierp.core.enrollment_lifecycle import check_transition
from unierp.core.errors import EmptyUpdateError, ErrorContext, ResourceNotFoundError
from unierp.core.grades import GpaSummary, compute_gpa
from unierp.core.timetable import TimetableSlot, build_weekly_timetable
from unierp.models.course import Course
from unierp.models.course_offering import CourseOffering
from unierp.models.course_schedule import CourseSchedule
from unierp.models.enrollment import Enrollment
from unierp.models.user import User
from unierp.schemas.enrollment import (
    EnrollmentResponse, EnrollmentUpdate, HistoryEntry, RosterEntry,
)

logger = logging.getLogger(__name__)

Professor = aliased(User)


def _enrollment_fields(e: Enrollment) -> dict:
    return {
        "student_id": e.student_id,
        "course_offering_id": e.course_offering_id,
        "status": e.status,
        "grade": e.grade,
        "midterm_grade": e.midterm_grade,
        "final_grade": e.final_grade,
        "attendance_percentage": e.attendance_percentage,
        "feedback": e.feedback,
    }


class EnrollmentService:
    """Read models and grading over the enrollments table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_student(self, student_id: UUID) -> list[EnrollmentResponse]:
        result = await self.db.execute(
            select(Enrollment, Course, CourseOffering)
            .join(CourseOffering, CourseOffering.id == Enrollment.course_offering_id)
            .join(Course, Course.id == CourseOffering.course_id)
            .where(Enrollment.student_id == student_id)
            .order_by(
                CourseOffering.year.desc(), CourseOffering.semester,
                Enrollment.created_at.desc(),
            ),
        )
        return [
            EnrollmentResponse(
                **_enrollment_fields(e),
                course_id=course.id,
                course_name=course.name,
                credits=course.credits,
                semester=offering.semester,
                year=offering.year,
            )
            for e, course, offering in result.all()
        ]

    async def roster(self, offering_id: UUID) -> list[RosterEntry]:
        if await self.db.get(CourseOffering, offering_id) is None:
            raise ResourceNotFoundError(
                "Course offering", str(offering_id),
                ErrorContext(offering_id=str(offering_id)),
            )
        result = await self.db.execute(
            select(Enrollment, User)
            .join(User, User.id == Enrollment.student_id)
            .where(Enrollment.course_offering_id == offering_id)
            .order_by(User.name),
        )
        return [
            RosterEntry(
                student_id=user.id,
                student_name=user.name,
                student_number=user.student_id,
                status=e.status,
                grade=e.grade,
                attendance_percentage=e.attendance_percentage,
            )
            for e, user in result.all()
        ]

    async def update_enrollment(
        self, student_id: UUID, offering_id: UUID, body: EnrollmentUpdate,
    ) -> EnrollmentResponse:
        """Apply grade/status fields. Rejects illegal lifecycle transitions."""
        if body.is_empty:
            raise EmptyUpdateError("enrollment")
        enrollment = await self.db.get(Enrollment, (student_id, offering_id))
        if enrollment is None:
            raise ResourceNotFoundError(
                "Enrollment", f"{student_id}/{offering_id}",
                ErrorContext(student_id=str(student_id), offering_id=str(offering_id)),
            )
        changes = body.changes()
        if "status" in changes:
            check_transition(enrollment.status, changes["status"])
        for column, value in changes.items():
            setattr(enrollment, column, value)
        enrollment.updated_at = datetime.now(timezone.utc)
        await self.db.commit()
        logger.info(
            f"Enrollment updated: {sorted(changes)}",
            extra={"student_id": student_id, "offering_id": offering_id},
        )
        listed = await self.list_for_student(student_id)
        return next(e for e in listed if e.course_offering_id == offering_id)

    async def history(self, student_id: UUID) -> list[HistoryEntry]:
        result = await self.db.execute(
            select(Enrollment, Course, CourseOffering, Professor.name)
            .join(CourseOffering, CourseOffering.id == Enrollment.course_offering_id)
            .join(Course, Course.id == CourseOffering.course_id)
            .outerjoin(Professor, Professor.id == CourseOffering.professor_id)
            .where(Enrollment.student_id == student_id)
            .order_by(CourseOffering.year.desc(), CourseOffering.semester.desc()),
        )
        return [
            HistoryEntry(
                **_enrollment_fields(e),
                course_id=course.id,
                course_name=course.name,
                credits=course.credits,
                semester=offering.semester,
                year=offering.year,
                instructor_name=instructor,
            )
            for e, course, offering, instructor in result.all()
        ]

    async def gpa(self, student_id: UUID) -> GpaSummary:
        result = await self.db.execute(
            select(Enrollment.grade, Course.credits)
            .join(CourseOffering, CourseOffering.id == Enrollment.course_offering_id)
            .join(Course, Course.id == CourseOffering.course_id)
            .where(Enrollment.student_id == student_id)
            .where(Enrollment.status == EnrollmentStatus.COMPLETED.value)
            .where(Enrollment.grade.is_not(None)),
        )
        return compute_gpa([(grade, int(credits)) for grade, credits in result.all()])

    async def timetable(self, student_id: UUID) -> dict[str, list[TimetableSlot]]:
        result = await self.db.execute(
            select(CourseSchedule, Course.id, Course.name)
            .join(CourseOffering, CourseOffering.id == CourseSchedule.course_offering_id)
            .join(Course, Course.id == CourseOffering.course_id)
            .join(Enrollment, Enrollment.course_offering_id == CourseOffering.id)
            .where(Enrollment.student_id == student_id)
            .where(Enrollment.status == EnrollmentStatus.ENROLLED.value),
        )
        return build_weekly_timetable([
            TimetableSlot(
                offering_id=schedule.course_offering_id,
                course_id=course_id,
                course_name=name,
                day=schedule.day_of_week,
                start_time=schedule.start_time,
                end_time=schedule.end_time,
                room_number=schedule.room_number,
                schedule_type=schedule.schedule_type,
            )
            for schedule, course_id, name in result.all()
        ])
