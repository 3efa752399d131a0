"""Enrollment Repository — SQLAlchemy implementation of the validator's data access.

Invariants:
    - Every method issues parameterized queries through the request's AsyncSession
    - Only "enrolled" rows count toward credits, seats and occupied slots
    - Only "completed" rows with a grade outside {F, NC} count as passed courses
    - Never commits on its own; commit()/rollback() are called by the validator

Design Decisions:
    - Returns core value objects (OfferingSnapshot, EnrolledSlot, PrerequisiteEdge),
      never ORM rows: the validator stays independent of the ORM
    - lock_student uses SELECT ... FOR UPDATE; SQLite ignores the clause
"""

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from unierp.core.domain_types import (
    CourseId, EnrollmentStatus, OfferingId, StudentId, UserRole,
)
from unierp.core.grades import FAILING_GRADES
from unierp.core.prerequisites import PrerequisiteEdge
from unierp.core.repository_protocols import OfferingSnapshot
from unierp.core.schedule_conflicts import EnrolledSlot, ScheduleSlot
from unierp.core.system_settings import REGISTRATION_OPEN, read_flag
from unierp.models.course import Course
from unierp.models.course_offering import CourseOffering
from unierp.models.course_schedule import CourseSchedule
from unierp.models.enrollment import Enrollment
from unierp.models.prerequisite import Prerequisite
from unierp.models.system_setting import SystemSetting
from unierp.models.user import User


def _to_slot(schedule: CourseSchedule) -> ScheduleSlot:
    return ScheduleSlot(
        day=schedule.day_of_week,
        start=schedule.start_time,
        end=schedule.end_time,
    )


class SqlEnrollmentRepository:
    """EnrollmentRepository backed by the relational store."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_offering(self, offering_id: OfferingId) -> OfferingSnapshot | None:
        result = await self.db.execute(
            select(CourseOffering).where(CourseOffering.id == offering_id)
            .execution_options(populate_existing=True),
        )
        offering = result.scalar_one_or_none()
        if offering is None or offering.course is None:
            return None
        return OfferingSnapshot(
            id=OfferingId(offering.id),
            course_id=CourseId(offering.course_id),
            course_name=offering.course.name,
            credits=offering.course.credits,
            max_students=offering.max_students,
            schedule_slots=[_to_slot(s) for s in offering.schedules],
            registration_open=offering.registration_open,
        )

    async def get_prerequisite_edges(self, course_id: CourseId) -> list[PrerequisiteEdge]:
        result = await self.db.execute(
            select(Prerequisite.prerequisite_id, Course.name, Prerequisite.min_grade)
            .join(Course, Course.id == Prerequisite.prerequisite_id)
            .where(Prerequisite.course_id == course_id)
            .order_by(Prerequisite.prerequisite_id),
        )
        return [
            PrerequisiteEdge(
                prerequisite_id=row.prerequisite_id,
                prerequisite_name=row.name,
                min_grade=row.min_grade,
            )
            for row in result.all()
        ]

    async def get_completed_passing_courses(
        self, student_id: StudentId,
    ) -> list[tuple[str, str]]:
        """(course_id, grade) for completed enrollments with a passing grade."""
        result = await self.db.execute(
            select(CourseOffering.course_id, Enrollment.grade)
            .join(CourseOffering, CourseOffering.id == Enrollment.course_offering_id)
            .where(Enrollment.student_id == student_id)
            .where(Enrollment.status == EnrollmentStatus.COMPLETED.value)
            .where(Enrollment.grade.is_not(None))
            .where(Enrollment.grade.not_in(FAILING_GRADES)),
        )
        return [(row.course_id, row.grade) for row in result.all()]

    async def get_enrolled_slots(self, student_id: StudentId) -> list[EnrolledSlot]:
        result = await self.db.execute(
            select(CourseSchedule, CourseOffering.course_id, Course.name)
            .join(CourseOffering, CourseOffering.id == CourseSchedule.course_offering_id)
            .join(Course, Course.id == CourseOffering.course_id)
            .join(
                Enrollment,
                Enrollment.course_offering_id == CourseOffering.id,
            )
            .where(Enrollment.student_id == student_id)
            .where(Enrollment.status == EnrollmentStatus.ENROLLED.value)
            .order_by(CourseSchedule.day_of_week, CourseSchedule.start_time),
        )
        return [
            EnrolledSlot(
                offering_id=schedule.course_offering_id,
                course_id=course_id,
                course_name=name,
                slot=_to_slot(schedule),
            )
            for schedule, course_id, name in result.all()
        ]

    async def get_enrolled_credits(self, student_id: StudentId) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.sum(Course.credits), 0))
            .select_from(Enrollment)
            .join(CourseOffering, CourseOffering.id == Enrollment.course_offering_id)
            .join(Course, Course.id == CourseOffering.course_id)
            .where(Enrollment.student_id == student_id)
            .where(Enrollment.status == EnrollmentStatus.ENROLLED.value),
        )
        return int(result.scalar_one())

    async def count_enrolled(self, offering_id: OfferingId) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(Enrollment)
            .where(Enrollment.course_offering_id == offering_id)
            .where(Enrollment.status == EnrollmentStatus.ENROLLED.value),
        )
        return int(result.scalar_one())

    async def is_registration_open(self) -> bool:
        """The system-wide registration switch; open when never set."""
        result = await self.db.execute(
            select(SystemSetting.value).where(SystemSetting.key == REGISTRATION_OPEN),
        )
        return read_flag(REGISTRATION_OPEN, result.scalar_one_or_none())

    async def lock_student(self, student_id: StudentId) -> bool:
        """Row-lock the student until the transaction ends. False if no such student."""
        result = await self.db.execute(
            select(User.id)
            .where(User.id == student_id)
            .where(User.role == UserRole.STUDENT.value)
            .with_for_update(),
        )
        return result.scalar_one_or_none() is not None

    async def get_enrollment_status(
        self, student_id: StudentId, offering_id: OfferingId,
    ) -> str | None:
        """Status of the existing row for this pair, of any status, or None."""
        result = await self.db.execute(
            select(Enrollment.status)
            .where(Enrollment.student_id == student_id)
            .where(Enrollment.course_offering_id == offering_id),
        )
        return result.scalar_one_or_none()

    async def insert_enrollment(
        self, student_id: StudentId, offering_id: OfferingId,
    ) -> None:
        self.db.add(Enrollment(
            student_id=student_id,
            course_offering_id=offering_id,
            status=EnrollmentStatus.ENROLLED.value,
        ))
        await self.db.flush()

    async def delete_enrollment(
        self, student_id: StudentId, offering_id: OfferingId,
    ) -> bool:
        """Delete an active enrollment. Completed/dropped history is kept."""
        result = await self.db.execute(
            delete(Enrollment)
            .where(Enrollment.student_id == student_id)
            .where(Enrollment.course_offering_id == offering_id)
            .where(Enrollment.status == EnrollmentStatus.ENROLLED.value),
        )
        return result.rowcount > 0

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
