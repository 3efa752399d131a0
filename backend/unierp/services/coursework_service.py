"""Coursework Service — assignments per offering, student submissions and their grading.

Invariants:
    - Only students currently enrolled in the offering may submit
    - One submission per (assignment, student); submitting again revises it and
      returns it to "submitted"
    - Deadline and active-flag rules come from core/coursework.py
    - A grade never exceeds the assignment's max_points; grading marks it "graded"
    - Assignments list by due date (soonest first); submissions newest first
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from unierp.core.coursework import check_can_submit, check_points
from unierp.core.domain_types import EnrollmentStatus, SubmissionStatus
from unierp.core.errors import BusinessRuleError, ErrorContext, ResourceNotFoundError
from unierp.models.assignment import Assignment
from unierp.models.assignment_submission import AssignmentSubmission
from unierp.models.course import Course
from unierp.models.course_offering import CourseOffering
from unierp.models.enrollment import Enrollment
from unierp.models.user import User
from unierp.schemas.coursework import (
    AssignmentCreate, AssignmentResponse, AssignmentUpdate,
    SubmissionCreate, SubmissionGrade, SubmissionResponse,
)
from unierp.schemas.partial_update import apply_update

logger = logging.getLogger(__name__)

Creator = aliased(User)


def _assignment_response(
    a: Assignment, course_id: str, course_name: str, creator: str | None,
) -> AssignmentResponse:
    return AssignmentResponse(
        id=a.id,
        course_offering_id=a.course_offering_id,
        course_id=course_id,
        course_name=course_name,
        title=a.title,
        description=a.description,
        due_date=a.due_date,
        max_points=a.max_points,
        created_by=a.created_by,
        creator_name=creator,
        is_active=a.is_active,
        created_at=a.created_at,
    )


def _submission_response(s: AssignmentSubmission, student: User) -> SubmissionResponse:
    return SubmissionResponse(
        id=s.id,
        assignment_id=s.assignment_id,
        student_id=s.student_id,
        student_name=student.name,
        student_number=student.student_id,
        submission_text=s.submission_text,
        file_path=s.file_path,
        file_name=s.file_name,
        file_type=s.file_type,
        grade=s.grade,
        feedback=s.feedback,
        status=s.status,
        submitted_at=s.submitted_at,
        updated_at=s.updated_at,
    )


class CourseworkService:
    """Assignments and submissions for course offerings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Assignments ────────────────────────────────────────────

    async def list_assignments(self, offering_id: UUID) -> list[AssignmentResponse]:
        await self._require_offering_row(offering_id)
        result = await self.db.execute(
            self._assignment_query()
            .where(Assignment.course_offering_id == offering_id)
            .order_by(Assignment.due_date),
        )
        return [_assignment_response(*row) for row in result.all()]

    async def list_for_student(self, student_id: UUID) -> list[AssignmentResponse]:
        """Active assignments of every offering the student is enrolled in."""
        result = await self.db.execute(
            self._assignment_query()
            .join(
                Enrollment,
                Enrollment.course_offering_id == Assignment.course_offering_id,
            )
            .where(Enrollment.student_id == student_id)
            .where(Enrollment.status == EnrollmentStatus.ENROLLED.value)
            .where(Assignment.is_active.is_(True))
            .order_by(Assignment.due_date),
        )
        return [_assignment_response(*row) for row in result.all()]

    async def get_assignment(self, assignment_id: UUID) -> AssignmentResponse:
        result = await self.db.execute(
            self._assignment_query()
            .where(Assignment.id == assignment_id)
            .execution_options(populate_existing=True),
        )
        row = result.one_or_none()
        if row is None:
            raise ResourceNotFoundError("Assignment", str(assignment_id))
        return _assignment_response(*row)

    async def create_assignment(
        self, offering_id: UUID, body: AssignmentCreate,
    ) -> AssignmentResponse:
        await self._require_offering_row(offering_id)
        assignment = Assignment(course_offering_id=offering_id, **body.model_dump())
        self.db.add(assignment)
        await self.db.commit()
        logger.info(
            f"Assignment created: {assignment.title}",
            extra={"offering_id": offering_id, "assignment_id": assignment.id},
        )
        return await self.get_assignment(assignment.id)

    async def update_assignment(
        self, assignment_id: UUID, body: AssignmentUpdate,
    ) -> AssignmentResponse:
        assignment = await self._require_assignment_row(assignment_id)
        apply_update(assignment, body, "assignment")
        await self.db.commit()
        return await self.get_assignment(assignment_id)

    async def delete_assignment(self, assignment_id: UUID) -> None:
        assignment = await self._require_assignment_row(assignment_id)
        await self.db.delete(assignment)
        await self.db.commit()
        logger.info("Assignment deleted", extra={"assignment_id": assignment_id})

    # ─── Submissions ────────────────────────────────────────────

    async def submit(
        self,
        assignment_id: UUID,
        student_id: UUID,
        body: SubmissionCreate,
        now: datetime | None = None,
    ) -> SubmissionResponse:
        """Create the student's submission, or revise the existing one."""
        assignment = await self._require_assignment_row(assignment_id)
        context = ErrorContext(
            student_id=str(student_id),
            offering_id=str(assignment.course_offering_id),
        )
        enrolled = await self.db.execute(
            select(Enrollment.status)
            .where(Enrollment.student_id == student_id)
            .where(Enrollment.course_offering_id == assignment.course_offering_id),
        )
        if enrolled.scalar_one_or_none() != EnrollmentStatus.ENROLLED.value:
            raise BusinessRuleError(
                "Only students enrolled in the course can submit",
                "NOT_ENROLLED", context,
            )

        submission = await self._find_submission(assignment_id, student_id)
        check_can_submit(
            assignment.due_date, assignment.is_active, submission is not None,
            now or datetime.now(timezone.utc), context,
        )
        if submission is None:
            submission = AssignmentSubmission(
                assignment_id=assignment_id, student_id=student_id,
                **body.model_dump(),
            )
            self.db.add(submission)
        else:
            for column, value in body.model_dump(exclude_unset=True).items():
                setattr(submission, column, value)
            submission.updated_at = datetime.now(timezone.utc)
        submission.status = SubmissionStatus.SUBMITTED.value
        await self.db.commit()
        logger.info(
            "Assignment submitted",
            extra={"student_id": student_id, "assignment_id": assignment_id},
        )
        return await self.get_submission(assignment_id, student_id)

    async def get_submission(
        self, assignment_id: UUID, student_id: UUID,
    ) -> SubmissionResponse:
        result = await self.db.execute(
            select(AssignmentSubmission, User)
            .join(User, User.id == AssignmentSubmission.student_id)
            .where(AssignmentSubmission.assignment_id == assignment_id)
            .where(AssignmentSubmission.student_id == student_id)
            .execution_options(populate_existing=True),
        )
        row = result.one_or_none()
        if row is None:
            raise ResourceNotFoundError(
                "Submission", f"{assignment_id}/{student_id}",
                ErrorContext(student_id=str(student_id)),
            )
        return _submission_response(*row)

    async def list_submissions(self, assignment_id: UUID) -> list[SubmissionResponse]:
        await self._require_assignment_row(assignment_id)
        result = await self.db.execute(
            select(AssignmentSubmission, User)
            .join(User, User.id == AssignmentSubmission.student_id)
            .where(AssignmentSubmission.assignment_id == assignment_id)
            .order_by(AssignmentSubmission.submitted_at.desc())
            .execution_options(populate_existing=True),
        )
        return [_submission_response(*row) for row in result.all()]

    async def grade_submission(
        self, assignment_id: UUID, student_id: UUID, body: SubmissionGrade,
    ) -> SubmissionResponse:
        assignment = await self._require_assignment_row(assignment_id)
        submission = await self._find_submission(assignment_id, student_id)
        context = ErrorContext(student_id=str(student_id))
        if submission is None:
            raise ResourceNotFoundError(
                "Submission", f"{assignment_id}/{student_id}", context,
            )
        check_points(body.grade, assignment.max_points, context)
        submission.grade = body.grade
        submission.feedback = body.feedback
        submission.status = SubmissionStatus.GRADED.value
        submission.updated_at = datetime.now(timezone.utc)
        await self.db.commit()
        logger.info(
            f"Submission graded {body.grade}/{assignment.max_points}",
            extra={"student_id": student_id, "assignment_id": assignment_id},
        )
        return await self.get_submission(assignment_id, student_id)

    # ─── Helpers ────────────────────────────────────────────────

    @staticmethod
    def _assignment_query():
        return (
            select(Assignment, Course.id, Course.name, Creator.name)
            .join(CourseOffering, CourseOffering.id == Assignment.course_offering_id)
            .join(Course, Course.id == CourseOffering.course_id)
            .outerjoin(Creator, Creator.id == Assignment.created_by)
        )

    async def _find_submission(
        self, assignment_id: UUID, student_id: UUID,
    ) -> AssignmentSubmission | None:
        result = await self.db.execute(
            select(AssignmentSubmission)
            .where(AssignmentSubmission.assignment_id == assignment_id)
            .where(AssignmentSubmission.student_id == student_id),
        )
        return result.scalar_one_or_none()

    async def _require_offering_row(self, offering_id: UUID) -> CourseOffering:
        offering = await self.db.get(CourseOffering, offering_id)
        if offering is None:
            raise ResourceNotFoundError(
                "Course offering", str(offering_id),
                ErrorContext(offering_id=str(offering_id)),
            )
        return offering

    async def _require_assignment_row(self, assignment_id: UUID) -> Assignment:
        assignment = await self.db.get(Assignment, assignment_id)
        if assignment is None:
            raise ResourceNotFoundError("Assignment", str(assignment_id))
        return assignment
