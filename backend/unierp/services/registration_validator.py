"""Registration Validator — decides whether a student may enroll, and enrolls them.

Invariants:
    - check_* methods propagate NotFound and data-access errors unchanged (no retry)
    - register_for_course runs checks in order: registration open (system-wide,
      then per offering) -> existing row -> prerequisites -> credit limit ->
      time conflicts (-> capacity when enforce_capacity); first failure wins
    - Only users with role "student" can be registered; anyone else is NotFound
    - Denials come back as RegistrationResult(success=False), never raised
    - The enrollment row is inserted only after every check passes, inside the
      same transaction that locked the student row
    - After insert, enrolled credits are re-summed in-transaction; over the ceiling
      rolls the insert back
    - A second registration for the same (student, offering) never creates a second row

Design Decisions:
    - Impure shell around pure rules: IO through EnrollmentRepository, decisions in core/
    - Student row lock + composite primary key together close the
      check-then-insert race between concurrent requests
"""

import logging

from sqlalchemy.exc import IntegrityError

from unierp.core import registration_messages as messages
from unierp.core.domain_types import OfferingId, PrerequisiteStrictness, StudentId
from unierp.core.errors import ErrorContext, ResourceNotFoundError
from unierp.core.prerequisites import best_grades, missing_prerequisites
from unierp.core.registration_checks import (
    CapacityCheck,
    CreditLimitCheck,
    PrerequisiteCheck,
    RegistrationResult,
    TimeConflictCheck,
    evaluate_capacity,
    evaluate_credit_limit,
    evaluate_prerequisites,
    evaluate_time_conflicts,
)
from unierp.core.repository_protocols import EnrollmentRepository, OfferingSnapshot
from unierp.core.schedule_conflicts import find_conflicts

logger = logging.getLogger(__name__)

DEFAULT_MAX_CREDITS = 25


class RegistrationValidator:
    """Prerequisite, credit-limit and time-conflict checks plus register/drop."""

    def __init__(
        self,
        repo: EnrollmentRepository,
        max_credits: int = DEFAULT_MAX_CREDITS,
        strictness: PrerequisiteStrictness = PrerequisiteStrictness.IGNORE_THRESHOLD,
        enforce_capacity: bool = False,
    ):
        self.repo = repo
        self.max_credits = max_credits
        self.strictness = strictness
        self.enforce_capacity = enforce_capacity

    # ─── Checks ─────────────────────────────────────────────────

    async def check_prerequisites(
        self, student_id: StudentId, offering_id: OfferingId,
    ) -> PrerequisiteCheck:
        offering = await self._require_offering(offering_id)
        return await self._prerequisites_for(student_id, offering)

    async def check_time_conflicts(
        self, student_id: StudentId, offering_id: OfferingId,
    ) -> TimeConflictCheck:
        offering = await self._require_offering(offering_id)
        return await self._conflicts_for(student_id, offering)

    async def check_credit_limit(
        self, student_id: StudentId, offering_id: OfferingId,
    ) -> CreditLimitCheck:
        offering = await self._require_offering(offering_id)
        return await self._credit_limit_for(student_id, offering)

    async def check_capacity(self, offering_id: OfferingId) -> CapacityCheck:
        offering = await self._require_offering(offering_id)
        return await self._capacity_for(offering)

    # ─── Commands ───────────────────────────────────────────────

    async def register_for_course(
        self, student_id: StudentId, offering_id: OfferingId,
    ) -> RegistrationResult:
        """Validate and insert an "enrolled" row as one transaction."""
        try:
            offering = await self._require_offering(offering_id)
            if not await self.repo.lock_student(student_id):
                raise ResourceNotFoundError(
                    "Student", str(student_id),
                    ErrorContext(student_id=str(student_id)),
                )

            denial = await self._first_denial(student_id, offering)
            if denial is not None:
                await self.repo.rollback()
                self._log_outcome(student_id, offering, denial)
                return denial

            try:
                await self.repo.insert_enrollment(student_id, offering_id)
            except IntegrityError:
                await self.repo.rollback()
                denial = messages.already_enrolled(offering.course_id)
                self._log_outcome(student_id, offering, denial)
                return denial

            recheck = evaluate_credit_limit(
                await self.repo.get_enrolled_credits(student_id) - offering.credits,
                offering.credits,
                self.max_credits,
            )
            if not recheck.passed:
                await self.repo.rollback()
                denial = messages.credit_limit_exceeded(recheck)
                self._log_outcome(student_id, offering, denial)
                return denial

            await self.repo.commit()
        except Exception:
            await self.repo.rollback()
            raise

        result = messages.registered(offering.course_id)
        self._log_outcome(student_id, offering, result)
        return result

    async def drop_course(
        self, student_id: StudentId, offering_id: OfferingId,
    ) -> RegistrationResult:
        """Delete the student's active enrollment; success=False if there is none."""
        offering = await self.repo.get_offering(offering_id)
        label = offering.course_id if offering else str(offering_id)
        try:
            deleted = await self.repo.delete_enrollment(student_id, offering_id)
            if not deleted:
                await self.repo.rollback()
                return messages.not_enrolled(label)
            await self.repo.commit()
        except Exception:
            await self.repo.rollback()
            raise
        logger.info(
            f"Dropped {label}",
            extra={"student_id": student_id, "offering_id": offering_id},
        )
        return messages.dropped(label)

    # ─── Internals ──────────────────────────────────────────────

    async def _require_offering(self, offering_id: OfferingId) -> OfferingSnapshot:
        offering = await self.repo.get_offering(offering_id)
        if offering is None:
            raise ResourceNotFoundError(
                "Course offering", str(offering_id),
                ErrorContext(offering_id=str(offering_id)),
            )
        return offering

    async def _first_denial(
        self, student_id: StudentId, offering: OfferingSnapshot,
    ) -> RegistrationResult | None:
        if not await self.repo.is_registration_open():
            return messages.registration_disabled()
        if not offering.registration_open:
            return messages.registration_closed(offering.course_id)

        existing = await self.repo.get_enrollment_status(student_id, offering.id)
        if existing is not None:
            return messages.existing_enrollment(offering.course_id, existing)

        prerequisites = await self._prerequisites_for(student_id, offering)
        if not prerequisites.passed:
            return messages.prerequisites_not_met(prerequisites)

        credits = await self._credit_limit_for(student_id, offering)
        if not credits.passed:
            return messages.credit_limit_exceeded(credits)

        conflicts = await self._conflicts_for(student_id, offering)
        if not conflicts.passed:
            return messages.time_conflict(conflicts)

        if self.enforce_capacity:
            capacity = await self._capacity_for(offering)
            if not capacity.passed:
                return messages.offering_full(capacity)
        return None

    async def _prerequisites_for(
        self, student_id: StudentId, offering: OfferingSnapshot,
    ) -> PrerequisiteCheck:
        edges = await self.repo.get_prerequisite_edges(offering.course_id)
        if not edges:
            return evaluate_prerequisites([])
        completed = best_grades(
            await self.repo.get_completed_passing_courses(student_id),
        )
        return evaluate_prerequisites(
            missing_prerequisites(edges, completed, self.strictness),
        )

    async def _conflicts_for(
        self, student_id: StudentId, offering: OfferingSnapshot,
    ) -> TimeConflictCheck:
        if not offering.schedule_slots:
            return evaluate_time_conflicts([])
        enrolled = await self.repo.get_enrolled_slots(student_id)
        return evaluate_time_conflicts(
            find_conflicts(
                offering.schedule_slots, enrolled, exclude_offering=offering.id,
            ),
        )

    async def _credit_limit_for(
        self, student_id: StudentId, offering: OfferingSnapshot,
    ) -> CreditLimitCheck:
        current = await self.repo.get_enrolled_credits(student_id)
        return evaluate_credit_limit(current, offering.credits, self.max_credits)

    async def _capacity_for(self, offering: OfferingSnapshot) -> CapacityCheck:
        enrolled = await self.repo.count_enrolled(offering.id)
        return evaluate_capacity(enrolled, offering.max_students)

    def _log_outcome(
        self,
        student_id: StudentId,
        offering: OfferingSnapshot,
        result: RegistrationResult,
    ) -> None:
        outcome = "granted" if result.success else "denied"
        logger.info(
            f"Registration {outcome}: {result.message}",
            extra={
                "student_id": student_id,
                "offering_id": offering.id,
                "course_id": offering.course_id,
            },
        )
