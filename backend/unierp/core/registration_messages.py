"""Registration Messages — user-facing text for registration and drop outcomes.

Invariants:
    - All functions are pure (no IO, no async, no DB)
    - Every denial message names what blocked it (prerequisites, conflicting
      courses, credit numbers, seats)
    - The registration UI shows these strings directly
"""

from unierp.core.domain_types import EnrollmentStatus
from unierp.core.registration_checks import (
    CapacityCheck,
    CreditLimitCheck,
    PrerequisiteCheck,
    RegistrationResult,
    TimeConflictCheck,
)


def prerequisites_not_met(check: PrerequisiteCheck) -> RegistrationResult:
    names = ", ".join(f"{m.id} ({m.name})" for m in check.missing)
    return RegistrationResult(False, f"Prerequisites not met: {names}")


def credit_limit_exceeded(check: CreditLimitCheck) -> RegistrationResult:
    return RegistrationResult(
        False,
        "Registering would exceed credit limit. "
        f"Current: {check.current}, Adding: {check.adding}, Max: {check.max}",
    )


def time_conflict(check: TimeConflictCheck) -> RegistrationResult:
    courses = ", ".join(
        f"{c.id} ({c.day} {c.time})" for c in check.conflicting_courses
    )
    return RegistrationResult(False, f"Time conflict with: {courses}")


def offering_full(check: CapacityCheck) -> RegistrationResult:
    return RegistrationResult(
        False,
        f"Course offering is full ({check.enrolled}/{check.max_students} seats taken)",
    )


def already_enrolled(course_id: str) -> RegistrationResult:
    return RegistrationResult(False, f"Already enrolled in {course_id}")


def existing_enrollment(course_id: str, status: str) -> RegistrationResult:
    """Denial for a (student, offering) pair that already has a row of any status."""
    if status == EnrollmentStatus.COMPLETED:
        return RegistrationResult(False, f"Already completed {course_id}")
    if status == EnrollmentStatus.DROPPED:
        return RegistrationResult(
            False, f"Previously dropped {course_id}; re-registration is not allowed",
        )
    return already_enrolled(course_id)


def registration_closed(course_id: str) -> RegistrationResult:
    return RegistrationResult(False, f"Registration is closed for {course_id}")


def registration_disabled() -> RegistrationResult:
    return RegistrationResult(False, "Course registration is currently disabled")


def registered(course_id: str) -> RegistrationResult:
    return RegistrationResult(True, f"Successfully registered for {course_id}")


def not_enrolled(course_id: str) -> RegistrationResult:
    return RegistrationResult(False, f"Not currently enrolled in {course_id}")


def dropped(course_id: str) -> RegistrationResult:
    return RegistrationResult(True, f"Successfully dropped {course_id}")
