"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but the pure rules that consume their results are never async themselves
"""

from dataclasses import dataclass, field
from typing import Protocol

from unierp.core.domain_types import CourseId, OfferingId, StudentId
from unierp.core.prerequisites import PrerequisiteEdge
from unierp.core.schedule_conflicts import EnrolledSlot, ScheduleSlot


@dataclass(frozen=True)
class OfferingSnapshot:
    """What the validator needs to know about a candidate offering."""
    id: OfferingId
    course_id: CourseId
    course_name: str
    credits: int
    max_students: int
    schedule_slots: list[ScheduleSlot] = field(default_factory=list)
    registration_open: bool = True


class EnrollmentRepository(Protocol):
    """Data-access collaborator of the RegistrationValidator — implemented by shell."""

    async def get_offering(self, offering_id: OfferingId) -> OfferingSnapshot | None: ...

    async def get_prerequisite_edges(self, course_id: CourseId) -> list[PrerequisiteEdge]: ...

    async def get_completed_passing_courses(
        self, student_id: StudentId,
    ) -> list[tuple[str, str]]: ...

    async def get_enrolled_slots(self, student_id: StudentId) -> list[EnrolledSlot]: ...

    async def get_enrolled_credits(self, student_id: StudentId) -> int: ...

    async def count_enrolled(self, offering_id: OfferingId) -> int: ...

    async def is_registration_open(self) -> bool: ...

    async def lock_student(self, student_id: StudentId) -> bool: ...

    async def get_enrollment_status(
        self, student_id: StudentId, offering_id: OfferingId,
    ) -> str | None: ...

    async def insert_enrollment(
        self, student_id: StudentId, offering_id: OfferingId,
    ) -> None: ...

    async def delete_enrollment(
        self, student_id: StudentId, offering_id: OfferingId,
    ) -> bool: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
