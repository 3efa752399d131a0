"""Enrollment Lifecycle — allowed status transitions.

Invariants:
    - (none) -> enrolled -> completed | dropped
    - completed and dropped are terminal for that offering
    - Re-asserting the current status is a no-op, never an error
"""

from unierp.core.domain_types import EnrollmentStatus
from unierp.core.errors import InvalidStatusTransitionError

_ALLOWED: dict[EnrollmentStatus, frozenset[EnrollmentStatus]] = {
    EnrollmentStatus.ENROLLED: frozenset(
        {EnrollmentStatus.COMPLETED, EnrollmentStatus.DROPPED},
    ),
    EnrollmentStatus.COMPLETED: frozenset(),
    EnrollmentStatus.DROPPED: frozenset(),
}


def can_transition(current: EnrollmentStatus, requested: EnrollmentStatus) -> bool:
    return current == requested or requested in _ALLOWED[current]


def check_transition(current: str, requested: str) -> None:
    """Raise InvalidStatusTransitionError unless current -> requested is allowed."""
    try:
        allowed = can_transition(EnrollmentStatus(current), EnrollmentStatus(requested))
    except ValueError:
        allowed = False
    if not allowed:
        raise InvalidStatusTransitionError(current, requested)
