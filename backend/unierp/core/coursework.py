"""Coursework Rules — assignment deadlines, submission grading, announcement visibility.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - A first submission after the due date is refused; revising an existing
      submission stays allowed (the student keeps the original on-time record)
    - Inactive assignments accept no submissions at all
    - A submission grade lies in [0, max_points]
    - An announcement is visible when now is inside [visible_from, visible_until),
      an absent bound is open

Design Decisions:
    - Naive datetimes are read as UTC: SQLite hands timestamps back without tzinfo
    - Refusals raise BusinessRuleError, like the enrollment lifecycle guard
"""

from datetime import datetime, timezone
from decimal import Decimal

from unierp.core.errors import BusinessRuleError, ErrorContext


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_overdue(due_date: datetime, now: datetime) -> bool:
    return as_utc(now) > as_utc(due_date)


def check_can_submit(
    due_date: datetime,
    is_active: bool,
    has_existing: bool,
    now: datetime,
    context: ErrorContext | None = None,
) -> None:
    """Raise BusinessRuleError when a submission must be refused."""
    if not is_active:
        raise BusinessRuleError(
            "Assignment is no longer accepting submissions",
            "ASSIGNMENT_CLOSED", context,
        )
    if not has_existing and is_overdue(due_date, now):
        raise BusinessRuleError(
            "Assignment is past its due date and cannot be submitted",
            "ASSIGNMENT_OVERDUE", context,
        )


def check_points(
    grade: Decimal, max_points: int, context: ErrorContext | None = None,
) -> None:
    if grade < 0 or grade > max_points:
        raise BusinessRuleError(
            f"Grade {grade} is outside 0..{max_points}",
            "GRADE_OUT_OF_RANGE", context,
        )


def is_visible(
    now: datetime,
    visible_from: datetime | None,
    visible_until: datetime | None,
) -> bool:
    now = as_utc(now)
    if visible_from is not None and as_utc(visible_from) > now:
        return False
    if visible_until is not None and as_utc(visible_until) <= now:
        return False
    return True


def check_visibility_window(
    visible_from: datetime | None, visible_until: datetime | None,
) -> None:
    if (
        visible_from is not None and visible_until is not None
        and as_utc(visible_until) <= as_utc(visible_from)
    ):
        raise BusinessRuleError(
            "visible_until must be after visible_from", "INVALID_VISIBILITY_WINDOW",
        )
