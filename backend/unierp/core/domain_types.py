"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - StudentId, OfferingId wrap UUIDs; CourseId wraps the catalog code string
    - All valid states encoded as Enums — no raw string matching
    - DayOfWeek values are the English weekday names stored in course_schedules

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

StudentId = NewType("StudentId", UUID)
OfferingId = NewType("OfferingId", UUID)
CourseId = NewType("CourseId", str)     # catalog code, e.g. "CS101"


# ─── Enums ───────────────────────────────────────────────────────

class EnrollmentStatus(str, Enum):
    """Enrollment lifecycle — (none) -> enrolled -> completed | dropped."""
    ENROLLED = "enrolled"
    COMPLETED = "completed"
    DROPPED = "dropped"

    @property
    def is_terminal(self) -> bool:
        return self in (EnrollmentStatus.COMPLETED, EnrollmentStatus.DROPPED)


class UserRole(str, Enum):
    STUDENT = "student"
    PROFESSOR = "professor"
    ADMIN = "admin"


class DayOfWeek(str, Enum):
    """Weekdays in calendar order. Compared by exact string value."""
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class SubmissionStatus(str, Enum):
    """Assignment submission lifecycle: submitted <-> graded (resubmitting reopens)."""
    SUBMITTED = "submitted"
    GRADED = "graded"


class AnnouncementPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class PrerequisiteStrictness(str, Enum):
    """How a prerequisite edge's min_grade is evaluated.

    IGNORE_THRESHOLD: completed with a passing grade is enough (legacy).
    ENFORCE_THRESHOLD: the completed grade must also reach min_grade.
    """
    IGNORE_THRESHOLD = "ignore_threshold"
    ENFORCE_THRESHOLD = "enforce_threshold"
