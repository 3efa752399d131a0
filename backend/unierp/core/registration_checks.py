"""Registration Check Results — value objects returned by each validator check.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - CreditLimitCheck.allowed iff current + adding <= max
    - CapacityCheck.allowed iff enrolled < max_students
    - RegistrationResult is the only shape register/drop return for expected
      failures (ValidationFailed never raises)

Design Decisions:
    - Frozen dataclasses over dicts: field names are fixed, API schemas map 1:1
    - Each check result knows whether it blocks registration (passed property),
      so the orchestrator short-circuits without per-check branching rules
"""

from dataclasses import dataclass, field

from unierp.core.prerequisites import MissingPrerequisite
from unierp.core.schedule_conflicts import ScheduleConflict


@dataclass(frozen=True)
class PrerequisiteCheck:
    met: bool
    missing: list[MissingPrerequisite] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.met


@dataclass(frozen=True)
class TimeConflictCheck:
    has_conflicts: bool
    conflicting_courses: list[ScheduleConflict] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.has_conflicts


@dataclass(frozen=True)
class CreditLimitCheck:
    allowed: bool
    current: int
    adding: int
    max: int

    @property
    def passed(self) -> bool:
        return self.allowed


@dataclass(frozen=True)
class CapacityCheck:
    allowed: bool
    enrolled: int
    max_students: int

    @property
    def passed(self) -> bool:
        return self.allowed


@dataclass(frozen=True)
class RegistrationResult:
    success: bool
    message: str


def evaluate_prerequisites(missing: list[MissingPrerequisite]) -> PrerequisiteCheck:
    return PrerequisiteCheck(met=not missing, missing=list(missing))


def evaluate_time_conflicts(conflicts: list[ScheduleConflict]) -> TimeConflictCheck:
    return TimeConflictCheck(
        has_conflicts=bool(conflicts), conflicting_courses=list(conflicts),
    )


def evaluate_credit_limit(current: int, adding: int, max_credits: int) -> CreditLimitCheck:
    return CreditLimitCheck(
        allowed=current + adding <= max_credits,
        current=current,
        adding=adding,
        max=max_credits,
    )


def evaluate_capacity(enrolled: int, max_students: int) -> CapacityCheck:
    return CapacityCheck(
        allowed=enrolled < max_students,
        enrolled=enrolled,
        max_students=max_students,
    )
