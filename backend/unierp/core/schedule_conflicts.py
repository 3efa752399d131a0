"""Schedule Conflicts — pure weekly-slot overlap detection.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Slots only conflict on the same weekday (exact string equality)
    - Touching endpoints never conflict (10:00-11:00 vs 11:00-12:00)
    - Each conflicting enrolled course is reported at most once
    - An offering never conflicts with itself
    - Times exchanged as zero-padded 24-hour HH:MM:SS strings

Design Decisions:
    - datetime.time internally: ordering comparisons are exact, no string compare pitfalls
    - Overlap rule kept in its three-clause form so nested and straddling
      cases read the same way as the registration rules
"""

from dataclasses import dataclass
from datetime import time
from uuid import UUID


@dataclass(frozen=True)
class ScheduleSlot:
    """One weekly meeting of an offering."""
    day: str
    start: time
    end: time

    @property
    def time_range(self) -> str:
        """'HH:MM:SS-HH:MM:SS' label used in conflict reports."""
        return f"{format_time(self.start)}-{format_time(self.end)}"


@dataclass(frozen=True)
class EnrolledSlot:
    """A slot the student already occupies, tagged with its course."""
    offering_id: UUID
    course_id: str
    course_name: str
    slot: ScheduleSlot


@dataclass(frozen=True)
class ScheduleConflict:
    """Conflict report entry: {id, name, day, time}."""
    id: str
    name: str
    day: str
    time: str


def parse_time(value: str | time) -> time:
    """Parse 'HH:MM:SS' (or 'HH:MM') into a time. time objects pass through."""
    if isinstance(value, time):
        return value
    return time.fromisoformat(value)


def format_time(value: time) -> str:
    return value.strftime("%H:%M:%S")


def slots_overlap(new: ScheduleSlot, current: ScheduleSlot) -> bool:
    """True if both slots fall on the same day and their intervals overlap."""
    if new.day != current.day:
        return False
    starts_inside = current.start <= new.start < current.end
    ends_inside = current.start < new.end <= current.end
    covers = new.start <= current.start and new.end >= current.end
    return starts_inside or ends_inside or covers


def find_conflicts(
    candidate_slots: list[ScheduleSlot],
    enrolled_slots: list[EnrolledSlot],
    exclude_offering: UUID | None = None,
) -> list[ScheduleConflict]:
    """Return the enrolled courses whose slots collide with the candidate's.

    For each candidate slot the first overlapping enrolled slot wins; a course
    already reported is skipped. Slots of exclude_offering (the candidate
    itself, when the student already holds it) never count as conflicts.
    """
    conflicts: list[ScheduleConflict] = []
    reported: set[UUID] = set()
    if exclude_offering is not None:
        reported.add(exclude_offering)
    for new_slot in candidate_slots:
        for enrolled in enrolled_slots:
            if enrolled.offering_id in reported:
                continue
            if slots_overlap(new_slot, enrolled.slot):
                reported.add(enrolled.offering_id)
                conflicts.append(ScheduleConflict(
                    id=enrolled.course_id,
                    name=enrolled.course_name,
                    day=enrolled.slot.day,
                    time=enrolled.slot.time_range,
                ))
                break
    return conflicts
