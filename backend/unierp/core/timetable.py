"""Weekly Timetable — pure grouping of a student's enrolled slots by weekday.

Invariants:
    - Monday..Friday always present (possibly empty); Saturday/Sunday only when used
    - Days appear in calendar order; slots within a day sorted by start time
    - Slots with a weekday outside the enum are kept, after the known days
"""

from dataclasses import dataclass
from datetime import time
from uuid import UUID

from unierp.core.domain_types import DayOfWeek

_ALWAYS_SHOWN = (
    DayOfWeek.MONDAY, DayOfWeek.TUESDAY, DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY, DayOfWeek.FRIDAY,
)


@dataclass(frozen=True)
class TimetableSlot:
    offering_id: UUID
    course_id: str
    course_name: str
    day: str
    start_time: time
    end_time: time
    room_number: str | None = None
    schedule_type: str | None = None


def build_weekly_timetable(
    slots: list[TimetableSlot],
) -> dict[str, list[TimetableSlot]]:
    days: dict[str, list[TimetableSlot]] = {d.value: [] for d in _ALWAYS_SHOWN}
    extra: dict[str, list[TimetableSlot]] = {}
    known = {d.value for d in DayOfWeek}
    for slot in slots:
        if slot.day in days:
            days[slot.day].append(slot)
        else:
            extra.setdefault(slot.day, []).append(slot)

    for day in (DayOfWeek.SATURDAY.value, DayOfWeek.SUNDAY.value):
        if day in extra:
            days[day] = extra.pop(day)
    for day in sorted(d for d in extra if d not in known):
        days[day] = extra[day]

    return {
        day: sorted(entries, key=lambda s: (s.start_time, s.course_id))
        for day, entries in days.items()
    }
