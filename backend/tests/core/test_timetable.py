"""Tests for the weekly timetable — weekday grouping and ordering."""

from datetime import time
from uuid import uuid4

from unierp.core.timetable import TimetableSlot, build_weekly_timetable

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


def _slot(course_id: str, day: str, start: time, end: time) -> TimetableSlot:
    return TimetableSlot(
        offering_id=uuid4(), course_id=course_id, course_name=course_id,
        day=day, start_time=start, end_time=end,
    )


def test_empty_timetable_lists_weekdays_only():
    days = build_weekly_timetable([])
    assert list(days) == WEEKDAYS
    assert all(entries == [] for entries in days.values())


def test_slots_sorted_by_start_time_within_a_day():
    days = build_weekly_timetable([
        _slot("CS201", "Monday", time(14), time(15)),
        _slot("CS101", "Monday", time(9), time(10)),
    ])
    assert [s.course_id for s in days["Monday"]] == ["CS101", "CS201"]


def test_weekend_day_shown_only_when_used():
    days = build_weekly_timetable([_slot("LAB1", "Saturday", time(9), time(12))])
    assert list(days) == WEEKDAYS + ["Saturday"]
    assert "Sunday" not in days


def test_unknown_day_kept_after_calendar_days():
    days = build_weekly_timetable([
        _slot("X1", "Sunday", time(9), time(10)),
        _slot("X2", "Holiday", time(9), time(10)),
    ])
    assert list(days)[-2:] == ["Sunday", "Holiday"]
