"""Tests for registration check results — credit ceiling, capacity, pass/fail flags."""

from unierp.core.prerequisites import MissingPrerequisite
from unierp.core.registration_checks import (
    evaluate_capacity, evaluate_credit_limit, evaluate_prerequisites,
    evaluate_time_conflicts,
)
from unierp.core.schedule_conflicts import ScheduleConflict


def test_credit_limit_denied_when_over_ceiling():
    check = evaluate_credit_limit(22, 4, 25)
    assert not check.allowed
    assert not check.passed
    assert (check.current, check.adding, check.max) == (22, 4, 25)


def test_credit_limit_allowed_exactly_at_ceiling():
    check = evaluate_credit_limit(22, 3, 25)
    assert check.allowed
    assert check.passed


def test_zero_credit_course_always_fits_under_ceiling():
    assert evaluate_credit_limit(25, 0, 25).allowed


def test_prerequisites_met_when_nothing_missing():
    check = evaluate_prerequisites([])
    assert check.met
    assert check.missing == []


def test_prerequisites_not_met_lists_missing():
    missing = [MissingPrerequisite("CS101", "Intro")]
    check = evaluate_prerequisites(missing)
    assert not check.passed
    assert check.missing == missing


def test_time_conflict_flag_follows_conflict_list():
    assert evaluate_time_conflicts([]).passed
    conflict = ScheduleConflict("CS101", "Intro", "Monday", "10:00:00-11:00:00")
    check = evaluate_time_conflicts([conflict])
    assert check.has_conflicts
    assert check.conflicting_courses == [conflict]


def test_capacity_allows_until_full():
    assert evaluate_capacity(49, 50).allowed
    check = evaluate_capacity(50, 50)
    assert not check.allowed
    assert (check.enrolled, check.max_students) == (50, 50)
