"""Tests for coursework rules — deadlines, grading range, announcement windows."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from unierp.core.coursework import (
    check_can_submit, check_points, check_visibility_window, is_overdue, is_visible,
)
from unierp.core.errors import BusinessRuleError

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_naive_timestamps_compare_as_utc():
    naive_due = datetime(2025, 3, 1, 11, 0)
    assert is_overdue(naive_due, NOW)
    assert not is_overdue(naive_due + timedelta(hours=2), NOW)


def test_first_submission_after_due_date_refused():
    with pytest.raises(BusinessRuleError) as exc_info:
        check_can_submit(NOW - timedelta(days=1), True, False, NOW)
    assert exc_info.value.code == "ASSIGNMENT_OVERDUE"


def test_revising_after_due_date_allowed():
    check_can_submit(NOW - timedelta(days=1), True, True, NOW)


def test_inactive_assignment_refuses_even_revisions():
    with pytest.raises(BusinessRuleError) as exc_info:
        check_can_submit(NOW + timedelta(days=1), False, True, NOW)
    assert exc_info.value.code == "ASSIGNMENT_CLOSED"


@pytest.mark.parametrize("grade", [Decimal("0"), Decimal("87.5"), Decimal("100")])
def test_grade_within_range(grade):
    check_points(grade, 100)


@pytest.mark.parametrize("grade", [Decimal("-1"), Decimal("100.5")])
def test_grade_outside_range(grade):
    with pytest.raises(BusinessRuleError) as exc_info:
        check_points(grade, 100)
    assert exc_info.value.code == "GRADE_OUT_OF_RANGE"


def test_visibility_window_bounds():
    hour = timedelta(hours=1)
    assert is_visible(NOW, None, None)
    assert is_visible(NOW, NOW - hour, NOW + hour)
    assert not is_visible(NOW, NOW + hour, None)
    assert not is_visible(NOW, None, NOW)


def test_window_must_end_after_it_starts():
    check_visibility_window(NOW, None)
    check_visibility_window(NOW, NOW + timedelta(minutes=1))
    with pytest.raises(BusinessRuleError) as exc_info:
        check_visibility_window(NOW, NOW)
    assert exc_info.value.code == "INVALID_VISIBILITY_WINDOW"
