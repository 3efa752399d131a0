"""Tests for the grade scale, pass/fail rules and GPA math — pure, no IO."""

from unierp.core.grades import (
    FAILING_GRADES, GRADE_POINTS, compute_gpa, grade_points, is_passing,
    is_valid_grade, meets_minimum,
)


def test_scale_runs_from_a_to_f():
    assert GRADE_POINTS["A"] == 10
    assert GRADE_POINTS["A-"] == 9
    assert GRADE_POINTS["C"] == 4
    assert GRADE_POINTS["E"] == 1
    assert GRADE_POINTS["F"] == 0
    assert GRADE_POINTS["NC"] == 0


def test_failing_grades_are_f_and_nc():
    assert FAILING_GRADES == {"F", "NC"}


def test_is_valid_grade():
    assert is_valid_grade("B+")
    assert not is_valid_grade("Z")
    assert not is_valid_grade("b+")


def test_unknown_or_missing_grade_earns_zero_points():
    assert grade_points("Z") == 0
    assert grade_points(None) == 0


def test_is_passing():
    assert is_passing("D")
    assert is_passing("E")
    assert not is_passing("F")
    assert not is_passing("NC")
    assert not is_passing(None)


def test_meets_minimum_compares_grade_points():
    assert meets_minimum("B", "C")
    assert meets_minimum("C", "C")
    assert not meets_minimum("C-", "C")


def test_meets_minimum_without_threshold_is_pass_fail():
    assert meets_minimum("D", None)
    assert not meets_minimum("F", None)


def test_failing_grade_never_meets_minimum_even_if_threshold_is_f():
    assert not meets_minimum("F", "F")


def test_gpa_is_credit_weighted():
    summary = compute_gpa([("A", 4), ("C", 2)])
    # (10*4 + 4*2) / 6 = 8.0
    assert summary.gpa == 8.0
    assert summary.total_credits == 6
    assert summary.completed_courses == 2


def test_gpa_rounds_to_two_decimals():
    summary = compute_gpa([("A", 3), ("B", 3), ("B", 3)])
    assert summary.gpa == 8.0
    summary = compute_gpa([("A", 1), ("B", 2)])
    assert summary.gpa == 8.0
    summary = compute_gpa([("A-", 1), ("B", 2)])
    assert summary.gpa == 7.67


def test_gpa_of_nothing_is_zero():
    summary = compute_gpa([])
    assert summary.gpa == 0.0
    assert summary.total_credits == 0
    assert summary.completed_courses == 0


def test_failing_grades_count_toward_credits():
    summary = compute_gpa([("A", 4), ("F", 4)])
    assert summary.gpa == 5.0
    assert summary.total_credits == 8
