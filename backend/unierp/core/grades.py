"""Grade Scale — 10-point letter grades, pass/fail rules and GPA.

Invariants:
    - All functions are pure (no IO, no async, no DB)
    - FAILING_GRADES = {F, NC}; every other letter on the scale passes
    - Unknown letters earn 0 grade points (never raise in GPA math)
    - GPA is credit-weighted over completed enrollments that carry a grade
"""

from dataclasses import dataclass

GRADE_POINTS: dict[str, int] = {
    "A": 10,
    "A-": 9,
    "B+": 8,
    "B": 7,
    "B-": 6,
    "C+": 5,
    "C": 4,
    "C-": 3,
    "D": 2,
    "E": 1,
    "NC": 0,
    "F": 0,
}

FAILING_GRADES = frozenset({"F", "NC"})


@dataclass(frozen=True)
class GpaSummary:
    gpa: float
    total_credits: int
    completed_courses: int


def is_valid_grade(grade: str) -> bool:
    return grade in GRADE_POINTS


def grade_points(grade: str | None) -> int:
    if grade is None:
        return 0
    return GRADE_POINTS.get(grade, 0)


def is_passing(grade: str | None) -> bool:
    """A recorded grade outside {F, NC}. Missing grades never pass."""
    return grade is not None and grade not in FAILING_GRADES


def meets_minimum(grade: str | None, min_grade: str | None) -> bool:
    """Passing grade whose points reach min_grade's. No minimum means pass/fail only."""
    if not is_passing(grade):
        return False
    if min_grade is None:
        return True
    return grade_points(grade) >= grade_points(min_grade)


def compute_gpa(graded: list[tuple[str, int]]) -> GpaSummary:
    """Credit-weighted GPA from (grade, credits) pairs."""
    total_credits = 0
    total_points = 0
    for grade, credits in graded:
        total_credits += credits
        total_points += grade_points(grade) * credits
    gpa = total_points / total_credits if total_credits > 0 else 0.0
    return GpaSummary(
        gpa=round(gpa, 2),
        total_credits=total_credits,
        completed_courses=len(graded),
    )
