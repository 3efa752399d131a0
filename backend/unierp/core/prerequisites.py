"""Prerequisite Satisfaction — pure set-difference over prerequisite edges.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - A course with zero edges is always satisfied
    - Missing prerequisites keep the edge order they were fetched in
    - IGNORE_THRESHOLD: a completed, passing course satisfies the edge regardless of min_grade
    - ENFORCE_THRESHOLD: the best completed grade must also reach min_grade
"""

from dataclasses import dataclass

from unierp.core.domain_types import PrerequisiteStrictness
from unierp.core.grades import grade_points, is_passing, meets_minimum


@dataclass(frozen=True)
class PrerequisiteEdge:
    prerequisite_id: str
    prerequisite_name: str
    min_grade: str | None = None


@dataclass(frozen=True)
class MissingPrerequisite:
    id: str
    name: str


def best_grades(completed: list[tuple[str, str]]) -> dict[str, str]:
    """Collapse (course_id, grade) rows to the best passing grade per course."""
    best: dict[str, str] = {}
    for course_id, grade in completed:
        if not is_passing(grade):
            continue
        current = best.get(course_id)
        if current is None or grade_points(grade) > grade_points(current):
            best[course_id] = grade
    return best


def is_edge_satisfied(
    edge: PrerequisiteEdge,
    completed: dict[str, str],
    strictness: PrerequisiteStrictness,
) -> bool:
    grade = completed.get(edge.prerequisite_id)
    if grade is None:
        return False
    if strictness == PrerequisiteStrictness.ENFORCE_THRESHOLD:
        return meets_minimum(grade, edge.min_grade)
    return is_passing(grade)


def missing_prerequisites(
    edges: list[PrerequisiteEdge],
    completed: dict[str, str],
    strictness: PrerequisiteStrictness = PrerequisiteStrictness.IGNORE_THRESHOLD,
) -> list[MissingPrerequisite]:
    """Edges the student has not satisfied, as {id, name} entries."""
    return [
        MissingPrerequisite(id=edge.prerequisite_id, name=edge.prerequisite_name)
        for edge in edges
        if not is_edge_satisfied(edge, completed, strictness)
    ]
