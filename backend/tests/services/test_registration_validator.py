"""RegistrationValidator — check ordering, denials and transaction outcome.

Invariants:
    - Denials return success=False and roll back; nothing is inserted
    - Only a fully-checked registration commits
    - A credit overrun detected after insert rolls the insert back

Design Decisions:
    - Driven through FakeEnrollmentRepository: the orchestration is tested
      without a database; SQL behavior is covered in test_enrollment_repository
"""

from datetime import time
from uuid import uuid4

import pytest

from unierp.core.domain_types import PrerequisiteStrictness
from unierp.core.errors import ResourceNotFoundError
from unierp.core.prerequisites import PrerequisiteEdge
from unierp.core.repository_protocols import OfferingSnapshot
from unierp.core.schedule_conflicts import EnrolledSlot, ScheduleSlot
from unierp.services.registration_validator import RegistrationValidator
from tests.services.fake_repository import (
    FakeEnrollmentRepository, duplicate_key_error,
)

MONDAY_10 = ScheduleSlot("Monday", time(10), time(11, 30))


@pytest.fixture
def repo():
    return FakeEnrollmentRepository()


@pytest.fixture
def student(repo):
    sid = uuid4()
    repo.students.add(sid)
    return sid


@pytest.fixture
def cs201(repo):
    return repo.add_offering(OfferingSnapshot(
        id=uuid4(), course_id="CS201", course_name="Data Structures",
        credits=4, max_students=50, schedule_slots=[MONDAY_10],
    ))


@pytest.fixture
def validator(repo):
    return RegistrationValidator(repo)


def _require_cs101(repo, min_grade=None):
    repo.edges["CS201"] = [
        PrerequisiteEdge("CS101", "Introduction to Programming", min_grade),
    ]


def _occupy_monday(repo):
    repo.enrolled_slots = [EnrolledSlot(
        offering_id=uuid4(), course_id="MATH101", course_name="Calculus I",
        slot=ScheduleSlot("Monday", time(11), time(12)),
    )]


# ==============================================================================
# Checks
# ==============================================================================


async def test_checks_raise_not_found_for_unknown_offering(validator, student):
    with pytest.raises(ResourceNotFoundError):
        await validator.check_prerequisites(student, uuid4())
    with pytest.raises(ResourceNotFoundError):
        await validator.check_credit_limit(student, uuid4())
    with pytest.raises(ResourceNotFoundError):
        await validator.check_time_conflicts(student, uuid4())


async def test_prerequisites_met_without_edges(validator, student, cs201):
    check = await validator.check_prerequisites(student, cs201.id)
    assert check.met
    assert check.missing == []


async def test_prerequisites_missing_with_empty_history(validator, repo, student, cs201):
    _require_cs101(repo)
    check = await validator.check_prerequisites(student, cs201.id)
    assert not check.met
    assert [(m.id, m.name) for m in check.missing] == [
        ("CS101", "Introduction to Programming"),
    ]


async def test_min_grade_ignored_by_default(validator, repo, student, cs201):
    _require_cs101(repo, min_grade="B")
    repo.completed = [("CS101", "C")]
    assert (await validator.check_prerequisites(student, cs201.id)).met


async def test_min_grade_enforced_when_configured(repo, student, cs201):
    _require_cs101(repo, min_grade="B")
    repo.completed = [("CS101", "C")]
    strict = RegistrationValidator(
        repo, strictness=PrerequisiteStrictness.ENFORCE_THRESHOLD,
    )
    assert not (await strict.check_prerequisites(student, cs201.id)).met


async def test_credit_limit_reports_current_adding_max(validator, repo, student, cs201):
    repo.credits = [22]
    check = await validator.check_credit_limit(student, cs201.id)
    assert not check.allowed
    assert (check.current, check.adding, check.max) == (22, 4, 25)


async def test_offering_without_slots_never_conflicts(validator, repo, student):
    _occupy_monday(repo)
    unscheduled = repo.add_offering(OfferingSnapshot(
        id=uuid4(), course_id="SEM100", course_name="Seminar",
        credits=1, max_students=50,
    ))
    check = await validator.check_time_conflicts(student, unscheduled.id)
    assert not check.has_conflicts


async def test_time_conflicts_name_the_enrolled_course(validator, repo, student, cs201):
    _occupy_monday(repo)
    check = await validator.check_time_conflicts(student, cs201.id)
    assert check.has_conflicts
    assert check.conflicting_courses[0].id == "MATH101"
    assert check.conflicting_courses[0].time == "11:00:00-12:00:00"


async def test_held_offering_does_not_conflict_with_itself(validator, repo, student, cs201):
    repo.enrolled_slots = [EnrolledSlot(
        offering_id=cs201.id, course_id="CS201", course_name="Data Structures",
        slot=MONDAY_10,
    )]
    check = await validator.check_time_conflicts(student, cs201.id)
    assert not check.has_conflicts


# ==============================================================================
# register_for_course
# ==============================================================================


async def test_register_success_inserts_and_commits(validator, repo, student, cs201):
    result = await validator.register_for_course(student, cs201.id)
    assert result.success
    assert result.message == "Successfully registered for CS201"
    assert repo.inserted == [(student, cs201.id)]
    assert repo.commits == 1


async def test_register_unknown_offering_raises(validator, repo, student):
    with pytest.raises(ResourceNotFoundError):
        await validator.register_for_course(student, uuid4())
    assert repo.inserted == []


async def test_register_unknown_student_raises_and_rolls_back(validator, repo, cs201):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await validator.register_for_course(uuid4(), cs201.id)
    assert exc_info.value.resource_type == "Student"
    assert repo.rollbacks >= 1
    assert repo.commits == 0


async def test_prerequisites_checked_before_credits(validator, repo, student, cs201):
    _require_cs101(repo)
    repo.credits = [24]
    _occupy_monday(repo)
    result = await validator.register_for_course(student, cs201.id)
    assert not result.success
    assert result.message.startswith("Prerequisites not met: CS101")
    assert repo.inserted == []
    assert repo.rollbacks == 1


async def test_credits_checked_before_time_conflicts(validator, repo, student, cs201):
    repo.credits = [22]
    _occupy_monday(repo)
    result = await validator.register_for_course(student, cs201.id)
    assert result.message == (
        "Registering would exceed credit limit. Current: 22, Adding: 4, Max: 25"
    )


async def test_time_conflict_denies_registration(validator, repo, student, cs201):
    _occupy_monday(repo)
    result = await validator.register_for_course(student, cs201.id)
    assert not result.success
    assert result.message == "Time conflict with: MATH101 (Monday 11:00:00-12:00:00)"
    assert repo.inserted == []


async def test_exactly_reaching_ceiling_is_allowed(validator, repo, student, cs201):
    repo.credits = [21, 25]
    result = await validator.register_for_course(student, cs201.id)
    assert result.success


async def test_already_enrolled_denied_without_insert(validator, repo, student, cs201):
    repo.existing[(student, cs201.id)] = "enrolled"
    result = await validator.register_for_course(student, cs201.id)
    assert not result.success
    assert result.message == "Already enrolled in CS201"
    assert repo.inserted == []


@pytest.mark.parametrize("status, message", [
    ("completed", "Already completed CS201"),
    ("dropped", "Previously dropped CS201; re-registration is not allowed"),
])
async def test_existing_row_message_follows_its_status(
    validator, repo, student, cs201, status, message,
):
    repo.existing[(student, cs201.id)] = status
    result = await validator.register_for_course(student, cs201.id)
    assert not result.success
    assert result.message == message
    assert repo.inserted == []


async def test_closed_offering_denied_before_prerequisites(validator, repo, student):
    closed = repo.add_offering(OfferingSnapshot(
        id=uuid4(), course_id="CS301", course_name="Algorithms",
        credits=4, max_students=50, registration_open=False,
    ))
    repo.edges["CS301"] = [PrerequisiteEdge("CS201", "Data Structures", None)]
    result = await validator.register_for_course(student, closed.id)
    assert not result.success
    assert result.message == "Registration is closed for CS301"
    assert repo.inserted == []
    assert repo.rollbacks == 1


async def test_system_wide_switch_blocks_every_offering(validator, repo, student, cs201):
    repo.registration_open = False
    result = await validator.register_for_course(student, cs201.id)
    assert not result.success
    assert result.message == "Course registration is currently disabled"
    assert repo.inserted == []


async def test_duplicate_insert_reported_as_already_enrolled(validator, repo, student, cs201):
    repo.insert_error = duplicate_key_error()
    result = await validator.register_for_course(student, cs201.id)
    assert not result.success
    assert result.message == "Already enrolled in CS201"
    assert repo.rollbacks == 1
    assert repo.commits == 0


async def test_credit_overrun_after_insert_rolls_back(validator, repo, student, cs201):
    # A concurrent registration landed between the check and the insert
    repo.credits = [20, 29]
    result = await validator.register_for_course(student, cs201.id)
    assert not result.success
    assert result.message == (
        "Registering would exceed credit limit. Current: 25, Adding: 4, Max: 25"
    )
    assert repo.commits == 0
    assert repo.rollbacks == 1


async def test_storage_failure_rolls_back_and_propagates(validator, repo, student, cs201):
    _require_cs101(repo)
    repo.fail_on = "get_completed_passing_courses"
    with pytest.raises(RuntimeError):
        await validator.register_for_course(student, cs201.id)
    assert repo.rollbacks == 1
    assert repo.commits == 0


async def test_capacity_is_advisory_by_default(validator, repo, student, cs201):
    repo.enrolled_count = 50
    result = await validator.register_for_course(student, cs201.id)
    assert result.success


async def test_capacity_enforced_when_configured(repo, student, cs201):
    repo.enrolled_count = 50
    strict = RegistrationValidator(repo, enforce_capacity=True)
    result = await strict.register_for_course(student, cs201.id)
    assert not result.success
    assert "50/50" in result.message
    check = await strict.check_capacity(cs201.id)
    assert not check.allowed


async def test_custom_ceiling(repo, student, cs201):
    repo.credits = [16]
    result = await RegistrationValidator(repo, max_credits=18).register_for_course(
        student, cs201.id,
    )
    assert result.message.endswith("Current: 16, Adding: 4, Max: 18")


# ==============================================================================
# drop_course
# ==============================================================================


async def test_drop_active_enrollment(validator, repo, student, cs201):
    repo.deletable.add((student, cs201.id))
    result = await validator.drop_course(student, cs201.id)
    assert result.success
    assert result.message == "Successfully dropped CS201"
    assert repo.commits == 1


async def test_drop_without_enrollment_fails_softly(validator, repo, student, cs201):
    result = await validator.drop_course(student, cs201.id)
    assert not result.success
    assert result.message == "Not currently enrolled in CS201"
    assert repo.commits == 0


async def test_drop_unknown_offering_reports_the_id(validator, student):
    missing = uuid4()
    result = await validator.drop_course(student, missing)
    assert not result.success
    assert str(missing) in result.message
