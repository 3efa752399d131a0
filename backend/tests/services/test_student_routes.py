"""Student routes — registration checks, register/drop, grading, history, GPA, timetable.

Invariants:
    - Register/drop denials answer 200 with success=false
    - Unknown offering on register answers 404; malformed ids answer 400
"""

from uuid import uuid4

import pytest
from sqlalchemy import select

from unierp.config import Settings, get_settings
from unierp.main import app
from unierp.models import Enrollment


@pytest.fixture
async def campus(seed):
    """John Doe, CS101 (Mon 10:00-11:30) and CS201 requiring CS101."""
    professor = await seed.professor()
    student = await seed.student("John Doe")
    await seed.course("CS101", credits=4, name="Introduction to Programming")
    await seed.course("CS201", credits=4, name="Data Structures and Algorithms")
    await seed.course("MATH101", credits=3, name="Calculus I")
    await seed.prerequisite("CS201", "CS101", min_grade="C")
    cs101 = await seed.offering(
        "CS101", ("Monday", "10:00", "11:30"), professor=professor,
    )
    cs201 = await seed.offering("CS201", ("Wednesday", "10:00", "11:30"))
    math = await seed.offering("MATH101", ("Monday", "11:00", "12:00"))
    return {"student": student, "cs101": cs101, "cs201": cs201, "math": math}


def _enrollments_url(campus) -> str:
    return f"/api/v1/students/{campus['student'].id}/enrollments"


async def _register(client, campus, offering_key: str):
    res = await client.post(
        _enrollments_url(campus), json={"offering_id": str(campus[offering_key].id)},
    )
    assert res.status_code == 200
    return res.json()


# ==============================================================================
# Checks preview
# ==============================================================================


async def test_checks_report_all_three_results(client, campus):
    student, cs201 = campus["student"], campus["cs201"]
    res = await client.get(
        f"/api/v1/students/{student.id}/offerings/{cs201.id}/checks",
    )
    assert res.status_code == 200
    body = res.json()
    assert body["prerequisites"] == {
        "met": False,
        "missing": [{"id": "CS101", "name": "Introduction to Programming"}],
    }
    assert body["credit_limit"] == {
        "allowed": True, "current": 0, "adding": 4, "max": 25,
    }
    assert body["time_conflicts"] == {"has_conflicts": False, "conflicting_courses": []}


async def test_checks_show_conflicting_course(client, campus):
    await _register(client, campus, "cs101")
    res = await client.get(
        f"/api/v1/students/{campus['student'].id}/offerings/{campus['math'].id}/checks",
    )
    assert res.json()["time_conflicts"] == {
        "has_conflicts": True,
        "conflicting_courses": [{
            "id": "CS101",
            "name": "Introduction to Programming",
            "day": "Monday",
            "time": "10:00:00-11:30:00",
        }],
    }


async def test_checks_do_not_report_held_offering_as_its_own_conflict(client, campus):
    await _register(client, campus, "cs101")
    res = await client.get(
        f"/api/v1/students/{campus['student'].id}/offerings/{campus['cs101'].id}/checks",
    )
    assert res.json()["time_conflicts"] == {
        "has_conflicts": False, "conflicting_courses": [],
    }


async def test_checks_for_unknown_offering(client, campus):
    res = await client.get(
        f"/api/v1/students/{campus['student'].id}/offerings/{uuid4()}/checks",
    )
    assert res.status_code == 404


# ==============================================================================
# Register / drop
# ==============================================================================


async def test_register_then_list(client, campus):
    body = await _register(client, campus, "cs101")
    assert body == {"success": True, "message": "Successfully registered for CS101"}

    res = await client.get(_enrollments_url(campus))
    listed = res.json()
    assert len(listed) == 1
    assert listed[0]["course_id"] == "CS101"
    assert listed[0]["status"] == "enrolled"


async def test_second_registration_is_denied_and_not_duplicated(client, campus, test_db):
    await _register(client, campus, "cs101")
    body = await _register(client, campus, "cs101")
    assert body == {"success": False, "message": "Already enrolled in CS101"}

    result = await test_db.execute(
        select(Enrollment.status)
        .where(Enrollment.student_id == campus["student"].id),
    )
    assert result.scalars().all() == ["enrolled"]


async def test_reregistering_a_dropped_course_names_its_status(client, campus, seed):
    await seed.enrollment(campus["student"], campus["cs101"], status="dropped")
    body = await _register(client, campus, "cs101")
    assert body == {
        "success": False,
        "message": "Previously dropped CS101; re-registration is not allowed",
    }


async def test_register_denied_when_offering_closed(client, campus, test_db):
    res = await client.patch(
        f"/api/v1/offerings/{campus['cs101'].id}", json={"registration_open": False},
    )
    assert res.status_code == 200
    body = await _register(client, campus, "cs101")
    assert body == {"success": False, "message": "Registration is closed for CS101"}

    result = await test_db.execute(
        select(Enrollment).where(Enrollment.student_id == campus["student"].id),
    )
    assert result.scalars().all() == []


async def test_register_denied_when_registration_disabled(client, campus, seed):
    await seed.setting("registration_open", "false")
    body = await _register(client, campus, "cs101")
    assert body == {
        "success": False, "message": "Course registration is currently disabled",
    }


async def test_professor_cannot_be_registered(client, campus, seed):
    professor = await seed.professor("Professor Jones")
    res = await client.post(
        f"/api/v1/students/{professor.id}/enrollments",
        json={"offering_id": str(campus["cs101"].id)},
    )
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_register_denied_for_missing_prerequisite(client, campus):
    body = await _register(client, campus, "cs201")
    assert body["success"] is False
    assert body["message"] == (
        "Prerequisites not met: CS101 (Introduction to Programming)"
    )


async def test_register_after_completing_prerequisite(client, campus, seed):
    await seed.enrollment(campus["student"], campus["cs101"], status="completed", grade="B")
    body = await _register(client, campus, "cs201")
    assert body["success"] is True


async def test_register_denied_for_time_conflict(client, campus):
    await _register(client, campus, "cs101")
    body = await _register(client, campus, "math")
    assert body == {
        "success": False,
        "message": "Time conflict with: CS101 (Monday 10:00:00-11:30:00)",
    }


async def test_register_denied_over_credit_limit(client, campus, seed):
    student = campus["student"]
    for i in range(6):
        code = f"EL{i:03d}"
        await seed.course(code, credits=4)
        await seed.enrollment(student, await seed.offering(code))
    body = await _register(client, campus, "cs101")
    assert body == {
        "success": False,
        "message": "Registering would exceed credit limit. Current: 24, Adding: 4, Max: 25",
    }


async def test_register_unknown_offering(client, campus):
    res = await client.post(
        _enrollments_url(campus), json={"offering_id": str(uuid4())},
    )
    assert res.status_code == 404


async def test_register_unknown_student(client, campus):
    res = await client.post(
        f"/api/v1/students/{uuid4()}/enrollments",
        json={"offering_id": str(campus["cs101"].id)},
    )
    assert res.status_code == 404
    assert "Student" in res.json()["error"]["message"]


async def test_malformed_student_id_is_a_validation_error(client):
    res = await client.get("/api/v1/students/not-a-uuid/enrollments")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_capacity_enforced_when_configured(client, campus, seed):
    full = await seed.offering("CS101", max_students=1, semester="Fall")
    await seed.enrollment(await seed.student("Someone Else"), full)
    app.dependency_overrides[get_settings] = lambda: Settings(enforce_capacity=True)

    res = await client.post(
        _enrollments_url(campus), json={"offering_id": str(full.id)},
    )
    assert res.json()["success"] is False
    assert "1/1" in res.json()["message"]


async def test_capacity_advisory_by_default(client, campus, seed):
    full = await seed.offering("CS101", max_students=1, semester="Fall")
    await seed.enrollment(await seed.student("Someone Else"), full)
    res = await client.post(
        _enrollments_url(campus), json={"offering_id": str(full.id)},
    )
    assert res.json()["success"] is True


async def test_drop_then_drop_again(client, campus):
    await _register(client, campus, "cs101")
    url = f"{_enrollments_url(campus)}/{campus['cs101'].id}"

    res = await client.delete(url)
    assert res.json() == {"success": True, "message": "Successfully dropped CS101"}

    res = await client.delete(url)
    assert res.json() == {"success": False, "message": "Not currently enrolled in CS101"}


async def test_drop_keeps_completed_history(client, campus, seed):
    await seed.enrollment(campus["student"], campus["cs101"], status="completed", grade="A")
    res = await client.delete(f"{_enrollments_url(campus)}/{campus['cs101'].id}")
    assert res.json()["success"] is False
    history = (await client.get(
        f"/api/v1/students/{campus['student'].id}/history",
    )).json()
    assert [h["course_id"] for h in history] == ["CS101"]


# ==============================================================================
# Grading, history, GPA
# ==============================================================================


async def test_record_grade_and_complete(client, campus):
    await _register(client, campus, "cs101")
    res = await client.patch(
        f"{_enrollments_url(campus)}/{campus['cs101'].id}",
        json={"status": "completed", "grade": "A-", "attendance_percentage": 92.5},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "completed"
    assert body["grade"] == "A-"


async def test_completed_enrollment_cannot_reopen(client, campus, seed):
    await seed.enrollment(campus["student"], campus["cs101"], status="completed", grade="A")
    res = await client.patch(
        f"{_enrollments_url(campus)}/{campus['cs101'].id}", json={"status": "enrolled"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"


async def test_grade_update_for_missing_enrollment(client, campus):
    res = await client.patch(
        f"{_enrollments_url(campus)}/{campus['cs101'].id}", json={"grade": "A"},
    )
    assert res.status_code == 404


async def test_empty_grade_update(client, campus):
    res = await client.patch(
        f"{_enrollments_url(campus)}/{campus['cs101'].id}", json={},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "EMPTY_UPDATE"


async def test_history_includes_instructor(client, campus, seed):
    await seed.enrollment(campus["student"], campus["cs101"], status="completed", grade="B")
    res = await client.get(f"/api/v1/students/{campus['student'].id}/history")
    entry = res.json()[0]
    assert entry["course_name"] == "Introduction to Programming"
    assert entry["instructor_name"] == "Professor Smith"
    assert entry["grade"] == "B"


async def test_gpa_weights_completed_courses(client, campus, seed):
    student = campus["student"]
    await seed.enrollment(student, campus["cs101"], status="completed", grade="A")
    await seed.enrollment(student, campus["math"], status="completed", grade="C")
    await seed.enrollment(student, campus["cs201"])
    res = await client.get(f"/api/v1/students/{student.id}/gpa")
    # (10*4 + 4*3) / 7
    assert res.json() == {"gpa": 7.43, "total_credits": 7, "completed_courses": 2}


async def test_gpa_without_completed_courses(client, campus):
    res = await client.get(f"/api/v1/students/{campus['student'].id}/gpa")
    assert res.json() == {"gpa": 0.0, "total_credits": 0, "completed_courses": 0}


# ==============================================================================
# Timetable and roster
# ==============================================================================


async def test_timetable_groups_enrolled_slots_by_day(client, campus):
    await _register(client, campus, "cs101")
    res = await client.get(f"/api/v1/students/{campus['student'].id}/timetable")
    days = res.json()["days"]
    assert list(days) == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
    assert days["Monday"][0]["course_id"] == "CS101"
    assert days["Monday"][0]["start_time"] == "10:00:00"
    assert days["Tuesday"] == []


async def test_roster_lists_enrolled_students(client, campus):
    await _register(client, campus, "cs101")
    res = await client.get(f"/api/v1/offerings/{campus['cs101'].id}/roster")
    assert res.status_code == 200
    roster = res.json()
    assert [r["student_name"] for r in roster] == ["John Doe"]
    assert roster[0]["status"] == "enrolled"


async def test_roster_for_unknown_offering(client):
    res = await client.get(f"/api/v1/offerings/{uuid4()}/roster")
    assert res.status_code == 404
