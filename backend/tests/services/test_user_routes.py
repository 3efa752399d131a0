"""User routes — CRUD, role filter, email lookup and head counts.

Invariants:
    - Duplicate email or student ID answers 409
    - Role listing is ordered by name
"""

from uuid import uuid4


def _user(name: str, email: str, role: str = "student", **extra) -> dict:
    return {"name": name, "email": email, "role": role, **extra}


async def _create(client, body: dict) -> dict:
    res = await client.post("/api/v1/users", json=body)
    assert res.status_code == 201, res.text
    return res.json()


async def test_create_then_get(client):
    created = await _create(client, _user(
        "John Doe", "John.Doe@Example.com",
        student_id="2023A7PS0001", branch="Computer Science", graduating_year=2025,
    ))
    assert created["email"] == "john.doe@example.com"
    assert created["role"] == "student"

    res = await client.get(f"/api/v1/users/{created['id']}")
    assert res.status_code == 200
    assert res.json()["student_id"] == "2023A7PS0001"


async def test_role_defaults_to_student(client):
    created = await _create(client, {"name": "Jane", "email": "jane@example.com"})
    assert created["role"] == "student"


async def test_duplicate_email_is_a_conflict(client):
    await _create(client, _user("John Doe", "john@example.com"))
    res = await client.post(
        "/api/v1/users", json=_user("Other John", "JOHN@example.com"),
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_RESOURCE"


async def test_duplicate_student_number_is_a_conflict(client):
    await _create(client, _user("A", "a@example.com", student_id="S1"))
    res = await client.post(
        "/api/v1/users", json=_user("B", "b@example.com", student_id="S1"),
    )
    assert res.status_code == 409


async def test_invalid_email_and_unknown_role_rejected(client):
    res = await client.post("/api/v1/users", json=_user("A", "not-an-email"))
    assert res.status_code == 400
    res = await client.post(
        "/api/v1/users", json=_user("A", "a@example.com", role="dean"),
    )
    assert res.status_code == 400


async def test_list_by_role_orders_by_name(client):
    await _create(client, _user("Zed Prof", "z@example.com", "professor"))
    await _create(client, _user("Amy Prof", "amy@example.com", "professor"))
    await _create(client, _user("Stu Dent", "s@example.com"))

    res = await client.get("/api/v1/users", params={"role": "professor"})
    assert [u["name"] for u in res.json()] == ["Amy Prof", "Zed Prof"]

    res = await client.get("/api/v1/users")
    assert len(res.json()) == 3


async def test_lookup_by_email(client):
    created = await _create(client, _user("John Doe", "john@example.com"))
    res = await client.get("/api/v1/users/lookup", params={"email": "JOHN@example.com"})
    assert res.json()["id"] == created["id"]

    res = await client.get("/api/v1/users/lookup", params={"email": "nobody@example.com"})
    assert res.status_code == 404


async def test_partial_update(client):
    created = await _create(client, _user("John Doe", "john@example.com"))
    res = await client.patch(
        f"/api/v1/users/{created['id']}", json={"branch": "Mathematics"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["branch"] == "Mathematics"
    assert body["name"] == "John Doe"


async def test_update_rejects_null_name_and_empty_body(client):
    created = await _create(client, _user("John Doe", "john@example.com"))
    url = f"/api/v1/users/{created['id']}"
    assert (await client.patch(url, json={"name": None})).status_code == 400
    res = await client.patch(url, json={})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "EMPTY_UPDATE"


async def test_update_to_taken_email_is_a_conflict(client):
    await _create(client, _user("A", "a@example.com"))
    b = await _create(client, _user("B", "b@example.com"))
    res = await client.patch(f"/api/v1/users/{b['id']}", json={"email": "a@example.com"})
    assert res.status_code == 409


async def test_keeping_own_email_is_not_a_conflict(client):
    a = await _create(client, _user("A", "a@example.com"))
    res = await client.patch(
        f"/api/v1/users/{a['id']}", json={"email": "a@example.com", "name": "Anna"},
    )
    assert res.status_code == 200


async def test_delete_then_missing(client):
    created = await _create(client, _user("John Doe", "john@example.com"))
    res = await client.delete(f"/api/v1/users/{created['id']}")
    assert res.status_code == 204
    res = await client.get(f"/api/v1/users/{created['id']}")
    assert res.status_code == 404
    res = await client.delete(f"/api/v1/users/{uuid4()}")
    assert res.status_code == 404


async def test_statistics_count_each_role(client):
    await _create(client, _user("Admin", "admin@example.com", "admin"))
    await _create(client, _user("Prof", "prof@example.com", "professor"))
    for i in range(5):
        await _create(client, _user(f"Student {i}", f"s{i}@example.com"))

    res = await client.get("/api/v1/users/statistics")
    assert res.status_code == 200
    body = res.json()
    assert body["total_users"] == 7
    assert body["student_count"] == 5
    assert body["professor_count"] == 1
    assert body["admin_count"] == 1
    assert len(body["recent_users"]) == 5


async def test_statistics_on_empty_table(client):
    body = (await client.get("/api/v1/users/statistics")).json()
    assert body == {
        "total_users": 0, "student_count": 0, "professor_count": 0,
        "admin_count": 0, "recent_users": [],
    }
