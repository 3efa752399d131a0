"""Tests for the ErpError hierarchy — status codes and response shape."""

from unierp.core.errors import (
    BusinessRuleError, ConcurrencyError, DatabaseError, DuplicateResourceError,
    EmptyUpdateError, ErrorContext, ResourceNotFoundError,
)


def test_not_found_maps_to_404_with_context():
    err = ResourceNotFoundError(
        "Course offering", "abc", ErrorContext(offering_id="abc"),
    )
    body = err.to_response()["error"]
    assert err.http_status == 404
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert body["message"] == "Course offering 'abc' not found"
    assert body["context"]["offering_id"] == "abc"


def test_user_message_overrides_internal_message():
    err = BusinessRuleError(
        "internal detail", "SOME_RULE", ErrorContext(user_message="Try again"),
    )
    assert err.to_response()["error"]["message"] == "Try again"


def test_status_codes_by_category():
    assert EmptyUpdateError("course").http_status == 400
    assert ConcurrencyError("clash").http_status == 409
    assert DatabaseError("down", "execute").http_status == 503


def test_empty_update_names_the_resource():
    err = EmptyUpdateError("course")
    assert err.code == "EMPTY_UPDATE"
    assert "course" in err.message


def test_duplicate_resource_is_a_conflict():
    err = DuplicateResourceError("user", "email", "a@example.com")
    body = err.to_response()["error"]
    assert err.http_status == 409
    assert body["code"] == "DUPLICATE_RESOURCE"
    assert body["category"] == "conflict"
    assert body["message"] == "A user with this email already exists"
