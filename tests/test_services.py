from __future__ import annotations

import pytest

from attendance_backend.core.exceptions import ConflictError, UnauthorizedError, ValidationError


def _payload(**overrides):
    data = {
        "username": "jane",
        "password": "secret123",
        "email": "jane@example.com",
        "first_name": "Jane",
        "last_name": "Doe",
        "role_id": 2,
    }
    data.update(overrides)
    return data


def test_register_then_login_returns_valid_token(container, token_service):
    user_id = container.auth_service.register(_payload())

    token = container.auth_service.login("jane", "secret123")
    claims = token_service.validate(token)

    assert claims.user_id == user_id
    assert claims.username == "jane"
    assert claims.role == "Employee"


def test_password_is_stored_hashed(container, store):
    user_id = container.auth_service.register(_payload())

    stored = store.users[user_id].password_hash
    assert stored != "secret123"
    assert "password" not in store.users[user_id].to_dict()


@pytest.mark.parametrize(
    "overrides",
    [
        {"username": "jo"},
        {"password": "12345"},
        {"email": "not-an-email"},
        {"role_id": 0},
        {"role_id": "abc"},
        {"role_id": 99},
    ],
)
def test_register_validation(container, overrides):
    with pytest.raises(ValidationError) as exc:
        container.auth_service.register(_payload(**overrides))

    assert exc.value.status_code == 400


def test_register_duplicate_username_or_email(container):
    container.auth_service.register(_payload())

    with pytest.raises(ConflictError):
        container.auth_service.register(_payload(email="other@example.com"))
    with pytest.raises(ConflictError):
        container.auth_service.register(_payload(username="janet"))


def test_login_wrong_password_and_unknown_user_look_the_same(container):
    container.auth_service.register(_payload())

    with pytest.raises(UnauthorizedError) as wrong_pw:
        container.auth_service.login("jane", "nope-nope")
    with pytest.raises(UnauthorizedError) as unknown:
        container.auth_service.login("ghost", "secret123")

    assert wrong_pw.value.message == unknown.value.message == "Invalid username or password"


def test_login_requires_both_fields(container):
    with pytest.raises(ValidationError):
        container.auth_service.login("jane", "")
