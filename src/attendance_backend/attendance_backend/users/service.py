from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..auth.passwords import hash_password, verify_password
from ..auth.tokens import TokenService
from ..common.pagination import Pagination
from ..common.validators import (
    optional_text,
    require_email,
    require_length,
    require_min_length,
    require_positive_int,
)
from ..core.constants import MIN_PASSWORD_LENGTH, USERNAME_LENGTH
from ..core.enums import ConstraintKind
from ..core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidReferenceError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from ..database.mysql_base import ConstraintViolation
from ..roles.repository import RoleRepository
from .model import NewUser, User, UserChanges
from .repository import UserRepository

logger = logging.getLogger(__name__)

_DUPLICATE_MESSAGE = "Username or email already exists"


def _translate_violation(e: ConstraintViolation) -> Exception:
    if e.kind == ConstraintKind.UNIQUE:
        return ConflictError(_DUPLICATE_MESSAGE)
    if e.kind == ConstraintKind.FOREIGN_KEY:
        return InvalidReferenceError("Invalid role_id: role does not exist")
    return e


def _identity_fields(data: dict[str, Any]) -> tuple[str, str, Optional[str], Optional[str]]:
    username = require_length(data.get("username"), "username", USERNAME_LENGTH)
    email = require_email(data.get("email"))
    first_name = optional_text(data.get("first_name"), "first_name")
    last_name = optional_text(data.get("last_name"), "last_name")
    return username, email, first_name, last_name


class AuthService:
    """Use case: register and log in, issuing bearer tokens."""

    def __init__(self, users: UserRepository, roles: RoleRepository, tokens: TokenService):
        self._users = users
        self._roles = roles
        self._tokens = tokens

    def _require_role(self, role_id: Any) -> int:
        role_id = require_positive_int(role_id, "role_id")
        if not self._roles.get_by_id(role_id):
            raise ValidationError("Invalid role_id: role does not exist")
        return role_id

    def register(self, data: dict[str, Any]) -> int:
        username, email, first_name, last_name = _identity_fields(data)
        password = require_min_length(data.get("password"), "password", MIN_PASSWORD_LENGTH)
        role_id = self._require_role(data.get("role_id"))

        new_user = NewUser(
            username=username,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role_id=role_id,
        )
        try:
            user_id = self._users.create_user(new_user, password_hash=hash_password(password))
        except ConstraintViolation as e:
            raise _translate_violation(e)

        logger.info("User %r registered with id %d", username, user_id)
        return user_id

    def login(self, username: Optional[str], password: Optional[str]) -> str:
        if not username or not password:
            raise ValidationError("username and password are required")

        user = self._users.get_by_username(username.strip())
        # Same message for unknown user and wrong password.
        if not user or not verify_password(password, user.password_hash):
            logger.info("Login failed for %r", username)
            raise UnauthorizedError("Invalid username or password")
        if not user.role_name:
            logger.error("Role not loaded for user %d during login", user.user_id)
            raise UnauthorizedError("Login failed: User role missing")

        logger.info("User %r logged in", user.username)
        return self._tokens.issue(user.user_id, user.username, user.role_name)


class UserService:
    """Use case: user directory (admin) and self-service account management."""

    def __init__(self, users: UserRepository, roles: RoleRepository):
        self._users = users
        self._roles = roles

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def exists(self, user_id: int) -> bool:
        return self._users.get_by_id(user_id) is not None

    def list_page(self, pagination: Pagination) -> tuple[Sequence[User], int]:
        return self._users.list_all(limit=pagination.limit, offset=pagination.offset)

    def update_by_admin(self, user_id: int, data: dict[str, Any]) -> None:
        username, email, first_name, last_name = _identity_fields(data)
        role_id = require_positive_int(data.get("role_id"), "role_id")
        if not self._roles.get_by_id(role_id):
            raise ValidationError("Invalid role_id: role does not exist")

        changes = UserChanges(
            username=username,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role_id=role_id,
        )
        self._apply_changes(user_id, changes)
        logger.info("User %d updated by admin", user_id)

    def update_profile(self, user_id: int, data: dict[str, Any]) -> None:
        username, email, first_name, last_name = _identity_fields(data)
        changes = UserChanges(username=username, email=email, first_name=first_name, last_name=last_name)
        self._apply_changes(user_id, changes)

    def _apply_changes(self, user_id: int, changes: UserChanges) -> None:
        try:
            updated = self._users.update_user(user_id, changes)
        except ConstraintViolation as e:
            raise _translate_violation(e)
        if not updated:
            raise NotFoundError("User not found")

    def change_password(self, user_id: int, *, old_password: Optional[str], new_password: Optional[str]) -> None:
        if not old_password:
            raise ValidationError("old_password is required")
        new_password = require_min_length(new_password, "new_password", MIN_PASSWORD_LENGTH)

        user = self.get(user_id)
        if not verify_password(old_password, user.password_hash):
            logger.info("Incorrect old password for user %d", user_id)
            raise UnauthorizedError("Incorrect old password")

        if not self._users.update_password(user_id, password_hash=hash_password(new_password)):
            raise NotFoundError("User not found")
        logger.info("Password updated for user %d", user_id)

    def delete(self, *, acting_user_id: int, user_id: int) -> None:
        if int(acting_user_id) == int(user_id):
            logger.warning("Admin %d attempted to delete themselves", acting_user_id)
            raise ForbiddenError("Admin cannot delete their own account")

        if not self._users.delete_by_id(user_id):
            raise NotFoundError("User not found")
        logger.info("User %d deleted by admin %d", user_id, acting_user_id)
