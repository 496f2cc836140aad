from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_length
from ..core.constants import ROLE_NAME_LENGTH
from ..core.enums import BaseRole, ConstraintKind
from ..core.exceptions import ConflictError, ForbiddenError, NotFoundError, StillAssignedError
from ..database.mysql_base import ConstraintViolation
from .model import Role
from .repository import RoleRepository

logger = logging.getLogger(__name__)


class RoleService:
    def __init__(self, roles: RoleRepository):
        self._roles = roles

    def create(self, *, name: Optional[str]) -> int:
        name = require_length(name, "name", ROLE_NAME_LENGTH)
        try:
            role_id = self._roles.create(name=name)
        except ConstraintViolation as e:
            if e.kind == ConstraintKind.UNIQUE:
                logger.warning("Attempted to create duplicate role name %r", name)
                raise ConflictError("Role with same name already exists")
            raise
        logger.info("Role %r created with id %d", name, role_id)
        return role_id

    def get(self, role_id: int) -> Role:
        role = self._roles.get_by_id(role_id)
        if not role:
            raise NotFoundError("Role not found")
        return role

    def list_all(self) -> Sequence[Role]:
        return self._roles.list_all()

    def update(self, *, role_id: int, name: Optional[str]) -> None:
        name = require_length(name, "name", ROLE_NAME_LENGTH)
        role = self.get(role_id)
        # Access checks match base roles by name, so those names are fixed.
        if BaseRole.is_base(role.name):
            logger.warning("Attempted to rename base role %r", role.name)
            raise ForbiddenError("Cannot modify base roles (Admin/Employee)")
        if BaseRole.is_base(name):
            logger.warning("Attempted to rename role %d to base role name %r", role_id, name)
            raise ForbiddenError("Role name is reserved for base roles")

        try:
            updated = self._roles.update(role_id=role_id, name=name)
        except ConstraintViolation as e:
            if e.kind == ConstraintKind.UNIQUE:
                raise ConflictError("Role with same name already exists")
            raise
        if not updated:
            logger.warning("Attempted to update non-existent role %d", role_id)
            raise NotFoundError("Role not found")

    def delete(self, role_id: int) -> None:
        role = self.get(role_id)
        # Base roles are protected regardless of how many users hold them.
        if BaseRole.is_base(role.name):
            logger.warning("Attempted to delete base role %r", role.name)
            raise ForbiddenError("Cannot delete base roles (Admin/Employee)")

        try:
            deleted = self._roles.delete(role_id)
        except ConstraintViolation as e:
            if e.kind == ConstraintKind.ROW_REFERENCED:
                logger.warning("Attempted to delete role %d still in use", role_id)
                raise StillAssignedError("Cannot delete role: it is still assigned to users")
            raise
        if not deleted:
            raise NotFoundError("Role not found")
