from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Role


class RoleRepository(Protocol):
    def create(self, *, name: str) -> int:
        raise NotImplementedError

    def get_by_id(self, role_id: int) -> Optional[Role]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Role]:
        raise NotImplementedError

    def update(self, *, role_id: int, name: str) -> bool:
        """Return False when no row matched."""

        raise NotImplementedError

    def delete(self, role_id: int) -> bool:
        """Raises ConstraintViolation(ROW_REFERENCED) while users still hold the role."""

        raise NotImplementedError
