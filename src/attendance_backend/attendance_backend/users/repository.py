from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import NewUser, User, UserChanges


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, never on a concrete DB.
    Lookups resolve the user's Role eagerly.
    """

    def create_user(self, data: NewUser, *, password_hash: str) -> int:
        """Raises ConstraintViolation(UNIQUE) on duplicate username/email."""

        raise NotImplementedError

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self, *, limit: int, offset: int) -> tuple[Sequence[User], int]:
        raise NotImplementedError

    def update_user(self, user_id: int, changes: UserChanges) -> bool:
        raise NotImplementedError

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
