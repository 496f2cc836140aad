from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_datetime
from ..roles.model import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object, no DB access. ``password_hash`` is never serialized.
    """

    user_id: int
    username: str
    password_hash: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    role_id: int
    role: Optional[Role] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def role_name(self) -> Optional[str]:
        return self.role.name if self.role else None

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "email": self.email,
            "first_name": self.first_name or "",
            "last_name": self.last_name or "",
            "role_id": self.role_id,
            "role": self.role.to_dict() if self.role else None,
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }


@dataclass(frozen=True)
class UserSummary:
    """Minimal identity attached to report rows."""

    user_id: int
    username: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "email": self.email,
            "first_name": self.first_name or "",
            "last_name": self.last_name or "",
        }


@dataclass(frozen=True)
class NewUser:
    username: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    role_id: int


@dataclass(frozen=True)
class UserChanges:
    """Admin or self-service profile update; ``role_id`` None keeps the role."""

    username: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    role_id: Optional[int] = None
