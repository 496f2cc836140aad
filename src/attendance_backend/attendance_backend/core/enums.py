from __future__ import annotations

from enum import Enum


class BaseRole(str, Enum):
    """Seed roles that always exist and can never be deleted."""

    ADMIN = "Admin"
    EMPLOYEE = "Employee"

    @classmethod
    def is_base(cls, name: str) -> bool:
        return (name or "").strip().lower() in {r.value.lower() for r in cls}


class ConstraintKind(str, Enum):
    """Kind of integrity violation reported by the datastore."""

    UNIQUE = "UNIQUE"
    FOREIGN_KEY = "FOREIGN_KEY"
    ROW_REFERENCED = "ROW_REFERENCED"
