from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_datetime
from ..users.model import UserSummary


@dataclass(frozen=True)
class Attendance:
    """One work session. Open while ``check_out_at`` is None."""

    attendance_id: int
    user_id: int
    check_in_at: datetime
    check_out_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserSummary] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_at is None

    def to_dict(self) -> dict:
        out = {
            "id": self.attendance_id,
            "user_id": self.user_id,
            "check_in_at": format_datetime(self.check_in_at),
            "check_out_at": format_datetime(self.check_out_at),
            "notes": self.notes,
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }
        if self.user is not None:
            out["user"] = self.user.to_dict()
        return out
