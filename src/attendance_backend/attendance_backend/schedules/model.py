from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_date, format_datetime
from ..shifts.model import Shift
from ..users.model import UserSummary


@dataclass(frozen=True)
class Schedule:
    """Assignment of one shift to one user on one calendar day."""

    schedule_id: int
    user_id: int
    shift_id: int
    work_date: date
    created_at: Optional[datetime] = None
    shift: Optional[Shift] = None
    # Only populated by the admin-wide listing.
    user: Optional[UserSummary] = None

    def to_dict(self) -> dict:
        out = {
            "id": self.schedule_id,
            "user_id": self.user_id,
            "shift_id": self.shift_id,
            "date": format_date(self.work_date),
            "created_at": format_datetime(self.created_at),
            "shift": self.shift.brief() if self.shift else None,
        }
        if self.user is not None:
            out["username"] = self.user.username
            out["email"] = self.user.email
            out["first_name"] = self.user.first_name or ""
            out["last_name"] = self.user.last_name or ""
        return out
