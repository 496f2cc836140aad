from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Attendance


class AttendanceRepository(Protocol):
    def create_check_in(self, *, user_id: int, check_in_at: datetime, notes: Optional[str] = None) -> int:
        raise NotImplementedError

    def get_last_for_user(self, user_id: int) -> Optional[Attendance]:
        """Most recent record by check-in time, or None if the user never checked in."""

        raise NotImplementedError

    def update_check_out(self, *, attendance_id: int, check_out_at: datetime, notes: Optional[str] = None) -> bool:
        """Close an open record.

        Must only touch the row while ``check_out_at`` is still NULL; returns
        False when nothing was updated (already closed or missing). ``notes``
        None keeps the stored notes.
        """

        raise NotImplementedError

    def list_for_user(
        self, *, user_id: int, start_at: datetime, end_at: datetime, limit: int, offset: int
    ) -> tuple[Sequence[Attendance], int]:
        raise NotImplementedError

    def list_all(
        self, *, start_at: datetime, end_at: datetime, limit: int, offset: int
    ) -> tuple[Sequence[Attendance], int]:
        raise NotImplementedError
