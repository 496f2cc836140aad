from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Schedule


class ScheduleRepository(Protocol):
    """Schedules are unique per (user_id, work_date).

    Writes raise ConstraintViolation: UNIQUE for a second schedule on the same
    day, FOREIGN_KEY for an unknown user or shift.
    """

    def create(self, *, user_id: int, shift_id: int, work_date: date) -> int:
        raise NotImplementedError

    def get_for_user_on_date(self, *, user_id: int, work_date: date) -> Optional[Schedule]:
        raise NotImplementedError

    def list_for_user(
        self, *, user_id: int, start: date, end: date, limit: int, offset: int
    ) -> tuple[Sequence[Schedule], int]:
        raise NotImplementedError

    def list_all(self, *, start: date, end: date, limit: int, offset: int) -> tuple[Sequence[Schedule], int]:
        raise NotImplementedError

    def update(self, *, schedule_id: int, user_id: int, shift_id: int, work_date: date) -> bool:
        raise NotImplementedError

    def delete(self, *, schedule_id: int) -> bool:
        raise NotImplementedError
