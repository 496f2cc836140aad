from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import DateRange, format_date, require_date
from ..common.pagination import Pagination
from ..common.validators import require_positive_int
from ..core.enums import ConstraintKind
from ..core.exceptions import ConflictError, InvalidReferenceError, NotFoundError
from ..database.mysql_base import ConstraintViolation
from .model import Schedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def _validate(self, user_id: Any, shift_id: Any, work_date: Any) -> tuple[int, int, date]:
        return (
            require_positive_int(user_id, "user_id"),
            require_positive_int(shift_id, "shift_id"),
            require_date(work_date),
        )

    def _translate(self, e: ConstraintViolation, *, user_id: int, work_date: date) -> Exception:
        if e.kind == ConstraintKind.UNIQUE:
            logger.warning("User %d already has a schedule on %s", user_id, work_date)
            return ConflictError(f"User {user_id} already has a schedule on {format_date(work_date)}")
        if e.kind == ConstraintKind.FOREIGN_KEY:
            return InvalidReferenceError("Invalid User ID or Shift ID provided")
        return e

    def create(self, *, user_id: Any, shift_id: Any, work_date: Any) -> int:
        uid, sid, day = self._validate(user_id, shift_id, work_date)
        try:
            schedule_id = self._schedules.create(user_id=uid, shift_id=sid, work_date=day)
        except ConstraintViolation as e:
            raise self._translate(e, user_id=uid, work_date=day)

        logger.info("Schedule %d created: user=%d shift=%d date=%s", schedule_id, uid, sid, day)
        return schedule_id

    def get_for_user_on_date(self, *, user_id: int, work_date: date) -> Optional[Schedule]:
        """None is an expected answer: the user simply has no shift that day."""

        return self._schedules.get_for_user_on_date(user_id=user_id, work_date=work_date)

    def list_for_user(
        self, *, user_id: int, date_range: DateRange, pagination: Pagination
    ) -> tuple[Sequence[Schedule], int]:
        return self._schedules.list_for_user(
            user_id=user_id,
            start=date_range.start,
            end=date_range.end,
            limit=pagination.limit,
            offset=pagination.offset,
        )

    def list_all(self, *, date_range: DateRange, pagination: Pagination) -> tuple[Sequence[Schedule], int]:
        return self._schedules.list_all(
            start=date_range.start,
            end=date_range.end,
            limit=pagination.limit,
            offset=pagination.offset,
        )

    def update(self, *, schedule_id: int, user_id: Any, shift_id: Any, work_date: Any) -> None:
        uid, sid, day = self._validate(user_id, shift_id, work_date)
        try:
            updated = self._schedules.update(schedule_id=schedule_id, user_id=uid, shift_id=sid, work_date=day)
        except ConstraintViolation as e:
            raise self._translate(e, user_id=uid, work_date=day)
        if not updated:
            logger.warning("Attempted to update non-existent schedule %d", schedule_id)
            raise NotFoundError("Schedule not found")

    def delete(self, schedule_id: int) -> None:
        if not self._schedules.delete(schedule_id=schedule_id):
            logger.warning("Attempted to delete non-existent schedule %d", schedule_id)
            raise NotFoundError("Schedule not found")
