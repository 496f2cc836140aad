from __future__ import annotations

import logging
from typing import Any, Sequence

from ..common.datetime_utils import require_time_of_day
from ..common.validators import require_length
from ..core.constants import SHIFT_NAME_LENGTH
from ..core.enums import ConstraintKind
from ..core.exceptions import NotFoundError, ReferentialConflictError
from ..database.mysql_base import ConstraintViolation
from .model import Shift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


class ShiftService:
    """Shift catalog. Times are validated as HH:MM:SS before touching storage."""

    def __init__(self, shifts: ShiftRepository):
        self._shifts = shifts

    def create(self, *, name: Any, start_time: Any, end_time: Any) -> int:
        name = require_length(name, "name", SHIFT_NAME_LENGTH)
        start = require_time_of_day(start_time)
        end = require_time_of_day(end_time)

        shift_id = self._shifts.create(name=name, start_time=start, end_time=end)
        logger.info("Shift %r created with id %d", name, shift_id)
        return shift_id

    def get(self, shift_id: int) -> Shift:
        shift = self._shifts.get_by_id(shift_id)
        if not shift:
            raise NotFoundError("Shift not found")
        return shift

    def list_all(self) -> Sequence[Shift]:
        return self._shifts.list_all()

    def update(self, *, shift_id: int, name: Any, start_time: Any, end_time: Any) -> None:
        name = require_length(name, "name", SHIFT_NAME_LENGTH)
        start = require_time_of_day(start_time)
        end = require_time_of_day(end_time)

        if not self._shifts.update(shift_id=shift_id, name=name, start_time=start, end_time=end):
            logger.warning("Shift with ID %d not found for update", shift_id)
            raise NotFoundError("Shift not found")

    def delete(self, shift_id: int) -> None:
        try:
            deleted = self._shifts.delete(shift_id)
        except ConstraintViolation as e:
            if e.kind == ConstraintKind.ROW_REFERENCED:
                logger.warning("Shift %d still referenced by user schedules", shift_id)
                raise ReferentialConflictError("Cannot delete shift: it is still referenced by user schedules")
            raise
        if not deleted:
            logger.warning("Shift with ID %d not found for delete", shift_id)
            raise NotFoundError("Shift not found")
