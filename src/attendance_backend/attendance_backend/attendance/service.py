from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import DateRange, now_local
from ..common.pagination import Pagination
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    NoOpenSessionError,
    NoScheduleTodayError,
)
from ..schedules.repository import ScheduleRepository
from .model import Attendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Per-user state machine: Idle -> CheckedIn -> Idle.

    A user holds at most one open record. Check-in requires a schedule for
    the current day.
    """

    def __init__(self, attendance: AttendanceRepository, schedules: ScheduleRepository):
        self._attendance = attendance
        self._schedules = schedules

    def check_in(self, user_id: int, *, notes: Optional[str] = None, now: datetime | None = None) -> Attendance:
        now = now or now_local()

        last = self._attendance.get_last_for_user(user_id)
        if last and last.is_open:
            logger.info("User %d already checked in (attendance %d)", user_id, last.attendance_id)
            raise AlreadyCheckedInError("User already checked in")

        if not self._schedules.get_for_user_on_date(user_id=user_id, work_date=now.date()):
            logger.warning("User %d checking in without a schedule for %s", user_id, now.date())
            raise NoScheduleTodayError("No schedule found for today")

        attendance_id = self._attendance.create_check_in(user_id=user_id, check_in_at=now, notes=notes)
        logger.info("User %d checked in (attendance %d)", user_id, attendance_id)
        return Attendance(attendance_id=attendance_id, user_id=user_id, check_in_at=now, notes=notes)

    def check_out(self, user_id: int, *, notes: Optional[str] = None, now: datetime | None = None) -> Attendance:
        now = now or now_local()

        last = self._attendance.get_last_for_user(user_id)
        if not last:
            raise NoOpenSessionError("No active check-in found to check out from")
        if not last.is_open:
            raise AlreadyCheckedOutError("User has already checked out for the last session")

        # Conditional on check_out_at IS NULL; a concurrent checkout wins the race.
        if not self._attendance.update_check_out(attendance_id=last.attendance_id, check_out_at=now, notes=notes):
            logger.warning("Concurrent checkout detected for attendance %d", last.attendance_id)
            raise AlreadyCheckedOutError("User has already checked out for the last session")

        logger.info("User %d checked out (attendance %d)", user_id, last.attendance_id)
        return replace(last, check_out_at=now, notes=notes if notes is not None else last.notes)

    def last_for_user(self, user_id: int) -> Optional[Attendance]:
        return self._attendance.get_last_for_user(user_id)

    def list_for_user(
        self, *, user_id: int, date_range: DateRange, pagination: Pagination
    ) -> tuple[Sequence[Attendance], int]:
        return self._attendance.list_for_user(
            user_id=user_id,
            start_at=date_range.start_at,
            end_at=date_range.end_at,
            limit=pagination.limit,
            offset=pagination.offset,
        )

    def list_all(self, *, date_range: DateRange, pagination: Pagination) -> tuple[Sequence[Attendance], int]:
        return self._attendance.list_all(
            start_at=date_range.start_at,
            end_at=date_range.end_at,
            limit=pagination.limit,
            offset=pagination.offset,
        )
