from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetch_count,
    fetchall,
    fetchone,
    normalize_mysql_date,
    normalize_mysql_time,
)
from ..shifts.model import Shift
from ..users.model import UserSummary
from .model import Schedule
from .repository import ScheduleRepository

_SELECT = """
    SELECT
        sc.id, sc.user_id, sc.shift_id, sc.date, sc.created_at,
        s.name AS shift_name, s.start_time, s.end_time
        {user_columns}
    FROM user_schedules sc
    JOIN shifts s ON s.id = sc.shift_id
    {user_join}
"""

_USER_COLUMNS = ", u.username, u.email, u.first_name, u.last_name"
_USER_JOIN = "JOIN users u ON u.id = sc.user_id"


def _to_schedule(r: dict, *, with_user: bool = False) -> Schedule:
    user = None
    if with_user:
        user = UserSummary(
            user_id=int(r["user_id"]),
            username=r["username"],
            email=r["email"],
            first_name=r.get("first_name"),
            last_name=r.get("last_name"),
        )
    return Schedule(
        schedule_id=int(r["id"]),
        user_id=int(r["user_id"]),
        shift_id=int(r["shift_id"]),
        work_date=normalize_mysql_date(r["date"]),
        created_at=r.get("created_at"),
        shift=Shift(
            shift_id=int(r["shift_id"]),
            name=r["shift_name"],
            start_time=normalize_mysql_time(r["start_time"]),
            end_time=normalize_mysql_time(r["end_time"]),
        ),
        user=user,
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, shift_id: int, work_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO user_schedules(user_id, shift_id, date) VALUES(%s,%s,%s)",
                (int(user_id), int(shift_id), work_date),
            )
            return int(cur.lastrowid)

    def get_for_user_on_date(self, *, user_id: int, work_date: date) -> Optional[Schedule]:
        query = _SELECT.format(user_columns="", user_join="") + " WHERE sc.user_id=%s AND sc.date=%s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(query, (int(user_id), work_date))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def list_for_user(
        self, *, user_id: int, start: date, end: date, limit: int, offset: int
    ) -> tuple[Sequence[Schedule], int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM user_schedules WHERE user_id=%s AND date BETWEEN %s AND %s",
                (int(user_id), start, end),
            )
            total = fetch_count(cur)
            if total == 0:
                return [], 0

            query = _SELECT.format(user_columns="", user_join="") + """
                WHERE sc.user_id=%s AND sc.date BETWEEN %s AND %s
                ORDER BY sc.date ASC
                LIMIT %s OFFSET %s
            """
            cur.execute(query, (int(user_id), start, end, int(limit), int(offset)))
            return [_to_schedule(r) for r in fetchall(cur)], total

    def list_all(self, *, start: date, end: date, limit: int, offset: int) -> tuple[Sequence[Schedule], int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM user_schedules WHERE date BETWEEN %s AND %s",
                (start, end),
            )
            total = fetch_count(cur)
            if total == 0:
                return [], 0

            query = _SELECT.format(user_columns=_USER_COLUMNS, user_join=_USER_JOIN) + """
                WHERE sc.date BETWEEN %s AND %s
                ORDER BY sc.date ASC, u.username ASC
                LIMIT %s OFFSET %s
            """
            cur.execute(query, (start, end, int(limit), int(offset)))
            return [_to_schedule(r, with_user=True) for r in fetchall(cur)], total

    def update(self, *, schedule_id: int, user_id: int, shift_id: int, work_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE user_schedules SET user_id=%s, shift_id=%s, date=%s WHERE id=%s",
                (int(user_id), int(shift_id), work_date, int(schedule_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM user_schedules WHERE id=%s", (int(schedule_id),))
            return cur.rowcount > 0
