from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone
from ..users.model import UserSummary
from .model import Attendance
from .repository import AttendanceRepository

_COLUMNS = "a.id, a.user_id, a.check_in_at, a.check_out_at, a.notes, a.created_at, a.updated_at"


def _to_attendance(r: dict, *, with_user: bool = False) -> Attendance:
    user = None
    if with_user:
        user = UserSummary(
            user_id=int(r["user_id"]),
            username=r["username"],
            email=r["email"],
            first_name=r.get("first_name"),
            last_name=r.get("last_name"),
        )
    return Attendance(
        attendance_id=int(r["id"]),
        user_id=int(r["user_id"]),
        check_in_at=r["check_in_at"],
        check_out_at=r.get("check_out_at"),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        user=user,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_check_in(self, *, user_id: int, check_in_at: datetime, notes: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendances(user_id, check_in_at, notes) VALUES(%s,%s,%s)",
                (int(user_id), check_in_at, notes),
            )
            return int(cur.lastrowid)

    def get_last_for_user(self, user_id: int) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances a
                WHERE a.user_id=%s
                ORDER BY a.check_in_at DESC, a.id DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_attendance(r) if r else None

    def update_check_out(self, *, attendance_id: int, check_out_at: datetime, notes: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendances
                SET check_out_at=%s, notes=COALESCE(%s, notes)
                WHERE id=%s AND check_out_at IS NULL
                """,
                (check_out_at, notes, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_for_user(
        self, *, user_id: int, start_at: datetime, end_at: datetime, limit: int, offset: int
    ) -> tuple[Sequence[Attendance], int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total FROM attendances
                WHERE user_id=%s AND check_in_at BETWEEN %s AND %s
                """,
                (int(user_id), start_at, end_at),
            )
            total = fetch_count(cur)
            if total == 0:
                return [], 0

            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances a
                WHERE a.user_id=%s AND a.check_in_at BETWEEN %s AND %s
                ORDER BY a.check_in_at DESC
                LIMIT %s OFFSET %s
                """,
                (int(user_id), start_at, end_at, int(limit), int(offset)),
            )
            return [_to_attendance(r) for r in fetchall(cur)], total

    def list_all(
        self, *, start_at: datetime, end_at: datetime, limit: int, offset: int
    ) -> tuple[Sequence[Attendance], int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM attendances WHERE check_in_at BETWEEN %s AND %s",
                (start_at, end_at),
            )
            total = fetch_count(cur)
            if total == 0:
                return [], 0

            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.username, u.email, u.first_name, u.last_name
                FROM attendances a
                JOIN users u ON u.id = a.user_id
                WHERE a.check_in_at BETWEEN %s AND %s
                ORDER BY a.check_in_at DESC, u.username ASC
                LIMIT %s OFFSET %s
                """,
                (start_at, end_at, int(limit), int(offset)),
            )
            return [_to_attendance(r, with_user=True) for r in fetchall(cur)], total
