from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Shift
from .repository import ShiftRepository


def _to_shift(r: dict) -> Shift:
    return Shift(
        shift_id=int(r["id"]),
        name=r["name"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, name: str, start_time: time, end_time: time) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO shifts(name, start_time, end_time) VALUES(%s,%s,%s)",
                (name, start_time, end_time),
            )
            return int(cur.lastrowid)

    def list_all(self) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, start_time, end_time, created_at, updated_at
                FROM shifts
                ORDER BY name ASC
                """
            )
            return [_to_shift(r) for r in fetchall(cur)]

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, start_time, end_time, created_at, updated_at
                FROM shifts
                WHERE id=%s
                """,
                (int(shift_id),),
            )
            r = fetchone(cur)
            return _to_shift(r) if r else None

    def update(self, *, shift_id: int, name: str, start_time: time, end_time: time) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE shifts SET name=%s, start_time=%s, end_time=%s WHERE id=%s",
                (name, start_time, end_time, int(shift_id)),
            )
            return cur.rowcount > 0

    def delete(self, shift_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM shifts WHERE id=%s", (int(shift_id),))
            return cur.rowcount > 0
