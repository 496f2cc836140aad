from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Role
from .repository import RoleRepository


class MySQLRoleRepository(RoleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO roles(name) VALUES(%s)", (name,))
            return int(cur.lastrowid)

    def get_by_id(self, role_id: int) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name FROM roles WHERE id=%s", (int(role_id),))
            r = fetchone(cur)
            if not r:
                return None
            return Role(role_id=int(r["id"]), name=r["name"])

    def list_all(self) -> Sequence[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name FROM roles ORDER BY id")
            return [Role(role_id=int(r["id"]), name=r["name"]) for r in fetchall(cur)]

    def update(self, *, role_id: int, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE roles SET name=%s WHERE id=%s", (name, int(role_id)))
            return cur.rowcount > 0

    def delete(self, role_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM roles WHERE id=%s", (int(role_id),))
            return cur.rowcount > 0
