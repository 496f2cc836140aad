from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone
from ..roles.model import Role
from .model import NewUser, User, UserChanges
from .repository import UserRepository

_SELECT_USER = """
    SELECT u.id, u.username, u.password, u.email, u.first_name, u.last_name,
           u.role_id, u.created_at, u.updated_at,
           r.name AS role_name
    FROM users u
    JOIN roles r ON r.id = u.role_id
"""


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["id"]),
        username=row["username"],
        password_hash=row["password"],
        email=row["email"],
        first_name=row.get("first_name"),
        last_name=row.get("last_name"),
        role_id=int(row["role_id"]),
        role=Role(role_id=int(row["role_id"]), name=row["role_name"]),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_user(self, data: NewUser, *, password_hash: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(username, password, email, first_name, last_name, role_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (data.username, password_hash, data.email, data.first_name, data.last_name, int(data.role_id)),
            )
            return int(cur.lastrowid)

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_USER + " WHERE u.id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_USER + " WHERE u.username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_all(self, *, limit: int, offset: int) -> tuple[Sequence[User], int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM users")
            total = fetch_count(cur)
            if total == 0:
                return [], 0

            cur.execute(_SELECT_USER + " ORDER BY u.id ASC LIMIT %s OFFSET %s", (int(limit), int(offset)))
            return [_to_user(r) for r in fetchall(cur)], total

    def update_user(self, user_id: int, changes: UserChanges) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if changes.role_id is None:
                cur.execute(
                    """
                    UPDATE users
                    SET username=%s, email=%s, first_name=%s, last_name=%s
                    WHERE id=%s
                    """,
                    (changes.username, changes.email, changes.first_name, changes.last_name, int(user_id)),
                )
            else:
                cur.execute(
                    """
                    UPDATE users
                    SET username=%s, email=%s, first_name=%s, last_name=%s, role_id=%s
                    WHERE id=%s
                    """,
                    (
                        changes.username,
                        changes.email,
                        changes.first_name,
                        changes.last_name,
                        int(changes.role_id),
                        int(user_id),
                    ),
                )
            return cur.rowcount > 0

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password=%s WHERE id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE id=%s", (int(user_id),))
            return cur.rowcount > 0
