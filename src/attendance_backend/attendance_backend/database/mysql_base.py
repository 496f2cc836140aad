from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import ConstraintKind
from .connection import DatabaseConnection


class ConstraintViolation(Exception):
    """Integrity error from the datastore, tagged with its kind.

    Repositories raise this; services decide what it means by inspecting
    ``kind``, never the message text.
    """

    def __init__(self, kind: ConstraintKind, original: Exception):
        super().__init__(str(original))
        self.kind = kind
        self.original = original


_CONSTRAINT_BY_ERRNO = {
    errorcode.ER_DUP_ENTRY: ConstraintKind.UNIQUE,
    errorcode.ER_NO_REFERENCED_ROW: ConstraintKind.FOREIGN_KEY,
    errorcode.ER_NO_REFERENCED_ROW_2: ConstraintKind.FOREIGN_KEY,
    errorcode.ER_ROW_IS_REFERENCED: ConstraintKind.ROW_REFERENCED,
    errorcode.ER_ROW_IS_REFERENCED_2: ConstraintKind.ROW_REFERENCED,
}


def classify_integrity_error(err: Exception) -> Optional[ConstraintKind]:
    return _CONSTRAINT_BY_ERRNO.get(getattr(err, "errno", None))


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except IntegrityError as e:
        conn.rollback()
        kind = classify_integrity_error(e)
        if kind is None:
            raise
        raise ConstraintViolation(kind, e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn_factory.release(conn)


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def fetch_count(cur) -> int:
    row = cur.fetchone()
    if not row:
        return 0
    if isinstance(row, dict):
        return int(next(iter(row.values())) or 0)
    return int(row[0] or 0)


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        minutes, seconds = divmod(int(value.total_seconds()) % 86400, 60)
        hours, minutes = divmod(minutes, 60)
        return time(hours, minutes, seconds)

    if isinstance(value, str):
        parts = [int(p) for p in value.strip().split(":") if p]
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        return time(*parts[:3])

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def normalize_mysql_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.strptime(value[:10], "%Y-%m-%d").date()
    raise TypeError(f"Unsupported MySQL DATE value type: {type(value)!r}")
