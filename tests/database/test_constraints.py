from __future__ import annotations

from datetime import date, time, timedelta

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError, OperationalError

from attendance_backend.core.enums import ConstraintKind
from attendance_backend.database.mysql_base import (
    ConstraintViolation,
    classify_integrity_error,
    db_cursor,
    normalize_mysql_date,
    normalize_mysql_time,
)


class FakeCursor:
    def __init__(self, error=None):
        self._error = error
        self.closed = False

    def execute(self, sql, params=None):
        if self._error:
            raise self._error

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, error=None):
        self.cursor_obj = FakeCursor(error)
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self.cursor_obj

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn):
        self._conn = conn
        self.released = 0

    def connect(self):
        return self._conn

    def release(self, conn):
        conn.close()
        self.released += 1


@pytest.mark.parametrize(
    "errno, kind",
    [
        (errorcode.ER_DUP_ENTRY, ConstraintKind.UNIQUE),
        (errorcode.ER_NO_REFERENCED_ROW_2, ConstraintKind.FOREIGN_KEY),
        (errorcode.ER_ROW_IS_REFERENCED_2, ConstraintKind.ROW_REFERENCED),
    ],
)
def test_classify_by_errno(errno, kind):
    assert classify_integrity_error(IntegrityError(msg="x", errno=errno)) == kind


def test_unknown_errno_is_not_classified():
    assert classify_integrity_error(IntegrityError(msg="x", errno=1048)) is None


def test_db_cursor_commits_and_returns_connection():
    conn = FakeConnection()
    factory = FakeFactory(conn)

    with db_cursor(factory) as (_, cur):
        cur.execute("SELECT 1")

    assert conn.committed and conn.closed and conn.cursor_obj.closed
    assert factory.released == 1
    assert not conn.rolled_back


def test_db_cursor_tags_integrity_errors():
    conn = FakeConnection(IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY))

    with pytest.raises(ConstraintViolation) as exc:
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("INSERT ...")

    assert exc.value.kind == ConstraintKind.UNIQUE
    assert conn.rolled_back and conn.closed and not conn.committed


def test_db_cursor_propagates_other_errors():
    conn = FakeConnection(OperationalError(msg="gone away"))

    with pytest.raises(OperationalError):
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("SELECT 1")

    assert conn.rolled_back and conn.closed


def test_normalize_mysql_time_variants():
    assert normalize_mysql_time(timedelta(hours=8, minutes=30)) == time(8, 30)
    assert normalize_mysql_time("17:00:05") == time(17, 0, 5)
    assert normalize_mysql_time(None) is None


def test_normalize_mysql_date():
    assert normalize_mysql_date("2026-02-02") == date(2026, 2, 2)
