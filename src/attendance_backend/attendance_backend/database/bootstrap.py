from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector

from ..auth.passwords import hash_password
from ..core.enums import BaseRole

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")

# Escaped chars, quotes and ";" are tokens of their own; everything else is grouped.
_SQL_TOKEN = re.compile(r"""\\.|['"`;]|[^\\'"`;]+""")


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "attendance_db")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    """Yield statements from a schema file.

    Full-line "--" comments are dropped; ";" only ends a statement outside quotes.
    """

    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    current: list[str] = []
    quote = None
    for token in _SQL_TOKEN.findall("\n".join(lines)):
        if quote is None and token in ("'", '"', "`"):
            quote = token
        elif token == quote:
            quote = None
        elif token == ";" and quote is None:
            stmt = "".join(current).strip()
            current = []
            if stmt:
                yield stmt
            continue
        current.append(token)

    tail = "".join(current).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in _iter_sql_statements(sql):
        cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    target = _as_target(db_config)
    ensure_database_exists(db_config)

    schema_path = Path(schema_path)
    sql = _strip_create_db_and_use(schema_path.read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s", schema_path)


def ensure_base_roles(db_config: dict) -> None:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        for role in BaseRole:
            cur.execute("INSERT IGNORE INTO roles (name) VALUES (%s)", (role.value,))
        conn.commit()
    finally:
        conn.close()


def ensure_admin_user(db_config: dict, *, username: str, password: str, email: str) -> None:
    """Create the seed admin account if it does not exist yet."""

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT id FROM roles WHERE name=%s", (BaseRole.ADMIN.value,))
        role = cur.fetchone()
        if not role:
            raise RuntimeError("Missing roles row for Admin; apply the schema first")

        cur.execute("SELECT id FROM users WHERE username=%s", (username,))
        if cur.fetchone():
            logger.info("Seed admin %s already exists", username)
            return

        cur.execute(
            """
            INSERT INTO users (username, password, email, first_name, last_name, role_id)
            VALUES (%s, %s, %s, %s, %s, %s)
            """,
            (username, hash_password(password), email, "System", "Admin", int(role["id"])),
        )
        conn.commit()
        logger.info("Seed admin %s created", username)
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
