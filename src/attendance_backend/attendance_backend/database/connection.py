from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from mysql.connector import pooling
from mysql.connector.constants import ClientFlag

from ..core.exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_name: str = "attendance_pool"
    pool_size: int = 10
    connect_timeout: int = 5


class DatabaseConnection:
    """Pooled DB connection factory.

    Note: The pool is created lazily on first use. ``MySQLConnectionPool`` fails
    at once when every connection is out, so callers queue on a semaphore sized
    like the pool and give up after ``connect_timeout`` seconds. Every
    ``connect()`` must be paired with ``release()``.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._pool_lock = threading.Lock()
        self._slots = threading.BoundedSemaphore(max(1, int(config.pool_size)))

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        with self._pool_lock:
            if self._pool is None:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name=self._config.pool_name,
                    pool_size=int(self._config.pool_size),
                    pool_reset_session=True,
                    host=self._config.host,
                    port=int(self._config.port),
                    user=self._config.user,
                    password=self._config.password,
                    database=self._config.database,
                    connection_timeout=int(self._config.connect_timeout),
                    autocommit=False,
                    # UPDATE rowcount reports matched rows, so "no change" is not "not found".
                    client_flags=[ClientFlag.FOUND_ROWS],
                )
                logger.info(
                    "Database pool ready: %s@%s:%s/%s (size=%s)",
                    self._config.user,
                    self._config.host,
                    self._config.port,
                    self._config.database,
                    self._config.pool_size,
                )
            return self._pool

    def connect(self):
        if not self._slots.acquire(timeout=float(self._config.connect_timeout)):
            logger.warning("No database connection free after %ss", self._config.connect_timeout)
            raise ServiceUnavailableError("Database is busy, please retry")
        try:
            return self._get_pool().get_connection()
        except Exception:
            self._slots.release()
            raise

    def release(self, conn) -> None:
        try:
            conn.close()
        finally:
            self._slots.release()

    def ping(self) -> bool:
        conn = self.connect()
        try:
            conn.ping(reconnect=False)
            return True
        finally:
            self.release(conn)
