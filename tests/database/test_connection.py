from __future__ import annotations

import threading
import time
from types import SimpleNamespace

import pytest

from attendance_backend.core.exceptions import ServiceUnavailableError
from attendance_backend.database import connection as connection_module
from attendance_backend.database.connection import DatabaseConnection, DBConfig


class FakePooledConnection:
    def __init__(self, pool):
        self._pool = pool
        self.closed = False

    def close(self):
        self.closed = True
        self._pool.returned.append(self)


class FakePool:
    instances = []

    def __init__(self, **kwargs):
        # Widen the window in which two first requests could both build a pool.
        time.sleep(0.05)
        self.kwargs = kwargs
        self.returned = []
        FakePool.instances.append(self)

    def get_connection(self):
        return FakePooledConnection(self)


class BrokenPool(FakePool):
    def get_connection(self):
        raise RuntimeError("server down")


@pytest.fixture
def fake_pooling(monkeypatch):
    FakePool.instances = []

    def _use(pool_cls):
        monkeypatch.setattr(connection_module, "pooling", SimpleNamespace(MySQLConnectionPool=pool_cls))

    _use(FakePool)
    return _use


def _factory(*, pool_size=2, connect_timeout=0):
    return DatabaseConnection(
        DBConfig(
            host="db",
            port=3306,
            user="app",
            password="pw",
            database="attendance_db",
            pool_size=pool_size,
            connect_timeout=connect_timeout,
        )
    )


def test_concurrent_first_use_builds_one_pool(fake_pooling):
    factory = _factory(pool_size=8)
    start = threading.Barrier(8)

    def borrow():
        start.wait()
        factory.release(factory.connect())

    threads = [threading.Thread(target=borrow) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(FakePool.instances) == 1
    assert len(FakePool.instances[0].returned) == 8


def test_exhausted_pool_times_out_as_service_unavailable(fake_pooling):
    factory = _factory(pool_size=1, connect_timeout=0)
    held = factory.connect()

    with pytest.raises(ServiceUnavailableError) as exc:
        factory.connect()

    assert exc.value.status_code == 503
    factory.release(held)
    factory.release(factory.connect())


def test_waiter_gets_connection_once_one_is_returned(fake_pooling):
    factory = _factory(pool_size=1, connect_timeout=5)
    held = factory.connect()
    timer = threading.Timer(0.1, factory.release, args=(held,))
    timer.start()

    conn = factory.connect()

    timer.join()
    assert held.closed
    factory.release(conn)


def test_failed_checkout_frees_its_slot(fake_pooling):
    fake_pooling(BrokenPool)
    factory = _factory(pool_size=1, connect_timeout=0)

    for _ in range(2):
        with pytest.raises(RuntimeError):
            factory.connect()


def test_pool_is_created_with_found_rows(fake_pooling):
    factory = _factory()
    factory.release(factory.connect())

    kwargs = FakePool.instances[0].kwargs
    assert kwargs["pool_size"] == 2
    assert kwargs["database"] == "attendance_db"
    assert kwargs["client_flags"]
