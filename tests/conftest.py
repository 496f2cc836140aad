from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional

import pytest

import config.testing as testing_settings
from attendance_backend.attendance.model import Attendance
from attendance_backend.auth.passwords import hash_password
from attendance_backend.auth.tokens import TokenService
from attendance_backend.container import assemble
from attendance_backend.core.enums import ConstraintKind
from attendance_backend.database.mysql_base import ConstraintViolation
from attendance_backend.main import create_app
from attendance_backend.roles.model import Role
from attendance_backend.schedules.model import Schedule
from attendance_backend.shifts.model import Shift
from attendance_backend.users.model import NewUser, User, UserChanges, UserSummary


def _violation(kind: ConstraintKind) -> ConstraintViolation:
    return ConstraintViolation(kind, Exception(kind.value))


class InMemoryStore:
    """Tables shared by the fake repositories, with MySQL-like constraints."""

    def __init__(self):
        self.roles: dict[int, Role] = {1: Role(role_id=1, name="Admin"), 2: Role(role_id=2, name="Employee")}
        self.users: dict[int, User] = {}
        self.shifts: dict[int, Shift] = {}
        self.schedules: dict[int, Schedule] = {}
        self.attendance: dict[int, Attendance] = {}
        self._ids = {"roles": 2, "users": 0, "shifts": 0, "schedules": 0, "attendance": 0}

    def next_id(self, table: str) -> int:
        self._ids[table] += 1
        return self._ids[table]


class InMemoryRoles:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _name_taken(self, name: str, *, exclude: Optional[int] = None) -> bool:
        return any(r.name.casefold() == name.casefold() and rid != exclude for rid, r in self._s.roles.items())

    def create(self, *, name: str) -> int:
        if self._name_taken(name):
            raise _violation(ConstraintKind.UNIQUE)
        role_id = self._s.next_id("roles")
        self._s.roles[role_id] = Role(role_id=role_id, name=name)
        return role_id

    def get_by_id(self, role_id: int) -> Optional[Role]:
        return self._s.roles.get(role_id)

    def list_all(self):
        return [self._s.roles[k] for k in sorted(self._s.roles)]

    def update(self, *, role_id: int, name: str) -> bool:
        if role_id not in self._s.roles:
            return False
        if self._name_taken(name, exclude=role_id):
            raise _violation(ConstraintKind.UNIQUE)
        self._s.roles[role_id] = Role(role_id=role_id, name=name)
        return True

    def delete(self, role_id: int) -> bool:
        if role_id not in self._s.roles:
            return False
        if any(u.role_id == role_id for u in self._s.users.values()):
            raise _violation(ConstraintKind.ROW_REFERENCED)
        del self._s.roles[role_id]
        return True


class InMemoryUsers:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _check(self, username: str, email: str, role_id: int, *, exclude: Optional[int] = None) -> None:
        for uid, u in self._s.users.items():
            if uid != exclude and (u.username == username or u.email == email):
                raise _violation(ConstraintKind.UNIQUE)
        if role_id not in self._s.roles:
            raise _violation(ConstraintKind.FOREIGN_KEY)

    def _resolve(self, user: Optional[User]) -> Optional[User]:
        if user is None:
            return None
        return replace(user, role=self._s.roles.get(user.role_id))

    def create_user(self, data: NewUser, *, password_hash: str) -> int:
        self._check(data.username, data.email, data.role_id)
        user_id = self._s.next_id("users")
        self._s.users[user_id] = User(
            user_id=user_id,
            username=data.username,
            password_hash=password_hash,
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
            role_id=data.role_id,
            created_at=datetime(2026, 1, 1, 9, 0, 0),
            updated_at=datetime(2026, 1, 1, 9, 0, 0),
        )
        return user_id

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._resolve(self._s.users.get(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return self._resolve(next((u for u in self._s.users.values() if u.username == username), None))

    def list_all(self, *, limit: int, offset: int):
        users = [self._resolve(self._s.users[k]) for k in sorted(self._s.users)]
        return users[offset : offset + limit], len(users)

    def update_user(self, user_id: int, changes: UserChanges) -> bool:
        current = self._s.users.get(user_id)
        if current is None:
            return False
        role_id = changes.role_id if changes.role_id is not None else current.role_id
        self._check(changes.username, changes.email, role_id, exclude=user_id)
        self._s.users[user_id] = replace(
            current,
            username=changes.username,
            email=changes.email,
            first_name=changes.first_name,
            last_name=changes.last_name,
            role_id=role_id,
        )
        return True

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        if user_id not in self._s.users:
            return False
        self._s.users[user_id] = replace(self._s.users[user_id], password_hash=password_hash)
        return True

    def delete_by_id(self, user_id: int) -> bool:
        if self._s.users.pop(user_id, None) is None:
            return False
        # ON DELETE CASCADE
        self._s.schedules = {k: v for k, v in self._s.schedules.items() if v.user_id != user_id}
        self._s.attendance = {k: v for k, v in self._s.attendance.items() if v.user_id != user_id}
        return True


class InMemoryShifts:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create(self, *, name: str, start_time: time, end_time: time) -> int:
        shift_id = self._s.next_id("shifts")
        self._s.shifts[shift_id] = Shift(shift_id=shift_id, name=name, start_time=start_time, end_time=end_time)
        return shift_id

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        return self._s.shifts.get(shift_id)

    def list_all(self):
        return sorted(self._s.shifts.values(), key=lambda s: s.name)

    def update(self, *, shift_id: int, name: str, start_time: time, end_time: time) -> bool:
        if shift_id not in self._s.shifts:
            return False
        self._s.shifts[shift_id] = replace(self._s.shifts[shift_id], name=name, start_time=start_time, end_time=end_time)
        return True

    def delete(self, shift_id: int) -> bool:
        if shift_id not in self._s.shifts:
            return False
        if any(sc.shift_id == shift_id for sc in self._s.schedules.values()):
            raise _violation(ConstraintKind.ROW_REFERENCED)
        del self._s.shifts[shift_id]
        return True


class InMemorySchedules:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _check(self, user_id: int, shift_id: int, work_date: date, *, exclude: Optional[int] = None) -> None:
        if user_id not in self._s.users or shift_id not in self._s.shifts:
            raise _violation(ConstraintKind.FOREIGN_KEY)
        for sid, sc in self._s.schedules.items():
            if sid != exclude and sc.user_id == user_id and sc.work_date == work_date:
                raise _violation(ConstraintKind.UNIQUE)

    def _resolve(self, sc: Schedule, *, with_user: bool = False) -> Schedule:
        user = None
        if with_user:
            u = self._s.users[sc.user_id]
            user = UserSummary(
                user_id=u.user_id,
                username=u.username,
                email=u.email,
                first_name=u.first_name,
                last_name=u.last_name,
            )
        return replace(sc, shift=self._s.shifts.get(sc.shift_id), user=user)

    def create(self, *, user_id: int, shift_id: int, work_date: date) -> int:
        self._check(user_id, shift_id, work_date)
        schedule_id = self._s.next_id("schedules")
        self._s.schedules[schedule_id] = Schedule(
            schedule_id=schedule_id, user_id=user_id, shift_id=shift_id, work_date=work_date
        )
        return schedule_id

    def get_for_user_on_date(self, *, user_id: int, work_date: date) -> Optional[Schedule]:
        for sc in self._s.schedules.values():
            if sc.user_id == user_id and sc.work_date == work_date:
                return self._resolve(sc)
        return None

    def list_for_user(self, *, user_id: int, start: date, end: date, limit: int, offset: int):
        rows = [sc for sc in self._s.schedules.values() if sc.user_id == user_id and start <= sc.work_date <= end]
        rows.sort(key=lambda sc: sc.work_date)
        return [self._resolve(sc) for sc in rows[offset : offset + limit]], len(rows)

    def list_all(self, *, start: date, end: date, limit: int, offset: int):
        rows = [sc for sc in self._s.schedules.values() if start <= sc.work_date <= end]
        rows.sort(key=lambda sc: (sc.work_date, self._s.users[sc.user_id].username))
        return [self._resolve(sc, with_user=True) for sc in rows[offset : offset + limit]], len(rows)

    def update(self, *, schedule_id: int, user_id: int, shift_id: int, work_date: date) -> bool:
        if schedule_id not in self._s.schedules:
            return False
        self._check(user_id, shift_id, work_date, exclude=schedule_id)
        self._s.schedules[schedule_id] = replace(
            self._s.schedules[schedule_id], user_id=user_id, shift_id=shift_id, work_date=work_date
        )
        return True

    def delete(self, *, schedule_id: int) -> bool:
        return self._s.schedules.pop(schedule_id, None) is not None


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create_check_in(self, *, user_id: int, check_in_at: datetime, notes: Optional[str] = None) -> int:
        attendance_id = self._s.next_id("attendance")
        self._s.attendance[attendance_id] = Attendance(
            attendance_id=attendance_id, user_id=user_id, check_in_at=check_in_at, notes=notes
        )
        return attendance_id

    def get_last_for_user(self, user_id: int) -> Optional[Attendance]:
        rows = [a for a in self._s.attendance.values() if a.user_id == user_id]
        if not rows:
            return None
        return max(rows, key=lambda a: (a.check_in_at, a.attendance_id))

    def update_check_out(self, *, attendance_id: int, check_out_at: datetime, notes: Optional[str] = None) -> bool:
        current = self._s.attendance.get(attendance_id)
        if current is None or current.check_out_at is not None:
            return False
        self._s.attendance[attendance_id] = replace(
            current, check_out_at=check_out_at, notes=notes if notes is not None else current.notes
        )
        return True

    def _in_range(self, a: Attendance, start_at: datetime, end_at: datetime) -> bool:
        return start_at <= a.check_in_at <= end_at

    def list_for_user(self, *, user_id: int, start_at: datetime, end_at: datetime, limit: int, offset: int):
        rows = [a for a in self._s.attendance.values() if a.user_id == user_id and self._in_range(a, start_at, end_at)]
        rows.sort(key=lambda a: a.check_in_at, reverse=True)
        return rows[offset : offset + limit], len(rows)

    def list_all(self, *, start_at: datetime, end_at: datetime, limit: int, offset: int):
        rows = [a for a in self._s.attendance.values() if self._in_range(a, start_at, end_at)]
        rows.sort(key=lambda a: self._s.users[a.user_id].username)
        rows.sort(key=lambda a: a.check_in_at, reverse=True)
        out = []
        for a in rows[offset : offset + limit]:
            u = self._s.users[a.user_id]
            out.append(
                replace(
                    a,
                    user=UserSummary(
                        user_id=u.user_id,
                        username=u.username,
                        email=u.email,
                        first_name=u.first_name,
                        last_name=u.last_name,
                    ),
                )
            )
        return out, len(rows)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 8, 30, 0)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def token_service() -> TokenService:
    return TokenService("test-secret", ttl_hours=72)


@pytest.fixture
def container(store, token_service):
    return assemble(
        tokens=token_service,
        users_repo=InMemoryUsers(store),
        roles_repo=InMemoryRoles(store),
        shifts_repo=InMemoryShifts(store),
        schedules_repo=InMemorySchedules(store),
        attendance_repo=InMemoryAttendance(store),
    )


@pytest.fixture
def make_user(container):
    def _make(username: str, *, password: str = "secret123", role_id: int = 2) -> int:
        return container.users_repo.create_user(
            NewUser(
                username=username,
                email=f"{username}@example.com",
                first_name=username.title(),
                last_name="Tester",
                role_id=role_id,
            ),
            password_hash=hash_password(password),
        )

    return _make


@pytest.fixture
def app(container):
    flask_app = create_app(container=container, settings=testing_settings)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(token_service):
    def _headers(user_id: int, username: str, role: str) -> dict:
        token = token_service.issue(user_id, username, role)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin(make_user, auth_headers):
    user_id = make_user("admin", role_id=1)
    return user_id, auth_headers(user_id, "admin", "Admin")


@pytest.fixture
def employee(make_user, auth_headers):
    user_id = make_user("alice", role_id=2)
    return user_id, auth_headers(user_id, "alice", "Employee")
