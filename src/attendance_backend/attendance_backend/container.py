from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.tokens import TokenService
from .database.connection import DBConfig, DatabaseConnection
from .roles.mysql_role_repository import MySQLRoleRepository
from .roles.repository import RoleRepository
from .roles.service import RoleService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .shifts.service import ShiftService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    tokens: TokenService

    users_repo: UserRepository
    roles_repo: RoleRepository
    shifts_repo: ShiftRepository
    schedules_repo: ScheduleRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    user_service: UserService
    role_service: RoleService
    shift_service: ShiftService
    schedule_service: ScheduleService
    attendance_service: AttendanceService


def assemble(
    *,
    tokens: TokenService,
    users_repo: UserRepository,
    roles_repo: RoleRepository,
    shifts_repo: ShiftRepository,
    schedules_repo: ScheduleRepository,
    attendance_repo: AttendanceRepository,
) -> Container:
    """Wire services over any set of repositories (MySQL or in-memory)."""

    return Container(
        tokens=tokens,
        users_repo=users_repo,
        roles_repo=roles_repo,
        shifts_repo=shifts_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo, roles_repo, tokens),
        user_service=UserService(users_repo, roles_repo),
        role_service=RoleService(roles_repo),
        shift_service=ShiftService(shifts_repo),
        schedule_service=ScheduleService(schedules_repo),
        attendance_service=AttendanceService(attendance_repo, schedules_repo),
    )


def build_container(*, db_config: dict, settings) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        pool_name=str(getattr(settings, "DB_POOL_NAME", "attendance_pool")),
        pool_size=int(getattr(settings, "DB_POOL_SIZE", 10)),
        connect_timeout=int(getattr(settings, "DB_CONNECT_TIMEOUT", 5)),
    )
    conn = DatabaseConnection(config)
    tokens = TokenService(
        str(getattr(settings, "JWT_SECRET", "") or ""),
        ttl_hours=int(getattr(settings, "JWT_TTL_HOURS", 72)),
    )

    return assemble(
        tokens=tokens,
        users_repo=MySQLUserRepository(conn),
        roles_repo=MySQLRoleRepository(conn),
        shifts_repo=MySQLShiftRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
    )
