from __future__ import annotations

from flask import Flask

from ..auth.guards import current_claims, roles_required
from ..common.datetime_utils import end_of_month, now_local, start_of_month
from ..common.pagination import build_page_meta
from ..common.responses import created, json_body, ok, paginated, query_date_range, query_pagination
from ..common.validators import parse_path_id
from ..core.enums import BaseRole
from ..core.exceptions import NotFoundError
from ..container import Container


def register(app: Flask, container: Container, *, prefix: str = "") -> None:
    admin_only = roles_required(BaseRole.ADMIN.value)
    member = roles_required(BaseRole.EMPLOYEE.value, BaseRole.ADMIN.value)

    @app.route(f"{prefix}/admin/schedules", methods=["POST"], endpoint="admin_schedules_create")
    @admin_only
    def admin_schedules_create():
        body = json_body()
        schedule_id = container.schedule_service.create(
            user_id=body.get("user_id"),
            shift_id=body.get("shift_id"),
            work_date=body.get("date"),
        )
        return created("Schedule created successfully", {"schedule_id": schedule_id})

    @app.route(f"{prefix}/admin/schedules", methods=["GET"], endpoint="admin_schedules_list")
    @admin_only
    def admin_schedules_list():
        today = now_local().date()
        date_range = query_date_range(default_start=start_of_month(today), default_end=today)
        pagination = query_pagination()

        schedules, total = container.schedule_service.list_all(date_range=date_range, pagination=pagination)
        return paginated(
            "Schedules retrieved successfully",
            [s.to_dict() for s in schedules],
            build_page_meta(total, pagination),
        )

    @app.route(f"{prefix}/admin/schedules/<schedule_id>", methods=["PUT"], endpoint="admin_schedules_update")
    @admin_only
    def admin_schedules_update(schedule_id: str):
        sid = parse_path_id(schedule_id, "Invalid schedule ID")
        body = json_body()
        container.schedule_service.update(
            schedule_id=sid,
            user_id=body.get("user_id"),
            shift_id=body.get("shift_id"),
            work_date=body.get("date"),
        )
        return ok("Schedule updated successfully")

    @app.route(f"{prefix}/admin/schedules/<schedule_id>", methods=["DELETE"], endpoint="admin_schedules_delete")
    @admin_only
    def admin_schedules_delete(schedule_id: str):
        container.schedule_service.delete(parse_path_id(schedule_id, "Invalid schedule ID"))
        return ok("Schedule deleted successfully")

    @app.route(f"{prefix}/admin/users/<user_id>/schedules", methods=["GET"], endpoint="admin_user_schedules")
    @admin_only
    def admin_user_schedules(user_id: str):
        uid = parse_path_id(user_id, "Invalid User ID parameter for getting schedules")
        if not container.user_service.exists(uid):
            raise NotFoundError("User not found")

        today = now_local().date()
        date_range = query_date_range(default_start=start_of_month(today), default_end=today)
        pagination = query_pagination()

        schedules, total = container.schedule_service.list_for_user(
            user_id=uid, date_range=date_range, pagination=pagination
        )
        return paginated(
            "User schedules retrieved successfully",
            [s.to_dict() for s in schedules],
            build_page_meta(total, pagination),
        )

    @app.route(f"{prefix}/user/schedules/my", methods=["GET"], endpoint="user_schedules_my")
    @member
    def user_schedules_my():
        today = now_local().date()
        date_range = query_date_range(default_start=start_of_month(today), default_end=end_of_month(today))
        pagination = query_pagination()

        schedules, total = container.schedule_service.list_for_user(
            user_id=current_claims().user_id, date_range=date_range, pagination=pagination
        )
        return paginated(
            "Schedules retrieved successfully",
            [s.to_dict() for s in schedules],
            build_page_meta(total, pagination),
        )
