from __future__ import annotations

from flask import Flask

from ..auth.guards import current_claims, roles_required
from ..common.datetime_utils import format_datetime, now_local, start_of_month
from ..common.pagination import build_page_meta
from ..common.responses import json_body, ok, paginated, query_date_range, query_pagination
from ..common.validators import optional_text, parse_path_id
from ..core.enums import BaseRole
from ..core.exceptions import NotFoundError
from ..container import Container


def register(app: Flask, container: Container, *, prefix: str = "") -> None:
    admin_only = roles_required(BaseRole.ADMIN.value)
    member = roles_required(BaseRole.EMPLOYEE.value, BaseRole.ADMIN.value)

    def _month_to_date():
        today = now_local().date()
        return query_date_range(default_start=start_of_month(today), default_end=today)

    @app.route(f"{prefix}/user/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    @member
    def attendance_checkin():
        notes = optional_text(json_body(required=False).get("notes"), "notes")
        record = container.attendance_service.check_in(current_claims().user_id, notes=notes)
        return ok(
            "Check-in successful",
            {"attendance_id": record.attendance_id, "check_in_at": format_datetime(record.check_in_at)},
        )

    @app.route(f"{prefix}/user/attendance/checkout", methods=["POST"], endpoint="attendance_checkout")
    @member
    def attendance_checkout():
        notes = optional_text(json_body(required=False).get("notes"), "notes")
        record = container.attendance_service.check_out(current_claims().user_id, notes=notes)
        return ok(
            "Check-out successful",
            {"attendance_id": record.attendance_id, "check_out_at": format_datetime(record.check_out_at)},
        )

    @app.route(f"{prefix}/user/attendance/my", methods=["GET"], endpoint="attendance_my")
    @member
    def attendance_my():
        date_range = _month_to_date()
        pagination = query_pagination()
        records, total = container.attendance_service.list_for_user(
            user_id=current_claims().user_id, date_range=date_range, pagination=pagination
        )
        return paginated(
            "Attendance records retrieved successfully",
            [r.to_dict() for r in records],
            build_page_meta(total, pagination),
        )

    @app.route(f"{prefix}/admin/attendance/report", methods=["GET"], endpoint="admin_attendance_report")
    @admin_only
    def admin_attendance_report():
        date_range = _month_to_date()
        pagination = query_pagination()
        records, total = container.attendance_service.list_all(date_range=date_range, pagination=pagination)
        return paginated(
            "Attendance report retrieved successfully",
            [r.to_dict() for r in records],
            build_page_meta(total, pagination),
        )

    @app.route(f"{prefix}/admin/users/<user_id>/attendance", methods=["GET"], endpoint="admin_user_attendance")
    @admin_only
    def admin_user_attendance(user_id: str):
        uid = parse_path_id(user_id, "Invalid User ID parameter for getting attendance")
        if not container.user_service.exists(uid):
            raise NotFoundError("User not found")

        date_range = _month_to_date()
        pagination = query_pagination()
        records, total = container.attendance_service.list_for_user(
            user_id=uid, date_range=date_range, pagination=pagination
        )
        return paginated(
            "User attendance records retrieved successfully",
            [r.to_dict() for r in records],
            build_page_meta(total, pagination),
        )
