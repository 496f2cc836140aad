from __future__ import annotations

from flask import Flask

from ..auth.guards import roles_required, token_required
from ..common.responses import created, json_body, ok
from ..common.validators import parse_path_id
from ..core.enums import BaseRole
from ..container import Container


def register(app: Flask, container: Container, *, prefix: str = "") -> None:
    admin_only = roles_required(BaseRole.ADMIN.value)

    @app.route(f"{prefix}/admin/shifts", methods=["POST"], endpoint="admin_shifts_create")
    @admin_only
    def admin_shifts_create():
        body = json_body()
        shift_id = container.shift_service.create(
            name=body.get("name"),
            start_time=body.get("start_time"),
            end_time=body.get("end_time"),
        )
        return created("Shift created successfully", {"shift_id": shift_id})

    @app.route(f"{prefix}/admin/shifts", methods=["GET"], endpoint="admin_shifts_list")
    @admin_only
    def admin_shifts_list():
        return ok("Shifts retrieved successfully", [s.to_dict() for s in container.shift_service.list_all()])

    @app.route(f"{prefix}/admin/shifts/<shift_id>", methods=["GET"], endpoint="admin_shifts_get")
    @admin_only
    def admin_shifts_get(shift_id: str):
        shift = container.shift_service.get(parse_path_id(shift_id, "Invalid Shift ID parameter"))
        return ok("Shift retrieved successfully", shift.to_dict())

    @app.route(f"{prefix}/admin/shifts/<shift_id>", methods=["PUT"], endpoint="admin_shifts_update")
    @admin_only
    def admin_shifts_update(shift_id: str):
        sid = parse_path_id(shift_id, "Invalid Shift ID parameter")
        body = json_body()
        container.shift_service.update(
            shift_id=sid,
            name=body.get("name"),
            start_time=body.get("start_time"),
            end_time=body.get("end_time"),
        )
        return ok("Shift updated successfully")

    @app.route(f"{prefix}/admin/shifts/<shift_id>", methods=["DELETE"], endpoint="admin_shifts_delete")
    @admin_only
    def admin_shifts_delete(shift_id: str):
        container.shift_service.delete(parse_path_id(shift_id, "Invalid Shift ID parameter"))
        return ok("Shift deleted successfully")

    # Read-only catalog for any authenticated caller.
    @app.route(f"{prefix}/shifts", methods=["GET"], endpoint="shifts_list")
    @token_required
    def shifts_list():
        return ok("Shifts retrieved successfully", [s.to_dict() for s in container.shift_service.list_all()])
