from __future__ import annotations

from flask import Flask

from ..auth.guards import roles_required
from ..common.responses import created, json_body, ok
from ..common.validators import parse_path_id
from ..core.enums import BaseRole
from ..container import Container


def register(app: Flask, container: Container, *, prefix: str = "") -> None:
    admin_only = roles_required(BaseRole.ADMIN.value)

    @app.route(f"{prefix}/admin/roles", methods=["POST"], endpoint="admin_roles_create")
    @admin_only
    def admin_roles_create():
        body = json_body()
        role_id = container.role_service.create(name=body.get("name"))
        return created("Role created successfully", {"role_id": role_id})

    @app.route(f"{prefix}/admin/roles", methods=["GET"], endpoint="admin_roles_list")
    @admin_only
    def admin_roles_list():
        roles = container.role_service.list_all()
        return ok("Roles retrieved successfully", [r.to_dict() for r in roles])

    @app.route(f"{prefix}/admin/roles/<role_id>", methods=["GET"], endpoint="admin_roles_get")
    @admin_only
    def admin_roles_get(role_id: str):
        role = container.role_service.get(parse_path_id(role_id, "Invalid Role ID"))
        return ok("Role retrieved successfully", role.to_dict())

    @app.route(f"{prefix}/admin/roles/<role_id>", methods=["PUT"], endpoint="admin_roles_update")
    @admin_only
    def admin_roles_update(role_id: str):
        rid = parse_path_id(role_id, "Invalid Role ID")
        body = json_body()
        container.role_service.update(role_id=rid, name=body.get("name"))
        return ok("Role updated successfully")

    @app.route(f"{prefix}/admin/roles/<role_id>", methods=["DELETE"], endpoint="admin_roles_delete")
    @admin_only
    def admin_roles_delete(role_id: str):
        container.role_service.delete(parse_path_id(role_id, "Invalid Role ID"))
        return ok("Role deleted successfully")
