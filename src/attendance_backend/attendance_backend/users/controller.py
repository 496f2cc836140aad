from __future__ import annotations

from flask import Flask

from ..auth.guards import current_claims, roles_required
from ..common.pagination import build_page_meta
from ..common.responses import created, json_body, ok, paginated, query_pagination
from ..common.validators import parse_path_id
from ..core.enums import BaseRole
from ..container import Container


def register(app: Flask, container: Container, *, prefix: str = "") -> None:
    admin_only = roles_required(BaseRole.ADMIN.value)
    member = roles_required(BaseRole.EMPLOYEE.value, BaseRole.ADMIN.value)

    @app.route(f"{prefix}/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        user_id = container.auth_service.register(json_body())
        return created("User registered successfully", {"user_id": user_id})

    @app.route(f"{prefix}/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        body = json_body()
        token = container.auth_service.login(body.get("username"), body.get("password"))
        return ok("Login successful", {"token": token})

    # ---- Admin: user directory ----

    @app.route(f"{prefix}/admin/users", methods=["GET"], endpoint="admin_users_list")
    @admin_only
    def admin_users_list():
        pagination = query_pagination()
        users, total = container.user_service.list_page(pagination)
        return paginated(
            "Users retrieved successfully",
            [u.to_dict() for u in users],
            build_page_meta(total, pagination),
        )

    @app.route(f"{prefix}/admin/users/<user_id>", methods=["GET"], endpoint="admin_users_get")
    @admin_only
    def admin_users_get(user_id: str):
        user = container.user_service.get(parse_path_id(user_id, "Invalid User ID parameter"))
        return ok("User retrieved successfully", user.to_dict())

    @app.route(f"{prefix}/admin/users/<user_id>", methods=["PUT"], endpoint="admin_users_update")
    @admin_only
    def admin_users_update(user_id: str):
        uid = parse_path_id(user_id, "Invalid User ID parameter for update")
        container.user_service.update_by_admin(uid, json_body())
        return ok("User updated successfully")

    @app.route(f"{prefix}/admin/users/<user_id>", methods=["DELETE"], endpoint="admin_users_delete")
    @admin_only
    def admin_users_delete(user_id: str):
        uid = parse_path_id(user_id, "Invalid User ID parameter for deletion")
        container.user_service.delete(acting_user_id=current_claims().user_id, user_id=uid)
        return ok("User deleted successfully")

    # ---- Self-service ----

    @app.route(f"{prefix}/user/profile", methods=["GET"], endpoint="user_profile")
    @member
    def user_profile():
        user = container.user_service.get(current_claims().user_id)
        return ok("Profile retrieved successfully", user.to_dict())

    @app.route(f"{prefix}/user/profile", methods=["PUT"], endpoint="user_profile_update")
    @member
    def user_profile_update():
        container.user_service.update_profile(current_claims().user_id, json_body())
        return ok("Profile updated successfully")

    @app.route(f"{prefix}/user/password", methods=["PUT"], endpoint="user_password_update")
    @member
    def user_password_update():
        body = json_body()
        container.user_service.change_password(
            current_claims().user_id,
            old_password=body.get("old_password"),
            new_password=body.get("new_password"),
        )
        return ok("Password updated successfully")
