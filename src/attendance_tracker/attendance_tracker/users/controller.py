from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import (
    admin_required,
    current_role,
    current_user_id,
    error,
    json_errors,
    login_required,
)
from ..container import Container
from ..evidence.photo import photo_from_file

# Form/JSON field name -> User attribute.
_FIELD_MAP = {
    "username": "username",
    "fullName": "full_name",
    "role": "role",
    "nik": "nik",
    "email": "email",
    "branch": "branch",
    "position": "position",
    "shift": "shift",
    "phoneNumber": "phone_number",
    "password": "password",
}


def _employee_payload() -> dict:
    source = request.form if request.form else (request.get_json(silent=True) or {})
    return {attr: source.get(field) for field, attr in _FIELD_MAP.items() if field in source}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    @json_errors
    def login():
        payload = request.get_json(silent=True) or request.form
        s_user = container.auth_service.authenticate(payload.get("username", ""), payload.get("password", ""))

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["shift"] = s_user.shift

        user = container.users_repo.get_by_id(s_user.user_id)
        return jsonify(user.to_dict())

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return "", 200

    @app.route("/api/user", methods=["GET"], endpoint="current_user")
    @login_required
    @json_errors
    def current_user():
        user = container.users_repo.get_by_id(current_user_id())
        if not user:
            session.clear()
            return error("Silakan login terlebih dahulu", 401)
        return jsonify(user.to_dict())

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    @json_errors
    def admin_users():
        users = container.employee_service.list_employees(current_role=current_role())
        return jsonify([u.to_dict() for u in users])

    @app.route("/api/admin/users", methods=["POST"], endpoint="admin_create_user")
    @admin_required
    @json_errors
    def admin_create_user():
        user = container.employee_service.create_employee(
            current_role=current_role(),
            data=_employee_payload(),
            photo=photo_from_file(request.files.get("photo")),
        )
        return jsonify(user.to_dict()), 201

    @app.route("/api/admin/users/<int:user_id>", methods=["PATCH"], endpoint="admin_update_user")
    @admin_required
    @json_errors
    def admin_update_user(user_id: int):
        user = container.employee_service.update_employee(
            current_role=current_role(),
            user_id=user_id,
            data=_employee_payload(),
            photo=photo_from_file(request.files.get("photo")),
        )
        return jsonify(user.to_dict())

    @app.route("/api/admin/users/<int:user_id>", methods=["DELETE"], endpoint="admin_delete_user")
    @admin_required
    @json_errors
    def admin_delete_user(user_id: int):
        container.employee_service.delete_employee(current_role=current_role(), user_id=user_id)
        return "", 204

    @app.route("/api/admin/stats", methods=["GET"], endpoint="admin_stats")
    @admin_required
    @json_errors
    def admin_stats():
        return jsonify(container.report_service.dashboard_stats())
