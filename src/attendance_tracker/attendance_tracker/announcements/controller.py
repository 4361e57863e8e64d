from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_optional_datetime
from ..common.web import admin_required, current_role, current_user_id, form_value, json_errors, login_required
from ..container import Container
from ..evidence.photo import photo_from_file


def register(app: Flask, container: Container) -> None:
    service = container.announcement_service

    @app.route("/api/announcements", methods=["GET"], endpoint="announcements_list")
    @login_required
    @json_errors
    def announcements_list():
        return jsonify([a.to_dict() for a in service.list_active()])

    @app.route("/api/announcements", methods=["POST"], endpoint="announcements_create")
    @admin_required
    @json_errors
    def announcements_create():
        announcement = service.create(
            current_role=current_role(),
            author_id=current_user_id(),
            title=form_value("title"),
            content=form_value("content"),
            expires_at=parse_optional_datetime(form_value("expiresAt")),
            image=photo_from_file(request.files.get("image")),
        )
        return jsonify(announcement.to_dict()), 201

    @app.route("/api/announcements/<int:announcement_id>", methods=["DELETE"], endpoint="announcements_delete")
    @admin_required
    @json_errors
    def announcements_delete(announcement_id: int):
        service.delete(current_role=current_role(), announcement_id=announcement_id)
        return "", 204
