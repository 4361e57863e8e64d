from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required, current_role, current_user_id, form_value, json_errors, login_required
from ..container import Container
from ..evidence.photo import photo_from_file


def register(app: Flask, container: Container) -> None:
    service = container.complaint_service

    @app.route("/api/complaints", methods=["POST"], endpoint="complaints_create")
    @login_required
    @json_errors
    def complaints_create():
        photos = [p for p in (photo_from_file(f) for f in request.files.getlist("photos")) if p is not None]
        complaint = service.create(
            user_id=current_user_id(),
            title=form_value("title"),
            description=form_value("description"),
            photos=photos,
            captions=request.form.getlist("captions"),
        )
        return jsonify(complaint.to_dict()), 201

    @app.route("/api/complaints", methods=["GET"], endpoint="complaints_mine")
    @login_required
    @json_errors
    def complaints_mine():
        return jsonify([c.to_dict() for c in service.list_for_user(current_user_id())])

    @app.route("/api/complaints/<int:complaint_id>/photos", methods=["GET"], endpoint="complaint_photos")
    @login_required
    @json_errors
    def complaint_photos(complaint_id: int):
        photos = service.photos(complaint_id=complaint_id, user_id=current_user_id(), current_role=current_role())
        return jsonify([p.to_dict() for p in photos])

    @app.route("/api/admin/complaints", methods=["GET"], endpoint="admin_complaints")
    @admin_required
    @json_errors
    def admin_complaints():
        return jsonify([c.to_dict() for c in service.list_all(current_role=current_role())])

    @app.route("/api/admin/complaints/stats", methods=["GET"], endpoint="admin_complaint_stats")
    @admin_required
    @json_errors
    def admin_complaint_stats():
        return jsonify({"pendingCount": service.pending_count(current_role=current_role())})

    @app.route("/api/admin/complaints/<int:complaint_id>/status", methods=["PATCH"], endpoint="admin_complaint_status")
    @admin_required
    @json_errors
    def admin_complaint_status(complaint_id: int):
        updated = service.update_status(
            current_role=current_role(),
            complaint_id=complaint_id,
            status=form_value("status"),
        )
        return jsonify(updated.to_dict())
