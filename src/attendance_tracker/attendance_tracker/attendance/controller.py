from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import (
    current_role,
    current_user_id,
    form_value,
    json_errors,
    login_required,
    request_photo,
)
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    @login_required
    @json_errors
    def clock_in():
        record = service.clock_in(
            current_user_id(),
            shift=form_value("shift"),
            photo=request_photo(),
            location=form_value("location"),
        )
        return jsonify(record.to_dict())

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    @login_required
    @json_errors
    def clock_out():
        record = service.clock_out(current_user_id(), photo=request_photo(), location=form_value("location"))
        return jsonify(record.to_dict())

    @app.route("/api/attendance/break-start", methods=["POST"], endpoint="attendance_break_start")
    @login_required
    @json_errors
    def break_start():
        record = service.break_start(current_user_id(), photo=request_photo(), location=form_value("location"))
        return jsonify(record.to_dict())

    @app.route("/api/attendance/break-end", methods=["POST"], endpoint="attendance_break_end")
    @login_required
    @json_errors
    def break_end():
        record = service.break_end(current_user_id(), photo=request_photo(), location=form_value("location"))
        return jsonify(record.to_dict())

    @app.route("/api/attendance/permit", methods=["POST"], endpoint="attendance_permit")
    @login_required
    @json_errors
    def permit():
        record = service.permit(
            current_user_id(),
            permit_type=form_value("type"),
            notes=form_value("notes"),
            photo=request_photo(),
            location=form_value("location"),
        )
        return jsonify(record.to_dict())

    @app.route("/api/attendance/resume", methods=["POST"], endpoint="attendance_resume")
    @login_required
    @json_errors
    def resume():
        record = service.resume(current_user_id())
        return jsonify(record.to_dict())

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    @json_errors
    def today():
        return jsonify([s.to_dict() for s in service.today(current_user_id())])

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @login_required
    @json_errors
    def summary():
        return jsonify(service.day_summary(current_user_id()).to_dict())

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    @json_errors
    def history():
        # Admin can see everyone (optionally one user), employees only themselves.
        if current_role() == Role.ADMIN:
            user_id = request.args.get("userId", type=int)
        else:
            user_id = current_user_id()

        records = service.history(
            user_id=user_id,
            month=request.args.get("month") or None,
            day=request.args.get("date") or None,
        )
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/attendance/report", methods=["GET"], endpoint="attendance_report")
    @login_required
    @json_errors
    def report():
        user_id, month = _report_target()
        data = container.report_service.monthly_report(user_id=user_id, month=month)
        return jsonify({"rows": data.rows, "summary": data.summary})

    @app.route("/api/attendance/report.csv", methods=["GET"], endpoint="attendance_report_csv")
    @login_required
    @json_errors
    def report_csv():
        user_id, month = _report_target()
        data = container.report_service.monthly_report(user_id=user_id, month=month)
        filename = f"attendance_{user_id}_{month.replace('-', '')}.csv"
        return app.response_class(
            container.report_service.to_csv(data),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    def _report_target() -> tuple[int, str]:
        month = request.args.get("month") or service.business_date().strftime("%Y-%m")
        user_id = current_user_id()
        if current_role() == Role.ADMIN:
            user_id = request.args.get("userId", type=int) or user_id
        return user_id, month
