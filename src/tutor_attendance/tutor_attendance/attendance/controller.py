from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import json_error, login_required
from ..container import Container
from ..core.exceptions import DomainError
from ..geo.model import Center
from .location import ReportedLocationProvider
from .service import TutorContext


def register(app: Flask, container: Container) -> None:
    def _tutor() -> TutorContext:
        return TutorContext(tutor_id=str(session["tutor_id"]), center=Center.from_api(session.get("center")))

    def _backend():
        return container.api.authorized(session["token"])

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    async def attendance_today():
        try:
            status = await container.attendance_service.today_status(_tutor(), _backend())
        except DomainError as e:
            return json_error(e)
        return jsonify({"success": True, **status})

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @login_required
    async def attendance_mark():
        try:
            location = ReportedLocationProvider.from_payload(request.get_json(silent=True))
            status = await container.attendance_service.mark_attendance(_tutor(), _backend(), location)
        except DomainError as e:
            return json_error(e)
        return jsonify({"success": status["state"] == "MARKED", **status})

    @app.route("/api/attendance/retry", methods=["POST"], endpoint="attendance_retry")
    @login_required
    async def attendance_retry():
        try:
            location = ReportedLocationProvider.from_payload(request.get_json(silent=True))
            status = await container.attendance_service.retry_attendance(_tutor(), _backend(), location)
        except DomainError as e:
            return json_error(e)
        return jsonify({"success": status["state"] == "MARKED", **status})
