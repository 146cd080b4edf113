from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request, session

from ..common.web import json_error, login_required
from ..container import Container
from ..core.exceptions import DomainError
from .model import Student


def _student_json(s: Student) -> dict:
    data = asdict(s)
    data.pop("raw", None)
    data["attendance"] = [
        {"month": a.month, "label": a.label, "present_days": a.present_days, "total_days": a.total_days}
        for a in s.attendance
    ]
    return data


def register(app: Flask, container: Container) -> None:
    def _api():
        return container.api.authorized(session["token"])

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @login_required
    async def students_list():
        try:
            students = await container.student_service.list_students(_api(), str(session["tutor_id"]))
        except DomainError as e:
            return json_error(e)
        return jsonify({"success": True, "students": [_student_json(s) for s in students]})

    @app.route("/api/students/<student_id>", methods=["GET"], endpoint="student_detail")
    @login_required
    async def student_detail(student_id: str):
        try:
            student = await container.student_service.get_student(_api(), student_id)
        except DomainError as e:
            return json_error(e)
        return jsonify({"success": True, "student": _student_json(student)})

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="student_update")
    @login_required
    async def student_update(student_id: str):
        try:
            student = await container.student_service.update_student(
                _api(), student_id, request.get_json(silent=True) or {}
            )
        except DomainError as e:
            return json_error(e)
        return jsonify({"success": True, "message": "Student updated successfully", "student": _student_json(student)})

    @app.route("/api/students/attendance", methods=["POST"], endpoint="students_attendance")
    @login_required
    async def students_attendance():
        data = request.get_json(silent=True) or {}
        try:
            await container.student_service.mark_daily_attendance(_api(), data.get("studentIds") or [], data.get("date"))
        except DomainError as e:
            return json_error(e)
        return jsonify({"success": True, "message": "Marked successfully"})
