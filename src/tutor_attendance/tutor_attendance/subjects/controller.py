from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import json_error, login_required
from ..container import Container
from ..core.exceptions import DomainError
from .model import SubjectRecord


def _record_json(r: SubjectRecord) -> dict:
    return {
        "record_id": r.record_id,
        "subject_id": r.subject_id,
        "subject_name": r.subject_name,
        "marks": [
            {"mark_id": m.mark_id, "marks_percentage": m.marks_percentage, "exam_date": m.display_date}
            for m in r.marks
        ],
    }


def register(app: Flask, container: Container) -> None:
    def _api():
        return container.api.authorized(session["token"])

    @app.route("/api/students/<student_id>/subjects", methods=["GET"], endpoint="subjects_list")
    @login_required
    async def subjects_list(student_id: str):
        try:
            records = await container.subject_service.list_subjects(_api(), student_id)
        except DomainError as e:
            return json_error(e)
        return jsonify({"success": True, "subjects": [_record_json(r) for r in records]})

    @app.route("/api/students/<student_id>/subjects/<subject_id>/marks", methods=["POST"], endpoint="marks_add")
    @login_required
    async def marks_add(student_id: str, subject_id: str):
        data = request.get_json(silent=True) or {}
        try:
            await container.subject_service.add_marks(
                _api(), student_id, subject_id, data.get("marksPercentage"), data.get("examDate")
            )
        except DomainError as e:
            return json_error(e)
        return jsonify({"success": True, "message": "Marks added successfully!"}), 201

    @app.route("/api/students/<student_id>/subjects/<subject_id>/marks", methods=["PUT"], endpoint="marks_update")
    @login_required
    async def marks_update(student_id: str, subject_id: str):
        data = request.get_json(silent=True) or {}
        try:
            await container.subject_service.update_marks(
                _api(), student_id, subject_id, data.get("marksPercentage"), data.get("examDate")
            )
        except DomainError as e:
            return json_error(e)
        return jsonify({"success": True, "message": "Marks record updated successfully!"})

    @app.route("/api/marks/<mark_id>/subjects/<subject_id>", methods=["DELETE"], endpoint="marks_delete")
    @login_required
    async def marks_delete(mark_id: str, subject_id: str):
        try:
            await container.subject_service.delete_marks(_api(), mark_id, subject_id)
        except DomainError as e:
            return json_error(e)
        return jsonify({"success": True, "message": "Marks record deleted successfully!"})
