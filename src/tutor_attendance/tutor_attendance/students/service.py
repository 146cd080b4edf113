from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_text, require_non_empty
from ..core.enums import StudentAttendanceStatus
from ..core.exceptions import ValidationError
from .model import Student
from .repository import StudentBackend

logger = logging.getLogger(__name__)


def _ref_id(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        return value.get("_id")
    return value or None


class StudentService:
    """Roster reads and the edit-student / daily-attendance forms."""

    async def list_students(self, api: StudentBackend, tutor_id: str) -> list[Student]:
        tutor = await api.get_tutor(tutor_id)
        return [Student.from_api(s) for s in (tutor or {}).get("students") or []]

    async def get_student(self, api: StudentBackend, student_id: str) -> Student:
        return Student.from_api(await api.get_student(require_non_empty(student_id, "Student id")))

    def build_update_payload(self, form: dict) -> dict:
        """Validate the edit form and shape it the way the backend expects."""
        try:
            name = require_non_empty(form.get("name"), "Name")
            father_name = require_non_empty(form.get("fatherName"), "Father Name")
            contact = require_non_empty(form.get("contact"), "Contact")
        except ValidationError as e:
            raise ValidationError("Name, Father Name and Contact are required") from e

        is_orphan = bool(form.get("isOrphan"))
        non_school_going = bool(form.get("isNonSchoolGoing"))
        guardian = form.get("guardianInfo") or {}
        school = form.get("schoolInfo") or {}

        payload = {
            "name": name,
            "fatherName": father_name,
            "contact": contact,
            "status": form.get("status") or "active",
            "gender": form.get("gender"),
            "medium": form.get("medium"),
            "aadharNumber": optional_text(form.get("aadharNumber")) or "",
            "isOrphan": is_orphan,
            "isNonSchoolGoing": non_school_going,
            "remarks": optional_text(form.get("remarks")) or "",
            "assignedCenter": _ref_id(form.get("assignedCenter")),
            "assignedTutor": _ref_id(form.get("assignedTutor")),
            "subjects": [_ref_id(s) for s in form.get("subjects") or [] if _ref_id(s)],
        }
        if is_orphan:
            payload["guardianInfo"] = {"name": guardian.get("name") or "", "contact": guardian.get("contact") or ""}
        if not non_school_going:
            payload["schoolInfo"] = {"name": school.get("name") or "", "class": school.get("class") or ""}
        return payload

    async def update_student(self, api: StudentBackend, student_id: str, form: dict) -> Student:
        payload = self.build_update_payload(form)
        updated = await api.update_student(require_non_empty(student_id, "Student id"), payload)
        logger.info("student %s updated", student_id)
        return Student.from_api(updated)

    def build_daily_attendance(self, student_ids: Iterable[str], on: Optional[str | date] = None) -> dict:
        ids = [str(s).strip() for s in student_ids if s and str(s).strip()]
        if not ids:
            raise ValidationError("Pick at least one student")

        if on is None:
            on = date.today()
        elif isinstance(on, str):
            try:
                on = parse_iso_date(on.strip())
            except ValueError as e:
                raise ValidationError("Attendance date must be YYYY-MM-DD") from e

        return {
            "date": on.isoformat(),
            "students": [{"studentId": sid, "status": StudentAttendanceStatus.PRESENT.value} for sid in ids],
        }

    async def mark_daily_attendance(
        self, api: StudentBackend, student_ids: Iterable[str], on: Optional[str | date] = None
    ) -> dict:
        payload = self.build_daily_attendance(student_ids, on)
        result = await api.mark_student_attendance(payload)
        logger.info("daily attendance for %d student(s) on %s", len(payload["students"]), payload["date"])
        return result
