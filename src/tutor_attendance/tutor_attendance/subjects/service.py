from __future__ import annotations

import logging
from typing import Any

from ..common.datetime_utils import to_api_date
from ..common.validators import require_non_empty, require_number_in_range
from ..core.exceptions import ValidationError
from .model import SubjectRecord
from .repository import SubjectBackend

logger = logging.getLogger(__name__)


class SubjectService:
    """Subject marks: list, add, edit, delete."""

    async def list_subjects(self, api: SubjectBackend, student_id: str) -> list[SubjectRecord]:
        data = await api.get_student_subjects(require_non_empty(student_id, "Student id"))
        if isinstance(data, dict):
            data = data.get("subjects") or data.get("data") or []
        return [SubjectRecord.from_api(r) for r in data or []]

    def build_marks_payload(self, marks_percentage: Any, exam_date: Any) -> dict:
        if marks_percentage is None or str(marks_percentage).strip() == "":
            raise ValidationError("Please enter valid marks percentage (0-100)")
        percentage = require_number_in_range(marks_percentage, "marks percentage", 0, 100)
        if not exam_date or not str(exam_date).strip():
            raise ValidationError("Please select exam date")
        return {"marksPercentage": percentage, "examDate": to_api_date(str(exam_date))}

    async def add_marks(
        self, api: SubjectBackend, student_id: str, subject_id: str, marks_percentage: Any, exam_date: Any
    ) -> dict:
        student_id = require_non_empty(student_id, "Student id")
        subject_id = require_non_empty(subject_id, "Subject")
        payload = self.build_marks_payload(marks_percentage, exam_date)
        result = await api.add_subject_marks(student_id, subject_id, payload)
        logger.info("marks added for student %s subject %s", student_id, subject_id)
        return result

    async def update_marks(
        self, api: SubjectBackend, student_id: str, subject_id: str, marks_percentage: Any, exam_date: Any
    ) -> dict:
        student_id = require_non_empty(student_id, "Student id")
        subject_id = require_non_empty(subject_id, "Subject")
        payload = self.build_marks_payload(marks_percentage, exam_date)
        return await api.update_subject_marks(student_id, subject_id, payload)

    async def delete_marks(self, api: SubjectBackend, mark_id: str, subject_id: str) -> dict:
        return await api.delete_subject_marks(
            require_non_empty(mark_id, "Marks record"), require_non_empty(subject_id, "Subject")
        )
