from __future__ import annotations

from typing import Any, Dict, Protocol


class SubjectBackend(Protocol):
    async def get_student_subjects(self, student_id: str) -> Any:
        raise NotImplementedError

    async def add_subject_marks(self, student_id: str, subject_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    async def update_subject_marks(self, student_id: str, subject_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    async def delete_subject_marks(self, mark_id: str, subject_id: str) -> Dict[str, Any]:
        raise NotImplementedError
