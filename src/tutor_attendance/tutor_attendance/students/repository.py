from __future__ import annotations

from typing import Any, Dict, Protocol


class StudentBackend(Protocol):
    async def get_tutor(self, tutor_id: str) -> Dict[str, Any]:
        raise NotImplementedError

    async def get_student(self, student_id: str) -> Dict[str, Any]:
        raise NotImplementedError

    async def update_student(self, student_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    async def mark_student_attendance(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError
