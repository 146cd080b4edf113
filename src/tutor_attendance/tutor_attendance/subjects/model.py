from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..common.datetime_utils import to_display_date


@dataclass(frozen=True)
class MarksEntry:
    mark_id: Optional[str]
    marks_percentage: float
    exam_date: str

    @property
    def display_date(self) -> str:
        return to_display_date(self.exam_date)


@dataclass(frozen=True)
class SubjectRecord:
    """One subject a student studies, with its marks history."""

    record_id: str
    subject_id: str
    subject_name: str
    marks: list[MarksEntry] = field(default_factory=list)

    @property
    def latest(self) -> Optional[MarksEntry]:
        if not self.marks:
            return None
        return max(self.marks, key=lambda m: m.exam_date)

    @classmethod
    def from_api(cls, data: dict) -> "SubjectRecord":
        subject = data.get("subject") or {}
        if not isinstance(subject, dict):
            subject = {"_id": subject}
        return cls(
            record_id=str(data.get("_id", "")),
            subject_id=str(subject.get("_id", "")),
            subject_name=str(subject.get("name", "")),
            marks=[
                MarksEntry(
                    mark_id=m.get("_id"),
                    marks_percentage=float(m.get("marksPercentage") or 0),
                    exam_date=str(m.get("examDate") or ""),
                )
                for m in data.get("marks") or []
            ],
        )
