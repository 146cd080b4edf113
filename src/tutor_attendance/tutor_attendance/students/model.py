from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..common.datetime_utils import format_month


@dataclass(frozen=True)
class MonthlyAttendance:
    month: str
    present_days: int
    total_days: int

    @property
    def label(self) -> str:
        return format_month(self.month)


@dataclass(frozen=True)
class Student:
    """A student on the tutor's roster, as returned by the backend."""

    student_id: str
    name: str
    father_name: str
    contact: str
    status: str = "active"
    subjects: list[dict] = field(default_factory=list)
    attendance: list[MonthlyAttendance] = field(default_factory=list)
    raw: dict = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_api(cls, data: dict) -> "Student":
        return cls(
            student_id=str(data.get("_id", "")),
            name=str(data.get("name", "")),
            father_name=str(data.get("fatherName", "")),
            contact=str(data.get("contact", "")),
            status=str(data.get("status") or "active"),
            subjects=list(data.get("subjects") or []),
            attendance=[
                MonthlyAttendance(
                    month=str(a.get("month", "")),
                    present_days=int(a.get("presentDays") or 0),
                    total_days=int(a.get("totalDays") or 0),
                )
                for a in data.get("attendance") or []
            ],
            raw=dict(data),
        )

