from __future__ import annotations

from typing import Any, Optional

from ..attendance.model import SubmissionVerdict
from ..core.enums import FailureKind

SUCCESS_MESSAGE = "Attendance submitted successfully"
ADMIN_DISABLED_MESSAGE = "Attendance disabled by Admin"
OUTSIDE_WINDOW_MESSAGE = "Attendance only allowed at respective time"

# Structured codes are preferred when the backend sends them.
_REASON_FIELDS = {
    "ADMIN_DISABLED": "admin_enabled",
    "OUTSIDE_WINDOW": "window",
}


def interpret_attendance_response(payload: Any, *, ok: bool = True, fallback: str = "") -> SubmissionVerdict:
    """Reduce a backend answer to marked / business-rule failure.

    Any 2xx answer that is not a known denial counts as marked.
    """
    data = payload if isinstance(payload, dict) else {}
    message = str(data.get("message") or fallback or "")
    code = str(data.get("reason") or data.get("code") or "").upper()
    assigned_time: Optional[str] = data.get("assignedTime")

    stale_field = _REASON_FIELDS.get(code)
    if stale_field is None:
        if message == ADMIN_DISABLED_MESSAGE:
            stale_field = "admin_enabled"
        elif message == OUTSIDE_WINDOW_MESSAGE:
            stale_field = "window"

    if stale_field is not None:
        return SubmissionVerdict(
            marked=False,
            message=message,
            failure=FailureKind.BUSINESS_RULE,
            stale_field=stale_field,
            assigned_time=str(assigned_time) if assigned_time else None,
        )

    if ok:
        return SubmissionVerdict(marked=True, message=message or SUCCESS_MESSAGE)

    return SubmissionVerdict(
        marked=False,
        message=message or "Failed to mark attendance",
        failure=FailureKind.BUSINESS_RULE,
    )
