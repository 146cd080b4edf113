from __future__ import annotations

from enum import Enum


class DenialReason(str, Enum):
    """Why an attendance attempt was refused before reaching the backend."""

    ADMIN_DISABLED = "ADMIN_DISABLED"
    SUNDAY_BLOCKED = "SUNDAY_BLOCKED"
    OUTSIDE_WINDOW = "OUTSIDE_WINDOW"
    LOCATION_UNAVAILABLE = "LOCATION_UNAVAILABLE"
    OUT_OF_RANGE = "OUT_OF_RANGE"


class AttemptState(str, Enum):
    """Lifecycle of one tutor's attendance marking for a day."""

    IDLE = "IDLE"
    CHECKING = "CHECKING"
    ELIGIBLE = "ELIGIBLE"
    DENIED = "DENIED"
    SUBMITTING = "SUBMITTING"
    MARKED = "MARKED"
    FAILED = "FAILED"


class FailureKind(str, Enum):
    TRANSIENT = "TRANSIENT"
    BUSINESS_RULE = "BUSINESS_RULE"


class StudentAttendanceStatus(str, Enum):
    PRESENT = "Present"
