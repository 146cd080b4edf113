from __future__ import annotations

from typing import Optional

from ...core.enums import DenialReason
from ..model import AttendanceAttempt, AttendancePolicy, EligibilityResult
from .base import EligibilityRule

SUNDAY = 6


class SundayRule(EligibilityRule):
    def check(self, attempt: AttendanceAttempt, policy: AttendancePolicy) -> Optional[EligibilityResult]:
        if policy.sunday_blocked and attempt.timestamp.weekday() == SUNDAY:
            return EligibilityResult.deny(DenialReason.SUNDAY_BLOCKED)
        return None


class WindowRule(EligibilityRule):
    """Only when the backend assigned a time window."""

    def check(self, attempt: AttendanceAttempt, policy: AttendancePolicy) -> Optional[EligibilityResult]:
        window = policy.window
        if window is not None and not window.contains(attempt.timestamp.time()):
            return EligibilityResult.deny(DenialReason.OUTSIDE_WINDOW, window=window)
        return None
