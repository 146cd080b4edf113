from __future__ import annotations

from typing import Optional

from ...core.enums import DenialReason
from ..model import AttendanceAttempt, AttendancePolicy, EligibilityResult
from .base import EligibilityRule


class AdminEnabledRule(EligibilityRule):
    """Administrator switched attendance off."""

    def check(self, attempt: AttendanceAttempt, policy: AttendancePolicy) -> Optional[EligibilityResult]:
        if not policy.admin_enabled:
            return EligibilityResult.deny(DenialReason.ADMIN_DISABLED)
        return None
