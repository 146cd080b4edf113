from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..model import AttendanceAttempt, AttendancePolicy, EligibilityResult


class EligibilityRule(ABC):
    """Strategy Pattern: one policy check; returns a denial or None to pass."""

    needs_location: bool = False

    @abstractmethod
    def check(self, attempt: AttendanceAttempt, policy: AttendancePolicy) -> Optional[EligibilityResult]:
        raise NotImplementedError
