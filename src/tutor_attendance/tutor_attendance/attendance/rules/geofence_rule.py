from __future__ import annotations

from typing import Optional

from ...core.enums import DenialReason
from ...geo.distance import haversine_distance
from ..model import AttendanceAttempt, AttendancePolicy, EligibilityResult
from .base import EligibilityRule


class LocationAvailableRule(EligibilityRule):
    needs_location = True

    def check(self, attempt: AttendanceAttempt, policy: AttendancePolicy) -> Optional[EligibilityResult]:
        if attempt.user_location is None or attempt.center_location is None:
            return EligibilityResult.deny(DenialReason.LOCATION_UNAVAILABLE)
        return None


class RadiusRule(EligibilityRule):
    """Inclusive radius around the center. Expects LocationAvailableRule to run first."""

    needs_location = True

    def check(self, attempt: AttendanceAttempt, policy: AttendancePolicy) -> Optional[EligibilityResult]:
        distance = haversine_distance(attempt.user_location, attempt.center_location)
        if distance <= policy.radius_meters:
            return None
        return EligibilityResult.deny(
            DenialReason.OUT_OF_RANGE,
            distance_meters=distance,
            radius_meters=policy.radius_meters,
        )
