from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..geo.distance import haversine_distance
from .factory import EligibilityRuleFactory
from .model import AttendanceAttempt, AttendancePolicy, EligibilityResult
from .rules.base import EligibilityRule


class EligibilityEvaluator:
    """Pure allow/deny decision. First failing rule wins."""

    def __init__(self, rules: Optional[Sequence[EligibilityRule]] = None):
        self._rules = list(rules) if rules is not None else EligibilityRuleFactory().default_rules()

    def evaluate(self, attempt: AttendanceAttempt, policy: AttendancePolicy) -> EligibilityResult:
        denial = self._first_denial(self._rules, attempt, policy)
        if denial:
            return denial
        distance = None
        if attempt.user_location is not None and attempt.center_location is not None:
            distance = haversine_distance(attempt.user_location, attempt.center_location)
        return EligibilityResult.allow(distance_meters=distance, radius_meters=policy.radius_meters)

    def precheck(self, attempt: AttendanceAttempt, policy: AttendancePolicy) -> Optional[EligibilityResult]:
        """Run only the rules that do not need a location fix."""
        return self._first_denial((r for r in self._rules if not r.needs_location), attempt, policy)

    @staticmethod
    def _first_denial(
        rules: Iterable[EligibilityRule], attempt: AttendanceAttempt, policy: AttendancePolicy
    ) -> Optional[EligibilityResult]:
        for rule in rules:
            result = rule.check(attempt, policy)
            if result is not None:
                return result
        return None
