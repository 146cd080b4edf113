from __future__ import annotations

from dataclasses import dataclass

from .rules.admin_rule import AdminEnabledRule
from .rules.base import EligibilityRule
from .rules.calendar_rule import SundayRule, WindowRule
from .rules.geofence_rule import LocationAvailableRule, RadiusRule


@dataclass
class EligibilityRuleFactory:
    """Factory Pattern: build the ordered rule chain.

    Administrative and calendar rules come before geolocation so an
    admin-disabled day is never reported as out of range.
    """

    def default_rules(self) -> list[EligibilityRule]:
        return [
            AdminEnabledRule(),
            SundayRule(),
            WindowRule(),
            LocationAvailableRule(),
            RadiusRule(),
        ]
