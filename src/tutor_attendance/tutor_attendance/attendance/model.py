from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ..core.constants import DEFAULT_ATTENDANCE_RADIUS_METERS
from ..core.enums import AttemptState, DenialReason, FailureKind
from ..geo.model import Center, Coordinate

_CLOCK = r"(\d{1,2})(?::(\d{2}))?\s*([AaPp][Mm])?"
_WINDOW_TEXT = re.compile(rf"^\s*{_CLOCK}\s*(?:-|–|to)\s*{_CLOCK}\s*$")


def _to_time(hour: str, minute: Optional[str], meridiem: Optional[str]) -> Optional[time]:
    h = int(hour)
    m = int(minute or 0)
    if meridiem:
        if not 1 <= h <= 12:
            return None
        h = h % 12 + (12 if meridiem.lower() == "pm" else 0)
    if h > 23 or m > 59:
        return None
    return time(h, m)


@dataclass(frozen=True)
class AttendanceWindow:
    """Time-of-day range during which marking is permitted (bounds inclusive)."""

    start: time
    end: time
    label: Optional[str] = None

    def contains(self, moment: time) -> bool:
        t = moment.replace(second=0, microsecond=0)
        if self.start <= self.end:
            return self.start <= t <= self.end
        # Wraps past midnight, e.g. 22:00-02:00.
        return t >= self.start or t <= self.end

    def describe(self) -> str:
        return self.label or f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["AttendanceWindow"]:
        """'16:00-18:00', '4 PM to 6 PM', '4:30pm-6pm'. Returns None when unparsable."""
        if not text:
            return None
        m = _WINDOW_TEXT.match(text)
        if not m:
            return None
        start = _to_time(*m.group(1, 2, 3))
        end = _to_time(*m.group(4, 5, 6))
        if start is None or end is None:
            return None
        return cls(start=start, end=end, label=text.strip())


@dataclass(frozen=True)
class AttendancePolicy:
    radius_meters: float = DEFAULT_ATTENDANCE_RADIUS_METERS
    sunday_blocked: bool = True
    admin_enabled: bool = True
    window: Optional[AttendanceWindow] = None


@dataclass(frozen=True)
class AttendanceAttempt:
    """One press of "mark attendance". Never persisted."""

    tutor_id: str
    center: Optional[Center]
    user_location: Optional[Coordinate]
    timestamp: datetime

    @property
    def center_location(self) -> Optional[Coordinate]:
        return self.center.coordinate if self.center else None


@dataclass(frozen=True)
class EligibilityResult:
    allowed: bool
    reason: Optional[DenialReason] = None
    distance_meters: Optional[float] = None
    radius_meters: Optional[float] = None
    window: Optional[AttendanceWindow] = None

    @classmethod
    def allow(cls, *, distance_meters: Optional[float] = None, radius_meters: Optional[float] = None) -> "EligibilityResult":
        return cls(allowed=True, distance_meters=distance_meters, radius_meters=radius_meters)

    @classmethod
    def deny(cls, reason: DenialReason, **details) -> "EligibilityResult":
        return cls(allowed=False, reason=reason, **details)


@dataclass(frozen=True)
class SubmissionVerdict:
    """Backend answer to an attendance submission, reduced to what the state machine needs."""

    marked: bool
    message: str
    failure: Optional[FailureKind] = None
    stale_field: Optional[str] = None
    assigned_time: Optional[str] = None


@dataclass(frozen=True)
class AttemptOutcome:
    """Typed result of every state-machine operation. Nothing here is raised."""

    state: AttemptState
    eligibility: Optional[EligibilityResult] = None
    failure: Optional[FailureKind] = None
    message: Optional[str] = None
    assigned_time: Optional[str] = None
    in_flight: bool = False
    refused: bool = False
    needs_resync: bool = False

    @property
    def retry_suggested(self) -> bool:
        if self.state == AttemptState.DENIED:
            reason = self.eligibility.reason if self.eligibility else None
            return reason not in (DenialReason.ADMIN_DISABLED, DenialReason.SUNDAY_BLOCKED)
        return self.state == AttemptState.FAILED and self.failure == FailureKind.TRANSIENT
