from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_LOCATION_TIMEOUT_SECONDS, DEFAULT_REQUEST_TIMEOUT_SECONDS
from ..core.enums import AttemptState, DenialReason
from ..core.exceptions import ApiError
from ..geo.model import Center
from .eligibility import EligibilityEvaluator
from .model import AttemptOutcome, AttendancePolicy, AttendanceWindow
from .repository import AttendanceBackend, LocationProvider
from .state_machine import AttendanceSubmission

logger = logging.getLogger(__name__)

_NOT_MARKABLE = (AttemptState.MARKED, AttemptState.CHECKING, AttemptState.ELIGIBLE, AttemptState.SUBMITTING)


@dataclass(frozen=True)
class TutorContext:
    tutor_id: str
    center: Optional[Center]


class AttendanceService:
    """Keeps one submission state machine per tutor and day plus the cached policy."""

    def __init__(
        self,
        *,
        base_policy: Optional[AttendancePolicy] = None,
        evaluator: Optional[EligibilityEvaluator] = None,
        location_timeout: float = DEFAULT_LOCATION_TIMEOUT_SECONDS,
        submit_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._base_policy = base_policy or AttendancePolicy()
        self._evaluator = evaluator or EligibilityEvaluator()
        self._location_timeout = float(location_timeout)
        self._submit_timeout = float(submit_timeout)
        self._clock = clock
        self._policies: dict[str, AttendancePolicy] = {}
        self._machines: dict[tuple[str, date], AttendanceSubmission] = {}
        self._lock = threading.Lock()

    def policy_for(self, tutor_id: str) -> AttendancePolicy:
        return self._policies.get(tutor_id, self._base_policy)

    def submission_for(self, tutor: TutorContext, backend: AttendanceBackend) -> AttendanceSubmission:
        today = self._clock().date()
        key = (tutor.tutor_id, today)
        with self._lock:
            machine = self._machines.get(key)
            if machine is None:
                # Yesterday's machine is no longer reachable.
                for old in [k for k in self._machines if k[0] == tutor.tutor_id]:
                    del self._machines[old]
                machine = AttendanceSubmission(
                    tutor_id=tutor.tutor_id,
                    day=today,
                    center=tutor.center,
                    policy=self.policy_for(tutor.tutor_id),
                    backend=backend,
                    evaluator=self._evaluator,
                    location_timeout=self._location_timeout,
                    submit_timeout=self._submit_timeout,
                    clock=self._clock,
                )
                self._machines[key] = machine
            machine.backend = backend
            return machine

    async def refresh_policy(
        self, tutor_id: str, backend: AttendanceBackend, *, assigned_time: Optional[str] = None
    ) -> AttendancePolicy:
        """Pull the admin switch from the button-status endpoint."""
        current = self.policy_for(tutor_id)
        data = await backend.get_button_status()
        status = data.get("status") if isinstance(data, dict) else None
        # Anything but a real boolean leaves the cached switch alone.
        admin_enabled = status if isinstance(status, bool) else current.admin_enabled

        window = current.window
        if assigned_time:
            window = AttendanceWindow.parse(assigned_time) or window

        policy = replace(current, admin_enabled=admin_enabled, window=window)
        self._policies[tutor_id] = policy
        logger.info("policy for tutor %s: admin_enabled=%s window=%s", tutor_id, admin_enabled, window)
        return policy

    async def resync(self, tutor: TutorContext, backend: AttendanceBackend) -> AttendancePolicy:
        machine = self.submission_for(tutor, backend)
        policy = await self.refresh_policy(tutor.tutor_id, backend, assigned_time=machine.last_outcome.assigned_time)
        machine.resync(policy)
        return policy

    async def sync_today(self, tutor: TutorContext, backend: AttendanceBackend) -> AttendanceSubmission:
        machine = self.submission_for(tutor, backend)
        if machine.state == AttemptState.MARKED:
            return machine

        try:
            recent = await backend.get_recent_attendance()
        except ApiError as e:
            logger.warning("Failed to check recent attendance: %s", e)
        else:
            if recent:
                machine.observe_marked("Attendance Marked Successfully")
                return machine

        try:
            machine.resync(await self.refresh_policy(tutor.tutor_id, backend))
        except ApiError as e:
            logger.warning("Failed to refresh button status: %s", e)
        return machine

    async def today_status(self, tutor: TutorContext, backend: AttendanceBackend) -> dict:
        machine = await self.sync_today(tutor, backend)
        return self._to_ui(machine.last_outcome, machine.policy)

    async def mark_attendance(
        self, tutor: TutorContext, backend: AttendanceBackend, location: Optional[LocationProvider]
    ) -> dict:
        machine = self.submission_for(tutor, backend)
        if machine.policy_stale:
            try:
                await self.resync(tutor, backend)
            except ApiError as e:
                # mark() below refuses with needs_resync while the policy stays stale.
                logger.warning("Policy resync failed: %s", e)
        outcome = await machine.mark(location)
        return self._to_ui(outcome, machine.policy)

    async def retry_attendance(
        self, tutor: TutorContext, backend: AttendanceBackend, location: Optional[LocationProvider]
    ) -> dict:
        machine = self.submission_for(tutor, backend)
        outcome = await machine.retry(location)
        return self._to_ui(outcome, machine.policy)

    def render_message(self, outcome: AttemptOutcome, policy: AttendancePolicy) -> str:
        if outcome.in_flight:
            return "Attendance is already being submitted"

        if outcome.state == AttemptState.MARKED:
            return outcome.message or "Attendance marked successfully"

        if outcome.state == AttemptState.DENIED and outcome.eligibility:
            result = outcome.eligibility
            if result.reason == DenialReason.ADMIN_DISABLED:
                return "Attendance has been disabled by the administrator"
            if result.reason == DenialReason.SUNDAY_BLOCKED:
                return "Sunday attendance is disabled"
            if result.reason == DenialReason.OUTSIDE_WINDOW and result.window:
                return f"Attendance can only be marked during {result.window.describe()}."
            if result.reason == DenialReason.OUT_OF_RANGE:
                radius = result.radius_meters if result.radius_meters is not None else policy.radius_meters
                return (
                    f"You are {round(result.distance_meters or 0)}m away from the center. "
                    f"You need to be within {radius:g}m to mark attendance."
                )
            return "Unable to get your current location. Please enable location services and try again."

        if outcome.state == AttemptState.FAILED:
            # Backend text is shown as-is.
            return outcome.message or "Failed to mark attendance"

        return ""

    def _to_ui(self, outcome: AttemptOutcome, policy: AttendancePolicy) -> dict:
        result = outcome.eligibility
        distance = result.distance_meters if result else None
        window = result.window if result and result.window else policy.window

        label = {
            AttemptState.MARKED: "Attendance Marked Successfully",
            AttemptState.CHECKING: "Checking location...",
            AttemptState.ELIGIBLE: "Submitting...",
            AttemptState.SUBMITTING: "Submitting...",
        }.get(outcome.state, "Mark Attendance")
        if not policy.admin_enabled and outcome.state != AttemptState.MARKED:
            label = "Attendance Disabled by Admin"

        return {
            "state": outcome.state.value,
            "reason": result.reason.value if result and result.reason else None,
            "failure": outcome.failure.value if outcome.failure else None,
            "message": self.render_message(outcome, policy),
            "label": label,
            "distance_meters": round(distance) if distance is not None else None,
            "radius_meters": policy.radius_meters,
            "window": window.describe() if window else None,
            "assigned_time": outcome.assigned_time,
            "in_flight": outcome.in_flight,
            "retry_suggested": outcome.retry_suggested,
            "needs_resync": outcome.needs_resync,
            "can_mark": policy.admin_enabled and outcome.state not in _NOT_MARKABLE,
        }
