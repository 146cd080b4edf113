from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional

from ..api.responses import interpret_attendance_response
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_LOCATION_TIMEOUT_SECONDS, DEFAULT_REQUEST_TIMEOUT_SECONDS
from ..core.enums import AttemptState, FailureKind
from ..core.exceptions import ApiError, LocationError, TransientApiError
from ..geo.model import Center, Coordinate
from .eligibility import EligibilityEvaluator
from .model import AttemptOutcome, AttendanceAttempt, AttendancePolicy, EligibilityResult, SubmissionVerdict
from .repository import AttendanceBackend, LocationProvider

logger = logging.getLogger(__name__)

_BUSY = (AttemptState.CHECKING, AttemptState.ELIGIBLE, AttemptState.SUBMITTING)


class AttendanceSubmission:
    """Lifecycle of marking attendance for one tutor on one calendar day.

    IDLE -> CHECKING -> ELIGIBLE | DENIED, ELIGIBLE -> SUBMITTING -> MARKED | FAILED.
    Only one attempt may be in flight, and once MARKED every further call
    short-circuits. Every operation returns an AttemptOutcome; location and
    network errors are mapped, never raised. Cancellation resets to IDLE and
    propagates.
    """

    def __init__(
        self,
        *,
        tutor_id: str,
        day: date,
        center: Optional[Center],
        policy: AttendancePolicy,
        backend: AttendanceBackend,
        evaluator: Optional[EligibilityEvaluator] = None,
        location_timeout: float = DEFAULT_LOCATION_TIMEOUT_SECONDS,
        submit_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self.tutor_id = tutor_id
        self.day = day
        self.center = center
        self.backend = backend
        self._policy = policy
        self._evaluator = evaluator or EligibilityEvaluator()
        self._location_timeout = float(location_timeout)
        self._submit_timeout = float(submit_timeout)
        self._clock = clock
        self._guard = threading.Lock()

        self.state = AttemptState.IDLE
        self.policy_stale = False
        self.stale_field: Optional[str] = None
        self._last = AttemptOutcome(state=AttemptState.IDLE)

    @property
    def policy(self) -> AttendancePolicy:
        return self._policy

    @property
    def last_outcome(self) -> AttemptOutcome:
        return self._last

    # --- operations ---

    async def mark(self, location_provider: Optional[LocationProvider]) -> AttemptOutcome:
        with self._guard:
            if self.state == AttemptState.MARKED:
                return self._last
            if self.state in _BUSY:
                return replace(self._last, state=self.state, in_flight=True)
            if self._needs_resync():
                return replace(self._last, refused=True, needs_resync=True)
            self._transition(AttemptState.CHECKING)
        return await self._run(location_provider)

    async def retry(self, location_provider: Optional[LocationProvider]) -> AttemptOutcome:
        """Only from DENIED or a transient FAILED."""
        with self._guard:
            if self.state in _BUSY:
                return replace(self._last, state=self.state, in_flight=True)
            retryable = self.state == AttemptState.DENIED or (
                self.state == AttemptState.FAILED and self._last.failure == FailureKind.TRANSIENT
            )
            if not retryable:
                return replace(self._last, refused=True, needs_resync=self._needs_resync())
            self._transition(AttemptState.CHECKING)
        return await self._run(location_provider)

    def resync(self, policy: AttendancePolicy) -> None:
        """Install a fresh policy; a business-rule failure becomes retryable again."""
        with self._guard:
            self._policy = policy
            self.policy_stale = False
            self.stale_field = None
            if self.state == AttemptState.FAILED and self._last.failure == FailureKind.BUSINESS_RULE:
                self._transition(AttemptState.IDLE)
                self._last = AttemptOutcome(state=AttemptState.IDLE)

    def observe_marked(self, message: Optional[str] = None) -> AttemptOutcome:
        """Today's mark is already recorded by the backend."""
        with self._guard:
            if self.state in _BUSY:
                return replace(self._last, state=self.state, in_flight=True)
            self._transition(AttemptState.MARKED)
            self._last = AttemptOutcome(state=AttemptState.MARKED, message=message)
            return self._last

    # --- internals ---

    def _needs_resync(self) -> bool:
        return (
            self.state == AttemptState.FAILED
            and self._last.failure == FailureKind.BUSINESS_RULE
            and self.policy_stale
        )

    def _transition(self, new_state: AttemptState) -> None:
        logger.debug("attendance[%s %s] %s -> %s", self.tutor_id, self.day, self.state.value, new_state.value)
        self.state = new_state

    def _finish(self, outcome: AttemptOutcome) -> AttemptOutcome:
        self._transition(outcome.state)
        self._last = outcome
        return outcome

    def _reset(self) -> None:
        self._transition(AttemptState.IDLE)
        self._last = AttemptOutcome(state=AttemptState.IDLE)

    async def _run(self, location_provider: Optional[LocationProvider]) -> AttemptOutcome:
        try:
            attempt = AttendanceAttempt(
                tutor_id=self.tutor_id,
                center=self.center,
                user_location=None,
                timestamp=self._clock(),
            )
            denial = self._evaluator.precheck(attempt, self._policy)
            if denial is not None:
                return self._deny(denial)

            location = await self._acquire_location(location_provider)
            attempt = replace(attempt, user_location=location)
            result = self._evaluator.evaluate(attempt, self._policy)
            if not result.allowed:
                return self._deny(result)

            self._transition(AttemptState.ELIGIBLE)
            self._transition(AttemptState.SUBMITTING)
            return await self._submit(location, result)
        except asyncio.CancelledError:
            logger.info("attendance[%s %s] attempt cancelled", self.tutor_id, self.day)
            self._reset()
            raise
        except Exception:
            self._reset()
            raise

    def _deny(self, result: EligibilityResult) -> AttemptOutcome:
        logger.info("attendance[%s %s] denied: %s", self.tutor_id, self.day, result.reason.value)
        return self._finish(AttemptOutcome(state=AttemptState.DENIED, eligibility=result))

    async def _acquire_location(self, provider: Optional[LocationProvider]) -> Optional[Coordinate]:
        if provider is None:
            return None
        try:
            return await asyncio.wait_for(provider.get_current_location(), timeout=self._location_timeout)
        except asyncio.TimeoutError:
            logger.warning("attendance[%s %s] location timed out", self.tutor_id, self.day)
        except LocationError as e:
            logger.warning("attendance[%s %s] location failed: %s", self.tutor_id, self.day, e)
        return None

    async def _submit(self, location: Coordinate, eligibility: EligibilityResult) -> AttemptOutcome:
        try:
            payload = await asyncio.wait_for(self.backend.submit_attendance(location), timeout=self._submit_timeout)
        except asyncio.TimeoutError:
            return self._fail_transient("Request timeout - API call took too long", eligibility)
        except TransientApiError as e:
            return self._fail_transient(e.message, eligibility)
        except ApiError as e:
            verdict = interpret_attendance_response(e.payload, ok=False, fallback=e.message)
        else:
            verdict = interpret_attendance_response(payload)
        return self._apply_verdict(verdict, eligibility)

    def _fail_transient(self, message: str, eligibility: EligibilityResult) -> AttemptOutcome:
        logger.warning("attendance[%s %s] submission failed: %s", self.tutor_id, self.day, message)
        return self._finish(
            AttemptOutcome(
                state=AttemptState.FAILED,
                eligibility=eligibility,
                failure=FailureKind.TRANSIENT,
                message=message,
            )
        )

    def _apply_verdict(self, verdict: SubmissionVerdict, eligibility: EligibilityResult) -> AttemptOutcome:
        if verdict.marked:
            logger.info("attendance[%s %s] marked", self.tutor_id, self.day)
            return self._finish(AttemptOutcome(state=AttemptState.MARKED, eligibility=eligibility, message=verdict.message))

        # Backend disagrees with the local policy: the cached flags are stale.
        logger.warning("attendance[%s %s] rejected by backend: %s", self.tutor_id, self.day, verdict.message)
        self.policy_stale = True
        self.stale_field = verdict.stale_field
        return self._finish(
            AttemptOutcome(
                state=AttemptState.FAILED,
                eligibility=eligibility,
                failure=verdict.failure or FailureKind.BUSINESS_RULE,
                message=verdict.message,
                assigned_time=verdict.assigned_time,
            )
        )

