from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Optional

import pytest

from src.tutor_attendance.tutor_attendance.attendance.eligibility import EligibilityEvaluator
from src.tutor_attendance.tutor_attendance.attendance.location import ReportedLocationProvider
from src.tutor_attendance.tutor_attendance.attendance.model import AttendancePolicy
from src.tutor_attendance.tutor_attendance.attendance.state_machine import AttendanceSubmission
from src.tutor_attendance.tutor_attendance.core.enums import AttemptState, DenialReason, FailureKind
from src.tutor_attendance.tutor_attendance.core.exceptions import ApiError, TransientApiError
from src.tutor_attendance.tutor_attendance.geo.model import Center, Coordinate

CENTER = Center(center_id="c1", name="Main", coordinate=Coordinate(28.6139, 77.2090))
HERE = ReportedLocationProvider(Coordinate(28.6139, 77.2090))
FAR = ReportedLocationProvider(Coordinate(28.61412, 77.2090))


class FakeBackend:
    def __init__(self, response: Optional[dict] = None, error: Optional[Exception] = None, delay: float = 0.0):
        self.response = response if response is not None else {"message": "Attendance submitted successfully"}
        self.error = error
        self.delay = delay
        self.submitted: list[Coordinate] = []
        self.release: Optional[asyncio.Event] = None

    async def submit_attendance(self, coordinate: Coordinate) -> dict:
        self.submitted.append(coordinate)
        if self.release is not None:
            await self.release.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.response

    async def get_button_status(self) -> dict:
        return {"status": True}

    async def get_recent_attendance(self) -> list:
        return []


class CountingEvaluator(EligibilityEvaluator):
    def __init__(self):
        super().__init__()
        self.calls = 0

    def evaluate(self, attempt, policy):
        self.calls += 1
        return super().evaluate(attempt, policy)

    def precheck(self, attempt, policy):
        self.calls += 1
        return super().precheck(attempt, policy)


class SlowLocation:
    def __init__(self, delay: float = 10.0):
        self.delay = delay

    async def get_current_location(self) -> Coordinate:
        await asyncio.sleep(self.delay)
        return Coordinate(28.6139, 77.2090)


def _machine(backend, now: datetime, policy: Optional[AttendancePolicy] = None, **kwargs) -> AttendanceSubmission:
    return AttendanceSubmission(
        tutor_id="t1",
        day=now.date(),
        center=CENTER,
        policy=policy or AttendancePolicy(radius_meters=20),
        backend=backend,
        clock=lambda: now,
        **kwargs,
    )


def test_mark_at_center_submits_and_marks(fixed_now):
    backend = FakeBackend()
    machine = _machine(backend, fixed_now)

    outcome = asyncio.run(machine.mark(HERE))

    assert outcome.state == AttemptState.MARKED
    assert machine.state == AttemptState.MARKED
    assert backend.submitted == [Coordinate(28.6139, 77.2090)]
    assert outcome.message == "Attendance submitted successfully"


def test_out_of_range_is_denied_without_submission(fixed_now):
    backend = FakeBackend()
    machine = _machine(backend, fixed_now)

    outcome = asyncio.run(machine.mark(FAR))

    assert outcome.state == AttemptState.DENIED
    assert outcome.eligibility.reason == DenialReason.OUT_OF_RANGE
    assert outcome.retry_suggested is True
    assert backend.submitted == []


def test_sunday_denial_does_not_suggest_retry(sunday_now):
    machine = _machine(FakeBackend(), sunday_now)

    outcome = asyncio.run(machine.mark(HERE))

    assert outcome.eligibility.reason == DenialReason.SUNDAY_BLOCKED
    assert outcome.retry_suggested is False


def test_admin_disabled_skips_location_acquisition(fixed_now):
    machine = _machine(FakeBackend(), fixed_now, AttendancePolicy(admin_enabled=False), location_timeout=0.01)

    # SlowLocation would time out if it were asked.
    outcome = asyncio.run(machine.mark(SlowLocation()))

    assert outcome.eligibility.reason == DenialReason.ADMIN_DISABLED


def test_double_mark_while_submitting_is_a_noop(fixed_now):
    backend = FakeBackend()
    machine = _machine(backend, fixed_now)

    async def scenario():
        backend.release = asyncio.Event()
        first = asyncio.create_task(machine.mark(HERE))
        for _ in range(100):
            if machine.state == AttemptState.SUBMITTING:
                break
            await asyncio.sleep(0)
        second = await machine.mark(HERE)
        backend.release.set()
        return await first, second

    first, second = asyncio.run(scenario())

    assert second.in_flight is True
    assert second.state == AttemptState.SUBMITTING
    assert first.state == AttemptState.MARKED
    assert len(backend.submitted) == 1


def test_marked_short_circuits_without_evaluator(fixed_now):
    backend = FakeBackend()
    evaluator = CountingEvaluator()
    machine = _machine(backend, fixed_now, evaluator=evaluator)

    asyncio.run(machine.mark(HERE))
    calls = evaluator.calls

    again = asyncio.run(machine.mark(FAR))

    assert again.state == AttemptState.MARKED
    assert evaluator.calls == calls
    assert len(backend.submitted) == 1


def test_observe_marked_short_circuits(fixed_now):
    backend = FakeBackend()
    evaluator = CountingEvaluator()
    machine = _machine(backend, fixed_now, evaluator=evaluator)

    machine.observe_marked()
    outcome = asyncio.run(machine.mark(HERE))

    assert outcome.state == AttemptState.MARKED
    assert evaluator.calls == 0
    assert backend.submitted == []


def test_backend_admin_rejection_is_business_rule_failure(fixed_now):
    backend = FakeBackend(response={"message": "Attendance disabled by Admin", "attendance": None})
    machine = _machine(backend, fixed_now)

    outcome = asyncio.run(machine.mark(HERE))

    assert outcome.state == AttemptState.FAILED
    assert outcome.failure == FailureKind.BUSINESS_RULE
    assert outcome.message == "Attendance disabled by Admin"
    assert outcome.retry_suggested is False
    assert machine.policy_stale is True
    assert machine.stale_field == "admin_enabled"


def test_business_rule_failure_requires_resync(fixed_now):
    backend = FakeBackend(response={"message": "Attendance disabled by Admin"})
    machine = _machine(backend, fixed_now)
    asyncio.run(machine.mark(HERE))

    refused = asyncio.run(machine.mark(HERE))
    retried = asyncio.run(machine.retry(HERE))

    assert refused.refused and refused.needs_resync
    assert retried.refused
    assert len(backend.submitted) == 1

    backend.response = {"message": "Attendance submitted successfully"}
    machine.resync(AttendancePolicy(radius_meters=20))
    assert machine.state == AttemptState.IDLE
    assert asyncio.run(machine.mark(HERE)).state == AttemptState.MARKED


def test_outside_window_rejection_keeps_assigned_time(fixed_now):
    backend = FakeBackend(
        response={"message": "Attendance only allowed at respective time", "assignedTime": "4 PM - 6 PM"}
    )
    machine = _machine(backend, fixed_now)

    outcome = asyncio.run(machine.mark(HERE))

    assert outcome.failure == FailureKind.BUSINESS_RULE
    assert outcome.assigned_time == "4 PM - 6 PM"
    assert machine.stale_field == "window"


def test_transient_failure_is_retryable(fixed_now):
    backend = FakeBackend(error=TransientApiError("Request timeout - API call took too long"))
    machine = _machine(backend, fixed_now)

    failed = asyncio.run(machine.mark(HERE))
    assert failed.failure == FailureKind.TRANSIENT
    assert failed.retry_suggested is True

    backend.error = None
    retried = asyncio.run(machine.retry(HERE))
    assert retried.state == AttemptState.MARKED
    assert len(backend.submitted) == 2


def test_http_4xx_maps_to_business_rule(fixed_now):
    error = ApiError("Forbidden", status=403, payload={"message": "Forbidden"})
    machine = _machine(FakeBackend(error=error), fixed_now)

    outcome = asyncio.run(machine.mark(HERE))

    assert outcome.failure == FailureKind.BUSINESS_RULE
    assert outcome.message == "Forbidden"


def test_submit_timeout_is_transient(fixed_now):
    machine = _machine(FakeBackend(delay=1.0), fixed_now, submit_timeout=0.01)

    outcome = asyncio.run(machine.mark(HERE))

    assert outcome.state == AttemptState.FAILED
    assert outcome.failure == FailureKind.TRANSIENT


def test_location_timeout_is_location_unavailable(fixed_now):
    machine = _machine(FakeBackend(), fixed_now, location_timeout=0.01)

    outcome = asyncio.run(machine.mark(SlowLocation(delay=1.0)))

    assert outcome.state == AttemptState.DENIED
    assert outcome.eligibility.reason == DenialReason.LOCATION_UNAVAILABLE


def test_permission_denied_is_location_unavailable(fixed_now):
    machine = _machine(FakeBackend(), fixed_now)

    outcome = asyncio.run(machine.mark(ReportedLocationProvider(None, permission_denied=True)))

    assert outcome.eligibility.reason == DenialReason.LOCATION_UNAVAILABLE


def test_retry_not_allowed_from_idle_or_marked(fixed_now):
    backend = FakeBackend()
    machine = _machine(backend, fixed_now)

    assert asyncio.run(machine.retry(HERE)).refused is True
    asyncio.run(machine.mark(HERE))
    assert asyncio.run(machine.retry(HERE)).refused is True
    assert len(backend.submitted) == 1


def test_retry_after_denial_reacquires_location(fixed_now):
    backend = FakeBackend()
    machine = _machine(backend, fixed_now)

    assert asyncio.run(machine.mark(FAR)).state == AttemptState.DENIED
    assert asyncio.run(machine.retry(HERE)).state == AttemptState.MARKED


def test_cancel_during_location_returns_to_idle(fixed_now):
    backend = FakeBackend()
    machine = _machine(backend, fixed_now, location_timeout=30)

    async def scenario():
        task = asyncio.create_task(machine.mark(SlowLocation(delay=30)))
        for _ in range(10):
            await asyncio.sleep(0)
        assert machine.state == AttemptState.CHECKING
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert machine.state == AttemptState.IDLE
    assert backend.submitted == []


def test_cancel_during_submission_returns_to_idle(fixed_now):
    backend = FakeBackend(delay=30)
    machine = _machine(backend, fixed_now, submit_timeout=60)

    async def scenario():
        task = asyncio.create_task(machine.mark(HERE))
        for _ in range(100):
            if machine.state == AttemptState.SUBMITTING:
                break
            await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert machine.state == AttemptState.IDLE
