from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .api.client import TuitionApiClient
from .attendance.eligibility import EligibilityEvaluator
from .attendance.model import AttendancePolicy, AttendanceWindow
from .attendance.service import AttendanceService
from .auth.service import AuthService
from .core.constants import (
    DEFAULT_APP_VERSION,
    DEFAULT_ATTENDANCE_RADIUS_METERS,
    DEFAULT_LOCATION_TIMEOUT_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from .notices.service import NoticeService
from .students.service import StudentService
from .subjects.service import SubjectService


@dataclass(frozen=True)
class Container:
    api: Any

    auth_service: AuthService
    attendance_service: AttendanceService
    student_service: StudentService
    subject_service: SubjectService
    notice_service: NoticeService


def build_policy(settings: Any) -> AttendancePolicy:
    window_text: Optional[str] = getattr(settings, "ATTENDANCE_WINDOW", None)
    return AttendancePolicy(
        radius_meters=float(getattr(settings, "ATTENDANCE_RADIUS_METERS", DEFAULT_ATTENDANCE_RADIUS_METERS)),
        sunday_blocked=bool(getattr(settings, "SUNDAY_BLOCKED", True)),
        admin_enabled=True,
        window=AttendanceWindow.parse(window_text),
    )


def build_container(*, settings: Any, api: Any = None) -> Container:
    timeout = float(getattr(settings, "REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS))
    if api is None:
        api = TuitionApiClient(str(getattr(settings, "API_BASE_URL")), timeout=timeout)

    attendance_service = AttendanceService(
        base_policy=build_policy(settings),
        evaluator=EligibilityEvaluator(),
        location_timeout=float(getattr(settings, "LOCATION_TIMEOUT_SECONDS", DEFAULT_LOCATION_TIMEOUT_SECONDS)),
        submit_timeout=timeout,
    )

    return Container(
        api=api,
        auth_service=AuthService(api),
        attendance_service=attendance_service,
        student_service=StudentService(),
        subject_service=SubjectService(),
        notice_service=NoticeService(str(getattr(settings, "APP_VERSION", DEFAULT_APP_VERSION))),
    )
