from __future__ import annotations

from dataclasses import replace

import pytest

import config.testing
from src.tutor_attendance.tutor_attendance.attendance.model import AttendancePolicy
from src.tutor_attendance.tutor_attendance.attendance.service import AttendanceService
from src.tutor_attendance.tutor_attendance.container import build_container
from src.tutor_attendance.tutor_attendance.core.exceptions import ApiError
from src.tutor_attendance.tutor_attendance.main import create_app

CENTER = {"_id": "c1", "name": "Main", "location": "Old City", "coordinates": [28.6139, 77.209]}


class FakeApi:
    """Stands in for TuitionApiClient; every authorized() call returns the same object."""

    def __init__(self):
        self.tokens: list[str] = []
        self.submitted = []
        self.marks = []
        self.button_status = {"status": True}

    def authorized(self, token):
        self.tokens.append(token)
        return self

    async def login(self, phone, password):
        if password != "secret":
            raise ApiError("Invalid credentials", status=401, payload={"message": "Invalid credentials"})
        return {"_id": "t1", "name": "Tutor", "phone": phone, "token": "jwt", "assignedCenter": CENTER}

    async def submit_attendance(self, coordinate):
        self.submitted.append(coordinate)
        return {"message": "Attendance submitted successfully"}

    async def get_button_status(self):
        return self.button_status

    async def get_recent_attendance(self):
        return []

    async def get_tutor(self, tutor_id):
        return {"_id": tutor_id, "students": [{"_id": "s1", "name": "Ayaan", "fatherName": "Imran", "contact": "1"}]}

    async def get_student(self, student_id):
        return {"_id": student_id, "name": "Ayaan", "fatherName": "Imran", "contact": "1"}

    async def update_student(self, student_id, payload):
        return {"_id": student_id, **payload}

    async def mark_student_attendance(self, payload):
        return {"message": "ok"}

    async def get_student_subjects(self, student_id):
        return [{"_id": "r1", "subject": {"_id": "m1", "name": "Maths"}, "marks": []}]

    async def add_subject_marks(self, student_id, subject_id, payload):
        self.marks.append(payload)
        return {"message": "ok"}

    async def update_subject_marks(self, student_id, subject_id, payload):
        self.marks.append(payload)
        return {"message": "ok"}

    async def delete_subject_marks(self, mark_id, subject_id):
        return {"message": "ok"}

    async def get_announcements(self):
        return [
            {"_id": "n1", "body": "old", "createdAt": "2026-01-01T00:00:00Z"},
            {"_id": "n2", "body": "new", "createdAt": "2026-02-01T00:00:00Z"},
        ]

    async def check_version(self, app_version):
        return {"updateRequired": True, "currentVersion": "3.1.0", "message": "Please update"}


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def client(monkeypatch, api, fixed_now):
    monkeypatch.setenv("APP_ENV", "testing")
    container = build_container(settings=config.testing, api=api)
    container = replace(
        container,
        attendance_service=AttendanceService(
            base_policy=AttendancePolicy(radius_meters=20), clock=lambda: fixed_now, location_timeout=1
        ),
    )
    app = create_app(container)
    return app.test_client()


def _login(client):
    resp = client.post("/api/login", json={"phone": "9999999999", "password": "secret"})
    assert resp.status_code == 200
    return resp


def test_attendance_requires_login(client):
    resp = client.get("/api/attendance/today")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_login_hides_token(client):
    data = _login(client).get_json()
    assert data["tutor"]["tutor_id"] == "t1"
    assert "token" not in data["tutor"]


def test_login_validation_and_rejection(client):
    assert client.post("/api/login", json={"phone": "", "password": "x"}).status_code == 400
    resp = client.post("/api/login", json={"phone": "9999999999", "password": "wrong"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid credentials"


def test_today_then_mark_at_center(client, api):
    _login(client)

    today = client.get("/api/attendance/today").get_json()
    assert today["state"] == "IDLE"
    assert today["can_mark"] is True

    resp = client.post("/api/attendance/mark", json={"lat": 28.6139, "lng": 77.209})
    data = resp.get_json()

    assert resp.status_code == 200
    assert data["success"] is True
    assert data["state"] == "MARKED"
    assert len(api.submitted) == 1
    assert api.tokens and set(api.tokens) == {"jwt"}

    again = client.post("/api/attendance/mark", json={"lat": 28.6139, "lng": 77.209}).get_json()
    assert again["state"] == "MARKED"
    assert len(api.submitted) == 1


def test_mark_without_fix_is_location_unavailable(client, api):
    _login(client)

    data = client.post("/api/attendance/mark", json={}).get_json()

    assert data["success"] is False
    assert data["reason"] == "LOCATION_UNAVAILABLE"
    assert api.submitted == []


def test_mark_with_permission_denied(client):
    _login(client)

    data = client.post("/api/attendance/mark", json={"permissionDenied": True}).get_json()

    assert data["reason"] == "LOCATION_UNAVAILABLE"


def test_mark_rejects_invalid_coordinates(client):
    _login(client)

    resp = client.post("/api/attendance/mark", json={"lat": 200, "lng": 77.209})

    assert resp.status_code == 400


def test_retry_from_denied(client, api):
    _login(client)

    far = client.post("/api/attendance/mark", json={"lat": 28.61412, "lng": 77.209}).get_json()
    assert far["reason"] == "OUT_OF_RANGE"

    retried = client.post("/api/attendance/retry", json={"lat": 28.6139, "lng": 77.209}).get_json()
    assert retried["state"] == "MARKED"


def test_logout_clears_session(client):
    _login(client)
    client.post("/api/logout")
    assert client.get("/api/attendance/today").status_code == 401


def test_students_endpoints(client):
    _login(client)

    listing = client.get("/api/students").get_json()
    assert listing["students"][0]["student_id"] == "s1"

    bad = client.put("/api/students/s1", json={"name": "A"})
    assert bad.status_code == 400
    assert bad.get_json()["message"] == "Name, Father Name and Contact are required"

    ok = client.put("/api/students/s1", json={"name": "A", "fatherName": "B", "contact": "1"})
    assert ok.get_json()["student"]["name"] == "A"

    marked = client.post("/api/students/attendance", json={"studentIds": ["s1"], "date": "2026-02-02"})
    assert marked.status_code == 200


def test_marks_endpoints(client, api):
    _login(client)

    subjects = client.get("/api/students/s1/subjects").get_json()
    assert subjects["subjects"][0]["subject_name"] == "Maths"

    added = client.post("/api/students/s1/subjects/m1/marks", json={"marksPercentage": 90, "examDate": "15-01-26"})
    assert added.status_code == 201
    assert api.marks == [{"marksPercentage": 90.0, "examDate": "2026-01-15"}]

    bad = client.put("/api/students/s1/subjects/m1/marks", json={"marksPercentage": 150, "examDate": "15-01-26"})
    assert bad.status_code == 400

    impossible = client.post("/api/students/s1/subjects/m1/marks", json={"marksPercentage": 80, "examDate": "2026-13-45"})
    assert impossible.status_code == 400

    assert client.delete("/api/marks/k1/subjects/m1").status_code == 200


def test_version_and_announcements(client):
    version = client.get("/api/version").get_json()
    assert version["update_required"] is True
    assert version["current_version"] == "3.1.0"

    assert client.get("/api/announcements").status_code == 401
    _login(client)
    items = client.get("/api/announcements").get_json()["announcements"]
    assert [a["announcement_id"] for a in items] == ["n2", "n1"]
