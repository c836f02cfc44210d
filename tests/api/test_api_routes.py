import pytest
import uuid
from datetime import datetime, timezone, timedelta
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from app.mice.main import app
from app.mice.api.auth import get_current_staff
from app.mice.api.dependencies import (
    get_attendance_service, get_student_service, get_event_service, get_report_service, get_staff_service
)
from app.mice.api.schemas.staff import StaffUser
from app.mice.models.db_models import AttendanceStatus, AttendeeRecord, Profile
from app.mice.models.scan_models import ScanMode, ScanOutcome, ScanResult
from app.mice.services.errors import InvalidPayload, NotFound, StoreUnavailable, ScanConflict
from tests.factories import make_student, make_event, make_record

STAFF = StaffUser(id="staff-1", email="desk@example.com")
T1 = datetime(2025, 3, 10, 9, 5, tzinfo=timezone.utc)


def _provide(value):
    return lambda: value


@pytest.fixture
def services():
    """Mocked services wired into the app in place of the real ones."""
    mocks = {
        get_attendance_service: AsyncMock(),
        get_student_service: AsyncMock(),
        get_event_service: AsyncMock(),
        get_report_service: AsyncMock(),
        get_staff_service: AsyncMock(),
    }
    app.dependency_overrides[get_current_staff] = lambda: STAFF
    for dependency, mock in mocks.items():
        app.dependency_overrides[dependency] = _provide(mock)
    yield mocks
    app.dependency_overrides.clear()


@pytest.fixture
def client(services):
    # No context manager: the lifespan (and its database pool) is not started.
    return TestClient(app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# --- Scanner ---

def test_scan_check_in(client, services):
    student, event = make_student(), make_event()
    record = make_record(student, event, time_in=T1)
    service = services[get_attendance_service]
    service.scan.return_value = ScanResult(
        outcome=ScanOutcome.CHECKED_IN, mode=ScanMode.TIME_IN, student=student, record=record, notified=True
    )

    response = client.post("/api/v1/scanner/scan", json={"payload": "{}", "event_id": str(event.id), "mode": "time-in"})

    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "checked-in"
    assert data["message"] == "Ada Lovelace has been checked in"
    assert data["record"]["status"] == "present"
    assert data["notified"] is True
    service.scan.assert_awaited_once_with("{}", event.id, ScanMode.TIME_IN, staff_id="staff-1")


def test_refused_scan_is_not_an_error(client, services):
    student = make_student()
    services[get_attendance_service].scan.return_value = ScanResult(
        outcome=ScanOutcome.NOT_CHECKED_IN, mode=ScanMode.TIME_OUT, student=student, record=None
    )

    response = client.post("/api/v1/scanner/scan", json={"payload": "{}", "event_id": str(uuid.uuid4()), "mode": "time-out"})

    assert response.status_code == 200
    assert response.json()["message"] == "Ada Lovelace has not checked in yet"
    assert response.json()["record"] is None


@pytest.mark.parametrize("error, status_code", [
    (InvalidPayload("Invalid QR code format."), 400),
    (NotFound("Student not found."), 404),
    (ScanConflict("changed"), 409),
    (StoreUnavailable("Failed to record attendance."), 503),
])
def test_scan_errors_map_to_status_codes(client, services, error, status_code):
    services[get_attendance_service].scan.side_effect = error

    response = client.post("/api/v1/scanner/scan", json={"payload": "x", "event_id": str(uuid.uuid4())})

    assert response.status_code == status_code
    assert response.json()["detail"] == str(error)


def test_scan_rejects_unknown_mode(client):
    response = client.post("/api/v1/scanner/scan", json={"payload": "x", "event_id": str(uuid.uuid4()), "mode": "sideways"})
    assert response.status_code == 422


# --- Students ---

def test_create_student_validates_email(client, services):
    response = client.post("/api/v1/students", json={"student_id": "S001", "name": "Ada", "email": "not-an-email"})

    assert response.status_code == 422
    services[get_student_service].create_student.assert_not_awaited()


def test_create_student(client, services):
    student = make_student()
    services[get_student_service].create_student.return_value = student

    response = client.post("/api/v1/students", json={"student_id": "S001", "name": "Ada Lovelace", "email": "ada@example.com"})

    assert response.status_code == 201
    assert response.json()["id"] == str(student.id)


def test_print_all_route_is_not_taken_for_an_id(client, services):
    services[get_student_service].get_all_student_qrs.return_value = []

    response = client.get("/api/v1/students/qr")

    assert response.status_code == 200
    assert response.json() == []


def test_delete_unknown_student(client, services):
    services[get_student_service].delete_student.side_effect = NotFound("Student not found.")

    response = client.delete(f"/api/v1/students/{uuid.uuid4()}")

    assert response.status_code == 404


# --- Events & attendees ---

def test_create_event_rejects_end_before_start(client, services):
    start = datetime(2025, 3, 10, 9, tzinfo=timezone.utc)
    body = {"title": "Gala", "start_date": start.isoformat(), "end_date": (start - timedelta(hours=1)).isoformat()}

    response = client.post("/api/v1/events", json=body)

    assert response.status_code == 422
    services[get_event_service].create_event.assert_not_awaited()


def test_create_event_stamps_creator(client, services):
    event = make_event()
    services[get_event_service].create_event.return_value = event
    body = {"title": event.title, "location": "", "start_date": event.start_date.isoformat(), "end_date": event.end_date.isoformat()}

    response = client.post("/api/v1/events", json=body)

    assert response.status_code == 201
    kwargs = services[get_event_service].create_event.await_args.kwargs
    assert kwargs["created_by"] == "staff-1"
    assert kwargs["location"] is None


def test_list_attendees_passes_filters(client, services):
    event, student = make_event(), make_student()
    record = make_record(student, event, time_in=T1, status=AttendanceStatus.LATE)
    service = services[get_attendance_service]
    service.get_event_attendees.return_value = [AttendeeRecord(**record.model_dump(), student=student)]

    response = client.get(f"/api/v1/events/{event.id}/attendees", params={"status": "late", "search": "ada"})

    assert response.status_code == 200
    assert response.json()[0]["student"]["name"] == "Ada Lovelace"
    service.get_event_attendees.assert_awaited_once_with(event.id, status_filter="late", search="ada")


def test_list_attendees_rejects_unknown_status(client):
    response = client.get(f"/api/v1/events/{uuid.uuid4()}/attendees", params={"status": "asleep"})
    assert response.status_code == 422


def test_override_status(client, services):
    event, student = make_event(), make_student()
    record = make_record(student, event, status=AttendanceStatus.EXCUSED)
    service = services[get_attendance_service]
    service.override_status.return_value = record

    response = client.patch(f"/api/v1/events/{event.id}/attendance/{record.id}/status", json={"status": "excused"})

    assert response.status_code == 200
    assert response.json()["status"] == "excused"
    service.override_status.assert_awaited_once_with(record.id, AttendanceStatus.EXCUSED, staff_id="staff-1", event_id=event.id)


# --- Reports & staff ---

def test_report_rejects_unknown_time_frame(client):
    response = client.get("/api/v1/reports", params={"time_frame": "2weeks"})
    assert response.status_code == 422


def test_dashboard(client, services):
    services[get_report_service].dashboard.return_value = {
        "recent_events": [make_event()],
        "stats": {"total": 0},
        "status_distribution": [],
    }

    response = client.get("/api/v1/dashboard")

    assert response.status_code == 200
    assert response.json()["stats"]["present_percentage"] == 0


def test_read_own_profile(client, services):
    services[get_staff_service].get_profile.return_value = Profile(id="staff-1", full_name="Jo Smith")

    response = client.get("/api/v1/staff/me")

    assert response.status_code == 200
    assert response.json() == {"id": "staff-1", "full_name": "Jo Smith", "role": "secretary", "email": "desk@example.com"}


def test_database_down_answers_503():
    """Without the overrides and without a pool, store-backed routes are unavailable."""
    app.dependency_overrides[get_current_staff] = lambda: STAFF
    try:
        app.state.postgres_pool = None
        response = TestClient(app).get("/api/v1/students")
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 503


def test_scan_rejects_oversized_payload(client, services):
    response = client.post("/api/v1/scanner/scan", json={"payload": "x" * 5000, "event_id": str(uuid.uuid4())})

    assert response.status_code == 422
    services[get_attendance_service].scan.assert_not_awaited()
