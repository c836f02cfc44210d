import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import AsyncMock

from app.mice.services.report_service import ReportService, RECENT_EVENTS_LIMIT
from app.mice.services.errors import StoreUnavailable
from app.mice.models.db_models import AttendanceStatus
from tests.factories import make_student, make_event, make_record


@pytest.fixture
def mock_db_client() -> AsyncMock:
    return AsyncMock()


@pytest.mark.asyncio
async def test_default_report_covers_last_three_months(mock_db_client):
    now = datetime.now(timezone.utc)
    recent = make_event("Recent", start=now - timedelta(days=10))
    old = make_event("Old", start=now - timedelta(days=200))
    mock_db_client.get_events.return_value = [recent, old]
    mock_db_client.get_attendance_records.return_value = [
        make_record(make_student(), recent, status=AttendanceStatus.PRESENT),
        make_record(make_student(code="S002"), recent, status=AttendanceStatus.ABSENT),
    ]

    report = await ReportService(db_client=mock_db_client).build_report()

    mock_db_client.get_attendance_records.assert_awaited_once_with([recent.id])
    assert [row["name"] for row in report["events"]] == ["Recent"]
    assert report["stats"]["total"] == 2
    assert report["stats"]["present_percentage"] == 50
    assert report["status_distribution"][2] == {"name": "Absent", "value": 1}
    assert len(report["trend"]) == 1


@pytest.mark.asyncio
async def test_selected_event_ignores_time_frame(mock_db_client):
    ancient = make_event("Ancient", start=datetime(2015, 5, 1, tzinfo=timezone.utc))
    mock_db_client.get_events.return_value = [ancient]
    mock_db_client.get_attendance_records.return_value = []

    report = await ReportService(db_client=mock_db_client).build_report(time_frame="1month", event_id=ancient.id)

    assert [row["event_id"] for row in report["events"]] == [ancient.id]
    assert report["event_id"] == ancient.id


@pytest.mark.asyncio
async def test_explicit_dates_replace_time_frame(mock_db_client):
    inside = make_event("Inside", start=datetime(2024, 6, 15, tzinfo=timezone.utc))
    outside = make_event("Outside", start=datetime(2024, 8, 15, tzinfo=timezone.utc))
    mock_db_client.get_events.return_value = [inside, outside]
    mock_db_client.get_attendance_records.return_value = []

    report = await ReportService(db_client=mock_db_client).build_report(
        date_from=datetime(2024, 6, 1), date_to=datetime(2024, 7, 1)
    )

    assert [row["name"] for row in report["events"]] == ["Inside"]
    assert report["date_from"].tzinfo is not None


@pytest.mark.asyncio
async def test_report_without_events_skips_record_query(mock_db_client):
    mock_db_client.get_events.return_value = []

    report = await ReportService(db_client=mock_db_client).build_report(time_frame="all")

    mock_db_client.get_attendance_records.assert_not_awaited()
    assert report["stats"]["total"] == 0
    assert report["events"] == []


@pytest.mark.asyncio
async def test_report_store_failure(mock_db_client):
    mock_db_client.get_events.side_effect = ConnectionError("db down")

    with pytest.raises(StoreUnavailable):
        await ReportService(db_client=mock_db_client).build_report()


@pytest.mark.asyncio
async def test_dashboard(mock_db_client):
    events = [make_event(f"Event {i}") for i in range(RECENT_EVENTS_LIMIT)]
    mock_db_client.get_events.return_value = events
    mock_db_client.get_attendance_records.return_value = [
        make_record(make_student(), events[0], status=AttendanceStatus.EXCUSED)
    ]

    dashboard = await ReportService(db_client=mock_db_client).dashboard()

    mock_db_client.get_events.assert_awaited_once_with(limit=RECENT_EVENTS_LIMIT)
    assert dashboard["recent_events"] == events
    assert dashboard["stats"]["excused"] == 1
    assert dashboard["stats"]["excused_percentage"] == 100
