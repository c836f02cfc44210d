# app/mice/modules/report_builder.py

import calendar
from collections import defaultdict
from datetime import datetime
from typing import List, Dict, Any, Optional, Tuple, Iterable
from uuid import UUID

from ..models.db_models import Event, AttendanceRecord, AttendanceStatus

TIME_FRAME_MONTHS = {
    "1month": 1,
    "3months": 3,
    "6months": 6,
    "1year": 12,
    "all": None,
}
DEFAULT_TIME_FRAME = "3months"
EVENT_NAME_MAX_LENGTH = 20


def _subtract_months(moment: datetime, months: int) -> datetime:
    """Goes back a number of calendar months, clamping the day (Mar 31 - 1 month = Feb 28/29)."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def time_frame_range(time_frame: str, now: datetime) -> Tuple[Optional[datetime], datetime]:
    """
    Converts a time frame name into a (from, to) range ending at `now`.
    Unknown names fall back to the default of three months; "all" has no lower bound.
    """
    months = TIME_FRAME_MONTHS.get(time_frame, TIME_FRAME_MONTHS[DEFAULT_TIME_FRAME])
    if months is None:
        return None, now
    return _subtract_months(now, months), now


def percentage(count: int, total: int) -> int:
    return round(count / total * 100) if total > 0 else 0


def count_statuses(records: Iterable[AttendanceRecord]) -> Dict[str, int]:
    counts = {"total": 0, **{status.value: 0 for status in AttendanceStatus}}
    for record in records:
        counts["total"] += 1
        counts[AttendanceStatus(record.status).value] += 1
    return counts


def build_stats(records: Iterable[AttendanceRecord]) -> Dict[str, Any]:
    """
    Overall counts plus the attendance, late, absence and excused rates.
    """
    counts = count_statuses(records)
    total = counts["total"]
    return {
        **counts,
        "present_percentage": percentage(counts["present"], total),
        "late_percentage": percentage(counts["late"], total),
        "absent_percentage": percentage(counts["absent"], total),
        "excused_percentage": percentage(counts["excused"], total),
    }


def filter_events(
    events: List[Event],
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    event_id: Optional[UUID] = None
) -> List[Event]:
    """
    Narrows the events a report covers.

    A selected event wins over the date range: when `event_id` is given, only that
    event is returned, wherever it falls. Otherwise events whose start date lies
    strictly between `date_from` and `date_to` are kept; with either bound missing
    no date filtering happens.
    """
    if event_id is not None:
        return [event for event in events if event.id == event_id]

    if date_from is None or date_to is None:
        return list(events)

    return [event for event in events if date_from < event.start_date < date_to]


def _short_name(title: str) -> str:
    if len(title) > EVENT_NAME_MAX_LENGTH:
        return title[:EVENT_NAME_MAX_LENGTH] + "..."
    return title


def _records_by_event(records: Iterable[AttendanceRecord]) -> Dict[UUID, List[AttendanceRecord]]:
    grouped = defaultdict(list)
    for record in records:
        grouped[record.event_id].append(record)
    return grouped


def event_attendance_counts(records: Iterable[AttendanceRecord]) -> Dict[UUID, Dict[str, int]]:
    """Per-event status counts, keyed by event id."""
    return {event_id: count_statuses(rows) for event_id, rows in _records_by_event(records).items()}


def event_breakdown(events: List[Event], records: Iterable[AttendanceRecord]) -> List[Dict[str, Any]]:
    """One row of status counts per event, in the order the events were given."""
    grouped = _records_by_event(records)
    breakdown = []
    for event in events:
        breakdown.append({
            "event_id": event.id,
            "name": _short_name(event.title),
            "start_date": event.start_date,
            **count_statuses(grouped.get(event.id, [])),
        })
    return breakdown


def status_distribution(stats: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [
        {"name": status.value.capitalize(), "value": stats.get(status.value, 0)}
        for status in AttendanceStatus
    ]


def monthly_trend(events: List[Event], records: Iterable[AttendanceRecord]) -> List[Dict[str, Any]]:
    """
    Status counts grouped by the month the events started in, oldest month first.
    Months are labelled like "Mar 2025".
    """
    grouped = _records_by_event(records)
    months: Dict[Tuple[int, int], Dict[str, Any]] = {}

    for event in events:
        key = (event.start_date.year, event.start_date.month)
        if key not in months:
            months[key] = {"name": event.start_date.strftime("%b %Y"), **count_statuses([])}
        bucket = months[key]
        for status, value in count_statuses(grouped.get(event.id, [])).items():
            bucket[status] += value

    return [months[key] for key in sorted(months)]
