import logging
from typing import Optional, Dict, Any
from uuid import UUID
from datetime import datetime, timezone

from ..db.db_client import AsyncPostgresClient
from ..modules import report_builder
from .errors import StoreUnavailable

logger = logging.getLogger(__name__)

RECENT_EVENTS_LIMIT = 5


def _as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class ReportService:
    """
    Attendance reports and the dashboard summary.
    """
    def __init__(self, db_client: AsyncPostgresClient):
        self.db_client = db_client

    async def build_report(
        self,
        time_frame: str = report_builder.DEFAULT_TIME_FRAME,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        event_id: Optional[UUID] = None
    ) -> Dict[str, Any]:
        """
        Aggregates attendance over the selected events.

        An explicit `date_from`/`date_to` pair replaces the time frame. A selected
        `event_id` replaces both.
        """
        now = datetime.now(timezone.utc)
        if date_from is None and date_to is None:
            date_from, date_to = report_builder.time_frame_range(time_frame, now)
        else:
            date_from, date_to = _as_utc(date_from), _as_utc(date_to) or now

        try:
            events = await self.db_client.get_events()
            selected = report_builder.filter_events(events, date_from, date_to, event_id)
            records = await self.db_client.get_attendance_records([event.id for event in selected]) if selected else []
        except Exception as e:
            logger.error("Error while loading report data.", exc_info=True)
            raise StoreUnavailable("Failed to load report data.") from e

        stats = report_builder.build_stats(records)
        logger.info(f"Report built over {len(selected)} events and {stats['total']} records.")
        return {
            "generated_at": now,
            "date_from": date_from,
            "date_to": date_to,
            "event_id": event_id,
            "stats": stats,
            "events": report_builder.event_breakdown(selected, records),
            "status_distribution": report_builder.status_distribution(stats),
            "trend": report_builder.monthly_trend(selected, records),
        }

    async def dashboard(self) -> Dict[str, Any]:
        """Most recent events plus attendance stats over every record."""
        try:
            recent_events = await self.db_client.get_events(limit=RECENT_EVENTS_LIMIT)
            records = await self.db_client.get_attendance_records()
        except Exception as e:
            logger.error("Error while loading dashboard data.", exc_info=True)
            raise StoreUnavailable("Failed to load dashboard data.") from e

        stats = report_builder.build_stats(records)
        return {
            "recent_events": recent_events,
            "stats": stats,
            "status_distribution": report_builder.status_distribution(stats),
        }
