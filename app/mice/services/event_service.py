import logging
from typing import List, Optional, Dict, Any
from uuid import UUID
from datetime import datetime

from ..db.db_client import AsyncPostgresClient
from ..models.db_models import Event
from ..modules.report_builder import event_attendance_counts, count_statuses
from .errors import NotFound, StoreUnavailable

logger = logging.getLogger(__name__)


class EventService:
    """
    Event management for staff.
    """
    def __init__(self, db_client: AsyncPostgresClient):
        self.db_client = db_client

    async def create_event(self, title: str, description: Optional[str], location: Optional[str],
                           start_date: datetime, end_date: datetime, created_by: Optional[str]) -> Event:
        try:
            event = await self.db_client.add_event(title, description, location, start_date, end_date, created_by)
        except Exception as e:
            logger.error(f"Error while creating event '{title}'.", exc_info=True)
            raise StoreUnavailable("Failed to save event.") from e
        logger.info(f"Event '{event.title}' ({event.id}) created by '{created_by}'.")
        return event

    async def list_events(self, limit: Optional[int] = None, with_attendance: bool = False) -> List[Dict[str, Any]]:
        """
        Events, newest first. With `with_attendance`, each event carries its
        present/late/absent/excused/total counts.
        """
        try:
            events = await self.db_client.get_events(limit=limit)
            counts = {}
            if with_attendance and events:
                records = await self.db_client.get_attendance_records([event.id for event in events])
                counts = event_attendance_counts(records)
        except Exception as e:
            logger.error("Error while listing events.", exc_info=True)
            raise StoreUnavailable("Failed to load events.") from e

        result = []
        for event in events:
            item = event.model_dump()
            if with_attendance:
                item["attendance"] = counts.get(event.id, count_statuses([]))
            result.append(item)
        return result

    async def get_event(self, event_id: UUID) -> Event:
        try:
            event = await self.db_client.get_event_by_id(event_id)
        except Exception as e:
            logger.error(f"Error while loading event {event_id}.", exc_info=True)
            raise StoreUnavailable("Failed to load event.") from e
        if not event:
            raise NotFound("Event not found.")
        return event

    async def update_event(self, event_id: UUID, title: str, description: Optional[str], location: Optional[str],
                           start_date: datetime, end_date: datetime) -> Event:
        try:
            event = await self.db_client.update_event(event_id, title, description, location, start_date, end_date)
        except Exception as e:
            logger.error(f"Error while updating event {event_id}.", exc_info=True)
            raise StoreUnavailable("Failed to save event.") from e
        if not event:
            raise NotFound("Event not found.")
        return event

    async def delete_event(self, event_id: UUID) -> None:
        """Removes the event and all of its attendance records."""
        try:
            deleted = await self.db_client.delete_event(event_id)
        except Exception as e:
            logger.error(f"Error while deleting event {event_id}.", exc_info=True)
            raise StoreUnavailable("Failed to delete event.") from e
        if not deleted:
            raise NotFound("Event not found.")
        logger.info(f"Event {event_id} deleted with its attendance records.")
