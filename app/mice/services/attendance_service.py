import logging
from typing import List, Optional
from uuid import UUID
from datetime import datetime, timezone

from ..db.db_client import AsyncPostgresClient
from ..models.db_models import Student, Event, AttendanceRecord, AttendeeRecord, AttendanceStatus
from ..models.scan_models import ScanMode, ScanOutcome, ScanResult
from ..modules.attendance_rules import attendance_state, resolve_transition, is_mutating
from ..tools.notifier import EmailNotifier
from ..tools.scan_decoder import decode_scan_payload
from .errors import ServiceError, NotFound, StoreUnavailable, ScanConflict, NotificationFailed

logger = logging.getLogger(__name__)


class AttendanceService:
    """
    Scan handling and attendance record management.
    """
    def __init__(self, db_client: AsyncPostgresClient, notifier: EmailNotifier):
        self.db_client = db_client
        self.notifier = notifier

    async def scan(self, raw_payload: str, event_id: UUID, mode: ScanMode, staff_id: Optional[str] = None) -> ScanResult:
        """
        Full scan path: decode the QR text, look up the student and the event,
        then resolve the attendance transition. Decoding errors abort before
        any store access.
        """
        payload = decode_scan_payload(raw_payload)

        try:
            student = await self.db_client.get_student_by_id(payload.id)
            event = await self.db_client.get_event_by_id(event_id)
        except Exception as e:
            logger.error(f"Store lookup failed while scanning for event {event_id}.", exc_info=True)
            raise StoreUnavailable("Failed to look up the student or event.") from e

        if not student:
            logger.warning(f"Scanned QR code points to unknown student {payload.id}.")
            raise NotFound("Student not found.")
        if not event:
            raise NotFound("Event not found.")

        return await self.resolve(student, event, mode, recorded_by=staff_id)

    async def resolve(self, student: Student, event: Event, mode: ScanMode, recorded_by: Optional[str] = None) -> ScanResult:
        """
        Applies one scan to the (student, event) pair.

        The store writes are conditional: a time-in only lands on a pair without
        a time-in, a time-out only on a checked-in pair. When nothing was written,
        the current row is read back and classified.
        """
        mode = ScanMode(mode)
        now = datetime.now(timezone.utc)

        try:
            if mode == ScanMode.TIME_IN:
                written = await self.db_client.record_time_in(student.id, event.id, now, recorded_by)
            else:
                written = await self.db_client.record_time_out(student.id, event.id, now)

            current = written if written is not None else await self.db_client.get_attendance_record(student.id, event.id)
        except Exception as e:
            logger.error(f"Store error while recording {mode.value} for student {student.id} at event {event.id}.", exc_info=True)
            raise StoreUnavailable("Failed to record attendance.") from e

        if written is not None:
            outcome = ScanOutcome.CHECKED_IN if mode == ScanMode.TIME_IN else ScanOutcome.CHECKED_OUT
        else:
            outcome = resolve_transition(attendance_state(current), mode)
            if is_mutating(outcome):
                # The row moved between our write attempt and the read.
                logger.warning(f"Attendance row for student {student.id} at event {event.id} changed mid-scan.")
                raise ScanConflict("The attendance record changed while scanning. Please scan again.")

        if is_mutating(outcome):
            logger.info(f"Student '{student.student_id}' {outcome.value} for event '{event.title}'.")
            notified = await self._notify(student, event, current)
        else:
            logger.warning(f"Scan refused for student '{student.student_id}' at event '{event.title}': {outcome.value}.")
            notified = False

        return ScanResult(outcome=outcome, mode=mode, student=student, record=current, notified=notified)

    async def _notify(self, student: Student, event: Event, record: AttendanceRecord) -> bool:
        """Best-effort confirmation email. Never fails the scan."""
        if not self.notifier.enabled:
            logger.debug("Email service not configured, skipping attendance confirmation.")
            return False
        try:
            await self.notifier.send_attendance_confirmation(
                student=student,
                event_title=event.title,
                time_in=record.time_in,
                time_out=record.time_out
            )
            return True
        except NotificationFailed as e:
            logger.warning(f"Attendance confirmation for '{student.student_id}' was not sent: {e}")
        except Exception:
            logger.error(f"Unexpected error while notifying '{student.student_id}'.", exc_info=True)
        return False

    # ===== Attendees & manual overrides =====

    async def get_event_attendees(self, event_id: UUID, status_filter: Optional[str] = None,
                                  search: Optional[str] = None) -> List[AttendeeRecord]:
        """
        Lists an event's attendance rows with their students.
        `status_filter` is "all" or a status value; `search` matches name,
        student code or email, case-insensitively.
        """
        try:
            event = await self.db_client.get_event_by_id(event_id)
            if not event:
                raise NotFound("Event not found.")
            attendees = await self.db_client.get_event_attendees(event_id)
        except ServiceError:
            raise
        except Exception as e:
            logger.error(f"Error while listing attendees of event {event_id}.", exc_info=True)
            raise StoreUnavailable("Failed to load attendees.") from e

        if status_filter and status_filter != "all":
            wanted = AttendanceStatus(status_filter)
            attendees = [a for a in attendees if a.status == wanted]

        if search:
            term = search.strip().lower()
            attendees = [
                a for a in attendees
                if term in a.student.name.lower()
                or term in a.student.student_id.lower()
                or term in a.student.email.lower()
            ]
        return attendees

    async def override_status(self, record_id: UUID, status: AttendanceStatus, staff_id: Optional[str] = None,
                              event_id: Optional[UUID] = None) -> AttendanceRecord:
        """Sets any status on an existing record, regardless of its time-in/time-out."""
        try:
            updated = await self.db_client.update_attendance_status(record_id, AttendanceStatus(status), staff_id, event_id=event_id)
        except Exception as e:
            logger.error(f"Error while updating status of attendance record {record_id}.", exc_info=True)
            raise StoreUnavailable("Failed to update status.") from e

        if not updated:
            raise NotFound("Attendance record not found.")
        logger.info(f"Attendance record {record_id} set to '{updated.status.value}' by '{staff_id}'.")
        return updated
