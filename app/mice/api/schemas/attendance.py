from pydantic import BaseModel, Field, ConfigDict
from uuid import UUID
from datetime import datetime
from typing import Optional

from ...models.db_models import AttendanceStatus
from ...models.scan_models import ScanMode, ScanOutcome
from .student import StudentResponse

# QR codes hold a short JSON object; anything longer is not one of ours.
MAX_SCAN_PAYLOAD_LENGTH = 4096

OUTCOME_MESSAGES = {
    ScanOutcome.CHECKED_IN: "{name} has been checked in",
    ScanOutcome.CHECKED_OUT: "{name} has been checked out",
    ScanOutcome.ALREADY_CHECKED_IN: "{name} is already checked in",
    ScanOutcome.ALREADY_CHECKED_OUT: "{name} is already checked out",
    ScanOutcome.NOT_CHECKED_IN: "{name} has not checked in yet",
}


class ScanRequest(BaseModel):
    """A code read by the scanner at an event check-in or check-out point."""
    payload: str = Field(..., max_length=MAX_SCAN_PAYLOAD_LENGTH, description="Raw text decoded from the QR code.")
    event_id: UUID
    mode: ScanMode = Field(ScanMode.TIME_IN, description="time-in or time-out")


class AttendanceRecordResponse(BaseModel):
    id: UUID
    student_id: UUID
    event_id: UUID
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    status: AttendanceStatus
    recorded_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AttendeeResponse(AttendanceRecordResponse):
    """Attendance record enriched with its student."""
    student: StudentResponse


class ScanResponse(BaseModel):
    outcome: ScanOutcome
    mode: ScanMode
    message: str
    student: StudentResponse
    record: Optional[AttendanceRecordResponse] = None
    notified: bool = False


class StatusUpdateRequest(BaseModel):
    status: AttendanceStatus
