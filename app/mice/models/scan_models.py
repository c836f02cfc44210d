from enum import Enum
from pydantic import BaseModel, Field, ValidationError, field_validator
from typing import Optional
from uuid import UUID

from .db_models import Student, AttendanceRecord


class ScanMode(str, Enum):
    TIME_IN = "time-in"
    TIME_OUT = "time-out"


class AttendanceState(str, Enum):
    NO_RECORD = "no-record"
    CHECKED_IN = "checked-in"
    COMPLETE = "complete"


class ScanOutcome(str, Enum):
    CHECKED_IN = "checked-in"
    CHECKED_OUT = "checked-out"
    ALREADY_CHECKED_IN = "already-checked-in"
    ALREADY_CHECKED_OUT = "already-checked-out"
    NOT_CHECKED_IN = "not-checked-in"


class ScanPayload(BaseModel):
    """
    Decoded content of a student's QR code. Only `id` is used for lookups,
    name and email ride along for display.
    """
    id: UUID
    name: Optional[str] = None
    email: Optional[str] = None

    @field_validator("name", "email", mode="wrap")
    @classmethod
    def drop_unreadable_display_field(cls, value, handler):
        # A bad display field never invalidates a readable id.
        try:
            return handler(value)
        except ValidationError:
            return None


class ScanResult(BaseModel):
    """What the resolver reports back for a single scan."""
    outcome: ScanOutcome
    mode: ScanMode
    student: Student
    record: Optional[AttendanceRecord] = Field(None, description="The record after the scan, if one exists.")
    notified: bool = Field(False, description="Whether a confirmation email was accepted by the email service.")
