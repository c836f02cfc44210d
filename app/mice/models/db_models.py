# app/mice/models/db_models.py

from enum import Enum
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from uuid import UUID


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    EXCUSED = "excused"


class StaffRole(str, Enum):
    ADMIN = "admin"
    SECRETARY = "secretary"


class Student(BaseModel):
    """
    Represents a registered student, mapping to the 'students' table.
    """
    id: UUID = Field(..., description="Primary key")
    student_id: str = Field(..., description="External student code printed on the student's card")
    name: str
    email: str
    qr_code: Optional[str] = Field(None, description="Opaque marker assigned when the student was created")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Event(BaseModel):
    """
    Represents an event attendance is taken for, mapping to the 'events' table.
    """
    id: UUID
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: datetime
    end_date: datetime
    created_by: Optional[str] = Field(None, description="Staff id of the creator")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AttendanceRecord(BaseModel):
    """
    A single student's attendance for an event, mapping to the 'attendance' table.
    (student_id, event_id) is unique.
    """
    id: UUID
    student_id: UUID = Field(..., description="FK to students.id")
    event_id: UUID = Field(..., description="FK to events.id")
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    recorded_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AttendeeRecord(AttendanceRecord):
    """Attendance record joined with its student."""
    student: Student


class Profile(BaseModel):
    """
    Staff member profile, mapping to the 'profiles' table.
    The id comes from the hosted auth provider.
    """
    id: str
    full_name: Optional[str] = None
    role: StaffRole = StaffRole.SECRETARY
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
