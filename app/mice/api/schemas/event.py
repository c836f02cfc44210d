from pydantic import BaseModel, Field, ConfigDict, model_validator
from uuid import UUID
from datetime import datetime
from typing import Optional


class EventCreateRequest(BaseModel):
    """Request model for creating or editing an event."""
    title: str = Field(..., min_length=2, description="Event title, at least 2 characters.")
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: datetime
    end_date: datetime

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("End date must not be before the start date.")
        # Empty strings from forms are stored as NULL.
        self.description = self.description or None
        self.location = self.location or None
        return self


class AttendanceCounts(BaseModel):
    present: int = 0
    late: int = 0
    absent: int = 0
    excused: int = 0
    total: int = 0


class EventResponse(BaseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: datetime
    end_date: datetime
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    attendance: Optional[AttendanceCounts] = None

    model_config = ConfigDict(from_attributes=True)
