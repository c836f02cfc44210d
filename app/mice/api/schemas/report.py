from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import List, Optional

from .event import AttendanceCounts, EventResponse


class StatsResponse(AttendanceCounts):
    present_percentage: int = 0
    late_percentage: int = 0
    absent_percentage: int = 0
    excused_percentage: int = 0


class EventBreakdownItem(AttendanceCounts):
    event_id: UUID
    name: str
    start_date: datetime


class DistributionItem(BaseModel):
    name: str
    value: int


class TrendItem(AttendanceCounts):
    name: str


class ReportResponse(BaseModel):
    generated_at: datetime
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    event_id: Optional[UUID] = None
    stats: StatsResponse
    events: List[EventBreakdownItem]
    status_distribution: List[DistributionItem]
    trend: List[TrendItem]


class DashboardResponse(BaseModel):
    recent_events: List[EventResponse]
    stats: StatsResponse
    status_distribution: List[DistributionItem]
