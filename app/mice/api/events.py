from fastapi import APIRouter, Depends, status, Response, Request, Query
from typing import List, Optional
from uuid import UUID

from ..models.db_models import AttendanceStatus
from ..services.event_service import EventService
from ..services.attendance_service import AttendanceService
from ..services.errors import ServiceError
from .schemas.event import EventCreateRequest, EventResponse
from .schemas.attendance import AttendeeResponse, AttendanceRecordResponse, StatusUpdateRequest
from .schemas.staff import StaffUser
from .auth import get_current_staff
from .dependencies import get_event_service, get_attendance_service
from .utilities.errors import to_http_exception
from .utilities.limiter import limiter

router = APIRouter(prefix="/events", tags=["Events"])

STATUS_FILTER_PATTERN = "^(all|present|late|absent|excused)$"


# === Events ===

@router.get("", response_model=List[EventResponse], summary="List events, newest first")
@limiter.limit("60/minute")
async def list_events(
    request: Request,
    limit: Optional[int] = Query(None, ge=1, le=500),
    with_attendance: bool = Query(False, description="Include attendance counts per event."),
    staff: StaffUser = Depends(get_current_staff),
    service: EventService = Depends(get_event_service)
):
    try:
        return await service.list_events(limit=limit, with_attendance=with_attendance)
    except ServiceError as e:
        raise to_http_exception(e)


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED, summary="Create an event")
@limiter.limit("30/minute")
async def create_event(request: Request, create_request: EventCreateRequest, staff: StaffUser = Depends(get_current_staff), service: EventService = Depends(get_event_service)):
    try:
        return await service.create_event(
            title=create_request.title,
            description=create_request.description,
            location=create_request.location,
            start_date=create_request.start_date,
            end_date=create_request.end_date,
            created_by=staff.id
        )
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/{event_id}", response_model=EventResponse, summary="Get one event")
@limiter.limit("60/minute")
async def get_event(request: Request, event_id: UUID, staff: StaffUser = Depends(get_current_staff), service: EventService = Depends(get_event_service)):
    try:
        return await service.get_event(event_id)
    except ServiceError as e:
        raise to_http_exception(e)


@router.put("/{event_id}", response_model=EventResponse, summary="Edit an event")
@limiter.limit("30/minute")
async def update_event(request: Request, event_id: UUID, update_request: EventCreateRequest, staff: StaffUser = Depends(get_current_staff), service: EventService = Depends(get_event_service)):
    try:
        return await service.update_event(
            event_id,
            title=update_request.title,
            description=update_request.description,
            location=update_request.location,
            start_date=update_request.start_date,
            end_date=update_request.end_date
        )
    except ServiceError as e:
        raise to_http_exception(e)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an event and its attendance")
@limiter.limit("30/minute")
async def delete_event(request: Request, event_id: UUID, staff: StaffUser = Depends(get_current_staff), service: EventService = Depends(get_event_service)):
    try:
        await service.delete_event(event_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except ServiceError as e:
        raise to_http_exception(e)


# === Attendees ===

@router.get("/{event_id}/attendees", response_model=List[AttendeeResponse], summary="Attendance records of an event")
@limiter.limit("60/minute")
async def list_attendees(
    request: Request,
    event_id: UUID,
    status_filter: str = Query("all", alias="status", pattern=STATUS_FILTER_PATTERN),
    search: Optional[str] = Query(None, max_length=100),
    staff: StaffUser = Depends(get_current_staff),
    service: AttendanceService = Depends(get_attendance_service)
):
    try:
        return await service.get_event_attendees(event_id, status_filter=status_filter, search=search)
    except ServiceError as e:
        raise to_http_exception(e)


@router.patch("/{event_id}/attendance/{record_id}/status", response_model=AttendanceRecordResponse, summary="Override the status of an attendance record")
@limiter.limit("60/minute")
async def override_attendance_status(
    request: Request,
    event_id: UUID,
    record_id: UUID,
    update_request: StatusUpdateRequest,
    staff: StaffUser = Depends(get_current_staff),
    service: AttendanceService = Depends(get_attendance_service)
):
    try:
        return await service.override_status(record_id, AttendanceStatus(update_request.status), staff_id=staff.id, event_id=event_id)
    except ServiceError as e:
        raise to_http_exception(e)
