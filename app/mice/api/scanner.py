from fastapi import APIRouter, Depends, Request

from ..services.attendance_service import AttendanceService
from ..services.errors import ServiceError
from .schemas.attendance import ScanRequest, ScanResponse, AttendanceRecordResponse, OUTCOME_MESSAGES
from .schemas.student import StudentResponse
from .schemas.staff import StaffUser
from .auth import get_current_staff
from .dependencies import get_attendance_service
from .utilities.errors import to_http_exception
from .utilities.limiter import limiter

router = APIRouter(prefix="/scanner", tags=["Scanner"])


@router.post("/scan", response_model=ScanResponse, summary="Record a time-in or time-out from a scanned QR code")
@limiter.limit("120/minute")
async def scan(request: Request, scan_request: ScanRequest, staff: StaffUser = Depends(get_current_staff), service: AttendanceService = Depends(get_attendance_service)):
    """
    Refusals (already checked in, already checked out, not checked in) are
    normal outcomes and come back with 200. Only unreadable codes, unknown
    students or events and store failures are errors.
    """
    try:
        result = await service.scan(scan_request.payload, scan_request.event_id, scan_request.mode, staff_id=staff.id)
    except ServiceError as e:
        raise to_http_exception(e)

    return ScanResponse(
        outcome=result.outcome,
        mode=result.mode,
        message=OUTCOME_MESSAGES[result.outcome].format(name=result.student.name),
        student=StudentResponse.model_validate(result.student),
        record=AttendanceRecordResponse.model_validate(result.record) if result.record else None,
        notified=result.notified
    )
