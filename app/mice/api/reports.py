from fastapi import APIRouter, Depends, Request, Query
from typing import Optional
from uuid import UUID
from datetime import datetime

from ..modules.report_builder import DEFAULT_TIME_FRAME
from ..services.report_service import ReportService
from ..services.errors import ServiceError
from .schemas.report import ReportResponse, DashboardResponse
from .schemas.staff import StaffUser
from .auth import get_current_staff
from .dependencies import get_report_service
from .utilities.errors import to_http_exception
from .utilities.limiter import limiter

router = APIRouter(tags=["Reports"])


@router.get("/reports", response_model=ReportResponse, summary="Attendance report over a time frame, a date range or one event")
@limiter.limit("30/minute")
async def get_report(
    request: Request,
    time_frame: str = Query(DEFAULT_TIME_FRAME, pattern="^(1month|3months|6months|1year|all)$"),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    event_id: Optional[UUID] = Query(None),
    staff: StaffUser = Depends(get_current_staff),
    service: ReportService = Depends(get_report_service)
):
    try:
        return await service.build_report(time_frame=time_frame, date_from=date_from, date_to=date_to, event_id=event_id)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/dashboard", response_model=DashboardResponse, summary="Recent events and overall attendance")
@limiter.limit("60/minute")
async def get_dashboard(request: Request, staff: StaffUser = Depends(get_current_staff), service: ReportService = Depends(get_report_service)):
    try:
        return await service.dashboard()
    except ServiceError as e:
        raise to_http_exception(e)
