from fastapi import APIRouter, Depends, Request

from ..services.staff_service import StaffService
from ..services.errors import ServiceError
from .schemas.staff import StaffUser, ProfileResponse, ProfileUpdateRequest
from .auth import get_current_staff
from .dependencies import get_staff_service
from .utilities.errors import to_http_exception
from .utilities.limiter import limiter

router = APIRouter(prefix="/staff", tags=["Staff"])


def _to_response(profile, staff: StaffUser) -> ProfileResponse:
    response = ProfileResponse.model_validate(profile)
    response.email = staff.email
    return response


@router.get("/me", response_model=ProfileResponse, summary="Profile of the signed in staff member")
@limiter.limit("60/minute")
async def read_profile(request: Request, staff: StaffUser = Depends(get_current_staff), service: StaffService = Depends(get_staff_service)):
    try:
        profile = await service.get_profile(staff.id)
    except ServiceError as e:
        raise to_http_exception(e)
    return _to_response(profile, staff)


@router.patch("/me", response_model=ProfileResponse, summary="Update the signed in staff member's name")
@limiter.limit("10/minute")
async def update_profile(request: Request, update_request: ProfileUpdateRequest, staff: StaffUser = Depends(get_current_staff), service: StaffService = Depends(get_staff_service)):
    try:
        profile = await service.update_profile(staff.id, update_request.full_name)
    except ServiceError as e:
        raise to_http_exception(e)
    return _to_response(profile, staff)
