from fastapi import APIRouter, Depends, status, Response, Request
from typing import List
from uuid import UUID

from ..services.student_service import StudentService
from ..services.errors import ServiceError
from .schemas.student import StudentCreateRequest, StudentResponse, StudentQRResponse
from .schemas.staff import StaffUser
from .auth import get_current_staff
from .dependencies import get_student_service
from .utilities.errors import to_http_exception
from .utilities.limiter import limiter

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("", response_model=List[StudentResponse], summary="List all students by name")
@limiter.limit("60/minute")
async def list_students(request: Request, staff: StaffUser = Depends(get_current_staff), service: StudentService = Depends(get_student_service)):
    try:
        return await service.list_students()
    except ServiceError as e:
        raise to_http_exception(e)


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED, summary="Register a new student")
@limiter.limit("30/minute")
async def create_student(request: Request, create_request: StudentCreateRequest, staff: StaffUser = Depends(get_current_staff), service: StudentService = Depends(get_student_service)):
    try:
        return await service.create_student(create_request.student_id, create_request.name, create_request.email)
    except ServiceError as e:
        raise to_http_exception(e)


# Declared before /{student_id} so "qr" is not parsed as an id.
@router.get("/qr", response_model=List[StudentQRResponse], summary="QR codes of every student, for printing")
@limiter.limit("10/minute")
async def get_all_student_qrs(request: Request, staff: StaffUser = Depends(get_current_staff), service: StudentService = Depends(get_student_service)):
    try:
        return await service.get_all_student_qrs()
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/{student_id}", response_model=StudentResponse, summary="Get one student")
@limiter.limit("60/minute")
async def get_student(request: Request, student_id: UUID, staff: StaffUser = Depends(get_current_staff), service: StudentService = Depends(get_student_service)):
    try:
        return await service.get_student(student_id)
    except ServiceError as e:
        raise to_http_exception(e)


@router.put("/{student_id}", response_model=StudentResponse, summary="Edit a student's code, name and email")
@limiter.limit("30/minute")
async def update_student(request: Request, student_id: UUID, update_request: StudentCreateRequest, staff: StaffUser = Depends(get_current_staff), service: StudentService = Depends(get_student_service)):
    try:
        return await service.update_student(student_id, update_request.student_id, update_request.name, update_request.email)
    except ServiceError as e:
        raise to_http_exception(e)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a student and their attendance")
@limiter.limit("30/minute")
async def delete_student(request: Request, student_id: UUID, staff: StaffUser = Depends(get_current_staff), service: StudentService = Depends(get_student_service)):
    try:
        await service.delete_student(student_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/{student_id}/qr", response_model=StudentQRResponse, summary="A student's QR code")
@limiter.limit("60/minute")
async def get_student_qr(request: Request, student_id: UUID, staff: StaffUser = Depends(get_current_staff), service: StudentService = Depends(get_student_service)):
    try:
        return await service.get_student_qr(student_id)
    except ServiceError as e:
        raise to_http_exception(e)
