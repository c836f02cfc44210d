import logging
from typing import List, Dict, Any
from fastapi.concurrency import run_in_threadpool
from uuid import UUID, uuid4

from ..db.db_client import AsyncPostgresClient
from ..models.db_models import Student
from ..tools.qr_generator import generate_student_qr
from ..tools.scan_decoder import encode_scan_payload
from .errors import NotFound, StoreUnavailable

logger = logging.getLogger(__name__)


class StudentService:
    """
    Student registration and QR code handling.
    """
    def __init__(self, db_client: AsyncPostgresClient):
        self.db_client = db_client

    async def create_student(self, student_id: str, name: str, email: str) -> Student:
        try:
            student = await self.db_client.add_student(student_id, name, email, qr_code=str(uuid4()))
        except Exception as e:
            logger.error(f"Error while creating student '{student_id}'.", exc_info=True)
            raise StoreUnavailable("Failed to create student.") from e
        logger.info(f"Student '{student.student_id}' registered as {student.id}.")
        return student

    async def list_students(self) -> List[Student]:
        try:
            return await self.db_client.get_students()
        except Exception as e:
            logger.error("Error while listing students.", exc_info=True)
            raise StoreUnavailable("Failed to load students.") from e

    async def get_student(self, student_id: UUID) -> Student:
        try:
            student = await self.db_client.get_student_by_id(student_id)
        except Exception as e:
            logger.error(f"Error while loading student {student_id}.", exc_info=True)
            raise StoreUnavailable("Failed to load student.") from e
        if not student:
            raise NotFound("Student not found.")
        return student

    async def update_student(self, student_id: UUID, code: str, name: str, email: str) -> Student:
        try:
            student = await self.db_client.update_student(student_id, code, name, email)
        except Exception as e:
            logger.error(f"Error while updating student {student_id}.", exc_info=True)
            raise StoreUnavailable("Failed to update student.") from e
        if not student:
            raise NotFound("Student not found.")
        return student

    async def delete_student(self, student_id: UUID) -> None:
        """Removes the student and every attendance record they have."""
        try:
            deleted = await self.db_client.delete_student(student_id)
        except Exception as e:
            logger.error(f"Error while deleting student {student_id}.", exc_info=True)
            raise StoreUnavailable("Failed to delete student.") from e
        if not deleted:
            raise NotFound("Student not found.")
        logger.info(f"Student {student_id} deleted with their attendance records.")

    def build_qr(self, student: Student) -> Dict[str, Any]:
        return {
            "student": student,
            "payload": encode_scan_payload(student),
            "image": generate_student_qr(student),
        }

    async def get_student_qr(self, student_id: UUID) -> Dict[str, Any]:
        student = await self.get_student(student_id)
        return await run_in_threadpool(self.build_qr, student)

    async def get_all_student_qrs(self) -> List[Dict[str, Any]]:
        """QR codes of every student, for the print-all sheet."""
        students = await self.list_students()
        # PNG rendering is CPU bound.
        return [await run_in_threadpool(self.build_qr, student) for student in students]
