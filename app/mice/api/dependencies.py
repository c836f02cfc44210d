#app/mice/api/dependencies.py
from fastapi import Request, Depends, HTTPException, status
import asyncpg

from ..db.db_client import AsyncPostgresClient
from ..tools.notifier import EmailNotifier
from ..services.attendance_service import AttendanceService
from ..services.student_service import StudentService
from ..services.event_service import EventService
from ..services.report_service import ReportService
from ..services.staff_service import StaffService


def get_postgres_pool(request: Request) -> asyncpg.Pool:
    """
    Hands out the PostgreSQL pool created at startup.
    """
    pool = getattr(request.app.state, "postgres_pool", None)
    if pool is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database is not available.")
    return pool


def get_db_client(postgres_pool: asyncpg.Pool = Depends(get_postgres_pool)) -> AsyncPostgresClient:
    """
    A fresh store client per request, over the shared pool. Services receive
    it explicitly, so tests can swap in a double by overriding this dependency.
    """
    return AsyncPostgresClient(pool=postgres_pool)


def get_notifier() -> EmailNotifier:
    return EmailNotifier()


def get_attendance_service(
    db_client: AsyncPostgresClient = Depends(get_db_client),
    notifier: EmailNotifier = Depends(get_notifier)
) -> AttendanceService:
    return AttendanceService(db_client=db_client, notifier=notifier)


def get_student_service(db_client: AsyncPostgresClient = Depends(get_db_client)) -> StudentService:
    return StudentService(db_client=db_client)


def get_event_service(db_client: AsyncPostgresClient = Depends(get_db_client)) -> EventService:
    return EventService(db_client=db_client)


def get_report_service(db_client: AsyncPostgresClient = Depends(get_db_client)) -> ReportService:
    return ReportService(db_client=db_client)


def get_staff_service(db_client: AsyncPostgresClient = Depends(get_db_client)) -> StaffService:
    return StaffService(db_client=db_client)
