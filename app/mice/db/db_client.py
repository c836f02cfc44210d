import logging
from typing import List, Optional
from uuid import UUID
import asyncpg
from datetime import datetime, timezone
from ..models.db_models import Student, Event, AttendanceRecord, AttendeeRecord, AttendanceStatus, Profile

logger = logging.getLogger(__name__)


def _affected_rows(status: str) -> int:
    """Turns an asyncpg command tag such as 'DELETE 3' into 3."""
    try:
        return int(str(status).split()[-1])
    except (ValueError, IndexError):
        return 0


class AsyncPostgresClient:
    """
    PostgreSQL client for every store operation of the attendance system.
    """
    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ===== Students =====

    async def add_student(self, student_id: str, name: str, email: str, qr_code: Optional[str]) -> Student:
        query = """
            INSERT INTO students (student_id, name, email, qr_code)
            VALUES ($1, $2, $3, $4)
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, student_id, name, email, qr_code)
            return Student(**record)

    async def get_students(self) -> List[Student]:
        query = "SELECT * FROM students ORDER BY name;"
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query)
            return [Student(**record) for record in records]

    async def get_student_by_id(self, student_id: UUID) -> Optional[Student]:
        query = "SELECT * FROM students WHERE id = $1;"
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, student_id)
            return Student(**record) if record else None

    async def update_student(self, student_id: UUID, code: str, name: str, email: str) -> Optional[Student]:
        query = """
            UPDATE students
            SET student_id = $2, name = $3, email = $4, updated_at = $5
            WHERE id = $1
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, student_id, code, name, email, datetime.now(timezone.utc))
            return Student(**record) if record else None

    async def delete_student(self, student_id: UUID) -> int:
        """Deletes a student together with all of their attendance rows, in one transaction."""
        async with self._pool.acquire() as connection:
            async with connection.transaction():
                await connection.execute("DELETE FROM attendance WHERE student_id = $1;", student_id)
                status = await connection.execute("DELETE FROM students WHERE id = $1;", student_id)
        return _affected_rows(status)

    # ===== Events =====

    async def add_event(self, title: str, description: Optional[str], location: Optional[str],
                        start_date: datetime, end_date: datetime, created_by: Optional[str]) -> Event:
        query = """
            INSERT INTO events (title, description, location, start_date, end_date, created_by)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, title, description, location, start_date, end_date, created_by)
            return Event(**record)

    async def get_events(self, limit: Optional[int] = None) -> List[Event]:
        """Events, most recent start date first."""
        query = "SELECT * FROM events ORDER BY start_date DESC LIMIT $1;"
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query, limit)
            return [Event(**record) for record in records]

    async def get_event_by_id(self, event_id: UUID) -> Optional[Event]:
        query = "SELECT * FROM events WHERE id = $1;"
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, event_id)
            return Event(**record) if record else None

    async def update_event(self, event_id: UUID, title: str, description: Optional[str], location: Optional[str],
                           start_date: datetime, end_date: datetime) -> Optional[Event]:
        query = """
            UPDATE events
            SET title = $2, description = $3, location = $4,
                start_date = $5, end_date = $6, updated_at = $7
            WHERE id = $1
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(
                query, event_id, title, description, location, start_date, end_date, datetime.now(timezone.utc)
            )
            return Event(**record) if record else None

    async def delete_event(self, event_id: UUID) -> int:
        """Deletes an event together with its attendance rows, in one transaction."""
        async with self._pool.acquire() as connection:
            async with connection.transaction():
                await connection.execute("DELETE FROM attendance WHERE event_id = $1;", event_id)
                status = await connection.execute("DELETE FROM events WHERE id = $1;", event_id)
        return _affected_rows(status)

    # ===== Attendance =====

    async def get_attendance_record(self, student_id: UUID, event_id: UUID) -> Optional[AttendanceRecord]:
        query = "SELECT * FROM attendance WHERE student_id = $1 AND event_id = $2;"
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, student_id, event_id)
            return AttendanceRecord(**record) if record else None

    async def record_time_in(self, student_id: UUID, event_id: UUID, time_in: datetime,
                             recorded_by: Optional[str] = None) -> Optional[AttendanceRecord]:
        """
        Creates the (student, event) row with a time-in, or fills the time-in of a
        row that has none yet. Returns None, without writing, when the pair
        already has a time-in.
        """
        query = """
            INSERT INTO attendance (student_id, event_id, time_in, status, recorded_by, updated_at)
            VALUES ($1, $2, $3, $4, $5, $3)
            ON CONFLICT (student_id, event_id) DO UPDATE SET
                time_in = EXCLUDED.time_in,
                status = EXCLUDED.status,
                recorded_by = COALESCE(EXCLUDED.recorded_by, attendance.recorded_by),
                updated_at = EXCLUDED.updated_at
            WHERE attendance.time_in IS NULL
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(
                query, student_id, event_id, time_in, AttendanceStatus.PRESENT.value, recorded_by
            )
            return AttendanceRecord(**record) if record else None

    async def record_time_out(self, student_id: UUID, event_id: UUID, time_out: datetime) -> Optional[AttendanceRecord]:
        """
        Sets the time-out of a checked-in, not yet checked-out row. Returns None,
        without writing, for any other state.
        """
        query = """
            UPDATE attendance
            SET time_out = GREATEST($3, time_in), updated_at = $3
            WHERE student_id = $1 AND event_id = $2
              AND time_in IS NOT NULL AND time_out IS NULL
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, student_id, event_id, time_out)
            return AttendanceRecord(**record) if record else None

    async def update_attendance_status(self, record_id: UUID, status: AttendanceStatus,
                                       recorded_by: Optional[str] = None,
                                       event_id: Optional[UUID] = None) -> Optional[AttendanceRecord]:
        """Sets the status of one record. With `event_id`, only a record of that event is touched."""
        query = """
            UPDATE attendance
            SET status = $2, recorded_by = COALESCE($3, recorded_by), updated_at = $4
            WHERE id = $1 AND ($5::uuid IS NULL OR event_id = $5)
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, record_id, status.value, recorded_by, datetime.now(timezone.utc), event_id)
            return AttendanceRecord(**record) if record else None

    async def get_event_attendees(self, event_id: UUID) -> List[AttendeeRecord]:
        """Every attendance row of an event joined with its student."""
        query = """
            SELECT a.*,
                   s.id AS s_id, s.student_id AS s_student_id, s.name AS s_name,
                   s.email AS s_email, s.qr_code AS s_qr_code,
                   s.created_at AS s_created_at, s.updated_at AS s_updated_at
            FROM attendance a
            JOIN students s ON s.id = a.student_id
            WHERE a.event_id = $1
            ORDER BY s.name;
        """
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query, event_id)

        attendees = []
        for record in records:
            row = dict(record)
            student = Student(**{key[2:]: row.pop(key) for key in list(row) if key.startswith("s_")})
            attendees.append(AttendeeRecord(**row, student=student))
        return attendees

    async def get_attendance_records(self, event_ids: Optional[List[UUID]] = None) -> List[AttendanceRecord]:
        """All attendance rows, or only those of the given events."""
        async with self._pool.acquire() as connection:
            if event_ids is None:
                records = await connection.fetch("SELECT * FROM attendance;")
            else:
                records = await connection.fetch("SELECT * FROM attendance WHERE event_id = ANY($1);", event_ids)
            return [AttendanceRecord(**record) for record in records]

    # ===== Profiles =====

    async def get_profile(self, profile_id: str) -> Optional[Profile]:
        query = "SELECT * FROM profiles WHERE id = $1;"
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, profile_id)
            return Profile(**record) if record else None

    async def upsert_profile(self, profile_id: str, full_name: Optional[str]) -> Profile:
        query = """
            INSERT INTO profiles (id, full_name)
            VALUES ($1, $2)
            ON CONFLICT (id) DO UPDATE SET
                full_name = EXCLUDED.full_name,
                updated_at = now()
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, profile_id, full_name)
            return Profile(**record)
