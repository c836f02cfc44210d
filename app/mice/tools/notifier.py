import logging
from datetime import datetime
from typing import Optional
import httpx

from ..config.config import settings
from ..models.db_models import Student
from ..services.errors import NotificationFailed

logger = logging.getLogger(__name__)


class EmailNotifier:
    """
    Asks the external email service to send an attendance confirmation.

    Delivery itself (SMTP, templates) belongs to that service; this client only
    posts the request and interprets the answer. One synchronous attempt, no retry.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self._base_url = base_url if base_url is not None else settings.EMAIL_SERVICE_URL
        self._timeout = timeout if timeout is not None else settings.EMAIL_SERVICE_TIMEOUT_SECONDS

    @property
    def enabled(self) -> bool:
        return bool(self._base_url)

    async def send_attendance_confirmation(
        self,
        student: Student,
        event_title: str,
        time_in: Optional[datetime] = None,
        time_out: Optional[datetime] = None
    ) -> str:
        """
        Sends a time-in confirmation (time_in only) or a completion notice
        (time_in and time_out).

        Returns:
            str: The message id assigned by the email service.

        Raises:
            NotificationFailed: The service is not configured, unreachable, or refused the request.
        """
        if not self.enabled:
            raise NotificationFailed("Email service URL is not configured.")
        if time_in is None:
            raise NotificationFailed("Invalid attendance data for email notification.")

        body = {
            "student": {
                "id": str(student.id),
                "student_id": student.student_id,
                "name": student.name,
                "email": student.email,
            },
            "eventTitle": event_title,
            "timeIn": time_in.isoformat(),
            "timeOut": time_out.isoformat() if time_out else None,
        }

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            try:
                response = await client.post(f"{self._base_url.rstrip('/')}/send-email", json=body)
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as e:
                raise NotificationFailed(f"Email service error: {e.response.status_code} - {e.response.text}") from e
            except (httpx.HTTPError, ValueError) as e:
                raise NotificationFailed(f"Email service unreachable: {e}") from e

        if not isinstance(data, dict):
            raise NotificationFailed("Email service returned an unexpected response body.")
        if not data.get("success"):
            raise NotificationFailed(f"Email service refused the request: {data.get('error', 'unknown error')}")

        message_id = data.get("messageId", "")
        logger.info(f"Attendance confirmation for '{student.student_id}' ({event_title}) queued as {message_id!r}.")
        return message_id
