import logging
from typing import Optional

from ..db.db_client import AsyncPostgresClient
from ..models.db_models import Profile
from .errors import StoreUnavailable

logger = logging.getLogger(__name__)


class StaffService:
    """Profile of the staff member using the scanner and dashboards."""

    def __init__(self, db_client: AsyncPostgresClient):
        self.db_client = db_client

    async def get_profile(self, staff_id: str) -> Profile:
        """Returns the stored profile, or a blank one for staff that never saved theirs."""
        try:
            profile = await self.db_client.get_profile(staff_id)
        except Exception as e:
            logger.error(f"Error while loading profile of '{staff_id}'.", exc_info=True)
            raise StoreUnavailable("Failed to load profile.") from e
        return profile or Profile(id=staff_id)

    async def update_profile(self, staff_id: str, full_name: Optional[str]) -> Profile:
        try:
            profile = await self.db_client.upsert_profile(staff_id, full_name)
        except Exception as e:
            logger.error(f"Error while updating profile of '{staff_id}'.", exc_info=True)
            raise StoreUnavailable("Failed to update profile.") from e
        logger.info(f"Profile of '{staff_id}' updated.")
        return profile
