# app/mice/api/schemas/staff.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

from ...models.db_models import StaffRole


class StaffUser(BaseModel):
    """The authenticated staff member behind a request."""
    id: str
    email: Optional[str] = None


# Internal representation of the JWT claims we use
class TokenData(BaseModel):
    sub: Optional[str] = None
    email: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    full_name: str = Field(..., min_length=2, description="Name shown on reports and print-outs.")


class ProfileResponse(BaseModel):
    id: str
    full_name: Optional[str] = None
    role: StaffRole
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
