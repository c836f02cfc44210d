from pydantic import BaseModel, Field, ConfigDict, EmailStr
from uuid import UUID
from datetime import datetime
from typing import Optional


class StudentCreateRequest(BaseModel):
    """Request model for registering or editing a student."""
    student_id: str = Field(..., min_length=1, description="Student ID is required")
    name: str = Field(..., min_length=2, description="Name must be at least 2 characters")
    email: EmailStr = Field(..., description="A valid email address")


class StudentResponse(BaseModel):
    id: UUID
    student_id: str
    name: str
    email: str
    qr_code: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StudentQRResponse(BaseModel):
    """A student's QR code, both as the encoded text and as a PNG data URI."""
    student: StudentResponse
    payload: str = Field(description="The JSON text stored in the code.")
    image: str = Field(description="data:image/png;base64,... rendering of the code.")
