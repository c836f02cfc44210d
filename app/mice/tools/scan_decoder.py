# app/mice/tools/scan_decoder.py

import json
from pydantic import ValidationError

from ..models.db_models import Student
from ..models.scan_models import ScanPayload
from ..services.errors import InvalidPayload


def encode_scan_payload(student: Student) -> str:
    """Serializes the content printed into a student's QR code."""
    return json.dumps({
        "id": str(student.id),
        "name": student.name,
        "email": student.email,
    })


def decode_scan_payload(raw: str) -> ScanPayload:
    """
    Parses the text read from a QR code.

    Args:
        raw: The decoded text of the code, expected to be a JSON object
             with at least an `id` field.

    Returns:
        ScanPayload: The parsed payload.

    Raises:
        InvalidPayload: The text is not a JSON object or has no usable `id`.
    """
    if not raw or not raw.strip():
        raise InvalidPayload("Empty QR code payload.")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        raise InvalidPayload("Invalid QR code format.")

    if not isinstance(data, dict) or not data.get("id"):
        raise InvalidPayload("Invalid QR code format.")

    try:
        return ScanPayload.model_validate(data)
    except ValidationError:
        raise InvalidPayload("QR code does not carry a valid student id.")
