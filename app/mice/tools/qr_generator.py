import io
import base64
import qrcode

from ..models.db_models import Student
from .scan_decoder import encode_scan_payload


def generate_student_qr(student: Student, box_size: int = 10, border: int = 4) -> str:
    """
    Renders a student's scan payload as a PNG QR code.

    Returns:
        str: A `data:image/png;base64,...` URI ready to be embedded in a page.
    """
    qr = qrcode.QRCode(
        version=None,  # fit to the payload
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(encode_scan_payload(student))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffered = io.BytesIO()
    img.save(buffered, format="PNG")
    img_str = base64.b64encode(buffered.getvalue()).decode()
    return f"data:image/png;base64,{img_str}"
