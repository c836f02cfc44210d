import base64

from app.mice.tools.qr_generator import generate_student_qr
from tests.factories import make_student

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def test_qr_is_png_data_uri():
    image = generate_student_qr(make_student())

    prefix = "data:image/png;base64,"
    assert image.startswith(prefix)
    assert base64.b64decode(image[len(prefix):]).startswith(PNG_SIGNATURE)


def test_qr_differs_per_student():
    first = generate_student_qr(make_student(name="Ada Lovelace"))
    second = generate_student_qr(make_student(name="Grace Hopper", code="S002", email="grace@example.com"))
    assert first != second


def test_larger_boxes_give_larger_image():
    student = make_student()
    small = generate_student_qr(student, box_size=2)
    large = generate_student_qr(student, box_size=12)
    assert len(large) > len(small)
