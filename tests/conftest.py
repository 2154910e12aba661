import io

import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from coa_processor.rendering.models import ExtractedRecord


def make_image_bytes(width: int, height: int, fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=(26, 55, 107)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def supplier_coa_pdf_bytes() -> bytes:
    """A text-layer supplier COA long enough to skip the vision fallback."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    lines = [
        "CERTIFICATE OF ANALYSIS",
        "Product: Sodium Chloride    CAS No: 7647-14-5",
        "Lot No: L123    Date of Manufacture: 2025-01-10",
        "Test              Specification        Result",
        "Purity            >= 99%               99.5%",
        "Appearance        White powder         Conforms",
    ]
    y = 720
    for line in lines:
        c.drawString(72, y, line)
        y -= 18
    c.save()
    return buf.getvalue()


@pytest.fixture()
def image_factory():  # type: ignore[no-untyped-def]
    return make_image_bytes


@pytest.fixture()
def png_bytes() -> bytes:
    return make_image_bytes(400, 200, "PNG")


@pytest.fixture()
def jpeg_bytes() -> bytes:
    return make_image_bytes(300, 600, "JPEG")


@pytest.fixture()
def sodium_chloride_record() -> ExtractedRecord:
    return ExtractedRecord.from_dict({
        "productName": "Sodium Chloride",
        "lotNo": "L123",
        "specifications": [
            {"parameter": "Purity", "specification": "≥99%", "result": "99.5%"},
        ],
    })
