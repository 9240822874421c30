import io
from collections.abc import Callable

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def _build_pdf(page_texts: list[str]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for text in page_texts:
        if text:
            c.drawString(72, 720, text)
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def make_pdf() -> Callable[[int], bytes]:
    """Build a letter-size PDF with ``pages`` pages, each labelled with its number."""

    def _make(pages: int) -> bytes:
        return _build_pdf([f"Page {n} content" for n in range(1, pages + 1)])

    return _make


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _build_pdf(["Hello PDF World"])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _build_pdf(["Page one content", "Page two content"])


@pytest.fixture()
def blank_pdf_bytes() -> bytes:
    """Generate a valid PDF with a single blank page."""
    return _build_pdf([""])
