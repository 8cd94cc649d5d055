"""
Shared fixtures: real PDFs generated with reportlab.
"""

import io

import pytest
from reportlab.pdfgen import canvas as rl_canvas


def build_pdf(pages: int = 1, title: str | None = None, author: str | None = None) -> bytes:
    buf = io.BytesIO()
    c = rl_canvas.Canvas(buf)
    if title:
        c.setTitle(title)
    if author:
        c.setAuthor(author)
    for i in range(pages):
        c.drawString(100, 750, f"This is page {i + 1} of a test document.")
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture
def pdf_bytes() -> bytes:
    return build_pdf(pages=2, title="Annual Report", author="Jane Analyst")


@pytest.fixture
def make_pdf(tmp_path):
    """Factory writing a small PDF under tmp_path and returning its path."""
    def _make(relative: str, pages: int = 1):
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(build_pdf(pages=pages))
        return path
    return _make
