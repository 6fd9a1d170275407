import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

TOP_MARGIN_Y = 720
LINE_STEP = 20


def _render_pdf(*pages: list[str]) -> bytes:
    """Draw each page's rows top-down in the left margin; an empty list gives a blank page."""
    buf = io.BytesIO()
    pdf = canvas.Canvas(buf, pagesize=letter)
    for rows in pages:
        for index, row in enumerate(rows):
            pdf.drawString(72, TOP_MARGIN_Y - index * LINE_STEP, row)
        pdf.showPage()
    pdf.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    return _render_pdf(["Hello PDF World"])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    return _render_pdf(["Page one content"], ["Page two content"])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    return _render_pdf([])


@pytest.fixture()
def inspection_form_pdf_bytes() -> bytes:
    """Two checklist rows laid out the way the inspection form prints them."""
    return _render_pdf(
        [
            "Techos [ ] [X] [ ] [ ]",
            "Observacion: agrietado",
            "Pisos [X] [ ] [ ] [ ]",
        ]
    )
