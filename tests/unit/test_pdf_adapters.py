import pytest

from supervision.inspection.analyzer import CleaningStatusAnalyzer
from supervision.inspection.states import InspectionState
from supervision.pdf.exceptions import PdfExtractionError
from supervision.pdf.pdfplumber_adapter import PdfPlumberAdapter
from supervision.pdf.pymupdf_adapter import PyMuPdfAdapter


class TestPdfPlumberAdapter:
    def test_extract_returns_text(self, sample_pdf_bytes: bytes) -> None:
        result = PdfPlumberAdapter().extract(sample_pdf_bytes)
        assert "Hello PDF World" in result

    def test_extract_multi_page(self, multi_page_pdf_bytes: bytes) -> None:
        result = PdfPlumberAdapter().extract(multi_page_pdf_bytes)
        assert "Page one content" in result
        assert "Page two content" in result

    def test_extract_empty_pdf_returns_empty_string(self, empty_pdf_bytes: bytes) -> None:
        assert PdfPlumberAdapter().extract(empty_pdf_bytes) == ""

    def test_extract_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(PdfExtractionError):
            PdfPlumberAdapter().extract(b"not a pdf")

    def test_extracted_form_can_be_analyzed(self, inspection_form_pdf_bytes: bytes) -> None:
        text = PdfPlumberAdapter().extract(inspection_form_pdf_bytes)

        by_name = {item.element: item for item in CleaningStatusAnalyzer().analyze(text)}

        assert by_name["Techos"].state is InspectionState.BUENO
        assert by_name["Techos"].observation == "agrietado"
        assert by_name["Pisos"].state is InspectionState.EXCELENTE


class TestPyMuPdfAdapter:
    def test_extract_returns_text(self, sample_pdf_bytes: bytes) -> None:
        result = PyMuPdfAdapter().extract(sample_pdf_bytes)
        assert "Hello PDF World" in result

    def test_extract_multi_page(self, multi_page_pdf_bytes: bytes) -> None:
        result = PyMuPdfAdapter().extract(multi_page_pdf_bytes)
        assert result.index("Page one content") < result.index("Page two content")

    def test_extract_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(PdfExtractionError):
            PyMuPdfAdapter().extract(b"not a pdf")
