from unittest.mock import MagicMock, patch

import pytest

from supervision.pdf.factory import PdfExtractorFactory
from supervision.pdf.pdfplumber_adapter import PdfPlumberAdapter
from supervision.pdf.pymupdf_adapter import PyMuPdfAdapter


def _make_settings(pdf_engine: str, **overrides: object):  # type: ignore[no-untyped-def]
    """Create a minimal Settings-like object with only the pdf fields."""
    with patch("supervision.config.settings.Settings") as mock_cls:
        settings = mock_cls.return_value
        settings.pdf_engine = pdf_engine
        for name, value in overrides.items():
            setattr(settings, name, value)
        return settings


class TestPdfExtractorFactory:
    def test_creates_pdfplumber_adapter(self) -> None:
        adapter = PdfExtractorFactory.create(_make_settings("pdfplumber"))
        assert isinstance(adapter, PdfPlumberAdapter)

    def test_creates_pymupdf_adapter(self) -> None:
        adapter = PdfExtractorFactory.create(_make_settings("pymupdf"))
        assert isinstance(adapter, PyMuPdfAdapter)

    @pytest.mark.parametrize("engine", ["pdfplumber", "pymupdf"])
    def test_adapter_reports_its_engine(self, engine: str) -> None:
        assert PdfExtractorFactory.create(_make_settings(engine)).engine == engine

    def test_is_case_insensitive(self) -> None:
        adapter = PdfExtractorFactory.create(_make_settings("PdfPlumber"))
        assert isinstance(adapter, PdfPlumberAdapter)

    @patch("supervision.pdf.factory.LlmWhispererAdapter")
    def test_creates_llmwhisperer_adapter(self, mock_adapter_cls: MagicMock) -> None:
        settings = _make_settings(
            "llmwhisperer",
            llmwhisperer_api_key="key",
            llmwhisperer_base_url="https://whisper.test",
            llmwhisperer_mode="form",
            llmwhisperer_wait_timeout_seconds=90,
            llmwhisperer_poll_interval_seconds=3,
        )

        PdfExtractorFactory.create(settings)

        mock_adapter_cls.assert_called_once_with(
            api_key="key",
            base_url="https://whisper.test",
            mode="form",
            wait_timeout_seconds=90,
            poll_interval_seconds=3,
        )

    def test_llmwhisperer_requires_api_key(self) -> None:
        settings = _make_settings(
            "llmwhisperer",
            llmwhisperer_api_key="",
            llmwhisperer_base_url="https://whisper.test",
            llmwhisperer_mode="form",
            llmwhisperer_wait_timeout_seconds=90,
            llmwhisperer_poll_interval_seconds=3,
        )
        with pytest.raises(ValueError, match="llmwhisperer_api_key is required"):
            PdfExtractorFactory.create(settings)

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            PdfExtractorFactory.create(_make_settings("unknown"))

