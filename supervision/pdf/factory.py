from supervision.config.settings import Settings
from supervision.pdf.base import BasePdfExtractor
from supervision.pdf.llmwhisperer_adapter import LlmWhispererAdapter
from supervision.pdf.pdfplumber_adapter import PdfPlumberAdapter
from supervision.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Creates the correct PDF extractor based on settings."""

    ENGINES = ("pdfplumber", "pymupdf", "llmwhisperer")

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.lower()
        if engine == "pdfplumber":
            return PdfPlumberAdapter()
        if engine == "pymupdf":
            return PyMuPdfAdapter()
        if engine == "llmwhisperer":
            return LlmWhispererAdapter(
                api_key=settings.llmwhisperer_api_key,
                base_url=settings.llmwhisperer_base_url,
                mode=settings.llmwhisperer_mode,
                wait_timeout_seconds=settings.llmwhisperer_wait_timeout_seconds,
                poll_interval_seconds=settings.llmwhisperer_poll_interval_seconds,
            )
        raise ValueError(f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ENGINES)}")
