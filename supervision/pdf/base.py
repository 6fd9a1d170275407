from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Turns uploaded PDF bytes into the line-oriented text the analyzer reads."""

    engine: str = "base"

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Return the document text, one visual row per line.

        Raises:
            PdfExtractionError: if the engine cannot read the document.
        """
