class PdfExtractionError(Exception):
    """Raised when text cannot be extracted from a PDF."""


class ExtractionTimeoutError(PdfExtractionError):
    """Raised when a remote extraction does not finish within its wait timeout."""
