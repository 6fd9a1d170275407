class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentNotFoundError(ProcessorError):
    """Raised when a document cannot be found in the database."""


class DocumentNotReadyError(ProcessorError):
    """Raised when an operation needs a completed document and it is not."""


class EmptyExtractionError(ProcessorError):
    """Raised when text extraction succeeds but yields no text."""


class NoElementsDetectedError(ProcessorError):
    """Raised when neither the heuristic analyzer nor the AI fallback finds anything."""


class InvalidRequestError(ProcessorError):
    """Raised when caller input (upload, chat message, paging) is unusable."""


class DocumentPersistenceError(ProcessorError):
    """Raised when the database accepts a write but returns no row for it."""
