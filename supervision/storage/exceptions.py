class StorageError(Exception):
    """Base exception for all blob storage errors."""


class UnsupportedStorageTypeError(StorageError):
    """Raised when a document references a storage type with no configured backend."""


class BlobNotFoundError(StorageError):
    """Raised when a reference does not resolve to stored bytes."""
