from abc import ABC, abstractmethod


class BaseBlobStorage(ABC):
    """Contract for all blob storage backends.

    A reference returned by put() is opaque to callers and is only ever
    handed back to the same backend.
    """

    storage_type: str

    @abstractmethod
    def put(self, content: bytes, filename: str) -> str:
        """Store bytes and return the reference to retrieve them.

        Raises:
            StorageError: if the backend cannot persist the content.
        """

    @abstractmethod
    def get(self, ref: str) -> bytes:
        """Return the stored bytes.

        Raises:
            BlobNotFoundError: if nothing is stored under ref.
            StorageError: on any other backend failure.
        """

    @abstractmethod
    def delete(self, ref: str) -> bool:
        """Remove stored bytes. Returns False when nothing was stored under ref."""
