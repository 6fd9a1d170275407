from pathlib import Path

from supervision.config.settings import Settings
from supervision.storage.base import BaseBlobStorage
from supervision.storage.database_adapter import DatabaseBlobStorage
from supervision.storage.exceptions import UnsupportedStorageTypeError
from supervision.storage.http_adapter import HttpBlobStorage
from supervision.storage.local_adapter import LocalFileStorage


class StorageRegistry:
    """Resolves a document's storage_type tag to the backend that holds its bytes.

    New uploads go to the default backend; reads and deletes go to whichever
    backend the document was stored with.
    """

    def __init__(self, backends: list[BaseBlobStorage], default_type: str) -> None:
        self._backends = {backend.storage_type: backend for backend in backends}
        if default_type not in self._backends:
            raise UnsupportedStorageTypeError(
                f"Default storage '{default_type}' is not registered. "
                f"Choose from: {sorted(self._backends)}"
            )
        self._default_type = default_type

    @property
    def default(self) -> BaseBlobStorage:
        return self._backends[self._default_type]

    def resolve(self, storage_type: str) -> BaseBlobStorage:
        backend = self._backends.get(storage_type)
        if backend is None:
            raise UnsupportedStorageTypeError(f"storage_type '{storage_type}' is not supported")
        return backend

    @classmethod
    def build(cls, settings: Settings) -> "StorageRegistry":
        """Register every backend the settings allow."""
        backends: list[BaseBlobStorage] = [
            LocalFileStorage(Path(settings.storage_local_root)),
            DatabaseBlobStorage(),
        ]
        if settings.storage_http_base_url:
            backends.append(
                HttpBlobStorage(
                    base_url=settings.storage_http_base_url,
                    token=settings.storage_http_token,
                    timeout_seconds=settings.storage_http_timeout_seconds,
                )
            )
        return cls(backends, default_type=settings.storage_backend.lower())
