import uuid
from pathlib import Path

from supervision.storage.base import BaseBlobStorage
from supervision.storage.exceptions import BlobNotFoundError, StorageError


class LocalFileStorage(BaseBlobStorage):
    """Stores uploads as files under a root directory: {root}/{uuid}.pdf"""

    storage_type = "local"

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def put(self, content: bytes, filename: str) -> str:
        ref = f"{uuid.uuid4()}{self._suffix(filename)}"
        path = self._resolve_path(ref)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as exc:
            raise StorageError(f"Failed to write {path}: {exc}") from exc
        return ref

    def get(self, ref: str) -> bytes:
        path = self._resolve_path(ref)
        if not path.exists():
            raise BlobNotFoundError(f"File not found: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Failed to read {path}: {exc}") from exc

    def delete(self, ref: str) -> bool:
        path = self._resolve_path(ref)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as exc:
            raise StorageError(f"Failed to delete {path}: {exc}") from exc
        return True

    def _resolve_path(self, ref: str) -> Path:
        path = (self._files_root / ref).resolve()
        if self._files_root.resolve() not in path.parents:
            raise StorageError(f"Reference escapes storage root: {ref}")
        return path

    @staticmethod
    def _suffix(filename: str) -> str:
        suffix = Path(filename).suffix.lower()
        return suffix if suffix[1:].isalnum() else ".pdf"
