import uuid

import httpx

from supervision.storage.base import BaseBlobStorage
from supervision.storage.exceptions import BlobNotFoundError, StorageError


class HttpBlobStorage(BaseBlobStorage):
    """Stores uploads in a remote object store that speaks plain PUT/GET/DELETE.

    Objects live at {base_url}/{ref}; the bearer token, when set, is sent on
    every request.
    """

    storage_type = "http"

    def __init__(
        self,
        *,
        base_url: str,
        token: str = "",
        timeout_seconds: int = 30,
        client: httpx.Client | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("storage_http_base_url is required for storage_backend=http")
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout_seconds,
        )

    def put(self, content: bytes, filename: str) -> str:
        ref = f"{uuid.uuid4()}.pdf"
        try:
            response = self._client.put(
                f"/{ref}",
                content=content,
                headers={
                    "Content-Type": "application/pdf",
                    "X-Original-Filename": filename.encode("ascii", "replace").decode(),
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise StorageError(f"Failed to upload blob: {exc}") from exc
        return ref

    def get(self, ref: str) -> bytes:
        try:
            response = self._client.get(f"/{ref}")
        except httpx.HTTPError as exc:
            raise StorageError(f"Failed to download blob {ref}: {exc}") from exc
        if response.status_code == 404:
            raise BlobNotFoundError(f"Blob {ref} not found")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StorageError(f"Failed to download blob {ref}: {exc}") from exc
        return response.content

    def delete(self, ref: str) -> bool:
        try:
            response = self._client.delete(f"/{ref}")
        except httpx.HTTPError as exc:
            raise StorageError(f"Failed to delete blob {ref}: {exc}") from exc
        if response.status_code == 404:
            return False
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StorageError(f"Failed to delete blob {ref}: {exc}") from exc
        return True
