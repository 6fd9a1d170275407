import httpx
import pytest

from supervision.storage.exceptions import BlobNotFoundError, StorageError
from supervision.storage.http_adapter import HttpBlobStorage


def _make_storage(handler: object) -> HttpBlobStorage:
    client = httpx.Client(
        base_url="https://store.test/bucket",
        transport=httpx.MockTransport(handler),  # type: ignore[arg-type]
    )
    return HttpBlobStorage(base_url="https://store.test/bucket", client=client)


class TestHttpBlobStorage:
    def test_put_uploads_pdf(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201)

        ref = _make_storage(handler).put(b"%PDF-1.4", "informe.pdf")

        assert ref.endswith(".pdf")
        assert seen[0].method == "PUT"
        assert seen[0].url.path == f"/bucket/{ref}"
        assert seen[0].content == b"%PDF-1.4"
        assert seen[0].headers["Content-Type"] == "application/pdf"
        assert seen[0].headers["X-Original-Filename"] == "informe.pdf"

    def test_put_failure_raises_storage_error(self) -> None:
        storage = _make_storage(lambda request: httpx.Response(500))
        with pytest.raises(StorageError, match="Failed to upload blob"):
            storage.put(b"%PDF", "a.pdf")

    def test_get_returns_content(self) -> None:
        storage = _make_storage(lambda request: httpx.Response(200, content=b"%PDF-data"))
        assert storage.get("abc.pdf") == b"%PDF-data"

    def test_get_missing_raises_not_found(self) -> None:
        storage = _make_storage(lambda request: httpx.Response(404))
        with pytest.raises(BlobNotFoundError):
            storage.get("abc.pdf")

    def test_get_server_error_raises_storage_error(self) -> None:
        storage = _make_storage(lambda request: httpx.Response(503))
        with pytest.raises(StorageError, match="Failed to download blob"):
            storage.get("abc.pdf")

    def test_transport_error_raises_storage_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(StorageError):
            _make_storage(handler).get("abc.pdf")

    def test_delete(self) -> None:
        storage = _make_storage(lambda request: httpx.Response(204))
        assert storage.delete("abc.pdf") is True

    def test_delete_missing_returns_false(self) -> None:
        storage = _make_storage(lambda request: httpx.Response(404))
        assert storage.delete("abc.pdf") is False

    def test_sends_bearer_token(self) -> None:
        storage = HttpBlobStorage(base_url="https://store.test/", token="secret")
        assert storage._client.headers["Authorization"] == "Bearer secret"

    def test_requires_base_url(self) -> None:
        with pytest.raises(ValueError, match="storage_http_base_url is required"):
            HttpBlobStorage(base_url="")
