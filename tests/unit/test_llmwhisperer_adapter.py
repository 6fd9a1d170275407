import httpx
import pytest

from supervision.pdf.exceptions import ExtractionTimeoutError, PdfExtractionError
from supervision.pdf.llmwhisperer_adapter import LlmWhispererAdapter, strip_line_markers


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _make_adapter(handler: object, clock: _FakeClock, **kwargs: object) -> LlmWhispererAdapter:
    client = httpx.Client(
        base_url="https://whisper.test/api/v2",
        transport=httpx.MockTransport(handler),  # type: ignore[arg-type]
    )
    return LlmWhispererAdapter(
        api_key="key",
        base_url="https://whisper.test/api/v2",
        client=client,
        sleep=clock.sleep,
        clock=clock,
        poll_interval_seconds=5,
        **kwargs,  # type: ignore[arg-type]
    )


def _service(statuses: list[str], result_text: str = "Techos [X]") -> object:
    """Handler that walks through the given statuses, one per status call."""
    remaining = list(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/whisper"):
            return httpx.Response(202, json={"whisper_hash": "abc123"})
        if request.url.path.endswith("/whisper-status"):
            status = remaining.pop(0) if len(remaining) > 1 else remaining[0]
            return httpx.Response(200, json={"status": status, "message": "bad scan"})
        if request.url.path.endswith("/whisper-retrieve"):
            return httpx.Response(200, json={"result_text": result_text})
        return httpx.Response(404)

    return handler


class TestStripLineMarkers:
    def test_removes_numbered_prefixes(self) -> None:
        assert strip_line_markers("[1] Techos [X]\n  [12] Pisos [ ]") == "Techos [X]\nPisos [ ]"

    def test_keeps_checkboxes(self) -> None:
        assert strip_line_markers("Techos [X] [ ]") == "Techos [X] [ ]"


class TestLlmWhispererAdapter:
    def test_submit_poll_retrieve(self) -> None:
        clock = _FakeClock()
        adapter = _make_adapter(
            _service(["processing", "processing", "processed"], "[1] Techos [X]\n"),
            clock,
        )

        assert adapter.extract(b"%PDF") == "Techos [X]"
        assert clock.sleeps == [5, 5]

    def test_submit_sends_form_mode(self) -> None:
        seen: list[httpx.Request] = []
        inner = _service(["processed"])

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return inner(request)  # type: ignore[operator]

        _make_adapter(handler, _FakeClock()).extract(b"%PDF-bytes")

        submit = seen[0]
        assert submit.method == "POST"
        assert submit.url.params["mode"] == "form"
        assert submit.url.params["lang"] == "spa"
        assert submit.content == b"%PDF-bytes"
        assert seen[-1].url.params["whisper_hash"] == "abc123"

    def test_failed_status_raises(self) -> None:
        adapter = _make_adapter(_service(["error"]), _FakeClock())
        with pytest.raises(PdfExtractionError, match="bad scan"):
            adapter.extract(b"%PDF")

    def test_wait_timeout(self) -> None:
        clock = _FakeClock()
        adapter = _make_adapter(_service(["processing"]), clock, wait_timeout_seconds=12)

        with pytest.raises(ExtractionTimeoutError, match="did not finish within 12s"):
            adapter.extract(b"%PDF")
        assert clock.sleeps == [5, 5, 5]

    def test_missing_hash_raises(self) -> None:
        adapter = _make_adapter(lambda request: httpx.Response(202, json={}), _FakeClock())
        with pytest.raises(PdfExtractionError, match="whisper_hash"):
            adapter.extract(b"%PDF")

    def test_http_error_raises(self) -> None:
        adapter = _make_adapter(lambda request: httpx.Response(401), _FakeClock())
        with pytest.raises(PdfExtractionError, match="request failed"):
            adapter.extract(b"%PDF")

    def test_request_timeout_raises_timeout_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(ExtractionTimeoutError):
            _make_adapter(handler, _FakeClock()).extract(b"%PDF")

    def test_requires_api_key(self) -> None:
        with pytest.raises(ValueError, match="llmwhisperer_api_key is required"):
            LlmWhispererAdapter(api_key="", base_url="https://whisper.test")
