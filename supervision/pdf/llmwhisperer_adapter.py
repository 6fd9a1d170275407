"""Remote extraction through the LLMWhisperer v2 HTTP API.

The service is asynchronous: a document is submitted, its status polled until
it is processed, and the text retrieved. Form mode keeps checkbox glyphs such
as ``[X]`` in the output, which the inspection analyzer relies on.
"""

import re
import time
from collections.abc import Callable

import httpx

from supervision.logging.logger import Log
from supervision.pdf.base import BasePdfExtractor
from supervision.pdf.exceptions import ExtractionTimeoutError, PdfExtractionError

_LINE_MARKER = re.compile(r"^\s*\[\d+\]\s*", re.MULTILINE)

_DONE_STATUSES = {"processed"}
_FAILED_STATUSES = {"error", "failed"}


def strip_line_markers(text: str) -> str:
    """Remove the ``[n]`` prefixes the service puts in front of some lines."""
    return _LINE_MARKER.sub("", text)


class LlmWhispererAdapter(BasePdfExtractor):
    """Submits PDFs to LLMWhisperer and waits for the extracted text."""

    engine = "llmwhisperer"

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        mode: str = "form",
        lang: str = "spa",
        wait_timeout_seconds: int = 180,
        poll_interval_seconds: int = 5,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not api_key:
            raise ValueError("llmwhisperer_api_key is required for pdf_engine=llmwhisperer")
        self._mode = mode
        self._lang = lang
        self._wait_timeout_seconds = wait_timeout_seconds
        self._poll_interval_seconds = poll_interval_seconds
        self._sleep = sleep
        self._clock = clock
        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"unstract-key": api_key},
            timeout=30,
        )

    def extract(self, pdf_bytes: bytes) -> str:
        whisper_hash = self._submit(pdf_bytes)
        Log.info(f"LLMWhisperer accepted document, hash {whisper_hash}")
        self._wait_until_processed(whisper_hash)
        text = self._retrieve(whisper_hash)
        return strip_line_markers(text).strip()

    def _submit(self, pdf_bytes: bytes) -> str:
        response = self._request(
            "POST",
            "/whisper",
            params={"mode": self._mode, "output_mode": "layout_preserving", "lang": self._lang},
            content=pdf_bytes,
            headers={"Content-Type": "application/octet-stream"},
        )
        whisper_hash = response.get("whisper_hash")
        if not whisper_hash:
            raise PdfExtractionError("LLMWhisperer did not return a whisper_hash")
        return str(whisper_hash)

    def _wait_until_processed(self, whisper_hash: str) -> None:
        deadline = self._clock() + self._wait_timeout_seconds
        while True:
            payload = self._request(
                "GET", "/whisper-status", params={"whisper_hash": whisper_hash}
            )
            status = str(payload.get("status", "")).lower()
            if status in _DONE_STATUSES:
                return
            if status in _FAILED_STATUSES:
                message = payload.get("message") or "unknown error"
                raise PdfExtractionError(f"LLMWhisperer extraction failed: {message}")
            if self._clock() >= deadline:
                raise ExtractionTimeoutError(
                    f"LLMWhisperer did not finish within {self._wait_timeout_seconds}s "
                    f"(hash {whisper_hash}, last status '{status}')"
                )
            Log.debug(f"LLMWhisperer status for {whisper_hash}: {status}")
            self._sleep(self._poll_interval_seconds)

    def _retrieve(self, whisper_hash: str) -> str:
        payload = self._request(
            "GET", "/whisper-retrieve", params={"whisper_hash": whisper_hash}
        )
        return str(payload.get("result_text") or "")

    def _request(self, method: str, url: str, **kwargs: object) -> dict[str, object]:
        try:
            response = self._client.request(method, url, **kwargs)  # type: ignore[arg-type]
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ExtractionTimeoutError(f"LLMWhisperer request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise PdfExtractionError(f"LLMWhisperer request failed: {exc}") from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise PdfExtractionError(f"LLMWhisperer returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise PdfExtractionError("LLMWhisperer returned an unexpected payload")
        return payload
