"""HTTP client that waits for a document's analysis.

Polls the analyze endpoint until the analysis is ready. Repeated
"processing" replies are expected and tolerated. Once a document has been
loading for longer than a threshold, one forced reload is requested.
Timeouts, transport errors and unexpected statuses each use up one retry,
and running out of retries leaves the document in a terminal failed state
that later calls do not poll again.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from supervision.logging.logger import Log


class PollState(str, Enum):
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class PollResult:
    state: PollState
    payload: dict[str, Any] = field(default_factory=dict)
    message: str = ""
    errors: int = 0
    reloaded: bool = False


class AnalysisPoller:
    def __init__(
        self,
        *,
        base_url: str = "http://localhost:8000",
        client: httpx.Client | None = None,
        poll_interval_seconds: float = 5.0,
        loading_threshold_seconds: float = 60.0,
        max_wait_seconds: float = 600.0,
        max_retries: int = 3,
        retry_backoff_seconds: float = 1.0,
        analyze_timeout_seconds: float = 20.0,
        fix_timeout_seconds: float = 30.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client or httpx.Client(base_url=base_url.rstrip("/"))
        self._poll_interval_seconds = poll_interval_seconds
        self._loading_threshold_seconds = loading_threshold_seconds
        self._max_wait_seconds = max_wait_seconds
        self._max_retries = max_retries
        self._retry_backoff_seconds = retry_backoff_seconds
        self._analyze_timeout_seconds = analyze_timeout_seconds
        self._fix_timeout_seconds = fix_timeout_seconds
        self._sleep = sleep
        self._clock = clock
        self._lock = threading.Lock()
        self._in_flight: set[str] = set()
        self._failed: dict[str, str] = {}

    def wait_for_analysis(self, document_id: str) -> PollResult:
        """Poll until the analysis is ready or the document is given up on."""
        with self._lock:
            failure = self._failed.get(document_id)
        if failure is not None:
            return PollResult(state=PollState.FAILED, message=failure)

        started = self._clock()
        errors = 0
        reloaded = False
        while True:
            elapsed = self._clock() - started
            if elapsed >= self._max_wait_seconds:
                return self._give_up(
                    document_id,
                    f"El análisis no estuvo listo tras {int(elapsed)} segundos",
                    errors,
                    reloaded,
                )

            refresh = False
            if not reloaded and elapsed >= self._loading_threshold_seconds:
                refresh = self._claim(document_id)
                reloaded = True
                if refresh:
                    Log.info(f"Document {document_id} loading for {int(elapsed)}s, forcing reload")

            try:
                response = self._client.post(
                    f"/documents/{document_id}/analyze",
                    params={"refresh": "true"} if refresh else None,
                    timeout=self._analyze_timeout_seconds,
                )
            except httpx.TimeoutException:
                errors += 1
                message = "El servidor tardó demasiado en responder"
            except httpx.TransportError as exc:
                errors += 1
                message = f"Error de conexión con el servidor: {exc}"
            else:
                if response.status_code == 200:
                    return PollResult(
                        state=PollState.READY,
                        payload=response.json(),
                        errors=errors,
                        reloaded=reloaded,
                    )
                if response.status_code == 202:
                    self._sleep(self._poll_interval_seconds)
                    continue
                if response.status_code == 404:
                    return self._give_up(document_id, "Documento no encontrado", errors, reloaded)
                errors += 1
                message = self._error_message(response)
            finally:
                if refresh:
                    self._release(document_id)

            Log.warning(
                f"Analysis poll for {document_id} failed ({errors}/{self._max_retries}): {message}"
            )
            if errors >= self._max_retries:
                return self._give_up(document_id, message, errors, reloaded)
            self._sleep(self._retry_backoff_seconds * errors)

    def fix_analysis(self, document_id: str) -> dict[str, Any] | None:
        """Ask the server to rebuild the analysis.

        Returns None when a rebuild for the same document is already running.
        A successful rebuild clears a previous terminal failure. Transport
        errors and unreadable replies come back as a failure payload.
        """
        if not self._claim(document_id):
            Log.info(f"Fix for document {document_id} already in progress, skipping")
            return None
        try:
            response = self._client.post(
                f"/documents/{document_id}/fix-analysis",
                timeout=self._fix_timeout_seconds,
            )
        except httpx.TimeoutException:
            return self._fix_failed(document_id, "El servidor tardó demasiado en responder")
        except httpx.TransportError as exc:
            return self._fix_failed(document_id, f"Error de conexión con el servidor: {exc}")
        finally:
            self._release(document_id)

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            return self._fix_failed(document_id, self._error_message(response))
        if response.status_code == 200:
            self.reset(document_id)
        return payload

    def reset(self, document_id: str) -> None:
        """Forget a terminal failure so the document can be polled again."""
        with self._lock:
            self._failed.pop(document_id, None)

    def _claim(self, document_id: str) -> bool:
        with self._lock:
            if document_id in self._in_flight:
                return False
            self._in_flight.add(document_id)
            return True

    def _release(self, document_id: str) -> None:
        with self._lock:
            self._in_flight.discard(document_id)

    def _give_up(self, document_id: str, message: str, errors: int, reloaded: bool) -> PollResult:
        with self._lock:
            self._failed[document_id] = message
        Log.error(f"Giving up on analysis of document {document_id}: {message}")
        return PollResult(state=PollState.FAILED, message=message, errors=errors, reloaded=reloaded)

    @staticmethod
    def _fix_failed(document_id: str, message: str) -> dict[str, Any]:
        Log.warning(f"Fix of document {document_id} failed: {message}")
        return {"success": False, "error": message}

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"
        if isinstance(body, dict):
            return str(body.get("message") or body.get("error") or f"HTTP {response.status_code}")
        return f"HTTP {response.status_code}"
