import queue
import threading


class JobQueue:
    """In-process queue of document ids waiting for background processing.

    An id already waiting is not queued twice. Ids that a worker has already
    taken can be queued again, so a re-trigger may run alongside a job that
    is still in flight; the last write to the document wins.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[str] = queue.Queue()
        self._waiting: set[str] = set()
        self._lock = threading.Lock()

    def enqueue(self, document_id: str) -> bool:
        """Queue a document id. Returns False if it was already waiting."""
        with self._lock:
            if document_id in self._waiting:
                return False
            self._waiting.add(document_id)
            self._queue.put(document_id)
        return True

    def next(self, timeout: float) -> str | None:
        """Take the next waiting id, or None if nothing arrives within timeout."""
        try:
            document_id = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        with self._lock:
            self._waiting.discard(document_id)
        return document_id

    def task_done(self) -> None:
        self._queue.task_done()

    def __len__(self) -> int:
        with self._lock:
            return len(self._waiting)
