import threading

from supervision.config.settings import Settings
from supervision.logging.logger import Log
from supervision.worker.job_queue import JobQueue
from supervision.worker.job_runner import JobRunner


class Worker:
    """Consume loop: wait on the queue -> dispatch to the job runner."""

    def __init__(
        self,
        job_queue: JobQueue,
        job_runner: JobRunner,
        settings: Settings,
        name: str = "worker-1",
    ) -> None:
        self._job_queue = job_queue
        self._job_runner = job_runner
        self._settings = settings
        self._name = name
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def run(self, max_jobs: int | None = None) -> None:
        """Main consume loop. Runs until stop() is called.

        If max_jobs is set, stop after processing that many jobs (for testing).
        """
        Log.info(f"{self._name} started, waiting for jobs")
        jobs_done = 0
        while not self._stop_event.is_set():
            if max_jobs is not None and jobs_done >= max_jobs:
                break
            document_id = self._job_queue.next(timeout=self._settings.job_poll_interval_seconds)
            if document_id is None:
                continue
            try:
                self._job_runner.run(document_id)
            finally:
                self._job_queue.task_done()
            jobs_done += 1
        Log.info(f"{self._name} stopped")

    def start(self) -> None:
        self._thread = threading.Thread(target=self.run, name=self._name, daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None


class WorkerPool:
    """Starts and stops a fixed number of workers sharing one queue."""

    def __init__(self, job_queue: JobQueue, job_runner: JobRunner, settings: Settings) -> None:
        self._workers = [
            Worker(job_queue, job_runner, settings, name=f"worker-{index + 1}")
            for index in range(max(1, settings.worker_count))
        ]

    def start(self) -> None:
        for worker in self._workers:
            worker.start()
        Log.info(f"Started {len(self._workers)} background workers")

    def stop(self, timeout: float | None = 5.0) -> None:
        for worker in self._workers:
            worker.stop(timeout)
        Log.info("Background workers stopped")
