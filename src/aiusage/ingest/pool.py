"""Bounded worker pool that runs ingestion jobs off the request path."""
from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor

from aiusage.ingest.job import IngestionJobRunner
from aiusage.logging import logger
from aiusage.models.ingest import IngestStatus


class IngestionWorkerPool:
    """Fire-and-forget job launcher with at most ``max_workers`` jobs in flight.

    Constructed once at application start-up and passed to whoever submits
    jobs; there is no module-level instance.
    """

    def __init__(self, max_workers: int, runner: IngestionJobRunner | None = None) -> None:
        self._runner = runner or IngestionJobRunner()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="aiusage-ingest",
        )
        self._inflight: dict[str, Future] = {}
        self._lock = threading.Lock()

    def submit(self, request_id: str) -> Future:
        future = self._executor.submit(self._runner.run, request_id)
        with self._lock:
            self._inflight[request_id] = future
        future.add_done_callback(lambda f, rid=request_id: self._on_done(rid, f))
        return future

    def _on_done(self, request_id: str, future: Future) -> None:
        with self._lock:
            self._inflight.pop(request_id, None)
        exc = future.exception()
        if exc is not None:
            logger.error(f"Ingestion job {request_id} crashed: {exc!r}")

    def wait(self, request_id: str, timeout: float | None = None) -> IngestStatus | None:
        """Block until *request_id* finishes. Returns None if it is not in flight."""
        with self._lock:
            future = self._inflight.get(request_id)
        if future is None:
            return None
        return future.result(timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
