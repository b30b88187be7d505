"""Ingestion job: read file, validate rows, persist the valid batch, commit status.

One runner call owns one request id from PROCESSING to its terminal status.
Status writes are whole-record commits, so a concurrent reader sees either
the previous snapshot or the final one, never a half-updated counter set.
"""
from __future__ import annotations

import time
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from aiusage.config import settings
from aiusage.domain.exceptions import (
    AIUsageError, JobTimeoutError, NotFoundError, PersistenceError, SourceFileError,
)
from aiusage.domain.fields import FIELD_REGISTRY, FieldMapping, UsageRecordData
from aiusage.domain.status import classify, is_terminal
from aiusage.domain.validation import RecordAccumulator, validate_row
from aiusage.infra.db.repositories.ingest_job_repository import IngestionJobRepository
from aiusage.infra.db.repositories.usage_repository import UsageRepository
from aiusage.infra.db.uow import UnitOfWork
from aiusage.ingest.reader import open_rows
from aiusage.logging import bind_request_id, logger
from aiusage.models.ingest import IngestStatus


class IngestionJobRunner:
    def __init__(
        self,
        registry: Mapping[str, FieldMapping] = FIELD_REGISTRY,
        *,
        timeout_seconds: float | None = None,
        persist_max_attempts: int | None = None,
        retry_backoff_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._registry = registry
        self._timeout = timeout_seconds or settings.JOB_TIMEOUT_SECONDS
        self._persist_attempts = persist_max_attempts or settings.PERSIST_MAX_ATTEMPTS
        if retry_backoff_seconds is None:
            retry_backoff_seconds = settings.PERSIST_RETRY_BACKOFF_SECONDS
        self._backoff = retry_backoff_seconds
        self._clock = clock

    def run(self, request_id: str) -> IngestStatus:
        """Drive one job to a terminal status and return it."""
        bind_request_id(request_id)
        try:
            return self._run(request_id)
        except NotFoundError:
            raise
        except Exception as exc:
            logger.exception(f"Unexpected failure in ingestion job {request_id}")
            return self._fail_unexpected(request_id, exc)

    def _run(self, request_id: str) -> IngestStatus:
        with UnitOfWork() as uow:
            repo = IngestionJobRepository(uow.session)
            job = repo.get_by_request_id(request_id)
            if job is None:
                raise NotFoundError(f"Ingestion request {request_id} not found")
            if job.status != IngestStatus.SUBMITTED:
                logger.warning(f"Job {request_id} already {job.status.value}; not reprocessing")
                return job.status
            source_path = job.source_path
            repo.mark_processing(job)

        logger.info(f"Starting ingestion of {source_path}")
        deadline = self._clock() + self._timeout

        try:
            acc = self._validate(Path(source_path), deadline)
        except (SourceFileError, JobTimeoutError) as exc:
            logger.error(f"Ingestion aborted: {exc.message}")
            return self._commit(request_id, IngestStatus.FAILED, error_message=exc.message)

        if acc.total_records == 0:
            return self._commit(
                request_id, IngestStatus.FAILED, error_message="Source file contains no data rows.",
            )

        status = classify(acc.successful_records, acc.failed_records)
        try:
            self._check_deadline(deadline)
            return self._commit(
                request_id,
                status,
                accumulator=acc,
                error_message=acc.error_summary(),
                staged=acc.staged,
            )
        except JobTimeoutError as exc:
            logger.error(f"Ingestion aborted: {exc.message}")
            return self._commit(request_id, IngestStatus.FAILED, error_message=exc.message)
        except PersistenceError as exc:
            logger.error(exc.message)
            message = exc.message
            if acc.error_summary():
                message = f"{message} Row errors: {acc.error_summary()}"
            return self._commit(
                request_id, IngestStatus.FAILED, accumulator=acc, error_message=message,
            )

    def _validate(self, path: Path, deadline: float) -> RecordAccumulator:
        acc = RecordAccumulator(
            max_summary_rows=settings.ERROR_SUMMARY_MAX_ROWS,
            max_summary_chars=settings.ERROR_SUMMARY_MAX_CHARS,
        )
        with open_rows(path) as rows:
            for row_index, row in rows:
                self._check_deadline(deadline)
                acc.add(validate_row(row, row_index, self._registry))
        logger.info(
            f"Validated {acc.total_records} row(s): "
            f"{acc.successful_records} ok, {acc.failed_records} failed"
        )
        return acc

    def _check_deadline(self, deadline: float) -> None:
        if self._clock() > deadline:
            raise JobTimeoutError(f"Ingestion exceeded the time limit of {self._timeout:g}s.")

    def _commit(
        self,
        request_id: str,
        status: IngestStatus,
        *,
        accumulator: RecordAccumulator | None = None,
        error_message: str | None = None,
        staged: Sequence[UsageRecordData] = (),
    ) -> IngestStatus:
        """Write the staged batch (if any) and the terminal status in one transaction.

        With staged records the write is retried with a linear backoff;
        exhausting the attempts raises ``PersistenceError`` and nothing from
        the batch is kept. Domain errors are not retried.
        """
        successful = accumulator.successful_records if accumulator else 0
        failed = accumulator.failed_records if accumulator else 0
        attempts = self._persist_attempts if staged else 1
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                with UnitOfWork() as uow:
                    if staged:
                        UsageRepository(uow.session).upsert_many(staged, request_id=request_id)
                    repo = IngestionJobRepository(uow.session)
                    job = repo.get_by_request_id(request_id)
                    repo.replace_terminal(
                        job,
                        status=status,
                        total_records=successful + failed,
                        successful_records=successful,
                        failed_records=failed,
                        error_message=error_message,
                    )
            except AIUsageError:
                raise
            except Exception as exc:
                last_exc = exc
                logger.warning(f"Commit attempt {attempt}/{attempts} failed: {exc!r}")
                if attempt < attempts and self._backoff > 0:
                    time.sleep(self._backoff * attempt)
                continue
            logger.info(
                f"Final status {status.value}: total={successful + failed}, "
                f"successful={successful}, failed={failed}"
            )
            return status

        if staged:
            raise PersistenceError(
                f"Validated {len(staged)} record(s) but persistence did not complete "
                f"after {attempts} attempt(s): {last_exc}"
            ) from last_exc
        raise last_exc

    def _fail_unexpected(self, request_id: str, exc: Exception) -> IngestStatus:
        with UnitOfWork() as uow:
            repo = IngestionJobRepository(uow.session)
            job = repo.get_by_request_id(request_id)
            if job is None or is_terminal(job.status):
                return job.status if job else IngestStatus.FAILED
            repo.replace_terminal(
                job,
                status=IngestStatus.FAILED,
                total_records=0,
                successful_records=0,
                failed_records=0,
                error_message=f"Internal error during ingestion: {exc}",
            )
        return IngestStatus.FAILED
