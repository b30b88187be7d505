"""Repository for IngestionJob status records. Caller owns the transaction.

The only writes are ``create`` (first write), ``mark_processing`` and
``replace_terminal``; there are no field-level partial updates.
"""
from __future__ import annotations
from datetime import datetime, timezone
from sqlmodel import Session, select
from aiusage.domain.status import ensure_transition
from aiusage.models.ingest import IngestionJob, IngestStatus


class IngestionJobRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    def get_by_request_id(self, request_id: str) -> IngestionJob | None:
        return self._s.exec(
            select(IngestionJob).where(IngestionJob.request_id == request_id)
        ).first()

    def create(
        self,
        *,
        source_path: str,
        submitted_by: str | None = None,
        original_filename: str | None = None,
        request_id: str | None = None,
    ) -> IngestionJob:
        job = IngestionJob(
            source_path=source_path,
            submitted_by=submitted_by,
            original_filename=original_filename,
        )
        if request_id is not None:
            job.request_id = request_id
        self._s.add(job)
        self._s.flush()  # get generated PK without committing
        return job

    def mark_processing(self, job: IngestionJob) -> IngestionJob:
        ensure_transition(job.status, IngestStatus.PROCESSING)
        job.status = IngestStatus.PROCESSING
        self._s.add(job)
        self._s.flush()
        return job

    def replace_terminal(
        self,
        job: IngestionJob,
        *,
        status: IngestStatus,
        total_records: int,
        successful_records: int,
        failed_records: int,
        error_message: str | None,
        completed_at: datetime | None = None,
    ) -> IngestionJob:
        ensure_transition(job.status, status)
        job.status = status
        job.total_records = total_records
        job.successful_records = successful_records
        job.failed_records = failed_records
        job.error_message = error_message
        job.completed_at = completed_at or datetime.now(timezone.utc)
        self._s.add(job)
        self._s.flush()
        return job
