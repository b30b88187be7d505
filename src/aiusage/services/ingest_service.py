"""Ingestion submission service: creates the SUBMITTED record only.

Launching the job is the caller's second phase, after this UoW commits, so
the worker never races the submission transaction.
"""
from __future__ import annotations
from pathlib import Path
from aiusage.config import settings
from aiusage.domain.exceptions import ValidationError
from aiusage.infra.db.uow import UnitOfWork
from aiusage.infra.db.repositories.ingest_job_repository import IngestionJobRepository
from aiusage.infra.storage.uploads import save_upload
from aiusage.logging import logger
from aiusage.models.ingest import IngestStatus, new_request_id
from aiusage.api.schemas.ingest import SubmissionResponse

ACCEPTED_MESSAGE = "File upload request accepted for processing"


class IngestService:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def submit_path(self, file_path: str, submitted_by: str | None = None) -> SubmissionResponse:
        repo = IngestionJobRepository(self._uow.session)
        job = repo.create(
            source_path=file_path,
            submitted_by=submitted_by,
            original_filename=Path(file_path).name,
        )
        self._uow.commit()
        logger.info(f"Accepted ingestion request {job.request_id} for {file_path}")
        return SubmissionResponse(
            request_id=job.request_id, submitted_at=job.submitted_at, message=ACCEPTED_MESSAGE,
        )

    def submit_upload(
        self,
        content: bytes,
        original_filename: str,
        submitted_by: str | None = None,
        uploads_dir: Path | None = None,
    ) -> SubmissionResponse:
        if not original_filename.lower().endswith(".csv"):
            raise ValidationError("Invalid file format. Only CSV files are accepted.")

        request_id = new_request_id()
        stored = save_upload(uploads_dir or settings.uploads_dir, request_id, original_filename, content)

        repo = IngestionJobRepository(self._uow.session)
        job = repo.create(
            source_path=str(stored),
            submitted_by=submitted_by,
            original_filename=original_filename,
            request_id=request_id,
        )
        self._uow.commit()
        logger.info(
            f"Accepted ingestion request {job.request_id} for upload {original_filename!r} "
            f"({len(content)} bytes)"
        )
        return SubmissionResponse(
            request_id=job.request_id, submitted_at=job.submitted_at, message=ACCEPTED_MESSAGE,
        )

    def mark_launch_failed(self, request_id: str, reason: str) -> None:
        """Close out a SUBMITTED job whose worker could not be started."""
        repo = IngestionJobRepository(self._uow.session)
        job = repo.get_by_request_id(request_id)
        if job is None or job.status != IngestStatus.SUBMITTED:
            return
        repo.replace_terminal(
            job,
            status=IngestStatus.FAILED,
            total_records=0,
            successful_records=0,
            failed_records=0,
            error_message=f"Ingestion could not be started: {reason}",
        )
        self._uow.commit()
