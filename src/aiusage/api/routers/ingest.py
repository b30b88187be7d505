"""Ingest router: two-phase pattern: commit the SUBMITTED record, then launch."""
from fastapi import APIRouter, Depends, Form, UploadFile
from aiusage.api.deps import get_uow, get_worker_pool
from aiusage.api.schemas.ingest import StatusSnapshot, SubmissionResponse, UploadPathRequest
from aiusage.infra.db.uow import UnitOfWork
from aiusage.ingest.pool import IngestionWorkerPool
from aiusage.logging import logger
from aiusage.services.ingest_service import IngestService
from aiusage.services.status_service import StatusService

router = APIRouter(prefix="/ai-usage", tags=["ingest"])


def _launch(pool: IngestionWorkerPool, request_id: str) -> None:
    try:
        pool.submit(request_id)
    except RuntimeError as exc:
        # Executor refuses new work once shut down
        logger.exception(f"Could not launch ingestion job {request_id}")
        with UnitOfWork() as uow:
            IngestService(uow).mark_launch_failed(request_id, str(exc))


@router.post("/upload/path", response_model=SubmissionResponse, status_code=202)
def upload_by_path(
    payload: UploadPathRequest,
    pool: IngestionWorkerPool = Depends(get_worker_pool),
) -> SubmissionResponse:
    # Phase 1: UoW exits (commits) before the worker can look the job up
    with UnitOfWork() as uow:
        accepted = IngestService(uow).submit_path(payload.file_path, payload.submitted_by)
    # Phase 2: hand off to the worker pool; returns immediately
    _launch(pool, accepted.request_id)
    return accepted


@router.post("/upload/file", response_model=SubmissionResponse, status_code=202)
async def upload_file(
    file: UploadFile,
    submitted_by: str | None = Form(default=None),
    pool: IngestionWorkerPool = Depends(get_worker_pool),
) -> SubmissionResponse:
    content = await file.read()
    with UnitOfWork() as uow:
        accepted = IngestService(uow).submit_upload(
            content=content,
            original_filename=file.filename or "upload",
            submitted_by=submitted_by,
        )
    _launch(pool, accepted.request_id)
    return accepted


@router.get("/{request_id}/status", response_model=StatusSnapshot)
def get_status(request_id: str, uow: UnitOfWork = Depends(get_uow)) -> StatusSnapshot:
    return StatusService(uow).get_status(request_id)
