"""Status query service. Read-only; never touches a running job."""
from __future__ import annotations
from aiusage.domain.exceptions import NotFoundError
from aiusage.infra.db.uow import UnitOfWork
from aiusage.infra.db.repositories.ingest_job_repository import IngestionJobRepository
from aiusage.api.schemas.ingest import StatusSnapshot


class StatusService:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def get_status(self, request_id: str) -> StatusSnapshot:
        job = IngestionJobRepository(self._uow.session).get_by_request_id(request_id)
        if job is None:
            raise NotFoundError(f"No upload status found for requestId: {request_id}")
        return StatusSnapshot.model_validate(job)
