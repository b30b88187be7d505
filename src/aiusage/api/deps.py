"""FastAPI dependencies."""
from __future__ import annotations
from typing import Generator
from fastapi import Request
from aiusage.infra.db.uow import UnitOfWork
from aiusage.ingest.pool import IngestionWorkerPool


def get_uow() -> Generator[UnitOfWork, None, None]:
    """Yield one UnitOfWork per request; commit/rollback in __exit__."""
    with UnitOfWork() as uow:
        yield uow


def get_worker_pool(request: Request) -> IngestionWorkerPool:
    """The pool built in the app lifespan."""
    return request.app.state.worker_pool
