"""Ingestion job status records."""
from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_request_id() -> str:
    return uuid4().hex


class IngestStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    PARTIAL = "PARTIAL"
    FAILED = "FAILED"


class IngestionJob(SQLModel, table=True):
    """One submitted usage file and its processing outcome.

    Counters stay at zero until the job reaches a terminal status; they are
    written together with ``status`` and ``completed_at`` in a single commit.
    """

    __tablename__ = "ingestion_job"

    id: int | None = Field(default=None, primary_key=True)
    request_id: str = Field(default_factory=new_request_id, unique=True, index=True)
    submitted_by: str | None = Field(default=None)
    source_path: str
    original_filename: str | None = Field(default=None)
    status: IngestStatus = Field(default=IngestStatus.SUBMITTED, index=True)
    submitted_at: datetime = Field(default_factory=_utcnow)
    completed_at: datetime | None = Field(default=None)
    total_records: int = Field(default=0)
    successful_records: int = Field(default=0)
    failed_records: int = Field(default=0)
    error_message: str | None = Field(default=None)
