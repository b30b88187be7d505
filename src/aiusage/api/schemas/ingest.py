"""Ingestion DTOs: pure Pydantic, zero ORM imports."""
from __future__ import annotations
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, field_validator


class IngestStatusDTO(str, Enum):
    SUBMITTED = "SUBMITTED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    PARTIAL = "PARTIAL"
    FAILED = "FAILED"


class UploadPathRequest(BaseModel):
    file_path: str
    submitted_by: str | None = None

    @field_validator("file_path")
    @classmethod
    def path_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("file_path must not be empty")
        return v.strip()


class SubmissionResponse(BaseModel):
    request_id: str
    submitted_at: datetime
    message: str


class StatusSnapshot(BaseModel):
    model_config = {"from_attributes": True}

    request_id: str
    status: IngestStatusDTO
    submitted_at: datetime
    completed_at: datetime | None = None
    total_records: int
    successful_records: int
    failed_records: int
    error_message: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (
            IngestStatusDTO.COMPLETED, IngestStatusDTO.PARTIAL, IngestStatusDTO.FAILED,
        )
