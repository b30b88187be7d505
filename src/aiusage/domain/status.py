"""Ingestion job state machine."""
from __future__ import annotations
from aiusage.domain.exceptions import ConflictError
from aiusage.models.ingest import IngestStatus

TERMINAL_STATUSES = frozenset({IngestStatus.COMPLETED, IngestStatus.PARTIAL, IngestStatus.FAILED})

_ALLOWED: dict[IngestStatus, frozenset[IngestStatus]] = {
    IngestStatus.SUBMITTED: frozenset({IngestStatus.PROCESSING, IngestStatus.FAILED}),
    IngestStatus.PROCESSING: TERMINAL_STATUSES,
    IngestStatus.COMPLETED: frozenset(),
    IngestStatus.PARTIAL: frozenset(),
    IngestStatus.FAILED: frozenset(),
}


def is_terminal(status: IngestStatus) -> bool:
    return status in TERMINAL_STATUSES


def ensure_transition(current: IngestStatus, target: IngestStatus) -> None:
    if target not in _ALLOWED[current]:
        raise ConflictError(f"Illegal status transition {current.value} -> {target.value}")


def classify(successful: int, failed: int) -> IngestStatus:
    """Terminal status for a job whose rows were all validated."""
    if successful == 0:
        return IngestStatus.FAILED
    if failed == 0:
        return IngestStatus.COMPLETED
    return IngestStatus.PARTIAL
