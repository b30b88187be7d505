"""Row validation and per-job outcome accumulation.

``validate_row`` never raises for bad data: every problem on a row is
collected into a ``RecordError`` so callers see all failing fields at once.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from aiusage.domain.exceptions import FieldApplyError
from aiusage.domain.fields import (
    FIELD_REGISTRY, FieldMapping, UsageDraft, UsageRecordData, freeze, resolve,
)


@dataclass(frozen=True, slots=True)
class RowReason:
    field: str
    message: str


@dataclass(frozen=True, slots=True)
class RecordError:
    row_index: int
    reasons: tuple[RowReason, ...]

    def summary(self) -> str:
        details = "; ".join(f"{r.field}: {r.message}" for r in self.reasons)
        return f"row {self.row_index}: {details}"


def validate_row(
    row: Mapping[str, str],
    row_index: int,
    registry: Mapping[str, FieldMapping] = FIELD_REGISTRY,
) -> UsageRecordData | RecordError:
    draft = UsageDraft()
    reasons: list[RowReason] = []
    failed: set[str] = set()

    for column, raw_value in row.items():
        mapping = resolve(column, registry)
        if mapping is None:
            continue
        try:
            mapping.apply(draft, raw_value)
        except FieldApplyError as exc:
            reasons.append(RowReason(exc.field, exc.reason))
            failed.add(mapping.name)

    for mapping in registry.values():
        if mapping.name not in failed and not mapping.is_set(draft):
            reasons.append(RowReason(mapping.name, "missing required field"))

    if reasons:
        return RecordError(row_index=row_index, reasons=tuple(reasons))
    return freeze(draft)


@dataclass
class RecordAccumulator:
    """Counters and staged records for one job. Owned by a single worker."""

    max_summary_rows: int = 5
    max_summary_chars: int = 1000
    successful_records: int = 0
    failed_records: int = 0
    staged: list[UsageRecordData] = field(default_factory=list)
    _summaries: list[str] = field(default_factory=list, init=False, repr=False)

    @property
    def total_records(self) -> int:
        return self.successful_records + self.failed_records

    def add(self, outcome: UsageRecordData | RecordError) -> None:
        if isinstance(outcome, RecordError):
            self.failed_records += 1
            if len(self._summaries) < self.max_summary_rows:
                self._summaries.append(outcome.summary())
        else:
            self.successful_records += 1
            self.staged.append(outcome)

    def error_summary(self) -> str | None:
        if not self._summaries:
            return None
        text = " | ".join(self._summaries)
        hidden = self.failed_records - len(self._summaries)
        if hidden > 0:
            text += f" | ... and {hidden} more row error(s)"
        if len(text) > self.max_summary_chars:
            text = text[: self.max_summary_chars - 3] + "..."
        return text
