"""Repository for UsageRecord rows. No business logic; caller owns the transaction."""
from __future__ import annotations
from collections.abc import Sequence
from datetime import datetime, timezone
from sqlmodel import Session, select
from aiusage.domain.fields import UsageRecordData
from aiusage.models.usage import UsageRecord


class UsageRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    def list_by_email(self, email: str) -> list[UsageRecord]:
        return list(self._s.exec(
            select(UsageRecord)
            .where(UsageRecord.email == email)
            .order_by(UsageRecord.business_unit)
        ).all())

    def get(self, email: str, business_unit: str) -> UsageRecord | None:
        return self._s.exec(
            select(UsageRecord).where(
                UsageRecord.email == email, UsageRecord.business_unit == business_unit,
            )
        ).first()

    def upsert_many(self, records: Sequence[UsageRecordData], *, request_id: str) -> int:
        """Insert or update one row per (email, business_unit). Returns rows written."""
        now = datetime.now(timezone.utc)
        for data in records:
            row = self.get(data.email, data.business_unit)
            if row is None:
                row = UsageRecord(
                    email=data.email,
                    business_unit=data.business_unit,
                    prompt_count=data.prompt_count,
                    account=data.account,
                    vertical=data.vertical,
                    request_id=request_id,
                    updated_at=now,
                )
            else:
                row.prompt_count = data.prompt_count
                row.account = data.account
                row.vertical = data.vertical
                row.request_id = request_id
                row.updated_at = now
            self._s.add(row)
            # flush per row so a duplicate key later in the same batch updates instead of inserting
            self._s.flush()
        return len(records)
