"""Ingested per-user AI usage rows."""
from __future__ import annotations
from datetime import datetime, timezone
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UsageRecord(SQLModel, table=True):
    __tablename__ = "usage_record"
    __table_args__ = (UniqueConstraint("email", "business_unit", name="uq_usage_email_bu"),)

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(index=True)
    prompt_count: int
    business_unit: str
    account: str
    vertical: str
    request_id: str = Field(index=True)  # last ingestion job that wrote this row
    updated_at: datetime = Field(default_factory=_utcnow)
