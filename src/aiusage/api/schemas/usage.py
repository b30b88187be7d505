"""Usage record DTOs: pure Pydantic, zero ORM imports."""
from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class UsageRead(BaseModel):
    model_config = {"from_attributes": True}

    email: str
    prompt_count: int
    business_unit: str
    account: str
    vertical: str
    request_id: str
    updated_at: datetime | None = None


class UsageList(BaseModel):
    items: list[UsageRead]
    total: int
