"""Usage lookup service."""
from __future__ import annotations
from aiusage.infra.db.uow import UnitOfWork
from aiusage.infra.db.repositories.usage_repository import UsageRepository
from aiusage.api.schemas.usage import UsageRead, UsageList


class UsageService:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def latest_for_email(self, email: str) -> UsageList:
        rows = UsageRepository(self._uow.session).list_by_email(email.strip())
        return UsageList(items=[UsageRead.model_validate(r) for r in rows], total=len(rows))
