"""Usage lookup router."""
from fastapi import APIRouter, Depends, Query
from aiusage.api.deps import get_uow
from aiusage.api.schemas.usage import UsageList
from aiusage.infra.db.uow import UnitOfWork
from aiusage.services.usage_service import UsageService

router = APIRouter(prefix="/ai-usage", tags=["usage"])


@router.get("/latest", response_model=UsageList)
def latest_usage(
    email: str = Query(..., min_length=1),
    uow: UnitOfWork = Depends(get_uow),
) -> UsageList:
    return UsageService(uow).latest_for_email(email)
