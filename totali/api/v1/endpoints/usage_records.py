"""Usage record endpoints: one record per item per day of use."""

from typing import List

from fastapi import APIRouter, Depends, status

from totali.api.dependencies import get_current_active_user, get_item_service
from totali.core.logging import get_logger
from totali.models.database.user import User
from totali.models.domain.common import ApiResponse, success_response
from totali.models.domain.item import UsageRecordCreate, UsageRecordResponse
from totali.services.items import ItemService

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_model=ApiResponse[List[UsageRecordResponse]])
async def list_usage_records(
    item_id: str,
    current_user: User = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service)
):
    """Usage records of an item, newest first."""
    records = await service.list_usage_records(current_user.id, item_id)
    return success_response([UsageRecordResponse.model_validate(record) for record in records])


@router.post(
    "",
    response_model=ApiResponse[UsageRecordResponse],
    status_code=status.HTTP_201_CREATED
)
async def record_usage(
    item_id: str,
    payload: UsageRecordCreate,
    current_user: User = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service)
):
    record = await service.record_usage(current_user.id, item_id, payload)
    logger.info("Usage recorded", item_id=item_id, usage_date=payload.usage_date.isoformat())
    return success_response(UsageRecordResponse.model_validate(record), "Usage recorded")


@router.delete("/{record_id}", response_model=ApiResponse[None])
async def delete_usage_record(
    item_id: str,
    record_id: str,
    current_user: User = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service)
):
    await service.delete_usage_record(current_user.id, item_id, record_id)
    return success_response(None, "Usage record deleted")
