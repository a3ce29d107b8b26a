"""Holiday router — admin-maintained calendar of non-working days.

HTTP layer only. Delegates to controller for business logic.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_redis
from app.holidays import controller
from app.holidays.schemas import CreateHolidayRequest, HolidayListResponse, HolidayResponse

router = APIRouter(prefix="/holidays", tags=["Holidays"])


@router.post(
    "",
    response_model=HolidayResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Mark a date as a holiday",
    description="Upserts by date: posting an existing date replaces its reason. "
    "Takes effect immediately for every course's drip schedule.",
)
async def add_holiday(
    body: CreateHolidayRequest,
    db: AsyncSession = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
) -> HolidayResponse:
    return await controller.add_holiday(db, body, redis)


@router.get(
    "",
    response_model=HolidayListResponse,
    summary="List holidays",
    description="All declared holidays, oldest first.",
)
async def list_holidays(
    db: AsyncSession = Depends(get_db),
) -> HolidayListResponse:
    return await controller.list_holidays(db)


@router.delete(
    "/{holiday_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a holiday",
)
async def remove_holiday(
    holiday_id: UUID,
    db: AsyncSession = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
) -> Response:
    await controller.remove_holiday(db, holiday_id, redis)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
