"""Holiday controller — maps service results to HTTP responses."""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import HolidayNotFoundError, InvalidDateError
from app.holidays import service
from app.holidays.schemas import CreateHolidayRequest, HolidayListResponse, HolidayResponse


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, HolidayNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, InvalidDateError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.",
    )


async def add_holiday(
    db: AsyncSession,
    body: CreateHolidayRequest,
    redis: Redis | None = None,
) -> HolidayResponse:
    try:
        holiday = await service.add_holiday(
            db, day=body.date, reason=body.reason, redis=redis,
        )
        return HolidayResponse.model_validate(holiday)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def list_holidays(db: AsyncSession) -> HolidayListResponse:
    try:
        holidays = await service.list_holidays(db)
        items = [HolidayResponse.model_validate(h) for h in holidays]
        return HolidayListResponse(items=items, total=len(items))
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def remove_holiday(
    db: AsyncSession,
    holiday_id: UUID,
    redis: Redis | None = None,
) -> None:
    try:
        await service.remove_holiday(db, holiday_id, redis=redis)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
