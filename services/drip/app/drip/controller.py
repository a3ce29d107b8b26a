"""Drip controller — maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import HTTPException, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.drip import service
from app.drip.schemas import (
    DripStatusResponse,
    TopicAccessResponse,
    UnlockedTopicsResponse,
    UnlockOrderResponse,
)
from app.exceptions import (
    CourseNotFoundError,
    InvalidDateError,
    TopicLockedError,
    TopicNotFoundError,
    UnlockOrderPersistenceError,
)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (CourseNotFoundError, TopicNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, TopicLockedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, InvalidDateError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    if isinstance(exc, UnlockOrderPersistenceError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unlock order update failed.",
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.",
    )


def _resolve_options(settings: Settings, today: date, redis: Redis | None) -> dict:
    return {
        "today": today,
        "redis": redis,
        "holiday_cache_ttl_secs": settings.holiday_cache_ttl_secs,
        "unnumbered_topics_unlocked": settings.drip_unnumbered_topics_unlocked,
    }


async def get_unlocked_topics(
    db: AsyncSession,
    student_id: UUID,
    course_id: UUID,
    settings: Settings,
    today: date,
    redis: Redis | None = None,
) -> UnlockedTopicsResponse:
    try:
        result = await service.resolve_unlocked_topics(
            db, student_id, course_id, **_resolve_options(settings, today, redis),
        )
        return UnlockedTopicsResponse(**result)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_topic_access(
    db: AsyncSession,
    student_id: UUID,
    topic_id: UUID,
    settings: Settings,
    today: date,
    redis: Redis | None = None,
) -> TopicAccessResponse:
    try:
        result = await service.check_topic_access(
            db, student_id, topic_id, **_resolve_options(settings, today, redis),
        )
        return TopicAccessResponse(**result)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def gate_topic(
    db: AsyncSession,
    student_id: UUID,
    topic_id: UUID,
    settings: Settings,
    today: date,
    redis: Redis | None = None,
) -> None:
    try:
        await service.ensure_topic_unlocked(
            db, student_id, topic_id, **_resolve_options(settings, today, redis),
        )
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_drip_status(db: AsyncSession, course_id: UUID) -> DripStatusResponse:
    try:
        result = await service.get_drip_status(db, course_id)
        return DripStatusResponse(**result)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def assign_unlock_order(db: AsyncSession, course_id: UUID) -> UnlockOrderResponse:
    try:
        count = await service.assign_unlock_order(db, course_id)
        return UnlockOrderResponse(
            course_id=course_id,
            enabled=count > 0,
            topics_updated=count,
            message=f"Assigned unlock order to {count} topics",
        )
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def clear_unlock_order(db: AsyncSession, course_id: UUID) -> UnlockOrderResponse:
    try:
        count = await service.clear_unlock_order(db, course_id)
        return UnlockOrderResponse(
            course_id=course_id,
            enabled=False,
            topics_updated=count,
            message="Drip disabled, all topics are now accessible",
        )
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
