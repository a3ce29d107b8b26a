"""Drip router — per-student unlock resolution and course drip switches.

HTTP layer only. Delegates to controller for business logic.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import get_db
from app.dependencies import get_redis, get_settings, get_today
from app.drip import controller
from app.drip.schemas import (
    DripStatusResponse,
    TopicAccessResponse,
    UnlockedTopicsResponse,
    UnlockOrderResponse,
)

router = APIRouter(prefix="/drip", tags=["Drip"])


@router.get(
    "/unlocked/{student_id}/{course_id}",
    response_model=UnlockedTopicsResponse,
    summary="Get the topics a student can open today",
    description="Counts working days (weekdays minus holidays) since the student's "
    "reference date and releases topics whose unlock order is within that count. "
    "Courses without drip and students without a batch get every topic; "
    "the `reason` field says which rule applied.",
)
async def get_unlocked_topics(
    student_id: UUID,
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
    redis: Redis | None = Depends(get_redis),
) -> UnlockedTopicsResponse:
    return await controller.get_unlocked_topics(
        db, student_id, course_id, settings, today, redis,
    )


@router.get(
    "/access/{student_id}/topics/{topic_id}",
    response_model=TopicAccessResponse,
    summary="Check whether one topic is unlocked for a student",
)
async def get_topic_access(
    student_id: UUID,
    topic_id: UUID,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
    redis: Redis | None = Depends(get_redis),
) -> TopicAccessResponse:
    return await controller.get_topic_access(
        db, student_id, topic_id, settings, today, redis,
    )


@router.get(
    "/status/{course_id}",
    response_model=DripStatusResponse,
    summary="Is drip enabled for a course",
)
async def get_drip_status(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> DripStatusResponse:
    return await controller.get_drip_status(db, course_id)


@router.post(
    "/assign/{course_id}",
    response_model=UnlockOrderResponse,
    summary="Enable drip: number every topic sequentially",
    description="Assigns unlock order 1..N across all modules (module order, then topic order). "
    "Recomputes the full mapping every time; all-or-nothing.",
)
async def assign_unlock_order(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> UnlockOrderResponse:
    return await controller.assign_unlock_order(db, course_id)


@router.delete(
    "/assign/{course_id}",
    response_model=UnlockOrderResponse,
    summary="Disable drip: clear unlock order on every topic",
)
async def clear_unlock_order(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> UnlockOrderResponse:
    return await controller.clear_unlock_order(db, course_id)


@router.get(
    "/gate/{student_id}/topics/{topic_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Gate content delivery on drip",
    description="Called by the course player before serving a topic. "
    "204 when the topic is unlocked for the student, 403 while drip still holds it back.",
)
async def gate_topic(
    student_id: UUID,
    topic_id: UUID,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
    redis: Redis | None = Depends(get_redis),
) -> Response:
    await controller.gate_topic(db, student_id, topic_id, settings, today, redis)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
