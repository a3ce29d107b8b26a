"""Drip service — unlock-order assignment and per-student resolution.

Pure business logic, no FastAPI imports.

Resolution never fails closed: an empty course, a course without drip
numbering, or a student without an active batch all come back as
results (with a ``reason``) that unlock everything available.
"""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from redis.asyncio import Redis
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.content.service import get_course_by_id, get_topic_course_id, list_course_topics
from app.drip.working_days import count_working_days, to_utc_date
from app.enrollment.service import get_active_enrollment
from app.exceptions import TopicLockedError, UnlockOrderPersistenceError
from app.holidays.service import DEFAULT_CACHE_TTL_SECS, get_holiday_dates
from app.models.enrollment import BatchEnrollment
from app.models.enums import UnlockReason
from app.models.topic import Topic

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Unlock order assignment
# ---------------------------------------------------------------------------


async def assign_unlock_order(db: AsyncSession, course_id: UUID) -> int:
    """Number every topic of the course 1..N in (module, topic) order.

    The mapping is recomputed from scratch on each call, so running it twice
    on an unchanged course is a no-op. Returns the number of topics numbered.
    """
    # Row lock serializes assign/clear calls on the same course
    await get_course_by_id(db, course_id, for_update=True)
    topics = await list_course_topics(db, course_id)

    for position, topic in enumerate(topics, start=1):
        topic.unlock_order = position

    await _flush_unlock_order(db, course_id)
    logger.info("Assigned unlock order to %d topics in course %s", len(topics), course_id)
    return len(topics)


async def clear_unlock_order(db: AsyncSession, course_id: UUID) -> int:
    """Remove drip numbering from every topic of the course (drip disabled)."""
    await get_course_by_id(db, course_id, for_update=True)
    topics = await list_course_topics(db, course_id)

    for topic in topics:
        topic.unlock_order = None

    await _flush_unlock_order(db, course_id)
    logger.info("Cleared unlock order on %d topics in course %s", len(topics), course_id)
    return len(topics)


async def _flush_unlock_order(db: AsyncSession, course_id: UUID) -> None:
    # One flush writes the whole course; the request transaction rolls it
    # back as a unit if anything fails.
    try:
        await db.flush()
    except SQLAlchemyError as exc:
        logger.exception("Unlock order write failed for course %s", course_id)
        raise UnlockOrderPersistenceError(str(course_id)) from exc


async def get_drip_status(db: AsyncSession, course_id: UUID) -> dict:
    await get_course_by_id(db, course_id)
    topics = await list_course_topics(db, course_id)
    numbered = sum(1 for t in topics if t.unlock_order is not None)
    return {
        "course_id": course_id,
        "enabled": numbered > 0,
        "total_topics": len(topics),
        "numbered_topics": numbered,
    }


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_reference_date(enrollment: BatchEnrollment) -> date:
    """Day the student's drip clock starts.

    The batch start wins only when it is strictly earlier than the
    enrollment day: late joiners catch up with their cohort, early
    joiners start counting from their own enrollment.
    """
    enrolled_on = to_utc_date(enrollment.enrollment_date)
    batch = enrollment.batch
    if batch is not None and batch.start_date is not None:
        batch_start = to_utc_date(batch.start_date)
        if batch_start < enrolled_on:
            return batch_start
    return enrolled_on


def select_unlocked_topics(
    topics: list[Topic],
    unlocked_count: int,
    *,
    unnumbered_topics_unlocked: bool = False,
) -> list[UUID]:
    """Topic ids released after ``unlocked_count`` working days, in course order.

    The lowest-numbered topic is always released so a new student never
    faces an empty course.
    """
    numbered = [t for t in topics if t.unlock_order is not None]
    first = min(numbered, key=lambda t: t.unlock_order) if numbered else None

    unlocked: list[UUID] = []
    for topic in topics:
        if topic.unlock_order is None:
            if unnumbered_topics_unlocked:
                unlocked.append(topic.topic_id)
        elif topic.unlock_order <= unlocked_count or topic is first:
            unlocked.append(topic.topic_id)
    return unlocked


async def resolve_unlocked_topics(
    db: AsyncSession,
    student_id: UUID,
    course_id: UUID,
    *,
    today: date | None = None,
    redis: Redis | None = None,
    holiday_cache_ttl_secs: int = DEFAULT_CACHE_TTL_SECS,
    unnumbered_topics_unlocked: bool = False,
) -> dict:
    """Compute which topics of a course the student can open today."""
    await get_course_by_id(db, course_id)
    topics = await list_course_topics(db, course_id)
    all_ids = [t.topic_id for t in topics]

    if not topics:
        return _result([], 0, UnlockReason.EMPTY_COURSE, total_topics=0)

    if all(t.unlock_order is None for t in topics):
        return _result(
            all_ids, len(all_ids), UnlockReason.NO_DRIP_CONFIGURED, total_topics=len(topics),
        )

    enrollment = await get_active_enrollment(db, student_id, course_id)
    if enrollment is None:
        return _result(all_ids, len(all_ids), UnlockReason.NO_BATCH, total_topics=len(topics))

    reference_date = resolve_reference_date(enrollment)
    holidays = await get_holiday_dates(db, redis=redis, ttl_secs=holiday_cache_ttl_secs)
    unlocked_count = count_working_days(reference_date, holidays, today)

    unlocked_ids = select_unlocked_topics(
        topics, unlocked_count, unnumbered_topics_unlocked=unnumbered_topics_unlocked,
    )
    return _result(
        unlocked_ids,
        unlocked_count,
        UnlockReason.OK,
        total_topics=len(topics),
        reference_date=reference_date,
    )


def _result(
    topic_ids: list[UUID],
    unlocked_count: int,
    reason: UnlockReason,
    *,
    total_topics: int,
    reference_date: date | None = None,
) -> dict:
    return {
        "unlocked_topic_ids": topic_ids,
        "unlocked_count": unlocked_count,
        "reason": reason,
        "reference_date": reference_date,
        "total_topics": total_topics,
    }


# ---------------------------------------------------------------------------
# Single-topic access (course player gate)
# ---------------------------------------------------------------------------


async def check_topic_access(
    db: AsyncSession,
    student_id: UUID,
    topic_id: UUID,
    **resolve_kwargs,
) -> dict:
    course_id = await get_topic_course_id(db, topic_id)
    resolution = await resolve_unlocked_topics(db, student_id, course_id, **resolve_kwargs)
    topic = await db.get(Topic, topic_id)
    return {
        "topic_id": topic_id,
        "course_id": course_id,
        "unlocked": topic_id in resolution["unlocked_topic_ids"],
        "unlock_order": topic.unlock_order if topic is not None else None,
        "reason": resolution["reason"],
    }


async def ensure_topic_unlocked(
    db: AsyncSession,
    student_id: UUID,
    topic_id: UUID,
    **resolve_kwargs,
) -> None:
    """Raise ``TopicLockedError`` unless drip has released the topic to the student."""
    access = await check_topic_access(db, student_id, topic_id, **resolve_kwargs)
    if not access["unlocked"]:
        raise TopicLockedError(str(topic_id), access["unlock_order"])
