"""Content hierarchy reads — course → module → topic, in course order.

The catalog service owns these rows; the drip engine only reads them
(and writes ``Topic.unlock_order`` through the assigner).
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import CourseNotFoundError, TopicNotFoundError
from app.models.course import Course
from app.models.course_module import CourseModule
from app.models.topic import Topic


async def get_course_by_id(
    db: AsyncSession, course_id: UUID, *, for_update: bool = False,
) -> Course:
    stmt = select(Course).where(Course.course_id == course_id)
    if for_update:
        stmt = stmt.with_for_update()
    course = (await db.execute(stmt)).scalar_one_or_none()
    if course is None:
        raise CourseNotFoundError(str(course_id))
    return course


async def list_course_topics(db: AsyncSession, course_id: UUID) -> list[Topic]:
    """All topics of a course ordered by (module order, topic order)."""
    stmt = (
        select(Topic)
        .join(CourseModule, Topic.module_id == CourseModule.module_id)
        .where(CourseModule.course_id == course_id)
        .order_by(
            CourseModule.sort_order,
            CourseModule.module_id,
            Topic.sort_order,
            Topic.topic_id,
        )
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_topic_course_id(db: AsyncSession, topic_id: UUID) -> UUID:
    stmt = (
        select(CourseModule.course_id)
        .join(Topic, Topic.module_id == CourseModule.module_id)
        .where(Topic.topic_id == topic_id)
    )
    course_id = await db.scalar(stmt)
    if course_id is None:
        raise TopicNotFoundError(str(topic_id))
    return course_id
