from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.drip.service import assign_unlock_order, clear_unlock_order, get_drip_status
from app.exceptions import CourseNotFoundError, UnlockOrderPersistenceError
from app.models.course_module import CourseModule
from app.models.topic import Topic


async def _unlock_orders(db: AsyncSession, topics: list[Topic]) -> list[int | None]:
    ids = [t.topic_id for t in topics]
    rows = await db.execute(select(Topic.topic_id, Topic.unlock_order).where(Topic.topic_id.in_(ids)))
    by_id = dict(rows.all())
    return [by_id[i] for i in ids]


@pytest.mark.asyncio
async def test_assign_numbers_topics_in_course_order(db_session: AsyncSession, course, course_topics) -> None:
    count = await assign_unlock_order(db_session, course.course_id)

    assert count == 5
    assert await _unlock_orders(db_session, course_topics) == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_assign_is_idempotent(db_session: AsyncSession, course, course_topics) -> None:
    await assign_unlock_order(db_session, course.course_id)
    first = await _unlock_orders(db_session, course_topics)

    await assign_unlock_order(db_session, course.course_id)

    assert await _unlock_orders(db_session, course_topics) == first


@pytest.mark.asyncio
async def test_reassign_recomputes_after_reorder(db_session: AsyncSession, course, course_topics) -> None:
    await assign_unlock_order(db_session, course.course_id)
    # Move the backend module ahead of the frontend one
    modules = (await db_session.execute(
        select(CourseModule).where(CourseModule.course_id == course.course_id)
    )).scalars().all()
    for module in modules:
        module.sort_order = 1 if module.title == "Backend" else 2
    await db_session.flush()

    await assign_unlock_order(db_session, course.course_id)

    html, css, js, node, sql = course_topics
    assert await _unlock_orders(db_session, [node, sql, html, css, js]) == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_reassign_fills_gaps_after_topic_changes(db_session: AsyncSession, course, course_topics) -> None:
    await assign_unlock_order(db_session, course.course_id)
    html, css, js, node, sql = course_topics
    await db_session.delete(css)
    extra = Topic(module_id=sql.module_id, title="Redis", sort_order=3)
    db_session.add(extra)
    await db_session.flush()

    count = await assign_unlock_order(db_session, course.course_id)

    assert count == 5
    assert await _unlock_orders(db_session, [html, js, node, sql, extra]) == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_clear_removes_all_numbering(db_session: AsyncSession, course, course_topics) -> None:
    await assign_unlock_order(db_session, course.course_id)

    count = await clear_unlock_order(db_session, course.course_id)

    assert count == 5
    assert await _unlock_orders(db_session, course_topics) == [None] * 5


@pytest.mark.asyncio
async def test_drip_status_follows_assign_and_clear(db_session: AsyncSession, course, course_topics) -> None:
    before = await get_drip_status(db_session, course.course_id)
    await assign_unlock_order(db_session, course.course_id)
    during = await get_drip_status(db_session, course.course_id)
    await clear_unlock_order(db_session, course.course_id)
    after = await get_drip_status(db_session, course.course_id)

    assert (before["enabled"], during["enabled"], after["enabled"]) == (False, True, False)
    assert during["numbered_topics"] == during["total_topics"] == 5


@pytest.mark.asyncio
async def test_assign_on_empty_course(db_session: AsyncSession, course) -> None:
    assert await assign_unlock_order(db_session, course.course_id) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", [assign_unlock_order, clear_unlock_order])
async def test_unknown_course_raises(db_session: AsyncSession, operation) -> None:
    with pytest.raises(CourseNotFoundError):
        await operation(db_session, uuid4())


@pytest.mark.asyncio
async def test_failed_write_raises_persistence_error(
    db_session: AsyncSession, course, course_topics, monkeypatch,
) -> None:
    async def failing_flush(*args, **kwargs) -> None:
        raise OperationalError("UPDATE topics", {}, Exception("connection lost"))

    monkeypatch.setattr(AsyncSession, "flush", failing_flush)

    with pytest.raises(UnlockOrderPersistenceError) as exc_info:
        await assign_unlock_order(db_session, course.course_id)
    assert exc_info.value.course_id == str(course.course_id)
