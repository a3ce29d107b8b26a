"""Holiday calendar service — pure business logic, no FastAPI imports.

Holidays are global: a date added here pauses drip for every course.
Redis is passed as ``Redis | None``; cache operations are best-effort
and fall back to the database.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from uuid import UUID

from redis.asyncio import Redis
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.drip.working_days import to_utc_date
from app.exceptions import HolidayNotFoundError
from app.holidays import cache as holiday_cache
from app.models.holiday import Holiday

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECS = 3600

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


async def add_holiday(
    db: AsyncSession,
    *,
    day: date | datetime | str,
    reason: str = "",
    redis: Redis | None = None,
) -> Holiday:
    """Mark a day as a holiday. Adding an existing day only updates its reason.

    A single INSERT ... ON CONFLICT (date) DO UPDATE, so concurrent adds of
    the same day converge on one row instead of tripping the unique index.
    """
    holiday_date = to_utc_date(day)
    insert = _UPSERT_INSERTS[db.get_bind().dialect.name]
    stmt = insert(Holiday).values(
        holiday_id=uuid.uuid4(),
        date=holiday_date,
        reason=reason or "",
        created_at=datetime.now(timezone.utc),
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Holiday.date],
        set_={"reason": stmt.excluded.reason},
    ).returning(Holiday.holiday_id)
    holiday_id = (await db.execute(stmt)).scalar_one()

    holiday = (await db.execute(
        select(Holiday)
        .where(Holiday.holiday_id == holiday_id)
        .execution_options(populate_existing=True)
    )).scalar_one()
    # Commit before invalidating so the new generation is filled from committed rows
    await db.commit()
    await _invalidate(redis)
    logger.info("Holiday set for %s (%s)", holiday_date, holiday_id)
    return holiday


async def list_holidays(db: AsyncSession) -> list[Holiday]:
    result = await db.execute(select(Holiday).order_by(Holiday.date))
    return list(result.scalars().all())


async def remove_holiday(
    db: AsyncSession, holiday_id: UUID, *, redis: Redis | None = None,
) -> None:
    holiday = await db.get(Holiday, holiday_id)
    if holiday is None:
        raise HolidayNotFoundError(str(holiday_id))
    holiday_date = holiday.date
    await db.delete(holiday)
    await db.flush()
    await db.commit()
    await _invalidate(redis)
    logger.info("Holiday removed for %s (%s)", holiday_date, holiday_id)


async def get_holiday_dates(
    db: AsyncSession,
    *,
    redis: Redis | None = None,
    ttl_secs: int = DEFAULT_CACHE_TTL_SECS,
) -> set[date]:
    """All holiday dates. Redis first, DB fallback (and cache fill).

    The fill targets the generation read before the DB query, so a holiday
    write landing in between cannot put the old calendar back in front of
    later readers.
    """
    generation: int | None = None
    if redis is not None:
        try:
            generation = await holiday_cache.get_generation(redis)
            cached = await holiday_cache.get_holiday_dates(generation, redis)
            if cached is not None:
                return cached
        except Exception:
            logger.warning("Holiday cache read failed, using database", exc_info=True)

    result = await db.execute(select(Holiday.date))
    dates = {to_utc_date(d) for d in result.scalars().all()}

    if redis is not None and generation is not None:
        try:
            await holiday_cache.set_holiday_dates(dates, generation, ttl_secs, redis)
        except Exception:
            logger.warning("Holiday cache fill failed", exc_info=True)
    return dates


async def _invalidate(redis: Redis | None) -> None:
    if redis is None:
        return
    try:
        await holiday_cache.invalidate_holiday_dates(redis)
    except Exception:
        # The TTL bounds how long a stale calendar can survive
        logger.warning("Holiday cache invalidation failed", exc_info=True)
