"""Redis cache for the holiday calendar.

Key schema
----------
drip:holidays:generation   INT, bumped on every holiday write      no TTL
drip:holidays:v{gen}       JSON list of ISO dates for that gen     TTL = holiday_cache_ttl_secs

The calendar is global (not per course), so one key per generation serves
every resolution. Readers pick the current generation before loading from
the database and fill only that generation's key; a write bumps the
generation, so a fill that raced with it lands on a key nobody reads.
"""

from __future__ import annotations

import json
from datetime import date

from redis.asyncio import Redis

HOLIDAYS_PREFIX = "drip:holidays"
GENERATION_KEY = f"{HOLIDAYS_PREFIX}:generation"


def dates_key(generation: int) -> str:
    return f"{HOLIDAYS_PREFIX}:v{generation}"


async def get_generation(redis: Redis) -> int:
    val = await redis.get(GENERATION_KEY)
    return int(val) if val is not None else 0


async def get_holiday_dates(generation: int, redis: Redis) -> set[date] | None:
    """Return cached holiday dates for ``generation``, or None on a cache miss."""
    val = await redis.get(dates_key(generation))
    if val is None:
        return None
    return {date.fromisoformat(d) for d in json.loads(val)}


async def set_holiday_dates(
    dates: set[date], generation: int, ttl_secs: int, redis: Redis,
) -> None:
    payload = json.dumps(sorted(d.isoformat() for d in dates))
    await redis.setex(dates_key(generation), ttl_secs, payload)


async def invalidate_holiday_dates(redis: Redis) -> int:
    """Move readers to a fresh generation and drop the one they were using."""
    generation = await redis.incr(GENERATION_KEY)
    await redis.delete(dates_key(generation - 1))
    return generation
