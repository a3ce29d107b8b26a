from datetime import date

from fastapi import Request
from redis.asyncio import Redis

from app.config import Settings
from app.drip.working_days import utc_today


def get_settings() -> Settings:
    return Settings()


def get_redis(request: Request) -> Redis | None:
    """Process-wide Redis client, or None when caching is disabled."""
    return getattr(request.app.state, "redis", None)


def get_today() -> date:
    """The calendar day drip is evaluated against (UTC)."""
    return utc_today()
