from typing import Any

import redis.asyncio as redis

RedisClient = redis.Redis


def get_redis_client(redis_url: str, **kwargs: Any) -> redis.Redis:
    """Build the process-wide Redis client. Connections are opened lazily."""
    kwargs.setdefault("health_check_interval", 30)
    return redis.from_url(redis_url, decode_responses=True, **kwargs)


async def close_redis_client(client: redis.Redis | None) -> None:
    if client is not None:
        await client.aclose()
