"""Shared Redis connection for notification pub/sub and the statistics cache.

Exposure totals, draw status and balances never live here; PostgreSQL is
the only source of truth for anything a wager decision depends on.
"""

import logging

import redis.asyncio as aioredis

from config.settings import settings

logger = logging.getLogger(__name__)

_client: aioredis.Redis | None = None


def redis_key(*parts: object) -> str:
    """Namespaced key or channel name: redis_key("stats", 7) -> "lotto:stats:7"."""
    return ":".join([settings.NOTIFY_CHANNEL_PREFIX, *(str(p) for p in parts)])


async def get_redis() -> aioredis.Redis:
    """Return the process-wide client, creating it on first use."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    return _client


async def ping_redis() -> None:
    """Fail fast at startup when Redis is unreachable."""
    client = await get_redis()
    await client.ping()
    logger.info("Redis reachable at %s", settings.REDIS_URL.rsplit("@", 1)[-1])


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None
