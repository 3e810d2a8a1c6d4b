"""
Redis connection check.
BullMQ queues, workers and flow producers open their own connections; the
harness only needs to know the store answers before any scenario runs.
"""

import logging

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from bullbench.config import get_settings
from bullbench.exceptions import StoreConnectionError
from bullbench.observability.logging import redact_url

logger = logging.getLogger(__name__)


async def check_redis(url: str | None = None) -> None:
    """
    Check the Redis store answers a PING.
    Should be called before any scenario runs.

    Args:
        url: Redis URL. Defaults to the configured host.

    Raises:
        StoreConnectionError: If the store does not answer.
    """
    url = url or get_settings().redis_url
    client = aioredis.from_url(url)

    try:
        await client.ping()
    except (RedisError, OSError) as e:
        raise StoreConnectionError(f"Cannot reach Redis at {redact_url(url)}: {e}") from e
    finally:
        await client.aclose()

    logger.info("Redis connection verified", extra={"url": url})
