"""
Redis client initialization and connection management.

Redis backs the session token blacklist.
"""

import redis.asyncio as redis
from tracklog.app.core.config import settings


redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def get_redis():
    """
    Get Redis client instance.

    Used as a FastAPI dependency so tests can swap it out.
    """
    return redis_client
