"""
Token Revocation using Redis.

Logging out blacklists the session token until it would have expired anyway.
"""

import logging
from redis.exceptions import RedisError
from tracklog.app.core.config import settings

logger = logging.getLogger(__name__)

TOKEN_BLACKLIST_PREFIX = "blacklist:token:"


async def revoke_token(redis, token: str, user_id: int) -> None:
    """
    Revoke a session token by adding it to the blacklist.

    Args:
        redis: Redis client
        token: The JWT token string to revoke
        user_id: User ID who owns the token (stored for auditing)
    """
    ttl_seconds = settings.access_token_expire_minutes * 60
    await redis.set(f"{TOKEN_BLACKLIST_PREFIX}{token}", str(user_id), ex=ttl_seconds)


async def is_token_revoked(redis, token: str) -> bool:
    """
    Check if a token has been revoked.

    If Redis is unreachable the token is treated as valid and a warning is logged.
    """
    try:
        return await redis.exists(f"{TOKEN_BLACKLIST_PREFIX}{token}") > 0
    except RedisError as e:
        logger.warning("Token revocation check unavailable: %s", e)
        return False
