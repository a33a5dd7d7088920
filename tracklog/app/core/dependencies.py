"""
Request-scoped dependencies for FastAPI.

Every request gets a RequestContext: the authenticated user (or None) and
a snapshot of the application settings. Handlers receive it explicitly
instead of reaching for global singletons.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from tracklog.app.core.config import settings
from tracklog.app.core.jwt import decode_access_token
from tracklog.app.core.redis_client import get_redis
from tracklog.app.core.token_revocation import is_token_revoked
from tracklog.app.db.session import get_db
from tracklog.app.models.user import User
from tracklog.app.schemas.config import AppConfig
from tracklog.app.services.config_service import config_cache
from tracklog.app.services.locales import LANGUAGES

logger = logging.getLogger(__name__)

# Bearer token is optional: anonymous callers are valid in open mode
security = HTTPBearer(auto_error=False)

# Cookies that let a browser override display settings for itself
PREFERENCE_COOKIES = {
    "tracklog_lang": "lang",
    "tracklog_units": "units",
    "tracklog_api": "map_api",
    "tracklog_interval": "interval",
}


@dataclass
class RequestContext:
    user: Optional[User]
    config: AppConfig
    token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Bearer header first, then the session cookie."""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name)


async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(get_session_token),
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis),
) -> Optional[User]:
    """
    Resolve the session token to a user.

    Security checks:
    1. Validates JWT token signature and expiry
    2. Checks if token has been revoked by logout
    3. Verifies the user still exists

    Returns:
        The User, or None when the caller is anonymous or the token is unusable.
        Access control decides between 401 and 403 afterwards.
    """
    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None or not payload.get("user_id"):
        logger.debug("Ignoring invalid session token")
        return None

    if await is_token_revoked(redis, token):
        logger.debug("Ignoring revoked token for user %s", payload.get("user_id"))
        return None

    user = await db.get(User, payload["user_id"])
    if user is not None:
        # Picked up by the request log line
        request.state.user_id = user.id
    return user


async def get_app_config(request: Request, db: AsyncSession = Depends(get_db)) -> AppConfig:
    """
    Settings snapshot for this request.

    The cached settings are copied, then per-browser preference cookies
    are applied to the copy.
    """
    config = (await config_cache.get(db)).model_copy(deep=True)

    for cookie, attr in PREFERENCE_COOKIES.items():
        value = request.cookies.get(cookie)
        if value is None:
            continue
        if attr == "lang" and value in LANGUAGES:
            config.lang = value
        elif attr == "units" and value in ("metric", "imperial", "nautical"):
            config.units = value
        elif attr == "map_api" and value in ("openlayers", "gmaps"):
            config.map_api = value
        elif attr == "interval" and value.isdigit() and int(value) > 0:
            config.interval = int(value)
    return config


async def get_context(
    user: Optional[User] = Depends(get_current_user),
    config: AppConfig = Depends(get_app_config),
    token: Optional[str] = Depends(get_session_token),
) -> RequestContext:
    return RequestContext(user=user, config=config, token=token)
