"""
Access control for API routes.

Every route declares an AccessPolicy: for each deployment mode, the roles
allowed to call it. The active mode comes from the settings:

    OPEN     authentication is not required
    PUBLIC   authentication is required, all tracks are visible to users
    PRIVATE  authentication is required, users only see their own data

Ownership is resolved from the request itself. Path parameters user_id,
track_id and position_id are always checked when present; a JSON payload
describing a track or a position is checked when the route declares it.
Every check that applies must pass.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from tracklog.app.core.dependencies import RequestContext, get_context
from tracklog.app.core.exceptions import AuthenticationError, InsufficientPermissionsError, ServerError
from tracklog.app.db.session import get_db
from tracklog.app.models.position import Position
from tracklog.app.models.track import Track
from tracklog.app.schemas.config import AppConfig

logger = logging.getLogger(__name__)


class AccessMode(str, Enum):
    OPEN = "open"
    PUBLIC = "public"
    PRIVATE = "private"
    ALL = "all"  # fallback for modes a policy doesn't list


class Allow(str, Enum):
    ALL = "all"
    AUTHORIZED = "authorized"
    OWNER = "owner"
    ADMIN = "admin"


class Decision(str, Enum):
    GRANTED = "granted"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


class Payload(str, Enum):
    TRACK = "track"
    POSITION = "position"


@dataclass(frozen=True)
class AccessPolicy:
    rules: Dict[AccessMode, Tuple[Allow, ...]]

    def allowed_for(self, mode: AccessMode) -> Tuple[Allow, ...]:
        """
        Roles allowed in the given mode, falling back to the ALL entry.

        Raises:
            ServerError: If the policy covers neither the mode nor ALL
        """
        if mode in self.rules:
            return self.rules[mode]
        if AccessMode.ALL in self.rules:
            return self.rules[AccessMode.ALL]
        raise ServerError("No policies found for route")


# Policies shared by the route table
ANYONE = AccessPolicy({AccessMode.ALL: (Allow.ALL,)})
AUTHENTICATED = AccessPolicy({AccessMode.ALL: (Allow.AUTHORIZED,)})
ADMIN_ONLY = AccessPolicy({AccessMode.ALL: (Allow.ADMIN,)})
OWNER_ONLY = AccessPolicy({AccessMode.ALL: (Allow.OWNER,)})
OWNER_OR_ADMIN = AccessPolicy({AccessMode.ALL: (Allow.OWNER, Allow.ADMIN)})
VIEW_OWNED = AccessPolicy({
    AccessMode.OPEN: (Allow.ALL,),
    AccessMode.PUBLIC: (Allow.AUTHORIZED,),
    AccessMode.PRIVATE: (Allow.OWNER, Allow.ADMIN),
})
VIEW_ALL_USERS = AccessPolicy({
    AccessMode.OPEN: (Allow.ALL,),
    AccessMode.PUBLIC: (Allow.AUTHORIZED,),
    AccessMode.PRIVATE: (Allow.ADMIN,),
})


def access_mode(config: AppConfig) -> AccessMode:
    if not config.require_authentication:
        return AccessMode.OPEN
    if config.public_tracks:
        return AccessMode.PUBLIC
    return AccessMode.PRIVATE


def decide(
    allowed: Sequence[Allow],
    is_authenticated: bool,
    is_admin: bool,
    is_owner: Optional[bool] = None,
) -> Decision:
    """
    Grant if any allowed role matches the caller.

    Args:
        allowed: Roles allowed for the active mode
        is_authenticated: Caller has a valid session
        is_admin: Caller is an administrator
        is_owner: Result of the ownership checks, None when not resolved

    Returns:
        GRANTED, or UNAUTHENTICATED / FORBIDDEN describing the denial
    """
    for role in allowed:
        if role is Allow.ALL:
            return Decision.GRANTED
        if role is Allow.AUTHORIZED and is_authenticated:
            return Decision.GRANTED
        if role is Allow.ADMIN and is_authenticated and is_admin:
            return Decision.GRANTED
        if role is Allow.OWNER and is_authenticated and is_owner:
            return Decision.GRANTED
    return Decision.FORBIDDEN if is_authenticated else Decision.UNAUTHENTICATED


async def _json_payload(request: Request) -> dict:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


def _as_int(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


async def user_owns_track(db: AsyncSession, user_id: int, track_id: Optional[int]) -> bool:
    if track_id is None:
        return False
    track = await db.get(Track, track_id)
    return track is not None and track.user_id == user_id


async def user_owns_position(db: AsyncSession, user_id: int, position_id: Optional[int]) -> bool:
    if position_id is None:
        return False
    position = await db.get(Position, position_id)
    return position is not None and position.user_id == user_id


async def is_resource_owner(
    request: Request,
    db: AsyncSession,
    user_id: int,
    payload: Optional[Payload] = None,
) -> bool:
    """
    Run every ownership check that applies to the request.

    A missing row counts as not owned.

    Raises:
        ServerError: If the route has nothing to check ownership against
    """
    checks = 0

    if payload is Payload.TRACK:
        checks += 1
        body = await _json_payload(request)
        if body.get("userId") is not None and _as_int(body.get("userId")) != user_id:
            return False
    elif payload is Payload.POSITION:
        checks += 1
        body = await _json_payload(request)
        if not await user_owns_track(db, user_id, _as_int(body.get("trackId"))):
            return False

    params = request.path_params
    if "user_id" in params:
        checks += 1
        if _as_int(params["user_id"]) != user_id:
            return False
    if "track_id" in params:
        checks += 1
        if not await user_owns_track(db, user_id, _as_int(params["track_id"])):
            return False
    if "position_id" in params:
        checks += 1
        if not await user_owns_position(db, user_id, _as_int(params["position_id"])):
            return False

    if checks == 0:
        raise ServerError("Route misconfigured: no private resource found")
    return True


def require_access(policy: AccessPolicy, payload: Optional[Payload] = None):
    """
    Dependency factory for per-route access control.

    Usage:
        @router.get("/tracks/{track_id}")
        async def get_track(track_id: int, ctx: RequestContext = Depends(require_access(VIEW_OWNED))):
            ...

    Args:
        policy: Allowed roles per deployment mode
        payload: Kind of JSON body to check ownership of, if any

    Returns:
        FastAPI dependency that yields the RequestContext of an allowed caller

    Raises:
        AuthenticationError 401 for an anonymous caller who isn't allowed
        InsufficientPermissionsError 403 for an authenticated caller who isn't allowed
    """
    async def access_checker(
        request: Request,
        ctx: RequestContext = Depends(get_context),
        db: AsyncSession = Depends(get_db),
    ) -> RequestContext:
        allowed = policy.allowed_for(access_mode(ctx.config))

        is_owner = None
        if Allow.OWNER in allowed and ctx.is_authenticated:
            is_owner = await is_resource_owner(request, db, ctx.user.id, payload)

        decision = decide(allowed, ctx.is_authenticated, ctx.is_admin, is_owner)
        if decision is Decision.UNAUTHENTICATED:
            raise AuthenticationError("notauthorized")
        if decision is Decision.FORBIDDEN:
            logger.info(
                "Access denied: user %s on %s %s",
                ctx.user.id, request.method, request.url.path
            )
            raise InsufficientPermissionsError("notauthorized")
        return ctx

    return access_checker
