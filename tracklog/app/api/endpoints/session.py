"""
Session API endpoints.

Log in, check the current session, log out. Login issues a JWT that is
returned in the body and set as an HTTP-only cookie, so both API clients
(Bearer header) and browsers (cookie) can use it.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from tracklog.app.core.config import settings
from tracklog.app.core.dependencies import RequestContext
from tracklog.app.core.exceptions import AuthenticationError
from tracklog.app.core.guards import ANYONE, AUTHENTICATED, AccessMode, AccessPolicy, Allow, require_access
from tracklog.app.core.jwt import create_access_token
from tracklog.app.core.redis_client import get_redis
from tracklog.app.core.token_revocation import revoke_token
from tracklog.app.db.session import get_db
from tracklog.app.models.user import User
from tracklog.app.schemas.session import LoginRequest, SessionResponse
from tracklog.app.services.users import authenticate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Session"])

# Anonymous callers may ask for their session state when no login is required
SESSION_CHECK = AccessPolicy({
    AccessMode.OPEN: (Allow.ALL,),
    AccessMode.ALL: (Allow.AUTHORIZED,),
})


def session_response(user: Optional[User], token: Optional[str] = None) -> SessionResponse:
    if user is None:
        return SessionResponse(is_authenticated=False)
    return SessionResponse(
        is_authenticated=True,
        is_admin=user.is_admin,
        user_id=user.id,
        user_login=user.login,
        access_token=token,
        token_type="bearer" if token else None,
    )


async def start_session(db: AsyncSession, login: str, password: str, response: Response) -> SessionResponse:
    """
    Check credentials, issue a token and set the session cookie.

    Raises:
        AuthenticationError: Wrong login or password
    """
    user = await authenticate(db, login, password)
    if user is None:
        logger.warning("Failed login attempt for %r", login)
        raise AuthenticationError("authfail")

    token = create_access_token(data={
        "sub": user.login,
        "user_id": user.id,
        "is_admin": user.is_admin,
    })
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
    )
    logger.info("User %s logged in", user.login)
    return session_response(user, token)


@router.post("/session", response_model=SessionResponse, response_model_exclude_none=True)
async def log_in(
    credentials: LoginRequest,
    response: Response,
    ctx: RequestContext = Depends(require_access(ANYONE)),
    db: AsyncSession = Depends(get_db),
):
    return await start_session(db, credentials.login, credentials.password, response)


@router.post("/client/session", response_model=SessionResponse, response_model_exclude_none=True)
async def client_log_in(
    credentials: LoginRequest,
    response: Response,
    ctx: RequestContext = Depends(require_access(ANYONE)),
    db: AsyncSession = Depends(get_db),
):
    """Login for mobile clients."""
    return await start_session(db, credentials.login, credentials.password, response)


@router.get("/session", response_model=SessionResponse, response_model_exclude_none=True)
async def check_session(ctx: RequestContext = Depends(require_access(SESSION_CHECK))):
    return session_response(ctx.user)


@router.delete("/session", status_code=status.HTTP_204_NO_CONTENT)
async def log_out(
    ctx: RequestContext = Depends(require_access(AUTHENTICATED)),
    redis=Depends(get_redis),
):
    """Revoke the current token and clear the session cookie."""
    if ctx.token:
        await revoke_token(redis, ctx.token, ctx.user.id)
    logger.info("User %s logged out", ctx.user.login)

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(settings.session_cookie_name)
    return response
