"""
User API endpoints.

Listing users and their latest positions follows the deployment mode;
account management is reserved for admins, except changing one's own
password.
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from tracklog.app.core.dependencies import RequestContext
from tracklog.app.core.exceptions import InvalidInputError
from tracklog.app.core.guards import ADMIN_ONLY, OWNER_ONLY, VIEW_ALL_USERS, VIEW_OWNED, require_access
from tracklog.app.db.session import get_db
from tracklog.app.schemas.position import PositionResponse
from tracklog.app.schemas.track import TrackResponse
from tracklog.app.schemas.user import PasswordChange, UserCreate, UserResponse, UserUpdate
from tracklog.app.services import positions, tracks, users

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=List[UserResponse])
async def list_users(
    ctx: RequestContext = Depends(require_access(VIEW_ALL_USERS)),
    db: AsyncSession = Depends(get_db),
):
    return await users.list_users(db)


@router.get("/position", response_model=List[PositionResponse])
async def get_all_last_positions(
    ctx: RequestContext = Depends(require_access(VIEW_ALL_USERS)),
    db: AsyncSession = Depends(get_db),
):
    """Most recent position of every user."""
    return await positions.get_last_positions_all_users(db)


@router.get("/{user_id}/tracks", response_model=List[TrackResponse])
async def get_user_tracks(
    user_id: int,
    ctx: RequestContext = Depends(require_access(VIEW_OWNED)),
    db: AsyncSession = Depends(get_db),
):
    return await tracks.list_user_tracks(db, user_id)


@router.get("/{user_id}/position", response_model=PositionResponse)
async def get_last_position(
    user_id: int,
    ctx: RequestContext = Depends(require_access(VIEW_OWNED)),
    db: AsyncSession = Depends(get_db),
):
    return await positions.get_last_position(db, user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    ctx: RequestContext = Depends(require_access(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a user (admin-only).

    Returns 409 when the login is taken and 422 when the password doesn't
    satisfy the configured policy.
    """
    user = await users.create_user(db, data.login, data.password, data.is_admin, ctx.config)
    logger.info("Admin %s created user %s", ctx.user.login, user.login)
    return user


@router.put("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_user(
    user_id: int,
    data: UserUpdate,
    ctx: RequestContext = Depends(require_access(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db),
):
    """Set the admin flag and optionally reset the password of another user."""
    if user_id == ctx.user.id:
        raise InvalidInputError("selfeditwarn")
    user = await users.get_user(db, user_id)
    await users.update_user(db, user, data.is_admin, data.password, ctx.config)
    logger.info("Admin %s updated user %s", ctx.user.login, user.login)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    user_id: int,
    data: PasswordChange,
    ctx: RequestContext = Depends(require_access(OWNER_ONLY)),
    db: AsyncSession = Depends(get_db),
):
    await users.change_own_password(db, ctx.user, data.password, data.old_password, ctx.config)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    ctx: RequestContext = Depends(require_access(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db),
):
    """Delete a user with all their tracks, positions and images."""
    if user_id == ctx.user.id:
        raise InvalidInputError("selfeditwarn")
    user = await users.get_user(db, user_id)
    login = user.login
    await users.delete_user(db, user)
    logger.info("Admin %s deleted user %s", ctx.user.login, login)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
