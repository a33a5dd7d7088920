"""
User management service.

Creation and password changes enforce the configured password policy.
Deleting a user removes their positions (with images), then their
tracks, then the account.
"""

import logging
from typing import List, Optional
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from tracklog.app.core.exceptions import ConflictError, InvalidInputError, ResourceNotFoundError
from tracklog.app.core.security import get_password_hash, needs_rehash, verify_password
from tracklog.app.db.session import commit_or_rollback
from tracklog.app.domain.password_policy import is_valid_password
from tracklog.app.models.track import Track
from tracklog.app.models.user import User
from tracklog.app.schemas.config import AppConfig
from tracklog.app.services import uploads
from tracklog.app.services.positions import delete_positions

logger = logging.getLogger(__name__)


def check_password_strength(password: Optional[str], config: AppConfig) -> None:
    if not is_valid_password(password or "", config.pass_len_min, config.pass_strength):
        raise InvalidInputError("passstrengthwarn")


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    return user


async def get_user_by_login(db: AsyncSession, login: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.login == login))
    return result.scalar_one_or_none()


async def list_users(db: AsyncSession) -> List[User]:
    result = await db.execute(select(User).order_by(User.login))
    return list(result.scalars().all())


async def authenticate(db: AsyncSession, login: str, password: str) -> Optional[User]:
    """Return the user for valid credentials, None otherwise."""
    if not login or not password:
        return None
    user = await get_user_by_login(db, login)
    if user is None or not verify_password(password, user.password):
        return None
    if needs_rehash(user.password):
        user.password = get_password_hash(password)
        await commit_or_rollback(db)
        logger.info("Upgraded password hash for user %s", user.id)
    return user


async def create_user(db: AsyncSession, login: str, password: str, is_admin: bool, config: AppConfig) -> User:
    """
    Create a user account.

    Raises:
        InvalidInputError: Empty login or weak password
        ConflictError: Login already taken
    """
    login = (login or "").strip()
    if not login:
        raise InvalidInputError("loginempty")
    check_password_strength(password, config)
    if await get_user_by_login(db, login) is not None:
        raise ConflictError("userexists")

    user = User(login=login, password=get_password_hash(password), is_admin=is_admin)
    db.add(user)
    await commit_or_rollback(db)
    await db.refresh(user)
    logger.info("Created user %s (id=%s, admin=%s)", user.login, user.id, user.is_admin)
    return user


async def set_password(db: AsyncSession, user: User, password: str, config: AppConfig) -> None:
    check_password_strength(password, config)
    user.password = get_password_hash(password)
    await commit_or_rollback(db)
    logger.info("Password changed for user %s", user.id)


async def change_own_password(db: AsyncSession, user: User, password: str, old_password: str, config: AppConfig) -> None:
    check_password_strength(password, config)
    if not verify_password(old_password or "", user.password):
        raise InvalidInputError("oldpassinvalid")
    await set_password(db, user, password, config)


async def update_user(db: AsyncSession, user: User, is_admin: bool, password: Optional[str], config: AppConfig) -> None:
    """Admin edit: set the admin flag and optionally a new password."""
    if password:
        check_password_strength(password, config)
        user.password = get_password_hash(password)
    user.is_admin = is_admin
    await commit_or_rollback(db)
    logger.info("Updated user %s (admin=%s, password_changed=%s)", user.id, is_admin, bool(password))


async def delete_user(db: AsyncSession, user: User) -> None:
    user_id = user.id
    images = await delete_positions(db, user_id=user_id)
    await db.execute(delete(Track).where(Track.user_id == user_id))
    await db.execute(delete(User).where(User.id == user_id))
    await commit_or_rollback(db)
    for image in images:
        uploads.remove_image(image)
    logger.info("Deleted user %s with all tracks and positions", user_id)
