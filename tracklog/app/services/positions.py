"""
Position data access.

Listings join the owning user's login and the track name, and annotate
each position with the distance and time from the one before it.
"""

import logging
from typing import Iterable, List, Optional, Tuple
from fastapi import UploadFile
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from tracklog.app.core.exceptions import ResourceNotFoundError
from tracklog.app.db.session import commit_or_rollback
from tracklog.app.domain.geo import distance_to, from_timestamp, seconds_to, to_timestamp
from tracklog.app.models.position import Position
from tracklog.app.models.track import Track
from tracklog.app.models.user import User
from tracklog.app.schemas.position import PositionCreate, PositionResponse
from tracklog.app.services import uploads

logger = logging.getLogger(__name__)

PositionRow = Tuple[Position, str, str]


def _joined():
    return (
        select(Position, User.login, Track.name)
        .join(User, Position.user_id == User.id)
        .join(Track, Position.track_id == Track.id)
    )


def to_response(position: Position, user_login: str, track_name: str, meters: int = 0, seconds: int = 0) -> PositionResponse:
    return PositionResponse(
        id=position.id,
        timestamp=to_timestamp(position.time),
        user_id=position.user_id,
        user_login=user_login,
        track_id=position.track_id,
        track_name=track_name,
        latitude=position.latitude,
        longitude=position.longitude,
        altitude=position.altitude,
        speed=position.speed,
        bearing=position.bearing,
        accuracy=position.accuracy,
        provider=position.provider,
        comment=position.comment,
        image=position.image,
        meters=meters,
        seconds=seconds,
    )


def with_deltas(rows: Iterable[PositionRow], previous: Optional[Position] = None) -> List[PositionResponse]:
    """Build responses carrying meters/seconds relative to the previous position."""
    result = []
    for position, login, track_name in rows:
        meters = distance_to(position, previous) if previous is not None else 0
        seconds = seconds_to(position, previous) if previous is not None else 0
        result.append(to_response(position, login, track_name, meters, seconds))
        previous = position
    return result


async def get_position(db: AsyncSession, position_id: int) -> Position:
    position = await db.get(Position, position_id)
    if position is None:
        raise ResourceNotFoundError("Position", position_id)
    return position


async def get_position_row(db: AsyncSession, position_id: int) -> PositionRow:
    row = (await db.execute(_joined().where(Position.id == position_id))).first()
    if row is None:
        raise ResourceNotFoundError("Position", position_id)
    return tuple(row)


async def fetch_track_rows(db: AsyncSession, track_id: int, after_id: Optional[int] = None) -> List[PositionRow]:
    query = _joined().where(Position.track_id == track_id)
    if after_id:
        query = query.where(Position.id > after_id)
    query = query.order_by(Position.time, Position.id)
    return [tuple(row) for row in (await db.execute(query)).all()]


async def list_track_positions(db: AsyncSession, track_id: int, after_id: Optional[int] = None) -> List[PositionResponse]:
    """
    Positions of a track ordered by (time, id).

    With after_id only newer rows are returned, and the after_id position
    (when it still exists) serves as the first "previous" position.
    """
    rows = await fetch_track_rows(db, track_id, after_id)
    previous = await db.get(Position, after_id) if after_id else None
    return with_deltas(rows, previous)


async def get_last_position(db: AsyncSession, user_id: int) -> PositionResponse:
    query = (
        _joined()
        .where(Position.user_id == user_id)
        .order_by(Position.time.desc(), Position.id.desc())
        .limit(1)
    )
    row = (await db.execute(query)).first()
    if row is None:
        raise ResourceNotFoundError("Position for user", user_id)
    return to_response(*row)


async def get_last_positions_all_users(db: AsyncSession) -> List[PositionResponse]:
    """Most recent position of every user that has one, ordered by user."""
    ranked = (
        select(
            Position.id.label("id"),
            func.row_number().over(
                partition_by=Position.user_id,
                order_by=(Position.time.desc(), Position.id.desc()),
            ).label("rank"),
        )
        .subquery()
    )
    query = (
        _joined()
        .join(ranked, ranked.c.id == Position.id)
        .where(ranked.c.rank == 1)
        .order_by(Position.user_id)
    )
    return [to_response(*row) for row in (await db.execute(query)).all()]


async def create_position(db: AsyncSession, user_id: int, data: PositionCreate, commit: bool = True) -> Position:
    position = Position(
        time=from_timestamp(data.timestamp),
        user_id=user_id,
        track_id=data.track_id,
        latitude=data.latitude,
        longitude=data.longitude,
        altitude=data.altitude,
        speed=data.speed,
        bearing=data.bearing,
        accuracy=data.accuracy,
        provider=data.provider,
        comment=data.comment or None,
    )
    db.add(position)
    if commit:
        await commit_or_rollback(db)
        await db.refresh(position)
    return position


async def update_comment(db: AsyncSession, position: Position, comment: Optional[str]) -> None:
    position.comment = comment or None
    await commit_or_rollback(db)


async def delete_position(db: AsyncSession, position: Position) -> None:
    image = position.image
    await db.delete(position)
    await commit_or_rollback(db)
    uploads.remove_image(image)


async def attach_image(db: AsyncSession, position: Position, upload: UploadFile, max_size: int) -> str:
    """Store an uploaded image for the position, replacing any previous one."""
    name = await uploads.save_image(upload, position.track_id, max_size)
    previous = position.image
    position.image = name
    try:
        await commit_or_rollback(db)
    except Exception:
        uploads.remove_image(name)
        raise
    uploads.remove_image(previous)
    return name


async def detach_image(db: AsyncSession, position: Position) -> None:
    image = position.image
    position.image = None
    await commit_or_rollback(db)
    uploads.remove_image(image)


async def delete_positions(db: AsyncSession, user_id: Optional[int] = None, track_id: Optional[int] = None) -> List[str]:
    """
    Delete positions of a user and/or track inside the current transaction.

    Returns:
        Names of images to remove once the transaction commits
    """
    conditions = []
    if user_id is not None:
        conditions.append(Position.user_id == user_id)
    if track_id is not None:
        conditions.append(Position.track_id == track_id)
    if not conditions:
        raise ValueError("delete_positions needs a user_id or a track_id")

    images = (await db.execute(
        select(Position.image).where(*conditions, Position.image.is_not(None))
    )).scalars().all()
    await db.execute(delete(Position).where(*conditions))
    return list(images)
