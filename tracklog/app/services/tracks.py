"""
Track data access.
"""

import logging
from typing import List, Optional
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from tracklog.app.core.exceptions import InvalidInputError, ResourceNotFoundError
from tracklog.app.db.session import commit_or_rollback
from tracklog.app.models.track import Track
from tracklog.app.services import uploads
from tracklog.app.services.positions import delete_positions

logger = logging.getLogger(__name__)


async def get_track(db: AsyncSession, track_id: int) -> Track:
    track = await db.get(Track, track_id)
    if track is None:
        raise ResourceNotFoundError("Track", track_id)
    return track


async def list_user_tracks(db: AsyncSession, user_id: int) -> List[Track]:
    """Tracks of a user, newest first."""
    result = await db.execute(
        select(Track).where(Track.user_id == user_id).order_by(Track.id.desc())
    )
    return list(result.scalars().all())


async def find_track_by_name(db: AsyncSession, user_id: int, name: str) -> Optional[Track]:
    result = await db.execute(
        select(Track).where(Track.user_id == user_id, Track.name == name).limit(1)
    )
    return result.scalar_one_or_none()


def _clean(name: Optional[str], comment: Optional[str]):
    name = (name or "").strip()
    if not name:
        raise InvalidInputError("Empty track name")
    return name, (comment or None)


async def create_track(db: AsyncSession, user_id: int, name: str, comment: Optional[str] = None, commit: bool = True) -> Track:
    name, comment = _clean(name, comment)
    track = Track(user_id=user_id, name=name, comment=comment)
    db.add(track)
    if commit:
        await commit_or_rollback(db)
        await db.refresh(track)
    else:
        await db.flush()
    return track


async def update_track(db: AsyncSession, track: Track, name: str, comment: Optional[str]) -> Track:
    track.name, track.comment = _clean(name, comment)
    await commit_or_rollback(db)
    return track


async def delete_track(db: AsyncSession, track: Track) -> None:
    """Delete a track with its positions and their images."""
    images = await delete_positions(db, track_id=track.id)
    await db.execute(delete(Track).where(Track.id == track.id))
    await commit_or_rollback(db)
    for image in images:
        uploads.remove_image(image)
    logger.info("Deleted track %s of user %s", track.id, track.user_id)
