"""
Track API endpoints.

Read access follows the deployment mode (VIEW_OWNED); changes need the
track owner or an admin.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from tracklog.app.core.dependencies import RequestContext
from tracklog.app.core.exceptions import InvalidInputError, ResourceNotFoundError
from tracklog.app.core.guards import (
    AUTHENTICATED, OWNER_ONLY, OWNER_OR_ADMIN, VIEW_OWNED, Payload, require_access
)
from tracklog.app.db.session import get_db
from tracklog.app.schemas.position import PositionResponse
from tracklog.app.schemas.track import TrackCreate, TrackResponse, TrackUpdate
from tracklog.app.services import gpx, kml, positions, tracks
from tracklog.app.services.uploads import upload_limit
from tracklog.app.services.users import get_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Tracks"])

EXPORTERS = {
    "gpx": (gpx.export_gpx, gpx.exported_name, gpx.MIME_TYPE),
    "kml": (kml.export_kml, kml.exported_name, kml.MIME_TYPE),
}


@router.get("/tracks/{track_id}", response_model=TrackResponse)
async def get_track(
    track_id: int,
    ctx: RequestContext = Depends(require_access(VIEW_OWNED)),
    db: AsyncSession = Depends(get_db),
):
    return await tracks.get_track(db, track_id)


@router.put("/tracks/{track_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_track(
    track_id: int,
    data: TrackUpdate,
    ctx: RequestContext = Depends(require_access(OWNER_OR_ADMIN, payload=Payload.TRACK)),
    db: AsyncSession = Depends(get_db),
):
    """Rename a track or change its comment. An empty comment clears it."""
    if data.id != track_id:
        raise InvalidInputError("Wrong track id")
    track = await tracks.get_track(db, track_id)
    await tracks.update_track(db, track, data.name, data.comment)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


async def _create(db: AsyncSession, ctx: RequestContext, data: TrackCreate):
    user_id = data.user_id if data.user_id is not None else ctx.user.id
    if user_id != ctx.user.id:
        await get_user(db, user_id)
    return await tracks.create_track(db, user_id, data.name, data.comment)


@router.post("/tracks", response_model=TrackResponse, status_code=status.HTTP_201_CREATED)
async def create_track(
    data: TrackCreate,
    ctx: RequestContext = Depends(require_access(OWNER_OR_ADMIN, payload=Payload.TRACK)),
    db: AsyncSession = Depends(get_db),
):
    """Create an empty track. Admins may create tracks for other users."""
    return await _create(db, ctx, data)


@router.post("/client/tracks", response_model=TrackResponse, status_code=status.HTTP_201_CREATED)
async def client_create_track(
    data: TrackCreate,
    ctx: RequestContext = Depends(require_access(OWNER_ONLY, payload=Payload.TRACK)),
    db: AsyncSession = Depends(get_db),
):
    """Create a track for the logged in client."""
    return await _create(db, ctx, data)


@router.delete("/tracks/{track_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_track(
    track_id: int,
    ctx: RequestContext = Depends(require_access(OWNER_OR_ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    track = await tracks.get_track(db, track_id)
    await tracks.delete_track(db, track)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/tracks/import", response_model=List[TrackResponse], status_code=status.HTTP_201_CREATED)
async def import_tracks(
    gpx_upload: UploadFile = File(..., alias="gpxUpload"),
    ctx: RequestContext = Depends(require_access(AUTHENTICATED)),
    db: AsyncSession = Depends(get_db),
):
    """
    Import a GPX file for the caller.

    Every <trk> with points becomes a track; the new tracks are returned
    newest first.
    """
    limit = upload_limit(ctx.config.upload_max_size)
    content = await gpx_upload.read(limit + 1)
    if not content:
        raise InvalidInputError("iuploadfailure")
    if len(content) > limit:
        raise InvalidInputError("isizefailure", details={"limit": limit})

    file_name = (gpx_upload.filename or "import.gpx").rsplit("/", 1)[-1]
    imported = await gpx.import_gpx(db, ctx.user.id, content, file_name)
    logger.info("User %s imported %d track(s) from %s", ctx.user.id, len(imported), file_name)
    return imported


@router.get("/tracks/{track_id}/export")
async def export_track(
    track_id: int,
    export_format: str = Query(..., alias="format"),
    ctx: RequestContext = Depends(require_access(VIEW_OWNED)),
    db: AsyncSession = Depends(get_db),
):
    """Download a track as a GPX or KML attachment."""
    if export_format not in EXPORTERS:
        raise InvalidInputError(f"Unsupported format: {export_format}")
    rows = await positions.fetch_track_rows(db, track_id)
    if not rows:
        raise ResourceNotFoundError("Positions of track", track_id)

    render, exported_name, media_type = EXPORTERS[export_format]
    return Response(
        content=render(rows, ctx.config),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported_name(track_id)}"'},
    )


@router.get("/tracks/{track_id}/positions", response_model=List[PositionResponse])
async def get_track_positions(
    track_id: int,
    after_id: Optional[int] = Query(None, alias="afterId"),
    ctx: RequestContext = Depends(require_access(VIEW_OWNED)),
    db: AsyncSession = Depends(get_db),
):
    return await positions.list_track_positions(db, track_id, after_id)
