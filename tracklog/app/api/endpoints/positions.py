"""
Position API endpoints.

Only the comment and the attached image of a position can change.
"""

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from tracklog.app.core.dependencies import RequestContext
from tracklog.app.core.exceptions import InvalidInputError
from tracklog.app.core.guards import OWNER_ONLY, OWNER_OR_ADMIN, Payload, require_access
from tracklog.app.db.session import get_db
from tracklog.app.schemas.position import ImageResponse, PositionCreate, PositionResponse, PositionUpdate
from tracklog.app.services import positions

router = APIRouter(tags=["Positions"])


@router.put("/positions/{position_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_position(
    position_id: int,
    data: PositionUpdate,
    ctx: RequestContext = Depends(require_access(OWNER_OR_ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    if data.id != position_id:
        raise InvalidInputError("Wrong position id")
    position = await positions.get_position(db, position_id)
    await positions.update_comment(db, position, data.comment)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/positions/{position_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_position(
    position_id: int,
    ctx: RequestContext = Depends(require_access(OWNER_OR_ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    position = await positions.get_position(db, position_id)
    await positions.delete_position(db, position)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/positions/{position_id}/image", response_model=ImageResponse)
async def add_image(
    position_id: int,
    image_upload: UploadFile = File(..., alias="imageUpload"),
    ctx: RequestContext = Depends(require_access(OWNER_OR_ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    position = await positions.get_position(db, position_id)
    name = await positions.attach_image(db, position, image_upload, ctx.config.upload_max_size)
    return ImageResponse(image=name)


@router.delete("/positions/{position_id}/image", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(
    position_id: int,
    ctx: RequestContext = Depends(require_access(OWNER_OR_ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    position = await positions.get_position(db, position_id)
    await positions.detach_image(db, position)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/client/positions", response_model=PositionResponse, status_code=status.HTTP_201_CREATED)
async def client_add_position(
    data: PositionCreate,
    ctx: RequestContext = Depends(require_access(OWNER_ONLY, payload=Payload.POSITION)),
    db: AsyncSession = Depends(get_db),
):
    """Store a position reported by the logged in client on one of its tracks."""
    position = await positions.create_position(db, ctx.user.id, data)
    return positions.to_response(*await positions.get_position_row(db, position.id))
