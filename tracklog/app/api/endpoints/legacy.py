"""
Form-encoded client endpoint for older mobile clients.

POST /client/index.php with an "action" field. Replies are always
{"error": false, ...} or {"error": true, "message": ...} with status 200,
except authentication failures which are plain 401 errors.
"""

import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import FormData, UploadFile
from tracklog.app.api.endpoints.session import start_session
from tracklog.app.core.dependencies import RequestContext, get_context
from tracklog.app.core.exceptions import AppException, AuthenticationError, InsufficientPermissionsError, InvalidInputError
from tracklog.app.core.guards import user_owns_track
from tracklog.app.db.session import get_db
from tracklog.app.schemas.position import PositionCreate
from tracklog.app.services import positions, tracks

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Client"])

MISSING_PARAMETER = "Missing required parameter"


def _text(form: FormData, name: str) -> Optional[str]:
    value = form.get(name)
    if value is None or isinstance(value, UploadFile):
        return None
    return value.strip() or None


def _number(form: FormData, name: str, kind=float):
    value = _text(form, name)
    if value is None:
        return None
    try:
        return kind(value)
    except ValueError:
        return None


def position_from_form(form: FormData) -> PositionCreate:
    """
    Build a position from addpos form fields.

    Raises:
        InvalidInputError: lat, lon, time or trackid missing or unreadable
    """
    fields = {
        "latitude": _number(form, "lat"),
        "longitude": _number(form, "lon"),
        "timestamp": _number(form, "time", int),
        "track_id": _number(form, "trackid", int),
    }
    if any(value is None for value in fields.values()):
        raise InvalidInputError(MISSING_PARAMETER)
    try:
        return PositionCreate(
            altitude=_number(form, "altitude"),
            speed=_number(form, "speed"),
            bearing=_number(form, "bearing"),
            accuracy=_number(form, "accuracy", int),
            provider=_text(form, "provider"),
            comment=_text(form, "comment"),
            **fields,
        )
    except ValidationError:
        raise InvalidInputError(MISSING_PARAMETER)


async def _auth(form: FormData, db: AsyncSession, ctx: RequestContext, response: Response) -> Dict[str, Any]:
    await start_session(db, _text(form, "user") or "", form.get("pass") or "", response)
    return {}


async def _add_track(form: FormData, db: AsyncSession, ctx: RequestContext, response: Response) -> Dict[str, Any]:
    name = _text(form, "track")
    if name is None:
        raise InvalidInputError(MISSING_PARAMETER)
    track = await tracks.create_track(db, ctx.user.id, name)
    return {"trackid": track.id}


async def _add_position(form: FormData, db: AsyncSession, ctx: RequestContext, response: Response) -> Dict[str, Any]:
    data = position_from_form(form)
    if not await user_owns_track(db, ctx.user.id, data.track_id):
        raise InsufficientPermissionsError("notauthorized")

    position = await positions.create_position(db, ctx.user.id, data)

    image = form.get("image")
    if isinstance(image, UploadFile) and image.filename:
        try:
            await positions.attach_image(db, position, image, ctx.config.upload_max_size)
        except AppException as e:
            # The position is kept without its image
            logger.warning("Image for position %s rejected: %s", position.id, e.message)
    return {}


ACTIONS = {
    "auth": _auth,
    "addtrack": _add_track,
    "addpos": _add_position,
}


@router.post("/client/index.php")
async def client_action(
    request: Request,
    response: Response,
    ctx: RequestContext = Depends(get_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Dispatch a legacy client action.

    Every action except "auth" needs an authenticated session.
    """
    form = await request.form()
    action = _text(form, "action")

    if action != "auth" and not ctx.is_authenticated:
        raise AuthenticationError("notauthorized")
    handler = ACTIONS.get(action)
    if handler is None:
        return {"error": True, "message": "Unknown command"}

    try:
        result = await handler(form, db, ctx, response)
    except AuthenticationError:
        raise
    except AppException as e:
        logger.info("Client action %s failed: %s", action, e.message)
        return {"error": True, "message": e.message}
    return {"error": False, **result}
