"""
Image upload storage.

Images are stored flat in settings.upload_dir under generated names
"<trackId>_<hex>.<ext>". Only names of that shape are ever deleted.
"""

import logging
import re
import uuid
from pathlib import Path
from typing import Optional
from fastapi import UploadFile
from tracklog.app.core.config import settings
from tracklog.app.core.exceptions import InvalidInputError, ServerError

logger = logging.getLogger(__name__)

IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/x-ms-bmp": "bmp",
    "image/gif": "gif",
    "image/png": "png",
}

STORED_NAME = re.compile(r"^[a-z0-9_.]{20,}$")

MAX_NAME_ATTEMPTS = 10


def upload_dir() -> Path:
    return Path(settings.upload_dir)


def upload_limit(configured: int) -> int:
    """Effective size limit: the admin setting capped by the server limit."""
    if configured <= 0:
        return settings.upload_max_size_limit
    return min(configured, settings.upload_max_size_limit)


async def save_image(upload: UploadFile, track_id: int, max_size: int) -> str:
    """
    Validate and store an uploaded image.

    Returns:
        Stored file name

    Raises:
        InvalidInputError: Unknown image type, empty or oversized file
        ServerError: Upload folder not writable, or no free name found
    """
    extension = IMAGE_TYPES.get((upload.content_type or "").lower())
    if extension is None:
        raise InvalidInputError(f"Unsupported image type: {upload.content_type}")

    limit = upload_limit(max_size)
    content = await upload.read(limit + 1)
    if not content:
        raise InvalidInputError("iuploadfailure")
    if len(content) > limit:
        raise InvalidInputError("isizefailure", details={"limit": limit})

    folder = upload_dir()
    try:
        folder.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ServerError(f"Upload folder not writable: {e.strerror}")

    for _ in range(MAX_NAME_ATTEMPTS):
        name = f"{track_id}_{uuid.uuid4().hex}.{extension}"
        try:
            with open(folder / name, "xb") as fh:
                fh.write(content)
        except FileExistsError:
            continue
        except OSError as e:
            raise ServerError(f"Saving upload failed: {e.strerror}")
        logger.info("Stored image %s (%d bytes)", name, len(content))
        return name

    raise ServerError("Could not find a free upload name")


def remove_image(name: Optional[str]) -> None:
    """Delete a stored image. Names that don't look generated are left alone."""
    if not name or not STORED_NAME.match(name):
        return
    path = upload_dir() / name
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning("Image %s already missing", name)
