"""
GPX 1.1 import and export.

Speed, bearing, accuracy and provider travel in the ulogger extension
namespace. Import parses the whole file before touching the database and
writes each track in its own transaction, so a failing track leaves no
rows behind.
"""

import logging
import xml.etree.ElementTree as ET
from typing import List, Optional, Sequence
import gpxpy
import gpxpy.gpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from tracklog.app.core.exceptions import DatabaseError, GpxParseError
from tracklog.app.domain.geo import from_timestamp, to_timestamp
from tracklog.app.models.position import Position
from tracklog.app.models.track import Track
from tracklog.app.schemas.config import AppConfig
from tracklog.app.services.positions import PositionRow

logger = logging.getLogger(__name__)

ULOGGER_NS = "https://github.com/bfabiszewski/ulogger-android/1"
SCHEMA_LOCATIONS = [
    "http://www.topografix.com/GPX/1/1",
    "http://www.topografix.com/GPX/1/1/gpx.xsd",
    ULOGGER_NS,
    "https://raw.githubusercontent.com/bfabiszewski/ulogger-server/master/scripts/gpx_extensions1.xsd",
]
MIME_TYPE = "application/gpx+xml"

# Timestamp used for points without <time>
MISSING_TIME = 1


def exported_name(track_id: int) -> str:
    return f"track{track_id}.gpx"


def parse_gpx(content: bytes) -> gpxpy.gpx.GPX:
    """
    Parse a GPX document.

    Raises:
        GpxParseError: "iparsefailure[: parser message]" for unreadable XML,
            a non-gpx root or points missing lat/lon; "idatafailure" when
            the file has no tracks
    """
    try:
        text = content.decode("utf-8-sig")
        root = ET.fromstring(text)
    except UnicodeDecodeError:
        raise GpxParseError("iparsefailure")
    except ET.ParseError as e:
        raise GpxParseError(f"iparsefailure: {e}")

    # gpxpy reads any root element, only <gpx> is a GPX document
    if root.tag.rsplit("}", 1)[-1] != "gpx":
        raise GpxParseError("iparsefailure")

    try:
        gpx = gpxpy.parse(text)
    except gpxpy.gpx.GPXException as e:
        message = str(e).strip()
        raise GpxParseError(f"iparsefailure: {message}" if message else "iparsefailure")
    if not gpx.tracks:
        raise GpxParseError("idatafailure")
    return gpx


def _extension_values(point: gpxpy.gpx.GPXTrackPoint) -> dict:
    values = {"speed": None, "bearing": None, "accuracy": None, "provider": "gps"}
    for element in point.extensions:
        if not element.tag.startswith(f"{{{ULOGGER_NS}}}"):
            continue
        name = element.tag.split("}", 1)[1]
        text = (element.text or "").strip()
        if not text:
            continue
        if name in ("speed", "bearing"):
            values[name] = float(text)
        elif name == "accuracy":
            values[name] = int(float(text))
        elif name == "provider":
            values[name] = text
    return values


def point_fields(point: gpxpy.gpx.GPXTrackPoint) -> dict:
    """Column values for one trkpt."""
    if point.latitude is None or point.longitude is None:
        raise GpxParseError("iparsefailure")
    try:
        extensions = _extension_values(point)
    except ValueError:
        raise GpxParseError("iparsefailure")
    timestamp = to_timestamp(point.time) if point.time is not None else MISSING_TIME
    return dict(
        time=from_timestamp(timestamp),
        latitude=point.latitude,
        longitude=point.longitude,
        altitude=point.elevation,
        comment=point.description or None,
        **extensions,
    )


async def import_gpx(db: AsyncSession, user_id: int, content: bytes, file_name: str) -> List[Track]:
    """
    Import every track of a GPX file for a user.

    Tracks without points are skipped. A database failure rolls back the
    track being written and is raised as DatabaseError.

    Returns:
        Imported tracks, newest first
    """
    gpx = parse_gpx(content)
    comment = gpx.name or None

    imported: List[Track] = []
    for trk in gpx.tracks:
        fields = [point_fields(point) for segment in trk.segments for point in segment.points]
        if not fields:
            logger.info("Skipping empty track %r in %s", trk.name, file_name)
            continue

        try:
            track = Track(user_id=user_id, name=trk.name or file_name, comment=comment)
            db.add(track)
            await db.flush()
            db.add_all(Position(user_id=user_id, track_id=track.id, **f) for f in fields)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Import of %s failed: %s", file_name, e)
            raise DatabaseError(e.__class__.__name__) from e

        imported.insert(0, track)
        logger.info("Imported track %s (%d positions) for user %s", track.id, len(fields), user_id)
    return imported


def _ulogger(name: str, value) -> ET.Element:
    element = ET.Element(f"{{{ULOGGER_NS}}}{name}")
    element.text = str(value)
    return element


def export_gpx(rows: Sequence[PositionRow], config: AppConfig, name: Optional[str] = None) -> str:
    """
    Render positions of one track as GPX 1.1.

    Args:
        rows: (position, user login, track name) tuples in track order
        config: Settings, for the creator version
        name: Document name, defaults to the track name
    """
    first, _, track_name = rows[0]
    name = name or track_name

    gpx = gpxpy.gpx.GPX()
    gpx.creator = f"μlogger-server {config.version}"
    gpx.name = name
    gpx.time = from_timestamp(to_timestamp(first.time))
    gpx.nsmap["ulogger"] = ULOGGER_NS
    gpx.schema_locations = list(SCHEMA_LOCATIONS)

    trk = gpxpy.gpx.GPXTrack(name=name)
    segment = gpxpy.gpx.GPXTrackSegment()
    trk.segments.append(segment)
    gpx.tracks.append(trk)

    for number, (position, _, _) in enumerate(rows, start=1):
        point = gpxpy.gpx.GPXTrackPoint(
            latitude=position.latitude,
            longitude=position.longitude,
            elevation=position.altitude,
            time=from_timestamp(to_timestamp(position.time)),
            name=str(number),
        )
        if position.comment is not None:
            point.description = position.comment
        if position.speed is not None:
            point.extensions.append(_ulogger("speed", round(position.speed, 2)))
        if position.bearing is not None:
            point.extensions.append(_ulogger("bearing", round(position.bearing, 2)))
        if position.accuracy is not None:
            point.extensions.append(_ulogger("accuracy", position.accuracy))
        if position.provider is not None:
            point.extensions.append(_ulogger("provider", position.provider))
        segment.points.append(point)

    return gpx.to_xml(version="1.1")
