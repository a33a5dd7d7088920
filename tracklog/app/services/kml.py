"""
KML 2.2 export.

First point gets a red "A" marker, the last a green "B" marker, others a
small gray one. Every placemark carries an HTML summary: running time,
distance and average speed in the configured units.
"""

import xml.etree.ElementTree as ET
from html import escape
from typing import Optional, Sequence
from tracklog.app.domain.geo import distance_to, seconds_to, to_timestamp, from_timestamp
from tracklog.app.domain.units import unit_system
from tracklog.app.schemas.config import AppConfig
from tracklog.app.services.positions import PositionRow

KML_NS = "http://www.opengis.net/kml/2.2"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
MIME_TYPE = "application/vnd.google-earth.kml+xml"

MARKERS = {
    "red": "http://maps.google.com/mapfiles/markerA.png",
    "green": "http://maps.google.com/mapfiles/marker_greenB.png",
    "gray": "http://maps.gstatic.com/mapfiles/ridefinder-images/mm_20_gray.png",
}


def exported_name(track_id: int) -> str:
    return f"track{track_id}.kml"


def to_hms(seconds: int) -> str:
    """[d d ]HH:MM:SS"""
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    prefix = f"{days} d " if days > 0 else ""
    return f"{prefix}{hours:02d}:{minutes:02d}:{secs:02d}"


def _number(value: float) -> str:
    """Drop a trailing .0 so whole numbers read like integers."""
    return str(int(value)) if float(value).is_integer() else str(value)


def _sub(parent: ET.Element, tag: str, text: Optional[str] = None, **attrib) -> ET.Element:
    element = ET.SubElement(parent, tag, attrib)
    if text is not None:
        element.text = text
    return element


def _style(document: ET.Element, color: str, href: str) -> None:
    style = _sub(document, "Style", id=f"{color}Style")
    icon_style = _sub(style, "IconStyle", id=f"{color}Icon")
    icon = _sub(icon_style, "Icon")
    _sub(icon, "href", href)


def describe(position, login: str, track_name: str, index: int, count: int,
             total_meters: int, total_seconds: int, units: str) -> str:
    u = unit_system(units)
    time_text = from_timestamp(to_timestamp(position.time)).strftime("%Y-%m-%d %H:%M:%S (UTC)")
    lines = [time_text]
    if position.comment is not None:
        lines.append(f"<b>{escape(position.comment)}</b>")
    if position.speed is not None:
        lines.append(f"{_number(round(position.speed * 3.6 * u.factor_kmh, 2))} {u.unit_kmh}")
    if position.altitude is not None:
        lines.append(f"↕ {_number(round(position.altitude * u.factor_m))} {u.unit_m}")
    lines.append(f"Σ {to_hms(total_seconds)}")
    lines.append(f"↔ {_number(round(total_meters / 1000 * u.factor_km, 2))} {u.unit_km}")
    average = round(total_meters / total_seconds * 3.6 * u.factor_kmh, 2) if total_seconds else 0
    lines.append(f"~ {_number(average)} {u.unit_kmh}")

    return (
        '<div style="font-weight: bolder; padding-bottom: 10px; border-bottom: 1px solid gray;">'
        f"{escape(login)}@{escape(track_name)}"
        "</div>"
        "<div>"
        '<div style="padding-top: 10px;">' + "<br>".join(lines) + "<br></div>"
        f'<div style="font-size: smaller; padding-top: 10px;">{index}/{count}</div>'
        "</div>"
    )


def _coordinates(position) -> str:
    text = f"{position.longitude},{position.latitude}"
    if position.altitude is not None:
        text += f",{position.altitude}"
    return text


def export_kml(rows: Sequence[PositionRow], config: AppConfig, name: Optional[str] = None) -> str:
    """Render positions of one track as a KML document."""
    name = name or rows[0][2]

    root = ET.Element("kml", {
        "xmlns": KML_NS,
        "xmlns:xsi": XSI_NS,
        "xsi:schemaLocation": f"{KML_NS} http://schemas.opengis.net/kml/2.2.0/ogckml22.xsd",
    })
    document = _sub(root, "Document")
    _sub(document, "name", name)

    line_style = _sub(_sub(document, "Style", id="lineStyle"), "LineStyle")
    _sub(line_style, "color", "7f0000ff")
    _sub(line_style, "width", "4")
    for color, href in MARKERS.items():
        _style(document, color, href)

    count = len(rows)
    total_meters = 0
    total_seconds = 0
    previous = None
    coordinates = []
    for index, (position, login, track_name) in enumerate(rows, start=1):
        if previous is not None:
            total_meters += distance_to(position, previous)
            total_seconds += seconds_to(position, previous)
        previous = position

        if index == count:
            style = "#greenStyle"
        elif index == 1:
            style = "#redStyle"
        else:
            style = "#grayStyle"

        placemark = _sub(document, "Placemark", id=f"point_{position.id}")
        _sub(placemark, "description", describe(
            position, login, track_name, index, count, total_meters, total_seconds, config.units
        ))
        _sub(placemark, "styleUrl", style)
        coordinate = _coordinates(position)
        _sub(_sub(placemark, "Point"), "coordinates", coordinate)
        coordinates.append(coordinate)

    line = _sub(document, "Placemark", id="lineString")
    _sub(line, "styleUrl", "#lineStyle")
    _sub(_sub(line, "LineString"), "coordinates", "\n".join(coordinates))

    ET.indent(root)
    return ET.tostring(root, encoding="utf-8", xml_declaration=True).decode("utf-8")
