"""
KML export tests.
"""

import xml.etree.ElementTree as ET
from tracklog.app.domain.geo import from_timestamp
from tracklog.app.models.position import Position
from tracklog.app.schemas.config import AppConfig
from tracklog.app.services.kml import describe, export_kml, to_hms

NS = {"kml": "http://www.opengis.net/kml/2.2"}


def _rows():
    points = [
        (1, 1000, 0.0, 0.0, dict(altitude=10.0, speed=5.0)),
        (2, 1060, 0.0, 0.5, dict(comment="Halfway")),
        (3, 3700, 0.0, 1.0, dict()),
    ]
    return [
        (Position(id=pid, user_id=1, track_id=7, time=from_timestamp(ts), latitude=lat, longitude=lon, **extra),
         "alice", "Commute")
        for pid, ts, lat, lon, extra in points
    ]


def test_to_hms():
    assert to_hms(0) == "00:00:00"
    assert to_hms(3725) == "01:02:05"
    assert to_hms(2 * 86400 + 61) == "2 d 00:01:01"


def test_export_structure():
    root = ET.fromstring(export_kml(_rows(), AppConfig()).encode("utf-8"))
    document = root.find("kml:Document", NS)
    assert document.find("kml:name", NS).text == "Commute"

    placemarks = document.findall("kml:Placemark", NS)
    assert [p.get("id") for p in placemarks] == ["point_1", "point_2", "point_3", "lineString"]
    assert [p.find("kml:styleUrl", NS).text for p in placemarks] == [
        "#redStyle", "#grayStyle", "#greenStyle", "#lineStyle"
    ]
    assert placemarks[0].find("kml:Point/kml:coordinates", NS).text == "0.0,0.0,10.0"
    assert placemarks[1].find("kml:Point/kml:coordinates", NS).text == "0.5,0.0"
    line = placemarks[3].find("kml:LineString/kml:coordinates", NS).text
    assert line.split("\n") == ["0.0,0.0,10.0", "0.5,0.0", "1.0,0.0"]


def test_export_custom_name():
    root = ET.fromstring(export_kml(_rows(), AppConfig(), name="Export").encode("utf-8"))
    assert root.find("kml:Document/kml:name", NS).text == "Export"


def test_description_totals_metric():
    rows = _rows()
    text = describe(rows[2][0], "alice", "Commute", 3, 3, 111200, 2700, "metric")
    assert "alice@Commute" in text
    assert "1970-01-01 01:01:40 (UTC)" in text
    assert "Σ 00:45:00" in text
    assert "↔ 111.2 km" in text
    assert "~ 148.27 km/h" in text
    assert "3/3" in text


def test_description_imperial_units():
    position = _rows()[0][0]
    text = describe(position, "alice", "Commute", 1, 3, 0, 0, "imperial")
    assert "11.16 mph" in text
    assert "↕ 33 ft" in text
    assert "~ 0 mph" in text


def test_description_escapes_comment():
    position = Position(id=1, time=from_timestamp(0), latitude=0.0, longitude=0.0, comment="<b>&</b>")
    text = describe(position, "a<b", "t", 1, 1, 0, 0, "metric")
    assert "&lt;b&gt;&amp;&lt;/b&gt;" in text
    assert "a&lt;b@t" in text
