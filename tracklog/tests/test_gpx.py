"""
GPX import and export tests.
"""

import pytest
from sqlalchemy import select
from tracklog.app.core.exceptions import DatabaseError, GpxParseError
from tracklog.app.models.position import Position
from tracklog.app.models.track import Track
from tracklog.app.schemas.config import AppConfig
from tracklog.app.services.gpx import export_gpx, import_gpx, parse_gpx, point_fields
from tracklog.app.services.positions import fetch_track_rows

GPX_TWO_TRACKS = b"""<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1"
     xmlns:ulogger="https://github.com/bfabiszewski/ulogger-android/1">
  <metadata><name>Weekend</name></metadata>
  <trk>
    <name>Saturday</name>
    <trkseg>
      <trkpt lat="52.2300" lon="21.0100">
        <ele>101.5</ele>
        <time>2023-11-14T22:13:20Z</time>
        <desc>Start</desc>
        <extensions>
          <ulogger:speed>3.5</ulogger:speed>
          <ulogger:bearing>90</ulogger:bearing>
          <ulogger:accuracy>7</ulogger:accuracy>
          <ulogger:provider>network</ulogger:provider>
        </extensions>
      </trkpt>
      <trkpt lat="52.2310" lon="21.0120">
        <time>2023-11-14T22:14:20Z</time>
      </trkpt>
    </trkseg>
  </trk>
  <trk>
    <name>Empty</name>
    <trkseg></trkseg>
  </trk>
  <trk>
    <trkseg>
      <trkpt lat="50.0" lon="19.9"><time>2023-11-15T08:00:00Z</time></trkpt>
    </trkseg>
  </trk>
</gpx>
"""

GPX_ONLY_EMPTY_TRACKS = b"""<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <trk><name>A</name><trkseg/></trk>
  <trk><name>B</name></trk>
</gpx>
"""


@pytest.mark.asyncio
async def test_import_skips_empty_tracks(db_session, alice):
    imported = await import_gpx(db_session, alice.id, GPX_TWO_TRACKS, "weekend.gpx")

    # Newest first; an unnamed track takes the file name
    assert [t.name for t in imported] == ["weekend.gpx", "Saturday"]
    assert all(t.comment == "Weekend" for t in imported)
    names = (await db_session.execute(select(Track.name).where(Track.user_id == alice.id))).scalars().all()
    assert sorted(names) == ["Saturday", "weekend.gpx"]


@pytest.mark.asyncio
async def test_import_point_fields(db_session, alice):
    imported = await import_gpx(db_session, alice.id, GPX_TWO_TRACKS, "weekend.gpx")
    saturday = imported[1]
    rows = await fetch_track_rows(db_session, saturday.id)
    first, second = rows[0][0], rows[1][0]

    assert (first.latitude, first.longitude, first.altitude) == (52.23, 21.01, 101.5)
    assert (first.speed, first.bearing, first.accuracy, first.provider) == (3.5, 90.0, 7, "network")
    assert first.comment == "Start"
    assert second.speed is None
    assert second.provider == "gps"
    assert second.altitude is None


@pytest.mark.asyncio
async def test_import_only_empty_tracks(db_session, alice):
    imported = await import_gpx(db_session, alice.id, GPX_ONLY_EMPTY_TRACKS, "empty.gpx")
    assert imported == []
    count = (await db_session.execute(select(Track.id))).scalars().all()
    assert count == []


def test_parse_without_tracks():
    content = b'<?xml version="1.0"?><gpx version="1.1" creator="t" xmlns="http://www.topografix.com/GPX/1/1"></gpx>'
    with pytest.raises(GpxParseError) as exc:
        parse_gpx(content)
    assert exc.value.message == "idatafailure"


def test_parse_malformed_xml():
    with pytest.raises(GpxParseError) as exc:
        parse_gpx(b"<gpx><trk>")
    assert exc.value.message.startswith("iparsefailure")


def test_parse_wrong_root():
    with pytest.raises(GpxParseError) as exc:
        parse_gpx(b'<?xml version="1.0"?><kml></kml>')
    assert exc.value.message.startswith("iparsefailure")


@pytest.mark.asyncio
async def test_export_then_import_keeps_coordinates(db_session, alice, add_track, add_position):
    track = await add_track(alice, name="Loop")
    await add_position(track, 1700000000, 52.2297, 21.0122, altitude=110.0, speed=1.25, bearing=45.5, accuracy=4, provider="gps")
    await add_position(track, 1700000060, 52.2301, 21.0131, comment="Bench", provider="gps")
    await add_position(track, 1700000120, 52.2310, 21.0140, provider="network")

    rows = await fetch_track_rows(db_session, track.id)
    content = export_gpx(rows, AppConfig())

    imported = await import_gpx(db_session, alice.id, content.encode("utf-8"), "loop.gpx")
    assert len(imported) == 1
    copy = await fetch_track_rows(db_session, imported[0].id)

    def summary(rows):
        return [
            (p.latitude, p.longitude, p.altitude, p.speed, p.bearing, p.accuracy, p.provider, p.comment)
            for p, _, _ in rows
        ]

    assert imported[0].name == "Loop"
    assert summary(copy) == summary(rows)
    assert [p.time.replace(tzinfo=None) for p, _, _ in copy] == [p.time.replace(tzinfo=None) for p, _, _ in rows]


@pytest.mark.asyncio
async def test_import_endpoint(client, alice, headers_for):
    response = await client.post(
        "/api/tracks/import",
        files={"gpxUpload": ("weekend.gpx", GPX_TWO_TRACKS, "application/gpx+xml")},
        headers=headers_for(alice),
    )
    assert response.status_code == 201
    data = response.json()
    assert [t["name"] for t in data] == ["weekend.gpx", "Saturday"]
    assert all(t["userId"] == alice.id for t in data)


@pytest.mark.asyncio
async def test_import_endpoint_rejects_bad_file(client, alice, headers_for):
    response = await client.post(
        "/api/tracks/import",
        files={"gpxUpload": ("broken.gpx", b"not xml at all", "application/gpx+xml")},
        headers=headers_for(alice),
    )
    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_GPX_001"


@pytest.mark.asyncio
async def test_import_requires_login(client):
    response = await client.post(
        "/api/tracks/import",
        files={"gpxUpload": ("weekend.gpx", GPX_TWO_TRACKS, "application/gpx+xml")},
    )
    assert response.status_code == 401


def test_parse_rejects_kml_with_tracks():
    content = b'<kml><trk><name>X</name><trkseg><trkpt lat="1" lon="2"/></trkseg></trk></kml>'
    with pytest.raises(GpxParseError) as exc:
        parse_gpx(content)
    assert exc.value.message == "iparsefailure"


@pytest.mark.asyncio
async def test_import_endpoint_rejects_kml(client, alice, headers_for, db_session):
    content = b'<kml><trk><name>X</name><trkseg><trkpt lat="1" lon="2"/></trkseg></trk></kml>'
    response = await client.post(
        "/api/tracks/import",
        files={"gpxUpload": ("x.gpx", content, "application/gpx+xml")},
        headers=headers_for(alice),
    )
    assert response.status_code == 422
    assert response.json()["message"] == "iparsefailure"
    assert (await db_session.execute(select(Track.id))).scalars().all() == []


@pytest.mark.asyncio
async def test_import_empty_extensions_are_absent(db_session, alice):
    content = b"""<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1"
     xmlns:ulogger="https://github.com/bfabiszewski/ulogger-android/1">
  <trk><name>Blank</name><trkseg>
    <trkpt lat="52.0" lon="21.0">
      <time>2023-11-14T22:13:20Z</time>
      <extensions>
        <ulogger:speed></ulogger:speed>
        <ulogger:bearing> </ulogger:bearing>
        <ulogger:accuracy/>
        <ulogger:provider></ulogger:provider>
      </extensions>
    </trkpt>
  </trkseg></trk>
</gpx>
"""
    imported = await import_gpx(db_session, alice.id, content, "blank.gpx")
    position = (await fetch_track_rows(db_session, imported[0].id))[0][0]
    assert (position.speed, position.bearing, position.accuracy, position.provider) == (None, None, None, "gps")


def test_parse_rejects_non_numeric_extension():
    content = b"""<gpx version="1.1" creator="t" xmlns="http://www.topografix.com/GPX/1/1"
     xmlns:ulogger="https://github.com/bfabiszewski/ulogger-android/1">
  <trk><trkseg><trkpt lat="1" lon="2"><extensions><ulogger:speed>fast</ulogger:speed></extensions></trkpt></trkseg></trk>
</gpx>"""
    gpx = parse_gpx(content)
    with pytest.raises(GpxParseError) as exc:
        point_fields(gpx.tracks[0].segments[0].points[0])
    assert exc.value.message == "iparsefailure"


@pytest.mark.asyncio
async def test_import_point_without_coordinates_writes_nothing(db_session, alice):
    content = b"""<gpx version="1.1" creator="t" xmlns="http://www.topografix.com/GPX/1/1">
  <trk><name>Good</name><trkseg><trkpt lat="1" lon="2"/></trkseg></trk>
  <trk><name>Bad</name><trkseg><trkpt lat="1"/></trkseg></trk>
</gpx>"""
    with pytest.raises(GpxParseError) as exc:
        await import_gpx(db_session, alice.id, content, "bad.gpx")
    assert exc.value.message.startswith("iparsefailure")
    assert (await db_session.execute(select(Track.id))).scalars().all() == []
    assert (await db_session.execute(select(Position.id))).scalars().all() == []


@pytest.mark.asyncio
async def test_import_database_failure_rolls_back(db_session):
    # No such user: the foreign key rejects the track
    with pytest.raises(DatabaseError):
        await import_gpx(db_session, 9999, GPX_TWO_TRACKS, "weekend.gpx")
    assert (await db_session.execute(select(Track.id))).scalars().all() == []
    assert (await db_session.execute(select(Position.id))).scalars().all() == []
