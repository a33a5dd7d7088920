"""
Tests for the form-encoded endpoint used by older mobile clients.
"""

import pytest
from sqlalchemy import select
from tracklog.app.models.position import Position
from tracklog.app.models.track import Track

URL = "/client/index.php"
PASSWORD = "Secret-pass1"


@pytest.mark.asyncio
async def test_auth_sets_session_cookie(client, alice):
    response = await client.post(URL, data={"action": "auth", "user": "alice", "pass": PASSWORD})
    assert response.status_code == 200
    assert response.json() == {"error": False}
    token = response.cookies.get("tracklog_session")
    assert token

    client.cookies.clear()
    response = await client.post(
        URL, data={"action": "addtrack", "track": "From cookie"},
        headers={"Cookie": f"tracklog_session={token}"},
    )
    assert response.status_code == 200
    assert response.json()["error"] is False


@pytest.mark.asyncio
async def test_auth_failure(client, alice):
    response = await client.post(URL, data={"action": "auth", "user": "alice", "pass": "wrong"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_actions_require_session(client):
    response = await client.post(URL, data={"action": "addtrack", "track": "x"})
    assert response.status_code == 401

    response = await client.post(URL, data={"action": "nonsense"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unknown_action(client, alice, headers_for):
    response = await client.post(URL, data={"action": "adduser"}, headers=headers_for(alice))
    assert response.status_code == 200
    assert response.json() == {"error": True, "message": "Unknown command"}


@pytest.mark.asyncio
async def test_add_track(client, alice, headers_for, db_session):
    response = await client.post(URL, data={"action": "addtrack", "track": "Phone track"}, headers=headers_for(alice))
    assert response.status_code == 200
    data = response.json()
    assert data["error"] is False

    track = await db_session.get(Track, data["trackid"])
    assert track.name == "Phone track"
    assert track.user_id == alice.id


@pytest.mark.asyncio
async def test_add_track_without_name(client, alice, headers_for):
    response = await client.post(URL, data={"action": "addtrack"}, headers=headers_for(alice))
    assert response.status_code == 200
    assert response.json() == {"error": True, "message": "Missing required parameter"}


@pytest.mark.asyncio
async def test_add_position(client, alice, add_track, headers_for, db_session):
    track = await add_track(alice)
    form = {
        "action": "addpos",
        "trackid": str(track.id),
        "lat": "52.2297",
        "lon": "21.0122",
        "time": "1700000000",
        "altitude": "101.5",
        "speed": "2.0",
        "bearing": "180",
        "accuracy": "12",
        "provider": "gps",
        "comment": "From the field",
    }
    response = await client.post(URL, data=form, headers=headers_for(alice))
    assert response.status_code == 200
    assert response.json() == {"error": False}

    position = (await db_session.execute(select(Position).where(Position.track_id == track.id))).scalar_one()
    assert position.user_id == alice.id
    assert (position.latitude, position.longitude, position.altitude) == (52.2297, 21.0122, 101.5)
    assert position.accuracy == 12
    assert position.comment == "From the field"
    assert position.image is None


@pytest.mark.asyncio
async def test_add_position_with_image(client, alice, add_track, headers_for, db_session, upload_dir):
    track = await add_track(alice)
    form = {"action": "addpos", "trackid": str(track.id), "lat": "1.0", "lon": "2.0", "time": "1700000000"}
    response = await client.post(
        URL,
        data=form,
        files={"image": ("photo.png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 32, "image/png")},
        headers=headers_for(alice),
    )
    assert response.json() == {"error": False}

    position = (await db_session.execute(select(Position).where(Position.track_id == track.id))).scalar_one()
    assert position.image.endswith(".png")
    assert (upload_dir / position.image).exists()


@pytest.mark.asyncio
async def test_add_position_missing_fields(client, alice, add_track, headers_for):
    track = await add_track(alice)
    response = await client.post(
        URL, data={"action": "addpos", "trackid": str(track.id), "lat": "1.0"}, headers=headers_for(alice)
    )
    assert response.json() == {"error": True, "message": "Missing required parameter"}


@pytest.mark.asyncio
async def test_add_position_to_foreign_track(client, alice, bob, add_track, headers_for):
    track = await add_track(alice)
    form = {"action": "addpos", "trackid": str(track.id), "lat": "1.0", "lon": "2.0", "time": "1700000000"}
    response = await client.post(URL, data=form, headers=headers_for(bob))
    assert response.status_code == 200
    assert response.json() == {"error": True, "message": "notauthorized"}
