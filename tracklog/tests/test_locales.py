"""
Locale endpoint tests.
"""

import pytest
from tracklog.app.services.locales import LANGUAGES, get_strings


@pytest.mark.asyncio
async def test_english_strings(client):
    response = await client.get("/api/locales")
    assert response.status_code == 200
    data = response.json()
    assert data["langArr"]["en"] == "English"
    assert data["langArr"] == LANGUAGES
    assert data["authfail"] == "Wrong username or password"


@pytest.mark.asyncio
async def test_configured_language(client, set_config):
    set_config(lang="hu")
    data = (await client.get("/api/locales")).json()
    assert data["authfail"] == "Hibás név vagy jelszó"
    # Untranslated keys fall back to English
    assert data["title"] == "• μlogger •"


@pytest.mark.asyncio
async def test_language_cookie(client):
    data = (await client.get("/api/locales", headers={"Cookie": "tracklog_lang=hu"})).json()
    assert data["private"] == "Felhasználónév és jelszó szükséges a belépéshez"


def test_language_without_table_uses_english():
    assert get_strings("de") == get_strings("en")
    assert get_strings("xx") == get_strings("en")
