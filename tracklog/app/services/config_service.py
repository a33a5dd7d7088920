"""
Application settings storage.

Settings are persisted as name/value rows with JSON encoded values, extra
map layers in the ol_layers table. A per-process cache holds the last
loaded or saved AppConfig; it is refreshed after every successful save.
"""

import json
import logging
from typing import Dict, Optional
from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from tracklog.app.core.config import settings
from tracklog.app.core.exceptions import DatabaseError, ServerError
from tracklog.app.models.config_entry import ConfigEntry, Layer
from tracklog.app.schemas.config import AppConfig, LayerSchema

logger = logging.getLogger(__name__)

# AppConfig attribute -> config.name
STORAGE_KEYS: Dict[str, str] = {
    "color_extra": "color_extra",
    "color_hilite": "color_hilite",
    "color_normal": "color_normal",
    "color_start": "color_start",
    "color_stop": "color_stop",
    "google_key": "google_key",
    "init_latitude": "latitude",
    "init_longitude": "longitude",
    "interval": "interval_seconds",
    "lang": "lang",
    "map_api": "map_api",
    "pass_len_min": "pass_lenmin",
    "pass_strength": "pass_strength",
    "public_tracks": "public_tracks",
    "require_authentication": "require_auth",
    "stroke_color": "stroke_color",
    "stroke_opacity": "stroke_opacity",
    "stroke_weight": "stroke_weight",
    "units": "units",
    "upload_max_size": "upload_maxsize",
}


def apply_rules(config: AppConfig) -> AppConfig:
    """Tracks must be public when no authentication is required."""
    if not config.require_authentication:
        config.public_tracks = True
    return config


def clamp_upload_limit(config: AppConfig) -> AppConfig:
    limit = settings.upload_max_size_limit
    if config.upload_max_size <= 0 or config.upload_max_size > limit:
        config.upload_max_size = limit
    return config


async def load_config(db: AsyncSession) -> AppConfig:
    """
    Read settings from the database.

    Unknown names are ignored, missing ones keep their defaults.

    Raises:
        DatabaseError: If the query fails
        ServerError: If a stored value doesn't fit its setting
    """
    try:
        rows = (await db.execute(select(ConfigEntry))).scalars().all()
        layers = (await db.execute(select(Layer).order_by(Layer.priority, Layer.id))).scalars().all()
    except SQLAlchemyError as e:
        logger.error("Loading config failed: %s", e)
        raise DatabaseError(str(e))

    by_key = {row.name: row.value for row in rows}
    data = {}
    try:
        for attr, key in STORAGE_KEYS.items():
            if key in by_key:
                data[attr] = json.loads(by_key[key])
    except json.JSONDecodeError as e:
        logger.error("Stored config value is not JSON: %s", e)
        raise ServerError("Invalid stored config")
    data["ol_layers"] = [LayerSchema.model_validate(layer) for layer in layers]

    try:
        config = AppConfig.model_validate(data)
    except ValidationError as e:
        raise ServerError(f"Invalid stored config: {e.error_count()} error(s)")
    return apply_rules(config)


async def save_config(db: AsyncSession, config: AppConfig) -> AppConfig:
    """
    Replace stored settings and layers in one transaction.

    The cache is refreshed only after the commit succeeds.
    """
    config = apply_rules(clamp_upload_limit(config))
    try:
        await db.execute(delete(ConfigEntry))
        for attr, key in STORAGE_KEYS.items():
            db.add(ConfigEntry(name=key, value=json.dumps(getattr(config, attr))))
        await db.execute(delete(Layer))
        for layer in config.ol_layers:
            db.add(Layer(id=layer.id, name=layer.name, url=layer.url, priority=layer.priority))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Saving config failed: %s", e)
        raise DatabaseError(str(e))

    config_cache.set(config)
    logger.info("Config saved (require_auth=%s, public_tracks=%s)", config.require_authentication, config.public_tracks)
    return config


class ConfigCache:
    """Per-process settings cache."""

    def __init__(self):
        self._config: Optional[AppConfig] = None

    async def get(self, db: AsyncSession) -> AppConfig:
        if self._config is None:
            self._config = await load_config(db)
        return self._config

    def set(self, config: AppConfig) -> None:
        self._config = config

    def invalidate(self) -> None:
        self._config = None


config_cache = ConfigCache()
