"""
Application settings schemas.

AppConfig holds the display and behaviour settings administrators can
edit at runtime. Defaults apply until a value is saved.
"""

from typing import List, Literal, Optional
from pydantic import Field, field_validator
from tracklog.app.schemas.common import CamelModel
from tracklog.app.services.locales import LANGUAGES


class LayerSchema(CamelModel):
    """Extra OpenLayers tile source."""
    id: int
    name: str = Field(..., max_length=50)
    url: str = Field(..., max_length=255)
    priority: int = 0


class AppConfig(CamelModel):
    version: str = "2.0-beta"
    map_api: Literal["openlayers", "gmaps"] = "openlayers"
    google_key: Optional[str] = None
    ol_layers: List[LayerSchema] = Field(default_factory=list)
    init_latitude: float = Field(52.23, ge=-90, le=90)
    init_longitude: float = Field(21.01, ge=-180, le=180)
    require_authentication: bool = True
    public_tracks: bool = False
    pass_len_min: int = Field(10, ge=0)
    pass_strength: int = Field(2, ge=0, le=3)
    interval: int = Field(10, ge=1)
    lang: str = "en"
    units: Literal["metric", "imperial", "nautical"] = "metric"
    stroke_weight: int = 2
    stroke_color: str = "#ff0000"
    stroke_opacity: float = Field(1.0, ge=0, le=1)
    color_normal: str = "#ffffff"
    color_start: str = "#55b500"
    color_stop: str = "#ff6a00"
    color_extra: str = "#cccccc"
    color_hilite: str = "#feff6a"
    upload_max_size: int = Field(5242880, ge=0)

    @field_validator("lang")
    @classmethod
    def supported_language(cls, value: str) -> str:
        if value not in LANGUAGES:
            raise ValueError(f"Unsupported language: {value}")
        return value
