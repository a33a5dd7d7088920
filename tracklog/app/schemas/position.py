"""
Position Pydantic schemas.

Timestamps are unix seconds on the wire.
"""

from typing import Optional
from pydantic import Field
from tracklog.app.schemas.common import CamelModel


class PositionResponse(CamelModel):
    """
    Position as returned to clients.

    meters and seconds are measured from the previous position of the listing.
    """
    id: int
    timestamp: int
    user_id: int
    user_login: str
    track_id: int
    track_name: str
    latitude: float
    longitude: float
    altitude: Optional[float] = None
    speed: Optional[float] = None
    bearing: Optional[float] = None
    accuracy: Optional[int] = None
    provider: Optional[str] = None
    comment: Optional[str] = None
    image: Optional[str] = None
    meters: int = 0
    seconds: int = 0


class PositionCreate(CamelModel):
    """
    Schema for a position reported by a client.

    Used by POST /client/positions.
    """
    track_id: int
    timestamp: int
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    altitude: Optional[float] = None
    speed: Optional[float] = None
    bearing: Optional[float] = None
    accuracy: Optional[int] = None
    provider: Optional[str] = None
    comment: Optional[str] = None


class PositionUpdate(CamelModel):
    id: int
    comment: Optional[str] = None


class ImageResponse(CamelModel):
    image: str
