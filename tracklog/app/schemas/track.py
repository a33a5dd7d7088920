"""
Track Pydantic schemas.
"""

from typing import Optional
from pydantic import Field
from tracklog.app.schemas.common import CamelModel


class TrackResponse(CamelModel):
    id: int
    user_id: int
    name: str
    comment: Optional[str] = None


class TrackCreate(CamelModel):
    """
    Schema for a new track.

    userId defaults to the caller when omitted.
    """
    user_id: Optional[int] = None
    name: str = Field(..., max_length=255)
    comment: Optional[str] = None


class TrackUpdate(CamelModel):
    id: int
    user_id: Optional[int] = None
    name: str = Field(..., max_length=255)
    comment: Optional[str] = None
