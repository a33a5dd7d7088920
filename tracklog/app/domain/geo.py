"""
Distance and time helpers for positions.
"""

import calendar
from datetime import datetime, timezone
from math import asin, cos, radians, sin, sqrt

EARTH_RADIUS_M = 6371000


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> int:
    """Great-circle distance in meters, rounded to the nearest meter."""
    phi1, phi2 = radians(lat1), radians(lat2)
    d_phi = radians(lat2 - lat1)
    d_lambda = radians(lon2 - lon1)
    a = sin(d_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2) ** 2
    return round(2 * asin(sqrt(min(1.0, a))) * EARTH_RADIUS_M)


def distance_to(position, target) -> int:
    """Meters between two objects carrying latitude and longitude."""
    return haversine_m(position.latitude, position.longitude, target.latitude, target.longitude)


def seconds_to(position, target) -> int:
    return to_timestamp(position.time) - to_timestamp(target.time)


def to_timestamp(value: datetime) -> int:
    """Unix seconds; naive datetimes are taken as UTC."""
    return calendar.timegm(value.utctimetuple()) if value.tzinfo else calendar.timegm(value.timetuple())


def from_timestamp(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)
