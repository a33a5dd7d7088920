"""
Display unit conversions used in exported descriptions.

Speeds are stored in m/s, altitudes in meters, distances in meters.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class UnitSystem:
    factor_kmh: float
    unit_kmh: str
    factor_m: float
    unit_m: str
    factor_km: float
    unit_km: str


METRIC = UnitSystem(1, "km/h", 1, "m", 1, "km")
IMPERIAL = UnitSystem(0.62, "mph", 3.28, "ft", 0.62, "mi")
NAUTICAL = UnitSystem(0.54, "kt", 1, "m", 0.54, "nm")


def unit_system(units: str) -> UnitSystem:
    if units == "imperial":
        return IMPERIAL
    if units == "nautical":
        return NAUTICAL
    return METRIC
