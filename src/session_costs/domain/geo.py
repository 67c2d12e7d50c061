"""Coordinate parsing and great-circle distance."""

import math
from dataclasses import dataclass

EARTH_RADIUS = {"miles": 3959, "km": 6371}


@dataclass(frozen=True)
class Coordinates:
    """Latitude and longitude in decimal degrees."""

    lat: float
    lng: float


def parse_coordinates(value: object) -> Coordinates | None:
    """Parse a ``"lat,lng"`` string; return None when it is not one."""
    if not value or not isinstance(value, str):
        return None
    parts = value.split(",")
    if len(parts) != 2:  # noqa: PLR2004
        return None
    try:
        lat = float(parts[0].strip())
        lng = float(parts[1].strip())
    except ValueError:
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return Coordinates(lat=lat, lng=lng)


def calculate_distance(
    lat1: float, lng1: float, lat2: float, lng2: float, unit: str = "miles"
) -> float:
    """Return the Haversine distance between two points."""
    radius = EARTH_RADIUS["miles"] if unit == "miles" else EARTH_RADIUS["km"]
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) ** 2
    )
    return radius * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
