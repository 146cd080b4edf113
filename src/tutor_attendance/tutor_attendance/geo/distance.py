from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

from ..core.constants import EARTH_RADIUS_KM
from .model import Coordinate


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters between two coordinates."""
    if a == b:
        return 0.0

    d_lat = radians(b.latitude - a.latitude)
    d_lon = radians(b.longitude - a.longitude)
    h = sin(d_lat / 2) ** 2 + cos(radians(a.latitude)) * cos(radians(b.latitude)) * sin(d_lon / 2) ** 2
    # Rounding can push h marginally past 1 for antipodal points.
    h = min(max(h, 0.0), 1.0)
    c = 2 * atan2(sqrt(h), sqrt(1 - h))
    return EARTH_RADIUS_KM * c * 1000


def within_radius(user: Coordinate, center: Coordinate, radius_meters: float) -> bool:
    """Inclusive: a point exactly `radius_meters` away is within range."""
    return haversine_distance(user, center) <= radius_meters
