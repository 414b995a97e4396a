"""Geospatial helper functions."""

from __future__ import annotations

import math
import re
from typing import Optional, Sequence

from shapely.geometry import Point, Polygon

EARTH_RADIUS_MILES = 3959.0

_STREET_NUMBER = re.compile(r"\d+")


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance in miles between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def street_number(address: Optional[str]) -> int:
    """Return the first run of digits in ``address``, or 0 when there is none."""

    if not address:
        return 0
    match = _STREET_NUMBER.search(address)
    return int(match.group(0)) if match else 0


def approximate_distance(address1: Optional[str], address2: Optional[str], *, scale: float = 1.0) -> float:
    """Rough distance between two street addresses from their street numbers.

    This is not geocoding: it compares the leading numbers of the two strings and
    divides the gap by ``scale``.
    """

    if scale <= 0:
        raise ValueError("scale must be > 0")
    return abs(street_number(address1) - street_number(address2)) / scale


def point_in_polygon(lat: float, lon: float, polygon_coords: Sequence[tuple[float, float]]) -> bool:
    """Return True if the point is inside the polygon denoted by (lat, lon) pairs."""

    polygon = Polygon([(lng, lat) for lat, lng in polygon_coords])
    return polygon.contains(Point(lon, lat))
