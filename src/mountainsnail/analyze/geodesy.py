# mountainsnail/analyze/geodesy.py
"""
Horizontal distance between two track points.

Every backend takes two (lat, lon) tuples in degrees and returns kilometers,
raising GeometryError when no finite distance can be produced. The track
engine only relies on that contract, so backends are interchangeable.
"""

from __future__ import annotations

import math
from typing import Callable, Optional

from geopy.distance import geodesic
from haversine import Unit, haversine

from mountainsnail.errors import ConfigurationError, GeometryError

LatLon = tuple[float, float]
DistanceFunc = Callable[[LatLon, LatLon], float]


def haversine_km(a: LatLon, b: LatLon) -> float:
    """Great-circle distance on a mean-radius sphere."""
    try:
        d = haversine(a, b, unit=Unit.KILOMETERS)
    except (ValueError, TypeError) as e:
        raise GeometryError(f"Cannot measure {a} -> {b}: {e}") from e
    return _checked(d, a, b)


def geodesic_km(a: LatLon, b: LatLon) -> float:
    """Ellipsoidal (WGS-84) distance via geopy."""
    try:
        d = geodesic(a, b).km
    except (ValueError, TypeError) as e:
        raise GeometryError(f"Cannot measure {a} -> {b}: {e}") from e
    return _checked(d, a, b)


def _checked(d: float, a: LatLon, b: LatLon) -> float:
    if not math.isfinite(d) or d < 0:
        raise GeometryError(f"Distance {a} -> {b} did not converge ({d})")
    return d


DISTANCE_METHODS: dict[str, DistanceFunc] = {
    "haversine": haversine_km,
    "geodesic": geodesic_km,
}


def get_distance_function(method: str) -> DistanceFunc:
    try:
        return DISTANCE_METHODS[method.strip().lower()]
    except (KeyError, AttributeError):
        raise ConfigurationError(
            f"Unknown distance method {method!r}. Valid: {', '.join(DISTANCE_METHODS)}."
        ) from None


def distance_km(a: LatLon, b: LatLon, *, method: str = "haversine") -> float:
    return get_distance_function(method)(a, b)


def with_elevation(horizontal_km: float, ele_a: Optional[float], ele_b: Optional[float]) -> float:
    """
    Straight-line distance including the elevation delta. When either side
    lacks elevation the leg is taken as flat.

    Only used when 3-D distance is switched on explicitly.
    """
    if ele_a is None or ele_b is None:
        return horizontal_km
    return math.hypot(horizontal_km, (ele_b - ele_a) / 1000.0)
