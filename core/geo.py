"""Great-circle helpers shared by the geocoder, resolver and geometry worker.

All functions take degrees and treat the earth as a sphere.
"""

from __future__ import annotations

import math

from core.constants import EARTH_RADIUS_KM, EARTH_RADIUS_METERS


def _haversine_angle(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres."""
    return EARTH_RADIUS_KM * _haversine_angle(lat1, lon1, lat2, lon2)


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres."""
    return EARTH_RADIUS_METERS * _haversine_angle(lat1, lon1, lat2, lon2)


def initial_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Initial bearing from point 1 towards point 2.

    Returns:
        Compass bearing in degrees, normalized to [0, 360).
    """
    lat1_r = math.radians(lat1)
    lat2_r = math.radians(lat2)
    d_lon = math.radians(lon2 - lon1)
    x = math.sin(d_lon) * math.cos(lat2_r)
    y = math.cos(lat1_r) * math.sin(lat2_r) - math.sin(lat1_r) * math.cos(
        lat2_r
    ) * math.cos(d_lon)
    return (math.degrees(math.atan2(x, y)) + 360.0) % 360.0


def lonlat_to_latlon(
    coordinates: list[list[float]] | list[tuple[float, float]],
) -> list[tuple[float, float]]:
    """Swap provider ``[lon, lat]`` pairs into ``(lat, lon)`` consumer order."""
    return [(float(pair[1]), float(pair[0])) for pair in coordinates]
