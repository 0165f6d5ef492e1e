"""
CPU-bound geometry routines run inside the worker process.

Points are ``(lat, lon)`` tuples unless stated otherwise.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from core.constants import METERS_PER_KM
from core.geo import haversine_km, haversine_meters, initial_bearing, lonlat_to_latlon

MAX_ARROWS = 8
DEFAULT_MIN_DISTANCE_METERS = 20.0

Point = tuple[float, float]
FixT = TypeVar("FixT")


def parse_geometry(
    coordinates: Sequence[Sequence[float]],
    total_distance_m: float,
) -> tuple[list[Point], float]:
    """Flip provider ``[lon, lat]`` pairs to ``(lat, lon)`` and convert metres to km."""
    return lonlat_to_latlon(coordinates), total_distance_m / METERS_PER_KM


def compute_arrow_bearings(points: Sequence[Point]) -> list[tuple[float, float, float]]:
    """
    Sample up to eight direction arrows evenly along a polyline.

    Each sample is ``(lat, lon, bearing)`` at ``points[i]`` where the bearing
    runs from ``points[i - 1]`` to ``points[i]``.
    """
    step = max(1, len(points) // MAX_ARROWS)
    arrows: list[tuple[float, float, float]] = []
    for i in range(step, len(points) - 1, step):
        lat1, lon1 = points[i - 1]
        lat2, lon2 = points[i]
        arrows.append((lat2, lon2, initial_bearing(lat1, lon1, lat2, lon2)))
        if len(arrows) == MAX_ARROWS:
            break
    return arrows


def haversine_chain(points: Sequence[Point]) -> float:
    """Cumulative great-circle length of a polyline, in km."""
    return sum(
        haversine_km(lat1, lon1, lat2, lon2)
        for (lat1, lon1), (lat2, lon2) in zip(points, points[1:])
    )


def filter_noisy_gps(
    fixes: Sequence[FixT],
    min_distance_m: float = DEFAULT_MIN_DISTANCE_METERS,
    *,
    position=lambda fix: (fix.lat, fix.lon),
) -> list[FixT]:
    """
    Drop fixes closer than ``min_distance_m`` to the last kept fix.

    The first fix is always kept. This is a greedy single pass, so a vehicle
    creeping forward in sub-threshold steps is only reported once the
    accumulated movement crosses the threshold.
    """
    if not fixes:
        return []
    kept = [fixes[0]]
    last_lat, last_lon = position(fixes[0])
    for fix in fixes[1:]:
        lat, lon = position(fix)
        if haversine_meters(last_lat, last_lon, lat, lon) >= min_distance_m:
            kept.append(fix)
            last_lat, last_lon = lat, lon
    return kept
