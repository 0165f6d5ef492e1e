"""Cache key derivation for route geometry."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from config import ROUTE_KEY_PRECISION


class LatLon(Protocol):
    @property
    def lat(self) -> float: ...

    @property
    def lon(self) -> float: ...


def _round(value: float, precision: int) -> str:
    # Adding 0.0 folds -0.0 into 0.0 so jitter around zero collides.
    return f"{round(value, precision) + 0.0:.{precision}f}"


def make_route_key(
    stops: Sequence[LatLon],
    profile: str,
    *,
    precision: int = ROUTE_KEY_PRECISION,
) -> str:
    """
    Key a stop sequence for the route cache.

    Coordinates are written lon-first and rounded to ``precision`` decimals,
    so GPS noise below that precision maps to the same key while A->B and
    B->A stay distinct.
    """
    coords = ";".join(
        f"{_round(stop.lon, precision)},{_round(stop.lat, precision)}" for stop in stops
    )
    return f"{profile}:{coords}"
