"""Value types produced by stop geocoding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class Coordinate(NamedTuple):
    lat: float
    lon: float


@dataclass(frozen=True, slots=True)
class GeocodeResult:
    """A resolved stop. Instances are shared through the cache, so they are frozen."""

    corrected_name: str
    lat: float
    lon: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.lat, self.lon)
