"""
Message types for the geometry worker protocol.

Requests and responses are JSON-shaped dicts on the wire
(``{"type": ..., **payload}``) with the camelCase field names map clients
already send. Inside the worker they are validated into a closed union
discriminated by ``type``.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Message(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class LineGeometry(BaseModel):
    """GeoJSON LineString as returned by the routing provider (``[lon, lat]`` pairs)."""

    model_config = ConfigDict(extra="ignore")

    coordinates: list[Annotated[list[float], Field(min_length=2)]]


class GpsFix(BaseModel):
    """A raw position fix. Extra fields such as ``timestamp`` ride along untouched."""

    model_config = ConfigDict(extra="allow")

    lat: float
    lon: float


class ParseGeometry(_Message):
    type: Literal["parseGeometry"] = "parseGeometry"
    geometry: LineGeometry
    total_distance: float = Field(alias="totalDistance")


class ComputeArrowBearings(_Message):
    type: Literal["computeArrowBearings"] = "computeArrowBearings"
    points: list[tuple[float, float]]


class HaversineChain(_Message):
    type: Literal["haversineChain"] = "haversineChain"
    coords: list[tuple[float, float]]


class FilterNoisyGps(_Message):
    type: Literal["filterNoisyGps"] = "filterNoisyGps"
    raw_points: list[GpsFix] = Field(alias="rawPoints")
    min_dist_meters: float = Field(default=20.0, alias="minDistMeters", ge=0)


GeometryRequest = Annotated[
    ParseGeometry | ComputeArrowBearings | HaversineChain | FilterNoisyGps,
    Field(discriminator="type"),
]

REQUEST_ADAPTER: TypeAdapter[GeometryRequest] = TypeAdapter(GeometryRequest)
REQUEST_TYPES: frozenset[str] = frozenset(
    {"parseGeometry", "computeArrowBearings", "haversineChain", "filterNoisyGps"}
)


class GeometryParsed(_Message):
    type: Literal["geometryParsed"] = "geometryParsed"
    points: list[tuple[float, float]]
    distance_km: float = Field(alias="distanceKm")


class ArrowBearing(_Message):
    lat: float
    lon: float
    bearing: float


class ArrowBearings(_Message):
    type: Literal["arrowBearings"] = "arrowBearings"
    bearings: list[ArrowBearing]


class HaversineTotal(_Message):
    type: Literal["haversineTotal"] = "haversineTotal"
    total_km: float = Field(alias="totalKm")


class FilteredGps(_Message):
    type: Literal["filteredGps"] = "filteredGps"
    points: list[GpsFix]


GeometryResponse = GeometryParsed | ArrowBearings | HaversineTotal | FilteredGps
