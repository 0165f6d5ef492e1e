"""Request and response bodies for the route resolver endpoint."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResolveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    bus_id: int | None = Field(default=None, alias="busId")
    bus_name: str | None = Field(default=None, alias="busName")
    stops: list[str] | None = None

    @field_validator("stops")
    @classmethod
    def _strip_blank_stops(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return [stop.strip() for stop in value if stop.strip()]


class ResolvedStop(BaseModel):
    name: str
    corrected: str
    lat: float
    lon: float


class RouteResponse(BaseModel):
    """Resolved route as returned to clients and stored in the resolver cache."""

    model_config = ConfigDict(populate_by_name=True)

    bus_id: int | None = Field(default=None, alias="busId")
    bus_name: str | None = Field(default=None, alias="busName")
    stops: list[ResolvedStop]
    geometry: list[tuple[float, float]]
    distance_km: float = Field(alias="distanceKm")
    duration_sec: float = Field(alias="durationSec")
    cached_at: datetime = Field(alias="cachedAt")
    from_cache: bool = Field(default=False, alias="fromCache")

    def to_body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    def to_cache_json(self) -> str:
        return self.model_dump_json(
            by_alias=True, exclude_none=True, exclude={"from_cache"}
        )
