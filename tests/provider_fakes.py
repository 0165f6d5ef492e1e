from __future__ import annotations

import time
from typing import Any

from core.exceptions import StorageUnavailableError


def candidate(lat: float, lon: float, name: str = "", display_name: str = "") -> dict[str, Any]:
    """Raw Nominatim search result."""
    result: dict[str, Any] = {
        "lat": str(lat),
        "lon": str(lon),
        "display_name": display_name or f"{name}, Tamil Nadu, India",
    }
    if name:
        result["namedetails"] = {"name": name}
    return result


def osrm_response(
    coordinates: list[list[float]],
    *,
    distance: float = 12_500.0,
    duration: float = 1_800.0,
) -> dict[str, Any]:
    return {
        "code": "Ok",
        "routes": [
            {
                "geometry": {"type": "LineString", "coordinates": coordinates},
                "distance": distance,
                "duration": duration,
            }
        ],
    }


class FakeGeocoder:
    """Answers queries from a dict; unknown queries return no candidates."""

    def __init__(self, answers: dict[str, list[dict[str, Any]] | Exception]) -> None:
        self._answers = answers
        self.queries: list[str] = []
        self.sent_at: list[float] = []

    async def search(self, query: str, *, limit: int = 3) -> list[dict[str, Any]]:
        self.queries.append(query)
        self.sent_at.append(time.monotonic())
        answer = self._answers.get(query, [])
        if isinstance(answer, Exception):
            raise answer
        return answer[:limit]


class FakeRouter:
    def __init__(self, *responses: dict[str, Any] | Exception) -> None:
        self._responses = list(responses)
        self.calls: list[tuple[list[tuple[float, float]], str]] = []

    async def route(
        self,
        coordinates: list[tuple[float, float]],
        *,
        profile: str = "driving",
    ) -> dict[str, Any]:
        self.calls.append((list(coordinates), profile))
        if not self._responses:
            msg = "No fake routes available"
            raise AssertionError(msg)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class MemoryStore:
    """In-process stand-in for RedisKeyValueStore."""

    def __init__(self, *, fail_reads: bool = False, fail_writes: bool = False) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            msg = "Redis read failed: connection refused"
            raise StorageUnavailableError(msg)
        return self.data.get(key)

    async def set(self, key: str, value: str, *, ttl_ms: int | None = None) -> None:
        if self.fail_writes:
            msg = "Redis write failed: connection refused"
            raise StorageUnavailableError(msg)
        self.data[key] = value
        self.ttls[key] = ttl_ms

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)
        self.ttls.pop(key, None)


class FakeBusStore:
    def __init__(self, buses: dict[int, list[str]]) -> None:
        self._buses = buses
        self.lookups: list[int] = []

    async def get_stops(self, bus_id: int) -> list[str] | None:
        self.lookups.append(bus_id)
        return self._buses.get(bus_id)
