"""
Provider interfaces for geocoding, routing and storage collaborators.

The resolvers depend on these protocols rather than on concrete clients so
tests and alternative deployments can swap implementations.
"""

from typing import Any, Protocol


class Geocoder(Protocol):
    """Interface for forward geocoding services."""

    async def search(self, query: str, *, limit: int = 3) -> list[dict[str, Any]]:
        """Search for a place by name, returning raw provider candidates."""
        ...


class Router(Protocol):
    """Interface for routing services."""

    async def route(
        self,
        coordinates: list[tuple[float, float]],
        *,
        profile: str = "driving",
    ) -> dict[str, Any]:
        """Calculate a route through ordered ``(lon, lat)`` waypoints."""
        ...


class KeyValueStore(Protocol):
    """Durable keyed string store. Failures raise StorageUnavailableError."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, *, ttl_ms: int | None = None) -> None: ...

    async def delete(self, key: str) -> None: ...


class BusRecordStore(Protocol):
    """Read access to stored bus stop lists."""

    async def get_stops(self, bus_id: int) -> list[str] | None:
        """Return the stop names for a bus, or None when it does not exist."""
        ...
