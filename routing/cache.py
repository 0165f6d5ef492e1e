"""
Two-tier cache for route geometry.

Tier 1 is a dict owned by the cache instance: zero-latency, gone with the
process. Tier 2 is a durable keyed store scoped to one browsing session; it
survives restarts of the client process and is best-effort. Lookups always
try tier 1 first and promote tier-2 hits into tier 1.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from config import DEFAULT_ROUTING_PROFILE, SESSION_CACHE_TTL_SECONDS
from core.exceptions import ExternalServiceError, StorageUnavailableError
from core.http.osrm import OsrmClient, first_route
from core.kv_store import RedisKeyValueStore
from core.mapping.interfaces import KeyValueStore, Router
from geometry_worker.geometry import haversine_chain, parse_geometry
from routing.keys import LatLon, make_route_key

if TYPE_CHECKING:
    from geometry_worker import GeometryWorker

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "btrc"


@dataclass(frozen=True)
class RouteGeometry:
    points: tuple[tuple[float, float], ...]
    distance_km: float


@dataclass(frozen=True)
class CachedRouteGeometry:
    """Route geometry as stored in both tiers. ``cached_at`` is epoch milliseconds."""

    points: tuple[tuple[float, float], ...]
    distance_km: float
    cached_at: int

    def to_json(self) -> str:
        return json.dumps(
            {
                "points": [list(point) for point in self.points],
                "distanceKm": self.distance_km,
                "cachedAt": self.cached_at,
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> CachedRouteGeometry:
        """Parse a tier-2 record. Raises ValueError for anything malformed."""
        payload = json.loads(raw)
        if not isinstance(payload, dict):
            msg = "cached route is not an object"
            raise ValueError(msg)
        try:
            points = tuple(
                (float(point[0]), float(point[1])) for point in payload["points"]
            )
            return cls(
                points=points,
                distance_km=float(payload["distanceKm"]),
                cached_at=int(payload["cachedAt"]),
            )
        except (KeyError, TypeError, IndexError) as exc:
            msg = f"cached route is missing fields: {exc}"
            raise ValueError(msg) from exc


def session_store(session_id: str) -> RedisKeyValueStore:
    """Tier-2 store for one browsing session, expiring with the session."""
    return RedisKeyValueStore(
        f"{SESSION_KEY_PREFIX}:{session_id}:",
        default_ttl_ms=SESSION_CACHE_TTL_SECONDS * 1000,
    )


class RouteCache:
    def __init__(
        self,
        router: Router | None = None,
        *,
        durable: KeyValueStore | None = None,
        clock: Callable[[], float] = time.time,
        worker: GeometryWorker | None = None,
    ) -> None:
        self._router = router or OsrmClient()
        self._worker = worker
        self._durable = durable
        self._clock = clock
        self._memory: dict[str, CachedRouteGeometry] = {}
        self._background: set[asyncio.Task] = set()

    async def get(
        self,
        stops: Sequence[LatLon],
        profile: str = DEFAULT_ROUTING_PROFILE,
    ) -> CachedRouteGeometry | None:
        key = make_route_key(stops, profile)
        hit = self._memory.get(key)
        if hit is not None:
            return hit
        if self._durable is None:
            return None

        try:
            raw = await self._durable.get(key)
        except StorageUnavailableError:
            logger.debug("Session route cache read failed for %s", key, exc_info=True)
            return None
        if raw is None:
            return None

        try:
            entry = CachedRouteGeometry.from_json(raw)
        except ValueError:
            logger.warning("Discarding corrupt session route cache entry %s", key)
            try:
                await self._durable.delete(key)
            except StorageUnavailableError:
                logger.debug("Could not delete corrupt entry %s", key, exc_info=True)
            return None

        self._memory[key] = entry
        return entry

    async def set(
        self,
        stops: Sequence[LatLon],
        data: RouteGeometry,
        profile: str = DEFAULT_ROUTING_PROFILE,
    ) -> CachedRouteGeometry:
        """Replace the record for ``stops`` in both tiers; tier 2 is best-effort."""
        key = make_route_key(stops, profile)
        entry = CachedRouteGeometry(
            points=tuple(data.points),
            distance_km=data.distance_km,
            cached_at=int(self._clock() * 1000),
        )
        self._memory[key] = entry

        if self._durable is not None:
            try:
                await self._durable.set(key, entry.to_json())
            except StorageUnavailableError:
                logger.debug(
                    "Session route cache write failed for %s", key, exc_info=True
                )
        return entry

    async def prewarm(
        self,
        stops: Sequence[LatLon],
        profile: str = DEFAULT_ROUTING_PROFILE,
    ) -> bool:
        """
        Make sure geometry for ``stops`` is cached.

        Returns:
            True when the route is cached after the call. Provider failures
            and empty route lists are logged and reported as False.
        """
        if await self.get(stops, profile) is not None:
            return True

        waypoints = [(stop.lon, stop.lat) for stop in stops]
        try:
            data = await self._router.route(waypoints, profile=profile)
        except ExternalServiceError as e:
            logger.warning("Route prewarm failed for %d stops: %s", len(stops), e.message)
            return False

        route = first_route(data)
        if route is None:
            logger.info("Routing provider returned no route for %d stops", len(stops))
            return False

        try:
            geometry = await self._parse_route(route)
        except (KeyError, TypeError, IndexError, ValueError, PydanticValidationError):
            logger.warning(
                "Routing provider returned malformed geometry for %d stops", len(stops)
            )
            return False
        await self.set(stops, geometry, profile)
        return True

    async def _parse_route(self, route: dict[str, Any]) -> RouteGeometry:
        """
        Flip the route to ``(lat, lon)`` in the geometry worker when one is attached.

        A missing or zero provider distance is replaced by the polyline length.
        """
        coordinates = route["geometry"]["coordinates"]
        total_m = float(route.get("distance") or 0)
        if self._worker is None:
            points, distance_km = parse_geometry(coordinates, total_m)
            if distance_km <= 0:
                distance_km = haversine_chain(points)
        else:
            points, distance_km = await self._worker.parse_geometry(coordinates, total_m)
            if distance_km <= 0:
                distance_km = await self._worker.haversine_chain(points)
        return RouteGeometry(tuple(points), distance_km)

    def schedule_prewarm(
        self,
        stops: Sequence[LatLon],
        profile: str = DEFAULT_ROUTING_PROFILE,
    ) -> asyncio.Task:
        """
        Run :meth:`prewarm` in the background.

        The task is held until it finishes; an unexpected failure is
        retrieved and logged by the done-callback so it never surfaces.
        """
        task = asyncio.create_task(self.prewarm(list(stops), profile))
        self._background.add(task)
        task.add_done_callback(self._on_prewarm_done)
        return task

    def _on_prewarm_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Background route prewarm failed", exc_info=exc)
