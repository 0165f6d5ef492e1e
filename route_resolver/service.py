"""
Server-side route resolution.

One call turns a stop list (or a bus id) into geocoded stops plus road
geometry, so map clients need a single round-trip per route. Results are
cached for 24 hours under a key derived from the ordered stop names.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import UTC, datetime
from typing import Any

from config import DEFAULT_ROUTING_PROFILE, get_geocode_min_interval, get_geocode_region
from core.constants import METERS_PER_KM
from core.exceptions import (
    GeocodeInsufficientError,
    ResourceNotFoundError,
    RoutingUnavailableError,
    ValidationError,
)
from core.geo import lonlat_to_latlon
from core.http.nominatim import NominatimClient
from core.http.osrm import OsrmClient, first_route
from core.http.supabase import SupabaseBusStore
from core.mapping.interfaces import BusRecordStore, Geocoder, Router
from geocoding import (
    GeocodeCache,
    GeocodeResolver,
    build_resolver_queries,
    make_rate_limiter,
)
from route_resolver.cache import EdgeRouteCache, make_edge_cache_key
from route_resolver.models import ResolvedStop, ResolveRequest, RouteResponse

logger = logging.getLogger(__name__)

MIN_STOPS = 2


class EdgeRouteResolver:
    """
    Resolve a bus route: stops, then cache, then geocoding, then routing.

    The geocoding limiter is shared by every request this instance serves;
    the geocode cache is per request.
    """

    def __init__(
        self,
        records: BusRecordStore | None = None,
        cache: EdgeRouteCache | None = None,
        geocoder: Geocoder | None = None,
        router: Router | None = None,
        *,
        region: str | None = None,
        min_interval: float | None = None,
        limiter: AbstractAsyncContextManager[Any] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._records = records or SupabaseBusStore()
        self._cache = cache or EdgeRouteCache(clock=clock)
        self._geocoder = geocoder or NominatimClient()
        self._router = router or OsrmClient()
        self._region = region or get_geocode_region()
        if limiter is None:
            interval = get_geocode_min_interval() if min_interval is None else min_interval
            limiter = make_rate_limiter(interval)
        self._limiter = limiter
        self._clock = clock

    async def resolve(self, request: ResolveRequest) -> RouteResponse:
        stops = await self._stop_names(request)
        if len(stops) < MIN_STOPS:
            msg = "At least 2 stops are required"
            raise ValidationError(msg, {"stops": len(stops)})

        key = make_edge_cache_key(stops)
        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug("Route cache hit for %s", key)
            return cached.model_copy(update={"from_cache": True})

        resolved = await self._geocode(stops)
        if len(resolved) < MIN_STOPS:
            msg = "Could not geocode enough stops"
            raise GeocodeInsufficientError(
                msg, {"resolved": len(resolved), "total": len(stops)}
            )

        waypoints = [(stop.lon, stop.lat) for stop in resolved]
        data = await self._router.route(waypoints, profile=DEFAULT_ROUTING_PROFILE)
        route = first_route(data)
        if route is None:
            msg = "Routing provider returned no routes"
            raise RoutingUnavailableError(msg, {"code": data.get("code")})

        response = RouteResponse(
            bus_id=request.bus_id,
            bus_name=request.bus_name,
            stops=resolved,
            geometry=lonlat_to_latlon(route["geometry"]["coordinates"]),
            distance_km=float(route.get("distance") or 0) / METERS_PER_KM,
            duration_sec=float(route.get("duration") or 0),
            cached_at=datetime.fromtimestamp(self._clock(), UTC),
        )
        await self._cache.set(key, response)
        return response

    async def _stop_names(self, request: ResolveRequest) -> list[str]:
        if request.stops:
            return request.stops
        if request.bus_id is None:
            msg = "Provide stops or busId"
            raise ValidationError(msg)

        stops = await self._records.get_stops(request.bus_id)
        if stops is None:
            msg = f"Bus {request.bus_id} not found"
            raise ResourceNotFoundError(msg, {"busId": request.bus_id})
        return [stop.strip() for stop in stops if stop.strip()]

    async def _geocode(self, stops: list[str]) -> list[ResolvedStop]:
        """Geocode in order; each stop is anchored on the previous resolved one."""
        geocoder = GeocodeResolver(
            self._geocoder,
            cache=GeocodeCache(),
            region=self._region,
            limiter=self._limiter,
            query_builder=build_resolver_queries,
        )
        resolved: list[ResolvedStop] = []
        anchor = None
        for name in stops:
            result = await geocoder.resolve(name, anchor)
            if result is None:
                logger.warning("Could not geocode stop %r, skipping", name)
                continue
            resolved.append(
                ResolvedStop(
                    name=name,
                    corrected=result.corrected_name,
                    lat=result.lat,
                    lon=result.lon,
                )
            )
            anchor = result.coordinate
        return resolved
