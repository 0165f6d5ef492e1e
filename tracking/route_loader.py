"""
Client-side route loading.

Prefers the deployed route resolver, which answers with geocoded stops and
geometry in one round-trip. When it is not configured or fails, the route is
assembled locally from the geocoder, the route cache and the geometry worker.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from pydantic import ValidationError as PydanticValidationError

from config import DEFAULT_ROUTING_PROFILE, get_edge_resolver_url
from core.exceptions import (
    ExternalServiceError,
    GeocodeInsufficientError,
    RoutingUnavailableError,
)
from core.http.request import request_json
from core.http.session import get_session
from geocoding import GeocodeResolver, GeocodeResult
from geometry_worker import GeometryWorker
from route_resolver.models import ResolvedStop, RouteResponse
from routing.cache import RouteCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedRoute:
    stops: list[ResolvedStop]
    points: list[tuple[float, float]]
    distance_km: float
    bearings: list[dict[str, float]] = field(default_factory=list)
    from_edge: bool = False


class RouteLoader:
    def __init__(
        self,
        geocoder: GeocodeResolver | None = None,
        route_cache: RouteCache | None = None,
        worker: GeometryWorker | None = None,
        *,
        edge_url: str | None = None,
        profile: str = DEFAULT_ROUTING_PROFILE,
    ) -> None:
        self._geocoder = geocoder or GeocodeResolver()
        self._worker = worker or GeometryWorker()
        self._route_cache = route_cache or RouteCache(worker=self._worker)
        self._edge_url = edge_url if edge_url is not None else get_edge_resolver_url()
        self._profile = profile

    async def load(
        self,
        names: Sequence[str],
        *,
        bus_id: int | None = None,
        bus_name: str | None = None,
    ) -> LoadedRoute:
        """
        Load stops, geometry and direction arrows for a route.

        Raises:
            GeocodeInsufficientError: Fewer than two stops could be located.
            RoutingUnavailableError: No road geometry could be produced.
        """
        if self._edge_url:
            try:
                return await self._load_from_edge(names, bus_id, bus_name)
            except ExternalServiceError as e:
                logger.warning(
                    "Route resolver unavailable, resolving locally: %s", e.message
                )
            except PydanticValidationError:
                logger.warning("Route resolver sent a malformed body, resolving locally")
        return await self._load_locally(names)

    async def warm(self, names: Sequence[str]) -> asyncio.Task | None:
        """
        Geocode a route's stops and start a background geometry prewarm.

        Returns:
            The prewarm task, or None when fewer than two stops resolved.
        """
        located = [r for r in await self._geocoder.resolve_sequence(names) if r]
        if len(located) < 2:
            logger.debug("Not prewarming route: %d of %d stops located", len(located), len(names))
            return None
        return self._route_cache.schedule_prewarm(located, self._profile)

    async def _load_from_edge(
        self,
        names: Sequence[str],
        bus_id: int | None,
        bus_name: str | None,
    ) -> LoadedRoute:
        payload: dict[str, object] = {"stops": list(names)}
        if bus_id is not None:
            payload["busId"] = bus_id
        if bus_name is not None:
            payload["busName"] = bus_name

        session = await get_session()
        data = await request_json(
            "POST",
            self._edge_url,
            session=session,
            json=payload,
            service_name="Route resolver",
        )
        response = RouteResponse.model_validate(data)
        bearings = await self._worker.compute_arrow_bearings(response.geometry)
        return LoadedRoute(
            stops=response.stops,
            points=response.geometry,
            distance_km=response.distance_km,
            bearings=bearings,
            from_edge=True,
        )

    async def _load_locally(self, names: Sequence[str]) -> LoadedRoute:
        results = await self._geocoder.resolve_sequence(names)
        located: list[tuple[str, GeocodeResult]] = [
            (name, result) for name, result in zip(names, results) if result
        ]
        if len(located) < 2:
            msg = "Could not geocode enough stops"
            raise GeocodeInsufficientError(
                msg, {"resolved": len(located), "total": len(names)}
            )

        coords = [result for _, result in located]
        if not await self._route_cache.prewarm(coords, self._profile):
            msg = "No route found between stops"
            raise RoutingUnavailableError(msg)
        entry = await self._route_cache.get(coords, self._profile)
        if entry is None:
            msg = "Route geometry missing from cache"
            raise RoutingUnavailableError(msg)

        points = list(entry.points)
        bearings = await self._worker.compute_arrow_bearings(points)
        return LoadedRoute(
            stops=[
                ResolvedStop(
                    name=name,
                    corrected=result.corrected_name,
                    lat=result.lat,
                    lon=result.lon,
                )
                for name, result in located
            ],
            points=points,
            distance_km=entry.distance_km,
            bearings=bearings,
            from_edge=False,
        )
