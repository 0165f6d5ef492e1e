"""
OSRM HTTP client utilities.

Centralizes routing calls against an OSRM ``/route/v1`` endpoint.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from config import DEFAULT_ROUTING_PROFILE, get_osrm_base_url
from core.exceptions import ExternalServiceError
from core.http.request import request_json
from core.http.retry import retry_async
from core.http.session import get_session

logger = logging.getLogger(__name__)


def format_waypoints(coordinates: Iterable[tuple[float, float]]) -> str:
    """Render ``(lon, lat)`` pairs as OSRM's ``lon,lat;lon,lat`` path segment."""
    return ";".join(f"{lon},{lat}" for lon, lat in coordinates)


class OsrmClient:
    def __init__(self, base_url: str | None = None) -> None:
        self._base_url = (base_url or get_osrm_base_url()).rstrip("/")

    def route_url(self, coordinates: list[tuple[float, float]], profile: str) -> str:
        return f"{self._base_url}/route/v1/{profile}/{format_waypoints(coordinates)}"

    @retry_async()
    async def route(
        self,
        coordinates: list[tuple[float, float]],
        *,
        profile: str = DEFAULT_ROUTING_PROFILE,
    ) -> dict[str, Any]:
        """
        Request a full-overview GeoJSON route through the given waypoints.

        Args:
            coordinates: Ordered ``(lon, lat)`` waypoints, provider order.
            profile: OSRM routing profile, e.g. ``"driving"``.

        Returns:
            The decoded OSRM response. ``routes`` may be empty when the
            provider found no route; callers decide how to treat that.
        """
        if len(coordinates) < 2:
            msg = "OSRM route requires at least two waypoints."
            raise ExternalServiceError(msg, {"waypoints": len(coordinates)})

        url = self.route_url(coordinates, profile)
        session = await get_session()
        data = await request_json(
            "GET",
            url,
            session=session,
            params={"overview": "full", "geometries": "geojson"},
            # OSRM answers NoRoute/NoSegment with 400 and a JSON body.
            expected_status=(200, 400),
            service_name="OSRM route",
        )
        if not isinstance(data, dict):
            msg = "OSRM route error: unexpected response"
            raise ExternalServiceError(msg, {"url": url})
        if data.get("code") not in (None, "Ok"):
            logger.info("OSRM returned code=%s for %s", data.get("code"), url)
        return data


def first_route(data: dict[str, Any]) -> dict[str, Any] | None:
    """Return the first route of an OSRM response, or None when there is none."""
    routes = data.get("routes") if isinstance(data, dict) else None
    if not isinstance(routes, list) or not routes:
        return None
    route = routes[0]
    if not isinstance(route, dict):
        return None
    geometry = route.get("geometry")
    if not isinstance(geometry, dict) or not geometry.get("coordinates"):
        return None
    return route
