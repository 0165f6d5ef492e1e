"""
Message dispatch for the geometry worker.

``handle_message`` is the whole worker surface: it runs inside the worker
process, takes a JSON-shaped request dict and returns a JSON-shaped response
dict.
"""

from __future__ import annotations

import logging
from typing import Any, assert_never

from geometry_worker import geometry
from geometry_worker.messages import (
    REQUEST_ADAPTER,
    REQUEST_TYPES,
    ArrowBearing,
    ArrowBearings,
    ComputeArrowBearings,
    FilteredGps,
    FilterNoisyGps,
    GeometryParsed,
    GeometryResponse,
    HaversineChain,
    HaversineTotal,
    ParseGeometry,
)

logger = logging.getLogger(__name__)


def dispatch(request) -> GeometryResponse:
    match request:
        case ParseGeometry(geometry=line, total_distance=total_distance):
            points, distance_km = geometry.parse_geometry(
                line.coordinates, total_distance
            )
            return GeometryParsed(points=points, distance_km=distance_km)
        case ComputeArrowBearings(points=points):
            return ArrowBearings(
                bearings=[
                    ArrowBearing(lat=lat, lon=lon, bearing=bearing)
                    for lat, lon, bearing in geometry.compute_arrow_bearings(points)
                ]
            )
        case HaversineChain(coords=coords):
            return HaversineTotal(total_km=geometry.haversine_chain(coords))
        case FilterNoisyGps(raw_points=fixes, min_dist_meters=min_dist):
            return FilteredGps(points=geometry.filter_noisy_gps(fixes, min_dist))
        case _:
            assert_never(request)


def handle_message(message: dict[str, Any]) -> dict[str, Any] | None:
    """
    Handle one worker request.

    Returns:
        The response dict, or None for an unknown ``type``.

    Raises:
        pydantic.ValidationError: A known ``type`` with a malformed payload.
    """
    message_type = message.get("type") if isinstance(message, dict) else None
    if message_type not in REQUEST_TYPES:
        logger.warning("Unknown geometry worker message type: %s", message_type)
        return None

    request = REQUEST_ADAPTER.validate_python(message)
    return dispatch(request).model_dump(by_alias=True, mode="json")
