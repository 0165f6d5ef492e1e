"""Async front end for the geometry worker process pool."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from concurrent.futures import Executor, ProcessPoolExecutor
from typing import Any, Self

from geometry_worker.protocol import handle_message

logger = logging.getLogger(__name__)


class GeometryWorker:
    """
    Post geometry messages to a separate process and await the reply.

    Messages are pickled into the worker, so the caller's data is never
    shared or mutated; each reply is complete when it arrives.
    """

    def __init__(self, executor: Executor | None = None) -> None:
        self._owns_executor = executor is None
        self._executor = executor or ProcessPoolExecutor(max_workers=1)

    async def post(self, message: dict[str, Any]) -> dict[str, Any] | None:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, handle_message, message)

    async def parse_geometry(
        self,
        coordinates: Sequence[Sequence[float]],
        total_distance_m: float,
    ) -> tuple[list[tuple[float, float]], float]:
        reply = await self._request(
            {
                "type": "parseGeometry",
                "geometry": {"coordinates": [list(c) for c in coordinates]},
                "totalDistance": total_distance_m,
            }
        )
        return [tuple(p) for p in reply["points"]], reply["distanceKm"]

    async def compute_arrow_bearings(
        self,
        points: Sequence[tuple[float, float]],
    ) -> list[dict[str, float]]:
        reply = await self._request(
            {"type": "computeArrowBearings", "points": [list(p) for p in points]}
        )
        return reply["bearings"]

    async def haversine_chain(self, coords: Sequence[tuple[float, float]]) -> float:
        reply = await self._request(
            {"type": "haversineChain", "coords": [list(c) for c in coords]}
        )
        return reply["totalKm"]

    async def filter_noisy_gps(
        self,
        fixes: Sequence[dict[str, Any]],
        min_dist_meters: float = 20.0,
    ) -> list[dict[str, Any]]:
        reply = await self._request(
            {
                "type": "filterNoisyGps",
                "rawPoints": list(fixes),
                "minDistMeters": min_dist_meters,
            }
        )
        return reply["points"]

    async def _request(self, message: dict[str, Any]) -> dict[str, Any]:
        reply = await self.post(message)
        if reply is None:
            msg = f"Geometry worker rejected message type {message['type']!r}"
            raise RuntimeError(msg)
        return reply

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()
