"""Feeds live position fixes through the noise filter onto an animated marker."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from geometry_worker import GeometryWorker
from motion import Marker, MotionInterpolator
from motion.interpolator import DEFAULT_DURATION_MS, DEFAULT_TRACK_ID

logger = logging.getLogger(__name__)


class LiveFeed:
    def __init__(
        self,
        marker: Marker,
        worker: GeometryWorker,
        interpolator: MotionInterpolator | None = None,
        *,
        min_dist_meters: float = 20.0,
        duration_ms: float = DEFAULT_DURATION_MS,
        track_id: str = DEFAULT_TRACK_ID,
    ) -> None:
        self._marker = marker
        self._worker = worker
        self._interpolator = interpolator or MotionInterpolator()
        self._min_dist_meters = min_dist_meters
        self._duration_ms = duration_ms
        self._track_id = track_id

    async def push(self, fixes: Sequence[dict[str, Any]]) -> dict[str, Any] | None:
        """
        Filter a batch of fixes and animate to the last one kept.

        Returns:
            The fix the marker is now moving to, or None for an empty batch.
        """
        if not fixes:
            return None
        kept = await self._worker.filter_noisy_gps(fixes, self._min_dist_meters)
        target = kept[-1]
        logger.debug(
            "Live feed kept %d of %d fixes on %s", len(kept), len(fixes), self._track_id
        )
        self._interpolator.animate_to(
            self._marker,
            target["lat"],
            target["lon"],
            duration_ms=self._duration_ms,
            track_id=self._track_id,
        )
        return target
