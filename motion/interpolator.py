"""
Smooth marker movement between position fixes.

Live positions arrive every few seconds; jumping the marker looks wrong, so
each new fix is animated from the marker's current position over a fixed
duration. One animation runs per track id; a new target replaces the
running animation instead of queueing behind it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from motion.easing import ease_in_out_quad
from motion.scheduler import FrameHandle, FrameScheduler, LoopFrameScheduler

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 2800.0
DEFAULT_TRACK_ID = "bus"

Easing = Callable[[float], float]


class Marker(Protocol):
    @property
    def position(self) -> tuple[float, float]:
        """Current ``(lat, lon)``."""
        ...

    def set_position(self, lat: float, lon: float) -> None: ...


@dataclass(frozen=True, slots=True)
class MotionFrame:
    lat: float
    lon: float
    t: float


def compute_frame(
    start: tuple[float, float],
    target: tuple[float, float],
    elapsed_ms: float,
    duration_ms: float,
    easing: Easing = ease_in_out_quad,
) -> MotionFrame:
    """Interpolated position ``elapsed_ms`` into an animation; ``t`` is clamped to [0, 1]."""
    t = 1.0 if duration_ms <= 0 else min(max(elapsed_ms / duration_ms, 0.0), 1.0)
    eased = easing(t)
    lat = start[0] + (target[0] - start[0]) * eased
    lon = start[1] + (target[1] - start[1]) * eased
    return MotionFrame(lat=lat, lon=lon, t=t)


@dataclass(eq=False)
class _Animation:
    marker: Marker
    start: tuple[float, float]
    target: tuple[float, float]
    started_at: float
    duration_ms: float
    handle: FrameHandle | None = None


class MotionInterpolator:
    def __init__(
        self,
        scheduler: FrameScheduler | None = None,
        easing: Easing = ease_in_out_quad,
    ) -> None:
        self._scheduler = scheduler or LoopFrameScheduler()
        self._easing = easing
        self._active: dict[str, _Animation] = {}

    def animate_to(
        self,
        marker: Marker,
        target_lat: float,
        target_lon: float,
        duration_ms: float = DEFAULT_DURATION_MS,
        track_id: str = DEFAULT_TRACK_ID,
    ) -> None:
        """Start moving ``marker`` to the target, replacing any animation on ``track_id``."""
        self.cancel(track_id)
        animation = _Animation(
            marker=marker,
            start=tuple(marker.position),
            target=(target_lat, target_lon),
            started_at=self._scheduler.now(),
            duration_ms=duration_ms,
        )
        self._active[track_id] = animation
        animation.handle = self._scheduler.request_frame(
            lambda now: self._on_frame(track_id, animation, now)
        )

    def cancel(self, track_id: str = DEFAULT_TRACK_ID) -> None:
        animation = self._active.pop(track_id, None)
        if animation is not None and animation.handle is not None:
            animation.handle.cancel()
            animation.handle = None

    def is_animating(self, track_id: str = DEFAULT_TRACK_ID) -> bool:
        return track_id in self._active

    def _on_frame(self, track_id: str, animation: _Animation, now: float) -> None:
        if self._active.get(track_id) is not animation:
            # Superseded or canceled after this frame was already dispatched.
            return

        frame = compute_frame(
            animation.start,
            animation.target,
            now - animation.started_at,
            animation.duration_ms,
            self._easing,
        )
        animation.marker.set_position(frame.lat, frame.lon)

        if frame.t < 1.0:
            animation.handle = self._scheduler.request_frame(
                lambda next_now: self._on_frame(track_id, animation, next_now)
            )
        else:
            animation.handle = None
            del self._active[track_id]
            logger.debug("Animation on %s finished", track_id)
