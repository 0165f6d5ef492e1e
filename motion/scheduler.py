"""Frame scheduling for marker animation."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol

FRAME_INTERVAL_SECONDS = 1 / 60

FrameCallback = Callable[[float], None]


class FrameHandle(Protocol):
    def cancel(self) -> None: ...


class FrameScheduler(Protocol):
    """Source of frame callbacks and of the clock they are timed against."""

    def now(self) -> float:
        """Current time in milliseconds."""
        ...

    def request_frame(self, callback: FrameCallback) -> FrameHandle:
        """Run ``callback(now_ms)`` on the next frame."""
        ...


class LoopFrameScheduler:
    """Frames at 60 fps on the running asyncio loop, timed with ``loop.time()``."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._get_loop().time() * 1000

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        return self._get_loop().call_later(
            FRAME_INTERVAL_SECONDS, lambda: callback(self.now())
        )
