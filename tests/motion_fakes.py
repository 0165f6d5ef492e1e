from __future__ import annotations

from collections.abc import Callable


class ManualHandle:
    def __init__(self, scheduler: ManualScheduler, callback: Callable[[float], None]) -> None:
        self._scheduler = scheduler
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True
        if self in self._scheduler.pending:
            self._scheduler.pending.remove(self)


class ManualScheduler:
    """Frames run only when the test advances the clock."""

    def __init__(self) -> None:
        self.time = 0.0
        self.pending: list[ManualHandle] = []

    def now(self) -> float:
        return self.time

    def request_frame(self, callback: Callable[[float], None]) -> ManualHandle:
        handle = ManualHandle(self, callback)
        self.pending.append(handle)
        return handle

    def advance(self, ms: float) -> None:
        self.time += ms
        due, self.pending = self.pending, []
        for handle in due:
            handle.callback(self.time)


class FakeMarker:
    def __init__(self, lat: float, lon: float) -> None:
        self._position = (lat, lon)
        self.history: list[tuple[float, float]] = []

    @property
    def position(self) -> tuple[float, float]:
        return self._position

    def set_position(self, lat: float, lon: float) -> None:
        self._position = (lat, lon)
        self.history.append((lat, lon))
