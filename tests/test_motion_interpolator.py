import asyncio

import pytest

from motion import LoopFrameScheduler, MotionInterpolator, compute_frame, ease_in_out_quad
from tests.motion_fakes import FakeMarker, ManualScheduler


@pytest.mark.parametrize(
    ("t", "expected"),
    [(0.0, 0.0), (0.25, 0.125), (0.5, 0.5), (0.75, 0.875), (1.0, 1.0)],
)
def test_ease_in_out_quad(t: float, expected: float) -> None:
    assert ease_in_out_quad(t) == pytest.approx(expected)


def test_compute_frame_clamps_progress() -> None:
    assert compute_frame((0.0, 0.0), (10.0, 20.0), -50, 1000).t == 0.0
    late = compute_frame((0.0, 0.0), (10.0, 20.0), 5000, 1000)
    assert (late.lat, late.lon, late.t) == (10.0, 20.0, 1.0)


def test_compute_frame_midpoint() -> None:
    frame = compute_frame((0.0, 0.0), (10.0, 20.0), 500, 1000)
    assert (frame.lat, frame.lon) == pytest.approx((5.0, 10.0))


def test_animation_reaches_target_and_stops() -> None:
    scheduler = ManualScheduler()
    marker = FakeMarker(13.0, 80.0)
    interpolator = MotionInterpolator(scheduler)

    interpolator.animate_to(marker, 13.1, 80.1, duration_ms=1000)
    assert interpolator.is_animating()

    scheduler.advance(250)
    assert marker.position == pytest.approx((13.0125, 80.0125))

    scheduler.advance(1000)
    assert marker.position == pytest.approx((13.1, 80.1))
    assert not interpolator.is_animating()
    assert scheduler.pending == []


def test_second_target_cancels_first_animation() -> None:
    scheduler = ManualScheduler()
    marker = FakeMarker(0.0, 0.0)
    interpolator = MotionInterpolator(scheduler)

    interpolator.animate_to(marker, 1.0, 1.0, duration_ms=1000)
    first_handle = scheduler.pending[0]
    interpolator.animate_to(marker, 2.0, 2.0, duration_ms=1000)

    assert first_handle.cancelled
    assert len(scheduler.pending) == 1

    for _ in range(10):
        scheduler.advance(200)

    assert marker.position == (2.0, 2.0)


def test_new_animation_starts_from_current_position() -> None:
    scheduler = ManualScheduler()
    marker = FakeMarker(0.0, 0.0)
    interpolator = MotionInterpolator(scheduler)

    interpolator.animate_to(marker, 10.0, 0.0, duration_ms=1000)
    scheduler.advance(500)
    assert marker.position[0] == pytest.approx(5.0)

    interpolator.animate_to(marker, 10.0, 10.0, duration_ms=1000)
    scheduler.advance(500)

    assert marker.position == pytest.approx((7.5, 5.0))


def test_stale_frame_does_nothing() -> None:
    scheduler = ManualScheduler()
    marker = FakeMarker(0.0, 0.0)
    interpolator = MotionInterpolator(scheduler)

    interpolator.animate_to(marker, 1.0, 1.0, duration_ms=1000)
    stale = scheduler.pending[0]
    interpolator.cancel()

    stale.callback(500)

    assert marker.history == []


def test_cancel_when_idle_is_a_no_op() -> None:
    interpolator = MotionInterpolator(ManualScheduler())
    interpolator.cancel("route-7")
    assert not interpolator.is_animating("route-7")


def test_tracks_animate_independently() -> None:
    scheduler = ManualScheduler()
    bus = FakeMarker(0.0, 0.0)
    other = FakeMarker(5.0, 5.0)
    interpolator = MotionInterpolator(scheduler)

    interpolator.animate_to(bus, 1.0, 1.0, duration_ms=100)
    interpolator.animate_to(other, 6.0, 6.0, duration_ms=100, track_id="bus-2")
    scheduler.advance(100)

    assert bus.position == (1.0, 1.0)
    assert other.position == (6.0, 6.0)


@pytest.mark.asyncio
async def test_loop_scheduler_drives_animation_on_event_loop() -> None:
    marker = FakeMarker(0.0, 0.0)
    interpolator = MotionInterpolator(LoopFrameScheduler())

    interpolator.animate_to(marker, 1.0, 1.0, duration_ms=50)
    while interpolator.is_animating():
        await asyncio.sleep(0.01)

    assert marker.position == (1.0, 1.0)
    assert len(marker.history) >= 2
