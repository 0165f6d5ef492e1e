"""Eased marker interpolation between live position fixes."""

from motion.easing import ease_in_out_quad
from motion.interpolator import Marker, MotionFrame, MotionInterpolator, compute_frame
from motion.scheduler import FrameScheduler, LoopFrameScheduler

__all__ = [
    "FrameScheduler",
    "LoopFrameScheduler",
    "Marker",
    "MotionFrame",
    "MotionInterpolator",
    "compute_frame",
    "ease_in_out_quad",
]
