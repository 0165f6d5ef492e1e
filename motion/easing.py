"""Easing curves mapping elapsed fraction to progress fraction."""


def ease_in_out_quad(t: float) -> float:
    """Quadratic ease-in-out: accelerate to the midpoint, then decelerate."""
    if t < 0.5:
        return 2 * t * t
    return -1 + (4 - 2 * t) * t
