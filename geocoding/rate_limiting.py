"""
Rate limiting utilities for geocoding calls.
"""

from __future__ import annotations

import contextlib
from contextlib import AbstractAsyncContextManager
from typing import Any

from aiolimiter import AsyncLimiter


def make_rate_limiter(min_interval: float) -> AbstractAsyncContextManager[Any]:
    """
    Limiter admitting one request per ``min_interval`` seconds.

    The first acquisition is immediate; each later one waits until the
    interval since the previous request has elapsed. A non-positive interval
    disables limiting.
    """
    if min_interval <= 0:
        return contextlib.nullcontext()
    return AsyncLimiter(1, min_interval)
