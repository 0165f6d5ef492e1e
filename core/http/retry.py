"""Retry utilities for async HTTP operations.

This module provides retry decorators using tenacity for resilient HTTP calls.
"""

from __future__ import annotations

import logging

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from core.exceptions import ExternalServiceError, RoutingUnavailableError

logger = logging.getLogger(__name__)

_RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


def is_transient(exc: BaseException) -> bool:
    """Return True for provider failures worth retrying.

    Transport errors carry no status; server-side and throttling statuses
    are transient. Client errors and empty routes are not.
    """
    if isinstance(exc, RoutingUnavailableError):
        return False
    if not isinstance(exc, ExternalServiceError):
        return False
    status = exc.details.get("status")
    return status is None or status in _RETRYABLE_STATUSES


def retry_async(
    max_retries: int = 2,
    retry_delay: float = 0.5,
    backoff_factor: float = 2.0,
):
    """Factory that returns a tenacity retry decorator configured with provided parameters.

    Args:
        max_retries: Maximum number of retry attempts (in addition to the first attempt).
        retry_delay: Initial delay between retries in seconds (used as multiplier).
        backoff_factor: Exponential backoff base for increasing delay between retries.

    Returns:
        A tenacity retry decorator that retries transient provider failures
        and re-raises the last one.

    Example:
        @retry_async(max_retries=3, retry_delay=1.0)
        async def fetch_route():
            ...
    """
    return retry(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=retry_delay, exp_base=backoff_factor),
        retry=retry_if_exception(is_transient),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
