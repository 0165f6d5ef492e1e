"""
Shared HTTP request helpers for provider clients.

Keeps JSON request/response handling and error mapping consistent across
the Nominatim, OSRM, Supabase and route resolver clients.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING, Any

import aiohttp

from core.exceptions import ExternalServiceError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 5


def parse_retry_after(value: str | None) -> int | None:
    """
    Seconds to wait according to a Retry-After header.

    Accepts both the delta-seconds and the HTTP-date forms. A missing header
    gives the default; an unreadable one gives None.
    """
    if value is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    value = value.strip()
    if value.isdigit():
        return int(value)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring unreadable Retry-After header %r", value)
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    return max(0, int((when - datetime.now(UTC)).total_seconds()))


async def request_json(
    method: str,
    url: str,
    *,
    session: Any,
    params: dict[str, Any] | None = None,
    json: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    expected_status: int | Iterable[int] = 200,
    none_on: Iterable[int] | None = None,
    service_name: str = "Service",
    timeout: Any | None = None,
) -> Any | None:
    """
    Issue a request and decode its JSON body.

    Transport failures, unexpected status codes and undecodable bodies are
    all raised as :class:`ExternalServiceError` so callers only need one
    except clause per provider.
    """
    method_upper = method.upper()
    if isinstance(expected_status, int):
        expected = {expected_status}
    else:
        expected = set(expected_status)
    none_on_set = set(none_on or [])

    if method_upper == "GET":
        request_fn = session.get
    elif method_upper == "POST":
        request_fn = session.post
    else:
        msg = f"{service_name} request error: unsupported method {method_upper}"
        raise ExternalServiceError(msg, {"url": url})

    request_kwargs: dict[str, Any] = {"params": params, "headers": headers}
    if json is not None:
        request_kwargs["json"] = json
    if timeout is not None:
        request_kwargs["timeout"] = timeout

    try:
        async with request_fn(url, **request_kwargs) as response:
            if response.status in none_on_set:
                logger.debug(
                    "%s returned %s for %s", service_name, response.status, url
                )
                return None
            if response.status == 429:
                retry_after = parse_retry_after(response.headers.get("Retry-After"))
                msg = f"{service_name} error: 429"
                raise ExternalServiceError(
                    msg,
                    {"status": 429, "retry_after": retry_after, "url": url},
                )
            if response.status not in expected:
                body = await response.text()
                msg = f"{service_name} error: {response.status}"
                raise ExternalServiceError(
                    msg,
                    {"status": response.status, "body": body[:500], "url": url},
                )
            try:
                return await response.json()
            except (aiohttp.ContentTypeError, ValueError) as exc:
                msg = f"{service_name} error: invalid JSON response"
                raise ExternalServiceError(msg, {"url": url}) from exc
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        msg = f"{service_name} request failed: {exc}"
        raise ExternalServiceError(msg, {"url": url}) from exc
