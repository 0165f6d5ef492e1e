"""
Supabase REST client for the bus record store.

Only the read the route resolver needs is implemented: the stop list of a
bus by id. Bus and driver CRUD lives elsewhere.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from config import get_supabase_key, get_supabase_url
from core.exceptions import ExternalServiceError, ValidationError
from core.http.request import request_json
from core.http.session import get_session

logger = logging.getLogger(__name__)


def _coerce_stops(raw: Any) -> list[str] | None:
    """Stops are stored either as a JSON array column or as JSON text."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None
    if not isinstance(raw, list):
        return None
    return [str(item) for item in raw if str(item).strip()]


class SupabaseBusStore:
    def __init__(self, url: str | None = None, key: str | None = None) -> None:
        self._url = (url or get_supabase_url() or "").rstrip("/")
        self._key = key or get_supabase_key() or ""

    @property
    def configured(self) -> bool:
        return bool(self._url and self._key)

    def _headers(self) -> dict[str, str]:
        return {"apikey": self._key, "Authorization": f"Bearer {self._key}"}

    async def get_stops(self, bus_id: int) -> list[str] | None:
        """
        Load the stop list stored for ``bus_id``.

        Returns:
            The stop names, or None when no such bus exists.
        """
        if not self.configured:
            msg = "Bus record store is not configured"
            raise ExternalServiceError(msg)

        url = f"{self._url}/rest/v1/buses"
        session = await get_session()
        rows = await request_json(
            "GET",
            url,
            session=session,
            params={"id": f"eq.{bus_id}", "select": "stops"},
            headers=self._headers(),
            service_name="Supabase buses",
        )
        if not isinstance(rows, list):
            msg = "Supabase buses error: unexpected response"
            raise ExternalServiceError(msg, {"url": url})
        if not rows:
            return None

        stops = _coerce_stops(rows[0].get("stops") if isinstance(rows[0], dict) else None)
        if stops is None:
            msg = f"Bus {bus_id} has a malformed stop list"
            raise ValidationError(msg, {"busId": bus_id})
        return stops
