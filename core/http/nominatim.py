"""
Nominatim HTTP client utilities.

Centralizes forward geocoding of stop names against Nominatim.
"""

from __future__ import annotations

import logging
from typing import Any

from config import (
    GEOCODE_CANDIDATE_LIMIT,
    get_geocode_country_codes,
    get_nominatim_search_url,
    get_nominatim_user_agent,
)
from core.exceptions import ExternalServiceError
from core.http.request import request_json
from core.http.session import get_session

logger = logging.getLogger(__name__)


class NominatimClient:
    def __init__(
        self,
        *,
        search_url: str | None = None,
        user_agent: str | None = None,
        country_codes: str | None = None,
    ) -> None:
        self._search_url = search_url or get_nominatim_search_url()
        self._user_agent = user_agent or get_nominatim_user_agent()
        self._country_codes = country_codes or get_geocode_country_codes()

    def _headers(self) -> dict[str, str]:
        # Nominatim's usage policy requires an identifying User-Agent.
        return {"User-Agent": self._user_agent, "Accept-Language": "en"}

    async def search(
        self,
        query: str,
        *,
        limit: int = GEOCODE_CANDIDATE_LIMIT,
    ) -> list[dict[str, Any]]:
        """
        Run a free-text search and return the raw candidate list.

        Candidates keep Nominatim's shape: ``lat``/``lon`` as strings,
        ``display_name`` and ``namedetails``.

        Raises:
            ExternalServiceError: On transport failure, non-200 status or a
                body that is not a JSON array.
        """
        params: dict[str, Any] = {
            "q": query,
            "format": "json",
            "countrycodes": self._country_codes,
            "namedetails": 1,
            "limit": limit,
        }
        session = await get_session()
        results = await request_json(
            "GET",
            self._search_url,
            session=session,
            params=params,
            headers=self._headers(),
            service_name="Nominatim search",
        )
        if not isinstance(results, list):
            msg = "Nominatim search error: unexpected response"
            raise ExternalServiceError(msg, {"url": self._search_url})
        logger.debug("Nominatim returned %d candidates for %r", len(results), query)
        return results
