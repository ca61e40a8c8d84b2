"""setlist.fm provider implementing ISetlistProvider.

Queries the setlist.fm REST API (``/search/setlists``) with the artist name,
city and year of a concert and converts each returned setlist into a
SetlistCandidate.  Requires an API key sent as the ``x-api-key`` header.
Requests are throttled to one per ``request_interval`` seconds (the free
tier allows roughly one request per second).

setlist.fm answers a search with no hits with HTTP 404, which is mapped to
an empty result list rather than an error.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx

from concert_archive.config.settings import Settings
from concert_archive.interfaces.setlist_provider import ISetlistProvider
from concert_archive.models.setlist import SetlistCandidate
from concert_archive.utils.errors import RateLimitError, SetlistLookupError
from concert_archive.utils.logging import get_logger

_SEARCH_PATH = "/search/setlists"


class SetlistFmProvider(ISetlistProvider):
    """Setlist search backed by the setlist.fm REST API.

    The ``httpx.AsyncClient`` is injected for testability; the caller owns
    its lifecycle.
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        self._http = http_client
        self._settings = settings
        self._last_request_time: float = 0.0
        self._logger = get_logger(__name__)

    async def _throttle(self) -> None:
        interval = self._settings.setlistfm_request_interval
        now = time.monotonic()
        elapsed = now - self._last_request_time
        if self._last_request_time > 0 and elapsed < interval:
            await asyncio.sleep(interval - elapsed)
        self._last_request_time = time.monotonic()

    @staticmethod
    def _name_of(node: Any) -> str:
        # setlist.fm omits or nulls fields freely; anything unusable reads as "".
        name = node.get("name") if isinstance(node, dict) else None
        return str(name) if name else ""

    @classmethod
    def _to_candidate(cls, setlist: dict[str, Any]) -> SetlistCandidate:
        venue = setlist.get("venue")
        city = venue.get("city") if isinstance(venue, dict) else None
        event_date = setlist.get("eventDate")
        return SetlistCandidate(
            artist_name=cls._name_of(setlist.get("artist")),
            venue_name=cls._name_of(venue),
            city_name=cls._name_of(city),
            event_date=str(event_date) if event_date else None,
            payload=setlist,
        )

    # -- ISetlistProvider implementation ---------------------------------------

    async def search_setlists(
        self, artist_name: str, city: str, year: str
    ) -> list[SetlistCandidate]:
        await self._throttle()
        url = f"{self._settings.setlistfm_base_url.rstrip('/')}{_SEARCH_PATH}"
        params = {"artistName": artist_name, "cityName": city, "year": year}
        headers = {"x-api-key": self._settings.setlistfm_api_key, "Accept": "application/json"}

        try:
            response = await self._http.get(
                url,
                params=params,
                headers=headers,
                timeout=self._settings.setlistfm_timeout,
            )
        except httpx.HTTPError as exc:
            raise SetlistLookupError(
                message=f"setlist.fm search failed for '{artist_name}': {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code == 404:
            self._logger.debug("setlistfm_no_results", artist=artist_name, city=city, year=year)
            return []
        if response.status_code == 429:
            raise RateLimitError(provider_name=self.get_provider_name())
        if response.status_code >= 400:
            raise SetlistLookupError(
                message=f"API error: {response.status_code} for '{artist_name}'",
                provider_name=self.get_provider_name(),
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise SetlistLookupError(
                message=f"setlist.fm returned invalid JSON for '{artist_name}'",
                provider_name=self.get_provider_name(),
            ) from exc

        setlists = (data.get("setlist") or []) if isinstance(data, dict) else []
        candidates = [self._to_candidate(s) for s in setlists if isinstance(s, dict)]
        self._logger.debug(
            "setlistfm_search_complete", artist=artist_name, results=len(candidates)
        )
        return candidates

    def get_provider_name(self) -> str:
        return "setlistfm"
