"""Build-time pre-fetch of setlists for every concert.

Historical setlists never change, so the website reads them from a static
cache instead of calling setlist.fm at runtime.  This service refreshes
that cache: one lookup per headliner and per opener of every concert,
reusing any cached entry that already holds a setlist.

Architecture:
    - Called by the ``prefetch-setlists`` CLI.
    - Depends on ISetlistProvider for searches.
    - Uses concert_archive/utils/similarity.find_best_match to accept or
      reject the returned candidates.

Lookups run strictly one after another; the provider enforces its own
request interval.  A rate-limit response pauses the run for
``backoff_seconds`` and records the entry as an error.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

import structlog

from concert_archive.interfaces.setlist_provider import ISetlistProvider
from concert_archive.models.entities import Concert
from concert_archive.models.setlist import SetlistCache, SetlistCacheEntry, SetlistQuery
from concert_archive.utils.errors import RateLimitError, SetlistLookupError
from concert_archive.utils.similarity import MATCH_THRESHOLD, find_best_match
from concert_archive.utils.text_normalizer import map_city_name

logger = structlog.get_logger(logger_name=__name__)


@dataclass
class PrefetchStats:
    """Tally of one pre-fetch run."""

    cached: int = 0
    fetched: int = 0
    not_found: int = 0
    errors: int = 0

    @property
    def total(self) -> int:
        return self.cached + self.fetched + self.not_found + self.errors


@dataclass(frozen=True)
class _Lookup:
    concert: Concert
    artist_name: str
    is_headliner: bool

    @property
    def cache_key(self) -> str:
        return f"{self.concert.id}:{self.artist_name}"


class SetlistPrefetchService:
    """Refreshes the setlist cache for a list of concerts.

    Parameters
    ----------
    provider:
        Setlist search backend.
    backoff_seconds:
        Pause after a rate-limit response.
    match_threshold:
        Minimum composite score for a candidate to be cached.
    sleep:
        Awaitable sleep function (injected so tests do not wait).
    """

    def __init__(
        self,
        provider: ISetlistProvider,
        backoff_seconds: float = 60.0,
        match_threshold: float = MATCH_THRESHOLD,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._provider = provider
        self._backoff_seconds = backoff_seconds
        self._match_threshold = match_threshold
        self._sleep = sleep

    @staticmethod
    def _build_lookups(concerts: Sequence[Concert]) -> list[_Lookup]:
        lookups: list[_Lookup] = []
        for concert in concerts:
            lookups.append(_Lookup(concert, concert.headliner, is_headliner=True))
            for opener in concert.openers:
                if opener.strip():
                    lookups.append(_Lookup(concert, opener.strip(), is_headliner=False))
        return lookups

    async def prefetch(
        self,
        concerts: Sequence[Concert],
        existing: SetlistCache | None = None,
        force_refresh: bool = False,
    ) -> tuple[SetlistCache, PrefetchStats]:
        """Return a refreshed cache and the run's statistics."""
        cached_entries: dict[str, SetlistCacheEntry] = {}
        if existing is not None and not force_refresh:
            cached_entries = {entry.cache_key: entry for entry in existing.entries}

        lookups = self._build_lookups(concerts)
        stats = PrefetchStats()
        entries: list[SetlistCacheEntry] = []

        for lookup in lookups:
            cached = cached_entries.get(lookup.cache_key)
            if cached is not None and cached.setlist is not None:
                entries.append(cached)
                stats.cached += 1
                continue

            entry = await self._fetch_entry(lookup)
            entries.append(entry)
            if entry.error is not None:
                stats.errors += 1
            elif entry.setlist is None:
                stats.not_found += 1
            else:
                stats.fetched += 1

        logger.info(
            "setlist_prefetch_complete",
            concerts=len(concerts),
            lookups=len(lookups),
            cached=stats.cached,
            fetched=stats.fetched,
            not_found=stats.not_found,
            errors=stats.errors,
        )
        return SetlistCache(entries=entries), stats

    async def _fetch_entry(self, lookup: _Lookup) -> SetlistCacheEntry:
        concert = lookup.concert
        city = map_city_name(concert.city)
        base = {
            "concert_id": concert.id,
            "artist_name": lookup.artist_name,
            "date": concert.date,
            "venue": concert.venue,
            "city": concert.city,
        }

        try:
            candidates = await self._provider.search_setlists(
                lookup.artist_name, city, concert.year
            )
        except RateLimitError as exc:
            logger.warning(
                "setlist_rate_limited",
                artist=lookup.artist_name,
                backoff_seconds=self._backoff_seconds,
            )
            await self._sleep(self._backoff_seconds)
            return SetlistCacheEntry(**base, error=str(exc))
        except SetlistLookupError as exc:
            logger.warning("setlist_lookup_failed", artist=lookup.artist_name, error=str(exc))
            return SetlistCacheEntry(**base, error=str(exc))

        query = SetlistQuery(artist_name=lookup.artist_name, venue_name=concert.venue, city=city)
        match = find_best_match(candidates, query, self._match_threshold)
        if match is None:
            logger.debug("setlist_not_found", artist=lookup.artist_name, candidates=len(candidates))
            return SetlistCacheEntry(**base)

        logger.debug(
            "setlist_matched",
            artist=lookup.artist_name,
            venue=concert.venue,
            score=round(match.total, 3),
            headliner=lookup.is_headliner,
        )
        return SetlistCacheEntry(**base, setlist=match.candidate.payload)
