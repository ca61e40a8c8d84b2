"""Unit tests for the setlist pre-fetch service."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from concert_archive.models.setlist import SetlistCache, SetlistCacheEntry, SetlistCandidate
from concert_archive.services.setlist_prefetch_service import (
    PrefetchStats,
    SetlistPrefetchService,
)
from concert_archive.utils.errors import RateLimitError, SetlistLookupError
from tests.conftest import FakeSetlistProvider, make_concert


def _candidate(artist: str, venue: str, city: str, setlist_id: str) -> SetlistCandidate:
    return SetlistCandidate(
        artist_name=artist,
        venue_name=venue,
        city_name=city,
        payload={"id": setlist_id},
    )


# ======================================================================
# PrefetchStats
# ======================================================================


class TestPrefetchStats:
    def test_total(self) -> None:
        assert PrefetchStats(cached=1, fetched=2, not_found=3, errors=4).total == 10


# ======================================================================
# SetlistPrefetchService
# ======================================================================


class TestPrefetch:
    @pytest.mark.asyncio
    async def test_headliner_and_openers_are_looked_up(self) -> None:
        provider = FakeSetlistProvider(
            {
                "Violent Femmes": [
                    _candidate("Violent Femmes", "The Warfield", "San Francisco", "vf"),
                ],
            }
        )
        concert = make_concert("1", "Violent Femmes", openers=["The Alarm", "  "])
        service = SetlistPrefetchService(provider, sleep=AsyncMock())

        cache, stats = await service.prefetch([concert])

        assert [call[0] for call in provider.calls] == ["Violent Femmes", "The Alarm"]
        assert provider.calls[0] == ("Violent Femmes", "San Francisco", "1986")
        assert [e.cache_key for e in cache.entries] == ["1:Violent Femmes", "1:The Alarm"]
        assert cache.entries[0].setlist == {"id": "vf"}
        assert cache.entries[1].setlist is None
        assert stats == PrefetchStats(fetched=1, not_found=1)

    @pytest.mark.asyncio
    async def test_city_alias_applied_to_search(self) -> None:
        provider = FakeSetlistProvider()
        concert = make_concert("2", "X", city="Hollywood", date="1987-03-01")
        service = SetlistPrefetchService(provider, sleep=AsyncMock())

        cache, _ = await service.prefetch([concert])

        assert provider.calls == [("X", "Los Angeles", "1987")]
        # The cache keeps the city as written in the concert row.
        assert cache.entries[0].city == "Hollywood"

    @pytest.mark.asyncio
    async def test_weak_match_is_rejected(self) -> None:
        provider = FakeSetlistProvider(
            {"Violent Femmes": [_candidate("Violent Femmes", "Roxy", "Boston", "wrong")]}
        )
        service = SetlistPrefetchService(provider, sleep=AsyncMock())

        cache, stats = await service.prefetch([make_concert("1", "Violent Femmes")])

        assert cache.entries[0].setlist is None
        assert stats.not_found == 1

    @pytest.mark.asyncio
    async def test_reuses_cached_setlists(self) -> None:
        provider = FakeSetlistProvider()
        existing = SetlistCache(
            entries=[
                SetlistCacheEntry(concert_id="1", artist_name="Violent Femmes", setlist={"id": "old"}),
                SetlistCacheEntry(concert_id="1", artist_name="The Alarm", setlist=None),
            ]
        )
        concert = make_concert("1", "Violent Femmes", openers=["The Alarm"])
        service = SetlistPrefetchService(provider, sleep=AsyncMock())

        cache, stats = await service.prefetch([concert], existing=existing)

        # Entries without a setlist are retried.
        assert provider.calls == [("The Alarm", "San Francisco", "1986")]
        assert cache.entries[0].setlist == {"id": "old"}
        assert stats.cached == 1
        assert stats.total == 2

    @pytest.mark.asyncio
    async def test_force_refresh_ignores_cache(self) -> None:
        provider = FakeSetlistProvider()
        existing = SetlistCache(
            entries=[SetlistCacheEntry(concert_id="1", artist_name="Violent Femmes", setlist={"id": "old"})]
        )
        service = SetlistPrefetchService(provider, sleep=AsyncMock())

        cache, stats = await service.prefetch(
            [make_concert("1", "Violent Femmes")], existing=existing, force_refresh=True
        )

        assert len(provider.calls) == 1
        assert stats.cached == 0
        assert cache.entries[0].setlist is None

    @pytest.mark.asyncio
    async def test_rate_limit_backs_off_and_continues(self) -> None:
        provider = FakeSetlistProvider(
            {
                "Violent Femmes": RateLimitError(provider_name="fake"),
                "The Alarm": [_candidate("The Alarm", "Warfield", "San Francisco", "alarm")],
            }
        )
        sleep = AsyncMock()
        concert = make_concert("1", "Violent Femmes", openers=["The Alarm"])
        service = SetlistPrefetchService(provider, backoff_seconds=60.0, sleep=sleep)

        cache, stats = await service.prefetch([concert])

        sleep.assert_awaited_once_with(60.0)
        assert cache.entries[0].error == "[fake] Rate limit exceeded"
        assert cache.entries[1].setlist == {"id": "alarm"}
        assert stats == PrefetchStats(fetched=1, errors=1)

    @pytest.mark.asyncio
    async def test_lookup_error_recorded(self) -> None:
        provider = FakeSetlistProvider(
            {"Violent Femmes": SetlistLookupError(message="API error: 500", provider_name="fake")}
        )
        sleep = AsyncMock()
        service = SetlistPrefetchService(provider, sleep=sleep)

        cache, stats = await service.prefetch([make_concert("1", "Violent Femmes")])

        sleep.assert_not_awaited()
        assert cache.entries[0].error is not None
        assert stats.errors == 1

    @pytest.mark.asyncio
    async def test_custom_threshold(self) -> None:
        provider = FakeSetlistProvider(
            {"Violent Femmes": [_candidate("Violent Femmes", "The Warfield", "Oakland", "vf")]}
        )
        service = SetlistPrefetchService(provider, match_threshold=0.9, sleep=AsyncMock())

        cache, _ = await service.prefetch([make_concert("1", "Violent Femmes")])

        # venue 0.5 + artist 0.2 = 0.7, below the raised threshold
        assert cache.entries[0].setlist is None
