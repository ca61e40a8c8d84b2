"""Setlist search and cache models.

``SetlistQuery`` describes the concert being looked up, ``SetlistCandidate``
one show returned by a search, and ``MatchCandidate`` the scored pairing of
the two (see concert_archive/utils/similarity.py).  The cache models mirror
``public/data/setlists-cache.json``, which the website reads at runtime.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CACHE_VERSION = "1.0.0"


class SetlistQuery(BaseModel):
    """The concert a setlist search should match."""

    model_config = ConfigDict(frozen=True)

    artist_name: str
    venue_name: str
    city: str


class SetlistCandidate(BaseModel):
    """One show returned by a setlist search.

    ``payload`` holds the provider's raw setlist object, which is what gets
    cached when the candidate is accepted.
    """

    model_config = ConfigDict(frozen=True)

    artist_name: str = ""
    venue_name: str = ""
    city_name: str = ""
    event_date: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)


class MatchCandidate(BaseModel):
    """A search result scored against a query.

    The per-field scores are raw similarities in [0, 1]; ``total`` is the
    weighted composite that decides acceptance.
    """

    model_config = ConfigDict(frozen=True)

    candidate: SetlistCandidate
    venue_score: float = Field(ge=0.0, le=1.0)
    city_score: float = Field(ge=0.0, le=1.0)
    artist_score: float = Field(ge=0.0, le=1.0)
    total: float


class SetlistCacheEntry(BaseModel):
    """Cached lookup result for one artist at one concert."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    concert_id: str
    artist_name: str
    date: str = ""
    venue: str = ""
    city: str = ""
    setlist: dict[str, Any] | None = None
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    error: str | None = None

    @property
    def cache_key(self) -> str:
        return f"{self.concert_id}:{self.artist_name}"


class SetlistCache(BaseModel):
    """The whole setlist cache file."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    version: str = CACHE_VERSION
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    entries: list[SetlistCacheEntry] = Field(default_factory=list)
