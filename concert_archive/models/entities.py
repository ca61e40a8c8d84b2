"""Core domain entities for the concert archive dataset.

Defines enums and Pydantic v2 models for artist/venue metadata records and
the concert rows they are reconciled against.  All models use frozen config:
a record is superseded by a new copy (``model_copy(update=...)``), never
mutated in place.

The JSON files served to the website use camelCase keys (``normalizedName``,
``fetchedAt``, ``spotifyArtistId``), so every model carries a camelCase alias
generator and accepts either spelling on input.

Key relationships:
    - MetadataRecord is keyed by the canonical key of its ``name``
      (computed in concert_archive/utils/text_normalizer.py)
    - Concert.headliner resolves to an artist MetadataRecord by that key
    - MetadataRecord.source drives merge precedence in
      concert_archive/services/record_merger.py
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from concert_archive.utils.text_normalizer import split_artist_names


class EntityKind(str, Enum):  # noqa: UP042, StrEnum requires Python 3.11+
    """Which identity policy a metadata map is keyed by."""

    ARTIST = "artist"
    VENUE = "venue"


class MetadataSource(str, Enum):  # noqa: UP042, StrEnum requires Python 3.11+
    """Origin tags a metadata record can carry.

    Listed highest-trust first.  The numeric ranking lives in
    ``concert_archive.services.record_merger.DEFAULT_SOURCE_RANKS``.
    """

    THEAUDIODB = "theaudiodb"  # Curated music database (artwork, bio, formation year)
    SPOTIFY = "spotify"        # Streaming service (album art, top tracks, popularity)
    LASTFM = "lastfm"          # Community-tagged database
    MANUAL = "manual"          # Hand-entered override
    MOCK = "mock"              # Generated placeholder


def _parse_timestamp(value: Any) -> datetime.datetime | None:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Unparseable values become ``None`` so one bad timestamp never makes the
    whole record unusable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        parsed = value
    else:
        try:
            parsed = datetime.datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


class MetadataRecord(BaseModel):
    """One version of what is known about an artist or venue.

    Created when a source record is first parsed or fetched; the canonical
    dataset holds exactly one record per canonical key.  Every enrichment
    field is optional because each source fills a different subset:
    TheAudioDB provides ``image``/``bio``/``formed``, Spotify provides
    ``most_popular_album``/``top_tracks``/``popularity``, Last.fm provides
    ``last_fm_url`` and genre tags.  Unknown keys are kept verbatim.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    name: str | None = None                 # Display name; None marks a malformed record
    normalized_name: str | None = None      # Canonical key, re-stamped by reconciliation
    image: str | None = None                # Artist photo URL (TheAudioDB, Spotify)
    image_url: str | None = None            # Same, as written by the genre metadata build
    genre: str | None = None                # Curated genre label used for colours
    genre_normalized: str | None = None
    genres: list[str] | None = None         # Raw genre tags from the source
    bio: str | None = None
    formed: str | None = None               # Formation year as free text
    website: str | None = None
    source: str | None = None               # MetadataSource value (unknown tags tolerated)
    data_source: str | None = None          # Legacy tag used by older Spotify exports
    fetched_at: datetime.datetime | None = None
    spotify_artist_id: str | None = None
    spotify_artist_url: str | None = None
    most_popular_album: dict[str, Any] | None = None
    top_tracks: list[dict[str, Any]] | None = None
    popularity: int | None = None
    last_fm_url: str | None = None

    @field_validator("fetched_at", mode="before")
    @classmethod
    def _coerce_fetched_at(cls, value: Any) -> datetime.datetime | None:
        return _parse_timestamp(value)

    @property
    def effective_source(self) -> str:
        """Source tag used for ranking; records with no tag count as mock data."""
        return self.source or self.data_source or MetadataSource.MOCK.value

    @property
    def has_artwork(self) -> bool:
        return bool(self.image or self.image_url)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, dropping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Concert(BaseModel):
    """A concert row from ``concerts.json``.

    Consumed, not owned: the reconciliation tooling reads concerts to find
    the artist names that need a metadata record and to cross-check genres.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = ""
    date: str = ""                          # ISO date, e.g. "1986-07-12"
    headliner: str = ""
    headliner_normalized: str | None = None # Key stored by the sheet export, if any
    openers: list[str] = Field(default_factory=list)
    venue: str = ""
    city: str = ""
    state: str = ""
    genre: str | None = None
    location: dict[str, Any] | None = None  # {"lat", "lng"} from geocoding

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("date", "headliner", "venue", "city", "state", mode="before")
    @classmethod
    def _coerce_blank_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("openers", mode="before")
    @classmethod
    def _coerce_openers(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return split_artist_names(value)
        return [str(item).strip() for item in value if item and str(item).strip()]

    @property
    def year(self) -> str:
        return self.date[:4]
