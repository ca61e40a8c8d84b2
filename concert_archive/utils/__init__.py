"""Utility modules for the concert archive tooling.

Available utility modules:

- **errors** -- Exception hierarchy rooted at ConcertArchiveError, used only
  for infrastructure failures (bad files, config, HTTP).
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output locally, structured JSON in CI/production.
- **text_normalizer** -- Canonical keys for artists, venues and genres,
  plus city aliasing, opener splitting and fuzzy name suggestions.
- **similarity** (not re-exported here, it depends on the models package)
  -- Levenshtein similarity and composite setlist match scoring.
"""

from concert_archive.utils.errors import (
    ConcertArchiveError,
    ConfigurationError,
    DatasetLoadError,
    RateLimitError,
    SetlistLookupError,
)
from concert_archive.utils.logging import configure_logging, get_logger
from concert_archive.utils.text_normalizer import (
    fuzzy_match,
    map_city_name,
    normalize_artist_name,
    normalize_genre_name,
    normalize_venue_name,
    split_artist_names,
)

__all__ = [
    "ConcertArchiveError",
    "ConfigurationError",
    "DatasetLoadError",
    "RateLimitError",
    "SetlistLookupError",
    "configure_logging",
    "fuzzy_match",
    "get_logger",
    "map_city_name",
    "normalize_artist_name",
    "normalize_genre_name",
    "normalize_venue_name",
    "split_artist_names",
]
