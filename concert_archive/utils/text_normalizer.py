"""Text normalization utilities for artist, venue, and genre identities.

Every dataset the archive touches (spreadsheet rows, Spotify responses,
TheAudioDB / Last.fm lookups, hand-maintained override files) files its
records under a key derived from a display name.  This module is the single
place those keys are computed:

1. **Artist keys** -- lower-case ASCII letters and digits only, packed
   together with no separator: "Violent Femmes", "violentfemmes" and
   "VIOLENT-FEMMES!" all map to ``"violentfemmes"``.

2. **Venue keys** -- lower-case, one leading "the " dropped, punctuation
   removed, whitespace collapsed to single spaces: "The Fillmore West"
   maps to ``"fillmore west"``.  Venue keys keep their inner spaces while
   artist keys do not; existing venue records are filed that way and
   changing either policy would re-key every stored record.

3. **Genre keys** -- the venue policy without the article strip, used for
   colour lookups ("R&B/Soul" -> ``"rbsoul"``).

All normalizers are total: ``None``, empty strings, and punctuation-only
garbage produce an empty key rather than an error.
"""

import re
import unicodedata

from rapidfuzz import fuzz, process

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_LEADING_ARTICLE = re.compile(r"^the\s+")
_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_artist_name(name: str | None) -> str:
    """Normalize an artist name to its canonical key.

    Accented characters are decomposed first so "Björk" keys as
    ``"bjork"`` instead of losing the vowel.

    Args:
        name: Raw artist name.

    Returns:
        Packed lower-case alphanumeric key (possibly empty).
    """
    if not name:
        return ""
    decomposed = unicodedata.normalize("NFKD", str(name))
    return _NON_ALNUM.sub("", decomposed.lower())


def normalize_venue_name(name: str | None) -> str:
    """Normalize a venue name to its canonical key.

    Args:
        name: Raw venue name.

    Returns:
        Lower-case key with single inner spaces (possibly empty).
    """
    if not name:
        return ""
    normalized = str(name).strip().lower()
    normalized = _LEADING_ARTICLE.sub("", normalized, count=1)
    normalized = _PUNCTUATION.sub("", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


def normalize_genre_name(genre: str | None) -> str:
    """Normalize a genre label for colour and lookup consistency."""
    if not genre:
        return ""
    normalized = _PUNCTUATION.sub("", str(genre).lower())
    return _WHITESPACE.sub(" ", normalized).strip()


# Neighbourhoods that setlist.fm files under their parent city.
_CITY_ALIASES: dict[str, str] = {
    "hollywood": "Los Angeles",
    "west hollywood": "Los Angeles",
}


def map_city_name(city: str) -> str:
    """Map a neighbourhood name to the official city name used by setlist.fm.

    Args:
        city: City as recorded in the concert spreadsheet.

    Returns:
        The official city name, or *city* unchanged when no alias applies.
    """
    return _CITY_ALIASES.get(city.strip().lower(), city)


def fuzzy_match(
    query: str,
    candidates: list[str],
    threshold: float = 0.8,
) -> tuple[str, float] | None:
    """Find the best fuzzy match for a query among candidates.

    Uses rapidfuzz ``token_sort_ratio`` which sorts tokens alphabetically
    before comparing, so word-order differences ("Femmes Violent") still
    match.  Used to suggest the intended artist when a headliner has no
    metadata entry.

    Args:
        query: The string to match.
        candidates: List of candidate strings to match against.
        threshold: Minimum similarity score (0.0--1.0) to accept a match.

    Returns:
        A (best_match, score) tuple if a match meets the threshold, else None.
    """
    if not candidates:
        return None

    result = process.extractOne(
        query,
        candidates,
        scorer=fuzz.token_sort_ratio,
        score_cutoff=threshold * 100,  # rapidfuzz uses 0-100 scale internally
    )

    if result is None:
        return None

    match_str, score, _ = result
    return (match_str, score / 100.0)


# Separators seen in the "openers" spreadsheet column.
_SEPARATOR_PATTERN = re.compile(
    r"\s+[Bb]2[Bb]\s+|\s+[Vv][Ss]\.?\s+|\s+&\s+|\s+feat\.?\s+" r"|\s+ft\.?\s+|\s+featuring\s+|,\s*",
    re.IGNORECASE,
)


def split_artist_names(raw: str) -> list[str]:
    """Split a raw opener string into individual artist names.

    "The Alarm, Modern English & INXS" -> ["The Alarm", "Modern English", "INXS"].
    Band names that contain " & " must be entered as list items in the
    source data instead.

    Args:
        raw: Raw artist string potentially containing multiple names.

    Returns:
        List of individual artist name strings, stripped of whitespace.
    """
    parts = _SEPARATOR_PATTERN.split(raw)
    return [part.strip() for part in parts if part.strip()]
