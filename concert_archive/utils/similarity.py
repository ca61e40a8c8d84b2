"""String similarity and composite setlist match scoring.

setlist.fm searches are keyed on artist, city and year, so a single query
usually returns several shows.  Each result is scored against the concert
it should describe:

    venue   up to 0.5  (exact normalized match = 0.5, else sim * 0.5 if sim > 0.7)
    city    up to 0.3  (exact match = 0.3, else sim * 0.3 if sim > 0.7)
    artist  up to 0.2  (sim * 0.2, no gate)

Only a best candidate scoring at least 0.5 is accepted.  Anything weaker is
reported as "no match" because a wrong setlist silently poisons the cache.
"""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein

from concert_archive.models.setlist import MatchCandidate, SetlistCandidate, SetlistQuery
from concert_archive.utils.text_normalizer import normalize_venue_name

MATCH_THRESHOLD = 0.5

_VENUE_WEIGHT = 0.5
_CITY_WEIGHT = 0.3
_ARTIST_WEIGHT = 0.2
_PARTIAL_MATCH_GATE = 0.7


def string_similarity(a: str, b: str) -> float:
    """Return an edit-distance similarity in [0, 1].

    Both strings are trimmed and lower-cased.  Identical strings (including
    two empty ones) score 1.0; exactly one empty side scores 0.0; otherwise
    ``1 - distance / max(len(a), len(b))`` using plain insert / delete /
    substitute Levenshtein distance.
    """
    s1 = a.strip().lower()
    s2 = b.strip().lower()

    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    distance = Levenshtein.distance(s1, s2)
    return 1.0 - distance / max(len(s1), len(s2))


def _gated_component(result: str, expected: str, weight: float) -> tuple[float, float]:
    """Return (field_similarity, weighted_contribution) for a gated field."""
    if result == expected:
        return 1.0, weight
    similarity = string_similarity(result, expected)
    if similarity > _PARTIAL_MATCH_GATE:
        return similarity, similarity * weight
    return similarity, 0.0


def score_candidate(candidate: SetlistCandidate, query: SetlistQuery) -> MatchCandidate:
    """Score one search result against the concert it should describe."""
    venue_score, venue_points = _gated_component(
        normalize_venue_name(candidate.venue_name),
        normalize_venue_name(query.venue_name),
        _VENUE_WEIGHT,
    )
    city_score, city_points = _gated_component(
        candidate.city_name.strip().lower(),
        query.city.strip().lower(),
        _CITY_WEIGHT,
    )
    artist_score = string_similarity(candidate.artist_name, query.artist_name)

    return MatchCandidate(
        candidate=candidate,
        venue_score=venue_score,
        city_score=city_score,
        artist_score=artist_score,
        total=venue_points + city_points + artist_score * _ARTIST_WEIGHT,
    )


def find_best_match(
    candidates: list[SetlistCandidate],
    query: SetlistQuery,
    threshold: float = MATCH_THRESHOLD,
) -> MatchCandidate | None:
    """Pick the highest-scoring candidate, or None when it scores below *threshold*.

    Ties keep the earlier candidate (the search API's own ranking).
    """
    if not candidates:
        return None

    scored = [score_candidate(candidate, query) for candidate in candidates]
    # sorted() is stable, so equal totals keep the API order.
    scored = sorted(scored, key=lambda match: match.total, reverse=True)

    best = scored[0]
    if best.total >= threshold:
        return best
    return None
