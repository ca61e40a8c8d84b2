"""Source-quality merging of metadata records that describe the same entity.

When two records share a canonical key, exactly one survives.  The winner is
decided by a fixed precedence:

    1. Source rank      -- higher-ranked source wins outright
    2. Artwork          -- a record with an image beats one without
    3. Recency          -- the later ``fetched_at`` wins
    4. Content          -- the record whose canonical JSON sorts first wins

Steps 1-3 define which data survives a merge and must not be reordered.
Step 4 only breaks exact ties, so folding ``select_better`` over a group
gives the same survivor in any order.

Design pattern: Service (stateless, receives its rank table via constructor).
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone

from concert_archive.models.entities import MetadataRecord, MetadataSource

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class SourceRankTable:
    """Versioned trust ranking over source tags.

    Attributes
    ----------
    version:
        Identifier of this ranking, recorded so a change to the table is
        visible in reports.
    ranks:
        Source tag -> rank.  Higher is more trusted; tags missing from the
        table rank 0.
    """

    version: str
    ranks: Mapping[str, int] = field(default_factory=dict)

    def rank(self, source: str) -> int:
        return self.ranks.get(source, 0)


# TheAudioDB outranks Spotify.  Any change to this order changes which
# records survive reconciliation of the published dataset.
DEFAULT_SOURCE_RANKS = SourceRankTable(
    version="1",
    ranks={
        MetadataSource.THEAUDIODB.value: 5,
        MetadataSource.SPOTIFY.value: 4,
        MetadataSource.LASTFM.value: 3,
        MetadataSource.MANUAL.value: 2,
        MetadataSource.MOCK.value: 1,
    },
)


def _content_key(record: MetadataRecord) -> str:
    return json.dumps(record.to_json_dict(), sort_keys=True, ensure_ascii=False)


class RecordMerger:
    """Picks the best of several metadata records for one canonical key."""

    def __init__(self, rank_table: SourceRankTable = DEFAULT_SOURCE_RANKS) -> None:
        self._rank_table = rank_table

    @property
    def rank_table(self) -> SourceRankTable:
        return self._rank_table

    def select_better(self, a: MetadataRecord, b: MetadataRecord) -> MetadataRecord:
        """Return whichever of *a* and *b* carries the better data."""
        rank_a = self._rank_table.rank(a.effective_source)
        rank_b = self._rank_table.rank(b.effective_source)
        if rank_a != rank_b:
            return a if rank_a > rank_b else b

        if a.has_artwork != b.has_artwork:
            return a if a.has_artwork else b

        fetched_a = a.fetched_at or _OLDEST
        fetched_b = b.fetched_at or _OLDEST
        if fetched_a != fetched_b:
            return a if fetched_a > fetched_b else b

        return a if _content_key(a) <= _content_key(b) else b

    def merge_group(self, records: Iterable[MetadataRecord]) -> MetadataRecord:
        """Fold :meth:`select_better` left to right over *records*.

        Raises:
            ValueError: If *records* is empty.
        """
        iterator = iter(records)
        try:
            best = next(iterator)
        except StopIteration:
            raise ValueError("cannot merge an empty record group") from None

        for record in iterator:
            best = self.select_better(best, record)
        return best
