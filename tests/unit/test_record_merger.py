"""Unit tests for source-quality record merging."""

from __future__ import annotations

from itertools import permutations

import pytest

from concert_archive.models.entities import MetadataRecord
from concert_archive.services.record_merger import (
    DEFAULT_SOURCE_RANKS,
    RecordMerger,
    SourceRankTable,
)


def _record(**fields) -> MetadataRecord:
    fields.setdefault("name", "Violent Femmes")
    return MetadataRecord(**fields)


# ======================================================================
# SourceRankTable
# ======================================================================


class TestSourceRankTable:
    def test_default_order(self) -> None:
        ranks = [
            DEFAULT_SOURCE_RANKS.rank(source)
            for source in ("theaudiodb", "spotify", "lastfm", "manual", "mock")
        ]
        assert ranks == sorted(ranks, reverse=True)
        assert len(set(ranks)) == len(ranks)

    def test_unknown_source_ranks_zero(self) -> None:
        assert DEFAULT_SOURCE_RANKS.rank("myspace") == 0


# ======================================================================
# RecordMerger.select_better
# ======================================================================


class TestSelectBetter:
    def setup_method(self) -> None:
        self.merger = RecordMerger()

    def test_rank_beats_artwork(self) -> None:
        audiodb = _record(source="theaudiodb")
        spotify = _record(source="spotify", image="https://img.example/a.jpg")

        assert self.merger.select_better(audiodb, spotify) is audiodb
        assert self.merger.select_better(spotify, audiodb) is audiodb

    def test_artwork_breaks_rank_tie(self) -> None:
        plain = _record(source="spotify", fetched_at="2024-06-01T00:00:00Z")
        imaged = _record(source="spotify", image_url="https://img.example/b.jpg",
                         fetched_at="2020-01-01T00:00:00Z")

        assert self.merger.select_better(plain, imaged) is imaged
        assert self.merger.select_better(imaged, plain) is imaged

    def test_recency_breaks_artwork_tie(self) -> None:
        older = _record(source="lastfm", fetched_at="2023-01-01T00:00:00Z")
        newer = _record(source="lastfm", fetched_at="2024-01-01T00:00:00+00:00")

        assert self.merger.select_better(older, newer) is newer
        assert self.merger.select_better(newer, older) is newer

    def test_missing_timestamp_is_oldest(self) -> None:
        undated = _record(source="manual")
        dated = _record(source="manual", fetched_at="1999-12-31T23:59:59Z")

        assert self.merger.select_better(undated, dated) is dated

    def test_untagged_record_counts_as_mock(self) -> None:
        untagged = _record()
        unknown = _record(source="myspace", image="https://img.example/c.jpg")

        assert self.merger.select_better(unknown, untagged) is untagged

    def test_legacy_data_source_tag(self) -> None:
        legacy = _record(data_source="spotify")
        manual = _record(source="manual")

        assert self.merger.select_better(manual, legacy) is legacy

    def test_full_tie_is_order_independent(self) -> None:
        a = _record(source="spotify", bio="aaa")
        b = _record(source="spotify", bio="bbb")

        assert self.merger.select_better(a, b) is self.merger.select_better(b, a)

    def test_custom_rank_table(self) -> None:
        merger = RecordMerger(SourceRankTable(version="test", ranks={"spotify": 9}))
        spotify = _record(source="spotify")
        audiodb = _record(source="theaudiodb")

        assert merger.select_better(audiodb, spotify) is spotify
        assert merger.rank_table.version == "test"


# ======================================================================
# RecordMerger.merge_group
# ======================================================================


class TestMergeGroup:
    def test_permutation_invariant(self) -> None:
        group = [
            _record(source="mock"),
            _record(source="spotify", image="https://img.example/s.jpg"),
            _record(source="spotify", image="https://img.example/t.jpg",
                    fetched_at="2024-03-01T00:00:00Z"),
            _record(source="spotify", bio="no art"),
            _record(source="lastfm", image="https://img.example/l.jpg"),
        ]
        merger = RecordMerger()
        winners = {merger.merge_group(order).to_json_dict()["image"] for order in permutations(group)}

        assert winners == {"https://img.example/t.jpg"}

    def test_permutation_invariant_on_full_ties(self) -> None:
        group = [_record(source="manual", bio=bio) for bio in ("c", "a", "b")]
        merger = RecordMerger()
        winners = {merger.merge_group(order).bio for order in permutations(group)}

        assert len(winners) == 1

    def test_single_record(self) -> None:
        record = _record()
        assert RecordMerger().merge_group([record]) is record

    def test_empty_group_raises(self) -> None:
        with pytest.raises(ValueError):
            RecordMerger().merge_group([])
