"""Unit tests for JSON dataset persistence and backups."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from concert_archive.models.entities import MetadataRecord
from concert_archive.models.setlist import SetlistCache, SetlistCacheEntry
from concert_archive.services.dataset_store import (
    MetadataLayout,
    create_backup,
    detect_layout,
    list_backups,
    load_concerts,
    load_metadata_map,
    load_setlist_cache,
    save_metadata_map,
    save_setlist_cache,
)
from concert_archive.utils.errors import DatasetLoadError
from tests.conftest import write_json


# ======================================================================
# Backups
# ======================================================================


class TestBackups:
    def test_missing_file_not_backed_up(self, data_dir: Path) -> None:
        assert create_backup(data_dir / "nope.json") is None

    def test_backup_copies_content(self, data_dir: Path) -> None:
        target = write_json(data_dir / "artists-metadata.json", {"a": 1})
        backup = create_backup(target)

        assert backup is not None
        assert backup.name.startswith("artists-metadata.json.backup.")
        assert json.loads(backup.read_text()) == {"a": 1}

    def test_prunes_oldest(self, data_dir: Path) -> None:
        target = write_json(data_dir / "concerts.json", {})
        for stamp in ("2020-01-01T00-00-00", "2021-01-01T00-00-00", "2022-01-01T00-00-00"):
            (data_dir / f"concerts.json.backup.{stamp}").write_text("{}")

        create_backup(target, max_backups=2)
        backups = list_backups(target)

        assert len(backups) == 2
        names = [p.name for p in backups]
        assert "concerts.json.backup.2020-01-01T00-00-00" not in names
        assert "concerts.json.backup.2021-01-01T00-00-00" not in names

    def test_list_ignores_other_files(self, data_dir: Path) -> None:
        target = write_json(data_dir / "concerts.json", {})
        (data_dir / "venues-metadata.json.backup.2020-01-01T00-00-00").write_text("{}")

        assert list_backups(target) == []


# ======================================================================
# Metadata maps
# ======================================================================


class TestLoadMetadataMap:
    def test_wrapped_map(self, data_dir: Path, artists_payload: dict) -> None:
        path = write_json(data_dir / "artists-metadata.json", artists_payload)
        raw = load_metadata_map(path)

        assert set(raw) == {"violentfemmes", "violent-femmes", "therepl"}
        assert detect_layout(path) == MetadataLayout.ARTISTS_MAP

    def test_bare_map(self, data_dir: Path) -> None:
        path = write_json(data_dir / "venues-metadata.json", {"fillmore": {"name": "The Fillmore"}})

        assert load_metadata_map(path) == {"fillmore": {"name": "The Fillmore"}}
        assert detect_layout(path) == MetadataLayout.MAP

    def test_list_form_keyed_by_normalized_name(self, data_dir: Path) -> None:
        path = write_json(
            data_dir / "artists-metadata.json",
            {"artists": [
                {"name": "Violent Femmes", "normalizedName": "violent-femmes"},
                {"name": "The Replacements"},
                "garbage",
            ]},
        )
        raw = load_metadata_map(path)

        assert list(raw) == ["violent-femmes", "thereplacements", "#2"]
        assert raw["#2"] == "garbage"
        assert detect_layout(path) == MetadataLayout.ARTISTS_LIST

    def test_list_form_keeps_repeated_entries(self, data_dir: Path) -> None:
        path = write_json(
            data_dir / "artists-metadata.json",
            {"artists": [
                {"name": "Violent Femmes", "normalizedName": "violentfemmes", "source": "mock"},
                {"name": "Violent Femmes", "normalizedName": "violentfemmes", "source": "theaudiodb"},
                {"name": "Violent Femmes", "source": "manual"},
            ]},
        )
        raw = load_metadata_map(path)

        assert list(raw) == ["violentfemmes", "violentfemmes#1", "violentfemmes#2"]
        assert [r["source"] for r in raw.values()] == ["mock", "theaudiodb", "manual"]

    def test_bare_list(self, data_dir: Path) -> None:
        path = write_json(data_dir / "artists-metadata.json", [{"name": "Minutemen"}])

        assert list(load_metadata_map(path)) == ["minutemen"]
        assert detect_layout(path) == MetadataLayout.LIST

    def test_layout_of_missing_file(self, data_dir: Path) -> None:
        assert detect_layout(data_dir / "venues-metadata.json") == MetadataLayout.MAP

    def test_missing_required_file(self, data_dir: Path) -> None:
        with pytest.raises(DatasetLoadError) as exc_info:
            load_metadata_map(data_dir / "artists-metadata.json")
        assert exc_info.value.provider_name == "artists-metadata.json"

    def test_missing_optional_file(self, data_dir: Path) -> None:
        assert load_metadata_map(data_dir / "venues-metadata.json", required=False) == {}

    def test_invalid_json(self, data_dir: Path) -> None:
        path = data_dir / "artists-metadata.json"
        path.write_text("{not json")

        with pytest.raises(DatasetLoadError):
            load_metadata_map(path)

    def test_scalar_payload(self, data_dir: Path) -> None:
        path = write_json(data_dir / "artists-metadata.json", 42)

        with pytest.raises(DatasetLoadError):
            load_metadata_map(path)


class TestSaveMetadataMap:
    def test_writes_camel_case_and_backs_up(self, data_dir: Path) -> None:
        path = write_json(data_dir / "artists-metadata.json", {"artists": {}})
        records = {
            "violentfemmes": MetadataRecord(
                name="Violent Femmes",
                normalized_name="violentfemmes",
                fetched_at="2024-01-01T00:00:00Z",
            )
        }
        save_metadata_map(path, records, layout=MetadataLayout.ARTISTS_MAP)

        data = json.loads(path.read_text())
        record = data["artists"]["violentfemmes"]
        assert record["normalizedName"] == "violentfemmes"
        assert record["fetchedAt"].startswith("2024-01-01T00:00:00")
        assert "bio" not in record
        assert len(list_backups(path)) == 1

    def test_unwrapped(self, data_dir: Path) -> None:
        path = data_dir / "venues-metadata.json"
        save_metadata_map(path, {"fillmore": MetadataRecord(name="The Fillmore")})

        assert json.loads(path.read_text()) == {"fillmore": {"name": "The Fillmore"}}
        assert list_backups(path) == []

    def test_list_layout_writes_records_only(self, data_dir: Path) -> None:
        path = data_dir / "artists-metadata.json"
        records = {
            "minutemen": MetadataRecord(name="Minutemen", normalized_name="minutemen"),
            "husker": MetadataRecord(name="Husker Du", normalized_name="huskerdu"),
        }
        save_metadata_map(path, records, layout=MetadataLayout.ARTISTS_LIST)

        assert json.loads(path.read_text()) == {"artists": [
            {"name": "Minutemen", "normalizedName": "minutemen"},
            {"name": "Husker Du", "normalizedName": "huskerdu"},
        ]}


# ======================================================================
# Concerts
# ======================================================================


class TestLoadConcerts:
    def test_loads_rows(self, data_dir: Path, concerts_payload: dict) -> None:
        path = write_json(data_dir / "concerts.json", concerts_payload)
        concerts = load_concerts(path)

        assert [c.id for c in concerts] == ["1", "2"]
        assert concerts[0].openers == ["The Replacements"]
        assert concerts[0].headliner_normalized == "violentfemmes"
        assert concerts[1].year == "1987"

    def test_missing_list(self, data_dir: Path) -> None:
        path = write_json(data_dir / "concerts.json", {"shows": []})

        with pytest.raises(DatasetLoadError):
            load_concerts(path)

    def test_invalid_row(self, data_dir: Path) -> None:
        path = write_json(data_dir / "concerts.json", {"concerts": [{"id": "1", "headliner": 5}]})

        with pytest.raises(DatasetLoadError):
            load_concerts(path)


# ======================================================================
# Setlist cache
# ======================================================================


class TestSetlistCache:
    def test_round_trip_uses_camel_case(self, data_dir: Path) -> None:
        path = data_dir / "setlists-cache.json"
        cache = SetlistCache(
            entries=[
                SetlistCacheEntry(
                    concert_id="1",
                    artist_name="Violent Femmes",
                    setlist={"id": "abc"},
                )
            ]
        )
        save_setlist_cache(path, cache)

        raw = json.loads(path.read_text())
        assert raw["version"] == "1.0.0"
        assert "generatedAt" in raw
        assert raw["entries"][0]["concertId"] == "1"

        loaded = load_setlist_cache(path)
        assert loaded is not None
        assert loaded.entries[0].cache_key == "1:Violent Femmes"
        assert loaded.entries[0].setlist == {"id": "abc"}

    def test_missing_cache(self, data_dir: Path) -> None:
        assert load_setlist_cache(data_dir / "setlists-cache.json") is None

    def test_corrupt_cache_treated_as_absent(self, data_dir: Path) -> None:
        path = data_dir / "setlists-cache.json"
        path.write_text("[1, 2")

        assert load_setlist_cache(path) is None

    def test_invalid_entries_treated_as_absent(self, data_dir: Path) -> None:
        path = write_json(data_dir / "setlists-cache.json", {"entries": [{"setlist": None}]})

        assert load_setlist_cache(path) is None
