"""JSON persistence for the website's data files, with rotating backups.

Reads and writes the files under ``public/data/``:

    artists-metadata.json   {"artists": {key: record}}, a bare {key: record}
                            map, {"artists": [record, ...]} or a bare list
    venues-metadata.json    {key: record}
    concerts.json           {"concerts": [concert, ...]}
    setlists-cache.json     {"version", "generatedAt", "entries": [...]}

Every overwrite is preceded by a timestamped copy
(``<file>.backup.YYYY-MM-DDTHH-MM-SS``); only the newest ``max_backups``
copies are kept.

Unreadable or invalid files raise DatasetLoadError: they are infrastructure
failures and abort the calling CLI.  Bad *records* inside a readable file are
left for the reconciliation and validation services to report.
"""

from __future__ import annotations

import json
import shutil
from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from concert_archive.models.entities import Concert, MetadataRecord
from concert_archive.models.setlist import SetlistCache
from concert_archive.utils.errors import DatasetLoadError
from concert_archive.utils.text_normalizer import normalize_artist_name

logger = structlog.get_logger(logger_name=__name__)

_BACKUP_MARKER = ".backup."


# ---------------------------------------------------------------------------
# Low-level JSON helpers
# ---------------------------------------------------------------------------


def _read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as exc:
        raise DatasetLoadError(message=f"{path} not found", provider_name=path.name) from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise DatasetLoadError(
            message=f"Could not read {path}: {exc}", provider_name=path.name
        ) from exc


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


# ---------------------------------------------------------------------------
# Backups
# ---------------------------------------------------------------------------


def create_backup(path: str | Path, max_backups: int = 10) -> Path | None:
    """Copy *path* to a timestamped backup and prune old backups.

    Args:
        path: File to back up.
        max_backups: Number of most recent backups to keep.

    Returns:
        Path of the new backup, or ``None`` if *path* does not exist.
    """
    source = Path(path)
    if not source.exists():
        logger.debug("backup_skipped_no_file", path=str(source))
        return None

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
    backup_path = source.with_name(f"{source.name}{_BACKUP_MARKER}{timestamp}")
    shutil.copy2(source, backup_path)
    logger.info("backup_created", path=str(backup_path))

    _prune_backups(source, max_backups)
    return backup_path


def list_backups(path: str | Path) -> list[Path]:
    """Return existing backups of *path*, newest first."""
    source = Path(path)
    prefix = f"{source.name}{_BACKUP_MARKER}"
    if not source.parent.exists():
        return []
    backups = [p for p in source.parent.iterdir() if p.name.startswith(prefix)]
    # Timestamps sort lexically; mtime breaks ties between same-second copies.
    return sorted(backups, key=lambda p: (p.name, p.stat().st_mtime), reverse=True)


def _prune_backups(source: Path, max_backups: int) -> None:
    for stale in list_backups(source)[max_backups:]:
        stale.unlink()
        logger.debug("backup_pruned", path=str(stale))


# ---------------------------------------------------------------------------
# Metadata maps
# ---------------------------------------------------------------------------


class MetadataLayout(str, Enum):  # noqa: UP042, StrEnum requires Python 3.11+
    """Top-level shape of a metadata file, preserved when it is rewritten."""

    MAP = "map"                     # {key: record}
    ARTISTS_MAP = "artists_map"     # {"artists": {key: record}}
    ARTISTS_LIST = "artists_list"   # {"artists": [record, ...]}
    LIST = "list"                   # [record, ...]


def _key_list_items(items: list[Any]) -> dict[str, Any]:
    # Each entry gets its own literal key so duplicates survive to be merged
    # or reported.  Collisions and non-object entries are keyed by position.
    keyed: dict[str, Any] = {}
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            keyed[f"#{index}"] = item
            continue
        key = item.get("normalizedName") or normalize_artist_name(item.get("name"))
        if key in keyed:
            key = f"{key}#{index}"
        keyed[key] = item
    return keyed


def load_metadata_map(path: str | Path, required: bool = True) -> dict[str, Any]:
    """Load a metadata file as a ``{literal_key: raw_record}`` map.

    Values are returned raw (dicts) so malformed records reach the
    reconciliation and validation services, which report them.  List
    entries are keyed by ``normalizedName`` (or their artist key when that
    is missing); a repeated key gets a ``#<position>`` suffix and a
    non-object entry is keyed ``#<position>``, so nothing is dropped.

    Raises:
        DatasetLoadError: If the file is unreadable, not JSON, or has an
            unexpected shape.  A missing file is only an error when
            *required* is true.
    """
    path = Path(path)
    if not required and not path.exists():
        return {}

    data = _read_json(path)
    if isinstance(data, dict) and "artists" in data:
        data = data["artists"]

    if isinstance(data, list):
        return _key_list_items(data)

    if isinstance(data, dict):
        return data

    raise DatasetLoadError(
        message=f"{path} must contain an object or list of records", provider_name=path.name
    )


def save_metadata_map(
    path: str | Path,
    records: Mapping[str, MetadataRecord],
    max_backups: int = 10,
    layout: MetadataLayout = MetadataLayout.MAP,
) -> Path:
    """Back up then overwrite *path* with *records*.

    Args:
        path: Destination file.
        records: Canonical map to persist.
        max_backups: Backups to retain.
        layout: Top-level shape to write, usually ``detect_layout(path)``.
            The list layouts drop the keys; each record carries its own
            ``normalizedName``.
    """
    path = Path(path)
    create_backup(path, max_backups=max_backups)

    payload: Any
    if layout in (MetadataLayout.ARTISTS_LIST, MetadataLayout.LIST):
        payload = [record.to_json_dict() for record in records.values()]
    else:
        payload = {key: record.to_json_dict() for key, record in records.items()}
    if layout in (MetadataLayout.ARTISTS_MAP, MetadataLayout.ARTISTS_LIST):
        payload = {"artists": payload}

    _write_json(path, payload)
    logger.info("metadata_saved", path=str(path), records=len(records), layout=layout.value)
    return path


def detect_layout(path: str | Path) -> MetadataLayout:
    """Return the top-level shape of an existing metadata file (``MAP`` if absent)."""
    path = Path(path)
    if not path.exists():
        return MetadataLayout.MAP
    data = _read_json(path)
    if isinstance(data, dict) and "artists" in data:
        if isinstance(data["artists"], list):
            return MetadataLayout.ARTISTS_LIST
        return MetadataLayout.ARTISTS_MAP
    return MetadataLayout.LIST if isinstance(data, list) else MetadataLayout.MAP


# ---------------------------------------------------------------------------
# Concerts
# ---------------------------------------------------------------------------


def load_concerts(path: str | Path) -> list[Concert]:
    """Load ``concerts.json``.

    Raises:
        DatasetLoadError: If the file is unreadable or a concert row fails
            validation (concerts are produced by the sheet export and are
            expected to be well-formed).
    """
    path = Path(path)
    data = _read_json(path)
    rows = data.get("concerts") if isinstance(data, dict) else data
    if not isinstance(rows, list):
        raise DatasetLoadError(
            message=f"{path} has no concerts list", provider_name=path.name
        )
    try:
        return [Concert.model_validate(row) for row in rows]
    except ValidationError as exc:
        raise DatasetLoadError(
            message=f"{path} contains an invalid concert: {exc}", provider_name=path.name
        ) from exc


# ---------------------------------------------------------------------------
# Setlist cache
# ---------------------------------------------------------------------------


def load_setlist_cache(path: str | Path) -> SetlistCache | None:
    """Load the setlist cache, or ``None`` when it does not exist yet.

    An unreadable cache is logged and treated as absent so the pre-fetch job
    starts fresh instead of failing.
    """
    path = Path(path)
    if not path.exists():
        return None
    try:
        return SetlistCache.model_validate(_read_json(path))
    except (DatasetLoadError, ValidationError) as exc:
        logger.warning("setlist_cache_unreadable", path=str(path), error=str(exc))
        return None


def save_setlist_cache(path: str | Path, cache: SetlistCache, max_backups: int = 10) -> Path:
    """Back up then overwrite the setlist cache."""
    path = Path(path)
    create_backup(path, max_backups=max_backups)
    _write_json(path, cache.model_dump(mode="json", by_alias=True))
    logger.info("setlist_cache_saved", path=str(path), entries=len(cache.entries))
    return path
