"""Reconciliation of a raw metadata map into one record per canonical key.

Metadata files accumulate records written by different enrichment runs.
When the key normalization rules change between runs, or a source spells a
name differently ("Violent Femmes" vs "Violent-Femmes"), the same artist ends
up filed under several literal keys.  Reconciliation re-derives every key
from the record's display name, groups records that collapse to the same
key, and keeps the best record of each group.

Architecture:
    - Called by the ``deduplicate`` CLI before the metadata file is rewritten.
    - Depends on RecordMerger (concert_archive/services/record_merger.py)
      for the winner of each group.
    - Uses concert_archive/utils/text_normalizer for the canonical keys.

Design pattern: Service (stateless, receives dependencies via constructor).
Nothing here performs I/O or raises on bad data; malformed records are
returned as issues and left out of the output.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from concert_archive.models.entities import EntityKind, MetadataRecord
from concert_archive.models.reconciliation import (
    DuplicateReport,
    IssueKind,
    ReconciliationResult,
    ValidationIssue,
)
from concert_archive.services.record_merger import RecordMerger
from concert_archive.utils.text_normalizer import normalize_artist_name, normalize_venue_name

logger = structlog.get_logger(logger_name=__name__)

_NORMALIZERS: dict[EntityKind, Callable[[str | None], str]] = {
    EntityKind.ARTIST: normalize_artist_name,
    EntityKind.VENUE: normalize_venue_name,
}


def normalizer_for(kind: EntityKind) -> Callable[[str | None], str]:
    """Return the key normalizer for *kind*."""
    return _NORMALIZERS[kind]


def coerce_record(
    literal_key: str,
    value: MetadataRecord | Mapping[str, Any] | Any,
    kind: EntityKind,
) -> tuple[MetadataRecord | None, ValidationIssue | None]:
    """Turn one raw map value into a record, or explain why it cannot be used.

    Returns ``(record, None)`` for a usable record and ``(None, issue)`` for
    a malformed one.  A record with an empty name is usable (it keys as
    ``""``); a record with no name at all is not.
    """
    if isinstance(value, MetadataRecord):
        record = value
    elif isinstance(value, Mapping):
        try:
            record = MetadataRecord.model_validate(dict(value))
        except ValidationError as exc:
            return None, ValidationIssue(
                kind=IssueKind.MALFORMED,
                message=f"{kind.value.capitalize()} entry \"{literal_key}\" could not be parsed",
                details={"key": literal_key, "errors": exc.error_count()},
            )
    else:
        return None, ValidationIssue(
            kind=IssueKind.MALFORMED,
            message=f"{kind.value.capitalize()} entry \"{literal_key}\" is not an object",
            details={"key": literal_key, "type": type(value).__name__},
        )

    if record.name is None:
        return None, ValidationIssue(
            kind=IssueKind.MALFORMED,
            message=f"{kind.value.capitalize()} entry \"{literal_key}\" is missing its name field",
            details={"key": literal_key},
        )
    return record, None


class ReconciliationService:
    """Collapses a literal-keyed metadata map into a canonical-keyed one.

    Output invariants:
        - exactly one record per canonical key
        - every record's ``normalized_name`` equals its canonical key
        - the surviving record of each group does not depend on input order
    """

    def __init__(
        self,
        merger: RecordMerger | None = None,
        entity_kind: EntityKind = EntityKind.ARTIST,
    ) -> None:
        self._merger = merger or RecordMerger()
        self._entity_kind = entity_kind
        self._normalize = normalizer_for(entity_kind)

    @property
    def entity_kind(self) -> EntityKind:
        return self._entity_kind

    def reconcile(
        self, raw_records: Mapping[str, MetadataRecord | Mapping[str, Any]]
    ) -> ReconciliationResult:
        """Group *raw_records* by canonical key and merge each group.

        Steps:
            1. Parse each value; malformed ones become issues and are skipped.
            2. Re-derive the canonical key from the record's name.
            3. Group by canonical key, preserving first-seen order.
            4. Singleton groups keep their record; larger groups are folded
               through RecordMerger and reported as a DuplicateReport.
            5. Re-stamp ``normalized_name`` on every surviving record.
        """
        issues: list[ValidationIssue] = []
        groups: dict[str, list[tuple[str, MetadataRecord]]] = {}

        for literal_key, value in raw_records.items():
            record, issue = coerce_record(literal_key, value, self._entity_kind)
            if issue is not None:
                issues.append(issue)
                continue
            canonical_key = self._normalize(record.name)
            groups.setdefault(canonical_key, []).append((literal_key, record))

        canonical: dict[str, MetadataRecord] = {}
        duplicates: list[DuplicateReport] = []

        for canonical_key, entries in groups.items():
            if len(entries) == 1:
                winner = entries[0][1]
            else:
                winner = self._merger.merge_group(record for _, record in entries)
                duplicates.append(self._build_report(canonical_key, entries, winner))

            # Always re-stamp: the stored key may predate the current rules.
            canonical[canonical_key] = winner.model_copy(
                update={"normalized_name": canonical_key}
            )

        logger.info(
            "reconciliation_complete",
            entity_kind=self._entity_kind.value,
            total_before=len(raw_records),
            total_after=len(canonical),
            duplicate_groups=len(duplicates),
            malformed=len(issues),
        )

        return ReconciliationResult(
            canonical=canonical,
            duplicates=duplicates,
            issues=issues,
            total_before=len(raw_records),
        )

    @staticmethod
    def _build_report(
        canonical_key: str,
        entries: list[tuple[str, MetadataRecord]],
        winner: MetadataRecord,
    ) -> DuplicateReport:
        winner_index = next(idx for idx, (_, record) in enumerate(entries) if record is winner)
        kept_literal_key = entries[winner_index][0]
        discarded = [key for idx, (key, _) in enumerate(entries) if idx != winner_index]

        return DuplicateReport(
            display_name=winner.name or "",
            canonical_key=canonical_key,
            duplicate_keys=[key for key, _ in entries],
            kept_key=canonical_key,
            kept_literal_key=kept_literal_key,
            discarded_keys=discarded,
        )
