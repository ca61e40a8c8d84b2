"""Consistency checks over a reconciled dataset and the concert list.

Every check runs independently and appends to one issue list, so a single
run surfaces every problem at once instead of stopping at the first.  The
overall verdict is simply whether that list is empty.

Checks (artist metadata + concerts):
    - malformed      metadata entry with no name
    - stale_key      literal key differs from the re-derived canonical key
    - duplicate      canonical key reached from more than one literal key
    - missing_entry  headliner with no metadata record
    - missing_color  metadata genre with no palette colour
    - genre_drift    concert genre differs from its headliner's metadata genre
    - mismatch       concert's stored headliner key is out of date

Checks (concert rows, numbered from 1):
    - missing_field, invalid_date, duplicate_concert, orphaned_openers (errors)
    - missing venue/city, unusual_date, default_coordinates,
      excessive_openers (warnings)

Checks (optional venue metadata):
    - malformed, stale_key, duplicate with the venue key policy

Design pattern: Service (stateless, receives dependencies via constructor).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

import structlog

from concert_archive.interfaces.genre_lookup_provider import IGenreLookupProvider
from concert_archive.models.entities import Concert, EntityKind, MetadataRecord
from concert_archive.models.reconciliation import (
    IssueKind,
    Severity,
    ValidationIssue,
    ValidationReport,
)
from concert_archive.services.reconciliation_service import coerce_record, normalizer_for
from concert_archive.utils.text_normalizer import (
    fuzzy_match,
    normalize_artist_name,
    normalize_genre_name,
)

logger = structlog.get_logger(logger_name=__name__)

# Minimum token_sort_ratio for a "did you mean" hint on a missing headliner.
_SUGGESTION_THRESHOLD = 0.85

# Concert-row plausibility limits.
_EARLIEST_YEAR = 1950
_FUTURE_YEARS = 2
_MAX_OPENERS = 10

RawMetadataMap = Mapping[str, MetadataRecord | Mapping[str, Any]]


class ValidationService:
    """Validates persisted metadata maps against each other and the concerts.

    Injected with an IGenreLookupProvider for the colour check.
    """

    def __init__(self, genre_lookup: IGenreLookupProvider) -> None:
        self._genre_lookup = genre_lookup

    def validate(
        self,
        artists: RawMetadataMap,
        concerts: Sequence[Concert],
        venues: RawMetadataMap | None = None,
    ) -> ValidationReport:
        """Run every check and collect the issues into one report."""
        issues: list[ValidationIssue] = []

        records = self._parse_map(artists, EntityKind.ARTIST, issues)
        issues.extend(self._check_keys(records, EntityKind.ARTIST))

        by_canonical_key = self._index_by_canonical_key(records)
        issues.extend(self._check_missing_entries(concerts, by_canonical_key))
        issues.extend(self._check_genre_colors(records))
        issues.extend(self._check_genre_drift(concerts, by_canonical_key))
        issues.extend(self._check_concert_keys(concerts))
        issues.extend(self._check_concert_rows(concerts))

        if venues is not None:
            venue_records = self._parse_map(venues, EntityKind.VENUE, issues)
            issues.extend(self._check_keys(venue_records, EntityKind.VENUE))

        report = ValidationReport(issues=issues)
        logger.info(
            "validation_complete",
            passed=report.passed,
            issues=len(report.issues),
            by_kind=report.count_by_kind(),
        )
        return report

    # ------------------------------------------------------------------
    # Parsing / indexing helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_map(
        raw: RawMetadataMap,
        kind: EntityKind,
        issues: list[ValidationIssue],
    ) -> dict[str, MetadataRecord]:
        records: dict[str, MetadataRecord] = {}
        for literal_key, value in raw.items():
            record, issue = coerce_record(literal_key, value, kind)
            if issue is not None:
                issues.append(issue)
            else:
                records[literal_key] = record
        return records

    @staticmethod
    def _index_by_canonical_key(records: Mapping[str, MetadataRecord]) -> dict[str, MetadataRecord]:
        index: dict[str, MetadataRecord] = {}
        for record in records.values():
            index.setdefault(normalize_artist_name(record.name), record)
        return index

    # ------------------------------------------------------------------
    # Individual checks
    # ------------------------------------------------------------------

    @staticmethod
    def _check_keys(
        records: Mapping[str, MetadataRecord], kind: EntityKind
    ) -> list[ValidationIssue]:
        """Stale literal keys and canonical keys reached from several literal keys."""
        normalize = normalizer_for(kind)
        label = kind.value.capitalize()
        issues: list[ValidationIssue] = []
        keys_by_canonical: dict[str, list[str]] = {}

        for literal_key, record in records.items():
            canonical_key = normalize(record.name)
            keys_by_canonical.setdefault(canonical_key, []).append(literal_key)
            if literal_key != canonical_key:
                issues.append(
                    ValidationIssue(
                        kind=IssueKind.STALE_KEY,
                        message=(
                            f"{label} key \"{literal_key}\" doesn't match canonical "
                            f"normalization \"{canonical_key}\""
                        ),
                        details={
                            "name": record.name,
                            "actual_key": literal_key,
                            "expected_key": canonical_key,
                        },
                    )
                )

        for canonical_key, literal_keys in keys_by_canonical.items():
            if len(literal_keys) > 1:
                name = records[literal_keys[0]].name
                issues.append(
                    ValidationIssue(
                        kind=IssueKind.DUPLICATE,
                        message=f"{label} \"{name}\" has {len(literal_keys)} duplicate entries",
                        details={
                            "name": name,
                            "canonical_key": canonical_key,
                            "duplicate_keys": literal_keys,
                        },
                    )
                )
        return issues

    @staticmethod
    def _check_missing_entries(
        concerts: Sequence[Concert],
        by_canonical_key: Mapping[str, MetadataRecord],
    ) -> list[ValidationIssue]:
        """One issue per distinct headliner without a metadata record."""
        known_names = [record.name for record in by_canonical_key.values() if record.name]
        issues: list[ValidationIssue] = []
        seen: set[str] = set()

        for concert in concerts:
            if not concert.headliner.strip():
                continue
            key = normalize_artist_name(concert.headliner)
            if key in seen or key in by_canonical_key:
                continue
            seen.add(key)

            details: dict[str, Any] = {"headliner": concert.headliner, "canonical_key": key}
            suggestion = fuzzy_match(concert.headliner, known_names, _SUGGESTION_THRESHOLD)
            if suggestion is not None:
                details["suggestion"] = suggestion[0]
            issues.append(
                ValidationIssue(
                    kind=IssueKind.MISSING_ENTRY,
                    message=f"Headliner \"{concert.headliner}\" has no artist metadata",
                    details=details,
                )
            )
        return issues

    def _check_genre_colors(self, records: Mapping[str, MetadataRecord]) -> list[ValidationIssue]:
        """One issue per distinct metadata genre without a palette colour."""
        issues: list[ValidationIssue] = []
        seen: set[str] = set()

        for record in records.values():
            genre = record.genre
            if not genre or genre in seen:
                continue
            seen.add(genre)
            if not self._genre_lookup.has_color(genre):
                issues.append(
                    ValidationIssue(
                        kind=IssueKind.MISSING_COLOR,
                        message=f"Genre \"{genre}\" has no colour mapping",
                        details={
                            "genre": genre,
                            "lookup": self._genre_lookup.get_provider_name(),
                        },
                    )
                )
        return issues

    @staticmethod
    def _check_genre_drift(
        concerts: Sequence[Concert],
        by_canonical_key: Mapping[str, MetadataRecord],
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for concert in concerts:
            record = by_canonical_key.get(normalize_artist_name(concert.headliner))
            if record is None or not record.genre or not concert.genre:
                continue
            if normalize_genre_name(concert.genre) != normalize_genre_name(record.genre):
                issues.append(
                    ValidationIssue(
                        kind=IssueKind.GENRE_DRIFT,
                        message=(
                            f"Concert {concert.id} genre \"{concert.genre}\" differs from "
                            f"{concert.headliner}'s metadata genre \"{record.genre}\""
                        ),
                        details={
                            "concert_id": concert.id,
                            "headliner": concert.headliner,
                            "concert_genre": concert.genre,
                            "metadata_genre": record.genre,
                        },
                    )
                )
        return issues

    @staticmethod
    def _check_concert_keys(concerts: Sequence[Concert]) -> list[ValidationIssue]:
        """Concerts whose stored headliner key predates the current rules."""
        issues: list[ValidationIssue] = []
        for concert in concerts:
            if concert.headliner_normalized is None:
                continue
            expected = normalize_artist_name(concert.headliner)
            if concert.headliner_normalized != expected:
                issues.append(
                    ValidationIssue(
                        kind=IssueKind.MISMATCH,
                        message=f"Concert {concert.id} headliner normalization mismatch",
                        details={
                            "concert_id": concert.id,
                            "headliner": concert.headliner,
                            "actual": concert.headliner_normalized,
                            "expected": expected,
                        },
                    )
                )
        return issues

    @staticmethod
    def _check_concert_rows(concerts: Sequence[Concert]) -> list[ValidationIssue]:
        """Per-row sanity checks on the sheet export.

        Rows are numbered from 1 in ``details["row"]``.  Missing date or
        headliner, unparseable dates, repeated date+headliner pairs and
        orphaned openers are errors; the rest are warnings.
        """
        issues: list[ValidationIssue] = []
        first_seen: dict[tuple[str, str], int] = {}
        latest_year = datetime.now(timezone.utc).year + _FUTURE_YEARS

        def report(
            kind: IssueKind,
            row: int,
            concert: Concert,
            field: str,
            message: str,
            severity: Severity = Severity.ERROR,
            **details: Any,
        ) -> None:
            issues.append(
                ValidationIssue(
                    kind=kind,
                    severity=severity,
                    message=f"Row {row} [{field}]: {message}",
                    details={"row": row, "concert_id": concert.id, "field": field, **details},
                )
            )

        for row, concert in enumerate(concerts, start=1):
            headliner = concert.headliner.strip()

            if not concert.date:
                report(IssueKind.MISSING_FIELD, row, concert, "date", "Missing date")
            if not headliner:
                report(IssueKind.MISSING_FIELD, row, concert, "headliner", "Missing headliner")
            for field in ("venue", "city"):
                if not getattr(concert, field).strip():
                    report(
                        IssueKind.MISSING_FIELD, row, concert, field,
                        f"Missing {field} for \"{concert.headliner}\"",
                        severity=Severity.WARNING,
                    )

            if concert.date:
                year = _parse_year(concert.date)
                if year is None:
                    report(
                        IssueKind.INVALID_DATE, row, concert, "date",
                        f"Invalid date format: \"{concert.date}\"",
                    )
                elif not _EARLIEST_YEAR <= year <= latest_year:
                    report(
                        IssueKind.UNUSUAL_DATE, row, concert, "date",
                        f"Unusual date: {concert.date} (year {year}) - verify not a typo",
                        severity=Severity.WARNING, year=year,
                    )

            if concert.date and headliner:
                key = (concert.date, concert.headliner.lower())
                if key in first_seen:
                    report(
                        IssueKind.DUPLICATE_CONCERT, row, concert, "duplicate",
                        f"Duplicate concert: \"{concert.headliner}\" on {concert.date} "
                        f"(first seen at row {first_seen[key]})",
                        first_row=first_seen[key],
                    )
                else:
                    first_seen[key] = row

            location = concert.location or {}
            if location.get("lat") == 0 and location.get("lng") == 0:
                report(
                    IssueKind.DEFAULT_COORDINATES, row, concert, "location",
                    f"Default coordinates (0,0) for \"{concert.venue}\" in "
                    f"{concert.city}, {concert.state}",
                    severity=Severity.WARNING,
                )

            if len(concert.openers) > _MAX_OPENERS:
                report(
                    IssueKind.EXCESSIVE_OPENERS, row, concert, "openers",
                    f"{len(concert.openers)} openers for \"{concert.headliner}\" - "
                    "verify not a data entry error",
                    severity=Severity.WARNING, openers=len(concert.openers),
                )
            if concert.openers and not headliner:
                report(
                    IssueKind.ORPHANED_OPENERS, row, concert, "openers",
                    "Openers exist but no headliner specified",
                )
        return issues


def _parse_year(value: str) -> int | None:
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).year
    except ValueError:
        return None
