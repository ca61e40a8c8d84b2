"""Result models for reconciliation and validation runs.

Reconciliation and validation never raise on bad data.  Everything they find
is returned as flat, serializable records so the CLI (or CI) can print,
log, or dump them in whatever format it likes.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from concert_archive.models.entities import MetadataRecord


class IssueKind(str, Enum):  # noqa: UP042, StrEnum requires Python 3.11+
    """Categories of problems the validation pass reports."""

    MISSING_ENTRY = "missing_entry"   # Headliner with no metadata record
    STALE_KEY = "stale_key"           # Literal key != re-derived canonical key
    DUPLICATE = "duplicate"           # Canonical key reached from >1 literal key
    MISSING_COLOR = "missing_color"   # Genre label with no colour mapping
    GENRE_DRIFT = "genre_drift"       # Concert genre != headliner metadata genre
    MALFORMED = "malformed"           # Record missing its name (or unparseable)
    MISMATCH = "mismatch"             # Concert's stored headliner key is out of date
    MISSING_FIELD = "missing_field"   # Concert row without date, headliner, venue or city
    INVALID_DATE = "invalid_date"     # Concert date that does not parse
    UNUSUAL_DATE = "unusual_date"     # Concert year outside the plausible range
    DUPLICATE_CONCERT = "duplicate_concert"      # Same date and headliner listed twice
    DEFAULT_COORDINATES = "default_coordinates"  # Venue geocoded to (0, 0)
    EXCESSIVE_OPENERS = "excessive_openers"      # More openers than a real bill has
    ORPHANED_OPENERS = "orphaned_openers"        # Openers on a row with no headliner


class Severity(str, Enum):  # noqa: UP042, StrEnum requires Python 3.11+
    ERROR = "error"
    WARNING = "warning"


class ValidationIssue(BaseModel):
    """One problem found in the dataset."""

    model_config = ConfigDict(frozen=True)

    kind: IssueKind
    severity: Severity = Severity.ERROR
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class DuplicateReport(BaseModel):
    """Record of one duplicate group resolved during reconciliation.

    ``kept_key`` is the canonical key the survivor is now filed under;
    ``kept_literal_key`` is the key the winning record arrived under (it may
    differ when the best data sat under an outdated key).
    """

    model_config = ConfigDict(frozen=True)

    display_name: str
    canonical_key: str
    duplicate_keys: list[str]
    kept_key: str
    kept_literal_key: str
    discarded_keys: list[str]


class ReconciliationResult(BaseModel):
    """Output of one reconciliation run."""

    model_config = ConfigDict(frozen=True)

    canonical: dict[str, MetadataRecord]
    duplicates: list[DuplicateReport] = Field(default_factory=list)
    issues: list[ValidationIssue] = Field(default_factory=list)
    total_before: int = 0

    @property
    def total_after(self) -> int:
        return len(self.canonical)

    @property
    def is_clean(self) -> bool:
        """True when the input was already deduplicated and well-formed."""
        return not self.duplicates and not self.issues


class ValidationReport(BaseModel):
    """Every issue found by one validation pass.

    ``passed`` is the only overall status: the run fails iff any issue was
    collected, whatever its severity.
    """

    model_config = ConfigDict(frozen=True)

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.issues

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == Severity.WARNING]

    def count_by_kind(self) -> dict[str, int]:
        return dict(Counter(issue.kind.value for issue in self.issues))
