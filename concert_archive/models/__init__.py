"""Pydantic data models for the concert archive tooling."""

from concert_archive.models.entities import Concert, EntityKind, MetadataRecord, MetadataSource
from concert_archive.models.reconciliation import (
    DuplicateReport,
    IssueKind,
    ReconciliationResult,
    Severity,
    ValidationIssue,
    ValidationReport,
)
from concert_archive.models.setlist import (
    MatchCandidate,
    SetlistCache,
    SetlistCacheEntry,
    SetlistCandidate,
    SetlistQuery,
)

__all__ = [
    "Concert",
    "DuplicateReport",
    "EntityKind",
    "IssueKind",
    "MatchCandidate",
    "MetadataRecord",
    "MetadataSource",
    "ReconciliationResult",
    "SetlistCache",
    "SetlistCacheEntry",
    "SetlistCandidate",
    "SetlistQuery",
    "Severity",
    "ValidationIssue",
    "ValidationReport",
]
