"""Services for reconciling, validating, persisting and enriching the dataset.

- **record_merger** -- source-rank / artwork / recency precedence between
  two records describing the same entity.
- **reconciliation_service** -- groups a literal-keyed metadata map by
  canonical key and keeps one record per key.
- **validation_service** -- independent consistency checks over the
  persisted metadata and the concert list.
- **dataset_store** -- JSON load/save with rotating backups.
- **setlist_prefetch_service** -- refreshes the static setlist cache.
"""

from concert_archive.services.reconciliation_service import ReconciliationService
from concert_archive.services.record_merger import (
    DEFAULT_SOURCE_RANKS,
    RecordMerger,
    SourceRankTable,
)
from concert_archive.services.setlist_prefetch_service import PrefetchStats, SetlistPrefetchService
from concert_archive.services.validation_service import ValidationService

__all__ = [
    "DEFAULT_SOURCE_RANKS",
    "PrefetchStats",
    "ReconciliationService",
    "RecordMerger",
    "SetlistPrefetchService",
    "SourceRankTable",
    "ValidationService",
]
