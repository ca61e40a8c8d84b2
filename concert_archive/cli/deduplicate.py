# =============================================================================
# concert_archive/cli/deduplicate.py: Metadata Deduplication CLI
# =============================================================================
#
# Rewrites artists-metadata.json (or venues-metadata.json) so every entity is
# filed under exactly one canonical key.  Records written under older key
# rules, or under differently punctuated names, are grouped and the best one
# of each group survives (source rank > artwork > most recently fetched).
#
# The existing file is backed up before it is overwritten.  Use --dry-run to
# see the duplicate groups without touching anything.
# =============================================================================

"""CLI for deduplicating artist or venue metadata.

Usage::

    # Deduplicate public/data/artists-metadata.json
    python -m concert_archive.cli.deduplicate

    # Preview only
    python -m concert_archive.cli.deduplicate --dry-run

    # Venues, explicit file
    python -m concert_archive.cli.deduplicate --entity venues --input path/to/venues.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from concert_archive.config.settings import Settings
from concert_archive.models.entities import EntityKind
from concert_archive.models.reconciliation import ReconciliationResult
from concert_archive.services.dataset_store import (
    detect_layout,
    load_metadata_map,
    save_metadata_map,
)
from concert_archive.services.reconciliation_service import ReconciliationService
from concert_archive.utils.errors import ConcertArchiveError
from concert_archive.utils.logging import bind_tool_context, configure_logging, get_logger

_RULE = "=" * 60


def _format_summary(result: ReconciliationResult, dry_run: bool) -> str:
    """Render the duplicate groups and totals as plain text."""
    lines: list[str] = []

    for report in result.duplicates:
        lines.append(
            f'Found {len(report.duplicate_keys)} entries for "{report.display_name}": '
            + ", ".join(f'"{key}"' for key in report.duplicate_keys)
        )
        lines.append(f'   Keeping: "{report.kept_key}" (from "{report.kept_literal_key}")')
        if report.discarded_keys:
            lines.append(f"   Removing: {', '.join(report.discarded_keys)}")

    for issue in result.issues:
        lines.append(f"[{issue.kind.value.upper()}] {issue.message}")

    lines.append(_RULE)
    lines.append("DEDUPLICATION SUMMARY" + (" (DRY RUN)" if dry_run else ""))
    lines.append(_RULE)
    lines.append(f"Total entries before: {result.total_before}")
    lines.append(f"Total entries after:  {result.total_after}")
    lines.append(f"Duplicate groups:     {len(result.duplicates)}")
    lines.append(f"Skipped (malformed):  {len(result.issues)}")
    if result.is_clean:
        lines.append("No duplicates found - data is clean!")
    return "\n".join(lines)


def _run(args: argparse.Namespace, settings: Settings) -> int:
    kind = EntityKind.ARTIST if args.entity == "artists" else EntityKind.VENUE
    if args.input:
        path = Path(args.input)
    elif kind == EntityKind.ARTIST:
        path = settings.artists_metadata_path
    else:
        path = settings.venues_metadata_path

    raw = load_metadata_map(path)
    layout = detect_layout(path)

    result = ReconciliationService(entity_kind=kind).reconcile(raw)
    print(_format_summary(result, args.dry_run))

    if args.dry_run:
        print(f"\nWould write {result.total_after} entries to: {path}")
        return 0

    save_metadata_map(path, result.canonical, max_backups=settings.max_backups, layout=layout)
    print(f"\nSaved deduplicated metadata to: {path}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m concert_archive.cli.deduplicate",
        description="Merge metadata entries that normalize to the same canonical key.",
    )
    parser.add_argument(
        "--entity",
        choices=["artists", "venues"],
        default="artists",
        help="Which metadata file to deduplicate (default: artists).",
    )
    parser.add_argument(
        "--input", "-i",
        type=str,
        default=None,
        help="Metadata file to process instead of the configured one.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report duplicates without modifying any file.",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit log lines as JSON.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point. Exits 0 on success, 1 if the file could not be processed."""
    args = _build_parser().parse_args(argv)
    settings = Settings()

    try:
        configure_logging(settings.log_level, json_output=args.json_logs)
        bind_tool_context("deduplicate", data_dir=str(settings.data_dir))
        exit_code = _run(args, settings)
    except ConcertArchiveError as exc:
        get_logger(__name__).error("deduplicate_failed", error=str(exc))
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
