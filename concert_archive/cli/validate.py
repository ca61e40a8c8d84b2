# =============================================================================
# concert_archive/cli/validate.py: Dataset Validation CLI
# =============================================================================
#
# Runs every consistency check over the published data files and prints all
# problems found.  Intended for CI: the process exits 1 if ANY issue was
# found, 0 when the dataset is clean.
#
#   artists-metadata.json:  stale keys, duplicates, genres without colours
#   concerts.json:          headliners without metadata, genre drift,
#                           outdated headliner keys
#   venues-metadata.json:   stale keys and duplicates (skipped if absent)
# =============================================================================

"""CLI for validating dataset normalization and genre consistency.

Usage::

    python -m concert_archive.cli.validate
    python -m concert_archive.cli.validate --json > issues.json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from concert_archive.config.loader import load_config
from concert_archive.config.settings import Settings
from concert_archive.models.reconciliation import ValidationReport
from concert_archive.providers.genre_lookup.static_genre_lookup import StaticGenreLookupProvider
from concert_archive.services.dataset_store import load_concerts, load_metadata_map
from concert_archive.services.validation_service import ValidationService
from concert_archive.utils.errors import ConcertArchiveError
from concert_archive.utils.logging import bind_tool_context, configure_logging, get_logger

_RULE = "=" * 60

_SUGGESTED_FIXES = """\
For duplicate or stale artist keys:
  python -m concert_archive.cli.deduplicate
For duplicate or stale venue keys:
  python -m concert_archive.cli.deduplicate --entity venues
For genres without colours:
  add them to concert_archive/config/genre_colors.py (and the website palette)
  or to genre_colors in config/config.yaml
For missing entries, genre drift and headliner key mismatches:
  re-run the sheet export and metadata enrichment
For concert-row problems (missing fields, dates, repeated rows, openers):
  fix the row in the source sheet, then re-run the sheet export"""


def _format_text_output(report: ValidationReport) -> str:
    if report.passed:
        return "\n".join([_RULE, "ALL VALIDATION CHECKS PASSED", _RULE])

    lines = [_RULE, "VALIDATION ISSUES FOUND", _RULE]
    for title, issues in (("Errors", report.errors), ("Warnings", report.warnings)):
        if not issues:
            continue
        lines.append(f"\n{title} ({len(issues)}):")
        for idx, issue in enumerate(issues, start=1):
            lines.append(f"{idx}. [{issue.kind.value.upper()}] {issue.message}")
            if issue.details:
                lines.append(f"   Details: {json.dumps(issue.details, ensure_ascii=False)}")

    lines.append("")
    lines.append(
        "Summary: " + ", ".join(f"{kind}={count}" for kind, count in report.count_by_kind().items())
    )
    lines.extend(["", _RULE, "SUGGESTED FIXES", _RULE, _SUGGESTED_FIXES])
    return "\n".join(lines)


def _format_json_output(report: ValidationReport) -> str:
    payload = {
        "passed": report.passed,
        "counts": report.count_by_kind(),
        "issues": [issue.model_dump(mode="json") for issue in report.issues],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _run(args: argparse.Namespace, settings: Settings) -> int:
    config = load_config(args.config, settings=settings)

    metadata_path = Path(args.metadata) if args.metadata else settings.artists_metadata_path
    concerts_path = Path(args.concerts) if args.concerts else settings.concerts_path
    venues_path = Path(args.venues) if args.venues else settings.venues_metadata_path

    artists = load_metadata_map(metadata_path)
    concerts = load_concerts(concerts_path)
    venues = load_metadata_map(venues_path, required=False) or None

    service = ValidationService(StaticGenreLookupProvider(overrides=config["genre_colors"]))
    report = service.validate(artists, concerts, venues=venues)

    print(_format_json_output(report) if args.json_output else _format_text_output(report))
    return 0 if report.passed else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m concert_archive.cli.validate",
        description="Check that all data files use consistent normalization and genres.",
    )
    parser.add_argument("--metadata", type=str, default=None, help="Artist metadata file.")
    parser.add_argument("--concerts", type=str, default=None, help="Concerts file.")
    parser.add_argument("--venues", type=str, default=None, help="Venue metadata file (optional).")
    parser.add_argument(
        "--config",
        type=str,
        default="config/config.yaml",
        help="YAML config with genre colour overrides.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print the issue list as JSON instead of formatted text.",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit log lines as JSON.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point. Exits 0 when the dataset is clean, 1 otherwise."""
    args = _build_parser().parse_args(argv)
    settings = Settings()

    try:
        configure_logging(settings.log_level, json_output=args.json_logs)
        bind_tool_context("validate", data_dir=str(settings.data_dir))
        exit_code = _run(args, settings)
    except ConcertArchiveError as exc:
        get_logger(__name__).error("validation_aborted", error=str(exc))
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
