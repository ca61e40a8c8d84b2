# =============================================================================
# concert_archive/cli/prefetch_setlists.py: Setlist Cache Builder CLI
# =============================================================================
#
# Fetches setlists for every headliner and opener in concerts.json from
# setlist.fm and writes public/data/setlists-cache.json.  Entries that
# already hold a setlist are reused unless --force-refresh is given, so a
# re-run only spends API quota on new or previously failed lookups.
#
# Requires SETLISTFM_API_KEY (environment or .env).
# =============================================================================

"""CLI for pre-fetching setlists into the static cache.

Usage::

    python -m concert_archive.cli.prefetch_setlists
    python -m concert_archive.cli.prefetch_setlists --force-refresh
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import httpx

from concert_archive.config.loader import load_config
from concert_archive.config.settings import Settings
from concert_archive.providers.setlist.setlistfm_provider import SetlistFmProvider
from concert_archive.services.dataset_store import (
    load_concerts,
    load_setlist_cache,
    save_setlist_cache,
)
from concert_archive.services.setlist_prefetch_service import PrefetchStats, SetlistPrefetchService
from concert_archive.utils.errors import ConcertArchiveError, ConfigurationError
from concert_archive.utils.logging import bind_tool_context, configure_logging, get_logger

_RULE = "=" * 60


def _format_stats(stats: PrefetchStats, concerts: int, cache_path: str) -> str:
    return "\n".join(
        [
            _RULE,
            "Pre-fetch complete!",
            _RULE,
            f"Total concerts:  {concerts}",
            f"Total lookups:   {stats.total}",
            f"Used cached:     {stats.cached}",
            f"Fetched new:     {stats.fetched}",
            f"Not found:       {stats.not_found}",
            f"Errors:          {stats.errors}",
            f"Cache saved to:  {cache_path}",
        ]
    )


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    if not settings.setlistfm_api_key:
        raise ConfigurationError(
            message="SETLISTFM_API_KEY is not set (environment or .env)",
            provider_name="setlistfm",
        )
    config = load_config(args.config, settings=settings)
    threshold = float(config.get("setlistfm", {}).get("match_threshold", 0.5))

    concerts = load_concerts(settings.concerts_path)
    cache_path = settings.setlists_cache_path
    existing = load_setlist_cache(cache_path)

    async with httpx.AsyncClient() as client:
        service = SetlistPrefetchService(
            SetlistFmProvider(client, settings),
            backoff_seconds=settings.rate_limit_backoff_seconds,
            match_threshold=threshold,
        )
        cache, stats = await service.prefetch(
            concerts, existing=existing, force_refresh=args.force_refresh
        )

    save_setlist_cache(cache_path, cache, max_backups=settings.max_backups)
    print(_format_stats(stats, len(concerts), str(cache_path)))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m concert_archive.cli.prefetch_setlists",
        description="Fetch setlists for all concerts into the static setlist cache.",
    )
    parser.add_argument(
        "--force-refresh",
        action="store_true",
        help="Ignore cached setlists and fetch everything again.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/config.yaml",
        help="YAML config file.",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit log lines as JSON.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point. Exits 0 on success, 1 on configuration or data errors."""
    args = _build_parser().parse_args(argv)
    settings = Settings()

    try:
        configure_logging(settings.log_level, json_output=args.json_logs)
        bind_tool_context("prefetch_setlists", data_dir=str(settings.data_dir))
        exit_code = asyncio.run(_run(args, settings))
    except ConcertArchiveError as exc:
        get_logger(__name__).error("prefetch_failed", error=str(exc))
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
