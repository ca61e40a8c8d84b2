# =============================================================================
# concert_archive/cli/__init__.py: CLI Module Overview
# =============================================================================
#
# Standalone command-line tools for maintaining the website's data files.
# Each submodule is self-contained and runnable via
# `python -m concert_archive.cli.<module>` (or the console scripts declared
# in pyproject.toml):
#
#   1. DEDUPLICATE (deduplicate.py)
#      Re-keys artists-metadata.json / venues-metadata.json by canonical key
#      and merges duplicate entries.
#
#   2. VALIDATE (validate.py)
#      Runs every consistency check and exits 1 on any issue (CI gate).
#
#   3. PREFETCH SETLISTS (prefetch_setlists.py)
#      Refreshes setlists-cache.json from setlist.fm.
#
# Architecture Notes:
#   - argparse only; each tool builds its own services from Settings.
#   - Infrastructure failures (ConcertArchiveError) are logged and turned
#     into exit code 1; data problems are printed as reports.
# =============================================================================

"""CLI tools for the concert archive data files."""
