# =============================================================================
# concert_archive/cli/__main__.py: Package Entry Point
# =============================================================================
#
#     python -m concert_archive.cli
#
# Runs the validation CLI, the check most often run by hand and in CI.
# Other tools are run directly:
#     python -m concert_archive.cli.deduplicate --dry-run
#     python -m concert_archive.cli.prefetch_setlists
# =============================================================================

"""Allow ``python -m concert_archive.cli`` execution."""

from concert_archive.cli.validate import main

main()
