"""Setlist search providers.

SetlistFmProvider queries the setlist.fm REST API (requires SETLISTFM_API_KEY).
"""

from concert_archive.providers.setlist.setlistfm_provider import SetlistFmProvider

__all__ = ["SetlistFmProvider"]
