"""Data tooling for the concert archive website.

Keeps artist and venue identities consistent across the concert spreadsheet
export and the metadata fetched from TheAudioDB, Spotify, Last.fm and
setlist.fm.
"""

__version__ = "0.1.0"
