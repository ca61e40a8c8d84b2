"""Configuration module: exports Settings, load_config, and the genre palette."""

from concert_archive.config.genre_colors import GENRE_COLORS
from concert_archive.config.loader import load_config
from concert_archive.config.settings import Settings

__all__ = ["GENRE_COLORS", "Settings", "load_config"]
