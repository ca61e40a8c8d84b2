"""Static genre colour lookup backed by an in-memory palette.

Labels are matched by their normalized genre key, so "R&B/Soul",
"r&b/soul" and "RB/SOUL!" all resolve to the same palette entry.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from concert_archive.config.genre_colors import GENRE_COLORS
from concert_archive.interfaces.genre_lookup_provider import IGenreLookupProvider
from concert_archive.utils.text_normalizer import normalize_genre_name

logger = structlog.get_logger(logger_name=__name__)


class StaticGenreLookupProvider(IGenreLookupProvider):
    """Genre lookup over a fixed palette.

    Parameters
    ----------
    colors:
        Genre label -> colour.  Defaults to the bundled ``GENRE_COLORS``.
    overrides:
        Extra or replacement entries, typically the ``genre_colors``
        section of config/config.yaml.
    """

    def __init__(
        self,
        colors: Mapping[str, str] | None = None,
        overrides: Mapping[str, str] | None = None,
    ) -> None:
        palette = dict(GENRE_COLORS if colors is None else colors)
        palette.update(overrides or {})
        self._colors: dict[str, str] = {
            normalize_genre_name(label): color for label, color in palette.items()
        }
        logger.debug("genre_lookup_initialized", genres=len(self._colors))

    def has_color(self, genre: str) -> bool:
        return normalize_genre_name(genre) in self._colors

    def get_color(self, genre: str) -> str | None:
        return self._colors.get(normalize_genre_name(genre))

    def get_provider_name(self) -> str:
        return "static"
