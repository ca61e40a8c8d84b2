"""Abstract base class for genre colour lookup providers.

The website colours every genre from a fixed palette.  A genre label that
reaches the dataset without a palette entry renders in the fallback grey,
so the validation pass checks every metadata genre against this lookup.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IGenreLookupProvider(ABC):
    """Contract for genre -> colour lookups.

    Implementations decide how labels are matched (exact, normalized, ...);
    callers only ask whether a mapping exists and what it is.
    """

    @abstractmethod
    def has_color(self, genre: str) -> bool:
        """Return ``True`` if *genre* has a colour mapping."""

    @abstractmethod
    def get_color(self, genre: str) -> str | None:
        """Return the colour for *genre*, or ``None`` when unmapped.

        Parameters
        ----------
        genre:
            Genre label as stored on a metadata record or concert.

        Returns
        -------
        str or None
            A CSS colour string such as ``"#1e3a8a"``.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this lookup."""
