"""Abstract base class for setlist search providers.

Defines the contract for searching an external setlist database for shows
by artist, city and year.  The pre-fetch job scores the returned candidates
itself (concert_archive/utils/similarity.py), so providers only translate
the service's response into SetlistCandidate objects.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from concert_archive.models.setlist import SetlistCandidate


class ISetlistProvider(ABC):
    """Contract for setlist search services."""

    @abstractmethod
    async def search_setlists(
        self, artist_name: str, city: str, year: str
    ) -> list[SetlistCandidate]:
        """Search for shows by *artist_name* in *city* during *year*.

        Parameters
        ----------
        artist_name:
            Artist name as written in the concert dataset.
        city:
            Official city name (after neighbourhood aliasing).
        year:
            Four-digit year of the concert.

        Returns
        -------
        list[SetlistCandidate]
            Zero or more candidate shows in the service's ranking order.

        Raises
        ------
        concert_archive.utils.errors.RateLimitError
            If the service rejected the request for exceeding its rate limit.
        concert_archive.utils.errors.SetlistLookupError
            If the request failed for any other reason.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
