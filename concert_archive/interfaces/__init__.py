"""Public interface definitions for external collaborators.

Business logic only talks to the outside world through the abstract base
classes in this package.  Concrete adapters live in
``concert_archive/providers/`` and are passed into services by the CLI
tools, so tests can inject fakes without network access.

CONCRETE PROVIDER MAP:
    Interface                  ->  Concrete implementations
    ---------------------------------------------------------------
    IGenreLookupProvider       ->  StaticGenreLookupProvider
    ISetlistProvider           ->  SetlistFmProvider
"""

from concert_archive.interfaces.genre_lookup_provider import IGenreLookupProvider
from concert_archive.interfaces.setlist_provider import ISetlistProvider

__all__ = [
    "IGenreLookupProvider",
    "ISetlistProvider",
]
