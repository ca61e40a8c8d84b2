"""Genre colour lookup providers.

StaticGenreLookupProvider reads the bundled palette (plus config overrides)
and is the only implementation; the validation pass depends on the
IGenreLookupProvider interface so tests can pass any fake.
"""

from concert_archive.providers.genre_lookup.static_genre_lookup import StaticGenreLookupProvider

__all__ = ["StaticGenreLookupProvider"]
