"""Concrete adapters implementing the interfaces in ``concert_archive.interfaces``."""
