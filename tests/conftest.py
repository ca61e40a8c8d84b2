"""Shared pytest fixtures for the concert archive test suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from concert_archive.config.settings import Settings
from concert_archive.interfaces.setlist_provider import ISetlistProvider
from concert_archive.models.entities import Concert
from concert_archive.models.setlist import SetlistCandidate
from concert_archive.utils.errors import ConcertArchiveError
from concert_archive.utils.logging import configure_logging

# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_concert(
    concert_id: str = "1",
    headliner: str = "Violent Femmes",
    **fields: Any,
) -> Concert:
    defaults: dict[str, Any] = {
        "date": "1986-07-12",
        "venue": "The Warfield",
        "city": "San Francisco",
        "state": "CA",
    }
    defaults.update(fields)
    return Concert(id=concert_id, headliner=headliner, **defaults)


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


class FakeSetlistProvider(ISetlistProvider):
    """In-memory setlist provider.

    ``responses`` maps an artist name to either a list of candidates or an
    exception instance to raise.  Every call is recorded in ``calls``.
    """

    def __init__(self, responses: dict[str, list[SetlistCandidate] | Exception] | None = None):
        self.responses = responses or {}
        self.calls: list[tuple[str, str, str]] = []

    async def search_setlists(
        self, artist_name: str, city: str, year: str
    ) -> list[SetlistCandidate]:
        self.calls.append((artist_name, city, year))
        response = self.responses.get(artist_name, [])
        if isinstance(response, ConcertArchiveError):
            raise response
        return list(response)

    def get_provider_name(self) -> str:
        return "fake"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True, scope="session")
def _quiet_logging() -> None:
    """Route log lines to stderr at WARNING so CLI stdout stays parseable."""
    configure_logging("WARNING")


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Return an empty data directory inside tmp_path."""
    directory = tmp_path / "data"
    directory.mkdir()
    return directory


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    """Settings pointing at the temporary data directory, no .env involved."""
    return Settings(
        _env_file=None,
        data_dir=str(data_dir),
        setlistfm_api_key="test-key",
        setlistfm_request_interval=0.0,
        max_backups=3,
    )


@pytest.fixture
def artists_payload() -> dict[str, Any]:
    """Artist metadata with one duplicate group and one clean entry."""
    return {
        "artists": {
            "violentfemmes": {
                "name": "Violent Femmes",
                "source": "mock",
                "normalizedName": "violentfemmes",
            },
            "violent-femmes": {
                "name": "Violent Femmes",
                "source": "theaudiodb",
                "image": "https://img.example/vf.jpg",
                "genre": "Punk",
                "normalizedName": "violent-femmes",
            },
            "therepl": {
                "name": "The Replacements",
                "source": "spotify",
                "genre": "Alternative",
                "normalizedName": "thereplacements",
            },
        }
    }


@pytest.fixture
def concerts_payload() -> dict[str, Any]:
    return {
        "concerts": [
            {
                "id": "1",
                "date": "1986-07-12",
                "headliner": "Violent Femmes",
                "headlinerNormalized": "violentfemmes",
                "openers": ["The Replacements"],
                "venue": "The Warfield",
                "city": "San Francisco",
                "state": "CA",
                "genre": "Punk",
            },
            {
                "id": "2",
                "date": "1987-03-01",
                "headliner": "The Replacements",
                "venue": "Hollywood Palladium",
                "city": "Hollywood",
                "state": "CA",
                "genre": "Alternative",
            },
        ]
    }
