"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ─────────────────────────────────────────────────
#
# Settings are read from TWO sources (in priority order):
#
#   1. **Environment variables**, e.g., SETLISTFM_API_KEY=abc123
#      (highest priority, always wins)
#   2. **.env file**: key=value lines in the project root .env file
#      (lower priority, used for local development)
#
# Field `setlistfm_api_key` maps to env var `SETLISTFM_API_KEY`.
# Defaults below apply when neither source sets a value.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Concert archive tooling settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Data files ===
    data_dir: str = "public/data"
    artists_metadata_file: str = "artists-metadata.json"
    venues_metadata_file: str = "venues-metadata.json"
    concerts_file: str = "concerts.json"
    setlists_cache_file: str = "setlists-cache.json"
    max_backups: int = 10

    # === setlist.fm ===
    # Empty string = "not configured"; the prefetch CLI refuses to run.
    setlistfm_api_key: str = ""
    setlistfm_base_url: str = "https://api.setlist.fm/rest/1.0"
    setlistfm_request_interval: float = 1.5  # seconds between requests (free tier ~1 req/s)
    setlistfm_timeout: float = 30.0
    rate_limit_backoff_seconds: float = 60.0

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def data_path(self, filename: str) -> Path:
        """Resolve *filename* inside the configured data directory."""
        return Path(self.data_dir) / filename

    @property
    def artists_metadata_path(self) -> Path:
        return self.data_path(self.artists_metadata_file)

    @property
    def venues_metadata_path(self) -> Path:
        return self.data_path(self.venues_metadata_file)

    @property
    def concerts_path(self) -> Path:
        return self.data_path(self.concerts_file)

    @property
    def setlists_cache_path(self) -> Path:
        return self.data_path(self.setlists_cache_file)
