"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ───────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml : static defaults checked into the repo
#                            (genre colour overrides, match threshold)
#   2. .env file          : local developer overrides (not committed)
#   3. Environment vars   : set in CI at run time
#
# The _deep_merge helper does recursive dict merging:
#   base = {"setlistfm": {"match_threshold": 0.5}}
#   overrides = {"setlistfm": {"api_key": "..."}}
#   result = {"setlistfm": {"match_threshold": 0.5, "api_key": "..."}}
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml

from concert_archive.config.settings import Settings
from concert_archive.utils.errors import ConfigurationError


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.  A missing file is not an
            error; the bundled defaults apply.
        settings: Settings instance to merge.  Defaults to a fresh ``Settings()``.

    Returns:
        Fully resolved configuration dictionary.

    Raises:
        ConfigurationError: If the YAML file is unparseable or its
            ``genre_colors`` section is not a mapping.
    """
    config_path = Path(path)
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                message=f"Could not parse {config_path}: {exc}",
                provider_name="config",
            ) from exc
    else:
        yaml_config = {}

    if not isinstance(yaml_config, dict):
        raise ConfigurationError(
            message=f"{config_path} must contain a mapping at the top level",
            provider_name="config",
        )

    genre_colors = yaml_config.get("genre_colors") or {}
    if not isinstance(genre_colors, dict):
        raise ConfigurationError(
            message="genre_colors must map genre labels to colours",
            provider_name="config",
        )
    yaml_config["genre_colors"] = {str(k): str(v) for k, v in genre_colors.items()}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "env": settings.app_env,
        },
        "data": {
            "dir": settings.data_dir,
            "artists_metadata": str(settings.artists_metadata_path),
            "venues_metadata": str(settings.venues_metadata_path),
            "concerts": str(settings.concerts_path),
            "setlists_cache": str(settings.setlists_cache_path),
            "max_backups": settings.max_backups,
        },
        "setlistfm": {
            "api_key": settings.setlistfm_api_key,
            "base_url": settings.setlistfm_base_url,
            "request_interval": settings.setlistfm_request_interval,
            "timeout": settings.setlistfm_timeout,
            "rate_limit_backoff_seconds": settings.rate_limit_backoff_seconds,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
