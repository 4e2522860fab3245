"""Core configuration settings for oxidoc.

Settings are loaded from environment variables with .env file support via
pydantic-settings.

Environment variables:
    OXIDOC_CACHE_ROOT: Directory holding the per-package documentation caches
                       (default: ~/.oxidoc)
    OXIDOC_CARGO_HOME: Cargo home whose registry sources feed ``generate all``
                       (default: $CARGO_HOME, then ~/.cargo)
    OXIDOC_MATCH_POLICY: Query tie-break policy: exact_then_substring (default),
                         exact, or substring

Example:
    >>> from oxidoc.settings import settings, resolve_cache_root
    >>> store_root = resolve_cache_root(settings)

Note:
    Settings are loaded once at module import and frozen. The CLI resolves
    paths from them at startup and injects the results into the store and
    generator; nothing below the CLI reads this module.
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from oxidoc.exceptions import HomeDirUnavailableError
from oxidoc.models import MatchPolicy

CACHE_DIR_NAME = ".oxidoc"


class Settings(BaseSettings):
    """Runtime configuration for oxidoc.

    Attributes:
        cache_root: Explicit cache root. None means ``~/.oxidoc``.
        cargo_home: Explicit Cargo home. None means ``$CARGO_HOME`` or ``~/.cargo``.
        match_policy: How query terms are matched against symbol paths.
    """

    model_config = SettingsConfigDict(
        env_prefix="OXIDOC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    cache_root: Path | None = None
    cargo_home: Path | None = None
    match_policy: MatchPolicy = MatchPolicy.EXACT_THEN_SUBSTRING


def _home_dir() -> Path:
    try:
        return Path.home()
    except (RuntimeError, KeyError) as e:
        raise HomeDirUnavailableError("Could not determine the home directory") from e


def resolve_cache_root(config: Settings) -> Path:
    """Return the configured cache root, defaulting to ``~/.oxidoc``."""
    if config.cache_root is not None:
        return config.cache_root.expanduser()
    return _home_dir() / CACHE_DIR_NAME


def resolve_cargo_home(config: Settings) -> Path:
    """Return the Cargo home used to discover registry packages."""
    if config.cargo_home is not None:
        return config.cargo_home.expanduser()
    if env_home := os.environ.get("CARGO_HOME"):
        return Path(env_home)
    return _home_dir() / ".cargo"


settings = Settings()
