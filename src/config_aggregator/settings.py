"""
Environment-driven defaults for building an aggregator.

Uses pydantic-settings so deployments can point the aggregator at a cache
file without code changes:

- CONFIG_AGGREGATOR_CACHE_FILE: cache file path (unset disables caching)
- CONFIG_AGGREGATOR_CACHE_FILE_MODE: permission mode, as octal ("0600")
- CONFIG_AGGREGATOR_CACHE_ENABLED: set to false to ignore the cache file

Values can also come from a `.env` file in the working directory.
"""

from __future__ import annotations

import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import config_aggregator.cache as cache
import config_aggregator.constants as constants


class AggregatorSettings(_pydantic_settings.BaseSettings):
    """
    Settings for ConfigAggregator.from_settings().

    Precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (CONFIG_AGGREGATOR_*)
    3. .env file
    4. Field defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=constants.ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cache_file: _pathlib.Path | None = None
    """Cache file to load from and write to."""

    cache_file_mode: int | None = _pydantic.Field(
        default=None, ge=0, le=constants.MAX_CACHE_FILEMODE
    )
    """Permission mode for the cache file, overriding the tree's own setting."""

    cache_enabled: bool = True
    """When false, the cache file is neither read nor written."""

    @_pydantic.field_validator("cache_file_mode", mode="before")
    @classmethod
    def _parse_octal_mode(cls, value: _typing.Any) -> _typing.Any:
        """Read string modes as octal, the way chmod does ("644", "0o600")."""
        if isinstance(value, str) and not value.strip():
            return None
        if isinstance(value, (str, int)):
            return cache.parse_file_mode(value)
        return value

    @property
    def effective_cache_file(self) -> _pathlib.Path | None:
        """The cache file to use, or None when caching is off."""
        if not self.cache_enabled:
            return None
        return self.cache_file

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> AggregatorSettings:
        """Create settings from environment variables only, ignoring any .env file."""
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]
