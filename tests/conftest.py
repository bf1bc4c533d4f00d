"""
Shared pytest fixtures for config-aggregator tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import datetime as _datetime
import os as _os
import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import config_aggregator.cache as cache
import config_aggregator.constants as constants

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "CONFIG_AGGREGATOR_CACHE_FILE",
    "CONFIG_AGGREGATOR_CACHE_FILE_MODE",
    "CONFIG_AGGREGATOR_CACHE_ENABLED",
]

FIXED_TIME = _datetime.datetime(2026, 10, 17, 9, 30, 0, tzinfo=_datetime.timezone.utc)


@_pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: _pytest.MonkeyPatch) -> None:
    """Keep CONFIG_AGGREGATOR_* variables from the host out of tests."""
    for key in ENV_KEYS_TO_CLEAR:
        monkeypatch.delenv(key, raising=False)


@_pytest.fixture
def cache_file(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """Path for a cache file that does not exist yet."""
    return tmp_path / "config-cache.yaml"


@_pytest.fixture
def store() -> cache.CacheStore:
    """Cache store with a fixed clock."""
    return cache.CacheStore(clock=lambda: FIXED_TIME)


@_pytest.fixture
def cacheable_provider() -> object:
    """Provider returning a small tree with caching enabled."""

    def provider() -> dict[str, object]:
        return {"foo": "bar", constants.ENABLE_CACHE: True}

    return provider


@_pytest.fixture
def unwritable_dir(tmp_path: _pathlib.Path) -> _typing.Iterator[_pathlib.Path]:
    """A directory the current user cannot create files in."""
    if hasattr(_os, "geteuid") and _os.geteuid() == 0:
        _pytest.skip("root ignores directory permissions")
    directory = tmp_path / "readonly"
    directory.mkdir()
    directory.chmod(0o500)
    yield directory
    directory.chmod(0o700)
