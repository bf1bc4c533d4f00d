"""
Built-in configuration providers.

- ArrayProvider: serves a fixed tree
- YamlFileProvider: yields one tree per YAML file matching a glob pattern

Both are zero-argument callables and can be passed to ConfigAggregator
alongside plain functions.
"""

from __future__ import annotations

import collections.abc as _abc
import glob as _glob
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import yaml as _yaml

import config_aggregator.errors as errors
import config_aggregator.merge as merge

_logger = _logging.getLogger(__name__)


class ArrayProvider:
    """Provider returning a copy of a fixed configuration tree."""

    def __init__(self, config: _abc.Mapping[_typing.Any, _typing.Any]) -> None:
        self._config = config

    def __call__(self) -> merge.Tree:
        # Directives are kept so this provider can still remove/replace keys
        return dict(self._config)

    def __repr__(self) -> str:
        return f"ArrayProvider({self._config!r})"


class YamlFileProvider:
    """
    Provider yielding the contents of YAML files matched by a glob pattern.

    Files are read in sorted path order, one tree per file, so later files
    override earlier ones. Files may use the `!remove` and `!replace` tags
    to drop or replace entries contributed by earlier files or providers.
    An empty file yields an empty tree.

    Example:
        >>> provider = YamlFileProvider("config/autoload/*.yaml")
        >>> aggregator = ConfigAggregator([provider])

    Args:
        pattern: Glob pattern (`**` is recursive).
    """

    def __init__(self, pattern: str | _pathlib.Path) -> None:
        self._pattern = str(pattern)

    @property
    def pattern(self) -> str:
        return self._pattern

    def paths(self) -> list[_pathlib.Path]:
        """Files matched by the pattern, in load order."""
        return [
            _pathlib.Path(name)
            for name in sorted(_glob.glob(self._pattern, recursive=True))
            if _pathlib.Path(name).is_file()
        ]

    def __call__(self) -> _abc.Iterator[_typing.Any]:
        for path in self.paths():
            _logger.debug("Reading config file %s", path)
            try:
                with path.open("r", encoding="utf-8") as handle:
                    data = merge.load_yaml(handle)
            except _yaml.YAMLError as e:
                raise errors.ConfigFileError(path, str(e)) from e

            yield {} if data is None else data

    def __repr__(self) -> str:
        return f"YamlFileProvider({self._pattern!r})"
