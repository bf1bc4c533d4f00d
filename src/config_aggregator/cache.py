"""
On-disk cache for merged configuration trees.

The cache file is a YAML document preceded by a comment header naming the
generator and the generation time:

    # This configuration cache file was generated by config_aggregator.ConfigAggregator
    # at 2026-10-17T09:30:00+00:00
    foo: bar
    config_cache_enabled: true

Loading is strict: a cache file that exists but cannot be parsed is an
environment problem and is reported as CacheLoadError. Saving is best
effort: any failure is logged and the aggregation carries on without a
cache.

Writes never leave a partial file behind. The record is written to a
temporary file in the target directory, synced, given its permission mode
and then renamed over the target, so readers see either the previous file
or the new one. An advisory lock on `<cache file>.lock` keeps two writers
from racing on the same target; if the lock is held elsewhere the write is
skipped.
"""

from __future__ import annotations

import collections.abc as _abc
import contextlib as _contextlib
import datetime as _datetime
import logging as _logging
import os as _os
import pathlib as _pathlib
import tempfile as _tempfile
import typing as _typing

import yaml as _yaml

import config_aggregator.constants as constants
import config_aggregator.errors as errors
import config_aggregator.merge as merge

try:
    import fcntl as _fcntl
except ImportError:  # pragma: no cover - platforms without flock
    _fcntl = None  # type: ignore[assignment]

_logger = _logging.getLogger(__name__)

CACHE_TEMPLATE = """\
# This configuration cache file was generated by {generator}
# at {timestamp}
{document}"""

PathLike: _typing.TypeAlias = str | _os.PathLike[str]


class CacheLockedError(OSError):
    """Another writer holds the cache lock."""

    pass


def parse_file_mode(value: _typing.Any) -> int:
    """
    Read a permission mode from config or environment values.

    Integers are taken as-is. Strings are read as octal, the way chmod reads
    them, so "644", "0644" and "0o644" all mean 0o644.

    Raises:
        ValueError: If the value is not an integer or an octal string, or
            is outside 0..0o7777.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid file mode: {value!r}")
    if isinstance(value, str):
        try:
            mode = int(value.strip(), 8)
        except ValueError as e:
            raise ValueError(f"Invalid file mode: {value!r} is not an octal number") from e
    elif isinstance(value, int):
        mode = value
    else:
        raise ValueError(f"Invalid file mode: {value!r}")

    if not 0 <= mode <= constants.MAX_CACHE_FILEMODE:
        raise ValueError(f"Invalid file mode: {oct(mode)} is out of range")
    return mode


class _CacheDumper(_yaml.SafeDumper):
    """SafeDumper that writes tuples as plain YAML sequences."""


_CacheDumper.add_representer(tuple, _yaml.SafeDumper.represent_list)


@_contextlib.contextmanager
def _exclusive_lock(path: _pathlib.Path) -> _abc.Iterator[None]:
    """
    Hold a non-blocking exclusive lock on `<path>.lock` for the block.

    The lock is released on every exit path. The lock file itself is left
    in place; removing it would let a waiting writer lock a stale inode.

    Raises:
        CacheLockedError: If another process (or file description) holds it.
        OSError: If the lock file cannot be created.
    """
    if _fcntl is None:
        yield
        return

    lock_path = path.with_name(path.name + ".lock")
    fd = _os.open(lock_path, _os.O_CREAT | _os.O_RDWR, 0o600)
    try:
        try:
            _fcntl.flock(fd, _fcntl.LOCK_EX | _fcntl.LOCK_NB)
        except BlockingIOError as e:
            raise CacheLockedError(f"Cache file is locked: {lock_path}") from e
        try:
            yield
        finally:
            _fcntl.flock(fd, _fcntl.LOCK_UN)
    finally:
        _os.close(fd)


def _write_atomic(path: _pathlib.Path, contents: str, mode: int) -> None:
    """Write `contents` to a temp file beside `path`, then rename it into place."""
    fd, tmp_name = _tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    tmp_path = _pathlib.Path(tmp_name)
    try:
        with _os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(contents)
            handle.flush()
            _os.fsync(handle.fileno())
        _os.chmod(tmp_path, mode)
        _os.replace(tmp_path, path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


class CacheStore:
    """
    Loads and saves merged configuration trees.

    Args:
        generator: Name recorded in the cache file header.
        default_mode: Permission mode used when no other mode applies.
        clock: Returns the generation time for the header (for testing).
    """

    def __init__(
        self,
        *,
        generator: str = constants.CACHE_GENERATOR,
        default_mode: int = constants.DEFAULT_CACHE_FILEMODE,
        clock: _typing.Callable[[], _datetime.datetime] | None = None,
    ) -> None:
        self._generator = generator
        self._default_mode = default_mode
        self._clock = clock or (lambda: _datetime.datetime.now().astimezone())

    def try_load(self, path: PathLike | None) -> merge.Tree | None:
        """
        Load a cached tree, if there is one.

        Args:
            path: Cache file path, or None when caching is disabled.

        Returns:
            The stored tree, or None if `path` is None or does not exist.

        Raises:
            CacheLoadError: If the file exists but is not a readable tree.
        """
        if path is None:
            return None

        cache_path = _pathlib.Path(path)
        if not cache_path.exists():
            return None

        try:
            data = _yaml.safe_load(cache_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, _yaml.YAMLError) as e:
            raise errors.CacheLoadError(cache_path, str(e)) from e

        if not isinstance(data, dict):
            raise errors.CacheLoadError(
                cache_path,
                f"expected a mapping, got {type(data).__name__}",
            )

        _logger.debug("Loaded config from cache %s", cache_path)
        return data

    def render(self, tree: _abc.Mapping[_typing.Any, _typing.Any]) -> str:
        """
        Render the cache record for a tree.

        Tuples are written as lists, so they load back as lists.

        Raises:
            yaml.YAMLError: If the tree holds values YAML cannot represent.
        """
        document = _yaml.dump(
            merge.resolve(tree),
            Dumper=_CacheDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        return CACHE_TEMPLATE.format(
            generator=self._generator,
            timestamp=self._clock().isoformat(timespec="seconds"),
            document=document,
        )

    def file_mode_for(
        self,
        tree: _abc.Mapping[_typing.Any, _typing.Any],
        file_mode: int | None = None,
    ) -> int:
        """
        Pick the mode: explicit argument, then the tree's reserved key, then the default.

        An unusable mode in the tree is logged and the default is used instead.
        """
        if file_mode is not None:
            return file_mode
        tree_mode = tree.get(constants.CACHE_FILEMODE)
        if tree_mode is None:
            return self._default_mode
        try:
            return parse_file_mode(tree_mode)
        except ValueError as e:
            _logger.warning(
                "Ignoring %s in config: %s; using mode %o",
                constants.CACHE_FILEMODE,
                e,
                self._default_mode,
            )
            return self._default_mode

    def try_save(
        self,
        path: PathLike | None,
        tree: _abc.Mapping[_typing.Any, _typing.Any],
        file_mode: int | None = None,
    ) -> bool:
        """
        Write a tree to the cache file if caching is enabled for it.

        Nothing is written when `path` is None or the tree's
        `config_cache_enabled` entry is falsy. Write failures are logged
        and suppressed.

        Args:
            path: Cache file path, or None when caching is disabled.
            tree: The merged (and post-processed) tree.
            file_mode: Permission mode overriding the tree's
                `config_cache_filemode` entry.

        Returns:
            True if the cache file was written.
        """
        if path is None:
            return False

        if not isinstance(tree, _abc.Mapping) or not tree.get(constants.ENABLE_CACHE):
            return False

        cache_path = _pathlib.Path(path)
        try:
            contents = self.render(tree)
            mode = self.file_mode_for(tree, file_mode)
            with _exclusive_lock(cache_path):
                _write_atomic(cache_path, contents, mode)
        except (OSError, ValueError, _yaml.YAMLError) as e:
            _logger.warning("Could not write config cache %s: %s", cache_path, e)
            return False

        _logger.debug("Wrote config cache %s (mode %o)", cache_path, mode)
        return True
