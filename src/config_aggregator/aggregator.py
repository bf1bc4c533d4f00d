"""
ConfigAggregator: merge configuration from providers, with an optional cache.

Construction runs one of two paths:

    cache file set and present -> load it -> done
    otherwise -> run providers -> run post-processors -> maybe write cache -> done

The result is fixed once construction returns.

Example:
    >>> aggregator = ConfigAggregator([
    ...     lambda: {"foo": "bar"},
    ...     lambda: {"bar": "bat"},
    ... ])
    >>> aggregator.merged_config
    FrozenMapping({'foo': 'bar', 'bar': 'bat'})
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import typing as _typing

import config_aggregator.cache as cache
import config_aggregator.constants as constants
import config_aggregator.errors as errors
import config_aggregator.merge as merge
import config_aggregator.pipeline as pipeline
import config_aggregator.resolution as resolution
import config_aggregator.settings as settings_module

_logger = _logging.getLogger(__name__)


class ConfigAggregator:
    """
    Aggregate configuration generated by configuration providers.

    Args:
        providers: Provider descriptors, in merge order. Each is a callable,
            a class instantiable without arguments, or a dotted name of one.
        cached_config_file: Cache file path. Config is loaded from this file
            if present and written to it (when the merged config enables
            caching) if not. None disables caching.
        post_processors: Processor descriptors, applied in order to the
            merged config. Same forms as providers.
        cache_file_mode: Permission mode for the cache file. Overrides the
            `config_cache_filemode` entry of the merged config.
        cache_store: Store used to load and save the cache file.

    Raises:
        InvalidProviderError: A provider cannot be resolved.
        ProviderReturnedInvalidConfigError: A provider produced a non-mapping.
        InvalidProcessorError: A processor cannot be resolved.
        ProcessorReturnedInvalidConfigError: Post-processing returned a non-mapping.
        CacheLoadError: The cache file exists but cannot be read.
    """

    ENABLE_CACHE = constants.ENABLE_CACHE

    CACHE_FILEMODE = constants.CACHE_FILEMODE

    def __init__(
        self,
        providers: _abc.Iterable[resolution.Descriptor] = (),
        cached_config_file: cache.PathLike | None = None,
        post_processors: _abc.Iterable[resolution.Descriptor] = (),
        cache_file_mode: int | None = None,
        *,
        cache_store: cache.CacheStore | None = None,
    ) -> None:
        store = cache_store or cache.CacheStore()

        cached = store.try_load(cached_config_file)
        if cached is not None:
            _logger.debug("Using cached config from %s", cached_config_file)
            self._config: merge.Tree = cached
            self._loaded_from_cache = True
            return

        config = pipeline.load_from_providers(providers)
        config = pipeline.post_process(post_processors, config)
        if not isinstance(config, _abc.Mapping):
            raise errors.ProcessorReturnedInvalidConfigError(type(config).__name__)
        _logger.debug("Aggregated config from providers")
        store.try_save(cached_config_file, config, cache_file_mode)

        self._config = config
        self._loaded_from_cache = False

    @classmethod
    def from_settings(
        cls,
        providers: _abc.Iterable[resolution.Descriptor] = (),
        post_processors: _abc.Iterable[resolution.Descriptor] = (),
        settings: settings_module.AggregatorSettings | None = None,
    ) -> ConfigAggregator:
        """
        Build an aggregator whose cache file and mode come from settings.

        Args:
            providers: Provider descriptors, in merge order.
            post_processors: Processor descriptors, in order.
            settings: Settings to use. Defaults to reading the
                CONFIG_AGGREGATOR_* environment variables.
        """
        if settings is None:
            settings = settings_module.AggregatorSettings()
        return cls(
            providers,
            settings.effective_cache_file,
            post_processors,
            settings.cache_file_mode,
        )

    @property
    def merged_config(self) -> merge.FrozenMapping:
        """Read-only view of the merged configuration."""
        return merge.FrozenMapping(self._config)

    def get_merged_config(self) -> merge.FrozenMapping:
        """Return a read-only view of the merged configuration."""
        return self.merged_config

    def as_dict(self) -> dict[_typing.Any, _typing.Any]:
        """Return a mutable deep copy of the merged configuration."""
        return _typing.cast(dict[_typing.Any, _typing.Any], merge.resolve(self._config))

    @property
    def loaded_from_cache(self) -> bool:
        """Whether the configuration came from the cache file."""
        return self._loaded_from_cache

    def __repr__(self) -> str:
        source = "cache" if self._loaded_from_cache else "providers"
        return f"ConfigAggregator(keys={len(self._config)}, source={source})"
