"""
config-aggregator - merge configuration from ordered providers.

Providers produce configuration trees, which are deep-merged in order
(with REMOVE / Replace directives), optionally post-processed, and
optionally cached on disk so providers don't run on every startup.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("config-aggregator")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from config_aggregator.aggregator import ConfigAggregator  # noqa: E402
from config_aggregator.cache import CacheStore  # noqa: E402
from config_aggregator.errors import (  # noqa: E402
    CacheLoadError,
    ConfigAggregatorError,
    ConfigFileError,
    InvalidProcessorError,
    InvalidProviderError,
    ProcessorReturnedInvalidConfigError,
    ProviderReturnedInvalidConfigError,
)
from config_aggregator.merge import REMOVE, Remove, Replace, ReplaceMarker  # noqa: E402
from config_aggregator.providers import ArrayProvider, YamlFileProvider  # noqa: E402
from config_aggregator.settings import AggregatorSettings  # noqa: E402

__all__ = [
    "REMOVE",
    "AggregatorSettings",
    "ArrayProvider",
    "CacheLoadError",
    "CacheStore",
    "ConfigAggregator",
    "ConfigAggregatorError",
    "ConfigFileError",
    "InvalidProcessorError",
    "InvalidProviderError",
    "ProcessorReturnedInvalidConfigError",
    "ProviderReturnedInvalidConfigError",
    "Remove",
    "Replace",
    "ReplaceMarker",
    "YamlFileProvider",
    "__version__",
    "__version_info__",
]
