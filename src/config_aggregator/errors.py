"""
Exceptions raised while aggregating configuration.

All exceptions derive from ConfigAggregatorError so callers can catch the
whole family at once. None of them is raised for cache *write* problems:
those are logged and suppressed by the cache store.
"""

from __future__ import annotations

import pathlib as _pathlib


class ConfigAggregatorError(Exception):
    """Base class for configuration aggregation errors."""

    pass


class InvalidProviderError(ConfigAggregatorError):
    """A provider descriptor cannot be resolved to a callable provider."""

    @classmethod
    def from_named_provider(cls, name: str) -> InvalidProviderError:
        """The descriptor names something that cannot be imported."""
        return cls(f"Cannot read config from {name}; class cannot be found")

    @classmethod
    def from_unsupported_type(cls, type_name: str) -> InvalidProviderError:
        """The descriptor resolved to something that is not callable."""
        return cls(f"Cannot read config from {type_name}; does not return a mapping")


class ProviderReturnedInvalidConfigError(InvalidProviderError):
    """A provider returned (or yielded) something that is not a tree."""

    def __init__(self, provider_name: str, value_type: str) -> None:
        self.provider_name = provider_name
        self.value_type = value_type
        super().__init__(
            f"Cannot read config from {provider_name}; "
            f"does not return a mapping (got {value_type})"
        )


class InvalidProcessorError(ConfigAggregatorError):
    """A processor descriptor cannot be resolved to a callable processor."""

    @classmethod
    def from_named_processor(cls, name: str) -> InvalidProcessorError:
        return cls(f"Cannot use {name} as processor; class cannot be found")

    @classmethod
    def from_unsupported_type(cls, type_name: str) -> InvalidProcessorError:
        return cls(f"Cannot use {type_name} as processor; it is not callable")


class ProcessorReturnedInvalidConfigError(InvalidProcessorError):
    """Post-processing left something that is not a tree."""

    def __init__(self, value_type: str) -> None:
        self.value_type = value_type
        super().__init__(f"Post-processors must return a mapping (got {value_type})")


class CacheLoadError(ConfigAggregatorError):
    """A cache file exists but cannot be read back as a configuration tree."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config cache file {path}: {message}")


class ConfigFileError(ConfigAggregatorError):
    """A configuration file read by a built-in provider cannot be parsed."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")
