"""
Shared constants for config-aggregator.

Reserved keys are read from the merged tree by the cache store. They stay
in the tree and are visible to callers like any other entry.
"""

ENABLE_CACHE = "config_cache_enabled"
"""Truthy value in the merged tree enables writing the cache file."""

CACHE_FILEMODE = "config_cache_filemode"
"""Numeric permission mode for the written cache file."""

DEFAULT_CACHE_FILEMODE = 0o644
"""Permission mode used when neither the caller nor the tree sets one."""

CACHE_GENERATOR = "config_aggregator.ConfigAggregator"
"""Generator name recorded in the cache file header."""

ENV_PREFIX = "CONFIG_AGGREGATOR_"
"""Prefix for environment variables read by AggregatorSettings."""

MAX_CACHE_FILEMODE = 0o7777
"""Largest permission mode accepted for the cache file."""
