"""
Provider and post-processor pipelines.

load_from_providers() folds the trees produced by each provider into one
accumulator, in declaration order. post_process() threads the merged tree
through each processor in turn.
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import typing as _typing

import config_aggregator.errors as errors
import config_aggregator.merge as merge
import config_aggregator.resolution as resolution

_logger = _logging.getLogger(__name__)


def _merge_fragment(
    accumulator: merge.Tree,
    fragment: _typing.Any,
    provider: resolution.Provider,
) -> None:
    """Merge one provider fragment into the accumulator after checking its shape."""
    if not isinstance(fragment, _abc.Mapping):
        raise errors.ProviderReturnedInvalidConfigError(
            resolution.describe(provider),
            type(fragment).__name__,
        )
    merge.merge_into(accumulator, fragment)


def load_from_providers(
    providers: _abc.Iterable[resolution.Descriptor],
) -> merge.Tree:
    """
    Invoke each provider once and merge what it produces.

    A provider may return a single tree, or an iterator (typically a
    generator) of trees; each yielded tree is merged as soon as it is
    produced, in yield order.

    Args:
        providers: Provider descriptors, in merge order (later wins).

    Returns:
        The merged tree.

    Raises:
        InvalidProviderError: If a descriptor cannot be resolved.
        ProviderReturnedInvalidConfigError: If a provider returns or yields
            something that is not a mapping.
    """
    merged: merge.Tree = {}

    for descriptor in providers:
        provider = resolution.resolve_provider(descriptor)
        _logger.debug("Loading config from provider %s", resolution.describe(provider))
        config = provider()

        if isinstance(config, _abc.Iterator) and not isinstance(config, _abc.Mapping):
            for fragment in config:
                _merge_fragment(merged, fragment, provider)
            continue

        _merge_fragment(merged, config, provider)

    return merged


def post_process(
    processors: _abc.Iterable[resolution.Descriptor],
    config: _typing.Any,
) -> _typing.Any:
    """
    Apply each processor to the output of the previous one.

    Processor output is not validated; whatever a processor raises
    propagates unchanged.

    Raises:
        InvalidProcessorError: If a descriptor cannot be resolved.
    """
    for descriptor in processors:
        processor = resolution.resolve_processor(descriptor)
        _logger.debug("Post-processing config with %s", resolution.describe(processor))
        config = processor(config)

    return config
