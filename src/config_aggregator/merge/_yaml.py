"""
YAML loading for configuration fragments that carry merge directives.

Two local tags are understood on top of the safe YAML types:

    legacy_option: !remove          # drop whatever earlier fragments set
    logging: !replace               # use this tree as-is, no deep merge
      level: warning
    plugins: !replace [audit]       # lists and scalars can be wrapped too

Everything else is loaded exactly as `yaml.safe_load` would load it, so
integer keys stay integers and no Python objects are ever constructed.
"""

from __future__ import annotations

import typing as _typing

import yaml as _yaml

import config_aggregator.merge._markers as _markers


def _construct_remove(loader: _yaml.SafeLoader, node: _yaml.Node) -> _markers._RemoveMarker:
    # Any value written after the tag is ignored
    del loader, node
    return _markers.REMOVE


def _construct_replace(loader: _yaml.SafeLoader, node: _yaml.Node) -> _markers.ReplaceMarker:
    if isinstance(node, _yaml.ScalarNode):
        # An explicit tag disables implicit typing; resolve the scalar again
        # as if it were untagged so "!replace 42" wraps an int, not "42".
        tag = loader.resolve(_yaml.ScalarNode, node.value, (True, False))
        node = _yaml.ScalarNode(tag, node.value, node.start_mark, node.end_mark, node.style)
        return _markers.ReplaceMarker(loader.construct_object(node, deep=True))

    payload: _typing.Any
    if isinstance(node, _yaml.MappingNode):
        payload = loader.construct_mapping(node, deep=True)
    else:
        payload = loader.construct_sequence(_typing.cast(_yaml.SequenceNode, node), deep=True)
    return _markers.ReplaceMarker(payload)


class DirectiveLoader(_yaml.SafeLoader):
    """SafeLoader with the `!remove` and `!replace` directive tags."""


DirectiveLoader.add_constructor("!remove", _construct_remove)
DirectiveLoader.add_constructor("!replace", _construct_replace)


def load(stream: _typing.Any) -> _typing.Any:
    """
    Parse one YAML document, keeping directives as marker objects.

    Example:
        >>> load("db:\\n  password: !remove\\n")
        {'db': {'password': REMOVE}}

    Raises:
        yaml.YAMLError: If the document is malformed or uses an unknown tag.
    """
    return _yaml.load(stream, Loader=DirectiveLoader)  # noqa: S506 - SafeLoader subclass
