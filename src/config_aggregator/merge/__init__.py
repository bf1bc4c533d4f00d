"""
Configuration tree merging with override directives.

Example:
    >>> import config_aggregator.merge as merge
    >>> base = {"model": {"name": "llama", "size": "7b"}, "debug": True}
    >>> incoming = {"model": {"size": "70b"}, "debug": merge.REMOVE}
    >>> merge.merge(base, incoming)
    {'model': {'name': 'llama', 'size': '70b'}}
"""

from config_aggregator.merge._core import (
    Tree,
    contains_directives,
    merge,
    merge_into,
    resolve,
)
from config_aggregator.merge._frozen import FrozenMapping, FrozenSequence, freeze
from config_aggregator.merge._markers import (
    REMOVE,
    ReplaceMarker,
    is_directive,
    is_remove,
    is_replace,
)
from config_aggregator.merge._yaml import DirectiveLoader
from config_aggregator.merge._yaml import load as load_yaml

Remove = REMOVE
Replace = ReplaceMarker

__all__ = [
    "REMOVE",
    "DirectiveLoader",
    "FrozenMapping",
    "FrozenSequence",
    "Remove",
    "Replace",
    "ReplaceMarker",
    "Tree",
    "contains_directives",
    "freeze",
    "is_directive",
    "is_remove",
    "is_replace",
    "load_yaml",
    "merge",
    "merge_into",
    "resolve",
]
