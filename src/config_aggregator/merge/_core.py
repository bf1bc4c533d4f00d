"""
Tree merge: combine two configuration trees node by node.

Merge rules, applied to each entry of the incoming tree in order:

- ReplaceMarker(v): the result holds `v`, never merged with the base value
- key present in base:
    - REMOVE: the key is deleted
    - integer key: the value is appended under the next free integer key,
      the base entry at that key is left alone
    - tree + tree: recursive merge
    - list + list: positions are merged as integer keys, then re-packed
    - anything else: the incoming value overwrites
- key absent from base: REMOVE is a no-op, anything else is inserted

Values copied out of the incoming tree are detached (deep-copied) and have
their own directives resolved, so a merged tree never shares containers with
its inputs and never holds a directive.
"""

from __future__ import annotations

import collections.abc as _abc
import copy as _copy
import typing as _typing

import config_aggregator.merge._frozen as _frozen
import config_aggregator.merge._markers as _markers

Tree: _typing.TypeAlias = dict[_typing.Any, _typing.Any]


def _is_index(key: _typing.Any) -> bool:
    """Integer keys (but not bools) address list-like entries."""
    return isinstance(key, int) and not isinstance(key, bool)


def _is_list(value: _typing.Any) -> bool:
    return isinstance(value, (list, _frozen.FrozenSequence))


def _next_index(tree: Tree) -> int:
    """Return the key an appended entry would get (max integer key + 1)."""
    indices = [key for key in tree if _is_index(key)]
    if not indices:
        return 0
    return max(max(indices) + 1, 0)


def _merge_lists(
    base: list[_typing.Any],
    incoming: _abc.Sequence[_typing.Any],
) -> list[_typing.Any]:
    merged = merge_into(dict(enumerate(base)), dict(enumerate(incoming)))
    return list(merged.values())


def resolve(value: _typing.Any) -> _typing.Any:
    """
    Detach a value from its source and resolve any directives inside it.

    Trees and lists are rebuilt (REMOVE entries dropped, ReplaceMarker
    payloads unwrapped); other values are deep-copied.

    Raises:
        ValueError: If `value` itself is REMOVE (there is nothing to resolve
            it to outside of a merge).
    """
    if _markers.is_remove(value):
        raise ValueError("REMOVE only has meaning as a value inside a tree")
    if _markers.is_replace(value):
        return resolve(value.value)
    if isinstance(value, _abc.Mapping):
        return merge_into({}, value)
    if _is_list(value):
        return _merge_lists([], value)
    return _copy.deepcopy(value)


def merge_into(target: Tree, incoming: _abc.Mapping[_typing.Any, _typing.Any]) -> Tree:
    """
    Merge `incoming` into `target` in place and return `target`.

    The caller must own `target` and every container nested in it; the
    pipeline uses this on its accumulator to avoid copying it per merge.
    `incoming` is never modified.
    """
    for key, value in incoming.items():
        if _markers.is_replace(value):
            target[key] = resolve(value.value)
            continue

        if key not in target:
            if not _markers.is_remove(value):
                target[key] = resolve(value)
            continue

        existing = target[key]
        if _markers.is_remove(value):
            del target[key]
        elif _is_index(key):
            target[_next_index(target)] = resolve(value)
        elif isinstance(existing, _abc.Mapping) and isinstance(value, _abc.Mapping):
            if not isinstance(existing, dict):
                existing = resolve(existing)
            target[key] = merge_into(existing, value)
        elif _is_list(existing) and _is_list(value):
            target[key] = _merge_lists(list(existing), value)
        else:
            target[key] = resolve(value)

    return target


def merge(
    base: _abc.Mapping[_typing.Any, _typing.Any],
    incoming: _abc.Mapping[_typing.Any, _typing.Any],
) -> Tree:
    """
    Merge two configuration trees and return the result as a new dict.

    Neither input is modified. Entries of `incoming` win over entries of
    `base` according to the rules in the module docstring.

    Example:
        >>> merge({"db": {"host": "a", "port": 1}}, {"db": {"port": 2}})
        {'db': {'host': 'a', 'port': 2}}
        >>> merge({0: "a"}, {0: "b"})
        {0: 'a', 1: 'b'}
        >>> merge({"a": 1, "b": 2}, {"a": REMOVE})
        {'b': 2}

    Raises:
        TypeError: If either argument is not a mapping.
    """
    if not isinstance(base, _abc.Mapping) or not isinstance(incoming, _abc.Mapping):
        raise TypeError(
            "merge() requires two mappings, got "
            f"{type(base).__name__} and {type(incoming).__name__}"
        )
    return merge_into(resolve(base), incoming)


def contains_directives(value: _typing.Any) -> bool:
    """Check whether a directive appears anywhere inside `value`."""
    if _markers.is_directive(value):
        return True
    if isinstance(value, _abc.Mapping):
        return any(contains_directives(item) for item in value.values())
    if _is_list(value):
        return any(contains_directives(item) for item in value)
    return False
