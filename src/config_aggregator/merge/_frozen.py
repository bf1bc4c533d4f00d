"""
Read-only views over merged configuration.

The aggregator hands its tree out through these views. Nothing is copied:
each view wraps the container it was given, and nested trees and lists are
wrapped again as they are reached, so no path through a view can mutate the
aggregator's tree.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing


class _FrozenView:
    """
    Shared behaviour of the views: the wrapped container and its length.

    Subclasses define `__eq__` without `__hash__`, so views are unhashable.
    """

    __slots__ = ("_data",)

    _data: _typing.Any

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


class FrozenMapping(_FrozenView, _abc.Mapping[_typing.Any, _typing.Any]):
    """
    Read-only view of a configuration tree.

    Example:
        >>> view = FrozenMapping({"db": {"hosts": ["a", "b"]}})
        >>> view["db"]["hosts"][1]
        'b'
        >>> view["db"]["port"] = 5432
        Traceback (most recent call last):
        TypeError: 'FrozenMapping' object does not support item assignment
    """

    __slots__ = ()

    def __init__(self, data: _abc.Mapping[_typing.Any, _typing.Any]) -> None:
        self._data = data if isinstance(data, dict) else dict(data)

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        return freeze(self._data[key])

    def __iter__(self) -> _abc.Iterator[_typing.Any]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _abc.Mapping):
            return NotImplemented
        if len(self) != len(other):
            return False
        return all(key in other and self[key] == other[key] for key in self._data)


class FrozenSequence(_FrozenView, _abc.Sequence[_typing.Any]):
    """Read-only view of a list inside a configuration tree."""

    __slots__ = ()

    def __init__(self, data: _abc.Sequence[_typing.Any]) -> None:
        self._data = data if isinstance(data, list) else list(data)

    @_typing.overload
    def __getitem__(self, index: int) -> _typing.Any: ...

    @_typing.overload
    def __getitem__(self, index: slice) -> FrozenSequence: ...

    def __getitem__(self, index: int | slice) -> _typing.Any:
        if isinstance(index, slice):
            return FrozenSequence(self._data[index])
        return freeze(self._data[index])

    def __eq__(self, other: object) -> bool:
        # Strings are sequences too, but never equal to a config list
        if isinstance(other, (str, bytes)) or not isinstance(other, _abc.Sequence):
            return NotImplemented
        return len(self) == len(other) and all(a == b for a, b in zip(self, other))


def freeze(value: _typing.Any) -> _typing.Any:
    """
    Wrap a tree or list in its read-only view.

    Views and all other values (scalars, tuples) are returned unchanged.
    """
    if isinstance(value, _FrozenView):
        return value
    if isinstance(value, _abc.Mapping):
        return FrozenMapping(value)
    if isinstance(value, list):
        return FrozenSequence(value)
    return value
