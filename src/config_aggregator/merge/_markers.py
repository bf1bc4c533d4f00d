"""
Override directives for configuration tree merges.

A directive is attached to a value in the *incoming* tree of a merge:

- REMOVE: delete the key from the base tree (no-op if absent)
- ReplaceMarker(value): use `value` exactly, without merging it into the
  base value even when both are trees

Directives never survive a merge; the merged result only holds plain values.
"""

from __future__ import annotations

import typing as _typing


class _RemoveMarker:
    """
    Placeholder value meaning "drop this key from the merged tree".

    There is exactly one instance, REMOVE. Copying or unpickling it gives
    back the same object, so identity checks keep working on trees that
    went through `copy.deepcopy` or a process boundary.
    """

    __slots__ = ()

    _instance: _RemoveMarker | None = None

    def __new__(cls) -> _RemoveMarker:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "REMOVE"

    def __reduce__(self) -> str:
        # Pickled as a reference to the module-level name
        return "REMOVE"

    def __copy__(self) -> _RemoveMarker:
        return self

    def __deepcopy__(self, memo: dict[int, _typing.Any]) -> _RemoveMarker:
        return self


REMOVE = _RemoveMarker()


class ReplaceMarker:
    """
    Wrap a value so it replaces the base value instead of merging into it.

    Example:
        >>> merge({"db": {"host": "a", "port": 1}}, {"db": ReplaceMarker({"host": "b"})})
        {'db': {'host': 'b'}}

    Markers compare equal when their payloads do. They are unhashable,
    since payloads are usually trees or lists.
    """

    __slots__ = ("value",)

    def __init__(self, value: _typing.Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"ReplaceMarker({self.value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReplaceMarker):
            return NotImplemented
        return bool(self.value == other.value)

    __hash__ = None  # type: ignore[assignment]


def is_remove(value: _typing.Any) -> bool:
    """Check if a value is the REMOVE marker."""
    return value is REMOVE


def is_replace(value: _typing.Any) -> bool:
    return isinstance(value, ReplaceMarker)


def is_directive(value: _typing.Any) -> bool:
    """Check if a value is any merge directive."""
    return value is REMOVE or isinstance(value, ReplaceMarker)
