"""
Resolution of provider and processor descriptors.

A descriptor is either:

- a callable, used as-is
- a class, instantiated without arguments
- a string naming a class or callable, as "package.module:Name" or
  "package.module.Name"; the named object is imported and then treated
  like the two cases above

The aggregator only ever calls what these functions return.
"""

from __future__ import annotations

import importlib as _importlib
import logging as _logging
import typing as _typing

import config_aggregator.errors as errors

_logger = _logging.getLogger(__name__)

Provider: _typing.TypeAlias = _typing.Callable[[], _typing.Any]
Processor: _typing.TypeAlias = _typing.Callable[[dict[_typing.Any, _typing.Any]], _typing.Any]
Descriptor: _typing.TypeAlias = str | type | _typing.Callable[..., _typing.Any]


def describe(obj: _typing.Any) -> str:
    """
    Return a readable identity for a provider or processor.

    Functions, methods and classes are named by their qualified name;
    other objects by the qualified name of their type.

    Example:
        >>> describe(len)
        'builtins.len'
        >>> describe(lambda: {})
        '__main__.<lambda>'
    """
    target = obj if hasattr(obj, "__qualname__") else type(obj)
    module = getattr(target, "__module__", None)
    qualname = getattr(target, "__qualname__", type(obj).__name__)
    if module:
        return f"{module}.{qualname}"
    return str(qualname)


def import_string(name: str) -> _typing.Any:
    """
    Import an object from a dotted path.

    Accepts "package.module:Attr.Nested" and "package.module.Attr".

    Raises:
        ImportError: If the module cannot be imported or the name is bare.
        AttributeError: If the module has no such attribute.
    """
    module_name, sep, attr_path = name.partition(":")
    if not sep:
        module_name, _, attr_path = name.rpartition(".")
    if not module_name or not attr_path:
        raise ImportError(f"Not an importable name: {name!r}")

    obj: _typing.Any = _importlib.import_module(module_name)
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    return obj


def _resolve(
    descriptor: Descriptor,
    error_cls: type[errors.InvalidProviderError] | type[errors.InvalidProcessorError],
    from_named: _typing.Callable[[str], Exception],
) -> _typing.Callable[..., _typing.Any]:
    if isinstance(descriptor, str):
        try:
            resolved: _typing.Any = import_string(descriptor)
        except (ImportError, AttributeError, ValueError) as e:
            raise from_named(descriptor) from e
        _logger.debug("Resolved %s to %r", descriptor, resolved)
    else:
        resolved = descriptor

    if isinstance(resolved, type):
        try:
            resolved = resolved()
        except TypeError as e:
            raise error_cls.from_unsupported_type(describe(resolved)) from e

    if not callable(resolved):
        raise error_cls.from_unsupported_type(describe(resolved))

    return _typing.cast(_typing.Callable[..., _typing.Any], resolved)


def resolve_provider(descriptor: Descriptor) -> Provider:
    """
    Resolve a provider descriptor to a zero-argument callable.

    Raises:
        InvalidProviderError: If the descriptor names nothing importable,
            or resolves to something that is not callable.
    """
    return _resolve(
        descriptor,
        errors.InvalidProviderError,
        errors.InvalidProviderError.from_named_provider,
    )


def resolve_processor(descriptor: Descriptor) -> Processor:
    """
    Resolve a processor descriptor to a single-argument callable.

    Raises:
        InvalidProcessorError: If the descriptor names nothing importable,
            or resolves to something that is not callable.
    """
    return _resolve(
        descriptor,
        errors.InvalidProcessorError,
        errors.InvalidProcessorError.from_named_processor,
    )
