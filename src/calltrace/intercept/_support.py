"""Shared plumbing for the method wrappers."""

from __future__ import annotations

import weakref
from collections.abc import Callable
from typing import Any

from calltrace.core.errors import InterceptError


def require_method(fn: Any) -> Callable[..., Any]:
    """Reject targets that cannot be wrapped as plain instance methods."""
    if isinstance(fn, (classmethod, staticmethod, property)) or not callable(fn):
        raise InterceptError.not_supported(fn)
    return fn  # type: ignore[no-any-return]


class InstanceSlots:
    """Side table holding one value per live instance.

    Keyed by ``id(instance)`` so unhashable receivers (e.g. ``eq=True``
    dataclasses) work. Entries are dropped when the instance is collected,
    which happens before its id can be reused. Values never appear in
    ``vars(instance)``.
    """

    __slots__ = ("_key", "_values")

    def __init__(self, key: str) -> None:
        self._key = key
        self._values: dict[int, Any] = {}

    def get(self, instance: Any, default: Any = None) -> Any:
        return self._values.get(id(instance), default)

    def set(self, instance: Any, value: Any) -> None:
        ident = id(instance)
        if ident not in self._values:
            try:
                weakref.finalize(instance, self._values.pop, ident, None)
            except TypeError:
                raise InterceptError.not_weakrefable(instance, self._key) from None
        self._values[ident] = value

    def __contains__(self, instance: Any) -> bool:
        return id(instance) in self._values

    def __len__(self) -> int:
        return len(self._values)
