"""Per-instance memoization of a method's first successful result."""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

from calltrace.core.errors import InterceptError
from calltrace.core.timing import is_deferred
from calltrace.intercept._support import require_method

P = ParamSpec("P")
R = TypeVar("R")

# Instance __dict__ key prefix for cached results
MEMO_ATTR_PREFIX = "__calltrace_memoize_"


def wrap_memoize(fn: Callable[P, R]) -> Callable[P, R]:
    """Cache the first result of ``fn`` per instance, ignoring arguments.

    Awaitable results are cached as a single future that every caller
    shares; the cache holds the pending operation, not its value, so a
    future that later fails stays cached. A first call that raises stores
    nothing and the next call runs ``fn`` again.

    The result is written straight into the instance ``__dict__`` under a
    private key (bypassing ``__setattr__``, so frozen dataclasses work),
    which ties its lifetime to the instance even when the cached value
    refers back to it.

    Raises:
        InterceptError: The instance has no ``__dict__``.
    """
    require_method(fn)
    key = f"{MEMO_ATTR_PREFIX}{fn.__name__}"

    @functools.wraps(fn)
    def memoized(self: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            state = vars(self)
        except TypeError:
            raise InterceptError.no_instance_dict(self, fn.__name__) from None
        if key in state:
            return state[key]

        value = fn(self, *args, **kwargs)  # type: ignore[arg-type]
        if is_deferred(value) and not isinstance(value, asyncio.Future):
            # Coroutines can only be awaited once
            value = asyncio.ensure_future(value)
        state[key] = value
        return value

    return memoized  # type: ignore[return-value]


def with_memoize() -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator form of :func:`wrap_memoize`.

    Stack under ``@property`` to memoize a computed attribute.
    """
    return wrap_memoize
