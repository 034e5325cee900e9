"""Single-flight gating for async instance methods.

While a call's future is pending, further calls on the same instance get
that same future back instead of starting another execution. The slot is
released as soon as the future settles, whatever the outcome, so the next
call after settlement runs fresh.

A future that never settles keeps its gate closed for the life of the
instance; there is no cancellation hook.
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

from calltrace.core.timing import is_deferred
from calltrace.intercept._support import InstanceSlots, require_method

P = ParamSpec("P")
R = TypeVar("R")


def wrap_gate(fn: Callable[P, R]) -> Callable[P, R]:
    """Collapse concurrent calls of ``fn`` per instance into one execution.

    Synchronous results pass straight through. Awaitable results are turned
    into a future (``asyncio.ensure_future``), so a coroutine-returning
    method must be called with an event loop running.
    """
    require_method(fn)
    in_flight = InstanceSlots(f"{fn.__name__} gate")

    def release(instance: Any, future: asyncio.Future[Any]) -> None:
        if in_flight.get(instance) is future:
            in_flight.set(instance, None)

    @functools.wraps(fn)
    def gated(self: Any, *args: Any, **kwargs: Any) -> Any:
        if self not in in_flight:
            in_flight.set(self, None)
        pending = in_flight.get(self)
        if pending is not None and not pending.done():
            return pending

        result = fn(self, *args, **kwargs)  # type: ignore[arg-type]
        if not is_deferred(result):
            return result

        future = asyncio.ensure_future(result)
        in_flight.set(self, future)
        future.add_done_callback(functools.partial(release, self))
        return future

    return gated  # type: ignore[return-value]


def with_gate() -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator form of :func:`wrap_gate`."""
    return wrap_gate
