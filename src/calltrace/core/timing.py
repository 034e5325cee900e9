"""Elapsed-time and deferred-value helpers shared by the interceptors."""

from __future__ import annotations

import inspect
import time
from typing import Any


def start_marker() -> float:
    """Return an opaque start marker for :func:`elapsed_ms`."""
    return time.perf_counter()


def elapsed_ms(marker: float) -> int:
    """Whole milliseconds since ``marker`` (floored)."""
    return int((time.perf_counter() - marker) * 1000)


def is_deferred(value: Any) -> bool:
    """True for anything that can be awaited (coroutines, futures, tasks)."""
    return inspect.isawaitable(value)
