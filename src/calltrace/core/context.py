"""Per-call context records produced by the logging interceptor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class LogContext(Generic[T]):
    """Everything a ``prefix`` override needs to build a log prefix.

    Attributes:
        prefix: The default prefix (``[id] Instance.method``).
        name: Method key (the wrapped function's ``__name__``).
        instance: The receiving object.
        instance_name: Loggable name of the receiver.
        id: Correlation id, when one was allocated.
    """

    prefix: str
    name: str
    instance: T
    instance_name: str
    id: int | None = None


@dataclass(frozen=True, slots=True)
class CallerContext:
    """Correlation id and prefix of the most recent logged call of a method."""

    correlation_id: int | None
    prefix: str

    def as_fields(self) -> dict[str, Any]:
        if self.correlation_id is None:
            return {}
        return {"correlation_id": format(self.correlation_id, "x")}
