"""Severity-gated sink for call logs.

The sink owns the trace threshold. Interceptors query it before doing any
formatting work, then hand it ``(prefix, message)`` pairs; the sink turns
those into structlog events.

Thresholds:
- silent:  nothing, not even errors
- normal:  errors only
- verbose: call logs from non-debug wrappers
- debug:   everything, including argument values
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Any

from calltrace.core.context import CallerContext
from calltrace.core.logging import get_log_file_path, get_logger
from calltrace.core.notify import ConsoleNotifier, Notifier

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


class TraceLevel(IntEnum):
    """Sink threshold, ordered from quietest to noisiest."""

    SILENT = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3

    @classmethod
    def parse(cls, value: str | TraceLevel) -> TraceLevel:
        if isinstance(value, TraceLevel):
            return value
        try:
            return cls[value.upper()]
        except KeyError:
            raise ValueError(f"Unknown trace level: {value!r}") from None


Caller = str | CallerContext


class TraceSink:
    """Formats and emits call-log lines at a severity.

    The structlog logger is resolved on every emission so that
    reconfiguration takes effect without rebuilding the sink.
    """

    def __init__(
        self,
        level: TraceLevel | str = TraceLevel.NORMAL,
        *,
        logger_name: str = "calltrace",
        notifier: Notifier | None = None,
    ) -> None:
        self._level = TraceLevel.parse(level)
        self._logger_name = logger_name
        self.notifier: Notifier = notifier or ConsoleNotifier()

    @property
    def level(self) -> TraceLevel:
        return self._level

    @level.setter
    def level(self, value: TraceLevel | str) -> None:
        self._level = TraceLevel.parse(value)

    def is_enabled(self, debug: bool = False) -> bool:
        """Whether a call wrapper of the given severity should log at all."""
        return self._level is TraceLevel.DEBUG or (
            self._level is TraceLevel.VERBOSE and not debug
        )

    def _get_logger(self) -> BoundLogger:
        return get_logger(self._logger_name)

    def log(self, caller: Caller, message: str | None = None) -> None:
        if self._level < TraceLevel.VERBOSE:
            return
        self._emit("info", caller, message)

    def debug(self, caller: Caller, message: str | None = None) -> None:
        if self._level is not TraceLevel.DEBUG:
            return
        self._emit("debug", caller, message)

    def log_with_debug_params(self, caller: Caller, params: str) -> None:
        """Log at normal call severity, showing ``params`` only at debug."""
        if self._level < TraceLevel.VERBOSE:
            return
        self._emit("info", caller, params if self._level is TraceLevel.DEBUG else None)

    def error(
        self,
        ex: BaseException,
        caller: Caller | None = None,
        message: str | None = None,
    ) -> None:
        if self._level is TraceLevel.SILENT:
            return
        self._emit("error", caller or "", message, exc_info=ex)

    def _emit(
        self,
        method: str,
        caller: Caller,
        message: str | None,
        **extra: Any,
    ) -> None:
        if isinstance(caller, CallerContext):
            prefix = caller.prefix
            extra.update(caller.as_fields())
        else:
            prefix = caller
        line = " ".join(part for part in (prefix, message) if part)
        getattr(self._get_logger(), method)(line, **extra)

    @staticmethod
    def to_loggable_name(instance: Any) -> str:
        """Default display name of a receiver: its class name."""
        if isinstance(instance, type):
            return instance.__name__
        return type(instance).__name__

    def show_output(self) -> None:
        self.notifier.show_output(get_log_file_path())


# Process-wide default sink
_sink = TraceSink()


def get_sink() -> TraceSink:
    return _sink


def set_sink(sink: TraceSink) -> TraceSink:
    """Replace the default sink. Returns the previous one."""
    global _sink
    previous = _sink
    _sink = sink
    return previous
