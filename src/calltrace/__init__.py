"""calltrace - declarative logging, single-flight gating and memoization for methods."""

from calltrace.core.context import CallerContext, LogContext
from calltrace.core.sink import TraceLevel, TraceSink, get_sink, set_sink
from calltrace.intercept import (
    Command,
    CommandOptions,
    CommandRegistry,
    LogOptions,
    get_caller_context,
    log_name,
    with_debug_logging,
    with_gate,
    with_logging,
    with_memoize,
    wrap_gate,
    wrap_logging,
    wrap_memoize,
)
from calltrace.runtime import get_config, init

__all__ = [
    "CallerContext",
    "Command",
    "CommandOptions",
    "CommandRegistry",
    "LogContext",
    "LogOptions",
    "TraceLevel",
    "TraceSink",
    "get_caller_context",
    "get_config",
    "get_sink",
    "init",
    "log_name",
    "set_sink",
    "with_debug_logging",
    "with_gate",
    "with_logging",
    "with_memoize",
    "wrap_gate",
    "wrap_logging",
    "wrap_memoize",
]
