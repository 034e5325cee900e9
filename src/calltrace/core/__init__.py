"""Core module exports."""

from calltrace.core.context import CallerContext, LogContext
from calltrace.core.errors import (
    CallTraceError,
    ConfigError,
    ErrorCode,
    InterceptError,
)
from calltrace.core.logging import (
    clear_correlation_id,
    configure_logging,
    correlation_scope,
    get_correlation_id,
    get_log_file_path,
    get_logger,
    set_correlation_id,
)
from calltrace.core.notify import ConsoleNotifier, Notifier
from calltrace.core.sink import TraceLevel, TraceSink, get_sink, set_sink

__all__ = [
    # Context
    "CallerContext",
    "LogContext",
    # Errors
    "CallTraceError",
    "ConfigError",
    "ErrorCode",
    "InterceptError",
    # Logging
    "clear_correlation_id",
    "configure_logging",
    "correlation_scope",
    "get_correlation_id",
    "get_log_file_path",
    "get_logger",
    "set_correlation_id",
    # Notify
    "ConsoleNotifier",
    "Notifier",
    # Sink
    "TraceLevel",
    "TraceSink",
    "get_sink",
    "set_sink",
]
