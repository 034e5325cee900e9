"""Method wrappers: call logging, single-flight gating, memoization, commands."""

from calltrace.intercept.commands import Command, CommandOptions, CommandRegistry
from calltrace.intercept.correlation import next_correlation_id
from calltrace.intercept.gate import with_gate, wrap_gate
from calltrace.intercept.logged import (
    LogOptions,
    get_caller_context,
    log_name,
    to_loggable,
    with_debug_logging,
    with_logging,
    wrap_logging,
)
from calltrace.intercept.memoize import with_memoize, wrap_memoize

__all__ = [
    # Commands
    "Command",
    "CommandOptions",
    "CommandRegistry",
    # Correlation
    "next_correlation_id",
    # Gate
    "with_gate",
    "wrap_gate",
    # Logging
    "LogOptions",
    "get_caller_context",
    "log_name",
    "to_loggable",
    "with_debug_logging",
    "with_logging",
    "wrap_logging",
    # Memoize
    "with_memoize",
    "wrap_memoize",
]
