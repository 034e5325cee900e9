"""Config module exports."""

from calltrace.config.loader import load_config
from calltrace.config.models import (
    CallTraceConfig,
    LoggingConfig,
    LogOutputConfig,
    TraceConfig,
)

__all__ = [
    "load_config",
    "CallTraceConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "TraceConfig",
]
