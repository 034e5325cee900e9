"""Process-level setup: load config, configure logging, arm the default sink."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from calltrace.config.loader import load_config
from calltrace.config.models import CallTraceConfig
from calltrace.core.logging import configure_logging, get_logger
from calltrace.core.sink import get_sink

_config: CallTraceConfig | None = None


def init(
    config: CallTraceConfig | None = None,
    *,
    config_path: Path | None = None,
    **kwargs: Any,
) -> CallTraceConfig:
    """Apply configuration to the process.

    Args:
        config: Ready-made config. When None, it is loaded via load_config().
        config_path: Project YAML passed to load_config().
        **kwargs: Overrides passed to load_config().

    Returns:
        The applied configuration.
    """
    global _config

    if config is None:
        config = load_config(config_path, **kwargs)

    logging_config = config.logging
    if config.trace.level == "debug" and logging_config.level != "DEBUG":
        # Debug-severity call logs are emitted as structlog debug events
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})

    configure_logging(config=logging_config)
    get_sink().level = config.trace.level
    _config = config

    get_logger("calltrace").debug(
        "calltrace initialized",
        trace_level=config.trace.level,
        namespace=config.trace.namespace,
    )
    return config


def get_config() -> CallTraceConfig:
    """The config applied by init(), or defaults if init() has not run."""
    return _config or CallTraceConfig()
