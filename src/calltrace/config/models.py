"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CALLTRACE__SECTION__KEY)
3. Project YAML (./calltrace.yaml or an explicit path)
4. Global YAML (~/.config/calltrace/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    CALLTRACE__<SECTION>__<KEY>=<VALUE>

Examples:
    CALLTRACE__TRACE__LEVEL=debug
    CALLTRACE__TRACE__NAMESPACE=myapp
    CALLTRACE__LOGGING__LEVEL=DEBUG
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CALLTRACE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level for the structlog/stdlib pipeline.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class TraceConfig(BaseModel):
    """Method interception configuration.

    Env vars:
        CALLTRACE__TRACE__LEVEL: Sink threshold (silent, normal, verbose, debug)
        CALLTRACE__TRACE__NAMESPACE: Prefix for registered command names
    """

    level: Literal["silent", "normal", "verbose", "debug"] = Field(
        default="normal",
        description="Sink threshold. Call logging starts at 'verbose'; "
        "'debug' also logs debug-only wrappers and argument values. "
        "RISK: 'debug' serializes every argument of every logged call.",
    )
    namespace: str = Field(
        default="calltrace",
        description="Namespace prepended to command names ('<namespace>.<command>').",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        return v.lower() if isinstance(v, str) else v

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        if not v or "." in v:
            raise ValueError(f"Namespace must be non-empty and contain no '.': {v!r}")
        return v


class CallTraceConfig(BaseModel):
    """Root configuration for calltrace.

    All settings can be configured via:
    1. Environment variables: CALLTRACE__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    trace: TraceConfig = Field(default_factory=TraceConfig)
