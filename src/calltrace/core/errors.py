"""calltrace error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Interception
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Interception (3xxx)
    INTERCEPT_NOT_SUPPORTED = 3001
    INTERCEPT_NOT_WEAKREFABLE = 3002
    COMMAND_NOT_FOUND = 3003
    INTERCEPT_NO_INSTANCE_DICT = 3004


@dataclass(frozen=True, slots=True)
class CallTraceError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CallTraceError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class InterceptError(CallTraceError):
    """Raised when a wrapper cannot be applied to a target."""

    @classmethod
    def not_supported(cls, target: Any) -> "InterceptError":
        return cls(
            code=ErrorCode.INTERCEPT_NOT_SUPPORTED,
            message=f"Cannot intercept non-callable target: {target!r}",
            details={"target_type": type(target).__name__},
        )

    @classmethod
    def not_weakrefable(cls, instance: Any, key: str) -> "InterceptError":
        type_name = type(instance).__name__
        return cls(
            code=ErrorCode.INTERCEPT_NOT_WEAKREFABLE,
            message=(
                f"{type_name}.{key} needs per-instance state but {type_name} "
                "instances cannot be weakly referenced (add '__weakref__' to __slots__)"
            ),
            details={"type": type_name, "key": key},
        )

    @classmethod
    def no_instance_dict(cls, instance: Any, key: str) -> "InterceptError":
        type_name = type(instance).__name__
        return cls(
            code=ErrorCode.INTERCEPT_NO_INSTANCE_DICT,
            message=(
                f"{type_name}.{key} caches its result on the instance but {type_name} "
                "instances have no __dict__ (add '__dict__' to __slots__)"
            ),
            details={"type": type_name, "key": key},
        )

    @classmethod
    def command_not_found(cls, name: str) -> "InterceptError":
        return cls(
            code=ErrorCode.COMMAND_NOT_FOUND,
            message=f"No command registered as '{name}'",
            details={"name": name},
        )
