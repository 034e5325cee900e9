"""Command registration with a standard error-handling policy.

Decorated methods are recorded for a host to dispatch later; the class
keeps the undecorated method. Unless a command opts out, the recorded
callable catches failures, logs them, and optionally tells the user.

Usage::

    commands = CommandRegistry()

    class Workspace:
        @commands.command("refresh", show_error_message="Unable to refresh")
        async def refresh(self) -> None:
            ...

    await commands.execute("calltrace.refresh", workspace)
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from calltrace.core.errors import InterceptError
from calltrace.core.sink import TraceLevel, TraceSink, get_sink
from calltrace.core.timing import is_deferred
from calltrace.intercept._support import require_method

F = TypeVar("F", bound=Callable[..., Any])

OPEN_OUTPUT_ACTION = "Open Output Channel"


@dataclass(frozen=True)
class CommandOptions:
    """Per-command behavior.

    Attributes:
        custom_error_handling: Record the method as-is; it handles its own errors.
        show_error_message: Text shown to the user when the command fails.
    """

    custom_error_handling: bool = False
    show_error_message: str | None = None


@dataclass
class Command:
    """A registered command awaiting host dispatch."""

    name: str
    key: str
    method: Callable[..., Any]
    options: CommandOptions = field(default_factory=CommandOptions)


class CommandRegistry:
    """Collects commands declared with :meth:`command`.

    Args:
        namespace: Prefix for command names. Defaults to the configured
            ``trace.namespace`` at decoration time.
        sink: Sink used for failures. Defaults to the process-wide sink at
            failure time.
    """

    def __init__(self, namespace: str | None = None, *, sink: TraceSink | None = None) -> None:
        self._namespace = namespace
        self._sink = sink
        self._commands: list[Command] = []

    @property
    def namespace(self) -> str:
        if self._namespace is not None:
            return self._namespace
        from calltrace.runtime import get_config

        return get_config().trace.namespace

    @property
    def sink(self) -> TraceSink:
        return self._sink or get_sink()

    def command(
        self,
        name: str,
        *,
        custom_error_handling: bool = False,
        show_error_message: str | None = None,
    ) -> Callable[[F], F]:
        """Decorator to register a method as command ``<namespace>.<name>``."""
        options = CommandOptions(
            custom_error_handling=custom_error_handling,
            show_error_message=show_error_message,
        )

        def decorator(fn: F) -> F:
            require_method(fn)
            full_name = f"{self.namespace}.{name}"
            method = fn if options.custom_error_handling else self._guard(full_name, fn, options)
            self._commands.append(
                Command(name=full_name, key=fn.__name__, method=method, options=options)
            )
            return fn

        return decorator

    def _guard(
        self,
        name: str,
        fn: Callable[..., Any],
        options: CommandOptions,
    ) -> Callable[..., Any]:
        @functools.wraps(fn)
        async def guarded(*args: Any, **kwargs: Any) -> Any:
            try:
                result = fn(*args, **kwargs)
                if is_deferred(result):
                    result = await result
                return result
            except Exception as ex:
                sink = self.sink
                sink.error(ex, name)
                if options.show_error_message:
                    await self._notify(sink, options.show_error_message, ex)
                return None

        return guarded

    async def _notify(self, sink: TraceSink, text: str, ex: Exception) -> None:
        message = f"{text} \u00a0\u2014\u00a0 {ex}"
        if sink.level is TraceLevel.SILENT:
            await sink.notifier.show_error_message(message)
            return
        choice = await sink.notifier.show_error_message(message, OPEN_OUTPUT_ACTION)
        if choice == OPEN_OUTPUT_ACTION:
            sink.show_output()

    def get(self, name: str) -> Command | None:
        """First command registered under ``name``."""
        return next((c for c in self._commands if c.name == name), None)

    def get_all(self) -> list[Command]:
        return list(self._commands)

    def clear(self) -> None:
        """Clear all registrations (for testing)."""
        self._commands.clear()

    async def execute(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Dispatch a command the way a host would.

        Raises:
            InterceptError: No command is registered under ``name``.
        """
        command = self.get(name)
        if command is None:
            raise InterceptError.command_not_found(name)
        result = command.method(*args, **kwargs)
        if is_deferred(result):
            result = await result
        return result
