"""Call logging for instance methods.

Wraps a method so each invocation can log entry (with serialized arguments)
and completion (with elapsed time and an optional result summary), without
changing what the caller observes.

Usage::

    from calltrace import with_logging, with_debug_logging

    class Repository:
        @with_logging(exit=lambda user: f" name={user['name']}")
        async def fetch_user(self, user_id: int) -> dict:
            ...

        @with_debug_logging(args={0: lambda token: "<token>"}, timed=False)
        def authenticate(self, token: str) -> bool:
            ...

Lines are only built when the sink threshold lets them through; otherwise
the wrapper is a straight passthrough.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import json
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any, ParamSpec, TypeVar

from pydantic_core import to_jsonable_python

from calltrace.core.context import CallerContext, LogContext
from calltrace.core.logging import correlation_scope
from calltrace.core.sink import TraceSink, get_sink
from calltrace.core.timing import elapsed_ms, is_deferred, start_marker
from calltrace.intercept._support import require_method
from calltrace.intercept.correlation import next_correlation_id

P = ParamSpec("P")
R = TypeVar("R")
C = TypeVar("C", bound=type)

# Class attribute holding a registered instance-naming function
LOG_NAME_ATTR = "__calltrace_log_name__"

# Function attribute holding the most recent CallerContext
LOG_CONTEXT_ATTR = "__log_context__"

SERIALIZATION_ERROR = "<error>"

_COMPACT: tuple[str, str] = (",", ":")

ArgFormatter = Callable[[Any], str]


@dataclass(frozen=True)
class LogOptions:
    """Configuration for :func:`wrap_logging`.

    Attributes:
        args: Log argument values. A mapping of argument position (receiver
            excluded) or parameter name to a formatter also enables logging
            and overrides rendering for those arguments.
        condition: Predicate over the call arguments; False skips logging.
        correlate: Allocate a correlation id even when ``timed`` is off.
        debug: Log at debug severity.
        enter: Summary of the call arguments, prepended to the entry line.
        exit: Summary of the result, appended to the completion line.
        prefix: Replaces the computed prefix; receives a LogContext.
        sanitize: ``(key, value) -> value`` redactor for structured arguments.
        timed: Measure and log elapsed time.
    """

    args: bool | Mapping[int | str, ArgFormatter] = True
    condition: Callable[..., bool] | None = None
    correlate: bool = False
    debug: bool = False
    enter: Callable[..., str] | None = None
    exit: Callable[[Any], str] | None = None
    prefix: Callable[..., str] | None = None
    sanitize: Callable[[str, Any], Any] | None = None
    timed: bool = True


def log_name(fn: Callable[[Any, str], str]) -> Callable[[C], C]:
    """Class decorator: compute the logged name of instances.

    ``fn(instance, default_name)`` replaces the default (class name) in
    every call-log prefix for instances of the class and its subclasses.
    """

    def decorator(cls: C) -> C:
        setattr(cls, LOG_NAME_ATTR, fn)
        return cls

    return decorator


def get_caller_context(method: Callable[..., Any]) -> CallerContext | None:
    """Context of the latest logged call of ``method`` (bound or plain).

    There is one slot per wrapped method, shared by all instances, so
    recursive or overlapping calls see whichever call started last.
    """
    fn = getattr(method, "__func__", method)
    return getattr(fn, LOG_CONTEXT_ATTR, None)


def _parameter_names(fn: Callable[..., Any]) -> list[str]:
    """Positional parameter names, receiver excluded."""
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return []
    names = [
        p.name
        for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    return names[1:]


def _sanitized(sanitize: Callable[[str, Any], Any], key: str, value: Any) -> Any:
    value = sanitize(key, value)
    if isinstance(value, dict):
        return {k: _sanitized(sanitize, str(k), v) for k, v in value.items()}
    if isinstance(value, list):
        return [_sanitized(sanitize, str(i), v) for i, v in enumerate(value)]
    return value


def _object_fields(value: Any) -> Any:
    if hasattr(value, "__dict__"):
        return vars(value)
    raise TypeError(f"Unable to serialize {type(value).__name__}")


def to_loggable(value: Any, sanitize: Callable[[str, Any], Any] | None = None) -> str:
    """Render one argument for a log line.

    Scalars use ``str()``; everything else becomes compact JSON. Values that
    cannot be serialized (circular, opaque) render as ``<error>``.
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return str(value)
    try:
        data = to_jsonable_python(value, fallback=_object_fields)
        if sanitize is not None:
            data = _sanitized(sanitize, "", data)
        return json.dumps(data, separators=_COMPACT)
    except Exception:
        return SERIALIZATION_ERROR


def _format_arg(
    value: Any,
    formatter: ArgFormatter | None,
    sanitize: Callable[[str, Any], Any] | None,
) -> str:
    if formatter is None:
        return to_loggable(value, sanitize)
    try:
        return str(formatter(value))
    except Exception:
        return SERIALIZATION_ERROR


def _format_params(
    options: LogOptions,
    names: list[str],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> str:
    formatters: Mapping[int | str, ArgFormatter] = (
        options.args if isinstance(options.args, Mapping) else {}
    )
    rendered: list[str] = []
    for index, value in enumerate(args):
        name = names[index] if index < len(names) else None
        formatter = formatters.get(index) or (formatters.get(name) if name else None)
        loggable = _format_arg(value, formatter, options.sanitize)
        rendered.append(f"{name}={loggable}" if name else loggable)
    for name, value in kwargs.items():
        # Positional parameters passed by keyword keep their positional formatter
        index = names.index(name) if name in names else None
        formatter = (formatters.get(index) if index is not None else None) or formatters.get(name)
        loggable = _format_arg(value, formatter, options.sanitize)
        rendered.append(f"{name}={loggable}")
    return ", ".join(rendered)


def _enter_summary(enter: Callable[..., str], *args: Any, **kwargs: Any) -> str:
    try:
        return enter(*args, **kwargs)
    except Exception as ex:
        return f"@log.enter error: {ex}"


def _exit_summary(exit: Callable[[Any], str] | None, result: Any) -> str:
    if exit is None:
        return ""
    try:
        return exit(result)
    except Exception as ex:
        return f" @log.exit error: {ex}"


def _instance_name(sink: TraceSink, instance: Any) -> str:
    if instance is None:
        return ""
    name = sink.to_loggable_name(instance)
    naming = getattr(type(instance), LOG_NAME_ATTR, None)
    if naming is not None:
        try:
            name = naming(instance, name)
        except Exception as ex:
            name = f"{name} @log_name error: {ex}"
    return name


def _timing(start: float | None) -> str:
    return f" • {elapsed_ms(start)} ms" if start is not None else ""


async def _scoped(awaitable: Awaitable[Any], correlation_id: int) -> Any:
    with correlation_scope(correlation_id):
        return await awaitable


def _completed(start: float | None, exit: Callable[[Any], str] | None, result: Any) -> str:
    return f"completed{_timing(start)}{_exit_summary(exit, result)}"


class _CompletionLogger:
    """Logs the settlement of one call's deferred result."""

    __slots__ = ("_sink", "_caller", "_start", "_exit", "_debug")

    def __init__(
        self,
        sink: TraceSink,
        caller: CallerContext,
        start: float | None,
        exit: Callable[[Any], str] | None,
        debug: bool,
    ) -> None:
        self._sink = sink
        self._caller = caller
        self._start = start
        self._exit = exit
        self._debug = debug

    def _log(self, message: str) -> None:
        if self._debug:
            self._sink.debug(self._caller, message)
        else:
            self._sink.log(self._caller, message)

    def completed(self, result: Any) -> None:
        self._log(_completed(self._start, self._exit, result))

    def failed(self, ex: BaseException) -> None:
        self._sink.error(ex, self._caller, f"failed{_timing(self._start)}")

    def cancelled(self) -> None:
        self._log(f"cancelled{_timing(self._start)}")

    def on_done(self, future: asyncio.Future[Any]) -> None:
        if future.cancelled():
            self.cancelled()
            return
        ex = future.exception()
        if ex is not None:
            self.failed(ex)
        else:
            self.completed(future.result())

    async def observe(self, awaitable: Awaitable[Any]) -> Any:
        try:
            with correlation_scope(self._caller.correlation_id):
                result = await awaitable
        except asyncio.CancelledError:
            self.cancelled()
            raise
        except Exception as ex:
            self.failed(ex)
            raise
        self.completed(result)
        return result


def wrap_logging(
    fn: Callable[P, R],
    options: LogOptions | None = None,
) -> Callable[P, R]:
    """Wrap an instance method with call logging.

    The wrapper returns exactly what ``fn`` returns. Futures get a done
    callback and are returned as-is; other awaitables (coroutines) are
    returned inside a coroutine that awaits them and logs on the way out.
    Exceptions always reach the caller unchanged.

    While ``fn`` runs (for coroutines: until they finish), the call's
    correlation id is bound via :func:`correlation_scope`, so records logged
    from the method body carry the same ``correlation_id`` as its call lines.
    """
    require_method(fn)
    opts = options or LogOptions()
    key = fn.__name__
    names = _parameter_names(fn)

    @functools.wraps(fn)
    def logged(self: Any, *args: Any, **kwargs: Any) -> Any:
        sink = get_sink()
        if not sink.is_enabled(opts.debug) or (
            opts.condition is not None and not opts.condition(*args, **kwargs)
        ):
            return fn(self, *args, **kwargs)  # type: ignore[arg-type]

        instance_name = _instance_name(sink, self)
        qualified = f"{instance_name}.{key}" if instance_name else key

        correlation_id: int | None = None
        if opts.correlate or opts.timed:
            correlation_id = next_correlation_id()
            prefix = f"[{correlation_id:x}] {qualified}"
        else:
            prefix = qualified

        if opts.prefix is not None:
            context = LogContext(
                prefix=prefix,
                name=key,
                instance=self,
                instance_name=instance_name,
                id=correlation_id,
            )
            try:
                prefix = opts.prefix(context, *args, **kwargs)
            except Exception as ex:
                prefix = f"{prefix} @log.prefix error: {ex}"

        caller = CallerContext(correlation_id=correlation_id, prefix=prefix)
        setattr(logged, LOG_CONTEXT_ATTR, caller)

        if opts.args is False or not (args or kwargs):
            enter = _enter_summary(opts.enter, *args, **kwargs) if opts.enter else None
            if opts.debug:
                sink.debug(caller, enter)
            else:
                sink.log(caller, enter)
        else:
            params = _format_params(opts, names, args, kwargs)
            if opts.enter is not None:
                params = f"{_enter_summary(opts.enter, *args, **kwargs)} {params}"
            if opts.debug:
                sink.debug(caller, params)
            else:
                sink.log_with_debug_params(caller, params)

        if not opts.timed and opts.exit is None:
            with correlation_scope(correlation_id):
                result = fn(self, *args, **kwargs)  # type: ignore[arg-type]
            if correlation_id is not None and inspect.iscoroutine(result):
                return _scoped(result, correlation_id)
            return result

        start = start_marker() if opts.timed else None
        with correlation_scope(correlation_id):
            result = fn(self, *args, **kwargs)  # type: ignore[arg-type]
        completion = _CompletionLogger(sink, caller, start, opts.exit, opts.debug)

        if isinstance(result, asyncio.Future):
            result.add_done_callback(completion.on_done)
            return result
        if is_deferred(result):
            return completion.observe(result)

        completion.completed(result)
        return result

    setattr(logged, LOG_CONTEXT_ATTR, None)
    if inspect.iscoroutinefunction(fn):
        inspect.markcoroutinefunction(logged)
    return logged  # type: ignore[return-value]


def with_logging(
    options: LogOptions | None = None,
    **kwargs: Any,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator form of :func:`wrap_logging`.

    Accepts a LogOptions instance, its fields as keyword arguments, or both;
    keyword arguments override the matching fields of ``options``.
    """
    opts = replace(options, **kwargs) if options is not None else LogOptions(**kwargs)

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        return wrap_logging(fn, opts)

    return decorator


def with_debug_logging(
    options: LogOptions | None = None,
    **kwargs: Any,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Like :func:`with_logging`, at debug severity."""
    return with_logging(options, **{**kwargs, "debug": True})
