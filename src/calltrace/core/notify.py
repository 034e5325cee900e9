"""User-facing notifications for command failures.

The host application owns the real UI. :class:`Notifier` is the contract the
command registrar talks to; :class:`ConsoleNotifier` is the terminal
fallback built on the shared Rich console.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape

# Console for output
_console = Console(stderr=True)


def get_console() -> Console:
    """Get the shared Rich console instance."""
    return _console


@runtime_checkable
class Notifier(Protocol):
    """Surface errors to a human."""

    async def show_error_message(self, message: str, *actions: str) -> str | None:
        """Show ``message``; return the chosen action, or None if dismissed."""
        ...

    def show_output(self, log_file: Path | None) -> None:
        """Reveal the full diagnostic output."""
        ...


class ConsoleNotifier:
    """Non-interactive notifier that writes to stderr.

    Actions are listed but never chosen, so ``show_error_message`` always
    returns None.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or _console

    async def show_error_message(self, message: str, *actions: str) -> str | None:
        self._console.print(f"[red]✗[/red] {escape(message)}")
        if actions:
            self._console.print(f"  [dim]({', '.join(escape(a) for a in actions)})[/dim]")
        return None

    def show_output(self, log_file: Path | None) -> None:
        if log_file is None:
            self._console.print("  [dim]Full output was written to the console log.[/dim]")
        else:
            self._console.print(f"  See full log: [cyan]{escape(str(log_file))}[/cyan]")
