"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import logging
import sys
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from structlog.testing import capture_logs

# Insert local src directory at the beginning of sys.path
# This ensures that the local calltrace package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of calltrace modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("calltrace"):
        del sys.modules[module_name]

from calltrace.core.sink import TraceLevel, TraceSink, set_sink  # noqa: E402


class RecordingNotifier:
    """Notifier double that records messages and picks a scripted action."""

    def __init__(self, choice: str | None = None) -> None:
        self.choice = choice
        self.messages: list[tuple[str, tuple[str, ...]]] = []
        self.outputs: list[Path | None] = []

    async def show_error_message(self, message: str, *actions: str) -> str | None:
        self.messages.append((message, actions))
        return self.choice if self.choice in actions else None

    def show_output(self, log_file: Path | None) -> None:
        self.outputs.append(log_file)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def sink(notifier: RecordingNotifier) -> Generator[TraceSink, None, None]:
    """Install a debug-level default sink for the duration of a test."""
    fresh = TraceSink(TraceLevel.DEBUG, notifier=notifier)
    previous = set_sink(fresh)
    yield fresh
    set_sink(previous)


@pytest.fixture
def logs() -> Generator[list[dict[str, Any]], None, None]:
    """Capture structlog events emitted during the test."""
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
    with capture_logs() as captured:
        yield captured
