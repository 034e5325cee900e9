"""Tests for the severity-gated trace sink."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from calltrace.core.context import CallerContext
from calltrace.core.sink import TraceLevel, TraceSink, get_sink, set_sink


class Repository:
    pass


def _events(logs: list[dict[str, Any]]) -> list[tuple[str, str]]:
    return [(e["log_level"], e["event"]) for e in logs]


class TestTraceLevel:
    """Threshold parsing and ordering."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("silent", TraceLevel.SILENT),
            ("Verbose", TraceLevel.VERBOSE),
            ("DEBUG", TraceLevel.DEBUG),
            (TraceLevel.NORMAL, TraceLevel.NORMAL),
        ],
    )
    def test_parse(self, value: str | TraceLevel, expected: TraceLevel) -> None:
        assert TraceLevel.parse(value) is expected

    def test_parse_unknown(self) -> None:
        with pytest.raises(ValueError, match="loud"):
            TraceLevel.parse("loud")

    def test_ordering(self) -> None:
        assert TraceLevel.SILENT < TraceLevel.NORMAL < TraceLevel.VERBOSE < TraceLevel.DEBUG


class TestIsEnabled:
    """Which wrappers log at which threshold."""

    @pytest.mark.parametrize(
        ("level", "normal", "debug"),
        [
            (TraceLevel.SILENT, False, False),
            (TraceLevel.NORMAL, False, False),
            (TraceLevel.VERBOSE, True, False),
            (TraceLevel.DEBUG, True, True),
        ],
    )
    def test_thresholds(self, level: TraceLevel, normal: bool, debug: bool) -> None:
        sink = TraceSink(level)

        assert sink.is_enabled() is normal
        assert sink.is_enabled(debug=True) is debug

    def test_level_setter_accepts_names(self) -> None:
        sink = TraceSink()
        sink.level = "debug"

        assert sink.level is TraceLevel.DEBUG
        assert sink.is_enabled(debug=True)


class TestEmission:
    """Lines emitted per threshold."""

    def test_normal_emits_errors_only(self, logs: list[dict[str, Any]]) -> None:
        sink = TraceSink(TraceLevel.NORMAL)

        sink.log("[1] Repo.save")
        sink.debug("[1] Repo.save")
        sink.log_with_debug_params("[1] Repo.save", "id=1")
        sink.error(RuntimeError("x"), "[1] Repo.save", "failed • 2 ms")

        assert _events(logs) == [("error", "[1] Repo.save failed • 2 ms")]

    def test_verbose_hides_debug_and_params(self, logs: list[dict[str, Any]]) -> None:
        sink = TraceSink(TraceLevel.VERBOSE)

        sink.log("[1] Repo.save", "completed • 0 ms")
        sink.debug("[2] Repo.load")
        sink.log_with_debug_params("[3] Repo.find", "id=1")

        assert _events(logs) == [
            ("info", "[1] Repo.save completed • 0 ms"),
            ("info", "[3] Repo.find"),
        ]

    def test_debug_emits_everything(self, logs: list[dict[str, Any]]) -> None:
        sink = TraceSink(TraceLevel.DEBUG)

        sink.debug("[2] Repo.load")
        sink.log_with_debug_params("[3] Repo.find", "id=1")

        assert _events(logs) == [
            ("debug", "[2] Repo.load"),
            ("info", "[3] Repo.find id=1"),
        ]

    def test_silent_drops_errors(self, logs: list[dict[str, Any]]) -> None:
        sink = TraceSink(TraceLevel.SILENT)

        sink.error(RuntimeError("x"), "cmd")

        assert logs == []

    def test_error_carries_exception(self, logs: list[dict[str, Any]]) -> None:
        ex = KeyError("missing")

        TraceSink().error(ex)

        assert logs[0]["exc_info"] is ex
        assert logs[0]["event"] == ""

    def test_caller_context_adds_correlation_id(self, logs: list[dict[str, Any]]) -> None:
        sink = TraceSink(TraceLevel.VERBOSE)

        sink.log(CallerContext(correlation_id=26, prefix="[1a] Repo.save"), "retrying")
        sink.log(CallerContext(correlation_id=None, prefix="Repo.save"), "no id")

        assert logs[0]["event"] == "[1a] Repo.save retrying"
        assert logs[0]["correlation_id"] == "1a"
        assert "correlation_id" not in logs[1]

    def test_logger_name(self, logs: list[dict[str, Any]]) -> None:
        TraceSink(TraceLevel.VERBOSE, logger_name="myapp.calls").log("hello")

        assert logs[0]["logger"] == "myapp.calls"


class TestHelpers:
    """Naming, output pointers and the default sink."""

    def test_to_loggable_name(self) -> None:
        assert TraceSink.to_loggable_name(Repository()) == "Repository"
        assert TraceSink.to_loggable_name(Repository) == "Repository"

    def test_show_output_passes_log_file(
        self, notifier: Any, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        log_file = Path("/var/log/calls.log")
        monkeypatch.setattr("calltrace.core.sink.get_log_file_path", lambda: log_file)

        TraceSink(notifier=notifier).show_output()

        assert notifier.outputs == [log_file]

    def test_set_sink_returns_previous(self) -> None:
        original = get_sink()
        replacement = TraceSink(TraceLevel.DEBUG)

        try:
            assert set_sink(replacement) is original
            assert get_sink() is replacement
        finally:
            set_sink(original)
