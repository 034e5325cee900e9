"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence and error handling
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from calltrace.config.loader import (
    GLOBAL_CONFIG_PATH,
    PROJECT_CONFIG_NAME,
    _deep_merge,
    _load_yaml,
    load_config,
)
from calltrace.config.models import LoggingConfig, TraceConfig
from calltrace.core.errors import ConfigError, ErrorCode


@pytest.fixture
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty project dir with no global config."""
    monkeypatch.setattr("calltrace.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global.yaml")
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        """Returns empty dict when file doesn't exist."""
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        """Loads valid YAML content."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("trace:\n  level: verbose\n")

        assert _load_yaml(yaml_file) == {"trace": {"level": "verbose"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        """Returns empty dict for empty file."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ConfigError for invalid YAML syntax."""
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("trace:\n  level:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        """Top-level lists are rejected."""
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- trace\n- logging\n")

        with pytest.raises(ConfigError, match="mapping"):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        """Override values replace base values."""
        assert _deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_merge(self) -> None:
        """Nested dicts are merged recursively."""
        base = {"trace": {"level": "normal", "namespace": "app"}}
        override = {"trace": {"level": "debug"}}

        assert _deep_merge(base, override) == {"trace": {"level": "debug", "namespace": "app"}}

    def test_override_replaces_non_dict(self) -> None:
        """Non-dict override replaces dict base."""
        base: dict[str, Any] = {"a": {"nested": 1}}

        assert _deep_merge(base, {"a": "simple"}) == {"a": "simple"}

    def test_does_not_mutate_base(self) -> None:
        """Base dict is not mutated."""
        base = {"a": 1}
        _deep_merge(base, {"b": 2})

        assert base == {"a": 1}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_returns_default_config_when_no_files(self, isolated: Path) -> None:
        """Returns default config when no config files exist."""
        config = load_config()

        assert config.logging.level == "INFO"
        assert config.trace.level == "normal"
        assert config.trace.namespace == "calltrace"

    def test_loads_project_config_from_cwd(self, isolated: Path) -> None:
        """Picks up calltrace.yaml in the working directory."""
        (isolated / PROJECT_CONFIG_NAME).write_text("trace:\n  level: verbose\n")

        assert load_config().trace.level == "verbose"

    def test_loads_explicit_config_path(self, isolated: Path) -> None:
        """An explicit path replaces the working-directory lookup."""
        (isolated / PROJECT_CONFIG_NAME).write_text("trace:\n  level: verbose\n")
        explicit = isolated / "other.yaml"
        explicit.write_text("trace:\n  level: debug\n")

        assert load_config(explicit).trace.level == "debug"

    def test_missing_explicit_path_raises(self, isolated: Path) -> None:
        """An explicit path must exist."""
        with pytest.raises(ConfigError) as exc_info:
            load_config(isolated / "missing.yaml")

        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_project_overrides_global(self, isolated: Path) -> None:
        """Project YAML is merged over global YAML key by key."""
        (isolated / "global.yaml").write_text("trace:\n  level: debug\n  namespace: shared\n")
        (isolated / PROJECT_CONFIG_NAME).write_text("trace:\n  level: silent\n")

        config = load_config()

        assert config.trace.level == "silent"
        assert config.trace.namespace == "shared"

    def test_env_vars_override_yaml(
        self, isolated: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Environment variables override YAML config."""
        (isolated / PROJECT_CONFIG_NAME).write_text("trace:\n  level: verbose\n")
        monkeypatch.setenv("CALLTRACE__TRACE__LEVEL", "DEBUG")

        assert load_config().trace.level == "debug"

    def test_kwargs_override_all(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Keyword arguments override everything."""
        monkeypatch.setenv("CALLTRACE__LOGGING__LEVEL", "WARNING")

        config = load_config(
            logging=LoggingConfig(level="ERROR"),
            trace=TraceConfig(namespace="myapp"),
        )

        assert config.logging.level == "ERROR"
        assert config.trace.namespace == "myapp"

    def test_raises_config_error_for_invalid_value(self, isolated: Path) -> None:
        """Raises ConfigError naming the offending field."""
        (isolated / PROJECT_CONFIG_NAME).write_text("trace:\n  level: loud\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config()

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert exc_info.value.details["field"] == "trace.level"


class TestGlobalConfigPath:
    """Tests for GLOBAL_CONFIG_PATH constant."""

    def test_is_in_user_config(self) -> None:
        """Path is in user config directory."""
        assert isinstance(GLOBAL_CONFIG_PATH, Path)
        assert GLOBAL_CONFIG_PATH.parts[-2:] == ("calltrace", "config.yaml")
