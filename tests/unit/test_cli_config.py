"""Unit tests for dotgraph.cli.config."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest

from dotgraph.cli.config import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_CONFIG_FILE,
    DotGraphConfig,
    _apply_env_overrides,
    default_config_toml,
    write_default_config,
    load_config,
)
from dotgraph.cli.errors import CLIError, ConfigError
from dotgraph.parser.api import DEFAULT_MAX_INPUT_BYTES, ParserConfig
from dotgraph.parser.grammar import MAX_NESTING_LIMIT


# ---------------------------------------------------------------------------
# DotGraphConfig model tests
# ---------------------------------------------------------------------------


class TestDotGraphConfig:
    """Tests for the DotGraphConfig pydantic model."""

    def test_defaults(self) -> None:
        cfg = DotGraphConfig()
        assert cfg.log_level == "INFO"
        assert cfg.log_file is None
        assert cfg.max_input_bytes == DEFAULT_MAX_INPUT_BYTES
        assert cfg.max_nesting == 64
        assert cfg.indent == 4

    def test_custom_values(self) -> None:
        cfg = DotGraphConfig(
            log_level="DEBUG",
            log_file=Path("/tmp/dotgraph.log"),
            max_nesting=8,
            indent=2,
        )
        assert cfg.log_level == "DEBUG"
        assert cfg.log_file == Path("/tmp/dotgraph.log")
        assert cfg.max_nesting == 8
        assert cfg.indent == 2

    def test_extra_fields_ignored(self) -> None:
        cfg = DotGraphConfig(unknown_field="value")
        assert not hasattr(cfg, "unknown_field")

    def test_log_file_is_path(self) -> None:
        cfg = DotGraphConfig(log_file="/tmp/x.log")
        assert isinstance(cfg.log_file, Path)

    def test_indent_bounds(self) -> None:
        with pytest.raises(ValueError):
            DotGraphConfig(indent=17)

    def test_max_nesting_bounded(self) -> None:
        with pytest.raises(ValueError):
            DotGraphConfig(max_nesting=MAX_NESTING_LIMIT + 1)

    def test_parser_config(self) -> None:
        cfg = DotGraphConfig(max_input_bytes=1024, max_nesting=3)
        assert cfg.parser_config() == ParserConfig(max_input_bytes=1024, max_nesting=3)


# ---------------------------------------------------------------------------
# Environment override tests
# ---------------------------------------------------------------------------


class TestEnvOverrides:
    def test_apply_known_field(self) -> None:
        data: dict = {}
        with patch.dict(os.environ, {"DOTGRAPH_MAX_NESTING": "16"}):
            result = _apply_env_overrides(data)
        assert result["max_nesting"] == "16"

    def test_ignore_unknown_field(self) -> None:
        data: dict = {}
        with patch.dict(os.environ, {"DOTGRAPH_UNKNOWN_THING": "val"}):
            result = _apply_env_overrides(data)
        assert "unknown_thing" not in result

    def test_env_overrides_existing(self) -> None:
        data = {"indent": 2}
        with patch.dict(os.environ, {"DOTGRAPH_INDENT": "8"}):
            result = _apply_env_overrides(data)
        assert result["indent"] == "8"

    def test_multiple_overrides(self) -> None:
        data: dict = {}
        env = {
            "DOTGRAPH_LOG_LEVEL": "DEBUG",
            "DOTGRAPH_MAX_INPUT_BYTES": "2048",
        }
        with patch.dict(os.environ, env):
            result = _apply_env_overrides(data)
        assert result["log_level"] == "DEBUG"
        assert result["max_input_bytes"] == "2048"


# ---------------------------------------------------------------------------
# load_config tests
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_load_no_file(self, tmp_path: Path) -> None:
        """Returns defaults when no config file exists."""
        cfg = load_config(project_dir=tmp_path)
        assert cfg == DotGraphConfig()

    def test_load_from_toml(self, tmp_path: Path) -> None:
        config_dir = tmp_path / DEFAULT_CONFIG_DIR
        config_dir.mkdir()
        config_file = config_dir / DEFAULT_CONFIG_FILE
        config_file.write_text(
            '[general]\nlog_level = "WARNING"\n\n[parser]\nmax_nesting = 10\n'
        )
        cfg = load_config(project_dir=tmp_path)
        assert cfg.log_level == "WARNING"
        assert cfg.max_nesting == 10

    def test_load_explicit_path(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("indent = 1\n")
        cfg = load_config(config_path=config_file)
        assert cfg.indent == 1

    def test_explicit_path_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(config_path=tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.toml"
        config_file.write_text("indent = = 3\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(config_path=config_file)
        assert "Invalid TOML" in exc_info.value.message

    def test_invalid_value(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.toml"
        config_file.write_text("max_nesting = 0\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(config_path=config_file)
        assert exc_info.value.exit_code == 2

    def test_env_beats_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("max_nesting = 10\n")
        with patch.dict(os.environ, {"DOTGRAPH_MAX_NESTING": "20"}):
            cfg = load_config(config_path=config_file)
        assert cfg.max_nesting == 20


# ---------------------------------------------------------------------------
# default_config_toml tests
# ---------------------------------------------------------------------------


class TestDefaultConfigToml:
    def test_is_valid_toml(self) -> None:
        data = tomllib.loads(default_config_toml())
        assert data["general"]["log_level"] == "INFO"
        assert data["parser"]["max_nesting"] == 64

    def test_loads_as_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "defaults.toml"
        config_file.write_text(default_config_toml())
        assert load_config(config_path=config_file) == DotGraphConfig()


class TestWriteDefaultConfig:
    def test_creates_config_dir(self, tmp_path: Path) -> None:
        path = write_default_config(tmp_path)
        assert path == tmp_path / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE
        assert path.read_text(encoding="utf-8") == default_config_toml()

    def test_refuses_to_overwrite(self, tmp_path: Path) -> None:
        path = write_default_config(tmp_path)
        path.write_text("indent = 2\n")
        with pytest.raises(CLIError) as exc_info:
            write_default_config(tmp_path)
        assert "already exists" in exc_info.value.message
        assert path.read_text() == "indent = 2\n"

    def test_force_overwrites(self, tmp_path: Path) -> None:
        path = write_default_config(tmp_path)
        path.write_text("indent = 2\n")
        write_default_config(tmp_path, force=True)
        assert load_config(project_dir=tmp_path) == DotGraphConfig()

    def test_not_a_directory(self, tmp_path: Path) -> None:
        with pytest.raises(CLIError):
            write_default_config(tmp_path / "missing")
