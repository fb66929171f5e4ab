"""Unit tests for dotgraph.cli.errors."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from rich.console import Console
from rich.panel import Panel

from dotgraph.cli.errors import (
    EXIT_CONFIG_ERROR,
    EXIT_GENERAL_ERROR,
    EXIT_SUCCESS,
    CLIError,
    ConfigError,
    error_handler,
)
from dotgraph.exceptions import DotSyntaxError, LexicalError


# ---------------------------------------------------------------------------
# CLIError tests
# ---------------------------------------------------------------------------


class TestCLIError:
    """Tests for the CLIError exception class."""

    def test_default_exit_code(self) -> None:
        err = CLIError("something broke")
        assert err.message == "something broke"
        assert err.exit_code == EXIT_GENERAL_ERROR
        assert str(err) == "something broke"

    def test_custom_exit_code(self) -> None:
        err = CLIError("bad config", exit_code=EXIT_CONFIG_ERROR)
        assert err.exit_code == EXIT_CONFIG_ERROR


class TestConfigError:
    def test_exit_code_is_config(self) -> None:
        err = ConfigError("missing key")
        assert err.exit_code == EXIT_CONFIG_ERROR
        assert err.message == "missing key"

    def test_inherits_cli_error(self) -> None:
        assert issubclass(ConfigError, CLIError)


class TestExitCodes:
    def test_values(self) -> None:
        assert (EXIT_SUCCESS, EXIT_GENERAL_ERROR, EXIT_CONFIG_ERROR) == (0, 1, 2)


# ---------------------------------------------------------------------------
# error_handler context manager
# ---------------------------------------------------------------------------


class TestErrorHandler:
    """Tests for the error_handler context manager."""

    def test_no_exception_passes_through(self) -> None:
        console = MagicMock()
        with error_handler(console=console):
            pass
        console.print.assert_not_called()

    def test_cli_error_exits_with_code(self) -> None:
        console = MagicMock()
        with pytest.raises(SystemExit) as exc_info:
            with error_handler(console=console):
                raise CLIError("boom", exit_code=2)
        assert exc_info.value.code == 2
        console.print.assert_called_once()

    def test_config_error_exits_with_code_2(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            with error_handler(console=MagicMock()):
                raise ConfigError("bad config")
        assert exc_info.value.code == EXIT_CONFIG_ERROR

    def test_parse_error_exits_with_1(self) -> None:
        console = MagicMock()
        with pytest.raises(SystemExit) as exc_info:
            with error_handler(console=console):
                raise DotSyntaxError("Expected '}'", line=3, column=1)
        assert exc_info.value.code == EXIT_GENERAL_ERROR
        panel = console.print.call_args[0][0]
        assert isinstance(panel, Panel)
        assert "DotSyntaxError" in str(panel.title)

    def test_parse_error_message_is_escaped(self) -> None:
        console = Console(record=True, width=120)
        with pytest.raises(SystemExit):
            with error_handler(console=console):
                raise LexicalError("Unexpected character '['", line=1, column=5)
        text = console.export_text()
        assert "Unexpected character '['" in text
        assert "line 1, column 5" in text

    def test_generic_exception_exits_with_1(self) -> None:
        console = MagicMock()
        with pytest.raises(SystemExit) as exc_info:
            with error_handler(console=console):
                raise RuntimeError("unexpected")
        assert exc_info.value.code == EXIT_GENERAL_ERROR
        console.print.assert_called_once()

    def test_keyboard_interrupt_exits_130(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            with error_handler(console=MagicMock()):
                raise KeyboardInterrupt()
        assert exc_info.value.code == 130

    def test_uses_default_console_when_none(self) -> None:
        with pytest.raises(SystemExit):
            with error_handler():
                raise CLIError("test")
