"""Unit tests for dotgraph.cli.logging_setup."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from dotgraph import parse
from dotgraph.cli.logging_setup import LOGGER_NAME, setup_logging


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def teardown_method(self) -> None:
        """Clean up the dotgraph logger after each test."""
        logger = logging.getLogger(LOGGER_NAME)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)

    def test_returns_logger(self) -> None:
        logger = setup_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "dotgraph"

    def test_default_level_is_info(self) -> None:
        assert setup_logging().level == logging.INFO

    def test_debug_level(self) -> None:
        assert setup_logging(level="DEBUG").level == logging.DEBUG

    def test_case_insensitive_level(self) -> None:
        assert setup_logging(level="warning").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self) -> None:
        assert setup_logging(level="chatty").level == logging.INFO

    def test_has_rich_handler(self) -> None:
        logger = setup_logging()
        rich_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1

    def test_no_file_handler_by_default(self) -> None:
        logger = setup_logging()
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert file_handlers == []

    def test_file_handler_creates_parent_dirs(self, tmp_path: Path) -> None:
        log_file = tmp_path / "subdir" / "deep" / "dotgraph.log"
        setup_logging(log_file=log_file)
        assert log_file.parent.exists()

    def test_file_handler_format_has_timestamp(self, tmp_path: Path) -> None:
        logger = setup_logging(log_file=tmp_path / "dotgraph.log")
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        fmt = file_handlers[0].formatter
        assert fmt is not None
        assert "asctime" in fmt._fmt

    def test_clears_existing_handlers(self) -> None:
        """Calling setup_logging twice doesn't duplicate handlers."""
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_library_debug_reaches_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "dotgraph.log"
        logger = setup_logging(
            level="DEBUG",
            log_file=log_file,
            console=Console(stderr=True),
        )
        parse("digraph G { a -> b }")
        for h in logger.handlers:
            h.flush()
        content = log_file.read_text(encoding="utf-8")
        assert "dotgraph.parser.converter" in content
        assert "Converted graph 'G'" in content

    def test_library_debug_hidden_at_info(self, tmp_path: Path) -> None:
        log_file = tmp_path / "dotgraph.log"
        logger = setup_logging(log_file=log_file)
        parse("digraph G { a -> b }")
        for h in logger.handlers:
            h.flush()
        assert log_file.read_text(encoding="utf-8") == ""
