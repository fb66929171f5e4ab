"""Public parsing entry points.

Usage::

    graph = parse(dot_source)

    parser = DotParser(ParserConfig(max_input_bytes=1_000_000))
    graph = parser.parse_file("/path/to/graph.dot")
    # or:
    graph = parser.parse_string(dot_source)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from dotgraph.exceptions import LimitExceededError
from dotgraph.models.graph import Graph
from dotgraph.parser.converter import convert
from dotgraph.parser.grammar import DEFAULT_MAX_NESTING, MAX_NESTING_LIMIT, parse_ast
from dotgraph.parser.lexer import Token, tokenize

logger = logging.getLogger(__name__)

DEFAULT_MAX_INPUT_BYTES = 16 * 1024 * 1024


class ParserConfig(BaseModel):
    """Limits applied when parsing untrusted DOT input."""

    model_config = ConfigDict(frozen=True)

    max_input_bytes: Optional[int] = Field(
        default=DEFAULT_MAX_INPUT_BYTES,
        gt=0,
        description="Largest accepted source size in UTF-8 bytes; None disables the check",
    )
    max_nesting: int = Field(
        default=DEFAULT_MAX_NESTING,
        gt=0,
        le=MAX_NESTING_LIMIT,
        description="Deepest permitted subgraph nesting",
    )


class DotParser:
    """Facade running lexer, grammar parser and converter in sequence.

    Each call creates a fresh lexer and parser, so one instance may be
    shared between threads.
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        self._config = config or ParserConfig()

    @property
    def config(self) -> ParserConfig:
        return self._config

    def parse_string(self, source: str) -> Graph:
        """Parse DOT *source* into a ``Graph``.

        Raises:
            LexicalError:       On characters the lexer cannot tokenize.
            DotSyntaxError:     When the tokens do not form a DOT graph.
            LimitExceededError: When a configured limit is exceeded.
        """
        self._check_size(source)
        ast = parse_ast(source, max_nesting=self._config.max_nesting)
        logger.debug("Parsed %d top-level statements", len(ast.stmts))
        return convert(ast)

    def parse_file(self, path: str | Path) -> Graph:
        """Read a UTF-8 DOT file and parse it.

        Raises:
            FileNotFoundError: If *path* does not exist.
            ParseError:        If the file content is not valid DOT.
        """
        path = Path(path)
        logger.debug("Reading %s", path)
        return self.parse_string(path.read_text(encoding="utf-8"))

    def tokenize(self, source: str) -> list[Token]:
        """Tokenize DOT *source* under the same input size limit as parsing.

        Raises:
            LexicalError:       On characters the lexer cannot tokenize.
            LimitExceededError: When *source* exceeds ``max_input_bytes``.
        """
        self._check_size(source)
        return tokenize(source)

    def _check_size(self, source: str) -> None:
        limit = self._config.max_input_bytes
        if limit is None:
            return
        size = len(source.encode("utf-8"))
        if size > limit:
            raise LimitExceededError(
                "max_input_bytes",
                limit,
                f"Input is {size} bytes, exceeding the limit of {limit}",
            )


def parse(source: str) -> Graph:
    """Parse DOT text into a ``Graph`` with default limits."""
    return DotParser().parse_string(source)


def parse_dot_string(source: str, config: ParserConfig | None = None) -> Graph:
    """Parse a DOT source string.  Convenience wrapper around ``DotParser``."""
    return DotParser(config).parse_string(source)


def parse_dot_file(path: str | Path, config: ParserConfig | None = None) -> Graph:
    """Parse a DOT file from disk.  Convenience wrapper around ``DotParser``."""
    return DotParser(config).parse_file(path)
