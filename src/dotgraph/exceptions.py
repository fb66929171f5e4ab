"""Exception hierarchy for dotgraph.

All exceptions raised by the library are subclasses of ``DotGraphError``.
Parsing failures share the ``ParseError`` base so callers can catch any
malformed-input condition with a single except clause.

Error taxonomy:

    ParseError            malformed DOT input (base)
        LexicalError      unknown character, unterminated string or comment
        DotSyntaxError    token stream matches no grammar production
        LimitExceededError input size or subgraph nesting limit breached

The AST → model converter never raises: duplicate node IDs and undeclared
edge endpoints are resolved silently.
"""
from __future__ import annotations


class DotGraphError(Exception):
    """Base class for all dotgraph exceptions."""


class ParseError(DotGraphError):
    """Raised when DOT source cannot be turned into a ``Graph``.

    Attributes:
        message:  Human-readable description of the problem.
        line:     1-based line number where the error occurred.
                  ``0`` means the line could not be determined.
        column:   1-based column on that line (``0`` if unknown).
        snippet:  The offending source line (up to 80 characters).
    """

    def __init__(
        self,
        message: str,
        line: int = 0,
        column: int = 0,
        snippet: str = "",
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        self.snippet = snippet
        if line and column:
            loc = f" (line {line}, column {column})"
        elif line:
            loc = f" (line {line})"
        else:
            loc = ""
        snip = f": {snippet!r}" if snippet else ""
        super().__init__(f"{message}{loc}{snip}")


class LexicalError(ParseError):
    """The lexer met a character or construct it cannot tokenize."""


class DotSyntaxError(ParseError):
    """The token stream does not match the DOT grammar.

    Attributes:
        expected: Token descriptions that would have allowed parsing to
                  continue at the failure point, sorted for stable output.
        found:    Description of the token actually present there.
    """

    def __init__(
        self,
        message: str,
        line: int = 0,
        column: int = 0,
        snippet: str = "",
        *,
        expected: tuple[str, ...] = (),
        found: str = "",
    ) -> None:
        self.expected = expected
        self.found = found
        super().__init__(message, line=line, column=column, snippet=snippet)


class LimitExceededError(ParseError):
    """Input exceeded a configured parser limit.

    Attributes:
        limit:  Name of the limit (``"max_input_bytes"`` or ``"max_nesting"``).
        value:  The configured bound that was exceeded.
    """

    def __init__(self, limit: str, value: int, message: str, line: int = 0) -> None:
        self.limit = limit
        self.value = value
        super().__init__(message, line=line)
