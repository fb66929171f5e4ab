"""DOT lexer: source text to a flat token list.

Handles:
- Line comments ``// ...``, block comments ``/* ... */`` (no nesting) and
  ``#`` lines (C-preprocessor output, discarded as Graphviz does)
- Double-quoted strings; ``\\"`` and ``\\\\`` are escapes, any other
  backslash is dropped and the following character kept verbatim
- Identifiers: a letter or ``_`` followed by letters, digits or ``_``
  (Unicode letters/digits as classified by ``str.isalpha``/``str.isalnum``)
- Numerals: ``-? (digits ('.' digits*)? | '.' digits)``
- Edge operators ``->`` and ``--``, matched before a leading ``-`` sign
- Punctuation ``{ } [ ] = ; , : +``

Token types:
    KEYWORD    strict, digraph, graph, subgraph, node, edge
    IDENT      bare identifier
    NUMBER     numeral, raw text kept (sign and decimal point preserved)
    STRING     double-quoted string (escapes decoded)
    ARROW      ->
    DASHDASH   --
    LBRACE     {
    RBRACE     }
    LBRACKET   [
    RBRACKET   ]
    EQUALS     =
    SEMI       ;
    COMMA      ,
    COLON      :
    PLUS       +
    EOF        end of input
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from dotgraph.exceptions import LexicalError


class TT(Enum):  # Token Type
    """Enumeration of all token types produced by the lexer."""
    KEYWORD    = auto()
    IDENT      = auto()
    NUMBER     = auto()
    STRING     = auto()
    ARROW      = auto()
    DASHDASH   = auto()
    LBRACE     = auto()
    RBRACE     = auto()
    LBRACKET   = auto()
    RBRACKET   = auto()
    EQUALS     = auto()
    SEMI       = auto()
    COMMA      = auto()
    COLON      = auto()
    PLUS       = auto()
    EOF        = auto()


# Case-sensitive; ``Node`` or ``nodeX`` are plain identifiers.
KEYWORDS: frozenset[str] = frozenset(
    {"strict", "digraph", "graph", "subgraph", "node", "edge"}
)

_PUNCTUATION: dict[str, TT] = {
    "{": TT.LBRACE,
    "}": TT.RBRACE,
    "[": TT.LBRACKET,
    "]": TT.RBRACKET,
    "=": TT.EQUALS,
    ";": TT.SEMI,
    ",": TT.COMMA,
    ":": TT.COLON,
    "+": TT.PLUS,
}


@dataclass(frozen=True)
class Token:
    """A single lexical token with its type, value, and source location."""
    type: TT
    value: str
    line: int    # 1-based
    column: int  # 1-based
    offset: int  # 0-based index into the source

    def describe(self) -> str:
        """Short human-readable form used in error messages."""
        if self.type is TT.EOF:
            return "end of input"
        if self.type is TT.STRING:
            return f"string {self.value!r}"
        if self.type in (TT.IDENT, TT.NUMBER, TT.KEYWORD):
            return f"{self.type.name.lower()} {self.value!r}"
        return repr(self.value)


class _Lexer:
    """Converts a DOT source string into a flat list of tokens."""

    def __init__(self, source: str) -> None:
        self._src = source
        self._pos = 0
        self._line = 1
        self._line_start = 0
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list (EOF last)."""
        while True:
            self._skip_whitespace_and_comments()
            if self._pos >= len(self._src):
                break
            ch = self._src[self._pos]
            start, line, column = self._pos, self._line, self._column()

            if ch == '"':
                value = self._read_string()
                self._emit(TT.STRING, value, line, column, start)
            elif ch == '-' and self._peek() == '>':
                self._pos += 2
                self._emit(TT.ARROW, "->", line, column, start)
            elif ch == '-' and self._peek() == '-':
                self._pos += 2
                self._emit(TT.DASHDASH, "--", line, column, start)
            elif ch in _PUNCTUATION:
                self._pos += 1
                self._emit(_PUNCTUATION[ch], ch, line, column, start)
            elif self._starts_number():
                value = self._read_number()
                self._emit(TT.NUMBER, value, line, column, start)
            elif self._is_ident_start(ch):
                value = self._read_ident()
                tt = TT.KEYWORD if value in KEYWORDS else TT.IDENT
                self._emit(tt, value, line, column, start)
            else:
                self._raise(f"Unexpected character {ch!r}", line, column)

        self._emit(TT.EOF, "", self._line, self._column(), self._pos)
        return self._tokens

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _emit(self, tt: TT, value: str, line: int, column: int, offset: int) -> None:
        self._tokens.append(Token(tt, value, line, column, offset))

    def _column(self) -> int:
        return self._pos - self._line_start + 1

    def _peek(self, offset: int = 1, default: str = "") -> str:
        idx = self._pos + offset
        return self._src[idx] if idx < len(self._src) else default

    def _newline(self) -> None:
        """Record a newline at the current position (which is then advanced)."""
        self._line += 1
        self._line_start = self._pos + 1

    def _raise(self, message: str, line: int, column: int) -> None:
        lines = self._src.split("\n")
        snippet = lines[line - 1].strip()[:80] if 1 <= line <= len(lines) else ""
        raise LexicalError(message, line=line, column=column, snippet=snippet)

    def _skip_whitespace_and_comments(self) -> None:
        while self._pos < len(self._src):
            ch = self._src[self._pos]
            if ch in ' \t\r':
                self._pos += 1
            elif ch == '\n':
                self._newline()
                self._pos += 1
            elif ch == '/' and self._peek() == '/':
                self._skip_to_line_end()
            elif ch == '/' and self._peek() == '*':
                self._skip_block_comment()
            elif ch == '#':
                self._skip_to_line_end()
            else:
                break

    def _skip_to_line_end(self) -> None:
        while self._pos < len(self._src) and self._src[self._pos] != '\n':
            self._pos += 1

    def _skip_block_comment(self) -> None:
        line, column = self._line, self._column()
        self._pos += 2
        while self._pos < len(self._src):
            ch = self._src[self._pos]
            if ch == '*' and self._peek() == '/':
                self._pos += 2
                return
            if ch == '\n':
                self._newline()
            self._pos += 1
        self._raise("Unterminated block comment", line, column)

    def _read_string(self) -> str:
        """Read a double-quoted string and return its unescaped value."""
        line, column = self._line, self._column()
        self._pos += 1  # opening quote
        chars: list[str] = []
        while self._pos < len(self._src):
            ch = self._src[self._pos]
            if ch == '"':
                self._pos += 1
                return ''.join(chars)
            if ch == '\\' and self._pos + 1 < len(self._src):
                self._pos += 1
                nxt = self._src[self._pos]
                if nxt == '\n':
                    self._newline()
                chars.append(nxt)
                self._pos += 1
                continue
            if ch == '\n':
                self._newline()
            chars.append(ch)
            self._pos += 1
        self._raise("Unterminated string literal", line, column)
        return ""  # unreachable, for type checkers

    def _starts_number(self) -> bool:
        ch = self._src[self._pos]
        if ch == '-':
            nxt = self._peek(1)
            return _is_digit(nxt) or (nxt == '.' and _is_digit(self._peek(2)))
        if ch == '.':
            return _is_digit(self._peek(1))
        return _is_digit(ch)

    def _read_number(self) -> str:
        start = self._pos
        if self._src[self._pos] == '-':
            self._pos += 1
        self._read_digits()
        if self._pos < len(self._src) and self._src[self._pos] == '.':
            self._pos += 1
            self._read_digits()
        return self._src[start:self._pos]

    def _read_digits(self) -> None:
        while self._pos < len(self._src) and _is_digit(self._src[self._pos]):
            self._pos += 1

    def _read_ident(self) -> str:
        start = self._pos
        while self._pos < len(self._src) and self._is_ident_body(self._src[self._pos]):
            self._pos += 1
        return self._src[start:self._pos]

    @staticmethod
    def _is_ident_start(ch: str) -> bool:
        return ch.isalpha() or ch == '_'

    @staticmethod
    def _is_ident_body(ch: str) -> bool:
        return ch.isalnum() or ch == '_'


def _is_digit(ch: str) -> bool:
    # Numerals are ASCII-only even though identifiers accept Unicode.
    return ch != "" and ch in "0123456789"


def tokenize(source: str) -> list[Token]:
    """Tokenize DOT *source*.

    Returns:
        The token list, always terminated by a single ``TT.EOF`` token.

    Raises:
        LexicalError: On an unrecognised character or an unterminated
            string or block comment.  No partial token list is returned.
    """
    return _Lexer(source).tokenize()
