"""Recursive-descent DOT grammar over the token list.

Every production is a method taking a token index and returning either
``(value, next_index)`` or ``None``.  A failed production consumes nothing,
so alternatives sharing a prefix (``A`` vs ``A -> B`` vs ``A = B``) are tried
in turn from the same index.  Backtracking never uses exceptions; the only
exception raised mid-parse is ``LimitExceededError`` for runaway nesting.

Grammar:
    graph        := 'strict'? ('digraph' | 'graph') id? '{' stmt_list '}' EOF
    stmt_list    := (stmt (';' | ',')?)*
    stmt         := subgraph | attr_stmt | assignment | edge_or_node
    subgraph     := ('subgraph' id?)? '{' stmt_list '}'
    attr_stmt    := ('graph' | 'node' | 'edge') attr_group+
    assignment   := id '=' id
    edge_or_node := node_id (edge_op node_id)* attr_group*
    attr_group   := '[' (id '=' id (',' | ';')?)* ']'
    node_id      := id port?
    port         := ':' id (':' id)?
    id           := IDENT | NUMBER | STRING ('+' STRING)*
    edge_op      := '->' in a digraph, '--' in a graph

Diagnostics: each failed expectation is recorded against its token index.
When the top-level production fails, the error reports the furthest index
reached and everything that would have been accepted there.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional, TypeVar, Union

from dotgraph.exceptions import DotSyntaxError, LimitExceededError
from dotgraph.models.enums import COMPASS_TOKENS, AttrTarget
from dotgraph.parser.ast import (
    Assignment,
    AttrAST,
    AttrStmt,
    EdgeStmt,
    GraphAST,
    NodeIdAST,
    NodeStmt,
    PortAST,
    StmtAST,
    SubgraphAST,
)
from dotgraph.parser.lexer import TT, Token, tokenize

logger = logging.getLogger(__name__)

T = TypeVar("T")
Parsed = Optional[tuple[T, int]]

DEFAULT_MAX_NESTING = 64
# Deepest nesting accepted as a setting.  Each level costs a few Python frames
# in the grammar and the converter, so this stays well inside the default
# interpreter recursion limit.
MAX_NESTING_LIMIT = 128

_DESCRIBE: dict[TT, str] = {
    TT.IDENT: "identifier",
    TT.NUMBER: "number",
    TT.STRING: "quoted string",
    TT.ARROW: "'->'",
    TT.DASHDASH: "'--'",
    TT.LBRACE: "'{'",
    TT.RBRACE: "'}'",
    TT.LBRACKET: "'['",
    TT.RBRACKET: "']'",
    TT.EQUALS: "'='",
    TT.SEMI: "';'",
    TT.COMMA: "','",
    TT.COLON: "':'",
    TT.PLUS: "'+'",
    TT.EOF: "end of input",
}

_ID_TYPES = (TT.IDENT, TT.NUMBER, TT.STRING)


class _Parser:
    """Builds a ``GraphAST`` from a token list.

    One instance parses one document; the directedness read from the header
    decides which edge operator statements accept.
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        source_lines: Sequence[str] = (),
        max_nesting: int = DEFAULT_MAX_NESTING,
    ) -> None:
        if not tokens or tokens[-1].type is not TT.EOF:
            raise ValueError("token list must end with an EOF token")
        self._tokens = tokens
        self._source_lines = source_lines
        self._max_nesting = max_nesting
        self._directed = True
        self._depth = 0
        self._furthest = -1
        self._expected: set[str] = set()

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def parse(self) -> GraphAST:
        try:
            result = self._graph(0)
        except RecursionError as exc:
            tok = self._tok(max(self._furthest, 0))
            raise LimitExceededError(
                "max_nesting",
                self._max_nesting,
                "Input nests too deeply to parse",
                line=tok.line,
            ) from exc
        if result is None:
            self._raise_furthest()
        graph, _ = result
        return graph

    # ------------------------------------------------------------------
    # Token primitives
    # ------------------------------------------------------------------

    def _tok(self, pos: int) -> Token:
        return self._tokens[min(pos, len(self._tokens) - 1)]

    def _fail(self, pos: int, expected: str) -> None:
        if pos > self._furthest:
            self._furthest = pos
            self._expected = {expected}
        elif pos == self._furthest:
            self._expected.add(expected)
        return None

    def _expect(self, pos: int, tt: TT) -> Parsed[Token]:
        tok = self._tok(pos)
        if tok.type is tt:
            return tok, pos + 1
        return self._fail(pos, _DESCRIBE[tt])

    def _keyword(self, pos: int, *words: str) -> Parsed[str]:
        tok = self._tok(pos)
        if tok.type is TT.KEYWORD and tok.value in words:
            return tok.value, pos + 1
        for word in words:
            self._fail(pos, repr(word))
        return None

    def _optional_separator(self, pos: int) -> int:
        for tt in (TT.SEMI, TT.COMMA):
            if self._expect(pos, tt) is not None:
                return pos + 1
        return pos

    def _raise_furthest(self) -> None:
        tok = self._tok(self._furthest)
        expected = tuple(sorted(self._expected))
        if len(expected) == 1:
            wanted = expected[0]
        else:
            wanted = "one of " + ", ".join(expected)
        snippet = ""
        if 1 <= tok.line <= len(self._source_lines):
            snippet = self._source_lines[tok.line - 1].strip()[:80]
        raise DotSyntaxError(
            f"Expected {wanted} but found {tok.describe()}",
            line=tok.line,
            column=tok.column,
            snippet=snippet,
            expected=expected,
            found=tok.describe(),
        )

    # ------------------------------------------------------------------
    # Graph and statement lists
    # ------------------------------------------------------------------

    def _graph(self, pos: int) -> Parsed[GraphAST]:
        strict = False
        if (r := self._keyword(pos, "strict")) is not None:
            strict, pos = True, r[1]

        if (r := self._keyword(pos, "digraph", "graph")) is None:
            return None
        kind, pos = r
        self._directed = kind == "digraph"

        name: Optional[str] = None
        if (r := self._id(pos)) is not None:
            name, pos = r

        if (r := self._expect(pos, TT.LBRACE)) is None:
            return None
        stmts, pos = self._stmt_list(r[1])
        if (r := self._expect(pos, TT.RBRACE)) is None:
            return None
        if (r := self._expect(r[1], TT.EOF)) is None:
            return None
        return GraphAST(strict=strict, directed=self._directed, name=name, stmts=stmts), r[1]

    def _stmt_list(self, pos: int) -> tuple[tuple[StmtAST, ...], int]:
        """Zero or more statements; always succeeds."""
        stmts: list[StmtAST] = []
        while (r := self._stmt(pos)) is not None:
            stmt, pos = r
            stmts.append(stmt)
            pos = self._optional_separator(pos)
        return tuple(stmts), pos

    def _stmt(self, pos: int) -> Parsed[StmtAST]:
        # A bare '{' can only open a subgraph, so try that first.
        return (
            self._subgraph(pos)
            or self._attr_stmt(pos)
            or self._assignment(pos)
            or self._edge_or_node_stmt(pos)
        )

    def _subgraph(self, pos: int) -> Parsed[SubgraphAST]:
        start = pos
        name: Optional[str] = None
        if (r := self._keyword(pos, "subgraph")) is not None:
            pos = r[1]
            if (r := self._id(pos)) is not None:
                name, pos = r

        if (r := self._expect(pos, TT.LBRACE)) is None:
            return None
        self._enter_scope(self._tok(start))
        try:
            stmts, pos = self._stmt_list(r[1])
        finally:
            self._depth -= 1
        if (r := self._expect(pos, TT.RBRACE)) is None:
            return None
        return SubgraphAST(name=name, stmts=stmts), r[1]

    def _enter_scope(self, tok: Token) -> None:
        self._depth += 1
        if self._depth > self._max_nesting:
            raise LimitExceededError(
                "max_nesting",
                self._max_nesting,
                f"Subgraphs nested deeper than {self._max_nesting} levels",
                line=tok.line,
            )

    # ------------------------------------------------------------------
    # Simple statements
    # ------------------------------------------------------------------

    def _attr_stmt(self, pos: int) -> Parsed[AttrStmt]:
        if (r := self._keyword(pos, "graph", "node", "edge")) is None:
            return None
        target, pos = r
        if (g := self._attr_group(pos)) is None:
            return None
        attrs, pos = g
        rest, pos = self._attr_list(pos)
        return AttrStmt(target=AttrTarget(target), attrs=attrs + rest), pos

    def _assignment(self, pos: int) -> Parsed[Assignment]:
        if (r := self._id(pos)) is None:
            return None
        key, pos = r
        if (r := self._expect(pos, TT.EQUALS)) is None:
            return None
        if (r := self._id(r[1])) is None:
            return None
        value, pos = r
        return Assignment(key=key, value=value), pos

    def _edge_or_node_stmt(self, pos: int) -> Parsed[Union[EdgeStmt, NodeStmt]]:
        if (r := self._node_id(pos)) is None:
            return None
        first, pos = r
        endpoints = [first]
        # Greedily extend the chain; 'A' alone is only a node statement once
        # no edge operator follows.
        while (op := self._edge_op(pos)) is not None:
            if (r := self._node_id(op)) is None:
                return None
            endpoint, pos = r
            endpoints.append(endpoint)
        attrs, pos = self._attr_list(pos)
        if len(endpoints) > 1:
            return EdgeStmt(endpoints=tuple(endpoints), attrs=attrs), pos
        return NodeStmt(id=first, attrs=attrs), pos

    def _edge_op(self, pos: int) -> Optional[int]:
        r = self._expect(pos, TT.ARROW if self._directed else TT.DASHDASH)
        return None if r is None else r[1]

    # ------------------------------------------------------------------
    # Attribute lists
    # ------------------------------------------------------------------

    def _attr_list(self, pos: int) -> tuple[tuple[AttrAST, ...], int]:
        """Zero or more ``[...]`` groups, concatenated; always succeeds."""
        attrs: tuple[AttrAST, ...] = ()
        while (r := self._attr_group(pos)) is not None:
            group, pos = r
            attrs += group
        return attrs, pos

    def _attr_group(self, pos: int) -> Parsed[tuple[AttrAST, ...]]:
        if (r := self._expect(pos, TT.LBRACKET)) is None:
            return None
        pos = r[1]
        attrs: list[AttrAST] = []
        while (r := self._attr_pair(pos)) is not None:
            attr, pos = r
            attrs.append(attr)
            pos = self._optional_separator(pos)
        if (r := self._expect(pos, TT.RBRACKET)) is None:
            return None
        return tuple(attrs), r[1]

    def _attr_pair(self, pos: int) -> Parsed[AttrAST]:
        if (r := self._id(pos)) is None:
            return None
        key, pos = r
        if (r := self._expect(pos, TT.EQUALS)) is None:
            return None
        if (r := self._id(r[1])) is None:
            return None
        value, pos = r
        return AttrAST(key=key, value=value), pos

    # ------------------------------------------------------------------
    # Node IDs, ports and IDs
    # ------------------------------------------------------------------

    def _node_id(self, pos: int) -> Parsed[NodeIdAST]:
        if (r := self._id(pos)) is None:
            return None
        node_id, pos = r
        port: Optional[PortAST] = None
        if (p := self._port(pos)) is not None:
            port, pos = p
        return NodeIdAST(id=node_id, port=port), pos

    def _port(self, pos: int) -> Parsed[PortAST]:
        """``:id`` or ``:id:compass``.

        A lone bare identifier naming a compass point is the compass point;
        quoted, it is a port name.  With two components the first is always
        the port name.
        """
        if (r := self._expect(pos, TT.COLON)) is None:
            return None
        bare = self._tok(r[1]).type is TT.IDENT
        if (r := self._id(r[1])) is None:
            return None
        first, pos = r

        if (c := self._expect(pos, TT.COLON)) is not None:
            r = self._id(c[1])
            if r is not None and r[0] in COMPASS_TOKENS:
                return PortAST(name=first, compass=r[0]), r[1]
            return self._fail(c[1], "compass point")

        if bare and first in COMPASS_TOKENS:
            return PortAST(compass=first), pos
        return PortAST(name=first), pos

    def _id(self, pos: int) -> Parsed[str]:
        tok = self._tok(pos)
        if tok.type in (TT.IDENT, TT.NUMBER):
            return tok.value, pos + 1
        if tok.type is not TT.STRING:
            for tt in _ID_TYPES:
                self._fail(pos, _DESCRIBE[tt])
            return None

        # "a" + "b" concatenates quoted strings.
        parts = [tok.value]
        pos += 1
        while self._expect(pos, TT.PLUS) is not None:
            nxt = self._expect(pos + 1, TT.STRING)
            if nxt is None:
                break
            parts.append(nxt[0].value)
            pos = nxt[1]
        return "".join(parts), pos


def parse_ast(
    source: Union[str, Sequence[Token]],
    *,
    max_nesting: int = DEFAULT_MAX_NESTING,
) -> GraphAST:
    """Parse DOT source (or an already tokenized stream) into a ``GraphAST``.

    Args:
        source:      DOT text, or the token list returned by ``tokenize``.
        max_nesting: Deepest permitted subgraph nesting.

    Raises:
        LexicalError:       If *source* is text and cannot be tokenized.
        DotSyntaxError:     If the tokens do not form a DOT graph.
        LimitExceededError: If subgraphs nest deeper than *max_nesting*.
        ValueError:         If *max_nesting* is outside 1..MAX_NESTING_LIMIT.
    """
    if not 1 <= max_nesting <= MAX_NESTING_LIMIT:
        raise ValueError(
            f"max_nesting must be between 1 and {MAX_NESTING_LIMIT}, got {max_nesting}"
        )
    if isinstance(source, str):
        tokens = tokenize(source)
        lines: Sequence[str] = source.split("\n")
    else:
        tokens = source
        lines = ()
    logger.debug("Parsing %d tokens", len(tokens))
    return _Parser(tokens, lines, max_nesting).parse()
