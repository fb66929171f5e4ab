"""AST → graph model conversion.

A single left-to-right ``functools.reduce`` over each statement list.  The
accumulator is a frozen ``_Scope``; every statement produces a new scope
value, and each subgraph body is folded from a fresh ``_Scope()`` so nothing
declared inside it reaches the enclosing scope.

Scope fields are immutable cons chains (``()`` or ``(item, rest)``), newest
item first, so each step costs O(1) however many statements precede it.  A
chain is turned into an ordered tuple once, when its scope is closed.

Resolution rules:
- The first declaration of a node ID in a scope wins; later node statements
  for the same ID are dropped, attributes included.
- Edge endpoints not yet seen in the scope become empty nodes, appended
  before the edge.
- ``a -> b -> c`` yields one edge per consecutive pair, all sharing the
  statement's attributes.
- ``node [...]`` and ``edge [...]`` replace the scope's defaults; they are
  not merged with earlier defaults and do not apply to earlier statements.
- ``graph [...]`` and bare ``key=value`` append to the scope's attributes.

Every node statement and every edge endpoint is recorded as a candidate
node; the first candidate for each ID is the one the rules above keep, so
closing a scope keeps exactly the first candidate per ID.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from functools import reduce
from typing import Any, Optional

from dotgraph.models.enums import AttrTarget, Compass
from dotgraph.models.graph import Attr, Edge, Graph, Node, Port, Subgraph
from dotgraph.parser.ast import (
    Assignment,
    AttrAST,
    AttrStmt,
    EdgeStmt,
    GraphAST,
    NodeIdAST,
    NodeStmt,
    StmtAST,
    SubgraphAST,
)

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_NAME = "G"

_NODE_SPECIAL = ("label",)
_EDGE_SPECIAL = ("label", "lhead", "ltail")

# () or (item, rest), newest first.
_Chain = tuple[Any, ...]


def _push(chain: _Chain, items: Iterable[Any]) -> _Chain:
    for item in items:
        chain = (item, chain)
    return chain


def _unwind(chain: _Chain) -> tuple[Any, ...]:
    """Items of *chain* in insertion order."""
    items = []
    while chain:
        item, chain = chain
        items.append(item)
    items.reverse()
    return tuple(items)


def _first_per_id(candidates: Iterable[Node]) -> tuple[Node, ...]:
    seen: set[str] = set()
    nodes = []
    for node in candidates:
        if node.id not in seen:
            seen.add(node.id)
            nodes.append(node)
    return tuple(nodes)


@dataclass(frozen=True)
class _Scope:
    """Conversion state for one scope (the graph body or one subgraph body)."""
    candidates: _Chain = ()
    edges: _Chain = ()
    subgraphs: _Chain = ()
    graph_attrs: _Chain = ()
    node_defaults: tuple[Attr, ...] = ()
    edge_defaults: tuple[Attr, ...] = ()

    def nodes(self) -> tuple[Node, ...]:
        return _first_per_id(_unwind(self.candidates))


# ---------------------------------------------------------------------------
# Attribute helpers
# ---------------------------------------------------------------------------

def _to_attrs(attrs: Iterable[AttrAST]) -> tuple[Attr, ...]:
    return tuple(Attr(key=a.key, value=a.value) for a in attrs)


def _split_special(
    attrs: Iterable[AttrAST], keys: tuple[str, ...]
) -> tuple[dict[str, str], tuple[Attr, ...]]:
    """Pull *keys* out of *attrs*.

    Returns the extracted values (last occurrence wins) and the remaining
    attributes in their original order.
    """
    special: dict[str, str] = {}
    rest: list[Attr] = []
    for a in attrs:
        if a.key in keys:
            special[a.key] = a.value
        else:
            rest.append(Attr(key=a.key, value=a.value))
    return special, tuple(rest)


def _to_port(node_id: NodeIdAST) -> Port:
    if node_id.port is None:
        return Port()
    compass: Optional[Compass] = None
    if node_id.port.compass is not None:
        compass = Compass.from_token(node_id.port.compass)
    return Port(name=node_id.port.name, compass=compass)


# ---------------------------------------------------------------------------
# Statement handlers
# ---------------------------------------------------------------------------

def _node_stmt(scope: _Scope, stmt: NodeStmt) -> _Scope:
    special, attrs = _split_special(stmt.attrs, _NODE_SPECIAL)
    node = Node(id=stmt.id.id, label=special.get("label"), attrs=attrs)
    return replace(scope, candidates=(node, scope.candidates))


def _edge_stmt(scope: _Scope, stmt: EdgeStmt) -> _Scope:
    special, attrs = _split_special(stmt.attrs, _EDGE_SPECIAL)
    new_edges = (
        Edge(
            src=src.id,
            dst=dst.id,
            src_port=_to_port(src),
            dst_port=_to_port(dst),
            label=special.get("label"),
            attrs=attrs,
            lhead=special.get("lhead"),
            ltail=special.get("ltail"),
        )
        for src, dst in zip(stmt.endpoints, stmt.endpoints[1:])
    )
    return replace(
        scope,
        candidates=_push(scope.candidates, (Node(id=e.id) for e in stmt.endpoints)),
        edges=_push(scope.edges, new_edges),
    )


def _attr_stmt(scope: _Scope, stmt: AttrStmt) -> _Scope:
    attrs = _to_attrs(stmt.attrs)
    if stmt.target is AttrTarget.GRAPH:
        return replace(scope, graph_attrs=_push(scope.graph_attrs, attrs))
    if stmt.target is AttrTarget.NODE:
        return replace(scope, node_defaults=attrs)
    return replace(scope, edge_defaults=attrs)


def _assignment(scope: _Scope, stmt: Assignment) -> _Scope:
    attr = Attr(key=stmt.key, value=stmt.value)
    return replace(scope, graph_attrs=(attr, scope.graph_attrs))


def _subgraph(scope: _Scope, stmt: SubgraphAST) -> _Scope:
    inner = _fold(stmt.stmts)
    sg = Subgraph(
        name=stmt.name or "",
        nodes=inner.nodes(),
        edges=_unwind(inner.edges),
        subgraphs=_unwind(inner.subgraphs),
        attrs=_unwind(inner.graph_attrs),
        node_defaults=inner.node_defaults,
        edge_defaults=inner.edge_defaults,
    )
    return replace(scope, subgraphs=(sg, scope.subgraphs))


_HANDLERS: dict[type, Callable[[_Scope, StmtAST], _Scope]] = {
    NodeStmt: _node_stmt,
    EdgeStmt: _edge_stmt,
    AttrStmt: _attr_stmt,
    Assignment: _assignment,
    SubgraphAST: _subgraph,
}


def _step(scope: _Scope, stmt: StmtAST) -> _Scope:
    return _HANDLERS[type(stmt)](scope, stmt)


def _fold(stmts: Iterable[StmtAST]) -> _Scope:
    return reduce(_step, stmts, _Scope())


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def convert(ast: GraphAST) -> Graph:
    """Convert a parsed ``GraphAST`` into the canonical ``Graph`` model.

    Pure and total: the same AST always yields an equal ``Graph``, and no
    valid AST makes it raise.  Runs in time linear in the number of
    statements.
    """
    scope = _fold(ast.stmts)
    graph = Graph(
        name=ast.name if ast.name is not None else DEFAULT_GRAPH_NAME,
        directed=ast.directed,
        strict=ast.strict,
        nodes=scope.nodes(),
        edges=_unwind(scope.edges),
        subgraphs=_unwind(scope.subgraphs),
        attrs=_unwind(scope.graph_attrs),
        node_defaults=scope.node_defaults,
        edge_defaults=scope.edge_defaults,
    )
    logger.debug(
        "Converted graph %r: %d nodes, %d edges, %d subgraphs",
        graph.name, graph.node_count, graph.edge_count, len(graph.subgraphs),
    )
    return graph
