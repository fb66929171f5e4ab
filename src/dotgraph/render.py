"""Canonical DOT writer for the graph model.

The output is meant to be read back by :mod:`dotgraph.parser`: IDs are
quoted whenever the bare form would lex differently, and quoted strings only
escape ``\\`` and ``"`` so the lexer's unescaping restores the exact value.
Parsing rendered text reproduces node IDs, edge endpoints, name,
directedness and strictness; attribute order within a record is preserved
but ``label``/``lhead``/``ltail`` are always written first or last.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Optional, Union

from dotgraph.models.enums import COMPASS_TOKENS
from dotgraph.models.graph import Attr, Edge, Graph, Node, Port, Subgraph
from dotgraph.parser.lexer import KEYWORDS

_BARE_ID = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")
_NUMERAL = re.compile(r"-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)\Z")

# Graphviz itself matches keywords case-insensitively.
_RESERVED = frozenset(k.lower() for k in KEYWORDS)


def escape_dot_string(text: str) -> str:
    """Escape a string for use between double quotes in DOT."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def quote_id(value: str) -> str:
    """Render *value* as a DOT ID, quoting only when required."""
    if value.lower() not in _RESERVED and (_BARE_ID.match(value) or _NUMERAL.match(value)):
        return value
    return f'"{escape_dot_string(value)}"'


def _attr_list(pairs: Iterable[tuple[str, str]]) -> str:
    body = ", ".join(f"{quote_id(k)}={quote_id(v)}" for k, v in pairs)
    return f" [{body}]" if body else ""


def _pairs(
    attrs: Sequence[Attr],
    *,
    before: Sequence[tuple[str, Optional[str]]] = (),
    after: Sequence[tuple[str, Optional[str]]] = (),
) -> list[tuple[str, str]]:
    pairs = [(k, v) for k, v in before if v is not None]
    pairs.extend((a.key, a.value) for a in attrs)
    pairs.extend((k, v) for k, v in after if v is not None)
    return pairs


def _port_name(name: str) -> str:
    # A bare compass word after ":" reads back as a compass point.
    if name in COMPASS_TOKENS:
        return f'"{escape_dot_string(name)}"'
    return quote_id(name)


def _endpoint(node_id: str, port: Port) -> str:
    parts = [quote_id(node_id)]
    if port.name is not None:
        parts.append(_port_name(port.name))
    if port.compass is not None:
        parts.append(port.compass.value)
    return ":".join(parts)


def _node_line(node: Node) -> str:
    pairs = _pairs(node.attrs, before=[("label", node.label)])
    return f"{quote_id(node.id)}{_attr_list(pairs)};"


def _edge_line(edge: Edge, op: str) -> str:
    pairs = _pairs(
        edge.attrs,
        before=[("label", edge.label)],
        after=[("lhead", edge.lhead), ("ltail", edge.ltail)],
    )
    src = _endpoint(edge.src, edge.src_port)
    dst = _endpoint(edge.dst, edge.dst_port)
    return f"{src} {op} {dst}{_attr_list(pairs)};"


def _body(scope: Union[Graph, Subgraph], op: str, indent: str, depth: int) -> list[str]:
    pad = indent * depth
    lines: list[str] = []
    for attr in scope.attrs:
        lines.append(f"{pad}{quote_id(attr.key)}={quote_id(attr.value)};")
    if scope.node_defaults:
        lines.append(f"{pad}node{_attr_list((a.key, a.value) for a in scope.node_defaults)};")
    if scope.edge_defaults:
        lines.append(f"{pad}edge{_attr_list((a.key, a.value) for a in scope.edge_defaults)};")
    for sg in scope.subgraphs:
        header = f"subgraph {quote_id(sg.name)} {{" if sg.name else "subgraph {"
        lines.append(f"{pad}{header}")
        lines.extend(_body(sg, op, indent, depth + 1))
        lines.append(f"{pad}}}")
    for node in scope.nodes:
        lines.append(f"{pad}{_node_line(node)}")
    for edge in scope.edges:
        lines.append(f"{pad}{_edge_line(edge, op)}")
    return lines


def render_dot(graph: Graph, indent: str = "    ") -> str:
    """Render *graph* as DOT text terminated by a newline."""
    kind = "digraph" if graph.directed else "graph"
    prefix = "strict " if graph.strict else ""
    op = "->" if graph.directed else "--"
    lines = [f"{prefix}{kind} {quote_id(graph.name)} {{"]
    lines.extend(_body(graph, op, indent, 1))
    lines.append("}")
    return "\n".join(lines) + "\n"
