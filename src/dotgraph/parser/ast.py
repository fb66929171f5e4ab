"""Syntax tree for DOT source.

The tree mirrors the grammar rather than the final model: edge chains are
kept as endpoint lists, ``label`` stays inside attribute lists, and default
statements are recorded where they appear. Nodes are frozen and use tuples,
so a ``GraphAST`` can be converted any number of times with the same result.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from dotgraph.models.enums import AttrTarget


@dataclass(frozen=True)
class AttrAST:
    key: str
    value: str


@dataclass(frozen=True)
class PortAST:
    """``:name``, ``:compass`` or ``:name:compass`` after a node ID."""
    name: Optional[str] = None
    compass: Optional[str] = None


@dataclass(frozen=True)
class NodeIdAST:
    id: str
    port: Optional[PortAST] = None


@dataclass(frozen=True)
class NodeStmt:
    id: NodeIdAST
    attrs: tuple[AttrAST, ...] = ()


@dataclass(frozen=True)
class EdgeStmt:
    """``a -> b -> c [attrs]``; always at least two endpoints."""
    endpoints: tuple[NodeIdAST, ...]
    attrs: tuple[AttrAST, ...] = ()


@dataclass(frozen=True)
class AttrStmt:
    """``graph [..]``, ``node [..]`` or ``edge [..]``."""
    target: AttrTarget
    attrs: tuple[AttrAST, ...] = ()


@dataclass(frozen=True)
class Assignment:
    """Bare ``key=value``: shorthand for a graph attribute of the enclosing scope."""
    key: str
    value: str


SimpleStmtAST = Union[NodeStmt, EdgeStmt, AttrStmt, Assignment]


@dataclass(frozen=True)
class SubgraphAST:
    name: Optional[str] = None
    stmts: tuple[StmtAST, ...] = ()


StmtAST = Union[SimpleStmtAST, SubgraphAST]


@dataclass(frozen=True)
class GraphAST:
    strict: bool
    directed: bool
    name: Optional[str] = None
    stmts: tuple[StmtAST, ...] = ()
