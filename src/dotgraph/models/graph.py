"""Immutable graph model produced by the DOT converter.

Every record is a frozen pydantic model. Collections are tuples, so a
``Graph`` is a plain value: equality is structural and "modifying" one means
``model_copy(update=...)`` to obtain a new record.

Attribute lists keep insertion order and may hold duplicate keys; readers
that need a single value use :func:`get_attr`, where the last occurrence
wins.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from dotgraph.models.enums import Compass

CLUSTER_PREFIX = "cluster"

_FROZEN = ConfigDict(frozen=True, extra="forbid")


class Attr(BaseModel):
    """A single ``key=value`` attribute. Values are always strings."""

    model_config = _FROZEN

    key: str
    value: str


def get_attr(attrs: Iterable[Attr], key: str, default: Optional[str] = None) -> Optional[str]:
    """Return the value of the last attribute named *key*, or *default*."""
    found = default
    for attr in attrs:
        if attr.key == key:
            found = attr.value
    return found


class Port(BaseModel):
    """Edge endpoint qualifier: a record field name and/or a compass point."""

    model_config = _FROZEN

    name: Optional[str] = None
    compass: Optional[Compass] = None

    @property
    def is_empty(self) -> bool:
        return self.name is None and self.compass is None


class Node(BaseModel):
    """A node. ``label`` is held apart from the generic ``attrs``."""

    model_config = _FROZEN

    id: str
    label: Optional[str] = None
    attrs: tuple[Attr, ...] = ()

    def attr(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return get_attr(self.attrs, key, default)


class Edge(BaseModel):
    """A single edge between two node IDs.

    ``label``, ``lhead`` and ``ltail`` are extracted from the attribute list
    during conversion; ``attrs`` holds everything else.
    """

    model_config = _FROZEN

    src: str
    dst: str
    src_port: Port = Field(default_factory=Port)
    dst_port: Port = Field(default_factory=Port)
    label: Optional[str] = None
    attrs: tuple[Attr, ...] = ()
    lhead: Optional[str] = None
    ltail: Optional[str] = None

    @property
    def pair(self) -> tuple[str, str]:
        return (self.src, self.dst)

    def attr(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return get_attr(self.attrs, key, default)


class Subgraph(BaseModel):
    """A subgraph scope with its own nodes, edges, attributes and defaults.

    A name starting with ``cluster`` marks it as a visual cluster for
    downstream renderers; this is a naming convention, not a distinct type.
    """

    model_config = _FROZEN

    name: str = ""
    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()
    subgraphs: tuple[Subgraph, ...] = ()
    attrs: tuple[Attr, ...] = ()
    node_defaults: tuple[Attr, ...] = ()
    edge_defaults: tuple[Attr, ...] = ()

    @property
    def is_cluster(self) -> bool:
        return self.name.startswith(CLUSTER_PREFIX)

    def attr(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return get_attr(self.attrs, key, default)


class Graph(BaseModel):
    """Top-level DOT graph.

    ``nodes`` and ``edges`` hold only the top-level scope; declarations made
    inside a subgraph live on that ``Subgraph``.
    """

    model_config = _FROZEN

    name: str = "G"
    directed: bool = True
    strict: bool = False
    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()
    subgraphs: tuple[Subgraph, ...] = ()
    attrs: tuple[Attr, ...] = ()
    node_defaults: tuple[Attr, ...] = ()
    edge_defaults: tuple[Attr, ...] = ()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def node(self, node_id: str) -> Node:
        """Retrieve a top-level node by ID.

        Raises:
            KeyError: If *node_id* is not declared at the top level.
        """
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise KeyError(node_id)

    def node_ids(self) -> list[str]:
        """Top-level node IDs in declaration order."""
        return [n.id for n in self.nodes]

    def edge_pairs(self) -> list[tuple[str, str]]:
        """``(src, dst)`` for every top-level edge in declaration order."""
        return [e.pair for e in self.edges]

    def walk_subgraphs(self) -> Iterator[Subgraph]:
        """Yield every subgraph, depth first, in declaration order."""
        stack = list(reversed(self.subgraphs))
        while stack:
            sg = stack.pop()
            yield sg
            stack.extend(reversed(sg.subgraphs))

    def clusters(self) -> list[Subgraph]:
        """All subgraphs (at any depth) whose name marks them as clusters."""
        return [sg for sg in self.walk_subgraphs() if sg.is_cluster]

    def all_node_ids(self) -> set[str]:
        """Node IDs declared anywhere in the graph, subgraphs included."""
        ids = {n.id for n in self.nodes}
        for sg in self.walk_subgraphs():
            ids.update(n.id for n in sg.nodes)
        return ids

    def attr(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return get_attr(self.attrs, key, default)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self, indent: int = 2) -> str:
        """Serialize the graph to a JSON string."""
        return self.model_dump_json(indent=indent, exclude_none=True)

    @classmethod
    def from_json(cls, json_str: str) -> Graph:
        """Deserialize a graph from a JSON string.

        Raises:
            pydantic.ValidationError: If the JSON does not describe a graph.
        """
        return cls.model_validate_json(json_str)
