"""DOT graph data model."""

from dotgraph.models.enums import COMPASS_TOKENS, AttrTarget, Compass
from dotgraph.models.graph import (
    CLUSTER_PREFIX,
    Attr,
    Edge,
    Graph,
    Node,
    Port,
    Subgraph,
    get_attr,
)

__all__ = [
    "Attr",
    "AttrTarget",
    "CLUSTER_PREFIX",
    "COMPASS_TOKENS",
    "Compass",
    "Edge",
    "Graph",
    "Node",
    "Port",
    "Subgraph",
    "get_attr",
]
