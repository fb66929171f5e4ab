"""Enumerations for the DOT graph data model."""

from enum import Enum


class Compass(str, Enum):
    """Compass point anchoring an edge to one side of a node."""

    N = "n"
    NE = "ne"
    E = "e"
    SE = "se"
    S = "s"
    SW = "sw"
    W = "w"
    NW = "nw"
    C = "c"

    @classmethod
    def from_token(cls, text: str) -> "Compass":
        """Map a compass token from DOT source to a member.

        ``_`` is Graphviz's alternative spelling of the centre point.
        """
        if text == "_":
            return cls.C
        return cls(text)


# Everything DOT accepts in compass position, including the ``_`` alias.
COMPASS_TOKENS: frozenset[str] = frozenset({c.value for c in Compass} | {"_"})


class AttrTarget(str, Enum):
    """Target of a bare ``graph|node|edge [attrs]`` statement."""

    GRAPH = "graph"
    NODE = "node"
    EDGE = "edge"
