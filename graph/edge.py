"""
edge.py — Graph Edge
====================
An undirected connection between two vertices, carrying a label (usually
the route name) and a length.

Design decisions:
  - `v1` and `v2` are vertex indices, NOT Vertex references.  This keeps
    edges serialisable and avoids circular references.
  - `length` is whatever the graph source says it is.  Dijkstra's and
    Prim's read it; traversals never do.
"""

from typing import Optional


class GraphEdge:
    """
    Attributes:
        index  : Position in the graph's edge list (assigned on insert).
        v1, v2 : Endpoint vertex indices.
        label  : Human-readable name shown in tables and status messages.
        length : Non-negative numeric length.
    """

    __slots__ = ("index", "v1", "v2", "label", "length")

    def __init__(
        self,
        v1: int,
        v2: int,
        label: Optional[str] = None,
        length: float = 1.0,
        index: int = -1,
    ):
        self.index:  int   = index
        self.v1:     int   = v1
        self.v2:     int   = v2
        self.label:  str   = label if label is not None else f"{v1}-{v2}"
        self.length: float = length

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def connects(self, a: int, b: int) -> bool:
        return {self.v1, self.v2} == {a, b}

    def other_end(self, vertex: int) -> int:
        """Given one endpoint, return the other."""
        if vertex == self.v1:
            return self.v2
        if vertex == self.v2:
            return self.v1
        raise ValueError(f"vertex {vertex} is not an endpoint of edge #{self.index}")

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "v1":     self.v1,
            "v2":     self.v2,
            "label":  self.label,
            "length": self.length,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GraphEdge":
        return cls(
            v1=data["v1"],
            v2=data["v2"],
            label=data.get("label"),
            length=data.get("length", 1.0),
        )

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"GraphEdge(#{self.index} {self.v1} ↔ {self.v2}, {self.label}, len={self.length})"

    def __eq__(self, other) -> bool:
        return isinstance(other, GraphEdge) and self.index == other.index and self.connects(other.v1, other.v2)

    def __hash__(self) -> int:
        return hash((self.index, frozenset((self.v1, self.v2))))
