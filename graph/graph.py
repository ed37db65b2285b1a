"""
graph.py — Graph Container & Generator
=======================================
Single source of truth for the graph.  Algorithms and the renderer
both talk to this object; neither ever writes to it.

Responsibilities:
  1. Building the graph                     (add vertices / edges)
  2. Adjacency queries                      (incident_edges, neighbours, …)
  3. Graph-generation factory methods       (random, grid)
  4. Serialisation round-trip               (to_dict / from_dict)

Design decisions:
  - Vertices & edges are stored in plain lists; a vertex or edge id IS
    its list index, so the traversal bitmaps are simple boolean lists.
  - A separate adjacency list `_adj[v] → [edge_index, …]` is maintained
    incrementally so incident-edge queries are O(degree), not O(E).
    Incident edges keep insertion order — traversals visit neighbours
    in exactly this order.
  - Graphs are undirected.  Parallel edges are allowed (two routes can
    share the same pair of waypoints); self-loops are not.
"""

import random
import math
from typing import List, Tuple, Optional, Iterable

from graph.vertex import Vertex
from graph.edge   import GraphEdge


class Graph:
    """
    Attributes:
        vertices : [Vertex]     — index == vertex id
        edges    : [GraphEdge]  — index == edge id
        _adj     : [[edge_index, …]] per vertex
    """

    def __init__(self):
        self.vertices: List[Vertex]    = []
        self.edges:    List[GraphEdge] = []
        self._adj:     List[List[int]] = []

    # ==================================================================
    # VERTICES
    # ==================================================================
    def add_vertex(self, vertex: Vertex) -> Vertex:
        vertex.index = len(self.vertices)
        if vertex.label is None:
            vertex.label = str(vertex.index)
        self.vertices.append(vertex)
        self._adj.append([])
        return vertex

    def create_vertex(self, lat: float, lng: float, label: Optional[str] = None) -> Vertex:
        """Convenience: create + add in one call."""
        return self.add_vertex(Vertex(lat=lat, lng=lng, label=label))

    def get_vertex(self, index: int) -> Vertex:
        return self.vertices[index]

    def has_vertex(self, index) -> bool:
        return isinstance(index, int) and 0 <= index < len(self.vertices)

    # ==================================================================
    # EDGES
    # ==================================================================
    def add_edge(self, edge: GraphEdge) -> GraphEdge:
        if not self.has_vertex(edge.v1) or not self.has_vertex(edge.v2):
            raise ValueError(f"edge endpoints ({edge.v1}, {edge.v2}) must be existing vertices")
        if edge.v1 == edge.v2:
            raise ValueError(f"self-loop at vertex {edge.v1} is not allowed")
        if edge.length < 0:
            raise ValueError(f"edge length must be non-negative, got {edge.length}")
        edge.index = len(self.edges)
        self.edges.append(edge)
        # maintain adjacency
        self._adj[edge.v1].append(edge.index)
        self._adj[edge.v2].append(edge.index)
        return edge

    def create_edge(self, v1: int, v2: int, length: float = 1.0, label: Optional[str] = None) -> GraphEdge:
        return self.add_edge(GraphEdge(v1=v1, v2=v2, label=label, length=length))

    def get_edge(self, index: int) -> GraphEdge:
        return self.edges[index]

    def edge_between(self, a: int, b: int) -> Optional[GraphEdge]:
        """First edge connecting a and b."""
        for eid in self._adj[a]:
            if self.edges[eid].other_end(a) == b:
                return self.edges[eid]
        return None

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def incident_edges(self, vertex: int) -> List[GraphEdge]:
        return [self.edges[eid] for eid in self._adj[vertex]]

    def neighbours(self, vertex: int) -> List[Tuple[int, GraphEdge]]:
        """Return [(neighbour_index, edge)] in incident-edge order."""
        return [(edge.other_end(vertex), edge) for edge in self.incident_edges(vertex)]

    def degree(self, vertex: int) -> int:
        return len(self._adj[vertex])

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "vertices": [v.to_dict() for v in self.vertices],
            "edges":    [e.to_dict() for e in self.edges],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        g = cls()
        for vd in data.get("vertices", []):
            g.add_vertex(Vertex.from_dict(vd))
        for ed in data.get("edges", []):
            g.add_edge(GraphEdge.from_dict(ed))
        return g

    @classmethod
    def from_edge_list(
        cls,
        num_vertices: int,
        edges: Iterable[Tuple],
    ) -> "Graph":
        """
        Build a graph from `(v1, v2)` or `(v1, v2, length)` tuples.
        Vertices are laid out on a small circle so they can be drawn.
        """
        g = cls()
        for i in range(num_vertices):
            angle = 2 * math.pi * i / max(num_vertices, 1)
            g.create_vertex(42.0 + 0.1 * math.sin(angle), -73.8 + 0.1 * math.cos(angle), label=f"V{i}")
        for item in edges:
            length = item[2] if len(item) > 2 else 1.0
            g.create_edge(item[0], item[1], length=length)
        return g

    # ==================================================================
    # GENERATORS — Factory class-methods
    # ==================================================================

    # ---------- Random Graph ----------
    @classmethod
    def generate_random(
        cls,
        num_vertices: int = 12,
        edge_probability: float = 0.25,
        connected: bool = True,
        seed: Optional[int] = None,
        center: Tuple[float, float] = (42.75, -73.80),
        span: float = 0.5,
    ) -> "Graph":
        """
        Erdős–Rényi style random graph placed around `center`.
        Each possible edge is included with probability `edge_probability`;
        edge lengths are the planar distance between endpoints, in degrees.
        """
        rng = random.Random(seed)

        g = cls()
        clat, clng = center

        for i in range(num_vertices):
            angle  = 2 * math.pi * i / num_vertices
            radius = span * 0.4
            lat = clat + radius * math.sin(angle) + rng.uniform(-span * 0.06, span * 0.06)
            lng = clng + radius * math.cos(angle) + rng.uniform(-span * 0.06, span * 0.06)
            g.create_vertex(lat, lng, label=f"WP{i}")

        def _length(a: int, b: int) -> float:
            va, vb = g.vertices[a], g.vertices[b]
            return round(math.hypot(va.lat - vb.lat, va.lng - vb.lng), 4)

        for i in range(num_vertices):
            for j in range(i + 1, num_vertices):
                if rng.random() < edge_probability:
                    g.create_edge(i, j, length=_length(i, j), label=f"R{i}-{j}")

        # optional spanning backbone so the graph is a single component
        if connected:
            order = list(range(num_vertices))
            rng.shuffle(order)
            for k in range(1, len(order)):
                a, b = order[k - 1], order[k]
                if not g.edge_between(a, b):
                    g.create_edge(a, b, length=_length(a, b), label=f"R{a}-{b}")

        return g

    # ---------- Grid Graph ----------
    @classmethod
    def generate_grid(
        cls,
        rows: int = 5,
        cols: int = 6,
        gap_prob: float = 0.0,
        seed: Optional[int] = None,
        origin: Tuple[float, float] = (42.5, -74.0),
        spacing: float = 0.05,
    ) -> "Graph":
        """
        2-D grid graph.  Edges connect 4-neighbours; with `gap_prob` > 0 some
        of them are dropped, which tends to split the grid into components.
        """
        rng = random.Random(seed)

        g = cls()
        olat, olng = origin

        def vid(r, c):
            return r * cols + c

        for r in range(rows):
            for c in range(cols):
                g.create_vertex(olat + r * spacing, olng + c * spacing, label=f"G{r}_{c}")

        for r in range(rows):
            for c in range(cols):
                for dr, dc in ((0, 1), (1, 0)):
                    nr, nc = r + dr, c + dc
                    if nr < rows and nc < cols and rng.random() >= gap_prob:
                        g.create_edge(vid(r, c), vid(nr, nc), length=spacing,
                                      label=f"G{r}_{c}-G{nr}_{nc}")

        return g

    # ==================================================================
    # UTILITY
    # ==================================================================
    def vertex_count(self) -> int:
        return len(self.vertices)

    def edge_count(self) -> int:
        return len(self.edges)

    def vertex_ids(self) -> List[int]:
        return list(range(len(self.vertices)))

    def __repr__(self) -> str:
        return f"Graph(|V|={self.vertex_count()}, |E|={self.edge_count()})"
