"""
graph/
-----
Core data layer.  Public API:

    from graph import Graph, Vertex, GraphEdge
"""

from graph.vertex import Vertex
from graph.edge   import GraphEdge
from graph.graph  import Graph

__all__ = [
    "Vertex",
    "GraphEdge",
    "Graph",
]
