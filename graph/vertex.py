"""
vertex.py — Graph Vertex (Waypoint)
===================================
A vertex is a named point on the map.  Algorithms only ever refer to a
vertex by its integer index; the label and coordinates exist for the
status text, the tables and the renderer.

Design decisions:
  - `index` is the vertex's position in `Graph.vertices`.  It is assigned
    by the Graph on insertion, so vertex ids are always 0..|V|-1 and the
    per-traversal bitmaps can be plain lists.
  - Coordinates are latitude / longitude in degrees.  Nothing in the
    engine does geographic math with them.
"""

from typing import Optional


class Vertex:
    """
    Attributes:
        index : Position in the graph's vertex list (assigned on insert).
        label : Human-readable name shown in tables and status messages.
        lat   : Latitude  (degrees).
        lng   : Longitude (degrees).
    """

    __slots__ = ("index", "label", "lat", "lng")

    def __init__(
        self,
        lat: float = 0.0,
        lng: float = 0.0,
        label: Optional[str] = None,
        index: int = -1,
    ):
        self.index: int   = index
        self.label: Optional[str] = label
        self.lat:   float = lat
        self.lng:   float = lng

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "lat":   self.lat,
            "lng":   self.lng,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Vertex":
        return cls(lat=data.get("lat", 0.0), lng=data.get("lng", 0.0), label=data.get("label"))

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Vertex(#{self.index} {self.label}, pos=({self.lat:.5f},{self.lng:.5f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Vertex) and self.index == other.index and self.label == other.label

    def __hash__(self) -> int:
        return hash((self.index, self.label))
