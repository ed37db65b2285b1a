"""
ldv.py — List of Discovered Vertices
====================================
One container, four removal disciplines.  The traversal engine never
knows which one it is talking to; BFS vs DFS vs RFS vs a priority search
is purely a matter of which DiscoveryContainer it was handed.

    Discipline   add()                    remove()
    ----------   ----------------------   --------------------------
    LIFO         append                   newest            (stack)
    FIFO         append                   oldest            (queue)
    RANDOM       append                   uniform pick      (bag)
    PRIORITY     ordered insert           extremal, O(1)    (PQ)

Design decisions:
  - PRIORITY keeps `items` ordered so the entry to remove next is always
    at the END of the list.  add() scans from the front while the new
    entry `comes_before` the one there and inserts at the first element
    it does not beat.  An equal-valued newcomer therefore lands in front
    of its older peers and leaves after them: ties are FIFO.
  - RANDOM takes an injectable `random.Random` so runs can be replayed.
  - Entries are frozen dataclasses; `from_vertex` is derived from the
    edge once, at creation.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from graph import Graph


class EmptyContainerError(IndexError):
    """remove() called on an empty DiscoveryContainer."""


# ---------------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class LDVEntry:
    """
    vertex      : Vertex that was discovered.
    value       : Hops / distance / edge length carried with it.
    via_edge    : Edge followed to reach `vertex`; None for a seed entry.
    from_vertex : The other endpoint of `via_edge`; None iff via_edge is None.
    """

    vertex:      int
    value:       float
    via_edge:    Optional[int] = None
    from_vertex: Optional[int] = None

    def __post_init__(self):
        if (self.via_edge is None) != (self.from_vertex is None):
            raise ValueError(
                f"via_edge and from_vertex must both be set or both be None, "
                f"got via_edge={self.via_edge!r}, from_vertex={self.from_vertex!r}"
            )

    @classmethod
    def seed(cls, vertex: int) -> "LDVEntry":
        """The entry that starts a search (or a new component)."""
        return cls(vertex=vertex, value=0)

    @classmethod
    def via(cls, graph: Graph, vertex: int, value: float, edge: int) -> "LDVEntry":
        return cls(
            vertex=vertex,
            value=value,
            via_edge=edge,
            from_vertex=graph.get_edge(edge).other_end(vertex),
        )

    @property
    def is_seed(self) -> bool:
        return self.via_edge is None


Comparator = Callable[[LDVEntry, LDVEntry], bool]


def lower_value_first(a: LDVEntry, b: LDVEntry) -> bool:
    """Default comparator: smaller values leave the container first."""
    return a.value < b.value


# ---------------------------------------------------------------------------
# Discipline
# ---------------------------------------------------------------------------
class Discipline(Enum):
    LIFO     = "lifo"
    FIFO     = "fifo"
    RANDOM   = "random"
    PRIORITY = "priority"

    @property
    def add_operation(self) -> str:
        """Name used for add() in pseudocode."""
        return {Discipline.LIFO: "push", Discipline.FIFO: "enqueue"}.get(self, "add")

    @property
    def remove_operation(self) -> str:
        return {Discipline.LIFO: "pop", Discipline.FIFO: "dequeue"}.get(self, "remove")


# ---------------------------------------------------------------------------
# Container
# ---------------------------------------------------------------------------
class DiscoveryContainer:
    """
    Attributes:
        discipline      : Removal order.
        display_name    : e.g. "BFS Discovered Queue".
        comes_before    : PRIORITY ordering; comes_before(a, b) means a leaves first.
        value_precision : Decimal places when displaying entry values.
        add_count       : Total add() calls (diagnostics only).
        remove_count    : Total successful remove() calls.
    """

    def __init__(
        self,
        discipline: Discipline,
        display_name: str,
        comparator: Optional[Comparator] = None,
        rng: Optional[random.Random] = None,
        value_precision: int = 3,
    ):
        self.discipline      = discipline
        self.display_name    = display_name
        self.comes_before:   Comparator = comparator or lower_value_first
        self.value_precision = value_precision
        self.add_count       = 0
        self.remove_count    = 0
        self._items:         List[LDVEntry] = []
        self._rng            = rng or random.Random()

    # ------------------------------------------------------------------
    def add(self, entry: LDVEntry) -> None:
        if self.discipline is Discipline.PRIORITY:
            i = 0
            while i < len(self._items) and self.comes_before(entry, self._items[i]):
                i += 1
            self._items.insert(i, entry)
        else:
            self._items.append(entry)
        self.add_count += 1

    def remove(self) -> LDVEntry:
        if not self._items:
            raise EmptyContainerError(f"remove() on empty {self.display_name}")
        if self.discipline is Discipline.FIFO:
            entry = self._items.pop(0)
        elif self.discipline is Discipline.RANDOM:
            entry = self._items.pop(self._rng.randrange(len(self._items)))
        else:
            # LIFO and PRIORITY both take from the end
            entry = self._items.pop()
        self.remove_count += 1
        return entry

    def is_empty(self) -> bool:
        return not self._items

    def contains_field_matching(self, field_name: str, value) -> bool:
        return any(getattr(item, field_name) == value for item in self._items)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    @property
    def items(self) -> List[LDVEntry]:
        """Snapshot in internal order (the removal end is the last item
        for LIFO/PRIORITY and the first for FIFO)."""
        return list(self._items)

    @property
    def add_operation(self) -> str:
        return self.discipline.add_operation

    @property
    def remove_operation(self) -> str:
        return self.discipline.remove_operation

    def display_items(self, limit: Optional[int] = None) -> List[Optional[LDVEntry]]:
        """
        Entries to show, with None standing in for an elided run.
        Stacks and random bags show only the newest `limit`; queues keep
        both ends visible.
        """
        n = len(self._items)
        if limit is None or limit >= n:
            return list(self._items)
        if self.discipline in (Discipline.LIFO, Discipline.RANDOM):
            return [None] + self._items[n - limit:]
        first = limit // 2
        return self._items[:first] + [None] + self._items[n - (limit - first):]

    def format_value(self, value: float) -> str:
        return f"{value:.{self.value_precision}f}"

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"DiscoveryContainer({self.display_name!r}, size={len(self._items)})"
