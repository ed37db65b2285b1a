"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every algorithm visualization the app offers.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "traversals": AlgoInfo(key, label, factory, value_header, …),
        …
    }

Traversals, Dijkstra and Prim share the one Traversal state machine and
differ only in the TraversalStrategy it is built with.  The vertex
extremes search is a separate action table.  Adding an algorithm is:
write the ActionAlgorithm (or a strategy), add one entry here.
"""

from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, List, Optional

from algorithms.actions import ActionAlgorithm
from algorithms.extremes import VertexExtremesSearch
from algorithms.traversal import (
    DIJKSTRA, GRAPH_TRAVERSALS, PRIM, TRAVERSAL_DISCIPLINES,
    Selection, SelectionError, StoppingCondition, StopReason,
    Traversal, TraversalStrategy,
)
from algorithms.visual import VisualizationSink


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:                 str                    # registry key, e.g. "dijkstra"
    label:               str                    # human label
    factory:             Callable[..., ActionAlgorithm]   # factory(sink=…) → fresh instance
    value_header:        str = ""               # "Hops" / "Distance" / "Length"
    found_table_header:  str = ""
    value_precision:     int = 3                # decimals shown for values
    disciplines:         List[str] = field(default_factory=list)   # BFS/DFS/RFS choices
    stopping_conditions: List[StoppingCondition] = field(default_factory=list)
    description:         str = ""

    @property
    def supports_find_all(self) -> bool:
        return StoppingCondition.FIND_ALL in self.stopping_conditions

    def create(self, sink: Optional[VisualizationSink] = None) -> ActionAlgorithm:
        """Fresh algorithm instance, not yet configured."""
        return self.factory(sink=sink)


def traversal_info(key: str, strategy: TraversalStrategy, **kwargs) -> AlgoInfo:
    conds = [StoppingCondition.STOP_AT_END, StoppingCondition.FIND_REACHABLE]
    if strategy.supports_find_all:
        conds.append(StoppingCondition.FIND_ALL)
    return AlgoInfo(
        key=key,
        label=strategy.name,
        factory=partial(Traversal, strategy),
        value_header=strategy.value_header,
        found_table_header=strategy.found_table_header,
        stopping_conditions=conds,
        description=strategy.description,
        **kwargs,
    )


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "traversals": traversal_info(
        "traversals", GRAPH_TRAVERSALS,
        value_precision=0, disciplines=list(TRAVERSAL_DISCIPLINES),
    ),

    "dijkstra": traversal_info("dijkstra", DIJKSTRA),

    "prim": traversal_info("prim", PRIM),

    "vertex": AlgoInfo(
        key="vertex", label=VertexExtremesSearch.name, factory=VertexExtremesSearch,
        found_table_header="Category Leaders", value_precision=6,
        description=("Search for extreme values based on vertex (waypoint) locations "
                     "and labels."),
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "Selection",
    "SelectionError",
    "StoppingCondition",
    "StopReason",
    "Traversal",
    "VertexExtremesSearch",
]
