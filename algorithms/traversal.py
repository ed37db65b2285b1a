"""
traversal.py — Traversals & Spanning Trees
==========================================
One state machine drives breadth-first, depth-first and random-first
traversal, Dijkstra's algorithm and Prim's algorithm.  What differs
between them is supplied by a TraversalStrategy:

    create_container(selection)  →  which DiscoveryContainer (stack, queue, PQ…)
    comparator                   →  priority order, for PQ containers
    next_value(entry, edge)      →  value carried by a newly discovered entry
                                      hops      : entry.value + 1
                                      Dijkstra  : entry.value + edge.length
                                      Prim      : edge.length

Main loop (StopAtEnd shown; the other stopping conditions only change
the loop tests):

    d.add(start, null)
    while not tree.contains(end):
        if d.isEmpty: error: no path
        (to, via) ← d.remove()
        if tree.contains(to): discard (to, via)          // on removal
        else:
            tree.add(to, via)
            for each e = (to, v):
                if tree.contains(v): discard (v, e)       // on discovery
                else: d.add(v, e)

Design decisions:
  - Every state field is (re)initialised by the START action, never by
    the constructor, so one instance can be run again and again.
  - Neighbours are examined in incident-edge order, skipping only the
    edge that was just used to arrive.
  - An empty container under StopAtEnd is a normal outcome
    (StopReason.SEARCH_FAILED), not an exception.
  - FindAll seeds each new component with the lowest-indexed vertex not
    yet added.
"""

import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional, Tuple

from graph import Graph, GraphEdge
from algorithms.actions import START, DONE, Action, ActionAlgorithm, ActionTable
from algorithms.ldv import (
    Comparator, Discipline, DiscoveryContainer, LDVEntry, lower_value_first,
)
from algorithms.pseudocode import PseudocodeLine, line
from algorithms import visual
from algorithms.visual import VisualSetting, VisualizationSink


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------
class StoppingCondition(Enum):
    STOP_AT_END    = "StopAtEnd"
    FIND_REACHABLE = "FindReachable"
    FIND_ALL       = "FindAll"

    @property
    def label(self) -> str:
        return {
            StoppingCondition.STOP_AT_END:    "Stop When End Vertex Reached",
            StoppingCondition.FIND_REACHABLE: "Find All Vertices Reachable from Start",
            StoppingCondition.FIND_ALL:       "Find All Connected Components",
        }[self]


class StopReason(Enum):
    STILL_RUNNING        = "StillRunning"
    FOUND_PATH           = "FoundPath"
    SEARCH_FAILED        = "SearchFailed"
    FOUND_COMPONENT      = "FoundComponent"
    FOUND_ALL_COMPONENTS = "FoundAllComponents"


class SelectionError(ValueError):
    """Start/end vertex or stopping condition not usable for this run."""


TRAVERSAL_DISCIPLINES: Dict[str, Tuple[Discipline, str]] = {
    "BFS": (Discipline.FIFO,   "BFS Discovered Queue"),
    "DFS": (Discipline.LIFO,   "DFS Discovered Stack"),
    "RFS": (Discipline.RANDOM, "RFS Discovered List"),
}


@dataclass
class Selection:
    """What the user picked; read once, at prepare time."""

    start:              int = 0
    end:                Optional[int] = None
    stopping_condition: StoppingCondition = StoppingCondition.STOP_AT_END
    discipline:         str = "BFS"
    seed:               Optional[int] = None


# ---------------------------------------------------------------------------
# Strategy
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TraversalStrategy:
    """
    The plug-in record that turns the generic state machine into one
    specific algorithm.  Display strings are used for pseudocode and the
    found table only.
    """

    key:                str
    name:               str
    description:        str
    create_container:   Callable[[Selection], DiscoveryContainer]
    next_value:         Callable[[LDVEntry, GraphEdge], float]
    comparator:         Optional[Comparator] = None
    supports_find_all:  bool = False
    value_header:       str = ""
    found_table_header: str = ""
    # pseudocode fragments
    container_var:      str = "d"
    seed_args:          str = "(start,null)"
    removed:            str = "(to,via)"
    tree_add:           str = "tree.add(to,via)"
    add_args:           str = "(v,e)"


@dataclass
class Component:
    """One finished connected component (FindAll)."""

    vertices: List[int] = field(default_factory=list)
    edges:    List[int] = field(default_factory=list)
    color:    str = ""


# ---------------------------------------------------------------------------
# Action names
# ---------------------------------------------------------------------------
CHECK_ALL_COMPONENTS_DONE = "checkAllComponentsDone"
CHECK_COMPONENT_DONE      = "checkComponentDone"
CHECK_END_ADDED           = "checkEndAdded"
CHECK_LDV_EMPTY           = "checkLDVEmpty"
LDV_EMPTY                 = "LDVEmpty"
GET_PLACE_FROM_LDV        = "getPlaceFromLDV"
CHECK_ADDED               = "checkAdded"
WAS_ADDED                 = "wasAdded"
WAS_NOT_ADDED             = "wasNotAdded"
NEIGHBORS_LOOP_TOP        = "checkNeighborsLoopTop"
NEIGHBORS_LOOP_IF         = "checkNeighborsLoopIf"
NEIGHBORS_LOOP_IF_TRUE    = "checkNeighborsLoopIfTrue"
NEIGHBORS_LOOP_IF_FALSE   = "checkNeighborsLoopIfFalse"
FINALIZE_COMPONENT        = "finalizeComponent"
CHECK_ANY_UNADDED         = "checkAnyUnadded"
START_NEW_COMPONENT       = "startNewComponent"
DONE_TO_TRUE              = "doneToTrue"
CLEANUP                   = "cleanup"

# where each loop goes back to, per stopping condition
_LOOP_TOPS = (CHECK_END_ADDED, CHECK_COMPONENT_DONE)


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------
class Traversal(ActionAlgorithm):
    """
    Attributes (all reset by START):
        ldv               : The DiscoveryContainer built at prepare().
        added_v           : [bool] per vertex — in the tree/forest.
        discovered_v      : [bool] per vertex — seen at least once.
        discovered_e      : [bool] per edge   — seen at least once.
        visiting          : Entry most recently removed from the ldv.
        found             : Entries added to the tree, in order.
        path              : Start→end entries after a FoundPath run.
        components        : Finished components (FindAll).
        stopped_because   : StopReason for the cleanup message.
    """

    def __init__(
        self,
        strategy: TraversalStrategy,
        graph: Optional[Graph] = None,
        selection: Optional[Selection] = None,
        sink: Optional[VisualizationSink] = None,
    ):
        super().__init__(sink)
        self.strategy  = strategy
        self.key       = strategy.key
        self.name      = strategy.name
        self.graph     = graph
        self.selection = selection or Selection()
        self.ldv:      Optional[DiscoveryContainer] = None
        self._clear_state()

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------
    @property
    def stopping_condition(self) -> StoppingCondition:
        return self.selection.stopping_condition

    def configure(self, graph: Graph, selection: Selection) -> None:
        self.graph     = graph
        self.selection = selection

    def validate(self) -> None:
        """Raise SelectionError if the current selection cannot run."""
        g, sel = self.graph, self.selection
        if g is None or g.vertex_count() == 0:
            raise SelectionError("no graph loaded")
        if not g.has_vertex(sel.start):
            raise SelectionError(f"start vertex {sel.start!r} is not in the graph")
        if sel.stopping_condition is StoppingCondition.STOP_AT_END:
            if sel.end is None or not g.has_vertex(sel.end):
                raise SelectionError(f"end vertex {sel.end!r} is not in the graph")
        if sel.stopping_condition is StoppingCondition.FIND_ALL and not self.strategy.supports_find_all:
            raise SelectionError(f"{self.strategy.name} cannot find all components")
        # unknown disciplines are rejected by the container factory
        self.strategy.create_container(sel)

    def prepare(self) -> None:
        self.validate()
        self.ldv = self.strategy.create_container(self.selection)
        if self.strategy.comparator is not None:
            self.ldv.comes_before = self.strategy.comparator

        for v in self.graph.vertex_ids():
            self.sink.mark_vertex(v, visual.UNDISCOVERED)
        for e in range(self.graph.edge_count()):
            self.sink.mark_edge(e, visual.UNDISCOVERED)

    def _clear_state(self) -> None:
        n_v = self.graph.vertex_count() if self.graph else 0
        n_e = self.graph.edge_count() if self.graph else 0

        self.added_v:       List[bool] = [False] * n_v
        self.discovered_v:  List[bool] = [False] * n_v
        self.discovered_e:  List[bool] = [False] * n_e

        self.num_v_spanning_tree         = 0
        self.num_e_spanning_tree         = 0
        self.num_v_undiscovered          = n_v
        self.num_e_undiscovered          = n_e
        self.num_e_discarded_on_discovery = 0
        self.num_e_discarded_on_removal  = 0
        self.component_num               = 0

        self.start_vertex:   int           = self.selection.start
        self.end_vertex:     Optional[int] = None
        self.start_unadded_search          = 0
        self.all_components_done           = False
        self.stopped_because               = StopReason.STILL_RUNNING

        self.visiting:       Optional[LDVEntry]           = None
        self.neighbors_to_loop: Deque[Tuple[int, int]]   = deque()
        self.next_neighbor:  Optional[Tuple[int, int]]    = None

        self.component_v:    List[int]      = []
        self.component_e:    List[int]      = []
        self.components:     List[Component] = []
        self.found:          List[LDVEntry] = []
        self.path:           List[LDVEntry] = []
        self.found_label                    = self.strategy.found_table_header
        self._color_rng                     = random.Random(self.selection.seed)

    # ------------------------------------------------------------------
    # Helpers used by the actions
    # ------------------------------------------------------------------
    def loop_top(self) -> str:
        if self.stopping_condition is StoppingCondition.STOP_AT_END:
            return CHECK_END_ADDED
        return CHECK_COMPONENT_DONE

    def label_of(self, vertex: int) -> str:
        return self.graph.get_vertex(vertex).label

    def format_entry(self, entry: LDVEntry) -> str:
        if entry.is_seed:
            how = ", the starting vertex"
        else:
            how = f" found via {self.graph.get_edge(entry.via_edge).label}"
        return f"#{entry.vertex} {self.label_of(entry.vertex)}{how}"

    def mark_end_points(self, vertex: int, fallback: VisualSetting, z_order: int) -> None:
        """Start and end vertices keep their own colours."""
        if vertex == self.start_vertex:
            self.sink.mark_vertex(vertex, visual.START_VERTEX, 4)
        elif vertex == self.end_vertex:
            self.sink.mark_vertex(vertex, visual.END_VERTEX, 4)
        else:
            self.sink.mark_vertex(vertex, fallback, z_order)

    def seed(self, vertex: int) -> None:
        if not self.discovered_v[vertex]:
            self.discovered_v[vertex] = True
            self.num_v_undiscovered -= 1
        self.sink.mark_vertex(vertex, visual.DISCOVERED, 10)
        self.ldv.add(LDVEntry.seed(vertex))

    def component_color(self, n: int) -> str:
        if n < len(visual.COMPONENT_COLORS):
            return visual.COMPONENT_COLORS[n]
        return "#%06x" % self._color_rng.randrange(0x1000000)

    def update_control_entries(self) -> None:
        s = self.sink
        s.set_panel_entry(
            "undiscovered",
            f"Undiscovered: {self.num_v_undiscovered} V, {self.num_e_undiscovered} E",
        )
        if self.stopping_condition is StoppingCondition.FIND_ALL:
            label, count = "Spanning Forest: ", f", {self.component_num + 1} components"
        else:
            label, count = "Spanning Tree: ", ""
        s.set_panel_entry(
            "currentSpanningTree",
            f"{label}{self.num_v_spanning_tree} V, {self.num_e_spanning_tree} E{count}",
        )
        s.set_panel_entry(
            "discardedOnDiscovery",
            f"Discarded on discovery: {self.num_e_discarded_on_discovery} E",
        )
        s.set_panel_entry(
            "discardedOnRemoval",
            f"Discarded on removal: {self.num_e_discarded_on_removal} E",
        )
        s.set_panel_entry("discovered", f"{self.ldv.display_name} (size {len(self.ldv)})")
        s.set_panel_entry("found", f"{len(self.found)} {self.found_label}")

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    @property
    def values(self) -> Dict[int, float]:
        """Value each added vertex was added with."""
        return {e.vertex: e.value for e in self.found}

    @property
    def tree_edges(self) -> List[int]:
        return [e.via_edge for e in self.found if not e.is_seed]

    @property
    def hops(self) -> int:
        return max(len(self.path) - 1, 0)

    def outcome_message(self) -> str:
        sb = self.stopped_because
        if sb is StopReason.SEARCH_FAILED:
            return (f"No path found from #{self.start_vertex} {self.label_of(self.start_vertex)}"
                    f" to #{self.end_vertex} {self.label_of(self.end_vertex)}")
        if sb is StopReason.FOUND_PATH:
            return (f"Found path from #{self.start_vertex} {self.label_of(self.start_vertex)}"
                    f" to #{self.end_vertex} {self.label_of(self.end_vertex)}")
        if sb is StopReason.FOUND_COMPONENT:
            return f"Found all paths from #{self.start_vertex} {self.label_of(self.start_vertex)}"
        if sb is StopReason.FOUND_ALL_COMPONENTS:
            return f"Found all {self.component_num + 1} components"
        return "Still running"

    # ------------------------------------------------------------------
    # Pseudocode
    # ------------------------------------------------------------------
    def pseudocode(self) -> List[PseudocodeLine]:
        st  = self.strategy
        ldv = self.ldv or st.create_container(self.selection)
        d   = st.container_var
        add = f"{d}.{ldv.add_operation}"

        init = [f"{d} ← new {ldv.display_name}", f"{add}{st.seed_args}"]
        if self.stopping_condition is StoppingCondition.FIND_ALL:
            init.append("done ← false")
        code = line(0, init, START)

        def body(indent: int) -> List[PseudocodeLine]:
            return (
                line(indent + 1, f"{st.removed} ← {d}.{ldv.remove_operation}()", GET_PLACE_FROM_LDV)
                + line(indent + 1, "if tree.contains(to)", CHECK_ADDED)
                + line(indent + 2, "discard (to,via) // on removal", WAS_ADDED)
                + line(indent + 1, "else")
                + line(indent + 2, st.tree_add, WAS_NOT_ADDED)
                + line(indent + 2, "for each e=(to,v) // neighbors", NEIGHBORS_LOOP_TOP)
                + line(indent + 3, "if tree.contains(v)", NEIGHBORS_LOOP_IF)
                + line(indent + 4, "discard (v,e) // on discovery", NEIGHBORS_LOOP_IF_TRUE)
                + line(indent + 3, "else")
                + line(indent + 4, f"{add}{st.add_args}", NEIGHBORS_LOOP_IF_FALSE)
            )

        sc = self.stopping_condition
        if sc is StoppingCondition.STOP_AT_END:
            code += (
                line(0, "while not tree.contains(end)", CHECK_END_ADDED)
                + line(1, f"if {d}.isEmpty", CHECK_LDV_EMPTY)
                + line(2, "error: no path", LDV_EMPTY)
                + body(0)
            )
        elif sc is StoppingCondition.FIND_REACHABLE:
            code += line(0, f"while not {d}.isEmpty", CHECK_COMPONENT_DONE) + body(0)
        else:
            code += (
                line(0, "while not done", CHECK_ALL_COMPONENTS_DONE)
                + line(1, f"while not {d}.isEmpty", CHECK_COMPONENT_DONE)
                + body(1)
                + line(1, "// finalize component", FINALIZE_COMPONENT)
                + line(1, "if ∃ any unadded vertices", CHECK_ANY_UNADDED)
                + line(2, ["v ← any unadded vertex", f"{add}(v,null)"], START_NEW_COMPONENT)
                + line(1, "else")
                + line(2, "done ← true", DONE_TO_TRUE)
            )
        code += line(0, "// report results", CLEANUP)
        return code

    def __repr__(self) -> str:
        return f"Traversal({self.strategy.key!r}, {self.stopping_condition.value})"


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------
def _start(t: Traversal) -> None:
    t.sink.highlight(START, visual.VISITING)
    t._clear_state()
    t.start_vertex = t.selection.start
    if t.stopping_condition is StoppingCondition.STOP_AT_END:
        t.end_vertex = t.selection.end
        t.sink.mark_vertex(t.end_vertex, visual.END_VERTEX, 4)

    t.seed(t.start_vertex)
    t.update_control_entries()

    if t.stopping_condition is StoppingCondition.STOP_AT_END:
        t.goto(CHECK_END_ADDED, end_iteration=True)
    elif t.stopping_condition is StoppingCondition.FIND_REACHABLE:
        t.goto(CHECK_COMPONENT_DONE, end_iteration=True)
    else:
        t.goto(CHECK_ALL_COMPONENTS_DONE, end_iteration=True)


def _check_all_components_done(t: Traversal) -> None:
    t.sink.highlight(CHECK_ALL_COMPONENTS_DONE, visual.VISITING)
    if t.all_components_done:
        t.stopped_because = StopReason.FOUND_ALL_COMPONENTS
        t.goto(CLEANUP, end_iteration=True)
    else:
        t.goto(CHECK_COMPONENT_DONE, end_iteration=True)


def _check_component_done(t: Traversal) -> None:
    t.sink.highlight(CHECK_COMPONENT_DONE, visual.VISITING)
    if t.ldv.is_empty():
        if t.stopping_condition is StoppingCondition.FIND_ALL:
            t.goto(FINALIZE_COMPONENT, end_iteration=True)
        else:
            t.stopped_because = StopReason.FOUND_COMPONENT
            t.goto(CLEANUP, end_iteration=True)
    else:
        t.goto(GET_PLACE_FROM_LDV, end_iteration=True)


def _check_end_added(t: Traversal) -> None:
    t.sink.highlight(CHECK_END_ADDED, visual.VISITING)
    if t.added_v[t.end_vertex]:
        t.stopped_because = StopReason.FOUND_PATH
        t.goto(CLEANUP, end_iteration=True)
    else:
        t.goto(CHECK_LDV_EMPTY, end_iteration=True)


def _check_ldv_empty(t: Traversal) -> None:
    t.sink.highlight(CHECK_LDV_EMPTY, visual.VISITING)
    t.goto(LDV_EMPTY if t.ldv.is_empty() else GET_PLACE_FROM_LDV)


def _ldv_empty(t: Traversal) -> None:
    t.sink.highlight(LDV_EMPTY, visual.SEARCH_FAILED)
    t.stopped_because = StopReason.SEARCH_FAILED
    t.goto(CLEANUP)


def _get_place_from_ldv(t: Traversal) -> None:
    t.sink.highlight(GET_PLACE_FROM_LDV, visual.VISITING)
    t.visiting = t.ldv.remove()
    t.sink.set_panel_entry("visiting", "Visiting " + t.format_entry(t.visiting))
    t.sink.set_panel_entry("discovered", f"{t.ldv.display_name} (size {len(t.ldv)})")
    t.sink.mark_vertex(t.visiting.vertex, visual.VISITING, 10)
    if not t.visiting.is_seed:
        t.sink.mark_edge(t.visiting.via_edge, visual.VISITING)
    t.goto(CHECK_ADDED)


def _check_added(t: Traversal) -> None:
    t.sink.highlight(CHECK_ADDED, visual.VISITING)
    t.goto(WAS_ADDED if t.added_v[t.visiting.vertex] else WAS_NOT_ADDED)


def _was_added(t: Traversal) -> None:
    t.sink.highlight(WAS_ADDED, visual.DISCARDED)
    t.num_e_discarded_on_removal += 1

    v = t.visiting.vertex
    # more copies still pending: flag the vertex as added earlier
    if t.ldv.contains_field_matching("vertex", v):
        t.mark_end_points(v, visual.ADDED_EARLIER, 4)
    else:
        t.mark_end_points(v, visual.SPANNING_TREE, 10)
    if not t.visiting.is_seed:
        t.sink.mark_edge(t.visiting.via_edge, visual.DISCARDED)

    t.update_control_entries()
    t.goto(t.loop_top())


def _was_not_added(t: Traversal) -> None:
    t.sink.highlight(WAS_NOT_ADDED, visual.SPANNING_TREE)
    entry = t.visiting
    t.added_v[entry.vertex] = True
    t.mark_end_points(entry.vertex, visual.SPANNING_TREE, 10)

    t.component_v.append(entry.vertex)
    t.num_v_spanning_tree += 1
    if not entry.is_seed:
        t.num_e_spanning_tree += 1
        t.component_e.append(entry.via_edge)
        t.sink.mark_edge(entry.via_edge, visual.SPANNING_TREE)

    t.found.append(entry)
    t.update_control_entries()
    t.goto(NEIGHBORS_LOOP_TOP)


def _after_neighbor(t: Traversal) -> None:
    if t.neighbors_to_loop:
        t.goto(NEIGHBORS_LOOP_IF)
    else:
        t.goto(t.loop_top())


def _neighbors_loop_top(t: Traversal) -> None:
    t.sink.highlight(NEIGHBORS_LOOP_TOP, visual.VISITING)
    t.neighbors_to_loop = deque(
        (to, edge.index)
        for to, edge in t.graph.neighbours(t.visiting.vertex)
        if edge.index != t.visiting.via_edge
    )
    _after_neighbor(t)


def _neighbors_loop_if(t: Traversal) -> None:
    t.sink.highlight(NEIGHBORS_LOOP_IF, visual.VISITING)
    t.next_neighbor = t.neighbors_to_loop.popleft()
    to, _ = t.next_neighbor
    t.goto(NEIGHBORS_LOOP_IF_TRUE if t.added_v[to] else NEIGHBORS_LOOP_IF_FALSE)


def _neighbors_loop_if_true(t: Traversal) -> None:
    t.sink.highlight(NEIGHBORS_LOOP_IF_TRUE, visual.DISCARDED_ON_DISCOVERY)
    _, via = t.next_neighbor
    t.num_e_discarded_on_discovery += 1
    if not t.discovered_e[via]:
        t.discovered_e[via] = True
        t.num_e_undiscovered -= 1
    t.sink.mark_edge(via, visual.DISCARDED_ON_DISCOVERY)

    t.update_control_entries()
    _after_neighbor(t)


def _neighbors_loop_if_false(t: Traversal) -> None:
    t.sink.highlight(NEIGHBORS_LOOP_IF_FALSE, visual.DISCOVERED)
    to, via = t.next_neighbor
    if not t.discovered_v[to]:
        t.discovered_v[to] = True
        t.num_v_undiscovered -= 1
    if not t.discovered_e[via]:
        t.discovered_e[via] = True
        t.num_e_undiscovered -= 1

    edge  = t.graph.get_edge(via)
    value = t.strategy.next_value(t.visiting, edge)
    t.ldv.add(LDVEntry.via(t.graph, to, value, via))

    if to == t.end_vertex:
        t.sink.mark_vertex(to, visual.END_VERTEX, 4)
    else:
        t.sink.mark_vertex(to, visual.DISCOVERED, 5)
    t.sink.mark_edge(via, visual.DISCOVERED)

    t.update_control_entries()
    _after_neighbor(t)


def _finalize_component(t: Traversal) -> None:
    color   = t.component_color(t.component_num)
    setting = visual.COMPLETED_COMPONENT.recolored(f"completedComponent{t.component_num}", color)
    t.sink.highlight(FINALIZE_COMPONENT, setting)

    for v in t.component_v:
        t.sink.mark_vertex(v, setting, 0)
    for e in t.component_e:
        t.sink.mark_edge(e, setting)
    t.components.append(Component(list(t.component_v), list(t.component_e), color))
    t.goto(CHECK_ANY_UNADDED)


def _check_any_unadded(t: Traversal) -> None:
    t.sink.highlight(CHECK_ANY_UNADDED, visual.VISITING)
    if t.num_v_spanning_tree != t.graph.vertex_count():
        t.goto(START_NEW_COMPONENT)
    else:
        t.goto(DONE_TO_TRUE)


def _start_new_component(t: Traversal) -> None:
    t.sink.highlight(START_NEW_COMPONENT, visual.VISITING)
    t.component_v = []
    t.component_e = []
    t.component_num += 1

    while t.added_v[t.start_unadded_search]:
        t.start_unadded_search += 1
    t.seed(t.start_unadded_search)

    t.update_control_entries()
    t.goto(CHECK_ALL_COMPONENTS_DONE, end_iteration=True)


def _done_to_true(t: Traversal) -> None:
    t.sink.highlight(DONE_TO_TRUE, visual.VISITING)
    t.all_components_done = True
    t.goto(CHECK_ALL_COMPONENTS_DONE)


def _cleanup(t: Traversal) -> None:
    t.sink.highlight(CLEANUP, visual.VISITING)
    if t.stopped_because is StopReason.FOUND_PATH:
        by_vertex = {e.vertex: e for e in t.found}
        place = t.end_vertex
        path  = [by_vertex[place]]
        while place != t.start_vertex:
            entry = by_vertex[place]
            t.sink.mark_vertex(place, visual.FOUND_PATH, 5)
            t.sink.mark_edge(entry.via_edge, visual.FOUND_PATH)
            place = entry.from_vertex
            path.append(by_vertex[place])
        path.reverse()
        t.path = path
        t.found_label = f"Path found with {t.hops} hops:"
        t.sink.set_panel_entry("found", t.found_label)
    t.goto(DONE, end_iteration=True)


def _describe_cleanup(t: Traversal) -> str:
    return t.outcome_message()


def _describe_loop_top(t: Traversal) -> str:
    if t.neighbors_to_loop:
        return f"Looping over {len(t.neighbors_to_loop)} neighbors"
    return "No neighbors to loop over"


def _neighbor_edge_label(t: Traversal) -> str:
    return t.graph.get_edge(t.next_neighbor[1]).label


TRAVERSAL_ACTIONS = ActionTable(
    [
        Action(START, _start,
               lambda t: "Initializing",
               targets=(CHECK_END_ADDED, CHECK_COMPONENT_DONE, CHECK_ALL_COMPONENTS_DONE),
               comment="initialize algorithm"),
        Action(CHECK_ALL_COMPONENTS_DONE, _check_all_components_done,
               lambda t: "Checking if all components have been found",
               targets=(CLEANUP, CHECK_COMPONENT_DONE),
               comment="Check if more components remain to be found"),
        Action(CHECK_COMPONENT_DONE, _check_component_done,
               lambda t: f"Check if the {t.ldv.display_name} is empty",
               targets=(FINALIZE_COMPONENT, CLEANUP, GET_PLACE_FROM_LDV),
               comment="Check if the current component is completely added"),
        Action(CHECK_END_ADDED, _check_end_added,
               lambda t: "Check if the end vertex has been added.",
               targets=(CLEANUP, CHECK_LDV_EMPTY),
               comment="Check if we have added the end vertex"),
        Action(CHECK_LDV_EMPTY, _check_ldv_empty,
               lambda t: f"Check if the {t.ldv.display_name} is empty",
               targets=(LDV_EMPTY, GET_PLACE_FROM_LDV),
               comment="Check if the LDV is empty (in which case no path exists)"),
        Action(LDV_EMPTY, _ldv_empty,
               lambda t: f"The {t.ldv.display_name} is empty, no path to end vertex exists.",
               targets=(CLEANUP,),
               comment="LDV is empty, no path exists"),
        Action(GET_PLACE_FROM_LDV, _get_place_from_ldv,
               lambda t: f"Removed {t.format_entry(t.visiting)} from {t.ldv.display_name}",
               targets=(CHECK_ADDED,),
               comment="Get a place from the LDV"),
        Action(CHECK_ADDED, _check_added,
               lambda t: f"Checking if #{t.visiting.vertex} was previously added",
               targets=(WAS_ADDED, WAS_NOT_ADDED),
               comment="Check if the place being visited was previously added"),
        Action(WAS_ADDED, _was_added,
               lambda t: f"Discarding {t.format_entry(t.visiting)} on removal",
               targets=_LOOP_TOPS,
               comment="Place being visited already added, so discard"),
        Action(WAS_NOT_ADDED, _was_not_added,
               lambda t: f"Adding {t.format_entry(t.visiting)} to tree",
               targets=(NEIGHBORS_LOOP_TOP,),
               comment="Found path to new place, so add it to tree"),
        Action(NEIGHBORS_LOOP_TOP, _neighbors_loop_top, _describe_loop_top,
               targets=(NEIGHBORS_LOOP_IF,) + _LOOP_TOPS,
               comment="Top of loop over edges from vertex just added"),
        Action(NEIGHBORS_LOOP_IF, _neighbors_loop_if,
               lambda t: f"Checking if #{t.next_neighbor[0]} is in the tree",
               targets=(NEIGHBORS_LOOP_IF_TRUE, NEIGHBORS_LOOP_IF_FALSE),
               comment="Check the next neighbor of an added vertex"),
        Action(NEIGHBORS_LOOP_IF_TRUE, _neighbors_loop_if_true,
               lambda t: (f"#{t.next_neighbor[0]} via {_neighbor_edge_label(t)}"
                          " already visited, discarding on discovery"),
               targets=(NEIGHBORS_LOOP_IF,) + _LOOP_TOPS,
               comment="Neighbor already visited, discard on discovery"),
        Action(NEIGHBORS_LOOP_IF_FALSE, _neighbors_loop_if_false,
               lambda t: (f"#{t.next_neighbor[0]} via {_neighbor_edge_label(t)}"
                          f" added to {t.ldv.display_name}"),
               targets=(NEIGHBORS_LOOP_IF,) + _LOOP_TOPS,
               comment="Neighbor not yet visited, add to LDV"),
        Action(FINALIZE_COMPONENT, _finalize_component,
               lambda t: (f"Finalized component {t.component_num} with "
                          f"{len(t.component_v)} vertices, {len(t.component_e)} edges."),
               targets=(CHECK_ANY_UNADDED,),
               comment="Finalize completed component"),
        Action(CHECK_ANY_UNADDED, _check_any_unadded,
               lambda t: "Checking if all vertices have been added to a tree",
               targets=(START_NEW_COMPONENT, DONE_TO_TRUE),
               comment="Check if there are more vertices not yet in the forest"),
        Action(START_NEW_COMPONENT, _start_new_component,
               lambda t: f"Starting component {t.component_num} with vertex {t.start_unadded_search}",
               targets=(CHECK_ALL_COMPONENTS_DONE,),
               comment="Start work on the next connected component"),
        Action(DONE_TO_TRUE, _done_to_true,
               lambda t: "All components found, setting done flag to true",
               targets=(CHECK_ALL_COMPONENTS_DONE,),
               comment="All vertices added, so no more components"),
        Action(CLEANUP, _cleanup, _describe_cleanup,
               targets=(DONE,),
               comment="Clean up and finalize visualization"),
    ],
    name="traversal",
)

Traversal.table = TRAVERSAL_ACTIONS


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------
def traversal_container(selection: Selection) -> DiscoveryContainer:
    try:
        discipline, display_name = TRAVERSAL_DISCIPLINES[selection.discipline]
    except KeyError:
        raise SelectionError(f"unknown traversal discipline {selection.discipline!r}") from None
    return DiscoveryContainer(
        discipline, display_name,
        rng=random.Random(selection.seed),
        value_precision=0,
    )


def priority_container(selection: Selection) -> DiscoveryContainer:
    return DiscoveryContainer(Discipline.PRIORITY, "Priority Queue", value_precision=3)


GRAPH_TRAVERSALS = TraversalStrategy(
    key="traversals",
    name="Graph Traversals/Connected Components",
    description=("Perform graph traversal using breadth-first, depth-first, or random-first "
                 "traversals, with the option of iterating to find all connected components "
                 "of the graph."),
    create_container=traversal_container,
    next_value=lambda entry, edge: entry.value + 1,
    supports_find_all=True,
    value_header="Hops",
    found_table_header="Edges in Spanning Tree/Forest",
)

DIJKSTRA = TraversalStrategy(
    key="dijkstra",
    name="Dijkstra's Algorithm",
    description="Dijkstra's algorithm for single-source shortest paths.",
    create_container=priority_container,
    next_value=lambda entry, edge: entry.value + edge.length,
    comparator=lower_value_first,
    supports_find_all=False,
    value_header="Distance",
    found_table_header="Shortest Paths Found So Far",
    container_var="pq",
    seed_args="(start,null,0)",
    removed="(to,via,d)",
    tree_add="tree.add(to,via,d)",
    add_args="(v,e,d+len(e))",
)

PRIM = TraversalStrategy(
    key="prim",
    name="Prim's Algorithm",
    description="Prim's algorithm for minimum cost spanning trees.",
    create_container=priority_container,
    next_value=lambda entry, edge: edge.length,
    comparator=lower_value_first,
    supports_find_all=True,
    value_header="Length",
    found_table_header="Edges in Spanning Tree/Forest",
    container_var="pq",
    seed_args="(start,null,0)",
    removed="(to,via,d)",
    tree_add="tree.add(to,via,d)",
    add_args="(v,e,len(e))",
)
