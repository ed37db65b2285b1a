"""
extremes.py — Vertex Extremes Search
====================================
A single pass over the vertices that keeps a leader for each of six
categories: northernmost, southernmost, easternmost and westernmost
position, shortest and longest label.

    north ← south ← east ← west ← shortest ← longest ← 0
    for check ← 1 to |V|-1:
        for each category c:
            if v[check] beats v[c]: c ← check
        if v[check] leads nothing: discard v[check]

A leader that loses its last category is discarded at that moment, so
when the pass is over every vertex is either a leader or discarded:

    discarded + |distinct leaders| = |V|

Design decisions:
  - Comparisons are strict; on a tie the earlier vertex keeps the lead.
  - Each category check is its own action, so single-stepping walks the
    six tests one at a time.  They share the action names
    checkNextCategory / updateNextCategory and highlight per-category
    pseudocode lines (checkNextCategory0 … checkNextCategory5).
  - A vertex that leads several categories is drawn in the colour of
    the first one it leads.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from graph import Graph, Vertex
from algorithms.actions import START, DONE, Action, ActionAlgorithm, ActionTable
from algorithms.pseudocode import PseudocodeLine, line
from algorithms import visual
from algorithms.traversal import Selection, SelectionError
from algorithms.visual import VisualSetting, VisualizationSink


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Category:
    """
    Attributes:
        name      : Pseudocode variable / panel key, e.g. "north".
        label     : Human label for the leader table.
        condition : Pseudocode text of the test.
        beats     : beats(candidate, leader) -> bool, strict.
        setting   : Colour of the current leader.
        by_label  : Compares labels rather than positions.
    """

    name:      str
    label:     str
    condition: str
    beats:     Callable[[Vertex, Vertex], bool]
    setting:   VisualSetting
    by_label:  bool = False

    def describe_leader(self, vertex: Vertex) -> str:
        if self.by_label:
            return f"#{vertex.index} {vertex.label} (length {len(vertex.label)})"
        return f"#{vertex.index} {vertex.label} ({vertex.lat:.6f}, {vertex.lng:.6f})"


CATEGORIES: List[Category] = [
    Category("north", "North extreme", "v[check].lat > v[north].lat",
             lambda c, l: c.lat > l.lat, visual.NORTH_LEADER),
    Category("south", "South extreme", "v[check].lat < v[south].lat",
             lambda c, l: c.lat < l.lat, visual.SOUTH_LEADER),
    Category("east", "East extreme", "v[check].lng > v[east].lng",
             lambda c, l: c.lng > l.lng, visual.EAST_LEADER),
    Category("west", "West extreme", "v[check].lng < v[west].lng",
             lambda c, l: c.lng < l.lng, visual.WEST_LEADER),
    Category("shortest", "Shortest vertex label", "len(v[check].label) < len(v[shortest].label)",
             lambda c, l: len(c.label) < len(l.label), visual.SHORT_LABEL_LEADER, by_label=True),
    Category("longest", "Longest vertex label", "len(v[check].label) > len(v[longest].label)",
             lambda c, l: len(c.label) > len(l.label), visual.LONG_LABEL_LEADER, by_label=True),
]


# ---------------------------------------------------------------------------
# Action names
# ---------------------------------------------------------------------------
FOR_LOOP_TOP          = "forLoopTop"
CHECK_NEXT_CATEGORY   = "checkNextCategory"
UPDATE_NEXT_CATEGORY  = "updateNextCategory"
FOR_LOOP_BOTTOM       = "forLoopBottom"
CLEANUP               = "cleanup"


class VertexExtremesSearch(ActionAlgorithm):
    """
    Attributes:
        leaders          : Current leader vertex per category, in CATEGORIES order.
        next_to_check    : Vertex under examination.
        next_category    : Index of the category to test next.
        checked          : Index of the category tested by the last action.
        found_new_leader : True once the vertex under examination leads something.
        num_discarded    : Vertices that lead no category.
    """

    key  = "vertex"
    name = "Vertex Extremes Search"

    def __init__(
        self,
        graph: Optional[Graph] = None,
        selection: Optional[Selection] = None,
        sink: Optional[VisualizationSink] = None,
    ):
        super().__init__(sink)
        self.graph     = graph
        self.selection = selection or Selection()
        self.categories = CATEGORIES
        self._clear_state()

    def configure(self, graph: Graph, selection: Selection) -> None:
        """Only the graph matters; the selection is kept for exports."""
        self.graph     = graph
        self.selection = selection

    def validate(self) -> None:
        if self.graph is None or self.graph.vertex_count() == 0:
            raise SelectionError("no graph loaded")

    def prepare(self) -> None:
        self.validate()
        for v in self.graph.vertex_ids():
            self.sink.mark_vertex(v, visual.UNDISCOVERED)
        for e in range(self.graph.edge_count()):
            self.sink.mark_edge(e, visual.UNDISCOVERED, hidden=True)

    def _clear_state(self) -> None:
        self.leaders:        List[int] = [0] * len(self.categories)
        self.next_to_check             = 0
        self.next_category             = 0
        self.checked                   = 0
        self.found_new_leader          = False
        self.num_discarded             = 0

    # ------------------------------------------------------------------
    # Helpers used by the actions
    # ------------------------------------------------------------------
    def vertex(self, index: int) -> Vertex:
        return self.graph.get_vertex(index)

    def first_category_led_by(self, vertex: int) -> Optional[Category]:
        for cat, leader in zip(self.categories, self.leaders):
            if leader == vertex:
                return cat
        return None

    def leader_summary(self) -> List[tuple]:
        """[(category, leader vertex)] in category order."""
        return list(zip(self.categories, self.leaders))

    def update_leader_entry(self, i: int) -> None:
        cat = self.categories[i]
        self.sink.set_panel_entry(cat.name, f"{cat.label}: {cat.describe_leader(self.vertex(self.leaders[i]))}")

    def update_counts(self) -> None:
        n = self.graph.vertex_count()
        remaining = n - self.next_to_check - 1
        self.sink.set_panel_entry("undiscovered", f"{remaining} vertices not yet visited")
        self.sink.set_panel_entry("discarded", f"{self.num_discarded} vertices discarded")

    def discard(self, vertex: int) -> None:
        self.num_discarded += 1
        self.sink.mark_vertex(vertex, visual.DISCARDED, 20, hidden=True)

    def outcome_message(self) -> str:
        return f"Done! Visited {self.graph.vertex_count()} waypoints."

    # ------------------------------------------------------------------
    # Pseudocode
    # ------------------------------------------------------------------
    def pseudocode(self) -> List[PseudocodeLine]:
        code = line(0, " ← ".join(cat.name for cat in self.categories) + " ← 0", START)
        code += line(0, "for check ← 1 to |V|-1", FOR_LOOP_TOP)
        for i, cat in enumerate(self.categories):
            code += line(1, f"if {cat.condition}", CHECK_NEXT_CATEGORY, line_id=f"{CHECK_NEXT_CATEGORY}{i}")
            code += line(2, f"{cat.name} ← check", UPDATE_NEXT_CATEGORY, line_id=f"{UPDATE_NEXT_CATEGORY}{i}")
        code += line(1, "if v[check] leads nothing: discard v[check]", FOR_LOOP_BOTTOM)
        code += line(0, "// report results", CLEANUP)
        return code

    def __repr__(self) -> str:
        return f"VertexExtremesSearch({len(self.categories)} categories)"


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------
def _start(x: VertexExtremesSearch) -> None:
    x.sink.highlight(START, visual.VISITING)
    x._clear_state()
    x.sink.mark_vertex(0, x.categories[0].setting, 40)
    for i in range(len(x.categories)):
        x.update_leader_entry(i)
    x.update_counts()
    x.goto(FOR_LOOP_TOP, end_iteration=True)


def _for_loop_top(x: VertexExtremesSearch) -> None:
    x.sink.highlight(FOR_LOOP_TOP, visual.VISITING)
    x.next_to_check += 1
    if x.next_to_check == x.graph.vertex_count():
        x.goto(CLEANUP, end_iteration=True)
        return
    x.next_category    = 0
    x.found_new_leader = False
    v = x.vertex(x.next_to_check)
    x.sink.mark_vertex(v.index, visual.VISITING, 30)
    x.sink.set_panel_entry("visiting", f"Visiting #{v.index} {v.label} ({v.lat:.6f}, {v.lng:.6f})")
    x.update_counts()
    x.goto(CHECK_NEXT_CATEGORY, end_iteration=True)


def _advance_category(x: VertexExtremesSearch) -> None:
    x.next_category += 1
    x.goto(FOR_LOOP_BOTTOM if x.next_category == len(x.categories) else CHECK_NEXT_CATEGORY)


def _check_next_category(x: VertexExtremesSearch) -> None:
    i   = x.next_category
    cat = x.categories[i]
    x.checked = i
    x.sink.highlight(f"{CHECK_NEXT_CATEGORY}{i}", cat.setting)
    if cat.beats(x.vertex(x.next_to_check), x.vertex(x.leaders[i])):
        x.goto(UPDATE_NEXT_CATEGORY)
    else:
        _advance_category(x)


def _update_next_category(x: VertexExtremesSearch) -> None:
    i   = x.next_category
    cat = x.categories[i]
    x.checked = i
    x.sink.highlight(f"{UPDATE_NEXT_CATEGORY}{i}", cat.setting)
    x.found_new_leader = True

    old = x.leaders[i]
    x.leaders[i] = x.next_to_check
    still_leads = x.first_category_led_by(old)
    if still_leads is not None:
        x.sink.mark_vertex(old, still_leads.setting, 40)
    else:
        x.discard(old)
        x.update_counts()
    x.update_leader_entry(i)
    _advance_category(x)


def _for_loop_bottom(x: VertexExtremesSearch) -> None:
    x.sink.highlight(FOR_LOOP_BOTTOM, visual.VISITING)
    v = x.next_to_check
    if x.found_new_leader:
        x.sink.mark_vertex(v, x.first_category_led_by(v).setting, 40)
    else:
        x.discard(v)
        x.update_counts()
    x.goto(FOR_LOOP_TOP, end_iteration=True)


def _cleanup(x: VertexExtremesSearch) -> None:
    x.sink.highlight(CLEANUP, visual.VISITING)
    x.sink.set_panel_entry("visiting", None)
    x.sink.set_panel_entry("undiscovered", "0 vertices not yet visited")
    x.goto(DONE, end_iteration=True)


def _describe_check(x: VertexExtremesSearch) -> str:
    cat = x.categories[x.checked]
    return f"Checking #{x.next_to_check} against the {cat.label.lower()} leader #{x.leaders[x.checked]}"


def _describe_update(x: VertexExtremesSearch) -> str:
    cat = x.categories[x.checked]
    return f"#{x.next_to_check} is the new {cat.label.lower()} leader"


def _describe_loop_top(x: VertexExtremesSearch) -> str:
    if x.next_action == CLEANUP:
        return "All vertices checked"
    return f"Checking vertex #{x.next_to_check}"


def _describe_loop_bottom(x: VertexExtremesSearch) -> str:
    if x.found_new_leader:
        return f"#{x.next_to_check} leads at least one category"
    return f"#{x.next_to_check} leads no category, discarding"


EXTREMES_ACTIONS = ActionTable(
    [
        Action(START, _start,
               lambda x: "Initialized all leaders to vertex #0",
               targets=(FOR_LOOP_TOP,),
               comment="Initialize all leaders to the first vertex"),
        Action(FOR_LOOP_TOP, _for_loop_top, _describe_loop_top,
               targets=(CHECK_NEXT_CATEGORY, CLEANUP),
               comment="Top of the loop over vertices"),
        Action(CHECK_NEXT_CATEGORY, _check_next_category, _describe_check,
               targets=(UPDATE_NEXT_CATEGORY, CHECK_NEXT_CATEGORY, FOR_LOOP_BOTTOM),
               comment="Check if the vertex beats the current leader of a category"),
        Action(UPDATE_NEXT_CATEGORY, _update_next_category, _describe_update,
               targets=(CHECK_NEXT_CATEGORY, FOR_LOOP_BOTTOM),
               comment="Make the vertex the new leader of a category"),
        Action(FOR_LOOP_BOTTOM, _for_loop_bottom, _describe_loop_bottom,
               targets=(FOR_LOOP_TOP,),
               comment="Keep or discard the vertex just checked"),
        Action(CLEANUP, _cleanup,
               lambda x: x.outcome_message(),
               targets=(DONE,),
               comment="Clean up and finalize visualization"),
    ],
    name="vertex extremes",
)

VertexExtremesSearch.table = EXTREMES_ACTIONS
