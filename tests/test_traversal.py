import pytest

from algorithms import (
    REGISTRY, Selection, SelectionError, StoppingCondition, StopReason,
    get_algorithm, list_algorithms,
)
from algorithms.actions import DONE
from algorithms.pseudocode import render_text
from algorithms.traversal import CLEANUP, DIJKSTRA, PRIM, Traversal


def run(algo_key, graph, recorder=None, **selection):
    """Walk the action table to DONE without a controller."""
    alg = get_algorithm(algo_key).create(sink=recorder)
    alg.configure(graph, Selection(**selection))
    alg.prepare()
    while alg.next_action != DONE:
        alg.table.perform(alg, alg.next_action)
    return alg


# ---------------------------------------------------------------------------
# Traversals
# ---------------------------------------------------------------------------
def test_bfs_hop_counts(cycle4):
    alg = run("traversals", cycle4, start=0, end=2)
    assert alg.stopped_because is StopReason.FOUND_PATH
    assert alg.values == {0: 0, 1: 1, 3: 1, 2: 2}
    assert [e.vertex for e in alg.path] == [0, 1, 2]
    assert alg.hops == 2
    assert alg.found_label == "Path found with 2 hops:"
    # the copy of 2 reached through 3 is still pending
    assert len(alg.ldv) == 1


def test_dfs_follows_newest_discovery(cycle4):
    alg = run("traversals", cycle4, start=0, end=2, discipline="DFS")
    assert [e.vertex for e in alg.path] == [0, 3, 2]
    assert alg.tree_edges == [3, 2]


def test_rfs_is_replayable(cycle4):
    a = run("traversals", cycle4, start=0, end=2, discipline="RFS", seed=11)
    b = run("traversals", cycle4, start=0, end=2, discipline="RFS", seed=11)
    assert [e.vertex for e in a.found] == [e.vertex for e in b.found]
    assert a.stopped_because is StopReason.FOUND_PATH


def test_start_equal_to_end(cycle4):
    alg = run("traversals", cycle4, start=1, end=1)
    assert alg.stopped_because is StopReason.FOUND_PATH
    assert alg.hops == 0


def test_search_failed_leaves_container_empty(two_pairs):
    alg = run("traversals", two_pairs, start=0, end=3)
    assert alg.stopped_because is StopReason.SEARCH_FAILED
    assert alg.ldv.is_empty()
    assert alg.path == []
    assert alg.outcome_message() == "No path found from #0 V0 to #3 V3"


def test_find_reachable_stays_in_component(two_pairs):
    alg = run("traversals", two_pairs, start=2,
              stopping_condition=StoppingCondition.FIND_REACHABLE)
    assert alg.stopped_because is StopReason.FOUND_COMPONENT
    assert sorted(alg.values) == [2, 3]
    assert alg.components == []
    assert alg.outcome_message() == "Found all paths from #2 V2"


def test_find_all_components(two_pairs):
    alg = run("traversals", two_pairs, start=0,
              stopping_condition=StoppingCondition.FIND_ALL)
    assert alg.stopped_because is StopReason.FOUND_ALL_COMPONENTS
    assert [(c.vertices, c.edges) for c in alg.components] == [([0, 1], [0]), ([2, 3], [1])]
    assert [c.color for c in alg.components] == ["orange", "darkCyan"]
    assert alg.outcome_message() == "Found all 2 components"


def test_find_all_from_middle_vertex(two_pairs):
    alg = run("traversals", two_pairs, start=3,
              stopping_condition=StoppingCondition.FIND_ALL)
    # second component is seeded with the lowest unadded vertex
    assert [c.vertices[0] for c in alg.components] == [3, 0]


def test_discards_are_counted(cycle4, recorder):
    alg = run("traversals", cycle4, recorder, start=0,
              stopping_condition=StoppingCondition.FIND_REACHABLE)
    assert alg.num_v_spanning_tree == 4
    assert alg.num_e_spanning_tree == 3
    # 2 is reached twice; the second copy is thrown away on removal
    assert alg.num_e_discarded_on_removal == 1
    # 2-3 is seen again from 2 after 3 joined the tree
    assert alg.num_e_discarded_on_discovery == 1
    assert recorder.panel["discardedOnRemoval"] == "Discarded on removal: 1 E"


def test_rerun_starts_from_clean_state(cycle4):
    alg = run("traversals", cycle4, start=0, end=2)
    alg.next_action = "START"
    alg.prepare()
    while alg.next_action != DONE:
        alg.table.perform(alg, alg.next_action)
    assert len(alg.found) == 4
    assert alg.num_v_spanning_tree == 4


# ---------------------------------------------------------------------------
# Weighted
# ---------------------------------------------------------------------------
def test_dijkstra_prefers_shorter_total(triangle):
    alg = run("dijkstra", triangle, start=0, end=2)
    assert alg.values[2] == 2
    assert [e.vertex for e in alg.path] == [0, 1, 2]
    assert alg.ldv.items[0].value == 5


def test_prim_builds_minimum_tree(triangle):
    alg = run("prim", triangle, start=0, stopping_condition=StoppingCondition.FIND_REACHABLE)
    assert sorted(alg.tree_edges) == [0, 1]
    assert sum(triangle.get_edge(e).length for e in alg.tree_edges) == 2
    assert alg.num_e_discarded_on_discovery == 1
    assert alg.num_e_discarded_on_removal == 1


def test_prim_find_all(two_pairs):
    alg = run("prim", two_pairs, start=0, stopping_condition=StoppingCondition.FIND_ALL)
    assert len(alg.components) == 2


# ---------------------------------------------------------------------------
# Visual output
# ---------------------------------------------------------------------------
def test_highlights_start_and_end_with_cleanup(cycle4, recorder):
    run("traversals", cycle4, recorder, start=0, end=2)
    hl = recorder.highlights()
    assert hl[0] == "START"
    assert hl[-1] == CLEANUP
    assert recorder.vertex_style(2) == "foundPath"
    assert recorder.edge_style(0) == "foundPath"
    assert recorder.vertex_style(0) == "startVertex"


def test_prepare_marks_everything_undiscovered(cycle4, recorder):
    alg = get_algorithm("traversals").create(sink=recorder)
    alg.configure(cycle4, Selection(start=0, end=2))
    alg.prepare()
    assert {recorder.vertex_style(v) for v in range(4)} == {"undiscovered"}
    assert {recorder.edge_style(e) for e in range(4)} == {"undiscovered"}


# ---------------------------------------------------------------------------
# Selection validation
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("selection", [
    Selection(start=9, end=0),
    Selection(start=0, end=None),
    Selection(start=0, end=7),
    Selection(start=0, end=1, discipline="XFS"),
])
def test_bad_selection_rejected(cycle4, selection):
    alg = get_algorithm("traversals").create()
    alg.configure(cycle4, selection)
    with pytest.raises(SelectionError):
        alg.validate()


def test_dijkstra_cannot_find_all(cycle4):
    alg = get_algorithm("dijkstra").create()
    alg.configure(cycle4, Selection(start=0, stopping_condition=StoppingCondition.FIND_ALL))
    with pytest.raises(SelectionError):
        alg.prepare()


def test_end_vertex_ignored_without_stop_at_end(cycle4):
    alg = get_algorithm("traversals").create()
    alg.configure(cycle4, Selection(start=0, end=None,
                                    stopping_condition=StoppingCondition.FIND_REACHABLE))
    alg.validate()


def test_no_graph_rejected():
    alg = Traversal(DIJKSTRA)
    with pytest.raises(SelectionError):
        alg.validate()


# ---------------------------------------------------------------------------
# Registry & pseudocode
# ---------------------------------------------------------------------------
def test_registry():
    assert [a.key for a in list_algorithms()] == ["traversals", "dijkstra", "prim", "vertex"]
    assert get_algorithm("nope") is None
    assert REGISTRY["dijkstra"].stopping_conditions == [
        StoppingCondition.STOP_AT_END, StoppingCondition.FIND_REACHABLE,
    ]
    assert StoppingCondition.FIND_ALL in REGISTRY["prim"].stopping_conditions
    assert REGISTRY["vertex"].stopping_conditions == []
    assert not REGISTRY["vertex"].supports_find_all
    assert isinstance(REGISTRY["prim"].create(), Traversal)
    assert REGISTRY["prim"].create().key == "prim"


def test_pseudocode_names_container_operations(cycle4):
    alg = get_algorithm("traversals").create()
    alg.configure(cycle4, Selection(start=0, end=2, discipline="DFS"))
    text = render_text(alg.pseudocode())
    assert "d.push(start,null)" in text
    assert "d.pop()" in text
    assert "error: no path" in text


def test_pseudocode_lines_reference_real_actions(cycle4):
    for cond in StoppingCondition:
        alg = Traversal(PRIM, cycle4, Selection(start=0, end=1, stopping_condition=cond))
        actions = {ln.action for ln in alg.pseudocode() if ln.action}
        assert actions <= set(alg.table.names())


def test_find_all_pseudocode_has_done_flag(cycle4):
    alg = Traversal(PRIM, cycle4, Selection(start=0, stopping_condition=StoppingCondition.FIND_ALL))
    text = render_text(alg.pseudocode())
    assert "done ← true" in text
    assert "pq.add(v,e,len(e))" in text


def test_dijkstra_on_unit_cycle(cycle4):
    alg = run("dijkstra", cycle4, start=0, end=2)
    assert alg.values[2] == 2
    assert alg.values[1] == alg.values[3] == 1
