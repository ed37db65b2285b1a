import pytest

from algorithms import Selection, StoppingCondition
from engine import Recorder


def test_run_dijkstra_metrics(triangle, recorder):
    m = recorder.run("dijkstra", triangle, Selection(start=0, end=2))
    assert m.algo_label == "Dijkstra's Algorithm"
    assert m.outcome == "FoundPath"
    assert m.path_found
    assert m.path_hops == 2
    assert m.path_cost == 2.0
    assert m.vertices_added == 3
    assert m.message == "Found path from #0 V0 to #2 V2"
    assert m.actions_run > 0
    assert recorder.metrics is m


def test_run_find_all_counts_components(two_pairs, recorder):
    m = recorder.run("traversals", two_pairs,
                     Selection(start=0, stopping_condition=StoppingCondition.FIND_ALL))
    assert m.components == 2
    assert m.edges_added == 2
    assert not m.path_found
    assert m.stopping_condition == "FindAll"


def test_run_unknown_algorithm(cycle4, recorder):
    with pytest.raises(ValueError):
        recorder.run("bogus", cycle4, Selection())


def test_latest_state_and_event_log(cycle4, recorder):
    recorder.run("traversals", cycle4, Selection(start=0, end=2))
    assert recorder.status_text == recorder.statuses()[-1]
    assert recorder.highlighted[0] == "cleanup"
    assert recorder.panel["found"] == "Path found with 2 hops:"
    kinds = {e[0] for e in recorder.events}
    assert kinds == {"highlight", "vertex", "edge", "status", "panel"}


def test_keep_events_off(cycle4):
    rec = Recorder(keep_events=False)
    rec.run("traversals", cycle4, Selection(start=0, end=2))
    assert rec.events == []
    assert rec.vertex_style(2) == "foundPath"


def test_clear_panel_entry(recorder):
    recorder.set_panel_entry("visiting", "Visiting #1")
    recorder.set_panel_entry("visiting", None)
    assert "visiting" not in recorder.panel


def test_export(triangle, recorder):
    recorder.run("prim", triangle, Selection(start=1, stopping_condition=StoppingCondition.FIND_REACHABLE))
    data = recorder.export()
    assert data["algo_key"] == "prim"
    assert data["selection"]["stopping_condition"] == "FindReachable"
    assert len(data["graph"]["edges"]) == 3
    assert data["metrics"]["edges_added"] == 2
    assert data["events"][0][0] in ("vertex", "edge", "highlight")
