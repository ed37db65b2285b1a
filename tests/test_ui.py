from algorithms import Selection, StoppingCondition, get_algorithm, list_algorithms
from algorithms.ldv import Discipline, DiscoveryContainer, LDVEntry
from algorithms.pseudocode import line
from algorithms import visual
from engine import AlgorithmStatus, SINGLE_STEP
from graph import Graph
from ui import (
    CanvasConfig, algorithm_selector, av_entries_panel, found_table, ldv_panel,
    metrics_panel, playback_controls, pseudocode_viewer, render_canvas, results_panel,
    status_panel,
)
from ui.controls import short_label, start_pause_label


def test_canvas_empty():
    svg = render_canvas(None)
    assert svg.startswith("<svg")
    assert svg.endswith("</svg>")
    assert "<circle" not in svg


def test_canvas_draws_every_item(cycle4):
    svg = render_canvas(cycle4)
    assert svg.count("<circle") == 4
    assert svg.count("<line") == 4
    assert 'class="vertex undiscovered"' in svg


def test_canvas_uses_recorded_marks(cycle4, recorder):
    recorder.mark_vertex(2, visual.FOUND_PATH, 5)
    recorder.mark_edge(1, visual.DISCARDED, hidden=True)
    svg = render_canvas(cycle4, recorder)
    assert 'class="vertex foundPath"' in svg
    assert svg.count("<line") == 3


def test_canvas_escapes_labels():
    g = Graph()
    g.create_vertex(0, 0, label="<b>A&B</b>")
    svg = render_canvas(g)
    assert "&lt;b&gt;A&amp;B&lt;/b&gt;" in svg
    assert "<b>" not in svg


def test_canvas_edge_lengths_optional(triangle):
    cfg = CanvasConfig()
    cfg.show_lengths = True
    assert ">5<" in render_canvas(triangle, config=cfg)
    assert ">5<" not in render_canvas(triangle)


def test_start_pause_label():
    assert start_pause_label(AlgorithmStatus.SELECTED, 50) == "Start"
    assert start_pause_label(AlgorithmStatus.RUNNING, 50) == "Pause"
    assert start_pause_label(AlgorithmStatus.PAUSED, 50) == "Resume"
    assert start_pause_label(AlgorithmStatus.PAUSED, SINGLE_STEP) == "Next Step"
    assert start_pause_label(AlgorithmStatus.COMPLETE, 50) == "Done"


def test_playback_controls_disabled_without_selection():
    html = playback_controls(AlgorithmStatus.GRAPH_LOADED, 50, True)
    assert 'id="btn-start-pause" disabled' in html
    assert "checked" in html
    assert 'value="50" selected' in html


def test_algorithm_selector_offers_find_all_only_where_supported(cycle4):
    algos = list_algorithms()
    html = algorithm_selector(algos, cycle4, "traversals", Selection(start=0, end=2))
    assert "FindAll" in html
    assert 'id="traversal-discipline"' in html
    html = algorithm_selector(algos, cycle4, "dijkstra", Selection(start=0, end=2))
    assert "FindAll" not in html
    assert 'id="traversal-discipline"' not in html


def test_algorithm_selector_hides_vertex_choices_for_extremes(cycle4):
    html = algorithm_selector(list_algorithms(), cycle4, "vertex", Selection(start=0, end=2))
    assert 'value="vertex" selected' in html
    assert 'id="start-vertex"' not in html
    assert 'id="stopping-condition"' not in html


def test_algorithm_selector_disables_end_vertex(cycle4):
    sel = Selection(start=0, stopping_condition=StoppingCondition.FIND_REACHABLE)
    html = algorithm_selector(list_algorithms(), cycle4, "prim", sel)
    assert 'id="end-vertex" disabled' in html


def test_status_panel_shows_internal_error():
    html = status_panel(AlgorithmStatus.PAUSED, "Internal error: <x>", "bad action 'x'")
    assert "status-Paused" in html
    assert "&lt;x&gt;" in html
    assert "internal-error" in html


def test_pseudocode_viewer_highlight_and_counts():
    lines = line(0, "first", "a") + line(1, "else") + line(1, "second", "b")
    html = pseudocode_viewer(lines, ("b", visual.VISITING), {"a": 3}, lambda n: "rgb(1,2,3)")
    assert 'title="Exec count: 3" style="background-color: rgb(1,2,3);"' in html
    assert "background-color: yellow" in html
    assert "placeholder" in pseudocode_viewer([])


def test_pseudocode_viewer_highlights_by_line_id():
    lines = line(0, "if north", "check", line_id="check0") + line(0, "if south", "check", line_id="check1")
    html = pseudocode_viewer(lines, ("check1", visual.SOUTH_LEADER), {"check": 4})
    assert html.count("background-color: #ee0000") == 1
    assert html.count('title="Exec count: 4"') == 2
    assert 'data-action="check1"' in html


def test_av_entries_panel_skips_missing():
    html = av_entries_panel({"undiscovered": "Undiscovered: 3 V, 4 E"})
    assert 'id="entry-undiscovered"' in html
    assert "entry-visiting" not in html


def test_ldv_panel_elides(cycle4):
    ldv = DiscoveryContainer(Discipline.FIFO, "BFS Discovered Queue", value_precision=0)
    ldv.add(LDVEntry.seed(0))
    for v, e in ((1, 0), (3, 3), (2, 1), (2, 2)):
        ldv.add(LDVEntry.via(cycle4, v, 1, e))
    html = ldv_panel(ldv, cycle4, limit=2)
    assert "BFS Discovered Queue (size 5)" in html
    assert html.count("<td>...</td>") == 1
    assert ldv_panel(None, cycle4) == ""


def test_found_table_switches_to_path(cycle4):
    info = get_algorithm("traversals")
    alg = get_algorithm("traversals").create()
    alg.configure(cycle4, Selection(start=0, end=2))
    assert "Edges in Spanning Tree/Forest" in found_table(alg, info)

    alg.prepare()
    while alg.next_action != "DONE":
        alg.table.perform(alg, alg.next_action)
    html = found_table(alg, info)
    assert "Path found with 2 hops:" in html
    assert html.count("<tr><td>") == 3
    assert "(START)" in html


def test_metrics_panel(triangle, recorder):
    assert "placeholder" in metrics_panel(None)
    m = recorder.run("dijkstra", triangle, Selection(start=0, end=2))
    html = metrics_panel(m)
    assert "2 hops, length 2.000" in html


def test_short_label():
    assert short_label("short") == "short"
    assert short_label("a-very-long-label", 6) == "a-ver…"


def test_results_panel_for_extremes(recorder):
    g = Graph()
    g.create_vertex(1.0, 2.0, "north<1>")
    g.create_vertex(-1.0, 3.0, "S")
    info = get_algorithm("vertex")
    m = recorder.run("vertex", g, Selection())

    alg = info.create()
    alg.configure(g, Selection())
    alg.prepare()
    while alg.next_action != "DONE":
        alg.table.perform(alg, alg.next_action)
    html = results_panel(alg, info)
    assert "Category Leaders" in html
    assert 'id="leader-north"' in html
    assert "north&lt;1&gt;" in html
    assert "(1.000000, 2.000000)" in html
    assert "#1 S" in html

    html = metrics_panel(m)
    assert "Vertices discarded:" in html
    assert "<tr><td>East extreme:</td><td><strong>#1</strong></td></tr>" in html
    assert "Edges added" not in html
    assert results_panel(None, info) == ""
