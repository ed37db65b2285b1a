"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • playback_controls   – start/pause/resume/next step, reset, speed, trace
  • graph_generator     – random / grid tabs
  • algorithm_selector  – algorithm, start/end vertex, stopping condition, order
  • status_panel        – lifecycle status + latest action message
  • pseudocode_viewer   – live highlight + execution-frequency colouring
  • av_entries_panel    – traversal statistics (visiting, undiscovered, …)
  • ldv_panel           – contents of the discovery container
  • found_table         – tree entries, or the path once one is found
  • leader_table        – vertex extremes leaders, one row per category
  • metrics_panel       – end-of-run summary

Design:
  - All panels are stateless render functions.
  - State is passed in as arguments.
  - Output is raw HTML strings (no templating engine).
  - The main app stitches them together.
"""

from typing import Callable, Dict, List, Optional, Tuple

from markupsafe import escape

from graph import Graph
from algorithms import AlgoInfo, Selection, StoppingCondition, StopReason, Traversal, VertexExtremesSearch
from algorithms.actions import ActionAlgorithm
from algorithms import visual
from algorithms.ldv import DiscoveryContainer, LDVEntry
from algorithms.pseudocode import PseudocodeLine
from algorithms.visual import VisualSetting
from engine import AlgorithmStatus, RunMetrics, SINGLE_STEP, SPEED_PRESETS


def short_label(label: str, max_len: int = 10) -> str:
    if len(label) <= max_len:
        return label
    return label[: max_len - 1] + "…"


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def start_pause_label(status: AlgorithmStatus, delay: int) -> str:
    if status is AlgorithmStatus.SELECTED:
        return "Start"
    if status in (AlgorithmStatus.RUNNING, AlgorithmStatus.PAUSED) and delay == SINGLE_STEP:
        return "Next Step"
    if status is AlgorithmStatus.RUNNING:
        return "Pause"
    if status is AlgorithmStatus.PAUSED:
        return "Resume"
    if status is AlgorithmStatus.COMPLETE:
        return "Done"
    return "Start"


def playback_controls(
    status: AlgorithmStatus = AlgorithmStatus.NO_DATA,
    delay: int = 50,
    trace_actions: bool = True,
) -> str:
    label = start_pause_label(status, delay)
    disabled = "" if status in (
        AlgorithmStatus.SELECTED, AlgorithmStatus.RUNNING, AlgorithmStatus.PAUSED,
    ) else "disabled"

    options = []
    for name, ms in SPEED_PRESETS.items():
        sel = "selected" if ms == delay else ""
        options.append(f'<option value="{ms}" {sel}>{name.capitalize()} ({ms} ms)</option>')

    return f"""
    <div class="panel playback-controls">
      <h3>Playback</h3>
      <div class="button-row">
        <button id="btn-start-pause" {disabled}>{label}</button>
        <button id="btn-reset" title="Back to the selected algorithm">Reset</button>
      </div>
      <div class="speed-control">
        <label>Speed:</label>
        <select id="speed-selector">
          {''.join(options)}
        </select>
      </div>
      <label>
        <input type="checkbox" id="trace-toggle" {'checked' if trace_actions else ''}>
        Trace pseudocode (one action per step)
      </label>
    </div>
    """


# ---------------------------------------------------------------------------
# Graph Generator
# ---------------------------------------------------------------------------
def graph_generator(active_tab: str = "random", num_vertices: int = 12, edge_probability: float = 0.25) -> str:
    tabs = ["random", "grid"]
    tab_buttons = []
    for t in tabs:
        active = 'active' if t == active_tab else ''
        tab_buttons.append(f'<button class="tab-btn {active}" data-tab="{t}">{t.capitalize()}</button>')

    return f"""
    <div class="panel graph-generator">
      <h3>Graph</h3>
      <div class="tabs">
        {''.join(tab_buttons)}
      </div>

      <div class="tab-content" data-tab="random" style="display: {'block' if active_tab == 'random' else 'none'};">
        <label>Waypoints: <input type="number" id="rand-vertices" value="{num_vertices}" min="2" max="60"></label>
        <label>Edge Prob: <input type="number" id="rand-prob" min="0" max="1" step="0.05" value="{edge_probability}"></label>
        <label><input type="checkbox" id="rand-connected" checked> Connected</label>
        <button id="btn-gen-random" class="btn-secondary">Generate Random</button>
      </div>

      <div class="tab-content" data-tab="grid" style="display: {'block' if active_tab == 'grid' else 'none'};">
        <label>Rows: <input type="number" id="grid-rows" value="5" min="2" max="15"></label>
        <label>Cols: <input type="number" id="grid-cols" value="6" min="2" max="15"></label>
        <label>Gap %: <input type="number" id="grid-gaps" min="0" max="0.9" step="0.05" value="0.2"></label>
        <button id="btn-gen-grid" class="btn-secondary">Generate Grid</button>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Algorithm Selector
# ---------------------------------------------------------------------------
def vertex_selector(element_id: str, label: str, graph: Graph, selected: Optional[int], disabled: bool = False) -> str:
    options = []
    for v in graph.vertices:
        sel = "selected" if v.index == selected else ""
        options.append(f'<option value="{v.index}" {sel}>#{v.index} {escape(v.label)}</option>')
    return (
        f'<label>{label}: <select id="{element_id}" {"disabled" if disabled else ""}>'
        f'{"".join(options)}</select></label>'
    )


def algorithm_selector(
    algorithms: List[AlgoInfo],
    graph: Optional[Graph] = None,
    selected_key: str = "traversals",
    selection: Optional[Selection] = None,
) -> str:
    selection = selection or Selection(start=0, end=1)
    options = []
    current = algorithms[0] if algorithms else None
    for algo in algorithms:
        sel = 'selected' if algo.key == selected_key else ''
        if algo.key == selected_key:
            current = algo
        options.append(f'<option value="{algo.key}" {sel}>{escape(algo.label)}</option>')

    extra = ""
    if graph is not None and graph.vertex_count() > 0 and current is not None and current.stopping_conditions:
        stop_at_end = selection.stopping_condition is StoppingCondition.STOP_AT_END
        conds = []
        for cond in current.stopping_conditions:
            sel = "selected" if cond is selection.stopping_condition else ""
            conds.append(f'<option value="{cond.value}" {sel}>{cond.label}</option>')
        extra = (
            vertex_selector("start-vertex", "Start Vertex", graph, selection.start)
            + "<br />"
            + vertex_selector("end-vertex", "End Vertex", graph, selection.end, disabled=not stop_at_end)
            + f'<br /><select id="stopping-condition">{"".join(conds)}</select>'
        )
        if current.disciplines:
            names = {"BFS": "Breadth First", "DFS": "Depth First", "RFS": "Random"}
            discs = []
            for d in current.disciplines:
                sel = "selected" if d == selection.discipline else ""
                discs.append(f'<option value="{d}" {sel}>{names.get(d, d)}</option>')
            extra += f'<br />Order: <select id="traversal-discipline">{"".join(discs)}</select>'

    description = f'<p class="hint">{escape(current.description)}</p>' if current else ""
    return f"""
    <div class="panel algorithm-selector">
      <h3>Algorithm</h3>
      <select id="algo-selector">
        {''.join(options)}
      </select>
      {description}
      <div class="algorithm-options">{extra}</div>
      <button id="btn-select" class="btn-primary">Select</button>
    </div>
    """


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------
def status_panel(status: AlgorithmStatus, status_text: str = "", internal_error: Optional[str] = None) -> str:
    error = ""
    if internal_error:
        error = f'<div class="internal-error">{escape(internal_error)}</div>'
    return f"""
    <div class="panel status-panel">
      <span class="status-badge status-{status.value}">{status.value}</span>
      <div id="alg-status">{escape(status_text)}</div>
      {error}
    </div>
    """


# ---------------------------------------------------------------------------
# Pseudocode Viewer
# ---------------------------------------------------------------------------
def pseudocode_viewer(
    lines: List[PseudocodeLine],
    highlighted: Optional[Tuple[str, VisualSetting]] = None,
    exec_counts: Optional[Dict[str, int]] = None,
    color_for: Optional[Callable[[int], str]] = None,
) -> str:
    if not lines:
        return """
        <div class="code-block">
          <div class="placeholder">Select an algorithm to view pseudocode</div>
        </div>
        """

    exec_counts = exec_counts or {}
    hl_id, hl_setting = highlighted if highlighted else (None, None)

    rows = []
    for ln in lines:
        style = ""
        title = ""
        if ln.action is not None:
            count = exec_counts.get(ln.action, 0)
            title = f' title="Exec count: {count}"'
            if ln.highlight_id == hl_id:
                style = f' style="background-color: {hl_setting.color}; color: {hl_setting.text_color};"'
            elif count and color_for is not None:
                style = f' style="background-color: {color_for(count)};"'
        pad = "&nbsp;" * (2 * ln.indent)
        action = escape(ln.highlight_id or "")
        rows.append(
            f'<tr class="code-line" data-action="{action}"{title}{style}>'
            f'<td>{pad}{escape(ln.text)}</td></tr>'
        )

    return f"""
    <table class="pseudocode">
      {''.join(rows)}
    </table>
    """


# ---------------------------------------------------------------------------
# Traversal statistics
# ---------------------------------------------------------------------------
AV_ENTRIES: List[Tuple[str, VisualSetting]] = [
    ("visiting",             visual.VISITING),
    ("undiscovered",         visual.UNDISCOVERED),
    ("currentSpanningTree",  visual.SPANNING_TREE),
    ("discardedOnDiscovery", visual.DISCARDED_ON_DISCOVERY),
    ("discardedOnRemoval",   visual.DISCARDED),
    ("discarded",            visual.DISCARDED),
]


def av_entries_panel(panel: Dict[str, str]) -> str:
    rows = []
    for key, setting in AV_ENTRIES:
        text = panel.get(key)
        if text is None:
            continue
        rows.append(
            f'<tr id="entry-{key}"><td class="swatch" '
            f'style="background-color: {setting.color}; color: {setting.text_color};">&nbsp;</td>'
            f'<td>{escape(text)}</td></tr>'
        )
    return f"""
    <table class="av-entries">
      {''.join(rows)}
    </table>
    """


def _ldv_item(entry: LDVEntry, graph: Graph, ldv: DiscoveryContainer) -> str:
    if entry.is_seed:
        edge_label, edge_full, show_from, from_full = "START", "START", "(none)", "(none)"
    else:
        edge_full  = graph.get_edge(entry.via_edge).label
        edge_label = short_label(edge_full)
        show_from  = str(entry.from_vertex)
        from_full  = f"#{entry.from_vertex}:{graph.get_vertex(entry.from_vertex).label}"
    value = ldv.format_value(entry.value)
    title = (f"Edge #{entry.via_edge} {from_full} → #{entry.vertex}:"
             f"{graph.get_vertex(entry.vertex).label}, label: {edge_full}, value: {value}")
    return (f'<span title="{escape(title)}">{escape(show_from)}→{entry.vertex}<br />'
            f'{escape(edge_label)}<br />{value}</span>')


def ldv_panel(ldv: Optional[DiscoveryContainer], graph: Optional[Graph], limit: Optional[int] = 10) -> str:
    if ldv is None or graph is None:
        return ""
    cells = []
    for entry in ldv.display_items(limit):
        if entry is None:
            cells.append("<td>...</td>")
        else:
            cells.append(f"<td>{_ldv_item(entry, graph, ldv)}</td>")
    return f"""
    <div class="ldv">
      <div class="ldv-title" style="background-color: {visual.DISCOVERED.color}; color: {visual.DISCOVERED.text_color};">
        {escape(ldv.display_name)} (size {len(ldv)})
      </div>
      <table><tbody><tr>{''.join(cells)}</tr></tbody></table>
    </div>
    """


# ---------------------------------------------------------------------------
# Found table
# ---------------------------------------------------------------------------
def found_table(algorithm: Optional[Traversal], info: Optional[AlgoInfo]) -> str:
    if algorithm is None or algorithm.graph is None:
        return ""
    graph = algorithm.graph
    precision = info.value_precision if info else 3
    header = info.value_header if info else ""
    path_mode = algorithm.stopped_because is StopReason.FOUND_PATH
    entries = algorithm.path if path_mode else algorithm.found
    count = "" if path_mode else str(algorithm.num_e_spanning_tree)

    rows = []
    for entry in entries:
        place = short_label(graph.get_vertex(entry.vertex).label)
        value = f"{entry.value:.{precision}f}"
        if entry.is_seed:
            arrive, via = "", "(START)"
        else:
            arrive = short_label(graph.get_vertex(entry.from_vertex).label)
            via    = short_label(graph.get_edge(entry.via_edge).label)
        value_cell = f"<td>{value}</td>" if header else ""
        rows.append(
            f"<tr><td>{escape(place)}</td>{value_cell}"
            f"<td>{escape(arrive)}</td><td>{escape(via)}</td></tr>"
        )

    value_th = f"<th>{escape(header)}</th>" if header else ""
    swatch = visual.FOUND_PATH if path_mode else visual.SPANNING_TREE
    return f"""
    <div class="found" style="border-left: 6px solid {swatch.color};">
      <span id="found-count">{count}</span> <span id="found-label">{escape(algorithm.found_label)}</span>
      <table class="gratable">
        <thead><tr><th>Place</th>{value_th}<th>Arrive From</th><th>Via</th></tr></thead>
        <tbody>{''.join(rows)}</tbody>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Leader table (vertex extremes)
# ---------------------------------------------------------------------------
def leader_table(algorithm: Optional[VertexExtremesSearch], info: Optional[AlgoInfo]) -> str:
    if algorithm is None or algorithm.graph is None:
        return ""
    precision = info.value_precision if info else 6
    header = info.found_table_header if info else "Category Leaders"

    rows = []
    for cat, leader in algorithm.leader_summary():
        v = algorithm.graph.get_vertex(leader)
        value = str(len(v.label)) if cat.by_label else f"({v.lat:.{precision}f}, {v.lng:.{precision}f})"
        rows.append(
            f'<tr id="leader-{cat.name}"><td class="swatch" '
            f'style="background-color: {cat.setting.color}; color: {cat.setting.text_color};">&nbsp;</td>'
            f"<td>{escape(cat.label)}</td><td>#{v.index} {escape(short_label(v.label))}</td>"
            f"<td>{value}</td></tr>"
        )
    return f"""
    <div class="found">
      <span id="found-label">{escape(header)}</span>
      <table class="gratable">
        <thead><tr><th></th><th>Category</th><th>Leader</th><th>Value</th></tr></thead>
        <tbody>{''.join(rows)}</tbody>
      </table>
    </div>
    """


def results_panel(algorithm: Optional[ActionAlgorithm], info: Optional[AlgoInfo]) -> str:
    """Found table for traversals, leader table for the extremes search."""
    if isinstance(algorithm, Traversal):
        return found_table(algorithm, info)
    if isinstance(algorithm, VertexExtremesSearch):
        return leader_table(algorithm, info)
    return ""


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------
def metrics_panel(metrics: Optional[RunMetrics] = None) -> str:
    if not metrics:
        return """
        <div class="panel metrics-panel">
          <h3>Statistics</h3>
          <p class="placeholder">Run an algorithm to completion to see a summary.</p>
        </div>
        """

    path_row = ""
    if metrics.path_found:
        path_row = (f"<tr><td>Path:</td><td><strong>{metrics.path_hops} hops, "
                    f"length {metrics.path_cost:.3f}</strong></td></tr>")
    if metrics.leaders:
        rows = "".join(
            f"<tr><td>{escape(label)}:</td><td><strong>#{vertex}</strong></td></tr>"
            for label, vertex in metrics.leaders.items()
        )
        counts = (f"<tr><td>Vertices visited:</td><td><strong>{metrics.vertices_added}</strong></td></tr>"
                  f"<tr><td>Vertices discarded:</td><td><strong>{metrics.vertices_discarded}</strong></td></tr>")
    else:
        rows = ""
        counts = f"""
        <tr><td>Vertices added:</td><td><strong>{metrics.vertices_added}</strong></td></tr>
        <tr><td>Edges added:</td><td><strong>{metrics.edges_added}</strong></td></tr>
        <tr><td>Components:</td><td><strong>{metrics.components}</strong></td></tr>
        <tr><td>Discarded on discovery:</td><td><strong>{metrics.discarded_on_discovery}</strong></td></tr>
        <tr><td>Discarded on removal:</td><td><strong>{metrics.discarded_on_removal}</strong></td></tr>"""
    return f"""
    <div class="panel metrics-panel">
      <h3>Statistics — {escape(metrics.algo_label)}</h3>
      <p>{escape(metrics.message)}</p>
      <table>
        {counts}
        {rows}
        {path_row}
        <tr><td>Actions run:</td><td><strong>{metrics.actions_run}</strong></td></tr>
      </table>
    </div>
    """
