"""
recorder.py — Recording Sink & Run Metrics
==========================================
The Recorder is a VisualizationSink that remembers everything it is
told.  It serves two masters:

  1. The web page: `vertex_styles`, `edge_styles`, `highlighted`,
     `status_text` and `panel` always hold the LATEST state, which is
     all the renderer needs.
  2. Tests and batch runs: `events` is the full, ordered call log.

Usage:
    rec = Recorder()
    metrics = rec.run("dijkstra", graph, Selection(start=0, end=5))
    metrics.path_hops, metrics.path_cost
    rec.export()                     # serialisable snapshot
"""

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from graph import Graph
from algorithms import get_algorithm, AlgoInfo, Selection, StopReason, Traversal, VertexExtremesSearch
from algorithms.actions import ActionAlgorithm
from algorithms.visual import VisualSetting, VisualizationSink
from engine.controller import Controller, RUN_TO_COMPLETION


# ---------------------------------------------------------------------------
# Metrics dataclass — what the statistics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:               str   = ""
    algo_label:             str   = ""
    stopping_condition:     str   = ""
    start:                  int   = 0
    end:                    Optional[int] = None
    outcome:                str   = ""     # StopReason value
    message:                str   = ""     # cleanup status text
    vertices_added:         int   = 0
    edges_added:            int   = 0
    components:             int   = 0
    discarded_on_discovery: int   = 0
    discarded_on_removal:   int   = 0
    path_found:             bool  = False
    path_hops:              int   = 0
    path_cost:              float = 0.0    # sum of edge lengths along the path
    vertices_discarded:     int   = 0      # vertex extremes only
    leaders:                Dict[str, int] = field(default_factory=dict)
    actions_run:            int   = 0
    wall_time_ms:           float = 0.0


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder(VisualizationSink):
    """
    Attributes:
        events        : [(kind, args…)] every sink call, in order.
        vertex_styles : {vertex: (setting, z_order, hidden)} latest marks.
        edge_styles   : {edge: (setting, hidden)} latest marks.
        highlighted   : (pseudocode id, setting) of the latest highlight.
        status_text   : Latest status message.
        panel         : {entry key: text} latest panel entries.
        metrics       : RunMetrics after run().
    """

    def __init__(self, keep_events: bool = True):
        self.keep_events = keep_events
        self.metrics:    Optional[RunMetrics] = None
        self._algo_info: Optional[AlgoInfo]   = None
        self._graph:     Optional[Graph]      = None
        self._selection: Optional[Selection]  = None
        self.clear()

    def clear(self) -> None:
        self.events:        List[Tuple]                                 = []
        self.vertex_styles: Dict[int, Tuple[VisualSetting, int, bool]]  = {}
        self.edge_styles:   Dict[int, Tuple[VisualSetting, bool]]       = {}
        self.highlighted:   Optional[Tuple[str, VisualSetting]]         = None
        self.status_text:   str                                         = ""
        self.panel:         Dict[str, str]                              = {}

    # ------------------------------------------------------------------
    # VisualizationSink
    # ------------------------------------------------------------------
    def highlight(self, pseudocode_id: str, setting: VisualSetting) -> None:
        self.highlighted = (pseudocode_id, setting)
        self._log("highlight", pseudocode_id, setting.name)

    def mark_vertex(self, vertex: int, setting: VisualSetting, z_order: int = 0, hidden: bool = False) -> None:
        self.vertex_styles[vertex] = (setting, z_order, hidden)
        self._log("vertex", vertex, setting.name)

    def mark_edge(self, edge: int, setting: VisualSetting, hidden: bool = False) -> None:
        self.edge_styles[edge] = (setting, hidden)
        self._log("edge", edge, setting.name)

    def set_status_text(self, message: str) -> None:
        self.status_text = message
        self._log("status", message)

    def set_panel_entry(self, key: str, text: Optional[str]) -> None:
        if text is None:
            self.panel.pop(key, None)
        else:
            self.panel[key] = text
        self._log("panel", key, text)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def vertex_style(self, vertex: int) -> Optional[str]:
        entry = self.vertex_styles.get(vertex)
        return entry[0].name if entry else None

    def edge_style(self, edge: int) -> Optional[str]:
        entry = self.edge_styles.get(edge)
        return entry[0].name if entry else None

    def highlights(self) -> List[str]:
        """Pseudocode ids in the order they were highlighted."""
        return [e[1] for e in self.events if e[0] == "highlight"]

    def statuses(self) -> List[str]:
        return [e[1] for e in self.events if e[0] == "status"]

    # ------------------------------------------------------------------
    # Batch run
    # ------------------------------------------------------------------
    def run(self, algo_key: str, graph: Graph, selection: Selection) -> RunMetrics:
        """Select, start and run to completion with this recorder as sink."""
        info = get_algorithm(algo_key)
        if info is None:
            raise ValueError(f"Unknown algorithm: {algo_key}")

        self._algo_info = info
        self._graph     = graph
        self._selection = selection
        self.clear()

        controller = Controller(sink=self, delay=RUN_TO_COMPLETION)
        controller.load_graph(graph)
        algorithm = info.create()
        algorithm.configure(graph, selection)
        controller.select(algorithm)

        started = time.monotonic()
        controller.start_or_resume()
        wall_ms = (time.monotonic() - started) * 1000

        self.metrics = self.compute_metrics(algorithm, controller.actions_run, wall_ms)
        return self.metrics

    def compute_metrics(self, algorithm: ActionAlgorithm, actions_run: int = 0, wall_ms: float = 0.0) -> RunMetrics:
        info  = self._algo_info or get_algorithm(algorithm.key)
        label = info.label if info else algorithm.name
        if isinstance(algorithm, VertexExtremesSearch):
            return RunMetrics(
                algo_key=algorithm.key,
                algo_label=label,
                message=algorithm.outcome_message(),
                vertices_added=algorithm.graph.vertex_count(),
                vertices_discarded=algorithm.num_discarded,
                leaders={cat.label: v for cat, v in algorithm.leader_summary()},
                actions_run=actions_run,
                wall_time_ms=round(wall_ms, 2),
            )
        return self._traversal_metrics(algorithm, label, actions_run, wall_ms)

    def _traversal_metrics(self, algorithm: Traversal, label: str, actions_run: int, wall_ms: float) -> RunMetrics:
        graph = algorithm.graph
        path_cost = sum(graph.get_edge(e.via_edge).length for e in algorithm.path if not e.is_seed)

        return RunMetrics(
            algo_key=algorithm.key,
            algo_label=label,
            stopping_condition=algorithm.stopping_condition.value,
            start=algorithm.start_vertex,
            end=algorithm.end_vertex,
            outcome=algorithm.stopped_because.value,
            message=algorithm.outcome_message(),
            vertices_added=algorithm.num_v_spanning_tree,
            edges_added=algorithm.num_e_spanning_tree,
            components=len(algorithm.components),
            discarded_on_discovery=algorithm.num_e_discarded_on_discovery,
            discarded_on_removal=algorithm.num_e_discarded_on_removal,
            path_found=algorithm.stopped_because is StopReason.FOUND_PATH,
            path_hops=algorithm.hops,
            path_cost=round(path_cost, 6),
            actions_run=actions_run,
            wall_time_ms=round(wall_ms, 2),
        )

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        sel = self._selection
        return {
            "algo_key":  self._algo_info.key if self._algo_info else "",
            "selection": {
                "start":              sel.start,
                "end":                sel.end,
                "stopping_condition": sel.stopping_condition.value,
                "discipline":         sel.discipline,
            } if sel else {},
            "graph":     self._graph.to_dict() if self._graph else {},
            "metrics":   asdict(self.metrics) if self.metrics else {},
            "events":    [list(e) for e in self.events],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _log(self, kind: str, *args) -> None:
        if self.keep_events:
            self.events.append((kind,) + args)
