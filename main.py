"""
main.py — Graph Traversal Visualizer Flask App
================================================
The web server that drives the step scheduler from a browser.

Routes:
  GET  /                         – main UI
  POST /api/graph/generate       – generate a random or grid graph
  POST /api/algorithm/select     – choose algorithm, start/end, stopping condition
  POST /api/av/start             – start / pause / resume (one button)
  POST /api/av/tick              – fire the pending continuation if it is due
  POST /api/av/reset             – back to the selected algorithm
  POST /api/config/speed         – delay in ms (0 = jump to end, -1 = single step)
  POST /api/config/trace         – one action vs one iteration per step
  GET  /api/state                – status, status text, panels, SVG

State management:
  Every browser session owns a SessionContext (Controller + Recorder
  sink + current selection), kept in memory and keyed by a random id
  stored in the Flask session cookie.  Nothing is persisted.  At most
  MAX_SESSIONS contexts are kept; the least recently used one is dropped
  first, and its browser simply gets a fresh context on the next request.

Timing:
  The browser polls /api/av/tick while the Controller is Running; the
  Controller decides whether the scheduled continuation is due.
"""

import logging
import secrets
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional

from flask import Flask, current_app, render_template_string, request, jsonify, session

from config import Config
from graph import Graph
from algorithms import (
    AlgoInfo, Selection, SelectionError, StoppingCondition, Traversal,
    get_algorithm, list_algorithms,
)
from algorithms.actions import ActionTableError
from engine import AlgorithmStatus, Controller, InvalidTransitionError, Recorder
from ui import (
    CanvasConfig,
    render_canvas,
    playback_controls,
    graph_generator,
    algorithm_selector,
    status_panel,
    pseudocode_viewer,
    av_entries_panel,
    ldv_panel,
    results_panel,
    metrics_panel,
)
from ui.controls import start_pause_label

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Per-session state
# ---------------------------------------------------------------------------
@dataclass
class SessionContext:
    controller: Controller
    recorder:   Recorder
    info:       Optional[AlgoInfo] = None
    selection:  Selection          = field(default_factory=Selection)
    lock:       threading.Lock     = field(default_factory=threading.Lock)


class SessionStore:
    """In-memory {session id: SessionContext}, least recently used first."""

    def __init__(self, config):
        self._config   = config
        self._capacity = max(int(config["MAX_SESSIONS"]), 1)
        self._contexts: "OrderedDict[str, SessionContext]" = OrderedDict()
        self._lock     = threading.Lock()

    def get(self, sid: str) -> SessionContext:
        with self._lock:
            ctx = self._contexts.get(sid)
            if ctx is not None:
                self._contexts.move_to_end(sid)
                return ctx
            ctx = self._new_context()
            self._contexts[sid] = ctx
            logger.info("new session %s (%d active)", sid[:8], len(self._contexts))
            while len(self._contexts) > self._capacity:
                old, _ = self._contexts.popitem(last=False)
                logger.info("evicted session %s", old[:8])
            return ctx

    def __len__(self) -> int:
        return len(self._contexts)

    def _new_context(self) -> SessionContext:
        cfg = self._config
        recorder = Recorder(keep_events=False)
        controller = Controller(
            sink=recorder,
            delay=cfg["DEFAULT_DELAY"],
            trace_actions=cfg["TRACE_ACTIONS"],
        )
        ctx = SessionContext(controller=controller, recorder=recorder)
        load_graph(ctx, Graph.generate_random(
            num_vertices=cfg["RANDOM_VERTICES"],
            edge_probability=cfg["RANDOM_EDGE_PROBABILITY"],
            seed=cfg["RANDOM_SEED"],
        ))
        return ctx


def load_graph(ctx: SessionContext, graph: Graph) -> None:
    ctx.recorder.clear()
    ctx.controller.load_graph(graph)
    ctx.info = None
    last = max(graph.vertex_count() - 1, 0)
    ctx.selection = Selection(start=0, end=last)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(config_object=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config.from_prefixed_env("GRAPHAV")
    app.secret_key = app.config.get("SECRET_KEY") or secrets.token_hex(32)

    logging.basicConfig(level=app.config["LOG_LEVEL"], format=app.config["LOG_FORMAT"])

    app.extensions["graph_av"] = SessionStore(app.config)
    _register_error_handlers(app)
    _register_routes(app)
    return app


def _register_error_handlers(app: Flask) -> None:

    @app.errorhandler(SelectionError)
    @app.errorhandler(InvalidTransitionError)
    def _bad_request(exc):
        logger.info("rejected request: %s", exc)
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(ActionTableError)
    def _internal_error(exc):
        logger.error("algorithm failure: %s", exc)
        return jsonify({"error": str(exc), "internal": True}), 500


def current_context() -> SessionContext:
    sid = session.get("sid")
    if sid is None:
        sid = session["sid"] = secrets.token_hex(16)
    return current_app.extensions["graph_av"].get(sid)


def _int_or_none(value) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


# ---------------------------------------------------------------------------
# State rendering
# ---------------------------------------------------------------------------
def render_state(ctx: SessionContext, cfg) -> dict:
    c   = ctx.controller
    rec = ctx.recorder
    alg = c.algorithm

    canvas_cfg = CanvasConfig()
    canvas_cfg.width        = cfg["CANVAS_WIDTH"]
    canvas_cfg.height       = cfg["CANVAS_HEIGHT"]
    canvas_cfg.show_lengths = cfg["SHOW_EDGE_LENGTHS"]

    started = c.status in (AlgorithmStatus.RUNNING, AlgorithmStatus.PAUSED, AlgorithmStatus.COMPLETE)
    metrics = rec.compute_metrics(alg, c.actions_run) if c.is_complete else None
    due_in = c.due_in

    return {
        "status":         c.status.value,
        "status_text":    c.status_text,
        "next_action":    c.next_action,
        "internal_error": c.internal_error,
        "button_label":   start_pause_label(c.status, c.delay),
        "delay":          c.delay,
        "trace_actions":  c.trace_actions,
        "due_in_ms":      None if due_in is None else round(due_in * 1000),
        "svg":            render_canvas(c.graph, rec, canvas_cfg),
        "panels": {
            "playback":   playback_controls(c.status, c.delay, c.trace_actions),
            "status":     status_panel(c.status, c.status_text, c.internal_error),
            "pseudocode": pseudocode_viewer(
                alg.pseudocode() if alg else [],
                rec.highlighted if started else None,
                c.exec_counts,
                c.exec_count_color,
            ),
            "entries":    av_entries_panel(rec.panel) if started else "",
            "ldv":        ldv_panel(alg.ldv, c.graph, cfg["LDV_DISPLAY_LIMIT"])
                          if started and isinstance(alg, Traversal) else "",
            "found":      results_panel(alg, ctx.info) if started else "",
            "metrics":    metrics_panel(metrics),
        },
    }


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
def _register_routes(app: Flask) -> None:

    # ------------------------------------------------------------------
    # Main UI Route
    # ------------------------------------------------------------------
    @app.route("/")
    def index():
        ctx = current_context()
        with ctx.lock:
            state = render_state(ctx, app.config)
            algo_html = algorithm_selector(
                algorithms=list_algorithms(),
                graph=ctx.controller.graph,
                selected_key=ctx.info.key if ctx.info else "traversals",
                selection=ctx.selection,
            )
        return render_template_string(
            INDEX_TEMPLATE,
            svg=state["svg"],
            panels=state["panels"],
            algo_selector=algo_html,
            graph_gen=graph_generator(
                num_vertices=app.config["RANDOM_VERTICES"],
                edge_probability=app.config["RANDOM_EDGE_PROBABILITY"],
            ),
            tick_ms=app.config["TICK_INTERVAL_MS"],
        )

    # ------------------------------------------------------------------
    # API: Graph Generation
    # ------------------------------------------------------------------
    @app.route("/api/graph/generate", methods=["POST"])
    def api_graph_generate():
        data = request.get_json(silent=True) or {}
        mode = data.get("mode", "random")
        seed = _int_or_none(data.get("seed"))

        try:
            if mode == "random":
                g = Graph.generate_random(
                    num_vertices=int(data.get("vertices", app.config["RANDOM_VERTICES"])),
                    edge_probability=float(data.get("prob", app.config["RANDOM_EDGE_PROBABILITY"])),
                    connected=bool(data.get("connected", True)),
                    seed=seed,
                )
            elif mode == "grid":
                g = Graph.generate_grid(
                    rows=int(data.get("rows", app.config["GRID_ROWS"])),
                    cols=int(data.get("cols", app.config["GRID_COLS"])),
                    gap_prob=float(data.get("gap_prob", 0.0)),
                    seed=seed,
                )
            else:
                return jsonify({"error": "Unknown mode"}), 400
        except (TypeError, ValueError) as e:
            return jsonify({"error": str(e)}), 400

        if g.vertex_count() == 0:
            return jsonify({"error": "Graph must have at least one vertex"}), 400

        ctx = current_context()
        with ctx.lock:
            load_graph(ctx, g)
            state = render_state(ctx, app.config)
            state["algo_selector"] = algorithm_selector(
                list_algorithms(), g, "traversals", ctx.selection,
            )
        return jsonify(state)

    # ------------------------------------------------------------------
    # API: Algorithm Selection
    # ------------------------------------------------------------------
    @app.route("/api/algorithm/select", methods=["POST"])
    def api_algorithm_select():
        data = request.get_json(silent=True) or {}
        info = get_algorithm(data.get("algo_key", ""))
        if info is None:
            return jsonify({"error": f"Unknown algorithm: {data.get('algo_key')}"}), 400

        try:
            cond = StoppingCondition(data.get("stopping_condition", StoppingCondition.STOP_AT_END.value))
            start = _int_or_none(data.get("start"))
            end   = _int_or_none(data.get("end"))
            seed  = _int_or_none(data.get("seed"))
        except (TypeError, ValueError) as e:
            return jsonify({"error": str(e)}), 400

        ctx = current_context()
        with ctx.lock:
            selection = Selection(
                start=start if start is not None else ctx.selection.start,
                end=end if end is not None else ctx.selection.end,
                stopping_condition=cond,
                discipline=data.get("discipline", "BFS"),
                seed=seed,
            )
            algorithm = info.create()
            algorithm.configure(ctx.controller.graph, selection)
            algorithm.validate()

            ctx.recorder.clear()
            ctx.controller.select(algorithm)
            ctx.info      = info
            ctx.selection = selection
            state = render_state(ctx, app.config)
            state["algo_selector"] = algorithm_selector(
                list_algorithms(), ctx.controller.graph, info.key, selection,
            )
        return jsonify(state)

    # ------------------------------------------------------------------
    # API: Playback
    # ------------------------------------------------------------------
    @app.route("/api/av/start", methods=["POST"])
    def api_av_start():
        ctx = current_context()
        with ctx.lock:
            if ctx.controller.status is AlgorithmStatus.SELECTED:
                ctx.recorder.clear()
            ctx.controller.toggle()
            return jsonify(render_state(ctx, app.config))

    @app.route("/api/av/tick", methods=["POST"])
    def api_av_tick():
        ctx = current_context()
        with ctx.lock:
            advanced = ctx.controller.tick()
            state = render_state(ctx, app.config)
        state["advanced"] = advanced
        return jsonify(state)

    @app.route("/api/av/reset", methods=["POST"])
    def api_av_reset():
        ctx = current_context()
        with ctx.lock:
            ctx.controller.reset()
            ctx.recorder.clear()
            return jsonify(render_state(ctx, app.config))

    # ------------------------------------------------------------------
    # API: Config Changes
    # ------------------------------------------------------------------
    @app.route("/api/config/speed", methods=["POST"])
    def api_config_speed():
        data = request.get_json(silent=True) or {}
        ctx = current_context()
        with ctx.lock:
            try:
                if "preset" in data:
                    if data["preset"] not in app.config["SPEED_PRESETS"]:
                        return jsonify({"error": f"Unknown speed preset: {data['preset']}"}), 400
                    ctx.controller.set_delay(app.config["SPEED_PRESETS"][data["preset"]])
                else:
                    ctx.controller.set_delay(data.get("delay", app.config["DEFAULT_DELAY"]))
            except (TypeError, ValueError) as e:
                return jsonify({"error": str(e)}), 400
            return jsonify({
                "delay":        ctx.controller.delay,
                "button_label": start_pause_label(ctx.controller.status, ctx.controller.delay),
            })

    @app.route("/api/config/trace", methods=["POST"])
    def api_config_trace():
        data = request.get_json(silent=True) or {}
        ctx = current_context()
        with ctx.lock:
            trace = data.get("trace", True)
            if not isinstance(trace, bool):
                return jsonify({"error": f"trace must be true or false, got {trace!r}"}), 400
            ctx.controller.set_trace_actions(trace)
            return jsonify({"trace_actions": ctx.controller.trace_actions})

    @app.route("/api/state")
    def api_state():
        ctx = current_context()
        with ctx.lock:
            return jsonify(render_state(ctx, app.config))


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Graph Traversal Visualizer</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }

    :root {
      --bg: #fbfaf7;
      --panel: #ffffff;
      --border: #d9d4c7;
      --text: #202020;
      --muted: #6b6b6b;
      --accent: #0000a0;
    }

    body {
      font-family: sans-serif;
      font-size: 14px;
      color: var(--text);
      background: var(--bg);
      display: flex;
      height: 100vh;
    }

    #sidebar {
      width: 340px;
      overflow-y: auto;
      border-right: 1px solid var(--border);
      padding: 12px;
    }
    #main { flex: 1; display: flex; flex-direction: column; overflow: hidden; }
    #canvas-container { flex: 1; overflow: auto; padding: 12px; }
    #bottom-panel { display: flex; gap: 12px; height: 40%; border-top: 1px solid var(--border); }
    #bottom-panel > div { flex: 1; overflow: auto; padding: 8px; }

    .panel {
      background: var(--panel);
      border: 1px solid var(--border);
      border-radius: 6px;
      padding: 10px;
      margin-bottom: 10px;
    }
    .panel h3 { font-size: 13px; text-transform: uppercase; color: var(--accent); margin-bottom: 6px; }
    .panel label { display: block; margin: 4px 0; }
    .hint, .placeholder { color: var(--muted); font-size: 12px; margin: 4px 0; }
    button { padding: 4px 10px; margin: 2px; cursor: pointer; }
    .tabs { margin-bottom: 6px; }
    .tab-btn.active { font-weight: bold; }

    .status-badge { font-weight: bold; padding: 1px 6px; border-radius: 3px; background: #eee; }
    .status-Running  { background: #c8f7c5; }
    .status-Paused   { background: #fff3b0; }
    .status-Complete { background: #c5d9f7; }
    .internal-error  { color: #a00000; font-weight: bold; margin-top: 4px; }

    table.pseudocode { border-collapse: collapse; font-family: monospace; width: 100%; }
    table.pseudocode td { padding: 1px 6px; white-space: pre; }
    table.av-entries td.swatch { width: 14px; }
    .ldv table td { border: 1px solid var(--border); padding: 2px 4px; font-size: 11px; text-align: center; }
    table.gratable { border-collapse: collapse; font-size: 12px; }
    table.gratable td, table.gratable th { border: 1px solid var(--border); padding: 1px 4px; }
  </style>
</head>
<body>
  <div id="sidebar">
    <div id="graph-gen">{{ graph_gen|safe }}</div>
    <div id="algo-selector-container">{{ algo_selector|safe }}</div>
    <div id="playback">{{ panels.playback|safe }}</div>
    <div id="status">{{ panels.status|safe }}</div>
    <div id="metrics">{{ panels.metrics|safe }}</div>
  </div>

  <div id="main">
    <div id="canvas-container">
      <div id="canvas-svg">{{ svg|safe }}</div>
    </div>

    <div id="bottom-panel">
      <div id="pseudocode-container">
        <div id="pseudocode">{{ panels.pseudocode|safe }}</div>
      </div>
      <div id="av-container">
        <div id="entries">{{ panels.entries|safe }}</div>
        <div id="ldv">{{ panels.ldv|safe }}</div>
        <div id="found">{{ panels.found|safe }}</div>
      </div>
    </div>
  </div>

  <script>
    const TICK_MS = {{ tick_ms }};
    let ticking = null;

    // API helpers
    async function post(url, data) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(data || {}),
      });
      const body = await res.json();
      if (!res.ok) { alert(body.error || 'Request failed'); return null; }
      return body;
    }

    function applyState(data) {
      if (!data) return;
      if (data.svg) document.getElementById('canvas-svg').innerHTML = data.svg;
      if (data.algo_selector) document.getElementById('algo-selector-container').innerHTML = data.algo_selector;
      if (data.panels) {
        for (const [key, html] of Object.entries(data.panels)) {
          const el = document.getElementById(key);
          if (el) el.innerHTML = html;
        }
      }
      if (data.status === 'Running') startTicking(); else stopTicking();
    }

    function startTicking() {
      if (ticking === null) {
        ticking = setInterval(async () => applyState(await post('/api/av/tick')), TICK_MS);
      }
    }
    function stopTicking() {
      if (ticking !== null) { clearInterval(ticking); ticking = null; }
    }

    const val = (id) => document.getElementById(id)?.value;

    // panels are re-rendered, so listen on the document
    document.addEventListener('click', async (e) => {
      const id = e.target.id;
      if (e.target.classList.contains('tab-btn')) {
        const tab = e.target.dataset.tab;
        document.querySelectorAll('.tab-btn').forEach(b => b.classList.remove('active'));
        e.target.classList.add('active');
        document.querySelectorAll('.tab-content').forEach(c => c.style.display = 'none');
        document.querySelector(`.tab-content[data-tab="${tab}"]`).style.display = 'block';
      }
      else if (id === 'btn-gen-random') {
        applyState(await post('/api/graph/generate', {
          mode: 'random',
          vertices: +val('rand-vertices'),
          prob: +val('rand-prob'),
          connected: document.getElementById('rand-connected').checked,
        }));
      }
      else if (id === 'btn-gen-grid') {
        applyState(await post('/api/graph/generate', {
          mode: 'grid', rows: +val('grid-rows'), cols: +val('grid-cols'), gap_prob: +val('grid-gaps'),
        }));
      }
      else if (id === 'btn-select') {
        applyState(await post('/api/algorithm/select', {
          algo_key: val('algo-selector'),
          start: val('start-vertex'),
          end: val('end-vertex'),
          stopping_condition: val('stopping-condition'),
          discipline: val('traversal-discipline') || 'BFS',
        }));
      }
      else if (id === 'btn-start-pause') {
        applyState(await post('/api/av/start'));
      }
      else if (id === 'btn-reset') {
        applyState(await post('/api/av/reset'));
      }
    });

    document.addEventListener('change', async (e) => {
      const id = e.target.id;
      if (id === 'algo-selector') {
        applyState(await post('/api/algorithm/select', {algo_key: e.target.value,
          start: val('start-vertex'), end: val('end-vertex')}));
      }
      else if (id === 'stopping-condition') {
        document.getElementById('end-vertex').disabled = e.target.value !== 'StopAtEnd';
      }
      else if (id === 'speed-selector') {
        const data = await post('/api/config/speed', {delay: +e.target.value});
        if (data) document.getElementById('btn-start-pause').textContent = data.button_label;
      }
      else if (id === 'trace-toggle') {
        await post('/api/config/trace', {trace: e.target.checked});
      }
    });
  </script>
</body>
</html>
"""


app = create_app()


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logger.info("Graph Traversal Visualizer on http://localhost:5000")
    app.run(debug=True, port=5000)
