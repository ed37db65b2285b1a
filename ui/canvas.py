"""
canvas.py — SVG Graph Renderer
================================
Pure rendering function: Graph + latest styles → SVG string.

The renderer consumes:
  • graph     – the Graph object (waypoint coordinates, edges)
  • recorder  – the Recorder sink holding the latest vertex / edge marks
  • config    – visual config (canvas size, base sizes, fonts, …)

And produces an SVG string ready to inject into the DOM.

Design decisions:
  - NO mutation.  The caller passes in everything and gets back a string.
  - Waypoints carry lat/lng; they are fitted into the canvas with an
    equirectangular projection (lng → x, lat → y, north up).  Good
    enough for the few tenths of a degree a generated graph spans.
  - Colours come straight from the VisualSetting attached by the
    algorithm.  Unmarked items use the `undiscovered` preset.
  - Vertices are drawn in z-order so the interesting ones sit on top.
"""

from typing import Dict, Optional, Tuple

from markupsafe import escape

from graph import Graph
from algorithms import visual
from algorithms.visual import VisualSetting
from engine.recorder import Recorder


# ---------------------------------------------------------------------------
# Visual Config — dimensions, fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    # canvas
    width:   int = 900
    height:  int = 600
    padding: int = 40
    bg:      str = "#f4f1ea"     # paper-map beige

    # vertex
    radius_base:        float = 3.0
    radius_per_scale:   float = 1.5
    vertex_stroke:      str   = "#202020"
    vertex_label_color: str   = "#202020"
    vertex_label_size:  int   = 11
    show_labels:        bool  = True

    # edge
    edge_width_scale:   float = 0.75
    show_lengths:       bool  = False
    edge_label_size:    int   = 10
    edge_label_color:   str   = "#555555"


CONFIG = CanvasConfig()


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------
def project(graph: Graph, config: CanvasConfig = CONFIG) -> Dict[int, Tuple[float, float]]:
    """{vertex index: (x, y)} fitted into the canvas, aspect preserved."""
    if not graph.vertices:
        return {}
    lats = [v.lat for v in graph.vertices]
    lngs = [v.lng for v in graph.vertices]
    min_lat, max_lat = min(lats), max(lats)
    min_lng, max_lng = min(lngs), max(lngs)

    span_x = (max_lng - min_lng) or 1.0
    span_y = (max_lat - min_lat) or 1.0
    usable_w = config.width - 2 * config.padding
    usable_h = config.height - 2 * config.padding
    scale = min(usable_w / span_x, usable_h / span_y)

    # centre the drawing
    off_x = config.padding + (usable_w - span_x * scale) / 2
    off_y = config.padding + (usable_h - span_y * scale) / 2

    return {
        v.index: (
            round(off_x + (v.lng - min_lng) * scale, 2),
            round(off_y + (max_lat - v.lat) * scale, 2),
        )
        for v in graph.vertices
    }


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_canvas(
    graph: Optional[Graph],
    recorder: Optional[Recorder] = None,
    config: CanvasConfig = CONFIG,
) -> str:
    """
    Returns an SVG string.

    Args:
        graph    : The graph to render (None → empty canvas).
        recorder : Latest marks from the running algorithm, if any.
        config   : Visual config.
    """
    svg_parts = [
        f'<svg width="{config.width}" height="{config.height}" '
        f'viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">'
    ]
    svg_parts.append(
        f'<rect width="{config.width}" height="{config.height}" fill="{config.bg}"/>'
    )

    if graph is not None:
        pos = project(graph, config)
        vstyles = recorder.vertex_styles if recorder else {}
        estyles = recorder.edge_styles if recorder else {}

        # -- edges (draw first so vertices sit on top) --
        for edge in graph.edges:
            setting, hidden = estyles.get(edge.index, (visual.UNDISCOVERED, False))
            if not hidden:
                svg_parts.append(_render_edge(graph, edge.index, pos, setting, config))

        # -- vertices, lowest z first --
        order = sorted(
            graph.vertex_ids(),
            key=lambda v: vstyles.get(v, (None, 0, False))[1],
        )
        for v in order:
            setting, _, hidden = vstyles.get(v, (visual.UNDISCOVERED, 0, False))
            if not hidden:
                svg_parts.append(_render_vertex(graph, v, pos, setting, config))

    svg_parts.append("</svg>")
    return "\n".join(svg_parts)


# ---------------------------------------------------------------------------
# Vertex Rendering
# ---------------------------------------------------------------------------
def _render_vertex(
    graph: Graph,
    v: int,
    pos: Dict[int, Tuple[float, float]],
    setting: VisualSetting,
    config: CanvasConfig,
) -> str:
    vertex = graph.get_vertex(v)
    cx, cy = pos[v]
    r = config.radius_base + config.radius_per_scale * setting.scale
    label = escape(vertex.label)

    parts = [
        f'<g class="vertex {setting.name}" data-id="{v}">',
        f'  <title>#{v} {label}</title>',
        f'  <circle cx="{cx}" cy="{cy}" r="{r}" '
        f'fill="{setting.color}" stroke="{config.vertex_stroke}" stroke-width="1"/>',
    ]
    if config.show_labels:
        parts.append(
            f'  <text x="{cx + r + 2}" y="{cy - r}" '
            f'font-size="{config.vertex_label_size}" font-family="sans-serif" '
            f'fill="{config.vertex_label_color}">{label}</text>'
        )
    parts.append('</g>')
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Edge Rendering
# ---------------------------------------------------------------------------
def _render_edge(
    graph: Graph,
    e: int,
    pos: Dict[int, Tuple[float, float]],
    setting: VisualSetting,
    config: CanvasConfig,
) -> str:
    edge = graph.get_edge(e)
    x1, y1 = pos[edge.v1]
    x2, y2 = pos[edge.v2]
    width = max(1.0, setting.weight * config.edge_width_scale)

    parts = [
        f'<g class="edge {setting.name}" data-id="{e}">',
        f'  <title>{escape(edge.label)} ({edge.length:g})</title>',
        f'  <line x1="{x1}" y1="{y1}" x2="{x2}" y2="{y2}" '
        f'stroke="{setting.color}" stroke-width="{width}" stroke-opacity="{setting.opacity}"/>',
    ]
    if config.show_lengths:
        mx, my = (x1 + x2) / 2, (y1 + y2) / 2
        parts.append(
            f'  <text x="{mx}" y="{my - 3}" text-anchor="middle" '
            f'font-size="{config.edge_label_size}" fill="{config.edge_label_color}">{edge.length:g}</text>'
        )
    parts.append('</g>')
    return "\n".join(parts)
