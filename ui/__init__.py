"""
ui/
---
Presentation layer.

    from ui import render_canvas
    from ui import playback_controls, algorithm_selector, …
"""

from ui.canvas import render_canvas, CanvasConfig

from ui.controls import (
    playback_controls,
    graph_generator,
    algorithm_selector,
    status_panel,
    pseudocode_viewer,
    av_entries_panel,
    ldv_panel,
    found_table,
    leader_table,
    results_panel,
    metrics_panel,
)

__all__ = [
    "render_canvas",
    "CanvasConfig",
    "playback_controls",
    "graph_generator",
    "algorithm_selector",
    "status_panel",
    "pseudocode_viewer",
    "av_entries_panel",
    "ldv_panel",
    "found_table",
    "leader_table",
    "results_panel",
    "metrics_panel",
]
