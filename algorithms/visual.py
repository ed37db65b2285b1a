"""
visual.py — Visualization Contract
==================================
Actions never draw anything themselves.  They describe what changed by
calling a VisualizationSink:

    • highlight(pseudocode_id, setting)          – pseudocode line colour
    • mark_vertex(vertex, setting, z_order, hidden)
    • mark_edge(edge, setting, hidden)
    • set_status_text(message)
    • set_panel_entry(key, text)

All calls are fire-and-forget; the engine never reads anything back.
The base class is a silent sink, so an algorithm can run with no display
at all (tests, batch metrics).

A VisualSetting is the colour/scale record attached to a vertex, edge or
pseudocode line.  The presets below are shared by every algorithm.
"""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class VisualSetting:
    """
    Attributes:
        name       : Identifier, also used as a CSS-friendly class name.
        color      : Fill / stroke colour (any CSS colour).
        text_color : Colour of text drawn on top of `color`.
        scale      : Marker size multiplier.
        weight     : Polyline stroke width.
        opacity    : Polyline opacity.
    """

    name:       str
    color:      str
    text_color: str   = "white"
    scale:      int   = 2
    weight:     int   = 4
    opacity:    float = 0.8

    def recolored(self, name: str, color: str) -> "VisualSetting":
        return replace(self, name=name, color=color)


# ---------------------------------------------------------------------------
# Shared presets
# ---------------------------------------------------------------------------
UNDISCOVERED           = VisualSetting("undiscovered", "#202020", scale=2, weight=4, opacity=0.8)
VISITING               = VisualSetting("visiting", "yellow", text_color="black", scale=8, weight=8, opacity=0.8)
DISCOVERED             = VisualSetting("discovered", "#00a000", scale=4, weight=4, opacity=0.8)
SPANNING_TREE          = VisualSetting("spanningTree", "#0000a0", scale=4, weight=4, opacity=0.6)
DISCARDED              = VisualSetting("discarded", "#a00000", scale=2, weight=3, opacity=0.5)
DISCARDED_ON_DISCOVERY = VisualSetting("discardedOnDiscovery", "#ff00ff", scale=4, weight=2, opacity=0.6)
SEARCH_FAILED          = VisualSetting("searchFailed", "red", scale=6, weight=4, opacity=0.6)
START_VERTEX           = VisualSetting("startVertex", "purple", scale=6)
END_VERTEX             = VisualSetting("endVertex", "violet", scale=6)

# traversal / spanning tree specific
ADDED_EARLIER          = VisualSetting("addedEarlier", "orange", text_color="black", scale=4)
COMPLETED_COMPONENT    = VisualSetting("completedComponent", "black", scale=3, weight=3, opacity=0.6)
FOUND_PATH             = VisualSetting("foundPath", "darkRed", scale=4, weight=4, opacity=0.6)

# finished components in FindAll, in order; random colours after these
COMPONENT_COLORS = [
    "orange", "darkCyan", "brown", "crimson", "lightCoral",
    "moccasin", "orchid", "sienna", "violet", "yellowGreen",
    "gold", "aqua", "dodgerblue", "lawngreen", "khaki",
    "lime", "firebrick", "indianred", "indigo", "goldenrod",
]

# vertex extremes: one colour per category leader
NORTH_LEADER           = VisualSetting("northLeader", "#8b0000", scale=6, weight=8, opacity=0.6)
SOUTH_LEADER           = VisualSetting("southLeader", "#ee0000", scale=6, weight=8, opacity=0.6)
EAST_LEADER            = VisualSetting("eastLeader", "#000080", scale=6, weight=8, opacity=0.6)
WEST_LEADER            = VisualSetting("westLeader", "#551a8b", scale=6, weight=8, opacity=0.6)
SHORT_LABEL_LEADER     = VisualSetting("shortLabelLeader", "#654321", scale=6, weight=8, opacity=0.6)
LONG_LABEL_LEADER      = VisualSetting("longLabelLeader", "#006400", scale=6, weight=8, opacity=0.6)


# ---------------------------------------------------------------------------
# Sink
# ---------------------------------------------------------------------------
class VisualizationSink:
    """Receives every display update an action produces.  Default: ignore."""

    def highlight(self, pseudocode_id: str, setting: VisualSetting) -> None:
        pass

    def mark_vertex(
        self,
        vertex: int,
        setting: VisualSetting,
        z_order: int = 0,
        hidden: bool = False,
    ) -> None:
        pass

    def mark_edge(self, edge: int, setting: VisualSetting, hidden: bool = False) -> None:
        pass

    def set_status_text(self, message: str) -> None:
        pass

    def set_panel_entry(self, key: str, text: Optional[str]) -> None:
        pass
