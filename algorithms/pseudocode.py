"""
pseudocode.py — Pseudocode Listings
===================================
A listing is a list of PseudocodeLine.  Lines tied to an action carry
that action's name so the display can highlight it while the action
runs; structural lines (`else`) carry None.

An action that walks several lines of the listing (one per category,
say) highlights each with its own `line_id`; execution counts are still
kept per action.
"""

from typing import Iterable, List, NamedTuple, Optional, Union


class PseudocodeLine(NamedTuple):
    indent:  int
    text:    str
    action:  Optional[str] = None
    line_id: Optional[str] = None

    @property
    def highlight_id(self) -> Optional[str]:
        return self.line_id or self.action


def line(
    indent: int,
    text: Union[str, Iterable[str]],
    action: Optional[str] = None,
    line_id: Optional[str] = None,
) -> List[PseudocodeLine]:
    """
    One logical entry.  A list of texts becomes several physical lines
    that all highlight together.
    """
    texts = [text] if isinstance(text, str) else list(text)
    return [PseudocodeLine(indent, t, action, line_id) for t in texts]


def render_text(lines: Iterable[PseudocodeLine], indent_width: int = 2) -> str:
    """Plain-text rendering, mostly for logs and tests."""
    return "\n".join(" " * (indent_width * ln.indent) + ln.text for ln in lines)
