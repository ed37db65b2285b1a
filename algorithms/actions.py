"""
actions.py — Action Tables
==========================
An algorithm visualization is written as a table of small named actions.
Each action does one bounded piece of work and names the action to run
next; the walk starts at START and ends when an action names DONE.

    START ─► checkEndAdded ─► checkLDVEmpty ─► getPlaceFromLDV ─► … ─► DONE

The Controller never looks inside an algorithm.  It only:
  1. looks up `algorithm.next_action` in the table,
  2. calls the action's effect,
  3. reads `next_action` / `iteration_done` back.

Design decisions:
  - Every action declares the names it may jump to (`targets`).  The
    table checks all of them when it is built, so a typo in a transition
    fails at import time instead of halfway through a run.
  - A runtime jump to a name that is not in the table is still possible
    (an effect can compute any string) and raises UnknownActionError.
  - DONE is a sentinel, never an action.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from algorithms.visual import VisualizationSink


START = "START"
DONE  = "DONE"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
class ActionTableError(Exception):
    """Malformed action table: duplicate names, missing start, bad target."""


class UnknownActionError(ActionTableError, LookupError):
    """`next_action` names an action that does not exist."""

    def __init__(self, name: str, table: Optional[str] = None):
        where = f" in {table}" if table else ""
        super().__init__(f"internal error: bad action {name!r}{where}")
        self.name = name


# ---------------------------------------------------------------------------
# Action
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Action:
    """
    Attributes:
        name     : Unique label; also the pseudocode line it highlights.
        effect   : effect(algorithm) -> None.  Must set algorithm.next_action.
        describe : describe(algorithm) -> str, status text shown after effect.
        targets  : Every name `effect` may set next_action to.
        comment  : Short human description (tooltips).
    """

    name:     str
    effect:   Callable[["ActionAlgorithm"], None]
    describe: Callable[["ActionAlgorithm"], str]
    targets:  Tuple[str, ...] = ()
    comment:  str = ""


class ActionTable:
    """Ordered, name-indexed collection of Actions with one start action."""

    def __init__(self, actions: Iterable[Action], start: str = START, name: str = ""):
        self.name  = name
        self.start = start
        self._actions: Dict[str, Action] = {}

        for action in actions:
            if action.name == DONE:
                raise ActionTableError(f"{DONE!r} is reserved and cannot be an action")
            if action.name in self._actions:
                raise ActionTableError(f"duplicate action {action.name!r}")
            self._actions[action.name] = action

        if start not in self._actions:
            raise ActionTableError(f"start action {start!r} missing from {name or 'table'}")

        for action in self._actions.values():
            if not action.targets:
                raise ActionTableError(f"action {action.name!r} declares no targets")
            for target in action.targets:
                if target != DONE and target not in self._actions:
                    raise ActionTableError(
                        f"action {action.name!r} jumps to unknown action {target!r}"
                    )

    # ------------------------------------------------------------------
    def lookup(self, name: str) -> Action:
        try:
            return self._actions[name]
        except KeyError:
            raise UnknownActionError(name, self.name) from None

    def perform(self, algorithm: "ActionAlgorithm", name: str) -> Action:
        """Run one action and check where it says to go next."""
        action = self.lookup(name)
        action.effect(algorithm)
        nxt = algorithm.next_action
        if nxt != DONE and nxt not in self._actions:
            raise UnknownActionError(nxt, self.name)
        if nxt not in action.targets:
            raise ActionTableError(f"action {name!r} jumped to undeclared target {nxt!r}")
        return action

    def names(self) -> List[str]:
        return list(self._actions)

    def __contains__(self, name: str) -> bool:
        return name in self._actions

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self):
        return iter(self._actions.values())


# ---------------------------------------------------------------------------
# Algorithm base
# ---------------------------------------------------------------------------
class ActionAlgorithm:
    """
    Base for anything the Controller can drive.

    Subclasses set the class attribute `table` and override `prepare()`
    and `pseudocode()`.  `next_action` and `iteration_done` are the only
    fields the Controller reads or writes.
    """

    table: ActionTable

    key:  str = ""
    name: str = ""

    def __init__(self, sink: Optional[VisualizationSink] = None):
        self.sink:           VisualizationSink = sink or VisualizationSink()
        self.next_action:    str  = START
        self.iteration_done: bool = False

    def prepare(self) -> None:
        """Called by the Controller immediately before START runs."""

    def pseudocode(self) -> list:
        return []

    def goto(self, name: str, end_iteration: bool = False) -> None:
        self.next_action = name
        if end_iteration:
            self.iteration_done = True
