"""
controller.py — Step Scheduler
==============================
The Controller is the ONLY object the UI talks to while an algorithm
runs.  It walks the active algorithm's action table, one action, one
iteration or all the way to DONE at a time, and owns the lifecycle
status.

State machine:
    NoData      →  load_graph()        →  GraphLoaded
    GraphLoaded →  select()            →  Selected
    Selected    →  start_or_resume()   →  Running
    Running     →  pause()             →  Paused
    Paused      →  start_or_resume()   →  Running
    Running     →  (walk reaches DONE) →  Complete
    any w/ algo →  reset()             →  Selected

Speed:
    delay  0   run to completion, no suspension
    delay -1   single step: do one unit of work, then pause
    delay > 0  milliseconds between automatic steps

Design decisions:
  - Automatic stepping is a continuation scheduled `delay` ms ahead.
    Nothing fires it by itself: the owner calls tick() (the browser
    polls, tests advance a fake clock).
  - Every scheduled continuation carries a generation token.  Leaving
    Running bumps the generation, so a stale continuation that fires
    later is ignored instead of doing work.
  - Step requests are serialised: a step issued while another is still
    executing is refused.
  - A jump to an unknown action is a bug in the algorithm.  The
    Controller forces Paused, records the error and re-raises it.

Thread safety:
  Not thread-safe.  The web layer holds a lock per session around every
  call.
"""

import logging
import time
from enum import Enum
from typing import Callable, Dict, Optional

from algorithms.actions import DONE, START, ActionAlgorithm, ActionTableError
from algorithms.visual import VisualizationSink
from graph import Graph

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class AlgorithmStatus(Enum):
    NO_DATA          = "NoData"
    GRAPH_LOADED     = "GraphLoaded"
    WAYPOINT_LOADED  = "WaypointLoaded"
    NEAR_MISS_LOADED = "NearMissLoaded"
    PATH_LOADED      = "PathLoaded"
    LIST_LOADED      = "ListLoaded"
    SELECTED         = "Selected"
    RUNNING          = "Running"
    PAUSED           = "Paused"
    COMPLETE         = "Complete"


# statuses that only make sense with an algorithm attached
_ACTIVE = (
    AlgorithmStatus.SELECTED,
    AlgorithmStatus.RUNNING,
    AlgorithmStatus.PAUSED,
    AlgorithmStatus.COMPLETE,
)


class Granularity(Enum):
    ACTION     = "action"
    ITERATION  = "iteration"
    COMPLETION = "completion"


class InvalidTransitionError(RuntimeError):
    """Controller operation requested from a status that forbids it."""


# ---------------------------------------------------------------------------
# Speed presets (milliseconds between steps)
# ---------------------------------------------------------------------------
RUN_TO_COMPLETION = 0
SINGLE_STEP       = -1

SPEED_PRESETS: Dict[str, int] = {
    "jump":    RUN_TO_COMPLETION,
    "turbo":   5,
    "fast":    50,      # default
    "medium":  250,
    "slow":    1000,    # teaching mode
    "step":    SINGLE_STEP,
}


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------
class Controller:
    """
    Attributes:
        status         : Current AlgorithmStatus.
        graph          : Loaded Graph, or None.
        algorithm      : Selected ActionAlgorithm, or None.
        delay          : ms between automatic steps (see module doc).
        trace_actions  : Automatic steps advance one action (True) or one
                         iteration (False).
        exec_counts    : {action name: times executed this run}.
        internal_error : Message of the last fatal action-table error.
        status_text    : Latest description produced by an action.
    """

    def __init__(
        self,
        sink: Optional[VisualizationSink] = None,
        delay: int = 50,
        trace_actions: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.sink:           VisualizationSink          = sink or VisualizationSink()
        self.status:         AlgorithmStatus            = AlgorithmStatus.NO_DATA
        self.graph:          Optional[Graph]            = None
        self.algorithm:      Optional[ActionAlgorithm]  = None
        self.delay:          int                        = delay
        self.trace_actions:  bool                       = trace_actions
        self.exec_counts:    Dict[str, int]             = {}
        self.max_exec_count: int                        = 0
        self.internal_error: Optional[str]              = None
        self.status_text:    str                        = ""
        self.actions_run:    int                        = 0

        self._clock      = clock
        self._generation = 0
        self._due:       Optional[float] = None
        self._in_flight  = False
        self.set_delay(delay)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load_graph(self, graph: Graph) -> None:
        """New data: any selection is dropped."""
        if self.status is AlgorithmStatus.RUNNING:
            self.pause()
        self._revoke()
        self.graph     = graph
        self.algorithm = None
        self._set_status(AlgorithmStatus.GRAPH_LOADED)

    def select(self, algorithm: ActionAlgorithm) -> None:
        if self.graph is None:
            raise InvalidTransitionError("load a graph before selecting an algorithm")
        if self.status is AlgorithmStatus.RUNNING:
            self.pause()
        self._revoke()
        algorithm.sink = self.sink
        self.algorithm = algorithm
        self.internal_error = None
        self._clear_counts()
        self._set_status(AlgorithmStatus.SELECTED)

    def start_or_resume(self) -> None:
        if self.status is AlgorithmStatus.SELECTED:
            self.algorithm.prepare()
            self._clear_counts()
            self.internal_error = None
            self.algorithm.next_action    = START
            self.algorithm.iteration_done = False
            self._set_status(AlgorithmStatus.RUNNING)
        elif self.status is AlgorithmStatus.PAUSED:
            self._set_status(AlgorithmStatus.RUNNING)
        else:
            raise InvalidTransitionError(f"cannot start or resume from {self.status.value}")
        self._next_step()

    def pause(self) -> None:
        if self.status is not AlgorithmStatus.RUNNING:
            raise InvalidTransitionError(f"cannot pause from {self.status.value}")
        self._set_status(AlgorithmStatus.PAUSED)
        self._revoke()

    def toggle(self) -> None:
        """The start / pause / resume button."""
        if self.status is AlgorithmStatus.RUNNING:
            self.pause()
        else:
            self.start_or_resume()

    def reset(self) -> None:
        """Back to Selected (or GraphLoaded / NoData without a selection)."""
        if self.status is AlgorithmStatus.RUNNING:
            self.pause()
        self._revoke()
        self.internal_error = None
        self.status_text    = ""
        self._clear_counts()
        if self.algorithm is not None:
            self.algorithm.next_action = START
            self._set_status(AlgorithmStatus.SELECTED)
        elif self.graph is not None:
            self._set_status(AlgorithmStatus.GRAPH_LOADED)
        else:
            self._set_status(AlgorithmStatus.NO_DATA)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------
    def step(self, granularity: Granularity = Granularity.ACTION) -> bool:
        """
        Do exactly one unit of work.  Returns False if the request was
        refused (nothing to run, or a step is already executing).
        """
        if self._in_flight:
            logger.warning("step(%s) refused: another step is in flight", granularity.value)
            return False
        if self.status not in (AlgorithmStatus.RUNNING, AlgorithmStatus.PAUSED):
            return False

        self._in_flight = True
        try:
            if granularity is Granularity.ACTION:
                self._one_action()
            elif granularity is Granularity.ITERATION:
                self._one_iteration()
            else:
                while self.algorithm.next_action != DONE:
                    self._one_iteration()
        finally:
            self._in_flight = False

        if self.algorithm.next_action == DONE:
            self._revoke()
            self._set_status(AlgorithmStatus.COMPLETE)
        elif self.status is AlgorithmStatus.RUNNING and granularity is not Granularity.COMPLETION:
            self._schedule()
        return True

    def tick(self) -> bool:
        """
        Call periodically.  Fires the pending continuation if it is due.
        Returns True if work was done.
        """
        if self._due is None or self._clock() < self._due:
            return False
        return self.fire(self._generation)

    def fire(self, token: int) -> bool:
        """Run the continuation issued with `token`, unless it was revoked."""
        if token != self._generation or self.status is not AlgorithmStatus.RUNNING:
            return False
        self._due = None
        self._next_step()
        return True

    @property
    def pending_token(self) -> Optional[int]:
        """Token of the scheduled continuation, None if nothing is pending."""
        return self._generation if self._due is not None else None

    @property
    def due_in(self) -> Optional[float]:
        """Seconds until the pending continuation is due."""
        if self._due is None:
            return None
        return max(0.0, self._due - self._clock())

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_delay(self, delay: int) -> None:
        delay = int(delay)
        if delay < SINGLE_STEP:
            raise ValueError(f"delay must be -1, 0 or a positive number of ms, got {delay}")
        self.delay = delay

    def set_speed(self, preset: str) -> None:
        self.set_delay(SPEED_PRESETS.get(preset, SPEED_PRESETS["fast"]))

    def set_trace_actions(self, trace: bool) -> None:
        self.trace_actions = bool(trace)

    # ------------------------------------------------------------------
    # Execution counts
    # ------------------------------------------------------------------
    def exec_count_color(self, count: int) -> str:
        """Light blue for rarely run actions, pink for the busiest."""
        rank = 75 * count / self.max_exec_count if self.max_exec_count else 0
        return f"rgb({round(180 + rank)},210,{round(255 - rank)})"

    def exec_colors(self) -> Dict[str, str]:
        return {name: self.exec_count_color(c) for name, c in self.exec_counts.items()}

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def next_action(self) -> Optional[str]:
        return self.algorithm.next_action if self.algorithm else None

    @property
    def is_running(self) -> bool:
        return self.status is AlgorithmStatus.RUNNING

    @property
    def is_complete(self) -> bool:
        return self.status is AlgorithmStatus.COMPLETE

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _next_step(self) -> None:
        """One automatic step, as configured by delay / trace_actions."""
        if self.status is not AlgorithmStatus.RUNNING:
            return
        if self.delay == RUN_TO_COMPLETION:
            self.step(Granularity.COMPLETION)
            return
        if self.delay == SINGLE_STEP:
            self._set_status(AlgorithmStatus.PAUSED)
        self.step(Granularity.ACTION if self.trace_actions else Granularity.ITERATION)

    def _one_iteration(self) -> None:
        alg = self.algorithm
        alg.iteration_done = False
        while not alg.iteration_done and alg.next_action != DONE:
            self._one_action()

    def _one_action(self) -> None:
        alg  = self.algorithm
        name = alg.next_action
        try:
            action = alg.table.perform(alg, name)
        except ActionTableError as exc:
            self._fatal(exc)
            raise
        self.actions_run += 1
        count = self.exec_counts.get(name, 0) + 1
        self.exec_counts[name] = count
        self.max_exec_count    = max(self.max_exec_count, count)

        self.status_text = action.describe(alg)
        self.sink.set_status_text(self.status_text)
        logger.debug("%s -> %s: %s", name, alg.next_action, self.status_text)

    def _fatal(self, exc: Exception) -> None:
        self._revoke()
        self.status = AlgorithmStatus.PAUSED
        self.internal_error = str(exc)
        self.status_text    = f"Internal error: {exc}"
        self.sink.set_status_text(self.status_text)
        logger.error("%s; controller paused", exc)

    def _schedule(self) -> None:
        self._generation += 1
        self._due = self._clock() + max(self.delay, 0) / 1000.0

    def _revoke(self) -> None:
        self._generation += 1
        self._due = None

    def _clear_counts(self) -> None:
        self.exec_counts    = {}
        self.max_exec_count = 0
        self.actions_run    = 0

    def _set_status(self, status: AlgorithmStatus) -> None:
        if status in _ACTIVE and self.graph is None:
            raise InvalidTransitionError(f"{status.value} requires a loaded graph")
        if status is not self.status:
            logger.info("status %s -> %s", self.status.value, status.value)
        self.status = status
