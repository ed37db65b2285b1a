import pytest

from algorithms import Selection, StoppingCondition, get_algorithm
from algorithms.actions import DONE, START, Action, ActionAlgorithm, ActionTable, UnknownActionError
from algorithms.traversal import CHECK_END_ADDED, CHECK_LDV_EMPTY
from engine import (
    AlgorithmStatus, Controller, Granularity, InvalidTransitionError,
    RUN_TO_COMPLETION, SINGLE_STEP,
)


def make_controller(graph, clock, delay=100, trace_actions=True, **selection):
    c = Controller(delay=delay, trace_actions=trace_actions, clock=clock)
    c.load_graph(graph)
    alg = get_algorithm(selection.pop("algo", "traversals")).create()
    alg.configure(graph, Selection(**selection))
    c.select(alg)
    return c


class Scripted(ActionAlgorithm):
    """Single-action algorithm whose START effect is supplied by the test."""

    def __init__(self, effect):
        super().__init__()
        self.table = ActionTable([Action(START, effect, lambda a: "scripted", targets=(DONE,))])


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------
def test_initial_status_is_no_data():
    c = Controller()
    assert c.status is AlgorithmStatus.NO_DATA
    assert c.next_action is None


def test_select_requires_graph():
    c = Controller()
    with pytest.raises(InvalidTransitionError):
        c.select(get_algorithm("dijkstra").create())


def test_start_requires_selection(cycle4):
    c = Controller()
    c.load_graph(cycle4)
    assert c.status is AlgorithmStatus.GRAPH_LOADED
    with pytest.raises(InvalidTransitionError):
        c.start_or_resume()


def test_pause_only_while_running(cycle4, clock):
    c = make_controller(cycle4, clock, start=0, end=2)
    with pytest.raises(InvalidTransitionError):
        c.pause()


def test_select_shares_the_sink(cycle4, recorder):
    c = Controller(sink=recorder)
    c.load_graph(cycle4)
    alg = get_algorithm("traversals").create()
    alg.configure(cycle4, Selection(start=0, end=2))
    c.select(alg)
    assert alg.sink is recorder
    assert c.status is AlgorithmStatus.SELECTED


def test_load_graph_while_running_drops_selection(cycle4, two_pairs, clock):
    c = make_controller(cycle4, clock, start=0, end=2)
    c.start_or_resume()
    assert c.is_running
    c.load_graph(two_pairs)
    assert c.status is AlgorithmStatus.GRAPH_LOADED
    assert c.algorithm is None
    assert c.pending_token is None


# ---------------------------------------------------------------------------
# Speeds
# ---------------------------------------------------------------------------
def test_delay_zero_runs_to_completion(cycle4, clock):
    c = make_controller(cycle4, clock, delay=RUN_TO_COMPLETION, start=0, end=2)
    c.start_or_resume()
    assert c.is_complete
    assert c.next_action == DONE
    assert c.pending_token is None


def test_single_step_pauses_after_each_action(cycle4, clock):
    c = make_controller(cycle4, clock, delay=SINGLE_STEP, start=0, end=2)
    c.start_or_resume()
    assert c.status is AlgorithmStatus.PAUSED
    assert c.actions_run == 1
    assert c.next_action == CHECK_END_ADDED
    c.start_or_resume()
    assert c.status is AlgorithmStatus.PAUSED
    assert c.actions_run == 2
    assert c.next_action == CHECK_LDV_EMPTY


def test_single_step_by_iteration(cycle4, clock):
    c = make_controller(cycle4, clock, delay=SINGLE_STEP, trace_actions=False, start=0, end=2)
    c.start_or_resume()
    c.start_or_resume()
    assert c.actions_run == 2
    c.start_or_resume()
    # a whole pass of the main loop, back round to the end check
    assert c.actions_run > 3
    assert c.next_action == CHECK_LDV_EMPTY


def test_positive_delay_waits_for_clock(cycle4, clock):
    c = make_controller(cycle4, clock, delay=100, start=0, end=2)
    c.start_or_resume()
    assert c.is_running
    assert c.actions_run == 1
    assert c.due_in == pytest.approx(0.1)

    assert not c.tick()
    clock.advance(40)
    assert not c.tick()
    clock.advance(100)
    assert c.tick()
    assert c.actions_run == 2


def test_ticks_drive_run_to_completion(cycle4, clock):
    c = make_controller(cycle4, clock, delay=5, start=0, end=2)
    c.start_or_resume()
    for _ in range(200):
        clock.advance(5)
        c.tick()
        if c.is_complete:
            break
    assert c.is_complete
    assert not c.tick()


def test_revoked_continuation_is_ignored(cycle4, clock):
    c = make_controller(cycle4, clock, delay=100, start=0, end=2)
    c.start_or_resume()
    token = c.pending_token
    c.pause()
    clock.advance(500)
    assert not c.fire(token)
    assert not c.tick()
    assert c.actions_run == 1

    c.start_or_resume()
    assert c.pending_token != token
    assert not c.fire(token)


def test_resume_continues_where_paused(cycle4, clock):
    c = make_controller(cycle4, clock, delay=100, start=0, end=2)
    c.start_or_resume()
    c.toggle()
    assert c.status is AlgorithmStatus.PAUSED
    c.toggle()
    assert c.is_running
    assert c.actions_run == 2


def test_set_delay_validation():
    c = Controller()
    with pytest.raises(ValueError):
        c.set_delay(-2)
    c.set_speed("slow")
    assert c.delay == 1000
    c.set_speed("unknown")
    assert c.delay == 50


@pytest.mark.parametrize("graph_name, selection, outcome", [
    ("cycle4", dict(start=0, stopping_condition=StoppingCondition.FIND_REACHABLE), "values"),
    ("cycle4", dict(start=0, end=2, discipline="DFS"), "path"),
    ("triangle", dict(algo="dijkstra", start=0, end=2), "path"),
    ("triangle", dict(algo="prim", start=2, end=0), "path"),
    ("two_pairs", dict(start=0, stopping_condition=StoppingCondition.FIND_ALL), "components"),
    ("two_pairs", dict(algo="prim", start=1, stopping_condition=StoppingCondition.FIND_ALL), "components"),
])
def test_completion_matches_stepping(request, clock, graph_name, selection, outcome):
    graph = request.getfixturevalue(graph_name)
    stepped = make_controller(graph, clock, delay=SINGLE_STEP, **dict(selection))
    while not stepped.is_complete:
        stepped.start_or_resume()

    jumped = make_controller(graph, clock, delay=RUN_TO_COMPLETION, **dict(selection))
    jumped.start_or_resume()

    assert getattr(jumped.algorithm, outcome)
    assert getattr(stepped.algorithm, outcome) == getattr(jumped.algorithm, outcome)
    assert stepped.algorithm.values == jumped.algorithm.values
    assert stepped.algorithm.stopped_because is jumped.algorithm.stopped_because
    assert stepped.actions_run == jumped.actions_run
    assert stepped.exec_counts == jumped.exec_counts


# ---------------------------------------------------------------------------
# Stepping edge cases
# ---------------------------------------------------------------------------
def test_step_refused_when_not_running(cycle4, clock):
    c = make_controller(cycle4, clock, start=0, end=2)
    assert not c.step()
    assert c.actions_run == 0


def test_step_refused_while_in_flight(cycle4, clock):
    c = Controller(delay=SINGLE_STEP, clock=clock)
    c.load_graph(cycle4)
    results = []

    def effect(alg):
        results.append(c.step(Granularity.ACTION))
        alg.goto(DONE)

    c.select(Scripted(effect))
    c.start_or_resume()
    assert results == [False]
    assert c.is_complete


def test_unknown_action_pauses_and_reports(cycle4, clock):
    c = Controller(delay=100, clock=clock)
    c.load_graph(cycle4)
    c.select(Scripted(lambda alg: alg.goto("bogus")))
    with pytest.raises(UnknownActionError):
        c.start_or_resume()
    assert c.status is AlgorithmStatus.PAUSED
    assert "bogus" in c.internal_error
    assert c.status_text.startswith("Internal error")
    assert c.pending_token is None


# ---------------------------------------------------------------------------
# Counts & reset
# ---------------------------------------------------------------------------
def test_exec_counts_and_colors(cycle4, clock):
    c = make_controller(cycle4, clock, delay=RUN_TO_COMPLETION, start=0, end=2)
    c.start_or_resume()
    assert c.exec_counts[START] == 1
    assert c.exec_counts["cleanup"] == 1
    assert sum(c.exec_counts.values()) == c.actions_run
    assert c.max_exec_count == max(c.exec_counts.values())
    assert c.exec_count_color(0) == "rgb(180,210,255)"
    assert c.exec_count_color(c.max_exec_count) == "rgb(255,210,180)"
    assert set(c.exec_colors()) == set(c.exec_counts)


def test_reset_returns_to_selected(cycle4, clock):
    c = make_controller(cycle4, clock, delay=100, start=0, end=2)
    c.start_or_resume()
    c.reset()
    assert c.status is AlgorithmStatus.SELECTED
    assert c.exec_counts == {}
    assert c.next_action == START
    assert c.pending_token is None

    # and it can run again from the top
    c.set_delay(RUN_TO_COMPLETION)
    c.start_or_resume()
    assert c.is_complete
    assert c.exec_counts[START] == 1


def test_reset_without_selection(cycle4):
    c = Controller()
    c.reset()
    assert c.status is AlgorithmStatus.NO_DATA
    c.load_graph(cycle4)
    c.reset()
    assert c.status is AlgorithmStatus.GRAPH_LOADED
