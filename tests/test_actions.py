import pytest

from algorithms.actions import (
    DONE, START, Action, ActionAlgorithm, ActionTable, ActionTableError, UnknownActionError,
)


def _noop(alg):
    alg.goto(DONE)


def _describe(alg):
    return ""


class Counter(ActionAlgorithm):
    def __init__(self):
        super().__init__()
        self.count = 0


def _count(alg):
    alg.count += 1
    alg.goto(DONE if alg.count >= 3 else "count", end_iteration=True)


COUNTER_TABLE = ActionTable(
    [
        Action(START, lambda a: a.goto("count"), _describe, targets=("count",)),
        Action("count", _count, lambda a: f"count is {a.count}", targets=("count", DONE)),
    ],
    name="counter",
)


def test_walk_reaches_done():
    alg = Counter()
    while alg.next_action != DONE:
        COUNTER_TABLE.perform(alg, alg.next_action)
    assert alg.count == 3
    assert alg.iteration_done


def test_table_introspection():
    assert COUNTER_TABLE.names() == [START, "count"]
    assert "count" in COUNTER_TABLE
    assert len(COUNTER_TABLE) == 2
    assert COUNTER_TABLE.lookup("count").describe(Counter()) == "count is 0"


def test_duplicate_action_rejected():
    with pytest.raises(ActionTableError, match="duplicate"):
        ActionTable([
            Action(START, _noop, _describe, targets=(DONE,)),
            Action(START, _noop, _describe, targets=(DONE,)),
        ])


def test_missing_start_rejected():
    with pytest.raises(ActionTableError, match="start action"):
        ActionTable([Action("other", _noop, _describe, targets=(DONE,))])


def test_done_is_reserved():
    with pytest.raises(ActionTableError):
        ActionTable([
            Action(START, _noop, _describe, targets=(DONE,)),
            Action(DONE, _noop, _describe, targets=(START,)),
        ])


def test_unresolvable_target_rejected():
    with pytest.raises(ActionTableError, match="unknown action 'nowhere'"):
        ActionTable([Action(START, _noop, _describe, targets=("nowhere",))])


def test_action_without_targets_rejected():
    with pytest.raises(ActionTableError, match="no targets"):
        ActionTable([Action(START, _noop, _describe)])


def test_runtime_jump_to_unknown_action():
    table = ActionTable([Action(START, lambda a: a.goto("bogus"), _describe, targets=(DONE,))])
    with pytest.raises(UnknownActionError) as info:
        table.perform(ActionAlgorithm(), START)
    assert info.value.name == "bogus"


def test_lookup_of_unknown_name():
    with pytest.raises(UnknownActionError):
        COUNTER_TABLE.lookup("missing")


def test_jump_to_undeclared_target():
    table = ActionTable([
        Action(START, lambda a: a.goto(DONE), _describe, targets=("second",)),
        Action("second", _noop, _describe, targets=(DONE,)),
    ])
    with pytest.raises(ActionTableError, match="undeclared"):
        table.perform(ActionAlgorithm(), START)
