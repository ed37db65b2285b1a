import random

import pytest

from algorithms.ldv import (
    Discipline, DiscoveryContainer, EmptyContainerError, LDVEntry,
)


def _entry(vertex, value=0.0):
    return LDVEntry(vertex=vertex, value=value, via_edge=vertex, from_vertex=0)


def _fill(container, values):
    for i, value in enumerate(values):
        container.add(_entry(i, value))


def _drain(container):
    out = []
    while not container.is_empty():
        out.append(container.remove())
    return out


def test_lifo_removes_newest_first():
    c = DiscoveryContainer(Discipline.LIFO, "stack")
    _fill(c, [0, 0, 0])
    assert [e.vertex for e in _drain(c)] == [2, 1, 0]


def test_fifo_removes_oldest_first():
    c = DiscoveryContainer(Discipline.FIFO, "queue")
    _fill(c, [0, 0, 0])
    assert [e.vertex for e in _drain(c)] == [0, 1, 2]


def test_priority_removes_lowest_value_first():
    c = DiscoveryContainer(Discipline.PRIORITY, "pq")
    _fill(c, [5, 3, 8, 1])
    assert [e.value for e in _drain(c)] == [1, 3, 5, 8]


def test_priority_ties_leave_in_arrival_order():
    c = DiscoveryContainer(Discipline.PRIORITY, "pq")
    _fill(c, [2, 1, 2, 2])
    assert [e.vertex for e in _drain(c)] == [1, 0, 2, 3]


def test_priority_custom_comparator():
    c = DiscoveryContainer(Discipline.PRIORITY, "pq", comparator=lambda a, b: a.value > b.value)
    _fill(c, [5, 3, 8, 1])
    assert [e.value for e in _drain(c)] == [8, 5, 3, 1]


def test_random_is_replayable_with_seeded_rng():
    orders = []
    for _ in range(2):
        c = DiscoveryContainer(Discipline.RANDOM, "bag", rng=random.Random(3))
        _fill(c, [0] * 8)
        orders.append([e.vertex for e in _drain(c)])
    assert orders[0] == orders[1]
    assert sorted(orders[0]) == list(range(8))


def test_remove_from_empty_raises():
    c = DiscoveryContainer(Discipline.FIFO, "queue")
    assert c.is_empty()
    with pytest.raises(EmptyContainerError):
        c.remove()
    # still an IndexError for callers that expect one
    with pytest.raises(IndexError):
        c.remove()


def test_counts_and_len():
    c = DiscoveryContainer(Discipline.LIFO, "stack")
    _fill(c, [0, 0])
    c.remove()
    assert len(c) == 1
    assert (c.add_count, c.remove_count) == (2, 1)


def test_contains_field_matching():
    c = DiscoveryContainer(Discipline.FIFO, "queue")
    _fill(c, [4, 7])
    assert c.contains_field_matching("vertex", 1)
    assert c.contains_field_matching("value", 7)
    assert not c.contains_field_matching("vertex", 9)


def test_display_items_elides_the_middle_of_a_queue():
    c = DiscoveryContainer(Discipline.FIFO, "queue")
    _fill(c, range(6))
    shown = c.display_items(4)
    assert shown[2] is None
    assert [e.vertex for e in shown if e is not None] == [0, 1, 4, 5]


def test_display_items_shows_newest_of_a_stack():
    c = DiscoveryContainer(Discipline.LIFO, "stack")
    _fill(c, range(6))
    shown = c.display_items(3)
    assert shown[0] is None
    assert [e.vertex for e in shown[1:]] == [3, 4, 5]
    assert len(c.display_items(None)) == 6
    assert len(c.display_items(10)) == 6


def test_operation_names_and_formatting():
    assert Discipline.LIFO.add_operation == "push"
    assert Discipline.FIFO.remove_operation == "dequeue"
    assert Discipline.PRIORITY.add_operation == "add"
    c = DiscoveryContainer(Discipline.PRIORITY, "pq", value_precision=2)
    assert c.format_value(1.23456) == "1.23"


def test_seed_entry_has_no_edge(triangle):
    seed = LDVEntry.seed(1)
    assert seed.is_seed and seed.from_vertex is None and seed.value == 0
    via = LDVEntry.via(triangle, 2, 5.0, 2)
    assert via.from_vertex == 0
    assert not via.is_seed


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_priority_drain_is_sorted_for_any_insertion_order(seed):
    rng = random.Random(seed)
    values = [rng.randint(0, 20) for _ in range(30)]
    c = DiscoveryContainer(Discipline.PRIORITY, "pq")
    _fill(c, values)
    drained = [e.value for e in _drain(c)]
    assert drained == sorted(values)


def test_is_empty_tracks_net_adds():
    c = DiscoveryContainer(Discipline.RANDOM, "bag", rng=random.Random(0))
    for step in [1, 1, -1, 1, -1, -1]:
        if step > 0:
            c.add(_entry(c.add_count))
        else:
            c.remove()
        assert c.is_empty() == (c.add_count - c.remove_count == 0)
    assert c.is_empty()


@pytest.mark.parametrize("via_edge, from_vertex", [(3, None), (None, 2)])
def test_entry_needs_both_edge_and_source_or_neither(via_edge, from_vertex):
    with pytest.raises(ValueError):
        LDVEntry(vertex=1, value=0, via_edge=via_edge, from_vertex=from_vertex)


def test_random_removal_is_uniform():
    rng = random.Random(2024)
    hits = [0] * 4
    for _ in range(4000):
        c = DiscoveryContainer(Discipline.RANDOM, "bag", rng=rng)
        _fill(c, [0] * 4)
        hits[c.remove().vertex] += 1
    # 1000 expected per slot, sd ~27
    assert all(850 < h < 1150 for h in hits), hits
