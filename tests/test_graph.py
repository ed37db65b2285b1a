import pytest

from graph import Graph, GraphEdge


def test_neighbours_follow_insertion_order(cycle4):
    assert [(v, e.index) for v, e in cycle4.neighbours(0)] == [(1, 0), (3, 3)]
    assert cycle4.degree(2) == 2
    assert cycle4.edge_between(3, 0).index == 3
    assert cycle4.edge_between(0, 2) is None


def test_incident_edges_match_neighbours(triangle):
    assert [e.index for e in triangle.incident_edges(0)] == [0, 2]
    assert [e.index for _, e in triangle.neighbours(0)] == [0, 2]
    assert triangle.incident_edges(1)[1].other_end(1) == 2


def test_from_edge_list_labels_and_lengths(triangle):
    assert [v.label for v in triangle.vertices] == ["V0", "V1", "V2"]
    assert triangle.get_edge(2).length == 5.0
    assert triangle.get_edge(2).other_end(2) == 0


def test_other_end_rejects_non_endpoint(triangle):
    with pytest.raises(ValueError):
        triangle.get_edge(0).other_end(2)


def test_add_edge_validation():
    g = Graph.from_edge_list(2, [])
    with pytest.raises(ValueError):
        g.create_edge(0, 0)
    with pytest.raises(ValueError):
        g.create_edge(0, 5)
    with pytest.raises(ValueError):
        g.add_edge(GraphEdge(0, 1, length=-1))


def test_dict_round_trip_keeps_adjacency(cycle4):
    copy = Graph.from_dict(cycle4.to_dict())
    assert copy.vertex_count() == 4
    assert copy.edge_count() == 4
    assert [v for v, _ in copy.neighbours(2)] == [1, 3]


def test_generate_random_is_connected_and_seeded():
    a = Graph.generate_random(num_vertices=10, edge_probability=0.0, seed=7)
    b = Graph.generate_random(num_vertices=10, edge_probability=0.0, seed=7)
    # backbone only: a spanning path
    assert a.edge_count() == 9
    assert a.to_dict() == b.to_dict()


def test_generate_grid_dimensions():
    g = Graph.generate_grid(rows=3, cols=4)
    assert g.vertex_count() == 12
    assert g.edge_count() == 3 * 3 + 2 * 4
    assert g.get_vertex(5).label == "G1_1"
