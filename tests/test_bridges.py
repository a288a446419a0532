import pytest

from algotrace.algorithms import generate_trace
from algotrace.errors import InvalidInputError
from algotrace.graph import Graph, EdgeState


def test_two_triangles_single_bridge_and_its_endpoints(two_triangles):
    trace = generate_trace("tarjan", two_triangles)
    last = trace[-1].payload

    assert last.extra("bridge_ids") == ("e3",)
    assert last.extra("bridges") == (("2", "3"),)
    assert sorted(last.extra("articulation_points")) == ["2", "3"]
    assert [e.id for e in last.edges if e.state is EdgeState.BRIDGE] == ["e3"]


def test_bridge_and_articulation_steps_are_emitted(two_triangles):
    kinds = [s.kind for s in generate_trace("tarjan", two_triangles)]
    assert kinds.count("bridge") == 1
    assert kinds.count("articulation") == 2
    assert kinds.count("visit") == 6
    assert kinds.count("finish") == 6


def test_parent_edge_is_not_a_back_edge():
    # a simple path: every edge is a bridge, no back-edges at all
    g = Graph(directed=False, weighted=False)
    for u, v in [("a", "b"), ("b", "c"), ("c", "d")]:
        g.create_edge(u, v)
    trace = generate_trace("tarjan", g)
    assert "back_edge" not in [s.kind for s in trace]
    assert trace[-1].payload.extra("bridge_ids") == ("e2", "e1", "e0")
    assert sorted(trace[-1].payload.extra("articulation_points")) == ["b", "c"]


def test_parallel_edges_are_not_bridges():
    g = Graph(directed=False, weighted=False)
    g.create_edge("a", "b")
    g.create_edge("a", "b")
    trace = generate_trace("tarjan", g)
    assert trace[-1].payload.extra("bridge_ids") == ()


def test_self_loop_is_ignored():
    g = Graph(directed=False, weighted=False)
    g.create_edge("a", "a")
    g.create_edge("a", "b")
    trace = generate_trace("tarjan", g)
    assert trace[-1].payload.extra("bridge_ids") == ("e1",)


def test_root_with_two_children_is_articulation():
    g = Graph(directed=False, weighted=False)
    g.create_node("hub")
    g.create_edge("hub", "x")
    g.create_edge("hub", "y")
    trace = generate_trace("tarjan", g)
    assert trace[-1].payload.extra("articulation_points") == ("hub",)


def test_mode_restricts_output(two_triangles):
    bridges_only = generate_trace("tarjan", two_triangles, mode="bridges")
    assert "articulation" not in [s.kind for s in bridges_only]
    assert bridges_only[-1].payload.extra("articulation_points") is None

    points_only = generate_trace("tarjan", two_triangles, mode="articulation")
    assert "bridge" not in [s.kind for s in points_only]
    assert points_only[-1].payload.extra("bridge_ids") is None


def test_tarjan_needs_undirected_graph(diamond):
    with pytest.raises(InvalidInputError):
        generate_trace("tarjan", diamond)
