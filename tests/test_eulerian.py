from collections import Counter

import pytest

from algotrace.algorithms import generate_trace
from algotrace.algorithms.chinese_postman import MATCHING_STRATEGY, greedy_odd_matching
from algotrace.algorithms.eulerian import hierholzer, multigraph_adjacency, odd_vertices
from algotrace.algorithms.floyd_warshall import floyd_warshall
from algotrace.errors import InvalidInputError, PreconditionError
from algotrace.graph import Graph
from algotrace.graph import samples


def edge_multiset(graph):
    return Counter(frozenset((e.source, e.target)) for e in graph.edges.values())


def walk_multiset(walk):
    return Counter(frozenset(pair) for pair in zip(walk, walk[1:]))


def test_circuit_on_bow_tie():
    trace = generate_trace("eulerian", samples.euler_circuit_demo())
    last = trace[-1]
    assert last.kind == "done"
    assert last.payload.extra("circuit") == ("0", "1", "2", "0", "3", "4", "0")


def test_path_on_house():
    g = samples.euler_path_demo()
    trace = generate_trace("eulerian", g, mode="path")
    circuit = list(trace[-1].payload.extra("circuit"))
    assert circuit == ["0", "1", "2", "3", "0", "2"]
    assert walk_multiset(circuit) == edge_multiset(g)


def test_one_traverse_step_per_edge():
    g = samples.euler_circuit_demo()
    kinds = [s.kind for s in generate_trace("eulerian", g)]
    assert kinds.count("traverse") == g.edge_count()
    assert kinds.count("backtrack") == g.edge_count() + 1


def test_circuit_mode_rejects_odd_degrees():
    with pytest.raises(PreconditionError):
        generate_trace("eulerian", samples.euler_path_demo(), mode="circuit")


def test_path_mode_must_start_at_odd_vertex():
    with pytest.raises(PreconditionError):
        generate_trace("eulerian", samples.euler_path_demo(), mode="path", start="1")


def test_disconnected_edges_end_in_not_found():
    g = Graph(directed=False, weighted=False)
    for u, v in [("a", "b"), ("b", "c"), ("c", "a"), ("x", "y"), ("y", "z"), ("z", "x")]:
        g.create_edge(u, v)
    trace = generate_trace("eulerian", g)
    assert trace[-1].kind == "not_found"


def test_eulerian_rejects_unknown_mode():
    with pytest.raises(InvalidInputError):
        generate_trace("eulerian", samples.euler_circuit_demo(), mode="cycle")


def test_hierholzer_helper_without_steps():
    g = samples.euler_circuit_demo()
    circuit, keys = hierholzer(multigraph_adjacency(g), "0")
    assert circuit == ["0", "1", "2", "0", "3", "4", "0"]
    assert len(keys) == g.edge_count()


# ---------------------------------------------------------------------------
# Chinese Postman
# ---------------------------------------------------------------------------
def test_greedy_matching_pairs_nearest():
    g = samples.postman_demo()
    nodes, dist, _ = floyd_warshall(g)
    pairs, leftover = greedy_odd_matching(odd_vertices(g), nodes, dist)
    assert MATCHING_STRATEGY == "greedy-nearest"
    assert pairs == [("E", "D", 5), ("B", "A", 3)]
    assert leftover == []


def test_postman_tour_weight_and_coverage():
    g = samples.postman_demo()
    trace = generate_trace("chinese_postman", g)
    last = trace[-1]

    assert last.kind == "done"
    assert last.payload.extra("total_weight") == 42
    tour = list(last.payload.extra("circuit"))
    assert tour[0] == tour[-1]
    covered = walk_multiset(tour)
    for pair, count in edge_multiset(g).items():
        assert covered[pair] >= count


def test_postman_phases_in_order():
    kinds = [s.kind for s in generate_trace("chinese_postman", samples.postman_demo())]
    first_match = kinds.index("match")
    assert kinds[0] == "phase"
    assert kinds.count("match") == 2
    assert kinds.index("duplicate") > first_match
    assert kinds.index("traverse") > kinds.index("duplicate")


def test_postman_on_eulerian_graph_skips_matching():
    g = samples.euler_circuit_demo()
    trace = generate_trace("chinese_postman", g)
    kinds = [s.kind for s in trace]
    assert "match" not in kinds
    assert trace[-1].payload.extra("total_weight") == sum(e.weight for e in g.edges.values())


def test_postman_disconnected_odd_vertices():
    g = Graph(directed=False)
    g.create_edge("a", "b", weight=1)
    g.create_edge("c", "d", weight=1)
    trace = generate_trace("chinese_postman", g)
    assert trace[-1].kind == "not_found"
