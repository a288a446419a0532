import math

import pytest

from algotrace.algorithms import generate_trace
from algotrace.algorithms.floyd_warshall import floyd_warshall, extract_path, init_matrices
from algotrace.errors import InvalidInputError
from algotrace.graph import Graph


def brute_force_distances(graph, source):
    """Bellman-Ford style relaxation until nothing changes."""
    dist = {nid: math.inf for nid in graph.node_ids()}
    dist[source] = 0
    changed = True
    while changed:
        changed = False
        for e in graph.edges.values():
            ends = [(e.source, e.target)] if e.directed else [(e.source, e.target), (e.target, e.source)]
            for u, v in ends:
                if dist[u] + e.weight < dist[v]:
                    dist[v] = dist[u] + e.weight
                    changed = True
    return dist


def test_dijkstra_final_distances_match_brute_force(weighted_graph):
    trace = generate_trace("dijkstra", weighted_graph, source="A")
    expected = brute_force_distances(weighted_graph, "A")
    assert trace[-1].kind == "done"
    assert trace[-1].payload.distances == expected


def test_dijkstra_path_cost_matches_brute_force(weighted_graph):
    trace = generate_trace("dijkstra", weighted_graph, source="A", target="F")
    last = trace[-1]
    expected = brute_force_distances(weighted_graph, "A")["F"]

    assert last.kind == "path"
    assert last.payload.extra("path_cost") == expected
    path = last.payload.path
    cost = sum(weighted_graph.get_edge_between(a, b).weight for a, b in zip(path, path[1:]))
    assert cost == expected


def test_dijkstra_emits_relax_before_update(weighted_graph):
    trace = generate_trace("dijkstra", weighted_graph, source="A")
    kinds = [s.kind for s in trace]
    for i, kind in enumerate(kinds):
        if kind == "update":
            assert kinds[i - 1] == "relax"


def test_dijkstra_extracts_in_nondecreasing_distance(weighted_graph):
    trace = generate_trace("dijkstra", weighted_graph, source="A")
    extracted = [s.payload.distances[s.payload.current_node] for s in trace if s.kind == "visit"]
    assert extracted == sorted(extracted)
    assert len(extracted) == weighted_graph.node_count()


def test_dijkstra_unreachable_target(directed_chain):
    trace = generate_trace("dijkstra", directed_chain, source="a", target="d")
    assert trace[-1].kind == "not_found"
    assert trace[-1].payload.distances["d"] == math.inf


def test_dijkstra_rejects_negative_weights():
    g = Graph(directed=True)
    g.create_edge("x", "y", weight=-1)
    with pytest.raises(InvalidInputError):
        generate_trace("dijkstra", g, source="x")


@pytest.mark.parametrize("heuristic", ["zero", "euclidean", "manhattan"])
def test_astar_reaches_target(weighted_graph, heuristic):
    trace = generate_trace("astar", weighted_graph, source="A", target="F", heuristic=heuristic)
    last = trace[-1]
    assert last.kind == "path"
    assert last.payload.path[0] == "A" and last.payload.path[-1] == "F"
    assert last.payload.extra("heuristic") == heuristic


def test_astar_zero_heuristic_is_uniform_cost(weighted_graph):
    trace = generate_trace("astar", weighted_graph, source="A", target="F")
    assert trace[-1].payload.extra("path_cost") == brute_force_distances(weighted_graph, "A")["F"]


def test_astar_requires_target(weighted_graph):
    with pytest.raises(InvalidInputError):
        generate_trace("astar", weighted_graph, source="A")


def test_floyd_warshall_matches_brute_force(weighted_graph):
    nodes, dist, nxt = floyd_warshall(weighted_graph)
    for i, s in enumerate(nodes):
        expected = brute_force_distances(weighted_graph, s)
        assert {t: dist[i][j] for j, t in enumerate(nodes)} == expected


def test_floyd_warshall_path_reconstruction(weighted_graph):
    nodes, dist, nxt = floyd_warshall(weighted_graph)
    si, ti = nodes.index("A"), nodes.index("F")
    path = extract_path(nxt, nodes, si, ti)
    cost = sum(weighted_graph.get_edge_between(a, b).weight for a, b in zip(path, path[1:]))
    assert path[0] == "A" and path[-1] == "F"
    assert cost == dist[si][ti]


def test_floyd_warshall_keeps_lightest_parallel_edge():
    g = Graph(directed=False)
    g.create_edge("p", "q", weight=5)
    g.create_edge("p", "q", weight=2)
    nodes, dist, _ = init_matrices(g)
    assert dist[0][1] == dist[1][0] == 2


def test_floyd_warshall_trace(weighted_graph):
    trace = generate_trace("floyd_warshall", weighted_graph, source="A", target="F")
    assert [s.kind for s in trace].count("phase") == weighted_graph.node_count()
    assert trace[-1].kind == "path"
    assert trace[-1].payload.extra("path_cost") == brute_force_distances(weighted_graph, "A")["F"]


def test_floyd_warshall_reports_negative_cycle():
    g = Graph(directed=True)
    g.create_edge("a", "b", weight=1)
    g.create_edge("b", "a", weight=-3)
    trace = generate_trace("floyd_warshall", g)
    assert trace[-1].payload.extra("negative_cycle") == ("a", "b")


def test_floyd_warshall_negative_self_loop_is_a_cycle():
    g = Graph(directed=True)
    g.create_edge("a", "b", weight=1)
    g.create_edge("b", "b", weight=-2)
    g.create_edge("a", "a", weight=4)
    _, dist, _ = init_matrices(g)
    assert dist[0][0] == 0
    assert dist[1][1] == -2

    trace = generate_trace("floyd_warshall", g, source="a", target="b")
    assert trace[-1].payload.extra("negative_cycle") == ("b",)
