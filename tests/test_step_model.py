import dataclasses

import pytest

from algotrace.algorithms import generate_trace
from algotrace.algorithms.step import (
    ArrayStepBuilder,
    GraphStepBuilder,
    GraphSnapshot,
    freeze,
)
from algotrace.graph import NodeState, EdgeState


def test_freeze_turns_containers_into_tuples():
    frozen = freeze({"a": [1, 2], "b": {"c": {3, 1}}})
    assert frozen == (("a", (1, 2)), ("b", (("c", (1, 3)),)))


def test_emit_copies_builder_state(weighted_graph):
    sb = GraphStepBuilder(weighted_graph)
    sb.distances = {"A": 0}
    sb.set_current("A")
    first = sb.emit("init", "start", line=1)

    sb.distances["B"] = 4
    sb.set_node("A", NodeState.VISITED)
    sb.extras["note"] = [1]
    second = sb.emit("next", "later")

    assert first.payload.node("A").state is NodeState.ACTIVE
    assert first.payload.distances["B"] is None
    assert first.payload.extra("note") is None
    assert second.payload.node("A").state is NodeState.VISITED
    assert second.payload.distances["B"] == 4
    assert second.payload.extra("note") == (1,)
    # pseudocode line carries over when not given
    assert second.pseudocode_line == 1
    assert (first.step_number, second.step_number) == (0, 1)


def test_steps_are_frozen():
    sb = ArrayStepBuilder([3, 1])
    step = sb.emit("init", "x")
    with pytest.raises(dataclasses.FrozenInstanceError):
        step.kind = "other"
    with pytest.raises(dataclasses.FrozenInstanceError):
        step.payload.found_index = 0


def test_node_and_edge_identity_is_stable_across_a_trace(weighted_graph):
    trace = generate_trace("dijkstra", weighted_graph, source="A", target="F")
    node_ids = [tuple(n.id for n in s.payload.nodes) for s in trace]
    edge_ends = [tuple((e.id, e.source, e.target) for e in s.payload.edges) for s in trace]
    assert len(set(node_ids)) == 1
    assert len(set(edge_ends)) == 1


@pytest.mark.parametrize(
    "key, structure, params",
    [
        ("linear_search", [5, 3, 8, 1, 9], {"target": 8}),
        ("bubble_sort", [4, 2, 5, 1], {}),
        ("bfs", "weighted", {"source": "A", "target": "F"}),
        ("dfs", "weighted", {"source": "A"}),
        ("dijkstra", "weighted", {"source": "A"}),
        ("tarjan", "two_triangles", {}),
        ("max_flow", "diamond", {"source": "s", "sink": "t"}),
        ("chinese_postman", "postman", {}),
        ("n_queens", None, {"n": 5}),
        ("knights_tour", None, {"n": 5}),
        ("maze", "maze", {}),
        ("islands", "islands", {}),
    ],
)
def test_traces_are_deterministic_and_well_formed(key, structure, params):
    from algotrace.graph.samples import SAMPLES

    make = (lambda: SAMPLES[structure]()) if isinstance(structure, str) else (lambda: structure)
    first = generate_trace(key, make(), **params)
    second = generate_trace(key, make(), **params)

    assert first == second
    assert len(first) >= 1
    assert [s.step_number for s in first] == list(range(len(first)))
    assert first[-1].is_final
    assert not any(s.is_final for s in first[:-1])


def test_generators_do_not_mutate_their_input(weighted_graph):
    before = weighted_graph.to_dict()
    generate_trace("dijkstra", weighted_graph, source="A", target="F")
    generate_trace("chinese_postman", weighted_graph)
    assert weighted_graph.to_dict() == before


def test_graph_snapshot_lookups(two_triangles):
    trace = generate_trace("tarjan", two_triangles)
    last = trace[-1].payload
    assert isinstance(last, GraphSnapshot)
    assert last.edge("e3").state is EdgeState.BRIDGE
    with pytest.raises(KeyError):
        last.node("missing")
