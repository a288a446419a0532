import pytest

from algotrace.algorithms import (
    REGISTRY,
    algorithms_by_tag,
    generate_trace,
    get_algorithm,
    list_algorithms,
    validate_params,
)
from algotrace.errors import AlgotraceError, InvalidInputError, TraceLimitError
from algotrace.graph import Graph
from algotrace.graph import samples


EXPECTED_KEYS = {
    "linear_search", "binary_search", "bubble_sort",
    "bfs", "dfs", "dijkstra", "astar",
    "tarjan", "max_flow", "eulerian", "floyd_warshall", "chinese_postman",
    "n_queens", "knights_tour",
    "shortest_path_grid", "maze", "min_knight_moves", "islands",
}


def test_every_algorithm_is_registered():
    assert set(REGISTRY) == EXPECTED_KEYS
    assert [a.key for a in list_algorithms()] == list(REGISTRY)


def test_cards_are_complete():
    for info in list_algorithms():
        card = info.to_dict()
        assert card["key"] == info.key
        assert card["label"]
        assert card["pseudocode"]
        assert card["input"] in ("array", "graph", "board", "size")


def test_pseudocode_lines_are_in_range():
    cases = {
        "linear_search": ([5, 3, 8, 1, 9], {"target": 9}),
        "bfs": (samples.weighted_demo(), {"source": "A", "target": "F"}),
        "tarjan": (samples.two_triangles(), {}),
        "chinese_postman": (samples.postman_demo(), {}),
        "islands": (samples.islands_demo(), {}),
        "n_queens": (None, {"n": 4}),
    }
    for key, (structure, params) in cases.items():
        lines = len(get_algorithm(key).pseudocode)
        for step in generate_trace(key, structure, **params):
            assert 0 <= step.pseudocode_line < lines, (key, step.kind)


def test_lookup_helpers():
    assert get_algorithm("nope") is None
    assert {a.key for a in algorithms_by_tag("grid")} == {
        "shortest_path_grid", "maze", "min_knight_moves", "islands",
    }


def test_validate_params_returns_generator_kwargs(weighted_graph):
    kwargs = validate_params("bfs", weighted_graph, source="A")
    assert kwargs == {"graph": weighted_graph, "source": "A", "target": None}
    assert validate_params("knights_tour", n="6") == {"n": 6, "start": (0, 0)}


@pytest.mark.parametrize(
    "key, structure, params",
    [
        ("nope", None, {}),
        ("bfs", None, {"source": "A"}),
        ("bfs", "weighted", {}),
        ("bfs", "weighted", {"source": "Z"}),
        ("bfs", "weighted", {"source": "A", "colour": "red"}),
        ("dijkstra", "grid", {"source": "A"}),
        ("max_flow", "diamond", {"source": "s", "sink": "s"}),
        ("linear_search", "not a list", {"target": 1}),
        ("linear_search", [1, 2], {}),
        ("astar", "weighted", {"source": "A", "target": "F", "heuristic": "chebyshev"}),
        ("knights_tour", None, {"n": 4}),
        ("chinese_postman", "diamond", {}),
    ],
)
def test_invalid_input_is_rejected_before_generation(key, structure, params):
    if isinstance(structure, str) and structure in samples.SAMPLES:
        structure = samples.SAMPLES[structure]()
    with pytest.raises(InvalidInputError):
        generate_trace(key, structure, **params)


def test_empty_graph_is_rejected():
    with pytest.raises(InvalidInputError):
        generate_trace("bfs", Graph(), source="A")


def test_trace_limit(weighted_graph):
    with pytest.raises(TraceLimitError):
        generate_trace("dijkstra", weighted_graph, max_steps=3, source="A")


def test_error_taxonomy():
    assert issubclass(InvalidInputError, ValueError)
    assert issubclass(InvalidInputError, AlgotraceError)
    assert issubclass(TraceLimitError, AlgotraceError)
