import json

import pytest

from algotrace.algorithms import generate_trace
from algotrace.algorithms.step import freeze
from algotrace.engine import Recorder, step_to_dict, to_jsonable, trace_to_list
from algotrace.engine.player import PlayerState
from algotrace.errors import InvalidInputError, PreconditionError, TraceLimitError
from algotrace.graph.samples import SAMPLES


# ---------------------------------------------------------------------------
# to_jsonable / step_to_dict
# ---------------------------------------------------------------------------
def test_to_jsonable_scalars():
    assert to_jsonable(float("inf")) is None
    assert to_jsonable(float("-inf")) is None
    assert to_jsonable(float("nan")) is None
    assert to_jsonable(2.5) == 2.5
    assert to_jsonable(True) is True
    assert to_jsonable(PlayerState.PLAYING) == "playing"
    assert to_jsonable((1, (2, 3))) == [1, [2, 3]]
    assert to_jsonable({1: "a"}) == {"1": "a"}


def test_frozen_dicts_become_json_objects():
    frozen = freeze({"deg": {"a": 1}, "rows": [{"k": 2}]})
    assert frozen == (("deg", (("a", 1),)), ("rows", ((("k", 2),),)))
    assert to_jsonable(frozen) == {"deg": {"a": 1}, "rows": [{"k": 2}]}


def test_dict_valued_extra_serialises_as_object():
    init = generate_trace("eulerian", SAMPLES["euler_circuit"](), mode="circuit")[0]
    extras = step_to_dict(init)["payload"]["extras"]
    assert extras["degrees"] == {"0": 4, "1": 2, "2": 2, "3": 2, "4": 2}
    assert extras["mode"] == "circuit"
    json.dumps(extras)


def test_graph_step_dict(weighted_graph):
    init = generate_trace("dijkstra", weighted_graph, source="A")[0]
    data = step_to_dict(init)

    assert data["step_number"] == 0
    assert data["kind"] == "init"
    assert data["is_final"] is False
    assert data["pseudocode_line"] == init.pseudocode_line

    payload = data["payload"]
    assert payload["type"] == "graph"
    by_id = {n["id"]: n for n in payload["nodes"]}
    assert by_id["A"]["distance"] == 0.0
    assert by_id["F"]["distance"] is None          # ∞ becomes null
    assert by_id["A"]["state"] == "frontier"
    assert by_id["F"]["state"] == "default"
    assert payload["extras"] == {"open": ["A"]}
    assert isinstance(payload["edges"], list)


def test_board_and_array_payload_tags():
    board_step = generate_trace("islands", SAMPLES["islands"]())[0]
    array_step = generate_trace("bubble_sort", [3, 1, 2])[0]

    board = step_to_dict(board_step)["payload"]
    assert board["type"] == "board"
    assert board["cells"][0][0]["type"] == "land"
    assert step_to_dict(array_step)["payload"]["type"] == "array"
    assert step_to_dict(array_step)["payload"]["values"] == [3, 1, 2]


def test_whole_trace_is_json_encodable():
    for key, structure, params in [
        ("dijkstra", SAMPLES["weighted"](), {"source": "A", "target": "F"}),
        ("floyd_warshall", SAMPLES["weighted"](), {}),
        ("max_flow", SAMPLES["diamond"](), {"source": "s", "sink": "t"}),
        ("maze", SAMPLES["maze"](), {}),
        ("n_queens", None, {"n": 4}),
    ]:
        steps = trace_to_list(generate_trace(key, structure, **params))
        text = json.dumps(steps, allow_nan=False)
        assert json.loads(text) == steps


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
def test_recorder_metrics(weighted_graph):
    rec = Recorder()
    metrics = rec.run("bfs", weighted_graph, source="A", target="F")

    assert metrics is rec.metrics
    assert metrics.algo_key == "bfs"
    assert metrics.algo_label == "Breadth-First Search"
    assert metrics.total_steps == len(rec.trace)
    assert metrics.outcome == "path"
    assert metrics.path_length == 3
    assert sum(metrics.kinds.values()) == metrics.total_steps
    assert metrics.wall_time_ms >= 0
    assert rec.params == {"source": "A", "target": "F"}


def test_recorder_without_path_reports_zero_length():
    rec = Recorder()
    metrics = rec.run("bubble_sort", [4, 2, 3])
    assert metrics.path_length == 0
    assert metrics.kinds["init"] == 1


def test_recorder_export(weighted_graph):
    rec = Recorder()
    rec.run("dijkstra", weighted_graph, source="A", target="F")
    data = rec.export()

    assert data["algo_key"] == "dijkstra"
    assert data["params"] == {"source": "A", "target": "F"}
    assert data["structure"]["directed"] is False
    assert len(data["structure"]["nodes"]) == 6
    assert data["metrics"]["total_steps"] == len(data["steps"])
    assert data["steps"][-1]["is_final"] is True
    json.dumps(data, allow_nan=False)


def test_recorder_unknown_key():
    with pytest.raises(InvalidInputError):
        Recorder().run("quicksort", [1, 2])


def test_recorder_discards_previous_run_on_failure(weighted_graph):
    rec = Recorder()
    rec.run("bfs", weighted_graph, source="A")
    with pytest.raises(PreconditionError):
        rec.run("eulerian", SAMPLES["euler_path"](), mode="circuit")
    assert rec.trace == ()
    assert rec.metrics is None
    data = rec.export()
    assert data["algo_key"] == ""
    assert data["steps"] == []
    assert data["metrics"] == {}


def test_recorder_step_limit(weighted_graph):
    with pytest.raises(TraceLimitError):
        Recorder(max_steps=3).run("bfs", weighted_graph, source="A")
