import pytest

from algotrace.errors import InvalidInputError
from algotrace.graph import Graph
from algotrace.graph.node import Node


# ---------------------------------------------------------------------------
# Graph.from_dict
# ---------------------------------------------------------------------------
def test_auto_ids_skip_ids_used_later_in_the_payload():
    g = Graph.from_dict({
        "edges": [
            {"source": "a", "target": "b"},
            {"id": "e0", "source": "c", "target": "d"},
        ],
    })
    assert g.edge_count() == 2
    assert g.edges["e0"].source == "c"
    auto = next(e for e in g.edges.values() if e.source == "a")
    assert auto.id == "e1"
    assert [nbr for nbr, _ in g.neighbours("a")] == ["b"]


def test_numeric_edge_ids_are_strings():
    g = Graph.from_dict({"edges": [{"id": 7, "source": "a", "target": "b", "weight": "2.5"}]})
    assert g.edges["7"].weight == 2.5


def test_duplicate_edge_id_is_rejected():
    with pytest.raises(InvalidInputError, match="e0"):
        Graph.from_dict({
            "edges": [
                {"id": "e0", "source": "a", "target": "b"},
                {"id": "e0", "source": "b", "target": "c"},
            ],
        })


def test_create_edge_continues_after_explicit_ids():
    g = Graph()
    g.create_edge("a", "b", edge_id="e0")
    assert g.create_edge("b", "c").id == "e1"


# ---------------------------------------------------------------------------
# Node coordinates
# ---------------------------------------------------------------------------
def test_numeric_string_coordinates_are_converted():
    node = Node.from_dict({"id": "A", "x": "1", "y": "2.5"})
    assert (node.x, node.y) == (1.0, 2.5)


@pytest.mark.parametrize("bad", ["left", None, [1], True, "nan", "inf"])
def test_bad_coordinates_are_rejected(bad):
    with pytest.raises((TypeError, ValueError)):
        Node.from_dict({"id": "A", "x": bad, "y": 0})
