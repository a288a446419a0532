"""
validation.py — Boundary checks
================================
Every registered algorithm has a validator `(structure, params) -> params`
that runs BEFORE its generator.  A validator either returns the cleaned
keyword arguments for the generator or raises InvalidInputError with a
message fit to show the user.  Generators can then assume their input is
well-formed.
"""

from typing import Any, Dict, List, Optional, Sequence

from algotrace.errors import InvalidInputError
from algotrace.graph import Graph, Board, CellType


Params = Dict[str, Any]


# ---------------------------------------------------------------------------
# Primitive checks
# ---------------------------------------------------------------------------
def as_number(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be a number")
    if isinstance(value, (int, float)):
        return value
    try:
        text = str(value).strip()
        return int(text) if text.lstrip("-").isdigit() else float(text)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from None


def as_int_in_range(value: Any, name: str, low: int, high: int) -> int:
    number = as_number(value, name)
    if number != int(number):
        raise InvalidInputError(f"{name} must be a whole number")
    number = int(number)
    if not low <= number <= high:
        raise InvalidInputError(f"{name} must be between {low} and {high}, got {number}")
    return number


def number_list(values: Any, name: str = "array") -> List[float]:
    if not isinstance(values, (list, tuple)):
        raise InvalidInputError(f"{name} must be a list of numbers")
    return [as_number(v, f"{name}[{i}]") for i, v in enumerate(values)]


def choice(value: Any, name: str, options: Sequence[str]) -> str:
    if value not in options:
        raise InvalidInputError(f"{name} must be one of {', '.join(options)}; got {value!r}")
    return value


def unexpected(params: Params, allowed: Sequence[str]) -> None:
    extra = sorted(set(params) - set(allowed))
    if extra:
        raise InvalidInputError(f"Unknown parameter(s): {', '.join(extra)}")


# ---------------------------------------------------------------------------
# Structure checks
# ---------------------------------------------------------------------------
def require_graph(structure: Any, undirected: bool = False, non_negative: bool = False) -> Graph:
    if not isinstance(structure, Graph):
        raise InvalidInputError("This algorithm needs a graph")
    if structure.node_count() == 0:
        raise InvalidInputError("The graph has no nodes")
    if undirected and structure.directed:
        raise InvalidInputError("This algorithm needs an undirected graph")
    if non_negative and structure.has_negative_edges():
        raise InvalidInputError("Negative edge weights are not allowed for this algorithm")
    return structure


def node_param(graph: Graph, params: Params, name: str, required: bool = True) -> Optional[str]:
    value = params.get(name)
    if value is None or value == "":
        if required:
            raise InvalidInputError(f"Missing {name} node")
        return None
    node_id = str(value)
    if not graph.has_node(node_id):
        raise InvalidInputError(f"Unknown {name} node {node_id!r}")
    return node_id


def require_board(structure: Any, endpoints: bool = False) -> Board:
    if not isinstance(structure, Board):
        raise InvalidInputError("This algorithm needs a board")
    if endpoints:
        if structure.find(CellType.START) is None:
            raise InvalidInputError("The board has no start cell (S)")
        if structure.find(CellType.END) is None:
            raise InvalidInputError("The board has no end cell (E)")
    return structure


def position(value: Any, name: str, n: int) -> tuple:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise InvalidInputError(f"{name} must be a [row, col] pair")
    return (as_int_in_range(value[0], f"{name} row", 0, n - 1), as_int_in_range(value[1], f"{name} col", 0, n - 1))
