"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every algorithm algotrace knows about.

    from algotrace.algorithms import REGISTRY, generate_trace

REGISTRY is a dict:
    {
        "bfs": AlgoInfo(key, label, fn, pseudocode, input_kind, validate, …),
        …
    }

AlgoInfo is a lightweight dataclass.  The engine and the HTTP layer both
consume it, so adding a new algorithm is: write the generator, write its
validator, add one entry here.

`generate_trace` is the only way a trace is built: validate the input at
the boundary, run the generator once to completion, freeze the result
into a tuple.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from algotrace.config import DefaultConfig
from algotrace.errors import InvalidInputError, TraceLimitError
from algotrace.algorithms.step import Trace
from algotrace.algorithms import validation as v

# ---------------------------------------------------------------------------
# Import all algorithm modules
# ---------------------------------------------------------------------------
from algotrace.algorithms.search          import linear_search, binary_search, is_sorted, LINEAR_PSEUDOCODE, BINARY_PSEUDOCODE
from algotrace.algorithms.bubble_sort     import bubble_sort,          PSEUDOCODE as _bubble_pc
from algotrace.algorithms.bfs             import bfs,                  PSEUDOCODE as _bfs_pc
from algotrace.algorithms.dfs             import dfs,                  PSEUDOCODE as _dfs_pc
from algotrace.algorithms.dijkstra        import dijkstra,             PSEUDOCODE as _dij_pc
from algotrace.algorithms.astar           import astar, HEURISTICS,    PSEUDOCODE as _ast_pc
from algotrace.algorithms.bridges         import tarjan, MODES as _TARJAN_MODES, PSEUDOCODE as _tarjan_pc
from algotrace.algorithms.max_flow        import edmonds_karp,         PSEUDOCODE as _ek_pc
from algotrace.algorithms.eulerian        import eulerian, MODES as _EULER_MODES, PSEUDOCODE as _euler_pc
from algotrace.algorithms.floyd_warshall  import floyd_warshall_trace, PSEUDOCODE as _fw_pc
from algotrace.algorithms.chinese_postman import chinese_postman,      PSEUDOCODE as _cpp_pc
from algotrace.algorithms.n_queens        import n_queens,             PSEUDOCODE as _nq_pc
from algotrace.algorithms.n_queens        import MIN_SIZE as _NQ_MIN, MAX_SIZE as _NQ_MAX
from algotrace.algorithms.knights_tour    import knights_tour,         PSEUDOCODE as _kt_pc
from algotrace.algorithms.knights_tour    import MIN_SIZE as _KT_MIN, MAX_SIZE as _KT_MAX, DEFAULT_SIZE as _KT_DEFAULT
from algotrace.algorithms.grid_search     import shortest_path_grid, maze, min_knight_moves
from algotrace.algorithms.grid_search     import GRID_PSEUDOCODE, MAZE_PSEUDOCODE, KNIGHT_PSEUDOCODE
from algotrace.algorithms.islands         import num_islands,          PSEUDOCODE as _isl_pc


logger = logging.getLogger(__name__)

Params    = Dict[str, Any]
Validator = Callable[[Any, Params], Params]


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              str                    # registry key, e.g. "bfs"
    label:            str                    # human label, e.g. "Breadth-First Search"
    fn:               Callable               # the generator function
    pseudocode:       List[str]              # lines for the side-panel
    input_kind:       str                    # "array" | "graph" | "board" | "size"
    validate:         Validator              # (structure, params) → cleaned params
    params:           List[str] = field(default_factory=list)    # accepted parameter names
    tags:             List[str] = field(default_factory=list)    # e.g. ["unweighted", "shortest-path"]
    complexity_time:  str       = ""         # e.g. "O(V + E)"
    complexity_space: str       = ""         # e.g. "O(V)"
    description:      str       = ""         # one-liner for the UI card

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "input": self.input_kind,
            "params": list(self.params),
            "tags": list(self.tags),
            "pseudocode": list(self.pseudocode),
            "complexity_time": self.complexity_time,
            "complexity_space": self.complexity_space,
            "description": self.description,
        }


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------
def _search_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, ["target"])
    values = v.number_list(structure)
    if "target" not in params:
        raise InvalidInputError("Missing search target")
    return {"values": values, "target": v.as_number(params["target"], "target")}


def _binary_params(structure: Any, params: Params) -> Params:
    cleaned = _search_params(structure, params)
    if not is_sorted(cleaned["values"]):
        raise InvalidInputError("Binary search needs the array sorted in ascending order")
    return cleaned


def _sort_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, [])
    return {"values": v.number_list(structure)}


def _traversal_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, ["source", "target"])
    g = v.require_graph(structure)
    return {
        "graph": g,
        "source": v.node_param(g, params, "source"),
        "target": v.node_param(g, params, "target", required=False),
    }


def _dijkstra_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, ["source", "target"])
    g = v.require_graph(structure, non_negative=True)
    return {
        "graph": g,
        "source": v.node_param(g, params, "source"),
        "target": v.node_param(g, params, "target", required=False),
    }


def _astar_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, ["source", "target", "heuristic"])
    g = v.require_graph(structure, non_negative=True)
    return {
        "graph": g,
        "source": v.node_param(g, params, "source"),
        "target": v.node_param(g, params, "target"),
        "heuristic": v.choice(params.get("heuristic", "zero"), "heuristic", list(HEURISTICS)),
    }


def _tarjan_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, ["mode"])
    g = v.require_graph(structure, undirected=True)
    return {"graph": g, "mode": v.choice(params.get("mode", "both"), "mode", _TARJAN_MODES)}


def _flow_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, ["source", "sink"])
    g = v.require_graph(structure, non_negative=True)
    source = v.node_param(g, params, "source")
    sink = v.node_param(g, params, "sink")
    if source == sink:
        raise InvalidInputError("Source and sink must be different nodes")
    return {"graph": g, "source": source, "sink": sink}


def _euler_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, ["mode", "start"])
    g = v.require_graph(structure, undirected=True)
    if g.edge_count() == 0:
        raise InvalidInputError("The graph has no edges to walk")
    return {
        "graph": g,
        "mode": v.choice(params.get("mode", "circuit"), "mode", _EULER_MODES),
        "start": v.node_param(g, params, "start", required=False),
    }


def _all_pairs_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, ["source", "target"])
    g = v.require_graph(structure)
    return {
        "graph": g,
        "source": v.node_param(g, params, "source", required=False),
        "target": v.node_param(g, params, "target", required=False),
    }


def _postman_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, [])
    g = v.require_graph(structure, undirected=True, non_negative=True)
    if g.edge_count() == 0:
        raise InvalidInputError("The graph has no edges to walk")
    return {"graph": g}


def _queens_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, ["n"])
    return {"n": v.as_int_in_range(params.get("n", 8), "board size", _NQ_MIN, _NQ_MAX)}


def _tour_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, ["n", "start"])
    n = v.as_int_in_range(params.get("n", _KT_DEFAULT), "board size", _KT_MIN, _KT_MAX)
    return {"n": n, "start": v.position(params.get("start", (0, 0)), "start", n)}


def _board_endpoints_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, [])
    return {"board": v.require_board(structure, endpoints=True)}


def _board_params(structure: Any, params: Params) -> Params:
    v.unexpected(params, [])
    return {"board": v.require_board(structure)}


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "linear_search": AlgoInfo(
        key="linear_search", label="Linear Search", fn=linear_search, pseudocode=LINEAR_PSEUDOCODE,
        input_kind="array", validate=_search_params, params=["target"],
        tags=["search", "array"],
        complexity_time="O(n)", complexity_space="O(1)",
        description="Checks every element in turn until the target shows up.",
    ),

    "binary_search": AlgoInfo(
        key="binary_search", label="Binary Search", fn=binary_search, pseudocode=BINARY_PSEUDOCODE,
        input_kind="array", validate=_binary_params, params=["target"],
        tags=["search", "array", "divide-and-conquer"],
        complexity_time="O(log n)", complexity_space="O(1)",
        description="Halves a sorted array's search bracket at every probe.",
    ),

    "bubble_sort": AlgoInfo(
        key="bubble_sort", label="Bubble Sort", fn=bubble_sort, pseudocode=_bubble_pc,
        input_kind="array", validate=_sort_params,
        tags=["sorting", "array", "stable"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Swaps out-of-order neighbours until a pass makes no swap.",
    ),

    "bfs": AlgoInfo(
        key="bfs", label="Breadth-First Search", fn=bfs, pseudocode=_bfs_pc,
        input_kind="graph", validate=_traversal_params, params=["source", "target"],
        tags=["unweighted", "shortest-path", "traversal"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Explores layer-by-layer. Finds shortest path by hop count.",
    ),

    "dfs": AlgoInfo(
        key="dfs", label="Depth-First Search", fn=dfs, pseudocode=_dfs_pc,
        input_kind="graph", validate=_traversal_params, params=["source", "target"],
        tags=["unweighted", "traversal"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Dives deep before backtracking. Does NOT guarantee shortest path.",
    ),

    "dijkstra": AlgoInfo(
        key="dijkstra", label="Dijkstra's Algorithm", fn=dijkstra, pseudocode=_dij_pc,
        input_kind="graph", validate=_dijkstra_params, params=["source", "target"],
        tags=["weighted", "shortest-path"],
        complexity_time="O(V²)", complexity_space="O(V)",
        description="Greedily finalises the closest open node. Optimal for non-negative weights.",
    ),

    "astar": AlgoInfo(
        key="astar", label="A* Search", fn=astar, pseudocode=_ast_pc,
        input_kind="graph", validate=_astar_params, params=["source", "target", "heuristic"],
        tags=["weighted", "shortest-path", "heuristic"],
        complexity_time="O(V²)", complexity_space="O(V)",
        description="Uniform-cost search by default; pick a heuristic to guide it toward the target.",
    ),

    "tarjan": AlgoInfo(
        key="tarjan", label="Bridges & Articulation Points", fn=tarjan, pseudocode=_tarjan_pc,
        input_kind="graph", validate=_tarjan_params, params=["mode"],
        tags=["connectivity", "dfs"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Tarjan's low-link DFS finds the edges and vertices whose removal disconnects the graph.",
    ),

    "max_flow": AlgoInfo(
        key="max_flow", label="Max Flow (Edmonds–Karp)", fn=edmonds_karp, pseudocode=_ek_pc,
        input_kind="graph", validate=_flow_params, params=["source", "sink"],
        tags=["flow", "bfs"],
        complexity_time="O(V · E²)", complexity_space="O(V + E)",
        description="Pushes flow along shortest augmenting paths until none is left.",
    ),

    "eulerian": AlgoInfo(
        key="eulerian", label="Eulerian Path / Circuit", fn=eulerian, pseudocode=_euler_pc,
        input_kind="graph", validate=_euler_params, params=["mode", "start"],
        tags=["euler", "hierholzer"],
        complexity_time="O(E)", complexity_space="O(E)",
        description="Hierholzer's algorithm walks every edge exactly once.",
    ),

    "floyd_warshall": AlgoInfo(
        key="floyd_warshall", label="Floyd–Warshall", fn=floyd_warshall_trace, pseudocode=_fw_pc,
        input_kind="graph", validate=_all_pairs_params, params=["source", "target"],
        tags=["weighted", "all-pairs", "negative-edges"],
        complexity_time="O(V³)", complexity_space="O(V²)",
        description="All-pairs shortest paths via dynamic programming. Watch the matrix evolve!",
    ),

    "chinese_postman": AlgoInfo(
        key="chinese_postman", label="Chinese Postman", fn=chinese_postman, pseudocode=_cpp_pc,
        input_kind="graph", validate=_postman_params,
        tags=["euler", "matching", "heuristic"],
        complexity_time="O(V³ + E)", complexity_space="O(V²)",
        description="Repeat edges between odd vertices (greedy pairing), then walk an Euler circuit.",
    ),

    "n_queens": AlgoInfo(
        key="n_queens", label="N-Queens", fn=n_queens, pseudocode=_nq_pc,
        input_kind="size", validate=_queens_params, params=["n"],
        tags=["backtracking"],
        complexity_time="O(n!)", complexity_space="O(n)",
        description="Places queens column by column and backtracks out of dead ends.",
    ),

    "knights_tour": AlgoInfo(
        key="knights_tour", label="Knight's Tour (Warnsdorff)", fn=knights_tour, pseudocode=_kt_pc,
        input_kind="size", validate=_tour_params, params=["n", "start"],
        tags=["heuristic", "greedy"],
        complexity_time="O(n²)", complexity_space="O(n²)",
        description="Always jump to the square with the fewest onward moves. No backtracking.",
    ),

    "shortest_path_grid": AlgoInfo(
        key="shortest_path_grid", label="Shortest Path in a Grid", fn=shortest_path_grid,
        pseudocode=GRID_PSEUDOCODE, input_kind="board", validate=_board_endpoints_params,
        tags=["grid", "bfs", "shortest-path"],
        complexity_time="O(R · C)", complexity_space="O(R · C)",
        description="4-directional BFS from S to E around obstacles.",
    ),

    "maze": AlgoInfo(
        key="maze", label="Maze Solver", fn=maze, pseudocode=MAZE_PSEUDOCODE,
        input_kind="board", validate=_board_endpoints_params,
        tags=["grid", "bfs"],
        complexity_time="O(R · C)", complexity_space="O(R · C)",
        description="BFS through open corridors; every discovered cell shows its route back.",
    ),

    "min_knight_moves": AlgoInfo(
        key="min_knight_moves", label="Minimum Knight Moves", fn=min_knight_moves, pseudocode=KNIGHT_PSEUDOCODE,
        input_kind="board", validate=_board_endpoints_params,
        tags=["grid", "bfs"],
        complexity_time="O(R · C)", complexity_space="O(R · C)",
        description="BFS where each move is a knight's jump.",
    ),

    "islands": AlgoInfo(
        key="islands", label="Number of Islands", fn=num_islands, pseudocode=_isl_pc,
        input_kind="board", validate=_board_params,
        tags=["grid", "flood-fill", "dfs"],
        complexity_time="O(R · C)", complexity_space="O(R · C)",
        description="Flood-fills each unvisited patch of land and counts them.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_tag(tag: str) -> List[AlgoInfo]:
    """Filter registry by tag."""
    return [a for a in REGISTRY.values() if tag in a.tags]


# ---------------------------------------------------------------------------
# Trace generation
# ---------------------------------------------------------------------------
def validate_params(key: str, structure: Any = None, **params) -> Params:
    """Check input for algorithm `key`; returns the generator's keyword arguments."""
    info = get_algorithm(key)
    if info is None:
        raise InvalidInputError(f"Unknown algorithm {key!r}")
    return info.validate(structure, params)


def generate_trace(
    key: str,
    structure: Any = None,
    max_steps: Optional[int] = None,
    **params,
) -> Trace:
    """
    Validate, then run the generator for `key` to completion.

    Raises:
        InvalidInputError : bad input; no generator was started.
        PreconditionError : structural contract broken (from the generator).
        TraceLimitError   : more than `max_steps` steps were produced.
    """
    kwargs = validate_params(key, structure, **params)
    limit  = max_steps if max_steps is not None else DefaultConfig.MAX_TRACE_STEPS

    steps = []
    for step in REGISTRY[key].fn(**kwargs):
        steps.append(step)
        if len(steps) > limit:
            raise TraceLimitError(f"{key} produced more than {limit} steps")

    logger.debug("%s: %d step(s) generated", key, len(steps))
    return tuple(steps)


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "algorithms_by_tag",
    "validate_params",
    "generate_trace",
]
