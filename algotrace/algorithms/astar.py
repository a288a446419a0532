"""
astar.py — A* Search
=====================
Same open-list machinery as Dijkstra, but the list is ordered by
f = g + h and the search stops as soon as the target is extracted.

Ships three built-in heuristics over node coordinates:
  • zero      – h = 0, i.e. uniform-cost search (the default)
  • euclidean – straight-line distance
  • manhattan – |dx| + |dy|

Only `zero` is guaranteed admissible on an arbitrary graph; the other two
are admissible when edge weights are at least the geometric distance
between their endpoints.
"""

from typing import Callable, Dict, Generator, List, Optional, Set

from algotrace.graph import Graph, Node, NodeState, EdgeState
from algotrace.algorithms.step import Step, GraphStepBuilder
from algotrace.algorithms.paths import reconstruct, path_edge_ids, fmt_dist


# ---------------------------------------------------------------------------
# Built-in heuristics  (all take two Node objects, return float)
# ---------------------------------------------------------------------------
def manhattan(a: Node, b: Node) -> float:
    return abs(a.x - b.x) + abs(a.y - b.y)

def euclidean(a: Node, b: Node) -> float:
    return a.distance_to(b)

def zero(a: Node, b: Node) -> float:
    """h=0 → A* degrades to uniform-cost search."""
    return 0.0

HEURISTICS: Dict[str, Callable[[Node, Node], float]] = {
    "zero":      zero,
    "euclidean": euclidean,
    "manhattan": manhattan,
}


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def AStar(graph, source, target, h):",        # 0
    "    g[source] ← 0",                           # 1
    "    f[source] ← h(source, target)",           # 2
    "    open ← [source]",                         # 3
    "    while open is not empty:",                # 4
    "        u ← open.pop_min_f()",                # 5
    "        if u == target: return path",         # 6
    "        closed.add(u)",                       # 7
    "        for (v, w) in adj(u):",               # 8
    "            tentative ← g[u] + w",            # 9
    "            if tentative < g[v]:",            # 10
    "                prev[v] ← u",                 # 11
    "                g[v] ← tentative",            # 12
    "                f[v] ← g[v] + h(v, target)",  # 13
    "                open.add(v)",                 # 14
    "    return NOT FOUND",                        # 15
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def astar(
    graph: Graph,
    source: str,
    target: str,
    heuristic: str = "zero",
) -> Generator[Step, None, None]:
    """
    Args:
        graph     : The graph.
        source    : Start node id.
        target    : Goal node id.
        heuristic : Key into HEURISTICS ("zero" by default).
    """
    INF    = float("inf")
    graph  = graph.copy()
    h_fn   = HEURISTICS[heuristic]
    goal   = graph.get_node(target)
    sb     = GraphStepBuilder(graph)

    g_score: Dict[str, float]         = {nid: INF for nid in graph.nodes}
    h_score: Dict[str, float]         = {nid: h_fn(n, goal) for nid, n in graph.nodes.items()}
    f_score: Dict[str, float]         = {nid: INF for nid in graph.nodes}
    prev:    Dict[str, Optional[str]] = {source: None}
    via:     Dict[str, str]           = {}
    closed:  Set[str]                 = set()
    open_list: List[str]              = [source]

    g_score[source] = 0.0
    f_score[source] = h_score[source]

    sb.distances = g_score      # live view; emit() copies it
    sb.extras["heuristic"] = heuristic
    sb.extras["f"] = _finite(f_score)
    sb.extras["open"] = list(open_list)
    sb.set_frontier(open_list)
    yield sb.emit(
        "init",
        f"A* init: g('{source}') = 0, h = {h_score[source]:.2f} (using {heuristic}), "
        f"f = {f_score[source]:.2f}. The open list holds the source.",
        line=2,
    )

    while open_list:
        open_list.sort(key=lambda n: f_score[n])
        u = open_list.pop(0)
        closed.add(u)

        sb.set_frontier(open_list)
        sb.set_current(u)
        sb.extras["open"] = list(open_list)
        yield sb.emit(
            "visit",
            f"Extract '{u}': g = {fmt_dist(g_score[u])}, h = {h_score[u]:.2f}, "
            f"f = {fmt_dist(f_score[u])} (lowest f in the open list).",
            line=5,
        )

        if u == target:
            path = reconstruct(prev, target)
            sb.current_node = None
            sb.set_path(path, path_edge_ids(graph, path, via))
            sb.extras["path_cost"] = g_score[target]
            yield sb.emit(
                "path",
                f"Target '{target}' extracted! Cost = {fmt_dist(g_score[target])}. "
                f"Path: {' → '.join(path)}",
                line=6,
                is_final=True,
            )
            return

        for v, edge in graph.neighbours(u):
            if v in closed:
                continue
            tentative = g_score[u] + edge.weight
            sb.relax_edge(edge.id)
            yield sb.emit(
                "relax",
                f"Relax {u}→{v}: tentative g = {fmt_dist(tentative)} vs current {fmt_dist(g_score[v])}.",
                line=10,
            )
            if tentative < g_score[v]:
                if v in via:
                    sb.set_edge(via[v], EdgeState.DEFAULT)
                prev[v]    = u
                via[v]     = edge.id
                g_score[v] = tentative
                f_score[v] = tentative + h_score[v]
                if v not in open_list:
                    open_list.append(v)
                sb.clear_relaxed(EdgeState.TREE)
                sb.set_frontier(open_list)
                sb.extras["open"] = list(open_list)
                sb.extras["f"] = _finite(f_score)
                yield sb.emit(
                    "update",
                    f"Improvement! g('{v}') = {fmt_dist(tentative)}, h = {h_score[v]:.2f}, "
                    f"f = {fmt_dist(f_score[v])}; prev['{v}'] ← '{u}'.",
                    line=13,
                )
            else:
                sb.clear_relaxed(EdgeState.IGNORED)

        sb.current_node = None
        sb.visit(u, NodeState.FINALIZED)
        yield sb.emit("finalize", f"'{u}' moved to the closed set.", line=7)

    sb.frontier = []
    sb.extras["open"] = []
    yield sb.emit(
        "not_found",
        f"Open list empty. '{target}' is not reachable from '{source}'.",
        line=15,
        is_final=True,
    )


def _finite(scores: Dict[str, float]) -> Dict[str, float]:
    return {k: v for k, v in scores.items() if v != float("inf")}
