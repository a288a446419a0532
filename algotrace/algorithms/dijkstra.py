"""
dijkstra.py — Dijkstra's Shortest-Path Algorithm
==================================================
Generator-based Dijkstra over a plain *open list* that is re-sorted on
every extraction (O(V²) overall).  The sort is stable, so ties go to the
node that entered the open list first.

Yields a Step at:
  1. Initialise distances, source in the open list
  2. Extract minimum-distance node           →  "visit"   (ACTIVE)
  3. Every outgoing edge examined            →  "relax"   (edge RELAXED)
  4. Successful relaxation                   →  "update"  (dist / prev change)
  5. Node done                               →  "finalize" (FINALIZED)
  6. Open list exhausted                     →  "path" to the target, or
                                                "not_found" / "done"

Every step carries the full distance table on the nodes (NodeView.distance).

Correctness note: Dijkstra requires non-negative weights.  The registry
rejects graphs with negative edges before this generator ever runs.
"""

from typing import Dict, Generator, List, Optional, Set

from algotrace.graph import Graph, NodeState, EdgeState
from algotrace.algorithms.step import Step, GraphStepBuilder
from algotrace.algorithms.paths import reconstruct, path_edge_ids, fmt_dist


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Dijkstra(graph, source, target):",        # 0
    "    dist ← {v: ∞ for v in V}",                # 1
    "    dist[source] ← 0",                        # 2
    "    open ← [source]",                         # 3
    "    while open is not empty:",                # 4
    "        sort open by dist",                   # 5
    "        u ← open.pop_front()",                # 6
    "        for (v, w) in adj(u):",               # 7
    "            if dist[u] + w < dist[v]:",       # 8
    "                dist[v] ← dist[u] + w",       # 9
    "                prev[v] ← u",                 # 10
    "                open.add(v)",                 # 11
    "        u is finalised",                      # 12
    "    return path(prev, target)",               # 13
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dijkstra(
    graph: Graph,
    source: str,
    target: Optional[str] = None,
) -> Generator[Step, None, None]:

    INF   = float("inf")
    graph = graph.copy()
    sb    = GraphStepBuilder(graph)

    dist:  Dict[str, float]          = {nid: INF for nid in graph.nodes}
    prev:  Dict[str, Optional[str]]  = {source: None}
    via:   Dict[str, str]            = {}
    done:  Set[str]                  = set()
    open_list: List[str]             = [source]
    dist[source] = 0.0

    sb.distances = dist         # live view; emit() copies it
    sb.set_frontier(open_list)
    sb.extras["open"] = list(open_list)
    yield sb.emit(
        "init",
        f"Initialise: every distance = ∞ except source '{source}' = 0. "
        f"The open list holds just the source.",
        line=2,
    )

    while open_list:
        open_list.sort(key=lambda n: dist[n])
        u = open_list.pop(0)
        done.add(u)

        sb.set_frontier(open_list)
        sb.set_current(u)
        sb.extras["open"] = list(open_list)
        yield sb.emit(
            "visit",
            f"Extract '{u}' with distance {fmt_dist(dist[u])}: the smallest in the open list, "
            f"so this distance is now final.",
            line=6,
        )

        for v, edge in graph.neighbours(u):
            candidate = dist[u] + edge.weight
            sb.relax_edge(edge.id)
            if v in done:
                yield sb.emit(
                    "relax",
                    f"Edge {u}→{v} (w={edge.weight:g}): '{v}' is already final, nothing to do.",
                    line=7,
                )
                sb.clear_relaxed(EdgeState.IGNORED if edge.id not in via.values() else EdgeState.TREE)
                continue

            yield sb.emit(
                "relax",
                f"Relax {u}→{v}: {fmt_dist(dist[u])} + {edge.weight:g} = {fmt_dist(candidate)} "
                f"vs current {fmt_dist(dist[v])}.",
                line=8,
            )

            if candidate < dist[v]:
                if v in via:
                    sb.set_edge(via[v], EdgeState.DEFAULT)
                dist[v] = candidate
                prev[v] = u
                via[v]  = edge.id
                if v not in open_list:
                    open_list.append(v)
                sb.clear_relaxed(EdgeState.TREE)
                sb.set_frontier(open_list)
                sb.extras["open"] = list(open_list)
                yield sb.emit(
                    "update",
                    f"Improvement! dist['{v}'] ← {fmt_dist(candidate)}, prev['{v}'] ← '{u}'.",
                    line=10,
                )
            else:
                sb.clear_relaxed(EdgeState.IGNORED)

        sb.current_node = None
        sb.visit(u, NodeState.FINALIZED)
        yield sb.emit("finalize", f"All edges out of '{u}' examined; '{u}' is finalised.", line=12)

    sb.frontier = []
    sb.extras["open"] = []

    if target is None:
        reached = sum(1 for d in dist.values() if d < INF)
        yield sb.emit(
            "done",
            f"Open list empty: shortest distances from '{source}' are known for {reached} node(s).",
            line=13,
            is_final=True,
        )
    elif dist[target] < INF:
        path = reconstruct(prev, target)
        sb.set_path(path, path_edge_ids(graph, path, via))
        sb.extras["path_cost"] = dist[target]
        yield sb.emit(
            "path",
            f"Shortest path to '{target}' costs {fmt_dist(dist[target])}: {' → '.join(path)}",
            line=13,
            is_final=True,
        )
    else:
        yield sb.emit(
            "not_found",
            f"Open list empty and dist['{target}'] is still ∞: '{target}' is not reachable from '{source}'.",
            line=13,
            is_final=True,
        )
