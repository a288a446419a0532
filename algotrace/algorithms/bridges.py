"""
bridges.py — Tarjan's Bridges & Articulation Points
=====================================================
One DFS per connected component computing discovery time `tin` and
low-link `low`:

    low[u] = min(tin[u], tin[w] for back-edges u–w, low[c] for tree children c)

  • tree edge u→v is a BRIDGE          iff  low[v] >  tin[u]
  • non-root u is an ARTICULATION      iff  some child v has low[v] >= tin[u]
  • the DFS root is an ARTICULATION    iff  it has more than one DFS child

The recursion is an explicit frame stack  [(node, parent_edge_id, neighbour_iter)]
so deep graphs never hit Python's recursion limit.  The parent is excluded
by *edge id*, not by node id: with parallel edges u=v the second copy is a
genuine back-edge and neither copy is a bridge.  Self-loops are ignored.

`mode` filters which detections produce steps and appear in the summary:
"both" (default), "bridges" or "articulation".
"""

from typing import Dict, Generator, Iterator, List, Optional, Set, Tuple

from algotrace.graph import Graph, Edge, NodeState, EdgeState
from algotrace.algorithms.step import Step, GraphStepBuilder


MODES = ("both", "bridges", "articulation")

PSEUDOCODE: List[str] = [
    "def Tarjan(graph):",                                      # 0
    "    for each unvisited root r: dfs(r, parent_edge=None)", # 1
    "def dfs(u, pe):",                                         # 2
    "    tin[u] ← low[u] ← timer++",                           # 3
    "    for (v, e) in adj(u):",                               # 4
    "        if e == pe or v == u: continue",                  # 5
    "        if v visited: low[u] ← min(low[u], tin[v])",      # 6
    "        else:",                                           # 7
    "            dfs(v, e)",                                   # 8
    "            low[u] ← min(low[u], low[v])",                # 9
    "            if low[v] > tin[u]: e is a BRIDGE",           # 10
    "            if low[v] >= tin[u] and u not root: u is AP", # 11
    "    if u is root and children > 1: u is AP",              # 12
]


Frame = Tuple[str, Optional[str], Iterator[Tuple[str, Edge]]]


def tarjan(graph: Graph, mode: str = "both") -> Generator[Step, None, None]:
    graph = graph.copy()
    sb    = GraphStepBuilder(graph)
    want_bridges = mode in ("both", "bridges")
    want_points  = mode in ("both", "articulation")

    tin: Dict[str, int] = sb.tin      # live views; emit() copies them
    low: Dict[str, int] = sb.low
    bridges: List[str]  = []
    points:  List[str]  = []
    point_set: Set[str] = set()
    timer = 0

    sb.extras["mode"] = mode
    yield sb.emit(
        "init",
        f"Run one DFS per component, tracking discovery time (tin) and low-link (low). Mode: {mode}.",
        line=1,
    )

    for root in graph.node_ids():
        if root in tin:
            continue

        tin[root] = low[root] = timer
        timer += 1
        sb.visit(root)
        sb.set_current(root)
        yield sb.emit("visit", f"New DFS root '{root}': tin = low = {tin[root]}.", line=3)

        root_children = 0
        stack: List[Frame] = [(root, None, iter(graph.neighbours(root)))]

        while stack:
            u, parent_edge, it = stack[-1]
            descended = False

            for v, edge in it:
                if edge.id == parent_edge or edge.is_self_loop:
                    continue
                if v in tin:
                    # only edges to ancestors can lower low[u]
                    if tin[v] < tin[u]:
                        sb.set_current(u)
                        sb.current_edge = edge.id
                        if tin[v] < low[u]:
                            low[u] = tin[v]
                        yield sb.emit(
                            "back_edge",
                            f"Back-edge {u}–{v}: '{v}' is an ancestor (tin {tin[v]}), low['{u}'] = {low[u]}.",
                            line=6,
                        )
                    continue

                tin[v] = low[v] = timer
                timer += 1
                if u == root:
                    root_children += 1
                sb.set_edge(edge.id, EdgeState.TREE)
                sb.current_edge = edge.id
                sb.visit(v)
                sb.set_current(v)
                stack.append((v, edge.id, iter(graph.neighbours(v))))
                descended = True
                yield sb.emit("visit", f"Tree edge {u}→{v}: visit '{v}', tin = low = {tin[v]}.", line=3)
                break

            if descended:
                continue

            stack.pop()
            sb.current_edge = None
            sb.set_node(u, NodeState.FINALIZED)
            sb.current_node = stack[-1][0] if stack else None
            yield sb.emit("finish", f"'{u}' finished with low = {low[u]}.", line=9)

            if not stack:
                break
            p = stack[-1][0]
            if low[u] < low[p]:
                low[p] = low[u]

            if low[u] > tin[p]:
                bridges.append(parent_edge)
                if want_bridges:
                    sb.set_edge(parent_edge, EdgeState.BRIDGE)
                    sb.extras["bridges"] = [_pair(graph, eid) for eid in bridges]
                    yield sb.emit(
                        "bridge",
                        f"low['{u}'] = {low[u]} > tin['{p}'] = {tin[p]}: edge {p}–{u} is a BRIDGE.",
                        line=10,
                    )

            if p != root and low[u] >= tin[p] and p not in point_set:
                point_set.add(p)
                points.append(p)
                if want_points:
                    sb.extras["articulation_points"] = list(points)
                    yield sb.emit(
                        "articulation",
                        f"low['{u}'] = {low[u]} >= tin['{p}'] = {tin[p]}: '{p}' is an ARTICULATION point.",
                        line=11,
                    )

        if root_children > 1:
            point_set.add(root)
            points.append(root)
            if want_points:
                sb.current_node = root
                sb.extras["articulation_points"] = list(points)
                yield sb.emit(
                    "articulation",
                    f"Root '{root}' has {root_children} DFS children: it is an ARTICULATION point.",
                    line=12,
                )

    sb.current_node = None
    parts = []
    if want_bridges:
        sb.extras["bridges"] = [_pair(graph, eid) for eid in bridges]
        sb.extras["bridge_ids"] = list(bridges)
        parts.append(f"{len(bridges)} bridge(s)")
    if want_points:
        sb.extras["articulation_points"] = list(points)
        parts.append(f"{len(points)} articulation point(s)")
    yield sb.emit("done", f"DFS complete: found {' and '.join(parts)}.", line=0, is_final=True)


def _pair(graph: Graph, edge_id: str) -> Tuple[str, str]:
    e = graph.edges[edge_id]
    return e.source, e.target
