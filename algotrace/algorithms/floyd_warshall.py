"""
floyd_warshall.py — Floyd–Warshall (All-Pairs Shortest Paths)
===============================================================
The signature "matrix algorithm".  Every step carries the full N×N
distance matrix in `extras["matrix"]` (rows/cols follow node insertion
order, listed in `extras["order"]`) so a renderer can draw it as a grid.

Structure:
  for k in nodes:          ← "intermediate" node
      for i in nodes:
          for j in nodes:
              if dist[i][k] + dist[k][j] < dist[i][j]:
                  dist[i][j] = dist[i][k] + dist[k][j]
                  next[i][j] = next[i][k]

Multi-edges: the initial matrix keeps the *lightest* edge between a pair.

The pure helpers (`init_matrices`, `relax_round`, `floyd_warshall`,
`extract_path`) are shared with the Chinese Postman generator.
"""

from typing import Generator, List, Optional, Tuple

from algotrace.graph import Graph, Edge, NodeState
from algotrace.algorithms.step import Step, GraphStepBuilder
from algotrace.algorithms.paths import fmt_dist


INF = float("inf")

Matrix  = List[List[float]]
NextHop = List[List[Optional[int]]]


PSEUDOCODE: List[str] = [
    "def FloydWarshall(graph):",                   # 0
    "    dist ← adjacency matrix",                 # 1
    "    next ← initialise next-hop matrix",       # 2
    "    for k in 0 … n-1:",                       # 3
    "        for i in 0 … n-1:",                   # 4
    "            for j in 0 … n-1:",               # 5
    "                if dist[i][k]+dist[k][j]",    # 6
    "                      < dist[i][j]:",         # 7
    "                    dist[i][j] = …",          # 8
    "                    next[i][j] = next[i][k]", # 9
    "    return dist, next",                       # 10
]


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------
def init_matrices(graph: Graph) -> Tuple[List[str], Matrix, NextHop]:
    nodes = graph.node_ids()
    n     = len(nodes)
    idx   = {nid: i for i, nid in enumerate(nodes)}
    dist: Matrix  = [[INF] * n for _ in range(n)]
    nxt:  NextHop = [[None] * n for _ in range(n)]

    for i in range(n):
        dist[i][i] = 0
        nxt[i][i]  = i

    for edge in graph.edges.values():
        u, v = idx[edge.source], idx[edge.target]
        if u == v:
            # a negative self-loop is already a negative cycle
            dist[u][u] = min(dist[u][u], edge.weight)
            continue
        if edge.weight < dist[u][v]:
            dist[u][v] = edge.weight
            nxt[u][v]  = v
        if not edge.directed and edge.weight < dist[v][u]:
            dist[v][u] = edge.weight
            nxt[v][u]  = u
    return nodes, dist, nxt


def relax_round(k: int, dist: Matrix, nxt: NextHop) -> List[Tuple[int, int, float]]:
    """Allow vertex k as an intermediate.  Returns [(i, j, old_dist)] for every update."""
    n = len(dist)
    updates = []
    for i in range(n):
        if dist[i][k] == INF:
            continue
        for j in range(n):
            if dist[k][j] == INF:
                continue
            candidate = dist[i][k] + dist[k][j]
            if candidate < dist[i][j]:
                updates.append((i, j, dist[i][j]))
                dist[i][j] = candidate
                nxt[i][j]  = nxt[i][k]
    return updates


def floyd_warshall(graph: Graph) -> Tuple[List[str], Matrix, NextHop]:
    """All-pairs shortest paths: (node order, dist matrix, next-hop matrix)."""
    nodes, dist, nxt = init_matrices(graph)
    for k in range(len(nodes)):
        relax_round(k, dist, nxt)
    return nodes, dist, nxt


def lightest_edge(graph: Graph, a: str, b: str) -> Edge:
    """The minimum-weight edge a→b (first one on ties); the edge a matrix entry came from."""
    return min((e for _, e in graph.neighbours(a) if e.other_end(a) == b), key=lambda e: e.weight)


def extract_path(nxt: NextHop, nodes: List[str], si: int, ti: int) -> List[str]:
    """Vertex path si → ti from the next-hop matrix ([] when unreachable)."""
    if nxt[si][ti] is None:
        return []
    path = [nodes[si]]
    cur  = si
    for _ in range(len(nodes)):
        if cur == ti:
            break
        cur = nxt[cur][ti]
        if cur is None:
            return []
        path.append(nodes[cur])
    return path


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def floyd_warshall_trace(
    graph: Graph,
    source: Optional[str] = None,
    target: Optional[str] = None,
) -> Generator[Step, None, None]:
    """
    source / target are only used at the END to extract the specific
    path the user cares about.  The algorithm itself computes ALL pairs.
    """
    graph = graph.copy()
    sb    = GraphStepBuilder(graph)
    nodes, dist, nxt = init_matrices(graph)
    n = len(nodes)

    sb.extras["order"]  = nodes
    sb.extras["matrix"] = dist
    yield sb.emit(
        "init",
        f"Initialise the {n}×{n} distance matrix: diagonal = 0, direct edges = lightest weight, rest = ∞.",
        line=1,
    )

    for k in range(n):
        for nid in nodes:
            if sb.node_states[nid] is NodeState.ACTIVE:
                sb.set_node(nid, NodeState.VISITED)
        sb.set_current(nodes[k])
        updates = relax_round(k, dist, nxt)
        sb.extras["k"] = nodes[k]
        sb.extras["updated"] = [(nodes[i], nodes[j]) for i, j, _ in updates]
        yield sb.emit(
            "phase",
            f"k = '{nodes[k]}': paths may now pass through '{nodes[k]}'; {len(updates)} matrix entries improved.",
            line=8 if updates else 3,
        )

    sb.current_node = None
    sb.extras.pop("updated", None)
    sb.extras.pop("k", None)
    negative = [nodes[i] for i in range(n) if dist[i][i] < 0]
    if negative:
        sb.extras["negative_cycle"] = negative
        yield sb.emit(
            "done",
            f"Negative cycle detected through {', '.join(negative)}: shortest paths are undefined there.",
            line=10,
            is_final=True,
        )
        return

    if source is None or target is None:
        yield sb.emit("done", "All-pairs shortest distances computed.", line=10, is_final=True)
        return

    si, ti = nodes.index(source), nodes.index(target)
    if dist[si][ti] == INF:
        yield sb.emit(
            "not_found",
            f"All pairs computed. '{target}' is not reachable from '{source}'.",
            line=10,
            is_final=True,
        )
        return

    path = extract_path(nxt, nodes, si, ti)
    sb.set_path(path, [lightest_edge(graph, a, b).id for a, b in zip(path, path[1:])])
    sb.extras["path_cost"] = dist[si][ti]
    yield sb.emit(
        "path",
        f"All pairs computed. Shortest {source}→{target}: {' → '.join(path)}, cost = {fmt_dist(dist[si][ti])}.",
        line=10,
        is_final=True,
    )
