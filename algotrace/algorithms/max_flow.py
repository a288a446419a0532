"""
max_flow.py — Edmonds–Karp Maximum Flow
========================================
Ford–Fulkerson with BFS augmenting paths (shortest in hop count), which
bounds the number of augmentations by O(V·E).

Residual network:
  cap[(u, v)]   summed capacity of every u→v edge (parallel edges add up)
  flow[(u, v)]  antisymmetric: flow[(u, v)] == -flow[(v, u)]
  residual      cap[(u, v)] - flow[(u, v)]

The residual adjacency lists each neighbour in both directions, in order of
first appearance among the input edges, so the BFS order (and with it
the whole trace) is reproducible.

Steps: init → one "augment" per augmenting path (path, bottleneck, running
total) → "done" with the max flow, the min-cut source side and the cut
edges (drawn with the BRIDGE edge state).
"""

from collections import deque
from typing import Dict, Generator, List, Optional, Tuple

from algotrace.graph import Graph, NodeState, EdgeState
from algotrace.algorithms.step import Step, GraphStepBuilder


Pair     = Tuple[str, str]
Residual = Tuple[Dict[str, List[str]], Dict[Pair, float]]


PSEUDOCODE: List[str] = [
    "def EdmondsKarp(graph, s, t):",                          # 0
    "    flow ← 0 on every residual edge",                     # 1
    "    while True:",                                         # 2
    "        parent ← BFS(s, t) over cap - flow > 0",          # 3
    "        if t not reached: break",                         # 4
    "        b ← min residual along the path",                 # 5
    "        for (u, v) on path:",                             # 6
    "            flow[u][v] += b;  flow[v][u] -= b",           # 7
    "        max_flow += b",                                   # 8
    "    return max_flow",                                     # 9
]


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------
def build_residual(graph: Graph) -> Residual:
    """Return (adjacency, capacity) for the residual network of `graph`."""
    adj: Dict[str, List[str]] = {nid: [] for nid in graph.nodes}
    cap: Dict[Pair, float]    = {}
    for e in graph.edges.values():
        ends = [(e.source, e.target)] if e.directed else [(e.source, e.target), (e.target, e.source)]
        for u, v in ends:
            cap[(u, v)] = cap.get((u, v), 0) + e.weight
            cap.setdefault((v, u), 0)
            if v not in adj[u]:
                adj[u].append(v)
            if u not in adj[v]:
                adj[v].append(u)
    return adj, cap


def find_augmenting_path(
    adj: Dict[str, List[str]],
    cap: Dict[Pair, float],
    flow: Dict[Pair, float],
    source: str,
    sink: str,
) -> Optional[Tuple[List[str], float]]:
    """
    BFS over positive residual capacity.  Returns (path, bottleneck) or None.
    The search stops the moment the sink is discovered.
    """
    parent: Dict[str, str]      = {source: source}
    bottleneck: Dict[str, float] = {source: float("inf")}
    queue = deque([source])
    while queue:
        u = queue.popleft()
        for v in adj[u]:
            residual = cap[(u, v)] - flow.get((u, v), 0)
            if v in parent or residual <= 0:
                continue
            parent[v] = u
            bottleneck[v] = min(bottleneck[u], residual)
            if v == sink:
                path = [sink]
                while path[-1] != source:
                    path.append(parent[path[-1]])
                path.reverse()
                return path, bottleneck[sink]
            queue.append(v)
    return None


def reachable_in_residual(
    adj: Dict[str, List[str]],
    cap: Dict[Pair, float],
    flow: Dict[Pair, float],
    source: str,
) -> List[str]:
    """Vertices reachable from `source` over positive residual capacity (min-cut S side)."""
    seen = [source]
    queue = deque([source])
    while queue:
        u = queue.popleft()
        for v in adj[u]:
            if v not in seen and cap[(u, v)] - flow.get((u, v), 0) > 0:
                seen.append(v)
                queue.append(v)
    return seen


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def edmonds_karp(graph: Graph, source: str, sink: str) -> Generator[Step, None, None]:
    graph = graph.copy()
    sb    = GraphStepBuilder(graph)
    adj, cap = build_residual(graph)
    flow: Dict[Pair, float] = {pair: 0 for pair in cap}
    max_flow = 0

    for e in graph.edges.values():
        sb.capacities[e.id] = e.weight
        sb.flows[e.id] = 0
    sb.extras["max_flow"] = 0
    sb.extras["source"], sb.extras["sink"] = source, sink
    sb.set_node(source, NodeState.ACTIVE)
    yield sb.emit("init", f"Initialise: every flow is 0, max flow = 0. Source '{source}', sink '{sink}'.", line=1)

    while True:
        found = find_augmenting_path(adj, cap, flow, source, sink)
        if found is None:
            break
        path, bottleneck = found

        for u, v in zip(path, path[1:]):
            flow[(u, v)] += bottleneck
            flow[(v, u)] -= bottleneck
        max_flow += bottleneck

        _paint_flows(graph, sb, flow, path)
        sb.path = list(path)
        sb.extras["max_flow"] = max_flow
        sb.extras["bottleneck"] = bottleneck
        yield sb.emit(
            "augment",
            f"Augment along {' → '.join(path)} by bottleneck {bottleneck:g}. Max flow = {max_flow:g}.",
            line=8,
        )

    cut_side = reachable_in_residual(adj, cap, flow, source)
    cut_edges = [
        e.id for e in graph.edges.values()
        if (e.source in cut_side) != (e.target in cut_side)
        and (e.source in cut_side or not e.directed)
    ]
    _paint_flows(graph, sb, flow, [])
    for nid in graph.nodes:
        sb.set_node(nid, NodeState.VISITED if nid in cut_side else NodeState.DEFAULT)
    for eid in cut_edges:
        sb.set_edge(eid, EdgeState.BRIDGE)
    sb.path = []
    sb.extras.pop("bottleneck", None)
    sb.extras["max_flow"] = max_flow
    sb.extras["min_cut"] = cut_side
    sb.extras["cut_edges"] = cut_edges
    yield sb.emit(
        "done",
        f"No augmenting path left. Max flow = {max_flow:g} = capacity of the cut "
        f"{{{', '.join(cut_side)}}} | rest.",
        line=9,
        is_final=True,
    )


def _paint_flows(graph: Graph, sb: GraphStepBuilder, flow: Dict[Pair, float], path: List[str]) -> None:
    """Spread the net pair flow over the pair's parallel edges, in edge order."""
    remaining: Dict[Pair, float] = {}
    on_path = set(zip(path, path[1:]))
    for e in graph.edges.values():
        pair = (e.source, e.target)
        if pair not in remaining:
            net = flow.get(pair, 0)
            remaining[pair] = max(net, 0) if e.directed else abs(net)
        f = min(e.weight, remaining[pair])
        remaining[pair] -= f
        sb.flows[e.id] = f
        if pair in on_path or (not e.directed and (e.target, e.source) in on_path):
            sb.set_edge(e.id, EdgeState.PATH)
        elif f > 0:
            sb.set_edge(e.id, EdgeState.RELAXED)
        else:
            sb.set_edge(e.id, EdgeState.DEFAULT)
    for nid in graph.nodes:
        sb.set_node(nid, NodeState.PATH if nid in path else NodeState.DEFAULT)
