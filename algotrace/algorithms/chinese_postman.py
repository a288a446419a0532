"""
chinese_postman.py — Chinese Postman (Route Inspection)
=========================================================
Shortest closed walk that uses every edge at least once, on a connected
undirected weighted graph.  Four phases, each with its own steps:

  1. Degrees      – find the odd-degree vertices ("phase").  None → the
                    graph is already Eulerian, skip straight to phase 4.
  2. All pairs    – Floyd–Warshall with a next-hop matrix, one step per
                    intermediate vertex k ("phase").
  3. Matching     – pair the odd vertices and duplicate the edges along
                    each pair's shortest path ("match" per pair, one
                    "duplicate" step).
  4. Circuit      – Hierholzer on the augmented multigraph, starting at
                    the first vertex that has an edge ("traverse" / "backtrack").

Terminal step: the circuit and the total tour weight.

MATCHING IS GREEDY, NOT OPTIMAL.  `greedy_odd_matching` pops the last
unmatched odd vertex and pairs it with the nearest remaining one (first in
list order on ties).  A true minimum-weight perfect matching can give a
shorter tour on some graphs; this strategy is kept deliberately and named
by MATCHING_STRATEGY.
"""

from typing import Dict, Generator, List, Optional, Tuple

from algotrace.graph import Graph, NodeState, EdgeState
from algotrace.algorithms.step import Step, GraphStepBuilder
from algotrace.algorithms.paths import fmt_dist
from algotrace.algorithms.floyd_warshall import INF, Matrix, init_matrices, relax_round, extract_path, lightest_edge
from algotrace.algorithms.eulerian import degrees, multigraph_adjacency, count_edge_keys, walk_circuit


MATCHING_STRATEGY = "greedy-nearest"

PSEUDOCODE: List[str] = [
    "def ChinesePostman(graph):",                          # 0
    "    odd ← vertices with odd degree",                   # 1
    "    if odd is empty: return EulerCircuit(graph)",      # 2
    "    dist, next ← FloydWarshall(graph)",                # 3
    "    while odd:",                                       # 4
    "        u ← odd.pop()",                                # 5
    "        v ← argmin dist[u][w] for w in odd",           # 6
    "        odd.remove(v)",                                # 7
    "        duplicate edges on path(u, v)",                # 8
    "    stack ← [start];  circuit ← []",                   # 9
    "    while stack:",                                     # 10
    "        u ← stack.top()",                              # 11
    "        if u has an unused edge (u, v):",              # 12
    "            mark used;  stack.push(v)",                # 13
    "        else:",                                        # 14
    "            circuit.append(stack.pop())",              # 15
    "    return circuit, total weight",                     # 16
]

# Hierholzer lines 7 / 9 in eulerian.PSEUDOCODE land on 13 / 15 here
_WALK_LINE_OFFSET = 6


Pairing = Tuple[str, str, float]


# ---------------------------------------------------------------------------
# Pure helper
# ---------------------------------------------------------------------------
def greedy_odd_matching(
    odd: List[str],
    nodes: List[str],
    dist: Matrix,
) -> Tuple[List[Pairing], List[str]]:
    """
    Greedy nearest-neighbour pairing of odd vertices.

    Returns (pairs, leftover): `leftover` is non-empty only when some odd
    vertex cannot reach any other remaining odd vertex (disconnected graph).
    """
    idx = {nid: i for i, nid in enumerate(nodes)}
    unmatched = list(odd)
    pairs: List[Pairing] = []
    leftover: List[str] = []
    while unmatched:
        u = unmatched.pop()
        best: Optional[int] = None
        best_d = INF
        for i, w in enumerate(unmatched):
            d = dist[idx[u]][idx[w]]
            if d < best_d:
                best, best_d = i, d
        if best is None:
            leftover.append(u)
            continue
        v = unmatched.pop(best)
        pairs.append((u, v, best_d))
    return pairs, leftover


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def chinese_postman(graph: Graph) -> Generator[Step, None, None]:
    graph = graph.copy()
    sb    = GraphStepBuilder(graph)
    deg   = degrees(graph)
    odd   = [nid for nid, d in deg.items() if d % 2 == 1]
    base_weight = sum(e.weight for e in graph.edges.values())
    duplicates: Dict[str, int] = sb.duplicates       # live view; emit() copies it

    sb.extras["strategy"] = MATCHING_STRATEGY
    sb.extras["degrees"] = deg
    sb.extras["odd_vertices"] = odd
    sb.extras["total_weight"] = base_weight
    for nid in odd:
        sb.set_node(nid, NodeState.FRONTIER)

    if not odd:
        yield sb.emit(
            "phase",
            "Phase 1: every vertex has even degree, so the graph is already Eulerian; "
            "no edge needs to be repeated.",
            line=2,
        )
    else:
        yield sb.emit(
            "phase",
            f"Phase 1: {len(odd)} odd-degree vertices ({', '.join(odd)}) must be paired up "
            f"by repeating edges.",
            line=1,
        )

        # ---- phase 2: Floyd–Warshall ----
        nodes, dist, nxt = init_matrices(graph)
        sb.extras["order"] = nodes
        sb.extras["matrix"] = dist
        for k, via in enumerate(nodes):
            updates = relax_round(k, dist, nxt)
            sb.extras["k"] = via
            yield sb.emit(
                "phase",
                f"Phase 2 (Floyd–Warshall), k = '{via}': {len(updates)} shortest distance(s) improved.",
                line=3,
            )
        sb.extras.pop("k", None)

        # ---- phase 3: greedy matching + duplication ----
        pairs, leftover = greedy_odd_matching(odd, nodes, dist)
        idx = {nid: i for i, nid in enumerate(nodes)}
        matched: List[Tuple[str, str]] = []
        for u, v, d in pairs:
            path = extract_path(nxt, nodes, idx[u], idx[v])
            edge_ids = [lightest_edge(graph, a, b).id for a, b in zip(path, path[1:])]
            for eid in edge_ids:
                duplicates[eid] = duplicates.get(eid, 0) + 1
                sb.set_edge(eid, EdgeState.RELAXED)
            matched.append((u, v))
            sb.set_node(u, NodeState.VISITED)
            sb.set_node(v, NodeState.VISITED)
            sb.path = path
            sb.extras["matching"] = matched
            yield sb.emit(
                "match",
                f"Pair '{u}' with its nearest unmatched odd vertex '{v}' (distance {fmt_dist(d)}); "
                f"repeat the edges along {' → '.join(path)}.",
                line=8,
            )

        if leftover:
            sb.path = []
            sb.extras["unmatched"] = leftover
            yield sb.emit(
                "not_found",
                f"Odd vertices {', '.join(leftover)} cannot reach another odd vertex: the graph is "
                f"disconnected, so no postman tour exists.",
                line=6,
                is_final=True,
            )
            return

        extra = sum(graph.edges[eid].weight * n for eid, n in duplicates.items())
        sb.path = []
        sb.clear_relaxed(EdgeState.DEFAULT)
        sb.extras["total_weight"] = base_weight + extra
        yield sb.emit(
            "duplicate",
            f"Added {sum(duplicates.values())} duplicate edge(s) of total weight {fmt_dist(extra)}; "
            f"every degree is now even.",
            line=8,
        )

    # ---- phase 4: Hierholzer on the augmented multigraph ----
    adj   = multigraph_adjacency(graph, duplicates)
    start = next((nid for nid in graph.node_ids() if adj[nid]), graph.node_ids()[0])
    for nid in graph.node_ids():
        sb.set_node(nid, NodeState.DEFAULT)
    sb.set_current(start)
    sb.frontier = [start]
    sb.extras["stack"] = [start]
    yield sb.emit("phase", f"Phase 4: walk an Eulerian circuit from '{start}' (Hierholzer).", line=9)

    circuit, keys = yield from walk_circuit(sb, adj, start, line_offset=_WALK_LINE_OFFSET)
    total_keys = count_edge_keys(adj)

    sb.current_node = None
    sb.frontier = []
    sb.extras["stack"] = []
    sb.extras["circuit"] = circuit
    if len(keys) < total_keys:
        yield sb.emit(
            "not_found",
            f"The circuit from '{start}' covers {len(keys)} of {total_keys} edge(s): the edges are not "
            f"connected, so no postman tour exists.",
            line=16,
            is_final=True,
        )
        return

    total = sum(graph.edges[eid].weight for eid, _ in keys)
    sb.set_path(circuit, [eid for eid, _ in keys])
    sb.extras["total_weight"] = total
    yield sb.emit(
        "done",
        f"Postman tour of weight {fmt_dist(total)} ({len(keys)} edge traversals): {' → '.join(circuit)}",
        line=16,
        is_final=True,
    )
