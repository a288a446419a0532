"""
eulerian.py — Eulerian Path / Circuit (Hierholzer)
====================================================
An Eulerian trail uses every edge exactly once.  On an undirected graph:

    circuit  ⇔  every vertex has even degree       (start anywhere)
    path     ⇔  exactly two vertices have odd degree (start at one of them)

plus the edges must all be reachable from the start vertex.

Hierholzer with an explicit stack and a per-edge *used* flag:

    stack ← [start]
    while stack:
        u ← top
        if u has an unused incident edge (u, v):   mark used, push v   → "traverse"
        else:                                      pop u into circuit   → "backtrack"
    circuit is built in reverse

Edges are addressed by *edge keys* `(edge_id, copy)` so the same walk also
runs on the Chinese Postman multigraph, where an edge may be duplicated.

Degree preconditions are structural: a violated one raises
PreconditionError.  Edges unreachable from the start are a legitimate
negative outcome and end the trace with "no Eulerian path".
"""

from typing import Dict, Generator, List, Optional, Tuple

from algotrace.errors import PreconditionError
from algotrace.graph import Graph, NodeState, EdgeState
from algotrace.algorithms.step import Step, GraphStepBuilder


EdgeKey   = Tuple[str, int]
Adjacency = Dict[str, List[Tuple[str, EdgeKey]]]

MODES = ("circuit", "path")

PSEUDOCODE: List[str] = [
    "def Hierholzer(graph, start):",                    # 0
    "    check degrees (circuit: all even, path: 2 odd)", # 1
    "    stack ← [start];  circuit ← []",               # 2
    "    while stack:",                                 # 3
    "        u ← stack.top()",                          # 4
    "        if u has an unused edge (u, v):",          # 5
    "            mark (u, v) used",                     # 6
    "            stack.push(v)",                        # 7
    "        else:",                                    # 8
    "            circuit.append(stack.pop())",          # 9
    "    return reversed(circuit)",                     # 10
]


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------
def degrees(graph: Graph) -> Dict[str, int]:
    return {nid: graph.degree(nid) for nid in graph.node_ids()}


def odd_vertices(graph: Graph) -> List[str]:
    return [nid for nid, d in degrees(graph).items() if d % 2 == 1]


def multigraph_adjacency(graph: Graph, extra_copies: Optional[Dict[str, int]] = None) -> Adjacency:
    """
    Adjacency over edge keys.  Copy 0 is the original edge; copies 1..k are
    duplicates and sit right after it in the neighbour list.
    """
    extra_copies = extra_copies or {}
    adj: Adjacency = {nid: [] for nid in graph.node_ids()}
    for u in graph.node_ids():
        for v, edge in graph.neighbours(u):
            for copy_no in range(1 + extra_copies.get(edge.id, 0)):
                adj[u].append((v, (edge.id, copy_no)))
    return adj


def hierholzer(adj: Adjacency, start: str) -> Tuple[List[str], List[EdgeKey]]:
    """Plain Hierholzer: (vertex sequence, edge-key sequence) of the walk from `start`."""
    walk = walk_circuit(None, adj, start)
    while True:
        try:
            next(walk)
        except StopIteration as stop:
            return stop.value


def count_edge_keys(adj: Adjacency) -> int:
    return len({key for nbrs in adj.values() for _, key in nbrs})


# ---------------------------------------------------------------------------
# Shared step-emitting walk
# ---------------------------------------------------------------------------
def walk_circuit(
    sb: Optional[GraphStepBuilder],
    adj: Adjacency,
    start: str,
    line_offset: int = 0,
) -> Generator[Step, None, Tuple[List[str], List[EdgeKey]]]:
    """
    Yields "traverse" / "backtrack" steps when `sb` is given (nothing
    otherwise) and returns (circuit, circuit_edge_keys).
    """
    used:   set             = set()
    cursor: Dict[str, int]  = {v: 0 for v in adj}
    stack:  List[str]       = [start]
    via:    List[Optional[EdgeKey]] = [None]
    circuit:       List[str]     = []
    circuit_edges: List[EdgeKey] = []

    while stack:
        u = stack[-1]
        nbrs = adj[u]
        while cursor[u] < len(nbrs) and nbrs[cursor[u]][1] in used:
            cursor[u] += 1

        if cursor[u] < len(nbrs):
            v, key = nbrs[cursor[u]]
            used.add(key)
            stack.append(v)
            via.append(key)
            if sb is not None:
                eid = key[0]
                sb.used[eid] = sb.used.get(eid, 0) + 1
                sb.set_edge(eid, EdgeState.TREE)
                sb.current_edge = eid
                sb.visit(u)
                sb.set_current(v)
                sb.frontier = list(stack)
                sb.extras["stack"] = list(stack)
                yield sb.emit("traverse", f"Follow unused edge {u}–{v} and push '{v}'.", line=line_offset + 7)
        else:
            stack.pop()
            key = via.pop()
            circuit.append(u)
            if key is not None:
                circuit_edges.append(key)
            if sb is not None:
                sb.current_edge = None
                sb.set_node(u, NodeState.FINALIZED)
                sb.current_node = stack[-1] if stack else None
                sb.frontier = list(stack)
                sb.extras["stack"] = list(stack)
                sb.extras["circuit"] = list(reversed(circuit))
                yield sb.emit(
                    "backtrack",
                    f"'{u}' has no unused edges: pop it onto the circuit.",
                    line=line_offset + 9,
                )

    circuit.reverse()
    circuit_edges.reverse()
    return circuit, circuit_edges


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def eulerian(
    graph: Graph,
    mode: str = "circuit",
    start: Optional[str] = None,
) -> Generator[Step, None, None]:
    """
    Args:
        graph : Undirected graph.
        mode  : "circuit" or "path".
        start : Optional start vertex (must be odd in path mode).
    """
    graph = graph.copy()
    sb    = GraphStepBuilder(graph)
    deg   = degrees(graph)
    odd   = [nid for nid, d in deg.items() if d % 2 == 1]

    if mode == "circuit":
        if odd:
            raise PreconditionError(
                f"Eulerian circuit needs every degree even; odd vertices: {', '.join(odd)}"
            )
        if start is None:
            start = next((nid for nid, d in deg.items() if d > 0), graph.node_ids()[0])
    elif mode == "path":
        if len(odd) != 2:
            raise PreconditionError(
                f"Eulerian path needs exactly two odd-degree vertices, found {len(odd)}"
            )
        if start is None:
            start = odd[0]
        elif start not in odd:
            raise PreconditionError(f"Eulerian path must start at an odd vertex ({' or '.join(odd)})")
    else:
        raise PreconditionError(f"Unknown Eulerian mode {mode!r}")

    adj = multigraph_adjacency(graph)
    sb.extras["degrees"] = deg
    sb.extras["odd_vertices"] = odd
    sb.extras["mode"] = mode
    sb.set_current(start)
    sb.frontier = [start]
    sb.extras["stack"] = [start]
    kind = "circuit" if mode == "circuit" else "path"
    yield sb.emit(
        "init",
        f"Degree check passed for an Eulerian {kind} "
        f"({'all degrees even' if not odd else 'odd vertices ' + ' and '.join(odd)}). Start at '{start}'.",
        line=2,
    )

    circuit, keys = yield from walk_circuit(sb, adj, start)
    total = count_edge_keys(adj)

    sb.current_node = None
    sb.frontier = []
    sb.extras["stack"] = []
    if len(keys) < total:
        sb.extras["circuit"] = circuit
        yield sb.emit(
            "not_found",
            f"Walk ended after {len(keys)} of {total} edge(s): some edges are unreachable from "
            f"'{start}', so there is no Eulerian {kind}.",
            line=10,
            is_final=True,
        )
        return

    sb.set_path(circuit, [k[0] for k in keys])
    sb.extras["circuit"] = circuit
    yield sb.emit(
        "done",
        f"Eulerian {kind} using all {total} edge(s): {' → '.join(circuit)}",
        line=10,
        is_final=True,
    )
