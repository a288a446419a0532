"""
dfs.py — Depth-First Search
=============================
Generator-based DFS using an explicit stack (no Python recursion limit issues).

Yields a Step at:
  1. Push source onto stack
  2. Pop a node  →  ACTIVE
  3. Push each neighbour that is neither visited nor already on the stack
     →  FRONTIER, one step per neighbour
  4. Node finished  →  VISITED
  5. Optional target popped  →  reconstruct via parent map
  6. Stack empty  →  done / not found

Neighbours are pushed in *reverse* adjacency order so they are popped in
original order.  A node is pushed at most once, so its parent is the node
that first discovered it and every pop is a fresh visit.
"""

from typing import Dict, Generator, List, Optional, Set

from algotrace.graph import Graph, NodeState, EdgeState
from algotrace.algorithms.step import Step, GraphStepBuilder
from algotrace.algorithms.paths import reconstruct, path_edge_ids


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def DFS(graph, source, target):",            # 0
    "    stack ← [source]",                       # 1
    "    visited ← {}",                           # 2
    "    while stack is not empty:",              # 3
    "        node ← stack.pop()",                 # 4
    "        if node in visited: continue",       # 5
    "        visited.add(node)",                  # 6
    "        if node == target: return path",     # 7
    "        for neighbour in reversed(adj(node)):",  # 8
    "            if neighbour not in visited ∪ stack:",  # 9
    "                parent[neighbour] = node",   # 10
    "                stack.push(neighbour)",      # 11
    "    return NOT FOUND",                       # 12
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dfs(
    graph: Graph,
    source: str,
    target: Optional[str] = None,
) -> Generator[Step, None, None]:
    graph   = graph.copy()
    sb      = GraphStepBuilder(graph)
    stack:   List[str]                = [source]
    visited: Set[str]                 = set()
    parent:  Dict[str, Optional[str]] = {source: None}
    via:     Dict[str, str]           = {}

    sb.set_frontier(stack)
    sb.extras["stack"] = list(stack)
    yield sb.emit("push", f"Push source '{source}' onto the stack.", line=1)

    while stack:
        node = stack.pop()
        sb.extras["stack"] = list(stack)
        sb.set_frontier(stack)

        if node in visited:
            continue

        visited.add(node)
        sb.visit(node)
        sb.set_current(node)
        if node in via:
            sb.set_edge(via[node], EdgeState.TREE)
        yield sb.emit("pop", f"Pop '{node}' and mark it visited. DFS goes as deep as it can first.", line=6)

        if target is not None and node == target:
            path = reconstruct(parent, target)
            sb.current_node = None
            sb.set_path(path, path_edge_ids(graph, path, via))
            yield sb.emit(
                "path",
                f"Target '{target}' reached via {' → '.join(path)} "
                f"({len(path) - 1} edge(s); DFS does not guarantee the shortest path).",
                line=7,
                is_final=True,
            )
            return

        for nbr, edge in reversed(graph.neighbours(node)):
            if nbr in visited or nbr in stack:
                continue
            parent[nbr] = node
            via[nbr] = edge.id
            stack.append(nbr)

            sb.relax_edge(edge.id)
            sb.set_frontier(stack)
            sb.extras["stack"] = list(stack)
            yield sb.emit(
                "push",
                f"Push '{nbr}' (neighbour of '{node}') onto the stack.",
                line=11,
            )
            sb.clear_relaxed()

        sb.current_node = None
        sb.set_node(node, NodeState.VISITED)
        yield sb.emit("finalize", f"'{node}' is expanded.", line=3)

    sb.extras["stack"] = []
    sb.frontier = []
    if target is None:
        yield sb.emit(
            "done",
            f"Stack is empty: visited {len(visited)} node(s) in order {' → '.join(sb.visited)}.",
            line=12,
            is_final=True,
        )
    else:
        yield sb.emit(
            "not_found",
            f"Stack is empty. Target '{target}' is NOT reachable from '{source}'.",
            line=12,
            is_final=True,
        )
