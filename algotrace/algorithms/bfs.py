"""
bfs.py — Breadth-First Search
==============================
Generator-based BFS over an explicit FIFO queue.  Yields a Step at every
meaningful event:
  1. Initialise: source enqueued and marked visited
  2. Dequeue a node  →  ACTIVE
  3. Unseen neighbour  →  marked visited *on enqueue*, FRONTIER, tree edge
  4. All neighbours handled  →  node VISITED ("finalize")
  5. Optional target dequeued  →  reconstruct & highlight the hop path

Neighbour order = adjacency insertion order, so traces are reproducible.
Pseudocode lines are 0-indexed and match the PSEUDOCODE constant
exported alongside the generator so the UI can highlight them live.
"""

from collections import deque
from typing import Deque, Dict, Generator, List, Optional, Set

from algotrace.graph import Graph, NodeState, EdgeState
from algotrace.algorithms.step import Step, GraphStepBuilder
from algotrace.algorithms.paths import reconstruct, path_edge_ids


# ---------------------------------------------------------------------------
# Pseudocode — each string is one displayed line; index = pseudocode_line
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def BFS(graph, source, target):",          # 0
    "    queue ← [source]",                     # 1
    "    visited ← {source}",                   # 2
    "    while queue is not empty:",            # 3
    "        node ← queue.dequeue()",           # 4
    "        if node == target: return path",   # 5
    "        for neighbour in adj(node):",      # 6
    "            if neighbour not visited:",    # 7
    "                visited.add(neighbour)",   # 8
    "                parent[neighbour] = node", # 9
    "                queue.enqueue(neighbour)", # 10
    "        node is finished",                 # 11
    "    return NOT FOUND",                     # 12
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def bfs(
    graph: Graph,
    source: str,
    target: Optional[str] = None,
) -> Generator[Step, None, None]:
    """
    Args:
        graph  : The graph to traverse (deep-copied, never mutated).
        source : Starting node id.
        target : Optional goal; without one the whole component is traversed.
    """
    graph   = graph.copy()
    sb      = GraphStepBuilder(graph)
    queue:   Deque[str]               = deque([source])
    visited: Set[str]                 = {source}
    parent:  Dict[str, Optional[str]] = {source: None}
    via:     Dict[str, str]           = {}

    sb.distances[source] = 0
    sb.set_frontier(queue)
    sb.visit(source, NodeState.FRONTIER)
    sb.extras["queue"] = list(queue)
    yield sb.emit(
        "init",
        f"Initialise: source '{source}' is placed into the queue and marked visited. "
        f"BFS explores layer by layer from here.",
        line=1,
    )

    while queue:
        node = queue.popleft()
        sb.set_frontier(queue)
        sb.set_current(node)
        sb.extras["queue"] = list(queue)
        yield sb.emit(
            "dequeue",
            f"Dequeue '{node}' (depth {sb.distances[node]}). BFS always expands the "
            f"node that was discovered earliest (FIFO).",
            line=4,
        )

        if target is not None and node == target:
            path = reconstruct(parent, target)
            sb.current_node = None
            sb.set_path(path, path_edge_ids(graph, path, via))
            sb.extras["path_length"] = len(path) - 1
            yield sb.emit(
                "path",
                f"Target '{target}' reached! Shortest hop path has {len(path) - 1} edge(s): "
                f"{' → '.join(path)}",
                line=5,
                is_final=True,
            )
            return

        for nbr, edge in graph.neighbours(node):
            if nbr in visited:
                continue
            visited.add(nbr)
            parent[nbr] = node
            via[nbr] = edge.id
            queue.append(nbr)
            sb.distances[nbr] = sb.distances[node] + 1
            sb.visit(nbr, NodeState.FRONTIER)
            sb.set_edge(edge.id, EdgeState.TREE)
            sb.set_frontier(queue)
            sb.extras["queue"] = list(queue)
            yield sb.emit(
                "enqueue",
                f"Edge {node}→{nbr}: '{nbr}' is new, mark it visited and enqueue it "
                f"(parent = '{node}').",
                line=10,
            )

        sb.current_node = None
        sb.set_node(node, NodeState.VISITED)
        yield sb.emit("finalize", f"All neighbours of '{node}' handled; '{node}' is finished.", line=11)

    sb.extras["queue"] = []
    if target is None:
        yield sb.emit(
            "done",
            f"Queue is empty: {len(visited)} node(s) reachable from '{source}'.",
            line=12,
            is_final=True,
        )
    else:
        yield sb.emit(
            "not_found",
            f"Queue is empty. Target '{target}' is NOT reachable from '{source}'.",
            line=12,
            is_final=True,
        )
