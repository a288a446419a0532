"""
Small helpers shared by the path-finding generators.
"""

from typing import Dict, List, Optional

from algotrace.graph import Graph


def reconstruct(parent: Dict[str, Optional[str]], target: str) -> List[str]:
    """Walk parent pointers back from target; returns [source, …, target]."""
    path = []
    cur: Optional[str] = target
    while cur is not None:
        path.append(cur)
        cur = parent.get(cur)
    path.reverse()
    return path


def path_edge_ids(graph: Graph, path: List[str], via: Optional[Dict[str, str]] = None) -> List[str]:
    """
    Edge ids along a node path.  `via[v]` (edge used to reach v) wins when
    known, otherwise the first edge between the two nodes is taken.
    """
    ids = []
    for a, b in zip(path, path[1:]):
        if via and b in via:
            ids.append(via[b])
            continue
        e = graph.get_edge_between(a, b)
        if e is not None:
            ids.append(e.id)
    return ids


def fmt_dist(d: float) -> str:
    if d == float("inf"):
        return "∞"
    return f"{d:g}"
