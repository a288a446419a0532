"""
graph.py — Graph Container
==========================
Single source of truth for a graph INPUT.  Generators receive one, take a
deep copy, and never write back into it.

Responsibilities:
  1. Building nodes & edges                (add / create / get)
  2. Adjacency queries                      (neighbours, degree, …)
  3. Serialisation round-trip               (to_dict / from_dict)

Random graph generation is not done here: graphs arrive already built
(as JSON through the HTTP layer, or from algotrace.graph.samples).

Design decisions:
  - Nodes & edges stored in plain dicts keyed by id for O(1) lookup.
    Dicts keep insertion order, which is also the iteration order every
    generator uses, so traces are reproducible.
  - A separate adjacency dict  `_adj[node_id] → [(neighbour_id, edge_id)]`
    is maintained incrementally so neighbour queries are O(degree), not O(E).
    An undirected self-loop appears twice in its node's list (degree += 2).
  - `directed` is a graph-level flag; individual Edge objects also carry it
    so serialisation is self-contained.
"""

import copy
import math
from typing import Dict, List, Tuple, Optional, Set

from algotrace.errors import InvalidInputError
from algotrace.graph.node import Node
from algotrace.graph.edge import Edge


class Graph:
    """
    Attributes:
        nodes      : {node_id: Node}
        edges      : {edge_id: Edge}
        directed   : bool – graph-level directedness
        weighted   : bool – whether weights are meaningful
        _adj       : {node_id: [(neighbour_id, edge_id), …]}
    """

    def __init__(self, directed: bool = False, weighted: bool = True):
        self.nodes:    Dict[str, Node] = {}
        self.edges:    Dict[str, Edge] = {}
        self.directed: bool           = directed
        self.weighted: bool           = weighted
        self._adj:     Dict[str, List[Tuple[str, str]]] = {}   # node_id → [(nbr, edge_id)]
        self._next_edge: int          = 0
        self._reserved:  Set[str]     = set()   # explicit ids still to be added by from_dict

    # ==================================================================
    # NODE CRUD
    # ==================================================================
    def add_node(self, node: Node) -> Node:
        self.nodes[node.id] = node
        self._adj.setdefault(node.id, [])
        return node

    def create_node(self, node_id: str, x: float = 0.0, y: float = 0.0, label: Optional[str] = None) -> Node:
        """Convenience: create + add in one call."""
        return self.add_node(Node(node_id=node_id, x=x, y=y, label=label))

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self.nodes

    # ==================================================================
    # EDGE CRUD
    # ==================================================================
    def add_edge(self, edge: Edge) -> Edge:
        if edge.id in self.edges:
            raise InvalidInputError(f"Duplicate edge id {edge.id!r}")
        for end in (edge.source, edge.target):
            if end not in self.nodes:
                self.create_node(end)
        self.edges[edge.id] = edge
        # maintain adjacency
        self._adj[edge.source].append((edge.target, edge.id))
        if not edge.directed:
            self._adj[edge.target].append((edge.source, edge.id))
        return edge

    def create_edge(self, source: str, target: str, weight: float = 1.0, edge_id: Optional[str] = None) -> Edge:
        if edge_id is None:
            edge_id = f"e{self._next_edge}"
            while edge_id in self.edges or edge_id in self._reserved:
                self._next_edge += 1
                edge_id = f"e{self._next_edge}"
            self._next_edge += 1
        return self.add_edge(Edge(source=source, target=target, weight=weight, directed=self.directed, edge_id=edge_id))

    def get_edge_between(self, a: str, b: str) -> Optional[Edge]:
        """First edge connecting a and b (direction-aware)."""
        for nbr, eid in self._adj.get(a, []):
            if nbr == b:
                return self.edges[eid]
        return None

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbours(self, node_id: str) -> List[Tuple[str, Edge]]:
        """Return [(neighbour_id, edge)] in insertion order."""
        return [(nbr_id, self.edges[eid]) for nbr_id, eid in self._adj.get(node_id, [])]

    def degree(self, node_id: str) -> int:
        return len(self._adj.get(node_id, []))

    def copy(self) -> "Graph":
        """Deep copy. Generators work on one of these, never on the caller's graph."""
        return copy.deepcopy(self)

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "directed": self.directed,
            "weighted": self.weighted,
            "nodes":    [n.to_dict() for n in self.nodes.values()],
            "edges":    [e.to_dict() for e in self.edges.values()],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        g = cls(directed=data.get("directed", False), weighted=data.get("weighted", True))
        for nd in data.get("nodes", []):
            g.add_node(Node.from_dict(nd))
        edges = data.get("edges", [])
        # auto ids must not collide with ids the caller chose for later edges
        g._reserved = {str(ed["id"]) for ed in edges if ed.get("id") is not None}
        for ed in edges:
            ed = dict(ed)
            ed.setdefault("directed", g.directed)
            if ed.get("id") is None:
                g.create_edge(ed["source"], ed["target"], weight=float(ed.get("weight", 1.0)))
            else:
                g.add_edge(Edge.from_dict(ed))
        g._reserved = set()
        if not any(n.x or n.y for n in g.nodes.values()):
            g.layout_circle()
        return g

    # ==================================================================
    # LAYOUT
    # ==================================================================
    def layout_circle(self, canvas_w: float = 800, canvas_h: float = 500) -> None:
        """Place nodes evenly on a circle (deterministic, no jitter)."""
        n = len(self.nodes)
        if n == 0:
            return
        cx, cy = canvas_w / 2, canvas_h / 2
        radius = min(canvas_w, canvas_h) * 0.35
        for i, node in enumerate(self.nodes.values()):
            angle  = 2 * math.pi * i / n
            node.x = round(cx + radius * math.cos(angle), 2)
            node.y = round(cy + radius * math.sin(angle), 2)

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def has_negative_edges(self) -> bool:
        return any(e.weight < 0 for e in self.edges.values())

    def node_ids(self) -> List[str]:
        return list(self.nodes.keys())

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()}, directed={self.directed})"
