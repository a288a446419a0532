"""
edge.py — Graph Edge
====================
Connects two nodes and carries a weight.  In flow networks the weight is
read as the edge capacity.

Design decisions:
  - `source` and `target` are node-id strings, NOT Node references.
    This keeps edges serialisable and avoids circular references.
  - Ids are deterministic (the Graph hands out "e0", "e1", …) so two runs
    over the same input produce identical traces.
  - `directed` is stored per-edge so serialisation is self-contained.
"""

from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Edge State Enum — visual encoding for the renderer
# ---------------------------------------------------------------------------
class EdgeState(Enum):
    DEFAULT  = "default"   # thin, neutral grey
    RELAXED  = "relaxed"   # amber — "this edge is being considered right now"
    TREE     = "tree"      # traversal tree / used edge
    BRIDGE   = "bridge"    # red — removal disconnects the graph
    PATH     = "path"      # bright green — on the final answer (path, augmenting path)
    IGNORED  = "ignored"   # faded — "algorithm explicitly skipped this"


# ---------------------------------------------------------------------------
# Edge
# ---------------------------------------------------------------------------
class Edge:
    """
    Attributes:
        id       : Unique identifier.
        source   : ID of the tail node.
        target   : ID of the head node.
        weight   : Numeric cost / capacity (default 1).
        directed : If False, traversal works in both directions.
    """

    __slots__ = ("id", "source", "target", "weight", "directed")

    def __init__(
        self,
        source: str,
        target: str,
        weight: float = 1.0,
        directed: bool = False,
        edge_id: Optional[str] = None,
    ):
        self.source:   str   = str(source)
        self.target:   str   = str(target)
        self.id:       str   = edge_id or f"{self.source}-{self.target}"
        self.weight:   float = weight
        self.directed: bool  = directed

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def other_end(self, node_id: str) -> Optional[str]:
        """Given one endpoint, return the other. None if node_id isn't a usable endpoint."""
        if node_id == self.source:
            return self.target
        if node_id == self.target and not self.directed:
            return self.source
        return None

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":       self.id,
            "source":   self.source,
            "target":   self.target,
            "weight":   self.weight,
            "directed": self.directed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        return cls(
            source=data["source"],
            target=data["target"],
            weight=float(data.get("weight", 1.0)),
            directed=data.get("directed", False),
            edge_id=None if data.get("id") is None else str(data["id"]),
        )

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        arrow = " → " if self.directed else " ↔ "
        return f"Edge({self.id}: {self.source}{arrow}{self.target}, w={self.weight})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
