import math
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Node State Enum — maps 1-to-1 with the visual encoding palette
# ---------------------------------------------------------------------------
class NodeState(Enum):
    DEFAULT    = "default"     # neutral grey — untouched
    FRONTIER   = "frontier"    # blue — "seen, waiting in the queue / stack"
    ACTIVE     = "active"      # bright highlight — the node being processed RIGHT NOW
    VISITED    = "visited"     # green — "fully processed"
    FINALIZED  = "finalized"   # dark green — value can no longer change (Dijkstra, Tarjan finish)
    PATH       = "path"        # gold — on the reconstructed answer


def _coord(value, name: str) -> float:
    """Canvas coordinate from JSON; raises ValueError / TypeError on junk."""
    if isinstance(value, bool):
        raise TypeError(f"node {name} must be a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"node {name} must be finite")
    return number


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------
class Node:
    """
    Identity and position of one vertex.  Algorithm state never lives here:
    generators copy the graph and keep their own bookkeeping, and the
    visual state of a node at a given moment lives in the Step snapshot.

    Attributes:
        id    : Unique, stable identifier (used as the key everywhere).
        label : Human-readable name shown on the canvas.
        x, y  : Canvas coordinates (caller decides the unit).
    """

    __slots__ = ("id", "label", "x", "y")

    def __init__(
        self,
        node_id: str,
        x: float = 0.0,
        y: float = 0.0,
        label: Optional[str] = None,
    ):
        self.id: str    = str(node_id)
        self.label: str = label if label is not None else self.id
        self.x: float   = x
        self.y: float   = y

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def distance_to(self, other: "Node") -> float:
        """Euclidean distance — used by the A* heuristics."""
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        return cls(
            node_id=data["id"],
            x=_coord(data.get("x", 0.0), "x"),
            y=_coord(data.get("y", 0.0), "y"),
            label=data.get("label"),
        )

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Node(id={self.id}, label={self.label}, pos=({self.x:.2f},{self.y:.2f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
