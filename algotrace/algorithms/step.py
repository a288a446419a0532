"""
step.py — Algorithm Step Snapshot
==================================
Every algorithm is a generator that yields Step objects.
A Step is a frozen-in-time picture of everything a renderer needs to
paint one frame, plus a plain-English description of what just happened.

    Step
     ├─ step_number, kind, description, pseudocode_line, is_final
     └─ payload  ─┬─ GraphSnapshot   (BFS, DFS, Dijkstra, A*, Tarjan, max-flow, Euler, postman)
                  ├─ BoardSnapshot   (grid BFS, maze, knight moves, islands, N-Queens, knight's tour)
                  └─ ArraySnapshot   (linear / binary search, bubble sort)

Design decisions:
  - Every record is a frozen dataclass whose containers are tuples, so a
    Step can never be mutated once it is in a trace, and two Steps can
    never share a mutable sub-structure.
  - Algorithms do their bookkeeping in a mutable *builder* (one per run)
    and call `emit(...)`, which copies the builder's current picture into
    a brand-new frozen snapshot.  Copy-on-write without JSON round-trips.
  - Node and edge identity come from the input graph and never change
    inside a trace; only states and numeric annotations do.
  - `extras` is a frozen key/value tuple for algorithm-specific data
    (max_flow, bridges, distance matrix, …).  Read it with `.extra(key)`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from algotrace.graph import Graph, Board, CellType, NodeState, EdgeState, Position


class FrozenMap(tuple):
    """
    A frozen dict: a tuple of (key, value) pairs.  Compares equal to the
    plain tuple, but the serialiser knows to render it as a JSON object.
    """


Extras = Tuple[Tuple[str, Any], ...]


def freeze(value: Any) -> Any:
    """Recursively turn lists / dicts / sets into tuples so they can live in a Step."""
    if isinstance(value, dict):
        return FrozenMap((k, freeze(v)) for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return tuple(sorted(freeze(v) for v in value))
    return value


def _lookup(extras: Extras, key: str, default: Any = None) -> Any:
    for k, v in extras:
        if k == key:
            return v
    return default


# ---------------------------------------------------------------------------
# Cell visual state (board snapshots)
# ---------------------------------------------------------------------------
class CellState(Enum):
    DEFAULT   = "default"
    QUEUED    = "queued"      # waiting in the BFS queue
    VISITING  = "visiting"    # being processed RIGHT NOW
    VISITED   = "visited"
    PATH      = "path"        # on the reconstructed answer
    TESTING   = "testing"     # N-Queens: candidate square
    ATTACKED  = "attacked"    # N-Queens: square rejected, under attack
    COMPLETED = "completed"   # islands: flood fill finished here


# ---------------------------------------------------------------------------
# Graph payload
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class NodeView:
    id:       str
    label:    str
    x:        float
    y:        float
    state:    NodeState        = NodeState.DEFAULT
    distance: Optional[float]  = None     # Dijkstra / A* g-score / BFS depth
    tin:      Optional[int]    = None     # Tarjan discovery time
    low:      Optional[int]    = None     # Tarjan low-link


@dataclass(frozen=True)
class EdgeView:
    id:       str
    source:   str
    target:   str
    weight:   float
    directed: bool
    state:    EdgeState        = EdgeState.DEFAULT
    flow:      Optional[float] = None     # Edmonds–Karp: current flow
    capacity:  Optional[float] = None     # Edmonds–Karp: summed capacity u→v
    duplicate: int             = 0        # Chinese Postman: extra copies added
    used:      int             = 0        # Hierholzer: copies already traversed


@dataclass(frozen=True)
class GraphSnapshot:
    nodes:        Tuple[NodeView, ...]
    edges:        Tuple[EdgeView, ...]
    current_node: Optional[str]      = None
    current_edge: Optional[str]      = None
    frontier:     Tuple[str, ...]    = ()
    visited:      Tuple[str, ...]    = ()
    path:         Tuple[str, ...]    = ()
    extras:       Extras             = FrozenMap()

    def node(self, node_id: str) -> NodeView:
        for n in self.nodes:
            if n.id == node_id:
                return n
        raise KeyError(node_id)

    def edge(self, edge_id: str) -> EdgeView:
        for e in self.edges:
            if e.id == edge_id:
                return e
        raise KeyError(edge_id)

    def extra(self, key: str, default: Any = None) -> Any:
        return _lookup(self.extras, key, default)

    @property
    def distances(self) -> Dict[str, Optional[float]]:
        return {n.id: n.distance for n in self.nodes}


# ---------------------------------------------------------------------------
# Board payload
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CellView:
    row:         int
    col:         int
    type:        CellType
    state:       CellState       = CellState.DEFAULT
    distance:    Optional[int]   = None
    move_number: Optional[int]   = None
    island_id:   Optional[int]   = None
    attacked:    bool            = False


@dataclass(frozen=True)
class BoardSnapshot:
    cells:   Tuple[Tuple[CellView, ...], ...]
    current: Optional[Position]       = None
    queue:   Tuple[Position, ...]     = ()
    path:    Tuple[Position, ...]     = ()
    extras:  Extras                   = FrozenMap()

    def cell(self, row: int, col: int) -> CellView:
        return self.cells[row][col]

    def extra(self, key: str, default: Any = None) -> Any:
        return _lookup(self.extras, key, default)

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.cells[0]) if self.cells else 0


# ---------------------------------------------------------------------------
# Array payload
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ArraySnapshot:
    values:      Tuple[Any, ...]
    highlighted: Tuple[int, ...]      = ()     # indices being compared / swapped
    settled:     Tuple[int, ...]      = ()     # indices already in final position / scanned
    left:        Optional[int]        = None
    right:       Optional[int]        = None
    mid:         Optional[int]        = None
    found_index: Optional[int]        = None
    extras:      Extras               = FrozenMap()

    def extra(self, key: str, default: Any = None) -> Any:
        return _lookup(self.extras, key, default)


# ---------------------------------------------------------------------------
# The Step itself
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Step:
    """
    Attributes:
        step_number     : 0-based index of this step in the trace.
        kind            : Event tag ("compare", "relax", "bridge", …).
        description     : Human-readable "what just happened" text.
        payload         : GraphSnapshot | BoardSnapshot | ArraySnapshot.
        pseudocode_line : 0-based index into the algorithm's PSEUDOCODE.
        is_final        : True on the very last step (success or exhaustion).
    """

    step_number:     int
    kind:            str
    description:     str
    payload:         Any
    pseudocode_line: int  = 0
    is_final:        bool = False


Trace = Tuple[Step, ...]


# ---------------------------------------------------------------------------
# Builders — mutable scratch-pads, one per generator run
# ---------------------------------------------------------------------------
class _Builder:
    """Shared numbering + emit logic.  Subclasses provide `snapshot()`."""

    def __init__(self):
        self._count: int             = 0
        self.pseudocode_line: int    = 0
        self.extras: Dict[str, Any]  = {}

    def snapshot(self):
        raise NotImplementedError

    def emit(self, kind: str, description: str, line: Optional[int] = None, is_final: bool = False) -> Step:
        if line is not None:
            self.pseudocode_line = line
        step = Step(
            step_number=self._count,
            kind=kind,
            description=description,
            payload=self.snapshot(),
            pseudocode_line=self.pseudocode_line,
            is_final=is_final,
        )
        self._count += 1
        return step

    @property
    def emitted(self) -> int:
        return self._count


class GraphStepBuilder(_Builder):
    """
    Usage inside an algorithm generator:
        sb = GraphStepBuilder(graph)
        sb.set_current("A")
        sb.set_frontier(["B", "C"])
        yield sb.emit("dequeue", "Node A was dequeued …", line=5)
    """

    def __init__(self, graph: Graph):
        super().__init__()
        self._graph = graph
        self.node_states: Dict[str, NodeState] = {nid: NodeState.DEFAULT for nid in graph.nodes}
        self.edge_states: Dict[str, EdgeState] = {eid: EdgeState.DEFAULT for eid in graph.edges}
        self.distances:   Dict[str, float]     = {}
        self.tin:         Dict[str, int]       = {}
        self.low:         Dict[str, int]       = {}
        self.flows:       Dict[str, float]     = {}
        self.capacities:  Dict[str, float]     = {}
        self.duplicates:  Dict[str, int]       = {}
        self.used:        Dict[str, int]       = {}
        self.current_node: Optional[str]       = None
        self.current_edge: Optional[str]       = None
        self.frontier:    List[str]            = []
        self.visited:     List[str]            = []
        self.path:        List[str]            = []

    # -- helpers --
    def set_node(self, node_id: str, state: NodeState) -> None:
        self.node_states[node_id] = state

    def set_edge(self, edge_id: str, state: EdgeState) -> None:
        self.edge_states[edge_id] = state

    def set_current(self, node_id: Optional[str]) -> None:
        self.current_node = node_id
        if node_id is not None:
            self.node_states[node_id] = NodeState.ACTIVE

    def set_frontier(self, nodes: Iterable[str]) -> None:
        self.frontier = list(nodes)
        for n in self.frontier:
            if self.node_states[n] is NodeState.DEFAULT:
                self.node_states[n] = NodeState.FRONTIER

    def visit(self, node_id: str, state: NodeState = NodeState.VISITED) -> None:
        self.node_states[node_id] = state
        if node_id not in self.visited:
            self.visited.append(node_id)

    def relax_edge(self, edge_id: str) -> None:
        self.current_edge = edge_id
        self.edge_states[edge_id] = EdgeState.RELAXED

    def clear_relaxed(self, to: EdgeState = EdgeState.DEFAULT) -> None:
        """Fade every RELAXED edge back (called once the examined edge is settled)."""
        for eid, state in self.edge_states.items():
            if state is EdgeState.RELAXED:
                self.edge_states[eid] = to
        self.current_edge = None

    def set_path(self, nodes: Sequence[str], edge_ids: Sequence[str] = ()) -> None:
        self.path = list(nodes)
        for n in nodes:
            self.node_states[n] = NodeState.PATH
        for eid in edge_ids:
            self.edge_states[eid] = EdgeState.PATH

    def snapshot(self) -> GraphSnapshot:
        g = self._graph
        nodes = tuple(
            NodeView(
                id=n.id,
                label=n.label,
                x=n.x,
                y=n.y,
                state=self.node_states[n.id],
                distance=self.distances.get(n.id),
                tin=self.tin.get(n.id),
                low=self.low.get(n.id),
            )
            for n in g.nodes.values()
        )
        edges = tuple(
            EdgeView(
                id=e.id,
                source=e.source,
                target=e.target,
                weight=e.weight,
                directed=e.directed,
                state=self.edge_states[e.id],
                flow=self.flows.get(e.id),
                capacity=self.capacities.get(e.id),
                duplicate=self.duplicates.get(e.id, 0),
                used=self.used.get(e.id, 0),
            )
            for e in g.edges.values()
        )
        return GraphSnapshot(
            nodes=nodes,
            edges=edges,
            current_node=self.current_node,
            current_edge=self.current_edge,
            frontier=tuple(self.frontier),
            visited=tuple(self.visited),
            path=tuple(self.path),
            extras=freeze(self.extras),
        )


class BoardStepBuilder(_Builder):
    """Scratch-pad for grid-shaped algorithms."""

    def __init__(self, board: Board):
        super().__init__()
        self.rows, self.cols = board.rows, board.cols
        self.types:    List[List[CellType]]          = [list(row) for row in board.cells]
        self.states:   List[List[CellState]]         = [[CellState.DEFAULT] * board.cols for _ in range(board.rows)]
        self.distance: List[List[Optional[int]]]     = [[None] * board.cols for _ in range(board.rows)]
        self.moves:    List[List[Optional[int]]]     = [[None] * board.cols for _ in range(board.rows)]
        self.islands:  List[List[Optional[int]]]     = [[None] * board.cols for _ in range(board.rows)]
        self.attacked: List[List[bool]]              = [[False] * board.cols for _ in range(board.rows)]
        self.current:  Optional[Position]            = None
        self.queue:    List[Position]                = []
        self.path:     List[Position]                = []

    def set_state(self, pos: Position, state: CellState) -> None:
        r, c = pos
        self.states[r][c] = state

    def state(self, pos: Position) -> CellState:
        r, c = pos
        return self.states[r][c]

    def set_path(self, cells: Sequence[Position]) -> None:
        self.path = list(cells)
        for pos in cells:
            self.set_state(pos, CellState.PATH)

    def snapshot(self) -> BoardSnapshot:
        cells = tuple(
            tuple(
                CellView(
                    row=r,
                    col=c,
                    type=self.types[r][c],
                    state=self.states[r][c],
                    distance=self.distance[r][c],
                    move_number=self.moves[r][c],
                    island_id=self.islands[r][c],
                    attacked=self.attacked[r][c],
                )
                for c in range(self.cols)
            )
            for r in range(self.rows)
        )
        return BoardSnapshot(
            cells=cells,
            current=self.current,
            queue=tuple(self.queue),
            path=tuple(self.path),
            extras=freeze(self.extras),
        )


class ArrayStepBuilder(_Builder):
    """Scratch-pad for array algorithms (searching, sorting)."""

    def __init__(self, values: Sequence[Any]):
        super().__init__()
        self.values:      List[Any]       = list(values)
        self.highlighted: List[int]       = []
        self.settled:     List[int]       = []
        self.left:        Optional[int]   = None
        self.right:       Optional[int]   = None
        self.mid:         Optional[int]   = None
        self.found_index: Optional[int]   = None

    def snapshot(self) -> ArraySnapshot:
        return ArraySnapshot(
            values=tuple(self.values),
            highlighted=tuple(self.highlighted),
            settled=tuple(self.settled),
            left=self.left,
            right=self.right,
            mid=self.mid,
            found_index=self.found_index,
            extras=freeze(self.extras),
        )


__all__ = [
    "Step", "Trace",
    "GraphSnapshot", "NodeView", "EdgeView",
    "BoardSnapshot", "CellView", "CellState",
    "ArraySnapshot",
    "GraphStepBuilder", "BoardStepBuilder", "ArrayStepBuilder",
    "freeze",
]
