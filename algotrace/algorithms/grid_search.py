"""
grid_search.py — Breadth-First Search on Boards
================================================
Three BFS flavours over a Board, from the START cell to the END cell:

  shortest_path_grid   4-neighbour BFS, directions up, right, down, left.
                       Steps: "visit" when a cell is dequeued, "enqueue"
                       once its neighbours are queued.
  maze                 Same BFS over a wall/open maze, directions right,
                       down, left, up; one "discover" step per newly found
                       cell, carrying the partial path back to the start.
  min_knight_moves     BFS whose "neighbours" are the 8 knight jumps.

All three end with a "path" step (shortest path highlighted, distance in
extras) or "not_found".  Walls are the only obstacle; START / END / EMPTY
cells are passable.
"""

from collections import deque
from typing import Deque, Dict, Generator, List, Optional, Sequence

from algotrace.graph import Board, CellType, Position
from algotrace.algorithms.step import Step, BoardStepBuilder, CellState
from algotrace.algorithms.knights_tour import MOVES as KNIGHT_MOVES


GRID_DIRECTIONS: List[Position] = [(-1, 0), (0, 1), (1, 0), (0, -1)]    # up, right, down, left
MAZE_DIRECTIONS: List[Position] = [(0, 1), (1, 0), (0, -1), (-1, 0)]    # right, down, left, up


GRID_PSEUDOCODE: List[str] = [
    "def BFS(grid, start, end):",                      # 0
    "    queue ← [start];  dist[start] ← 0",           # 1
    "    while queue:",                                # 2
    "        cell ← queue.dequeue()",                  # 3
    "        if cell == end: return path",             # 4
    "        for d in (up, right, down, left):",       # 5
    "            nxt ← cell + d",                      # 6
    "            if nxt open and not seen:",           # 7
    "                dist[nxt] ← dist[cell] + 1",      # 8
    "                queue.enqueue(nxt)",              # 9
    "    return NOT FOUND",                            # 10
]

MAZE_PSEUDOCODE: List[str] = [
    "def SolveMaze(maze, start, end):",                # 0
    "    queue ← [start];  parent ← {start: None}",    # 1
    "    while queue:",                                # 2
    "        cell ← queue.dequeue()",                  # 3
    "        for d in (right, down, left, up):",       # 4
    "            nxt ← cell + d",                      # 5
    "            if nxt is open and nxt ∉ parent:",    # 6
    "                parent[nxt] ← cell",              # 7
    "                if nxt == end: return path",      # 8
    "                queue.enqueue(nxt)",              # 9
    "    return NO PATH",                              # 10
]

KNIGHT_PSEUDOCODE: List[str] = [
    "def MinKnightMoves(board, start, end):",          # 0
    "    queue ← [start];  moves[start] ← 0",          # 1
    "    while queue:",                                # 2
    "        cell ← queue.dequeue()",                  # 3
    "        for jump in KNIGHT_MOVES:",               # 4
    "            nxt ← cell + jump",                   # 5
    "            if nxt on board and not seen:",       # 6
    "                moves[nxt] ← moves[cell] + 1",    # 7
    "                if nxt == end: return moves[nxt]",# 8
    "                queue.enqueue(nxt)",              # 9
    "    return UNREACHABLE",                          # 10
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def endpoints(board: Board):
    return board.find(CellType.START), board.find(CellType.END)


def _trace_back(parent: Dict[Position, Optional[Position]], cell: Position) -> List[Position]:
    path = []
    cur: Optional[Position] = cell
    while cur is not None:
        path.append(cur)
        cur = parent[cur]
    path.reverse()
    return path


def _neighbours(board: Board, cell: Position, deltas: Sequence[Position]) -> List[Position]:
    r, c = cell
    return [(r + dr, c + dc) for dr, dc in deltas if board.is_passable(r + dr, c + dc)]


def _finish(
    sb: BoardStepBuilder,
    parent: Dict[Position, Optional[Position]],
    end: Position,
    line: int,
    unit: str = "step(s)",
) -> Step:
    path = _trace_back(parent, end)
    sb.current = None
    sb.queue = []
    sb.set_path(path)
    sb.extras["distance"] = len(path) - 1
    return sb.emit(
        "path",
        f"Reached the end {end}: shortest route takes {len(path) - 1} {unit}.",
        line=line,
        is_final=True,
    )


# ---------------------------------------------------------------------------
# Shortest path on an open grid
# ---------------------------------------------------------------------------
def shortest_path_grid(board: Board) -> Generator[Step, None, None]:
    sb = BoardStepBuilder(board)
    start, end = endpoints(board)
    queue: Deque[Position] = deque([start])
    parent: Dict[Position, Optional[Position]] = {start: None}

    sb.distance[start[0]][start[1]] = 0
    sb.queue = list(queue)
    sb.set_state(start, CellState.QUEUED)
    yield sb.emit("init", f"Start BFS at {start}; looking for {end}.", line=1)

    while queue:
        cell = queue.popleft()
        sb.current = cell
        sb.queue = list(queue)
        sb.set_state(cell, CellState.VISITING)
        yield sb.emit("visit", f"Visiting {cell} at distance {sb.distance[cell[0]][cell[1]]}.", line=3)

        if cell == end:
            yield _finish(sb, parent, end, line=4)
            return

        added = []
        for nxt in _neighbours(board, cell, GRID_DIRECTIONS):
            if nxt in parent:
                continue
            parent[nxt] = cell
            sb.distance[nxt[0]][nxt[1]] = sb.distance[cell[0]][cell[1]] + 1
            sb.set_state(nxt, CellState.QUEUED)
            queue.append(nxt)
            added.append(nxt)

        sb.set_state(cell, CellState.VISITED)
        sb.queue = list(queue)
        yield sb.emit(
            "enqueue",
            f"Finished exploring {cell}: queued {len(added)} new neighbour(s)"
            + (f" {', '.join(map(str, added))}." if added else "."),
            line=9,
        )

    sb.current = None
    yield sb.emit("not_found", f"Queue is empty: {end} cannot be reached from {start}.", line=10, is_final=True)


# ---------------------------------------------------------------------------
# Maze
# ---------------------------------------------------------------------------
def maze(board: Board) -> Generator[Step, None, None]:
    sb = BoardStepBuilder(board)
    start, end = endpoints(board)
    queue: Deque[Position] = deque([start])
    parent: Dict[Position, Optional[Position]] = {start: None}

    sb.distance[start[0]][start[1]] = 0
    sb.queue = list(queue)
    sb.current = start
    sb.set_state(start, CellState.VISITED)
    yield sb.emit("init", f"Enter the maze at {start}; the exit is {end}.", line=1)

    while queue:
        cell = queue.popleft()
        for nxt in _neighbours(board, cell, MAZE_DIRECTIONS):
            if nxt in parent:
                continue
            parent[nxt] = cell
            sb.distance[nxt[0]][nxt[1]] = sb.distance[cell[0]][cell[1]] + 1
            if nxt == end:
                yield _finish(sb, parent, end, line=8)
                return
            queue.append(nxt)
            sb.set_state(nxt, CellState.VISITED)
            sb.current = nxt
            sb.queue = list(queue)
            sb.path = _trace_back(parent, nxt)
            yield sb.emit(
                "discover",
                f"Discover {nxt} from {cell} ({len(sb.path) - 1} step(s) from the entrance).",
                line=9,
            )

    sb.current = None
    sb.path = []
    sb.queue = []
    yield sb.emit("not_found", f"Every reachable cell explored: the maze has no path to {end}.", line=10, is_final=True)


# ---------------------------------------------------------------------------
# Minimum knight moves
# ---------------------------------------------------------------------------
def min_knight_moves(board: Board) -> Generator[Step, None, None]:
    sb = BoardStepBuilder(board)
    start, end = endpoints(board)
    queue: Deque[Position] = deque([start])
    parent: Dict[Position, Optional[Position]] = {start: None}

    sb.distance[start[0]][start[1]] = 0
    sb.queue = list(queue)
    sb.set_state(start, CellState.QUEUED)
    yield sb.emit("init", f"Knight starts at {start}; target square {end}.", line=1)

    if start == end:
        yield _finish(sb, parent, end, line=8, unit="move(s)")
        return

    while queue:
        cell = queue.popleft()
        sb.current = cell
        sb.queue = list(queue)
        sb.set_state(cell, CellState.VISITING)
        yield sb.emit("visit", f"Expand {cell}, reached in {sb.distance[cell[0]][cell[1]]} move(s).", line=3)

        for nxt in _neighbours(board, cell, KNIGHT_MOVES):
            if nxt in parent:
                continue
            parent[nxt] = cell
            sb.distance[nxt[0]][nxt[1]] = sb.distance[cell[0]][cell[1]] + 1
            if nxt == end:
                yield _finish(sb, parent, end, line=8, unit="move(s)")
                return
            sb.set_state(nxt, CellState.QUEUED)
            queue.append(nxt)

        sb.set_state(cell, CellState.VISITED)
        sb.queue = list(queue)
        yield sb.emit("enqueue", f"All jumps from {cell} queued ({len(queue)} square(s) waiting).", line=9)

    sb.current = None
    yield sb.emit("not_found", f"No sequence of knight moves reaches {end}.", line=10, is_final=True)
