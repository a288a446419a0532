"""
knights_tour.py — Knight's Tour (Warnsdorff's Rule)
====================================================
Visit every square of an n×n board exactly once with a knight.

Warnsdorff's rule is a *greedy heuristic*: always jump to the square with
the fewest onward moves (ties → first in MOVES order).  There is no
backtracking, so on some boards / start squares the knight gets stuck
and the trace ends with "no full tour from here".  That outcome is part
of the algorithm, not an error.
"""

from typing import Generator, List, Optional, Set

from algotrace.graph import Board, Position
from algotrace.algorithms.step import Step, BoardStepBuilder, CellState


MIN_SIZE     = 5
MAX_SIZE     = 10
DEFAULT_SIZE = 8

MOVES: List[Position] = [
    (-2, -1), (-2, 1), (-1, -2), (-1, 2),
    (1, -2), (1, 2), (2, -1), (2, 1),
]

PSEUDOCODE: List[str] = [
    "def KnightsTour(n, start):",                            # 0
    "    board[start] ← 1",                                  # 1
    "    for move in 2 … n²:",                               # 2
    "        candidates ← unvisited knight jumps",           # 3
    "        if none: return STUCK",                         # 4
    "        next ← candidate with fewest onward moves",     # 5
    "        board[next] ← move",                            # 6
    "    return TOUR",                                       # 7
]


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------
def knight_moves(pos: Position, n: int, visited: Set[Position]) -> List[Position]:
    r, c = pos
    out = []
    for dr, dc in MOVES:
        nr, nc = r + dr, c + dc
        if 0 <= nr < n and 0 <= nc < n and (nr, nc) not in visited:
            out.append((nr, nc))
    return out


def onward_degree(pos: Position, n: int, visited: Set[Position]) -> int:
    """Number of unvisited squares reachable in one jump from `pos`."""
    return len(knight_moves(pos, n, visited))


def warnsdorff_next(pos: Position, n: int, visited: Set[Position]) -> Optional[Position]:
    """Candidate with strictly minimum onward degree; first in MOVES order on ties."""
    best: Optional[Position] = None
    best_degree = 9
    for cand in knight_moves(pos, n, visited):
        d = onward_degree(cand, n, visited | {cand})
        if d < best_degree:
            best, best_degree = cand, d
    return best


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def knights_tour(n: int = DEFAULT_SIZE, start: Position = (0, 0)) -> Generator[Step, None, None]:
    sb      = BoardStepBuilder(Board.empty(n, n))
    start   = (int(start[0]), int(start[1]))
    visited: Set[Position] = {start}
    tour:    List[Position] = [start]

    sb.moves[start[0]][start[1]] = 1
    sb.current = start
    sb.set_state(start, CellState.VISITING)
    sb.path = list(tour)
    yield sb.emit("init", f"Knight starts at {start} on a {n}×{n} board (move 1).", line=1)

    pos = start
    for move_no in range(2, n * n + 1):
        nxt = warnsdorff_next(pos, n, visited)
        if nxt is None:
            sb.extras["visited"] = len(tour)
            yield sb.emit(
                "not_found",
                f"Stuck at {pos} after {len(tour)} of {n * n} squares: no full tour from here "
                f"(Warnsdorff's rule does not backtrack).",
                line=4,
                is_final=True,
            )
            return

        degree = onward_degree(nxt, n, visited | {nxt})
        sb.set_state(pos, CellState.VISITED)
        visited.add(nxt)
        tour.append(nxt)
        sb.moves[nxt[0]][nxt[1]] = move_no
        sb.set_state(nxt, CellState.VISITING)
        sb.current = nxt
        sb.path = list(tour)
        yield sb.emit(
            "move",
            f"Move {move_no}: jump {pos} → {nxt}, the square with the fewest onward moves ({degree}).",
            line=6,
        )
        pos = nxt

    sb.set_path(tour)
    sb.extras["visited"] = len(tour)
    yield sb.emit("done", f"Complete tour: all {n * n} squares visited exactly once.", line=7, is_final=True)
