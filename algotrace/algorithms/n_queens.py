"""
n_queens.py — N-Queens Backtracking
====================================
Place N queens on an N×N board so that none attacks another.  Queens go
column by column, left to right; within a column the rows are tried top
to bottom.  The recursion is unrolled into an explicit stack: `queens`
holds the row of the queen in each filled column, so popping it *is*
backtracking.

Steps:
  "testing"   candidate square highlighted
  "placed"    queen placed; attacked squares recomputed from every queen
  "rejected"  candidate is under attack
  "removed"   column exhausted → pop the previous queen and move it down
  terminal    "solution" (first one found) or "no_solution" (empty board)
"""

from typing import Generator, List, Tuple

from algotrace.graph import Board, CellType, Position
from algotrace.algorithms.step import Step, BoardStepBuilder, CellState


MIN_SIZE = 1
MAX_SIZE = 12

PSEUDOCODE: List[str] = [
    "def solve(col):",                                  # 0
    "    if col == n: return True",                     # 1
    "    for row in 0 … n-1:",                          # 2
    "        if is_safe(board, row, col):",             # 3
    "            board[row][col] ← Q",                  # 4
    "            if solve(col + 1): return True",       # 5
    "            board[row][col] ← .   # backtrack",    # 6
    "    return False",                                 # 7
]


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------
def is_safe(board: List[List[bool]], row: int, col: int) -> bool:
    """Only the columns to the LEFT can hold queens, so only look left."""
    n = len(board)
    for c in range(col):
        if board[row][c]:
            return False
    r, c = row - 1, col - 1
    while r >= 0 and c >= 0:
        if board[r][c]:
            return False
        r, c = r - 1, c - 1
    r, c = row + 1, col - 1
    while r < n and c >= 0:
        if board[r][c]:
            return False
        r, c = r + 1, c - 1
    return True


def attacked_cells(queens: List[Position], n: int) -> List[List[bool]]:
    """Every square on a queen's row, column or diagonal (queen squares excluded)."""
    grid = [[False] * n for _ in range(n)]
    for qr, qc in queens:
        for r in range(n):
            for c in range(n):
                if (r, c) == (qr, qc):
                    continue
                if r == qr or c == qc or abs(r - qr) == abs(c - qc):
                    grid[r][c] = True
    for qr, qc in queens:
        grid[qr][qc] = False
    return grid


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def n_queens(n: int = 8) -> Generator[Step, None, None]:
    sb     = BoardStepBuilder(Board.empty(n, n))
    board  = [[False] * n for _ in range(n)]
    queens: List[int] = []         # queens[c] = row of the queen in column c
    col, row = 0, 0
    placements = 0

    def placed() -> List[Tuple[int, int]]:
        return [(r, c) for c, r in enumerate(queens)]

    def refresh() -> None:
        sb.attacked = attacked_cells(placed(), n)
        sb.extras["queens"] = placed()
        sb.extras["placements"] = placements

    refresh()
    yield sb.emit("init", f"Place {n} queen(s) on a {n}×{n} board, one column at a time.", line=0)

    while True:
        if col == n:
            sb.current = None
            for r, c in placed():
                sb.set_state((r, c), CellState.PATH)
            yield sb.emit(
                "solution",
                f"All {n} queen(s) placed without conflicts: rows {queens} by column.",
                line=1,
                is_final=True,
            )
            return

        if row == n:
            if col == 0:
                sb.current = None
                yield sb.emit(
                    "no_solution",
                    f"Every row of the first column failed: no solution exists for n = {n}.",
                    line=7,
                    is_final=True,
                )
                return
            col -= 1
            row = queens.pop()
            board[row][col] = False
            sb.types[row][col] = CellType.EMPTY
            sb.set_state((row, col), CellState.DEFAULT)
            sb.current = (row, col)
            refresh()
            yield sb.emit(
                "removed",
                f"Column {col + 1} has no safe row left: backtrack and remove the queen at "
                f"({row}, {col}).",
                line=6,
            )
            row += 1
            continue

        pos = (row, col)
        sb.current = pos
        sb.set_state(pos, CellState.TESTING)
        yield sb.emit("testing", f"Try a queen at row {row}, column {col}.", line=3)

        if is_safe(board, row, col):
            board[row][col] = True
            queens.append(row)
            placements += 1
            sb.types[row][col] = CellType.QUEEN
            sb.set_state(pos, CellState.DEFAULT)
            refresh()
            yield sb.emit("placed", f"({row}, {col}) is safe: place the queen and move to column {col + 1}.", line=4)
            col, row = col + 1, 0
        else:
            sb.set_state(pos, CellState.ATTACKED)
            yield sb.emit("rejected", f"({row}, {col}) is under attack: try the next row.", line=3)
            sb.set_state(pos, CellState.DEFAULT)
            row += 1
