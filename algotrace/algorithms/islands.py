"""
islands.py — Number of Islands
================================
Count 4-connected groups of LAND cells.

Scan the board row-major; every LAND cell not yet claimed starts a new
island, which is flood-filled depth-first.  The flood fill is the classic
recursive one,

    fill(r, c):  mark;  fill(down);  fill(up);  fill(right);  fill(left)

unrolled onto an explicit frame stack [(cell, next_direction_index)] so
the visiting order (and so the trace) is exactly the recursive
one, without Python's recursion limit.

Steps: "visiting" on entering a cell, "visited" when all four directions
are done, "island" when a whole island is filled, terminal "done" with
the count.
"""

from typing import Generator, List, Tuple

from algotrace.graph import Board, CellType, Position
from algotrace.algorithms.step import Step, BoardStepBuilder, CellState


FILL_DIRECTIONS: List[Position] = [(1, 0), (-1, 0), (0, 1), (0, -1)]    # down, up, right, left

PSEUDOCODE: List[str] = [
    "def NumIslands(grid):",                           # 0
    "    count ← 0",                                   # 1
    "    for (r, c) in row-major order:",              # 2
    "        if grid[r][c] is land and unseen:",       # 3
    "            count ← count + 1",                   # 4
    "            fill(r, c)",                          # 5
    "def fill(r, c):",                                 # 6
    "    if out of bounds or water or seen: return",   # 7
    "    mark (r, c) seen",                            # 8
    "    fill(r+1, c); fill(r-1, c)",                  # 9
    "    fill(r, c+1); fill(r, c-1)",                  # 10
    "    return count",                                # 11
]


def num_islands(board: Board) -> Generator[Step, None, None]:
    sb = BoardStepBuilder(board)
    seen = [[False] * board.cols for _ in range(board.rows)]
    count = 0

    def is_land(r: int, c: int) -> bool:
        return board.in_bounds(r, c) and board.cell(r, c) is CellType.LAND and not seen[r][c]

    sb.extras["count"] = 0
    yield sb.emit("init", f"Scan the {board.rows}×{board.cols} grid row by row for unvisited land.", line=1)

    for r, c in board.positions():
        if not is_land(r, c):
            continue

        count += 1
        members: List[Position] = []
        stack: List[Tuple[Position, int]] = []

        def enter(cell: Position) -> Step:
            seen[cell[0]][cell[1]] = True
            members.append(cell)
            sb.islands[cell[0]][cell[1]] = count
            sb.set_state(cell, CellState.VISITING)
            sb.current = cell
            stack.append((cell, 0))
            sb.queue = [frame[0] for frame in stack]
            return sb.emit("visiting", f"Island {count}: visiting land cell {cell}.", line=8)

        yield enter((r, c))

        while stack:
            cell, d = stack[-1]
            if d < len(FILL_DIRECTIONS):
                stack[-1] = (cell, d + 1)
                dr, dc = FILL_DIRECTIONS[d]
                nr, nc = cell[0] + dr, cell[1] + dc
                if is_land(nr, nc):
                    yield enter((nr, nc))
                continue

            stack.pop()
            sb.set_state(cell, CellState.VISITED)
            sb.current = stack[-1][0] if stack else None
            sb.queue = [frame[0] for frame in stack]
            yield sb.emit("visited", f"All neighbours of {cell} checked.", line=10)

        for cell in members:
            sb.set_state(cell, CellState.COMPLETED)
        sb.extras["count"] = count
        yield sb.emit("island", f"Island {count} complete: {len(members)} cell(s).", line=4)

    sb.current = None
    yield sb.emit("done", f"Scan finished: {count} island(s).", line=11, is_final=True)
