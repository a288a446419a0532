from collections import deque

import pytest

from algotrace.algorithms import generate_trace
from algotrace.algorithms.grid_search import GRID_DIRECTIONS, MAZE_DIRECTIONS
from algotrace.algorithms.knights_tour import MOVES, onward_degree, warnsdorff_next
from algotrace.algorithms.n_queens import attacked_cells, is_safe
from algotrace.algorithms.step import CellState
from algotrace.errors import InvalidInputError
from algotrace.graph import Board, CellType
from algotrace.graph import samples


def bfs_distance(board, deltas):
    start, end = board.find(CellType.START), board.find(CellType.END)
    seen = {start: 0}
    queue = deque([start])
    while queue:
        r, c = queue.popleft()
        for dr, dc in deltas:
            nxt = (r + dr, c + dc)
            if board.is_passable(*nxt) and nxt not in seen:
                seen[nxt] = seen[(r, c)] + 1
                queue.append(nxt)
    return seen.get(end)


def queens_of(step):
    return [
        (cell.row, cell.col)
        for row in step.payload.cells
        for cell in row
        if cell.type is CellType.QUEEN
    ]


# ---------------------------------------------------------------------------
# N-Queens
# ---------------------------------------------------------------------------
def test_is_safe_checks_row_and_both_diagonals():
    board = [[False] * 4 for _ in range(4)]
    board[1][0] = True
    assert not is_safe(board, 1, 2)      # same row
    assert not is_safe(board, 0, 1)      # diagonal
    assert not is_safe(board, 2, 1)      # anti-diagonal
    assert is_safe(board, 3, 1)


def test_attacked_cells_excludes_queen_square():
    grid = attacked_cells([(0, 0)], 3)
    assert grid[0][0] is False
    assert grid[0][2] and grid[2][0] and grid[2][2]
    assert not grid[1][2]


@pytest.mark.parametrize("n", [1, 4, 5, 6, 8])
def test_n_queens_solution_is_valid(n):
    trace = generate_trace("n_queens", n=n)
    last = trace[-1]
    assert last.kind == "solution"
    queens = queens_of(last)
    assert len(queens) == n
    assert len({r for r, _ in queens}) == n
    assert len({c for _, c in queens}) == n
    assert len({r - c for r, c in queens}) == n
    assert len({r + c for r, c in queens}) == n


def test_four_queens_first_solution():
    last = generate_trace("n_queens", n=4)[-1]
    assert sorted(queens_of(last), key=lambda q: q[1]) == [(1, 0), (3, 1), (0, 2), (2, 3)]


@pytest.mark.parametrize("n", [2, 3])
def test_n_queens_without_solution(n):
    trace = generate_trace("n_queens", n=n)
    kinds = [s.kind for s in trace]
    assert kinds[-1] == "no_solution"
    assert "removed" in kinds


def test_n_queens_step_sequence_starts_with_testing():
    kinds = [s.kind for s in generate_trace("n_queens", n=4)]
    assert kinds[:3] == ["init", "testing", "placed"]
    assert "rejected" in kinds


def test_rejected_cell_is_marked_attacked():
    trace = generate_trace("n_queens", n=4)
    rejected = next(s for s in trace if s.kind == "rejected")
    r, c = rejected.payload.current
    assert rejected.payload.cell(r, c).state is CellState.ATTACKED


def test_n_queens_size_is_validated():
    with pytest.raises(InvalidInputError):
        generate_trace("n_queens", n=0)
    with pytest.raises(InvalidInputError):
        generate_trace("n_queens", n=13)


# ---------------------------------------------------------------------------
# Knight's tour
# ---------------------------------------------------------------------------
def test_warnsdorff_prefers_fewest_onward_moves_first_on_ties():
    visited = {(0, 0)}
    assert onward_degree((1, 2), 5, visited | {(1, 2)}) == 5
    assert onward_degree((2, 1), 5, visited | {(2, 1)}) == 5
    assert warnsdorff_next((0, 0), 5, visited) == (1, 2)


@pytest.mark.parametrize("n, start", [(5, (0, 0)), (6, (0, 0)), (8, (0, 0)), (8, (3, 4))])
def test_knights_tour_moves_are_legal(n, start):
    trace = generate_trace("knights_tour", n=n, start=start)
    last = trace[-1]
    path = list(last.payload.path)

    assert path[0] == start
    assert len(set(path)) == len(path)
    for (r1, c1), (r2, c2) in zip(path, path[1:]):
        assert (r2 - r1, c2 - c1) in MOVES
    assert [s.kind for s in trace].count("move") == len(path) - 1
    if last.kind == "done":
        assert len(path) == n * n
    else:
        assert last.kind == "not_found"
        assert len(path) < n * n
    r, c = path[-1]
    assert last.payload.cell(r, c).move_number == len(path)


def test_knights_tour_start_is_validated():
    with pytest.raises(InvalidInputError):
        generate_trace("knights_tour", n=5, start=(5, 0))


# ---------------------------------------------------------------------------
# Grid searches
# ---------------------------------------------------------------------------
def test_shortest_path_grid_distance():
    board = samples.grid_demo()
    trace = generate_trace("shortest_path_grid", board)
    last = trace[-1]
    assert last.kind == "path"
    assert last.payload.extra("distance") == 12 == bfs_distance(board, GRID_DIRECTIONS)
    path = list(last.payload.path)
    assert path[0] == board.find(CellType.START) and path[-1] == board.find(CellType.END)
    assert all(board.is_passable(r, c) for r, c in path)


def test_maze_distance_and_partial_paths():
    board = samples.maze_demo()
    trace = generate_trace("maze", board)
    assert trace[-1].kind == "path"
    assert trace[-1].payload.extra("distance") == bfs_distance(board, MAZE_DIRECTIONS)
    for step in trace:
        if step.kind == "discover":
            assert step.payload.path[0] == board.find(CellType.START)
            assert step.payload.path[-1] == step.payload.current


def test_walled_off_end_is_not_found():
    board = Board.from_strings(["S#.", "##.", "..E"])
    for key in ("shortest_path_grid", "maze", "min_knight_moves"):
        assert generate_trace(key, board)[-1].kind == "not_found"


def test_min_knight_moves_corner_to_corner():
    board = Board.from_strings(["S......."] + ["........"] * 6 + [".......E"])
    trace = generate_trace("min_knight_moves", board)
    assert trace[-1].kind == "path"
    assert trace[-1].payload.extra("distance") == 6


def test_grid_search_needs_endpoints():
    with pytest.raises(InvalidInputError):
        generate_trace("maze", Board.from_strings(["S..", "..."]))


# ---------------------------------------------------------------------------
# Islands
# ---------------------------------------------------------------------------
def test_islands_count():
    trace = generate_trace("islands", samples.islands_demo())
    last = trace[-1]
    assert last.kind == "done"
    assert last.payload.extra("count") == 5
    assert [s.kind for s in trace].count("island") == 5


def test_island_ids_increase_in_scan_order():
    last = generate_trace("islands", samples.islands_demo())[-1]
    ids = [c.island_id for row in last.payload.cells for c in row if c.island_id is not None]
    first_seen = list(dict.fromkeys(ids))
    assert first_seen == [1, 2, 3, 4, 5]
    assert last.payload.cell(4, 4).island_id == last.payload.cell(3, 3).island_id


def test_no_land_means_zero_islands():
    trace = generate_trace("islands", Board.from_strings(["000", "000"]))
    assert [s.kind for s in trace] == ["init", "done"]
    assert trace[-1].payload.extra("count") == 0
