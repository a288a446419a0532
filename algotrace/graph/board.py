"""
board.py — 2-D Board / Grid Input
==================================
The input structure for every grid-shaped algorithm: mazes, the
shortest-path grid, minimum knight moves and number-of-islands.

A Board is just a rectangle of CellType values.  The visual state of a
cell at a given moment (queued / visiting / visited / path …) is NOT
stored here; it lives in the BoardSnapshot inside each Step.

Text format (one row per line), used by tests, samples and the HTTP API:

    .   empty          #   wall
    S   start          E   end
    1   land           0   water
"""

from enum import Enum
from typing import List, Optional, Tuple, Iterator

Position = Tuple[int, int]


class CellType(Enum):
    EMPTY = "empty"
    WALL  = "wall"
    START = "start"
    END   = "end"
    LAND  = "land"
    WATER = "water"
    QUEEN = "queen"


_CHAR_TO_TYPE = {
    ".": CellType.EMPTY,
    "#": CellType.WALL,
    "S": CellType.START,
    "E": CellType.END,
    "1": CellType.LAND,
    "0": CellType.WATER,
    "Q": CellType.QUEEN,
}
_TYPE_TO_CHAR = {v: k for k, v in _CHAR_TO_TYPE.items()}

# cells a walker may step on
PASSABLE = frozenset({CellType.EMPTY, CellType.START, CellType.END})


class Board:
    """
    Attributes:
        rows, cols : Dimensions.
        cells      : Row-major list of lists of CellType.
    """

    __slots__ = ("rows", "cols", "cells")

    def __init__(self, cells: List[List[CellType]]):
        if not cells or not cells[0]:
            raise ValueError("A board needs at least one row and one column")
        width = len(cells[0])
        if any(len(row) != width for row in cells):
            raise ValueError("Board rows must all have the same length")
        self.rows: int = len(cells)
        self.cols: int = width
        self.cells: List[List[CellType]] = [list(row) for row in cells]

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def empty(cls, rows: int, cols: int, fill: CellType = CellType.EMPTY) -> "Board":
        return cls([[fill] * cols for _ in range(rows)])

    @classmethod
    def from_strings(cls, lines: List[str]) -> "Board":
        rows = [line.strip() for line in lines if line.strip()]
        try:
            return cls([[_CHAR_TO_TYPE[ch] for ch in row] for row in rows])
        except KeyError as exc:
            raise ValueError(f"Unknown board character {exc.args[0]!r}") from None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell(self, row: int, col: int) -> CellType:
        return self.cells[row][col]

    def positions(self) -> Iterator[Position]:
        """Row-major scan order."""
        for r in range(self.rows):
            for c in range(self.cols):
                yield r, c

    def find(self, cell_type: CellType) -> Optional[Position]:
        """First cell of the given type in row-major order, or None."""
        for r, c in self.positions():
            if self.cells[r][c] is cell_type:
                return r, c
        return None

    def is_passable(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col) and self.cells[row][col] in PASSABLE

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_strings(self) -> List[str]:
        return ["".join(_TYPE_TO_CHAR[t] for t in row) for row in self.cells]

    def to_dict(self) -> dict:
        return {"rows": self.rows, "cols": self.cols, "cells": self.to_strings()}

    @classmethod
    def from_dict(cls, data: dict) -> "Board":
        return cls.from_strings(data["cells"])

    def __repr__(self) -> str:
        return f"Board({self.rows}x{self.cols})"
