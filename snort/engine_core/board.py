"""
Board - The R x C grid of cells.

The board only knows geometry and occupancy. Move legality lives in
LegalityTracker, which is also the only caller of set_occupant.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .errors import OutOfBoundsError


@dataclass(frozen=True, order=True)
class Cell:
    """A (row, col) coordinate, 0-indexed."""
    row: int
    col: int

    def __str__(self) -> str:
        return f"({self.row},{self.col})"

    @classmethod
    def of(cls, value) -> Cell:
        """Coerce a Cell or a (row, col) pair into a Cell."""
        if isinstance(value, Cell):
            return value
        row, col = value
        return cls(int(row), int(col))


class Occupant(Enum):
    """What sits on a cell."""
    EMPTY = "empty"
    PLAYER_1 = "player_1"
    PLAYER_2 = "player_2"


# Orthogonal offsets: down, up, left, right
_NEIGHBOR_OFFSETS = ((1, 0), (-1, 0), (0, -1), (0, 1))


class Board:
    """
    Grid of cells with fixed dimensions.

    Dimensions never change after construction; a new game builds a new
    board.
    """

    def __init__(self, rows: int, cols: int):
        if rows < 1 or cols < 1:
            raise ValueError(f"Board needs at least one row and column, got {rows}x{cols}")
        self._rows = rows
        self._cols = cols
        self._grid: list[list[Occupant]] = [
            [Occupant.EMPTY] * cols for _ in range(rows)
        ]

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    def dimensions(self) -> tuple[int, int]:
        return self._rows, self._cols

    def in_bounds(self, cell: Cell) -> bool:
        return 0 <= cell.row < self._rows and 0 <= cell.col < self._cols

    def _check(self, cell: Cell):
        if not self.in_bounds(cell):
            raise OutOfBoundsError(cell, self._rows, self._cols)

    def cells(self) -> Iterator[Cell]:
        """All cells in row-major order."""
        for row in range(self._rows):
            for col in range(self._cols):
                yield Cell(row, col)

    def neighbors(self, cell: Cell) -> list[Cell]:
        """
        In-bounds orthogonal neighbors of a cell.

        Up to four cells; no diagonals and no wraparound. The order is
        fixed (down, up, left, right) so results are reproducible.
        """
        self._check(cell)
        result = []
        for d_row, d_col in _NEIGHBOR_OFFSETS:
            neighbor = Cell(cell.row + d_row, cell.col + d_col)
            if self.in_bounds(neighbor):
                result.append(neighbor)
        return result

    def occupant_of(self, cell: Cell) -> Occupant:
        self._check(cell)
        return self._grid[cell.row][cell.col]

    def is_empty(self, cell: Cell) -> bool:
        return self.occupant_of(cell) is Occupant.EMPTY

    def set_occupant(self, cell: Cell, occupant: Occupant):
        """Write a cell. Only LegalityTracker.apply_move calls this."""
        self._check(cell)
        self._grid[cell.row][cell.col] = occupant

    def reflect(self, cell: Cell) -> Cell:
        """
        Point reflection through the board center.

        Maps (row, col) to (rows-1-row, cols-1-col), i.e. the cell the
        same distance from the opposite corner. Applying it twice gives
        back the original cell.
        """
        return Cell(self._rows - 1 - cell.row, self._cols - 1 - cell.col)

    def middle_cell(self) -> Cell:
        """The cell closest to the center, rounding toward the origin."""
        return Cell((self._rows - 1) // 2, (self._cols - 1) // 2)

    def empty_cells(self) -> set[Cell]:
        return {c for c in self.cells() if self._grid[c.row][c.col] is Occupant.EMPTY}

    def snapshot(self) -> list[list[Occupant]]:
        """Copy of the grid, row-major."""
        return [list(row) for row in self._grid]
