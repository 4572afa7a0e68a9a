"""
board.py - Board representation for the boardai games

This module implements the Board class: a fixed-size grid of cells holding
Player values, with the structural queries (column heights, emptiness, runs of
marks) the rules engine, the evaluator and the search strategies build on.
The board knows nothing about turns or winning; see rules.py for that.
"""

from typing import List, Optional, Tuple

import numpy as np

from boardai.debug import debug
from boardai.utils import Cell, Player, render_board_ascii


class Board:
    """
    A rows x cols grid of cells.

    Row 0 is the top row. Dimensions are fixed at construction. Every cell
    write goes through _set_cell so the stone counter stays consistent.
    """

    def __init__(self, rows: int = 6, cols: int = 7):
        """
        Initialize an empty board.

        Args:
            rows: Number of rows
            cols: Number of columns
        """
        if rows < 1 or cols < 1:
            raise ValueError(f"Board dimensions must be positive, got {rows}x{cols}")
        debug.trace(f"Initializing new {rows}x{cols} Board", "board")
        self._rows = rows
        self._cols = cols
        self.reset()

    @classmethod
    def from_grid(cls, grid) -> 'Board':
        """
        Build a board from a 2-D array-like of 0/1/2 values.

        Raises:
            ValueError: If the grid is not 2-D or holds other values
        """
        array = np.asarray(grid, dtype=np.int8)
        if array.ndim != 2:
            raise ValueError(f"Expected a 2-D grid, got shape {array.shape}")
        if not np.isin(array, (Player.EMPTY.value, Player.ONE.value, Player.TWO.value)).all():
            raise ValueError("Grid values must be 0 (empty), 1 or 2")

        board = cls(*array.shape)
        board._grid = array.copy()
        board._stones = int(np.count_nonzero(array))
        return board

    def reset(self):
        """Reset the board to an empty state."""
        self._grid = np.zeros((self._rows, self._cols), dtype=np.int8)
        self._stones = 0

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> Tuple[int, int]:
        return self._rows, self._cols

    @property
    def grid(self) -> np.ndarray:
        """The live grid. Read it freely; mutate only through place/clear."""
        return self._grid

    @property
    def stone_count(self) -> int:
        return self._stones

    def copy(self) -> 'Board':
        """Create an independent copy of the board."""
        new_board = Board.__new__(Board)
        new_board._rows = self._rows
        new_board._cols = self._cols
        new_board._grid = self._grid.copy()
        new_board._stones = self._stones
        return new_board

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._rows and 0 <= col < self._cols

    def get(self, row: int, col: int) -> Player:
        return Player(int(self._grid[row, col]))

    def is_empty(self, row: int, col: int) -> bool:
        return self._grid[row, col] == Player.EMPTY.value

    def place(self, row: int, col: int, player: Player):
        """Put a player's mark on an empty cell."""
        if player == Player.EMPTY:
            raise ValueError("Cannot place an EMPTY mark; use clear()")
        if not self.is_empty(row, col):
            raise ValueError(f"Cell ({row}, {col}) is already occupied")
        self._set_cell(row, col, player.value)

    def clear(self, row: int, col: int):
        """Remove the mark on an occupied cell."""
        if self.is_empty(row, col):
            raise ValueError(f"Cell ({row}, {col}) is already empty")
        self._set_cell(row, col, Player.EMPTY.value)

    def _set_cell(self, row: int, col: int, value: int):
        previous = self._grid[row, col]
        if previous == value:
            return
        if previous == Player.EMPTY.value:
            self._stones += 1
        elif value == Player.EMPTY.value:
            self._stones -= 1
        self._grid[row, col] = value

    def drop_row(self, col: int) -> Optional[int]:
        """
        Lowest empty row of a column, where a dropped piece would land.

        Returns:
            Row index, or None if the column is full
        """
        column = self._grid[:, col]
        empty = np.flatnonzero(column == Player.EMPTY.value)
        if empty.size == 0:
            return None
        return int(empty[-1])

    def top_row(self, col: int) -> Optional[int]:
        """Row of the topmost piece in a column, or None if the column is empty."""
        occupied = np.flatnonzero(self._grid[:, col] != Player.EMPTY.value)
        if occupied.size == 0:
            return None
        return int(occupied[0])

    def is_column_full(self, col: int) -> bool:
        return self._grid[0, col] != Player.EMPTY.value

    def is_full(self) -> bool:
        return self._stones == self._rows * self._cols

    def is_empty_board(self) -> bool:
        return self._stones == 0

    def empty_cells(self) -> List[Cell]:
        """Every empty cell in row-major order."""
        return [(int(r), int(c)) for r, c in np.argwhere(self._grid == Player.EMPTY.value)]

    def count_direction(self, row: int, col: int, dr: int, dc: int) -> int:
        """
        Length of the run of the mark at (row, col) continuing along (dr, dc),
        not counting (row, col) itself.
        """
        value = self._grid[row, col]
        count = 0
        r, c = row + dr, col + dc
        while 0 <= r < self._rows and 0 <= c < self._cols and self._grid[r, c] == value:
            count += 1
            r += dr
            c += dc
        return count

    def get_state(self) -> np.ndarray:
        """A copy of the grid."""
        return self._grid.copy()

    def snapshot(self) -> np.ndarray:
        """A read-only copy of the grid for renderers."""
        state = self._grid.copy()
        state.flags.writeable = False
        return state

    def render(self, highlight=()) -> str:
        return render_board_ascii(self._grid, highlight)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self._grid, other._grid)

    __hash__ = None

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Board({self._rows}x{self._cols}, stones={self._stones})"
