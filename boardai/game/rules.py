"""
rules.py - Rules engine for connection games

This module provides the Rules class which knows how moves are made on a
Board: which actions are legal, where a move lands, how to take it back and
whether it ended the game. The same engine serves gravity-drop games
(Connect Four, actions are column indices) and free-placement games (Gomoku,
actions are (row, col) cells); the only differences are move resolution and
move enumeration.

Win detection only looks at the four lines through the cell just played, so
its cost depends on the win length, not on the board size.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from boardai.errors import IllegalMove
from boardai.game.board import Board
from boardai.utils import DIRECTION_VECTORS, Action, Cell, GameResult, Player


@dataclass(frozen=True)
class Move:
    """A resolved move: the cell that was filled, by whom, and the action that asked for it."""
    row: int
    col: int
    player: Player
    action: Action

    @property
    def cell(self) -> Cell:
        return self.row, self.col


class Rules:
    """
    Move legality, move application and terminal detection.

    Attributes:
        win_length: Marks in a row needed to win
        gravity: True when pieces drop to the lowest empty row of a column
    """

    def __init__(self, win_length: int = 4, gravity: bool = True):
        if win_length < 2:
            raise ValueError(f"win_length must be at least 2, got {win_length}")
        self.win_length = win_length
        self.gravity = gravity

    @classmethod
    def from_config(cls, config) -> 'Rules':
        return cls(win_length=config.win_length, gravity=config.gravity)

    # -- Move enumeration --------------------------------------------------

    def legal_moves(self, board: Board) -> List[Action]:
        """
        Every legal action in a deterministic order.

        Returns:
            Non-full columns in ascending order for gravity games, every empty
            cell in row-major order for free-placement games
        """
        if self.gravity:
            top = board.grid[0]
            return [int(col) for col in np.flatnonzero(top == Player.EMPTY.value)]
        return board.empty_cells()

    def candidate_moves(self, board: Board, radius: int = 1) -> List[Action]:
        """
        Legal actions ordered for search, most promising first.

        Gravity games keep every legal column, center columns first. On
        free-placement boards only empty cells within ``radius`` of an existing
        stone are considered (the center cell on an empty board), closest to
        the center first.
        """
        if self.gravity:
            center = board.cols // 2
            return sorted(self.legal_moves(board), key=lambda c: (abs(c - center), c))

        center_row, center_col = board.rows // 2, board.cols // 2
        if board.is_empty_board():
            return [(center_row, center_col)]

        occupied = board.grid != Player.EMPTY.value
        padded = np.pad(occupied, radius)
        near = np.zeros_like(occupied)
        for dr in range(-radius, radius + 1):
            for dc in range(-radius, radius + 1):
                near |= padded[radius + dr:radius + dr + board.rows,
                               radius + dc:radius + dc + board.cols]
        cells = [(int(r), int(c)) for r, c in np.argwhere(near & ~occupied)]
        if not cells:
            cells = board.empty_cells()
        return sorted(cells, key=lambda rc: (max(abs(rc[0] - center_row), abs(rc[1] - center_col)),
                                             abs(rc[0] - center_row) + abs(rc[1] - center_col),
                                             rc))

    # -- Move application --------------------------------------------------

    def normalize(self, action) -> Action:
        """Coerce an action to an int column or an (int, int) cell."""
        if self.gravity:
            if isinstance(action, (bool, np.bool_)) or not isinstance(action, (int, np.integer)):
                raise IllegalMove(f"Expected a column index, got {action!r}", "bad_action", action)
            return int(action)

        if not isinstance(action, (tuple, list, np.ndarray)) or len(action) != 2:
            raise IllegalMove(f"Expected a (row, col) cell, got {action!r}", "bad_action", action)
        row, col = action
        if not all(isinstance(v, (int, np.integer)) and not isinstance(v, (bool, np.bool_))
                   for v in (row, col)):
            raise IllegalMove(f"Expected integer coordinates, got {action!r}", "bad_action", action)
        return int(row), int(col)

    def locate(self, board: Board, action) -> Cell:
        """
        Resolve an action to the cell it would fill.

        Raises:
            IllegalMove: Out of range, occupied cell or full column
        """
        action = self.normalize(action)

        if self.gravity:
            col = action
            if not 0 <= col < board.cols:
                raise IllegalMove(f"Column {col} is out of range", "out_of_range", action)
            row = board.drop_row(col)
            if row is None:
                raise IllegalMove(f"Column {col} is full", "column_full", action)
            return row, col

        row, col = action
        if not board.in_bounds(row, col):
            raise IllegalMove(f"Cell ({row}, {col}) is out of range", "out_of_range", action)
        if not board.is_empty(row, col):
            raise IllegalMove(f"Cell ({row}, {col}) is occupied", "occupied", action)
        return row, col

    def is_legal(self, board: Board, action) -> bool:
        try:
            self.locate(board, action)
        except IllegalMove:
            return False
        return True

    def apply(self, board: Board, action, player: Player) -> Move:
        """
        Place a mark for ``player``.

        Returns:
            The resolved Move

        Raises:
            IllegalMove: If the action is not legal on this board
        """
        action = self.normalize(action)
        row, col = self.locate(board, action)
        board.place(row, col, player)
        return Move(row, col, player, action)

    def undo(self, board: Board, move: Move):
        """Take back a move previously returned by apply()."""
        if board.get(move.row, move.col) != move.player:
            raise ValueError(f"Cannot undo {move}: cell holds {board.get(move.row, move.col)}")
        if self.gravity and board.top_row(move.col) != move.row:
            raise ValueError(f"Cannot undo {move}: it is not the top piece of column {move.col}")
        board.clear(move.row, move.col)

    # -- Terminal detection -------------------------------------------------

    def line_through(self, board: Board, row: int, col: int) -> List[Cell]:
        """
        A run of at least win_length marks through an occupied cell.

        Returns:
            Cells of the run, or an empty list when no axis reaches win_length
        """
        if board.is_empty(row, col):
            return []

        for dr, dc in DIRECTION_VECTORS.values():
            forward = board.count_direction(row, col, dr, dc)
            backward = board.count_direction(row, col, -dr, -dc)
            if forward + backward + 1 >= self.win_length:
                return [(row + i * dr, col + i * dc) for i in range(-backward, forward + 1)]
        return []

    def winning_line(self, board: Board, move: Optional[Move]) -> List[Cell]:
        """The run completed by ``move``, for highlighting; empty if it did not win."""
        if move is None:
            return []
        return self.line_through(board, move.row, move.col)

    def completes_line(self, board: Board, row: int, col: int) -> bool:
        """True if the mark at (row, col) is part of a winning run."""
        if board.is_empty(row, col):
            return False
        for dr, dc in DIRECTION_VECTORS.values():
            count = 1 + board.count_direction(row, col, dr, dc)
            if count >= self.win_length:
                return True
            count += board.count_direction(row, col, -dr, -dc)
            if count >= self.win_length:
                return True
        return False

    def detect_terminal(self, board: Board, move: Optional[Move]) -> GameResult:
        """
        Result of the game right after ``move``.

        Only the four axes through the move's cell are scanned, then the board
        is checked for fullness.
        """
        if move is not None and self.completes_line(board, move.row, move.col):
            return GameResult.win_for(move.player)
        if board.is_full():
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

    def scan_result(self, board: Board) -> GameResult:
        """
        Result of an arbitrary position, by scanning every occupied cell.

        Used when a position is loaded rather than played; a position with
        winning runs for both players is rejected.
        """
        winners = set()
        for row, col in np.argwhere(board.grid != Player.EMPTY.value):
            row, col = int(row), int(col)
            if self.completes_line(board, row, col):
                winners.add(board.get(row, col))
        if len(winners) > 1:
            raise ValueError("Position has winning lines for both players")
        if winners:
            return GameResult.win_for(winners.pop())
        if board.is_full():
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

    def wins_if_played(self, board: Board, action, player: Player) -> bool:
        """
        Would ``player`` win by playing ``action`` now? The board is left unchanged.
        """
        try:
            row, col = self.locate(board, action)
        except IllegalMove:
            return False
        board.place(row, col, player)
        try:
            return self.completes_line(board, row, col)
        finally:
            board.clear(row, col)

    def winning_actions(self, board: Board, player: Player) -> List[Action]:
        """Every legal action that wins on the spot for ``player``, in legal_moves() order."""
        return [action for action in self.legal_moves(board)
                if self.wins_if_played(board, action, player)]

    def __repr__(self) -> str:
        kind = "gravity" if self.gravity else "free"
        return f"Rules(win_length={self.win_length}, {kind})"
