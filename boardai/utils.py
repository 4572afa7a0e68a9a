"""
utils.py - Shared constants, enumerations and helpers for the boardai engine

This module provides the player and result enumerations, the four line
directions used by win detection and evaluation, and board rendering helpers
shared by every game variant.
"""

from enum import Enum, auto
from typing import Optional, Tuple, Union

import numpy as np

# Actions are a column index (gravity games) or a (row, col) cell (free placement)
Action = Union[int, Tuple[int, int]]
Cell = Tuple[int, int]


class Player(Enum):
    """Enumeration representing players and cell states."""
    EMPTY = 0
    ONE = 1    # First player
    TWO = 2    # Second player

    def other(self) -> 'Player':
        """Get the other player."""
        if self == Player.ONE:
            return Player.TWO
        elif self == Player.TWO:
            return Player.ONE
        return Player.EMPTY

    def __str__(self):
        return PLAYER_SYMBOLS[self]


PLAYER_SYMBOLS = {
    Player.EMPTY: ".",
    Player.ONE: "X",
    Player.TWO: "O",
}


class GameResult(Enum):
    """Enumeration representing the game outcome."""
    IN_PROGRESS = auto()
    PLAYER_ONE_WIN = auto()
    PLAYER_TWO_WIN = auto()
    DRAW = auto()

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self != GameResult.IN_PROGRESS

    @property
    def winner(self) -> Optional[Player]:
        if self == GameResult.PLAYER_ONE_WIN:
            return Player.ONE
        if self == GameResult.PLAYER_TWO_WIN:
            return Player.TWO
        return None

    @staticmethod
    def win_for(player: Player) -> 'GameResult':
        if player == Player.ONE:
            return GameResult.PLAYER_ONE_WIN
        if player == Player.TWO:
            return GameResult.PLAYER_TWO_WIN
        raise ValueError(f"No win result for {player!r}")


class Direction(Enum):
    """Enumeration representing directions for line checking."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_UP = auto()  # bottom-left to top-right
    DIAGONAL_DOWN = auto()  # top-left to bottom-right


# Direction vectors (row, col) for each direction
DIRECTION_VECTORS = {
    Direction.HORIZONTAL: (0, 1),
    Direction.VERTICAL: (1, 0),
    Direction.DIAGONAL_UP: (-1, 1),
    Direction.DIAGONAL_DOWN: (1, 1)
}


def format_action(action: Action) -> str:
    """Human readable action, used in log messages and the CLI."""
    if isinstance(action, tuple):
        return f"({action[0]}, {action[1]})"
    return f"column {action}"


def render_board_ascii(grid: np.ndarray, highlight=()) -> str:
    """
    Render a grid as ASCII art.

    Args:
        grid: 2-D array of Player values
        highlight: Cells to draw in lower case (e.g. the winning line)

    Returns:
        ASCII representation of the board with column numbers underneath
    """
    rows, cols = grid.shape
    width = len(str(cols - 1))
    highlighted = set(highlight)

    border = "+" + "-" * (cols * (width + 1) + 1) + "+"
    lines = [border]
    for row in range(rows):
        cells = []
        for col in range(cols):
            symbol = PLAYER_SYMBOLS[Player(int(grid[row, col]))]
            if (row, col) in highlighted:
                symbol = symbol.lower()
            cells.append(symbol.rjust(width))
        lines.append("| " + " ".join(cells) + " |" + (f" {row}" if rows > 9 else ""))
    lines.append(border)
    lines.append("  " + " ".join(str(col).rjust(width) for col in range(cols)))

    return "\n".join(lines)
