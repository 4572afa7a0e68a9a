"""
evaluator.py - Static position evaluation shared by every search strategy

The heuristic looks at every window of win_length consecutive cells on the
four axes:
1. A window holding marks of both players is dead and scores nothing
2. A window holding only k of one player's marks is worth WEIGHTS[k] to that
   player (growing steeply with k)
3. In gravity games, a window one mark short whose empty cell can be played
   right now is an extra threat bonus
4. Marks near the center are worth a little more

Every term is computed the same way for both players and subtracted, so
score(board, ONE) == -score(board, TWO) exactly.
"""

from functools import lru_cache
from typing import Iterable, List, Optional, Tuple

import numpy as np

from boardai.game.board import Board
from boardai.game.rules import Rules
from boardai.utils import DIRECTION_VECTORS, Action, Player

WIN_WEIGHT = 1_000_000.0
PLAYABLE_THREAT_BONUS = 50.0
CENTER_WEIGHT = 0.5


@lru_cache(maxsize=None)
def window_indices(rows: int, cols: int, win_length: int) -> np.ndarray:
    """
    Flat grid indices of every window of win_length cells on every axis.

    Returns:
        Integer array of shape (number_of_windows, win_length)
    """
    index = np.arange(rows * cols).reshape(rows, cols)
    windows = []
    for dr, dc in DIRECTION_VECTORS.values():
        for row in range(rows):
            for col in range(cols):
                end_row = row + (win_length - 1) * dr
                end_col = col + (win_length - 1) * dc
                if 0 <= end_row < rows and 0 <= end_col < cols:
                    windows.append([index[row + i * dr, col + i * dc] for i in range(win_length)])
    result = np.array(windows, dtype=np.intp).reshape(-1, win_length)
    result.flags.writeable = False
    return result


@lru_cache(maxsize=None)
def window_weights(win_length: int) -> np.ndarray:
    """Value of an open window by number of marks: 0, 1, 4, 16, ... and WIN_WEIGHT when complete."""
    weights = np.zeros(win_length + 1)
    for count in range(1, win_length):
        weights[count] = 4.0 ** (count - 1)
    weights[win_length] = WIN_WEIGHT
    weights.flags.writeable = False
    return weights


@lru_cache(maxsize=None)
def position_weights(rows: int, cols: int, gravity: bool) -> np.ndarray:
    """Per-cell center preference; column distance only for gravity games."""
    col_weight = (cols // 2) - np.abs(np.arange(cols) - cols // 2)
    if gravity:
        weights = np.tile(col_weight, (rows, 1))
    else:
        row_weight = (rows // 2) - np.abs(np.arange(rows) - rows // 2)
        weights = np.minimum.outer(row_weight, col_weight)
    weights = (weights * CENTER_WEIGHT).astype(float).ravel()
    weights.flags.writeable = False
    return weights


def score(board: Board, player: Player, win_length: int = 4, gravity: bool = True) -> float:
    """
    Heuristic value of a position for ``player`` (positive is good).

    Args:
        board: The board to evaluate
        player: The player to evaluate for
        win_length: Marks in a row needed to win
        gravity: Whether pieces drop (enables the playable-threat bonus)

    Returns:
        The score; exactly the negation of the opponent's score
    """
    if player == Player.EMPTY:
        raise ValueError("Cannot evaluate a position for EMPTY")

    rows, cols = board.shape
    flat = board.grid.ravel()
    mine_value = player.value
    theirs_value = player.other().value

    windows = window_indices(rows, cols, win_length)
    if windows.size == 0:
        return 0.0
    cells = flat[windows]
    mine = np.count_nonzero(cells == mine_value, axis=1)
    theirs = np.count_nonzero(cells == theirs_value, axis=1)
    mine_open = theirs == 0
    theirs_open = mine == 0

    weights = window_weights(win_length)
    lines = weights[mine[mine_open]].sum() - weights[theirs[theirs_open]].sum()

    pos = position_weights(rows, cols, gravity)
    center = pos[flat == mine_value].sum() - pos[flat == theirs_value].sum()

    threats = 0
    if gravity:
        empty = board.grid == Player.EMPTY.value
        supported = np.ones_like(empty)
        supported[:-1] = board.grid[1:] != Player.EMPTY.value
        playable = (empty & supported).ravel()
        hot = playable[windows].any(axis=1)
        near_win = win_length - 1
        threats = (int(np.count_nonzero(mine_open & (mine == near_win) & hot))
                   - int(np.count_nonzero(theirs_open & (theirs == near_win) & hot)))

    return float(lines + center + PLAYABLE_THREAT_BONUS * threats)


class MoveEvaluator:
    """Evaluation bound to one rule set, plus move ranking helpers for the AI."""

    def __init__(self, rules: Rules):
        self.rules = rules

    def score(self, board: Board, player: Player) -> float:
        return score(board, player, self.rules.win_length, self.rules.gravity)

    def rank_moves(self, session, actions: Optional[Iterable[Action]] = None) -> List[Tuple[Action, float]]:
        """
        Score the position after each action for the player to move.

        Args:
            session: The session to evaluate from (left unchanged)
            actions: Actions to rank (defaults to all legal moves)

        Returns:
            (action, score) pairs in the order given; a move that wins
            outright scores WIN_WEIGHT * 10
        """
        work = session.clone_for_search()
        mover = work.current_player
        if actions is None:
            actions = work.legal_moves()

        ranked = []
        for action in actions:
            result = work.apply(action)
            if result.winner == mover:
                value = WIN_WEIGHT * 10
            else:
                value = self.score(work.board, mover)
            work.undo()
            ranked.append((action, value))
        return ranked

    def immediate_wins(self, session, player: Player) -> List[Action]:
        """Legal actions that win on the spot for ``player``."""
        if session.is_game_over():
            return []
        return self.rules.winning_actions(session.board, player)
