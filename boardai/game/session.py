"""
session.py - Game state management for one game

This module provides GameSession, which combines a Board and the Rules engine
with turn order, move history and the game result. Callers hold on to a
session object; nothing in the engine keeps a global "current game".
"""

from typing import List, Optional, Tuple

import numpy as np

from boardai.config import GameConfig, make_config
from boardai.debug import debug
from boardai.errors import EmptyHistory, IllegalMove
from boardai.game.board import Board
from boardai.game.rules import Move, Rules
from boardai.utils import Action, Cell, GameResult, Player, format_action


class GameSession:
    """
    A single game in progress.

    The result is recomputed right after every move; once it is terminal
    every further move is rejected until reset().
    """

    _is_search_copy = False

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize a new game.

        Args:
            config: Game configuration (defaults to Connect Four)
        """
        self.config = config if config is not None else make_config()
        debug.debug(f"Initializing GameSession ({self.config.variant})", "session")
        self.rules = Rules.from_config(self.config)
        self.board = Board(self.config.rows, self.config.cols)
        self.opponent = None  # AIOrchestrator attached by boardai.api.new_session
        self.reset()

    def reset(self) -> None:
        """Start over with an empty board."""
        debug.debug("Resetting game", "session")
        self.board.reset()
        self._history: List[Move] = []
        self._current_player = self.config.starting_player
        self._result = GameResult.IN_PROGRESS

    @property
    def current_player(self) -> Player:
        return self._current_player

    @property
    def result(self) -> GameResult:
        return self._result

    @property
    def last_move(self) -> Optional[Move]:
        return self._history[-1] if self._history else None

    @property
    def move_count(self) -> int:
        return len(self._history)

    def history(self) -> Tuple[Move, ...]:
        return tuple(self._history)

    def is_game_over(self) -> bool:
        return self._result.is_game_over()

    def winner(self) -> Optional[Player]:
        return self._result.winner

    def legal_moves(self) -> List[Action]:
        if self.is_game_over():
            return []
        return self.rules.legal_moves(self.board)

    def is_legal(self, action) -> bool:
        return not self.is_game_over() and self.rules.is_legal(self.board, action)

    def apply(self, action) -> GameResult:
        """
        Play ``action`` for the current player.

        Returns:
            The game result after the move

        Raises:
            IllegalMove: The game is over, or the action is out of range,
                targets an occupied cell or a full column
        """
        if self.is_game_over():
            raise IllegalMove(f"Game is already over ({self._result.name})", "game_over", action)

        move = self.rules.apply(self.board, action, self._current_player)
        self._history.append(move)
        self._result = self.rules.detect_terminal(self.board, move)

        if self._result.is_game_over():
            if not self._is_search_copy:
                debug.info(f"Game over after {move.player.name} played {format_action(move.action)}: "
                           f"{self._result.name}", "session")
        else:
            self._current_player = self._current_player.other()

        return self._result

    def undo(self) -> Move:
        """
        Take back the most recent move.

        Returns:
            The move that was undone

        Raises:
            EmptyHistory: If no move has been played
        """
        if not self._history:
            raise EmptyHistory()

        move = self._history.pop()
        self.rules.undo(self.board, move)
        self._current_player = move.player
        self._result = GameResult.IN_PROGRESS
        if not self._is_search_copy:
            debug.debug(f"Undid {move.player.name} {format_action(move.action)}", "session")
        return move

    def winning_line(self) -> List[Cell]:
        """Cells of the winning run, or an empty list if nobody has won."""
        if self._result.winner is None:
            return []
        if self._history:
            line = self.rules.winning_line(self.board, self._history[-1])
            if line:
                return line
        # loaded positions have no history to start from
        for row, col in np.argwhere(self.board.grid == self._result.winner.value):
            line = self.rules.line_through(self.board, int(row), int(col))
            if line:
                return line
        return []

    def clone_for_search(self) -> 'GameSession':
        """
        An independent copy for search strategies to mutate freely.

        Shares the (immutable) config and rules, copies the board and history.
        """
        clone = GameSession.__new__(GameSession)
        clone.config = self.config
        clone.rules = self.rules
        clone.board = self.board.copy()
        clone._history = list(self._history)
        clone._current_player = self._current_player
        clone._result = self._result
        clone.opponent = None
        clone._is_search_copy = True
        return clone

    def load_position(self, grid, to_move: Optional[Player] = None) -> GameResult:
        """
        Replace the board with an arbitrary position.

        History is cleared. The player to move defaults to whoever has fewer
        stones (the starting player when counts are equal).

        Raises:
            ValueError: Wrong board shape, bad cell values or a position with
                winners on both sides
        """
        board = Board.from_grid(grid)
        if board.shape != self.board.shape:
            raise ValueError(f"Expected a {self.board.shape} grid, got {board.shape}")

        if to_move is None:
            ones = int(np.count_nonzero(board.grid == Player.ONE.value))
            twos = int(np.count_nonzero(board.grid == Player.TWO.value))
            if ones == twos:
                to_move = self.config.starting_player
            else:
                to_move = Player.ONE if ones < twos else Player.TWO

        self._result = self.rules.scan_result(board)
        self.board = board
        self._history = []
        self._current_player = to_move
        debug.debug(f"Loaded position, {to_move.name} to move, result {self._result.name}", "session")
        return self._result

    def snapshot(self) -> np.ndarray:
        return self.board.snapshot()

    def render(self) -> str:
        return self.board.render(highlight=self.winning_line())

    def __repr__(self) -> str:
        return (f"GameSession({self.config.variant}, moves={len(self._history)}, "
                f"to_move={self._current_player.name}, result={self._result.name})")
