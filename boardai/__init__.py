"""
boardai - Two-player connection games with an AI opponent

This package provides the game-state engine for gravity-drop games (Connect
Four) and free-placement games (Gomoku), the Trio number puzzle, and the AI
decision core: a static evaluator, minimax and Monte Carlo search, and the
stage pipeline that turns them into a move.
"""

# Version number
__version__ = '0.1.0'

from boardai.api import (MoveResult, apply_human_move, get_board_snapshot, new_session,
                         request_ai_move, reset, undo)
from boardai.config import GameConfig, make_config
from boardai.errors import BoardAIError, ConfigError, EmptyHistory, IllegalMove
from boardai.utils import GameResult, Player

__all__ = [
    'MoveResult', 'apply_human_move', 'get_board_snapshot', 'new_session',
    'request_ai_move', 'reset', 'undo', 'GameConfig', 'make_config',
    'BoardAIError', 'ConfigError', 'EmptyHistory', 'IllegalMove',
    'GameResult', 'Player',
]
