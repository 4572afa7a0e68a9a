"""
boardai.game - Core game mechanics

This package contains the board representation, the rules engine shared by
every connection game, game state management, the Trio puzzle and the
Gymnasium environment adapter.
"""

from boardai.game.board import Board
from boardai.game.rules import Move, Rules
from boardai.game.session import GameSession
from boardai.game.trio import TrioGame

__all__ = ['Board', 'Move', 'Rules', 'GameSession', 'TrioGame']
