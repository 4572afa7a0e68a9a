"""
errors.py - Exception types raised by the boardai engine
"""

from typing import Optional


class BoardAIError(Exception):
    """Base class for all engine errors."""


class IllegalMove(BoardAIError):
    """
    A move was rejected by the rules engine.

    ``reason`` is one of ``out_of_range``, ``occupied``, ``column_full``,
    ``game_over`` or ``bad_action``.
    """

    def __init__(self, message: str, reason: str, action=None):
        super().__init__(message)
        self.reason = reason
        self.action = action


class EmptyHistory(BoardAIError):
    """Undo was requested with no move in the history."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "No moves to undo")


class ConfigError(BoardAIError, ValueError):
    """Invalid game or AI configuration."""
