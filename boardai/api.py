"""
api.py - Entry points for user interfaces

Every function takes the session it works on; there is no module-level game
state. Moves are reported back as MoveResult values instead of exceptions so
a UI can render rejected moves without try/except around every click.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from boardai.ai.orchestrator import AIOrchestrator, AIStage
from boardai.config import GameConfig, make_config
from boardai.debug import debug
from boardai.errors import EmptyHistory, IllegalMove
from boardai.game.session import GameSession
from boardai.utils import Action, GameResult, format_action


@dataclass(frozen=True)
class MoveResult:
    """
    Outcome of a move request.

    Attributes:
        accepted: Whether the move (or undo) was carried out
        terminal: Game result after the request
        action: The action that was played or undone
        error: Reason code when rejected (an IllegalMove reason, or
            'empty_history')
        message: Human readable explanation of the rejection
        double_threat: The AI faced two or more immediate threats
        stage: Pipeline stage that chose an AI move
    """
    accepted: bool
    terminal: GameResult
    action: Optional[Action] = None
    error: Optional[str] = None
    message: Optional[str] = None
    double_threat: bool = False
    stage: Optional[AIStage] = None


def new_session(variant: str = 'connect4', config: Optional[GameConfig] = None,
                **overrides) -> GameSession:
    """
    Start a new game with an AI opponent attached.

    Args:
        variant: Variant preset ('connect4' or 'gomoku')
        config: Complete configuration to use instead of the preset
        **overrides: Config fields, e.g. difficulty='hard', seed=7

    Returns:
        The new session

    Raises:
        ConfigError: Unknown variant or invalid settings
    """
    if config is None:
        config = make_config(variant, **overrides)
    elif overrides:
        config = config.with_overrides(**overrides)

    session = GameSession(config)
    session.opponent = AIOrchestrator(config)
    debug.info(f"New {config.variant} session ({config.rows}x{config.cols}, "
               f"{config.strategy}/{config.difficulty})", "session")
    return session


def apply_human_move(session: GameSession, action) -> MoveResult:
    """Play ``action`` for the player to move; illegal moves come back rejected."""
    try:
        result = session.apply(action)
    except IllegalMove as exc:
        debug.debug(f"Rejected move {action!r}: {exc}", "session")
        return MoveResult(False, session.result, action, exc.reason, str(exc))
    return MoveResult(True, result, session.last_move.action)


def request_ai_move(session: GameSession) -> MoveResult:
    """
    Let the AI choose and play a move for the player to move.

    A finished game is reported as rejected with error 'game_over'.
    """
    if session.is_game_over():
        return MoveResult(False, session.result, error='game_over',
                          message=f"Game is already over ({session.result.name})")

    if session.opponent is None:
        session.opponent = AIOrchestrator(session.config)

    with debug.timer("request_ai_move", "ai"):
        decision = session.opponent.choose(session)
    result = session.apply(decision.action)
    debug.info(f"AI ({session.last_move.player.name}) plays {format_action(decision.action)} "
               f"[{decision.stage.name}]", "ai")
    return MoveResult(True, result, decision.action,
                      double_threat=decision.double_threat, stage=decision.stage)


def get_board_snapshot(session: GameSession) -> np.ndarray:
    """Read-only copy of the grid for rendering."""
    return session.snapshot()


def undo(session: GameSession) -> MoveResult:
    """Take back the last move; an empty history comes back rejected."""
    try:
        move = session.undo()
    except EmptyHistory as exc:
        return MoveResult(False, session.result, error='empty_history', message=str(exc))
    return MoveResult(True, session.result, move.action)


def reset(session: GameSession) -> None:
    """Clear the board and start over with the configured starting player."""
    session.reset()
