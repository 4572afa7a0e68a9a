"""
orchestrator.py - The AI move pipeline

AIOrchestrator decides the AI's move in four stages, stopping at the first
one that produces an answer:
1. WIN: play a move that wins immediately
2. BLOCK: play the move that stops the opponent's immediate win
3. SEARCH: ask the configured search strategy
4. FALLBACK: the best evaluated move that does not give the opponent an
   immediate win (ties broken at random)

Stage 4 always produces a move on a game that is not over, so the AI never
passes even when search is disabled or runs out of budget.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

from boardai.ai.evaluator import MoveEvaluator
from boardai.ai.strategies import SearchStats, SearchStrategy, create_strategy
from boardai.config import GameConfig
from boardai.debug import debug
from boardai.errors import IllegalMove
from boardai.utils import Action, format_action


class AIStage(Enum):
    """Pipeline stage that produced a decision."""
    WIN = 1
    BLOCK = 2
    SEARCH = 3
    FALLBACK = 4


@dataclass
class AIDecision:
    """
    The AI's chosen move and how it got there.

    Attributes:
        action: The move to play
        stage: Pipeline stage that chose it
        double_threat: True when the opponent had two or more immediate wins
        stats: Statistics of the search, if stage 3 ran
    """
    action: Action
    stage: AIStage
    double_threat: bool = False
    stats: Optional[SearchStats] = None


class AIOrchestrator:
    """Runs the stage pipeline for one game configuration."""

    def __init__(self, config: GameConfig, strategy: Optional[SearchStrategy] = None):
        """
        Args:
            config: Game configuration (strategy name, budgets, seed, policy)
            strategy: Strategy instance to use instead of config.strategy
        """
        self.config = config
        self.strategy = strategy if strategy is not None else create_strategy(config.strategy)
        self._rng = np.random.default_rng(config.seed)
        debug.debug(f"AIOrchestrator using {self.strategy.name} ({config.difficulty})", "ai")

    def choose(self, session) -> AIDecision:
        """
        Decide the move for the player to move. The session is not modified.

        Raises:
            IllegalMove: If the game is already over
        """
        if session.is_game_over():
            raise IllegalMove(f"Game is already over ({session.result.name})", "game_over")

        player = session.current_player
        rules = session.rules
        work = session.clone_for_search()

        # Stage 1: win now
        wins = rules.winning_actions(work.board, player)
        if wins:
            return self._decide(AIDecision(wins[0], AIStage.WIN))

        # Stage 2: block the opponent's win
        threats = rules.winning_actions(work.board, player.other())
        double_threat = len(threats) > 1
        if threats:
            if double_threat:
                debug.info(f"{player.name} faces {len(threats)} immediate threats: "
                           f"{', '.join(format_action(a) for a in threats)}", "ai")
            if not double_threat or self.config.double_threat_policy == 'block_first':
                return self._decide(AIDecision(threats[0], AIStage.BLOCK, double_threat))

        # Stage 3: search
        action = self.strategy.best_move(work, self.config)
        stats = self.strategy.stats
        if action is not None and session.is_legal(action):
            return self._decide(AIDecision(rules.normalize(action), AIStage.SEARCH, double_threat, stats))
        if action is not None:
            debug.warning(f"{self.strategy.name} returned illegal move {action!r}, ignoring it", "ai")

        # Stage 4: fallback
        action = self._fallback(session)
        return self._decide(AIDecision(action, AIStage.FALLBACK, double_threat, stats))

    def _fallback(self, session) -> Action:
        """Best evaluated safe move, random among equals."""
        rules = session.rules
        moves = session.legal_moves()
        safe = self.safe_moves(session, moves)
        candidates = safe or moves

        ranked = MoveEvaluator(rules).rank_moves(session, candidates)
        best_score = max(value for _, value in ranked)
        tied = [action for action, value in ranked if value == best_score]
        return tied[int(self._rng.integers(len(tied)))]

    def safe_moves(self, session, moves: Optional[List[Action]] = None) -> List[Action]:
        """
        Moves after which the opponent has no immediate win.

        Only gravity games are filtered: there a move can open the cell above
        it for the opponent. On free-placement boards a move never creates a
        new winning cell for the other side.
        """
        if moves is None:
            moves = session.legal_moves()
        if not session.rules.gravity:
            return list(moves)

        work = session.clone_for_search()
        opponent = work.current_player.other()
        safe = []
        for action in moves:
            work.apply(action)
            if work.is_game_over() or not work.rules.winning_actions(work.board, opponent):
                safe.append(action)
            work.undo()
        return safe

    def _decide(self, decision: AIDecision) -> AIDecision:
        debug.debug(f"AI stage {decision.stage.name}: {format_action(decision.action)}"
                    + (" (double threat)" if decision.double_threat else ""), "ai")
        return decision

    def __repr__(self) -> str:
        return f"AIOrchestrator(strategy={self.strategy.name}, difficulty={self.config.difficulty})"
