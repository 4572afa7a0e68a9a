"""
minimax.py - Minimax search with alpha-beta pruning

This module provides MinimaxStrategy, the search used for games with a small
branching factor (Connect Four). It searches the game tree with iterative
deepening up to the configured depth:
1. Moves are ordered center-first (previous best move first at the root)
2. Leaves are scored with the shared MoveEvaluator
3. Wins score WIN_SCORE plus the remaining depth, so faster wins are preferred
4. A node or time budget stops the search; the best move found so far wins
"""

import math
from typing import List, Optional, Tuple

from boardai.ai.evaluator import MoveEvaluator
from boardai.ai.strategies import (SearchBudget, SearchBudgetExhausted, SearchStats,
                                   SearchStrategy)
from boardai.config import GameConfig
from boardai.debug import debug
from boardai.utils import Action, Player, format_action

WIN_SCORE = 10_000_000


class MinimaxStrategy(SearchStrategy):
    """
    Alpha-beta minimax.

    The search mutates the session it is given (make move, recurse, undo), so
    it must be handed a clone. When the budget runs out in the middle of an
    iteration the clone is simply abandoned.
    """

    name = 'minimax'

    def best_move(self, session, config: GameConfig) -> Optional[Action]:
        """
        Get the best move for the current player.

        Args:
            session: A search clone of the game
            config: Uses search_depth, time_budget, max_nodes, candidate_radius

        Returns:
            The best action, or None if depth is 0, the budget allowed no
            search at all, or the game is over
        """
        self.stats = SearchStats(strategy=self.name)
        budget = SearchBudget(config.time_budget, config.max_nodes)

        if session.is_game_over() or config.search_depth <= 0:
            return None

        evaluator = MoveEvaluator(session.rules)
        maximizing_player = session.current_player
        best_action: Optional[Action] = None
        best_score = -math.inf

        try:
            for depth in range(1, config.search_depth + 1):
                partial: List[Tuple[Action, float]] = []
                try:
                    best_action, best_score = self._search_root(
                        session, depth, budget, evaluator, maximizing_player,
                        config.candidate_radius, best_action, partial)
                except SearchBudgetExhausted:
                    if partial:
                        # the previous best is searched first, so any partial result includes it
                        best_action, best_score = max(partial, key=lambda item: item[1])
                    raise
                self.stats.depth_reached = depth
                debug.trace(f"Depth {depth}: best {format_action(best_action)} "
                            f"score {best_score:.1f}, nodes {budget.nodes}", "search")
                if abs(best_score) >= WIN_SCORE:
                    break  # forced result found, deeper search cannot change it
        except SearchBudgetExhausted:
            self.stats.budget_exhausted = True
            debug.debug(f"Search budget exhausted after {budget.nodes} nodes "
                        f"({budget.elapsed:.3f}s)", "search")

        self.stats.nodes = budget.nodes
        self.stats.elapsed = budget.elapsed
        if best_action is not None:
            self.stats.best_score = best_score
            debug.debug(f"Minimax picks {format_action(best_action)} (score {best_score:.1f}, "
                        f"depth {self.stats.depth_reached}, {budget.nodes} nodes, "
                        f"{budget.elapsed:.3f}s)", "search")
        return best_action

    def _search_root(self, session, depth: int, budget: SearchBudget,
                     evaluator: MoveEvaluator, maximizing_player: Player, radius: int,
                     previous_best: Optional[Action],
                     partial: List[Tuple[Action, float]]) -> Tuple[Action, float]:
        """One full-width iteration at a fixed depth. Fully searched root moves go into ``partial``."""
        budget.charge()
        moves = session.rules.candidate_moves(session.board, radius)
        if previous_best in moves:
            moves.remove(previous_best)
            moves.insert(0, previous_best)

        best_score = -math.inf
        best_action = moves[0]
        alpha = -math.inf
        beta = math.inf

        for action in moves:
            session.apply(action)
            score = self._minimax(session, depth - 1, alpha, beta, False,
                                  maximizing_player, budget, evaluator, radius)
            session.undo()
            partial.append((action, score))

            if score > best_score:
                best_score = score
                best_action = action
            alpha = max(alpha, score)

        return best_action, best_score

    def _minimax(self, session, depth: int, alpha: float, beta: float,
                 is_maximizing: bool, maximizing_player: Player, budget: SearchBudget,
                 evaluator: MoveEvaluator, radius: int) -> float:
        """
        Minimax with alpha-beta pruning.

        Args:
            session: Current position
            depth: Remaining search depth
            alpha: Best score the maximizer can guarantee
            beta: Best score the minimizer can guarantee
            is_maximizing: True if maximizing_player is to move
            maximizing_player: The player we are finding a move for

        Returns:
            The evaluation of this position for maximizing_player
        """
        budget.charge()

        result = session.result
        if result.is_game_over():
            winner = result.winner
            if winner is None:
                return 0.0
            if winner == maximizing_player:
                return WIN_SCORE + depth  # prefer faster wins
            return -WIN_SCORE - depth

        if depth == 0:
            return evaluator.score(session.board, maximizing_player)

        moves = session.rules.candidate_moves(session.board, radius)

        if is_maximizing:
            max_score = -math.inf
            for action in moves:
                session.apply(action)
                score = self._minimax(session, depth - 1, alpha, beta, False,
                                      maximizing_player, budget, evaluator, radius)
                session.undo()

                max_score = max(max_score, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break  # beta cutoff
            return max_score

        min_score = math.inf
        for action in moves:
            session.apply(action)
            score = self._minimax(session, depth - 1, alpha, beta, True,
                                  maximizing_player, budget, evaluator, radius)
            session.undo()

            min_score = min(min_score, score)
            beta = min(beta, score)
            if beta <= alpha:
                break  # alpha cutoff
        return min_score
