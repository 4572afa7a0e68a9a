"""
monte_carlo.py - Monte Carlo rollout search

Used for the large-branching variants (Gomoku) where a full-width tree search
is out of reach. For every candidate move the strategy plays rollout_count
random games to the end from the position after that move and tallies
wins, draws and losses for the mover.

Each candidate gets its own numpy Generator seeded from (seed, move index),
so a fixed seed gives the same answer whether the moves are simulated one
after another or spread over a thread pool.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np

from boardai.ai.evaluator import MoveEvaluator
from boardai.ai.strategies import MoveStats, SearchBudget, SearchStats, SearchStrategy
from boardai.config import GameConfig
from boardai.debug import debug
from boardai.utils import Action, Player, format_action


class MonteCarloStrategy(SearchStrategy):
    """Flat Monte Carlo: random playouts per candidate move, best win rate wins."""

    name = 'monte_carlo'

    def best_move(self, session, config: GameConfig) -> Optional[Action]:
        """
        Get the move with the best rollout win rate.

        Args:
            session: A search clone of the game (left unchanged)
            config: Uses rollout_count, rollout_time_budget, time_budget,
                candidate_radius, seed and workers

        Returns:
            The best action, or None if no rollout could be played
        """
        self.stats = SearchStats(strategy=self.name)
        if session.is_game_over() or config.rollout_count <= 0:
            return None

        moves = session.rules.candidate_moves(session.board, config.candidate_radius)
        if not moves:
            return None

        per_move_budget = config.rollout_time_budget
        if per_move_budget is None and config.time_budget is not None:
            per_move_budget = config.time_budget / len(moves)

        evaluator = MoveEvaluator(session.rules)
        heuristics = dict(evaluator.rank_moves(session, moves))
        mover = session.current_player
        base_seed = config.seed

        def simulate(index: int) -> MoveStats:
            action = moves[index]
            rng = np.random.default_rng(None if base_seed is None else [base_seed, index])
            work = session.clone_for_search()
            stats = MoveStats(action=action, heuristic=heuristics[action])
            self._simulate_move(work, action, mover, config.rollout_count,
                                SearchBudget(per_move_budget), rng, stats)
            return stats

        debug.start_timer("monte_carlo")
        if config.workers > 1 and len(moves) > 1:
            with ThreadPoolExecutor(max_workers=config.workers) as pool:
                results = list(pool.map(simulate, range(len(moves))))
        else:
            results = [simulate(index) for index in range(len(moves))]
        elapsed = debug.end_timer("monte_carlo", "mcts")

        self.stats.moves = results
        self.stats.rollouts = sum(stats.rollouts for stats in results)
        self.stats.nodes = len(results)
        self.stats.elapsed = elapsed or 0.0
        self.stats.budget_exhausted = any(stats.rollouts < config.rollout_count for stats in results)

        played = [stats for stats in results if stats.rollouts > 0]
        if not played:
            debug.debug("No rollouts completed within the budget", "mcts")
            return None

        # max() keeps the first of equal keys, so exact ties go to the earlier candidate
        best = max(played, key=lambda stats: (stats.win_rate, stats.rollouts, stats.heuristic))
        self.stats.best_score = best.win_rate
        debug.debug(f"Monte Carlo picks {format_action(best.action)}: {best.wins}/{best.rollouts} wins "
                    f"over {len(moves)} candidates ({self.stats.rollouts} rollouts)", "mcts")
        return best.action

    def _simulate_move(self, work, action: Action, mover: Player, count: int,
                       budget: SearchBudget, rng: np.random.Generator, stats: MoveStats):
        """Play ``action`` on ``work`` and run up to ``count`` rollouts from there."""
        result = work.apply(action)
        if result.is_game_over():
            # every rollout from a finished game ends the same way
            if budget.expired():
                return
            if result.winner == mover:
                stats.wins = count
            elif result.winner is None:
                stats.draws = count
            else:
                stats.losses = count
            return

        for _ in range(count):
            if budget.expired():
                break
            winner = self._rollout(work, rng)
            if winner == mover:
                stats.wins += 1
            elif winner is None:
                stats.draws += 1
            else:
                stats.losses += 1

        debug.trace(f"{format_action(action)}: {stats.wins}W {stats.draws}D {stats.losses}L", "mcts")

    def _rollout(self, work, rng: np.random.Generator) -> Optional[Player]:
        """
        Play random moves until the game ends, then take them all back.

        Returns:
            The winner of the playout, or None for a draw
        """
        played = 0
        try:
            if work.rules.gravity:
                while not work.is_game_over():
                    moves = work.legal_moves()
                    work.apply(moves[int(rng.integers(len(moves)))])
                    played += 1
            else:
                cells = work.board.empty_cells()
                for index in rng.permutation(len(cells)):
                    work.apply(cells[index])
                    played += 1
                    if work.is_game_over():
                        break
            return work.winner()
        finally:
            for _ in range(played):
                work.undo()
