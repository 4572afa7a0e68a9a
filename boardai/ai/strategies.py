"""
strategies.py - Search strategy interface, budgets and the simple strategies

Every AI "personality" is a SearchStrategy selected by name from the game
configuration. A strategy looks at a session and recommends an action, or
None when it could not produce one within its budget. Strategies never see
the live session; the orchestrator hands them a clone.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Type

import numpy as np

from boardai.ai.evaluator import MoveEvaluator
from boardai.config import GameConfig
from boardai.errors import ConfigError
from boardai.utils import Action


class SearchBudgetExhausted(Exception):
    """Raised inside a search when its node or time budget runs out. Never leaves a strategy."""


class SearchBudget:
    """
    Wall-clock and node-count limits for one search.

    ``charge()`` is called once per node and raises SearchBudgetExhausted as
    soon as either limit is reached.
    """

    def __init__(self, time_budget: Optional[float] = None, max_nodes: Optional[int] = None):
        self.started = time.perf_counter()
        self.deadline = None if time_budget is None else self.started + time_budget
        self.max_nodes = max_nodes
        self.nodes = 0

    def expired(self) -> bool:
        if self.max_nodes is not None and self.nodes >= self.max_nodes:
            return True
        return self.deadline is not None and time.perf_counter() >= self.deadline

    def charge(self):
        if self.expired():
            raise SearchBudgetExhausted()
        self.nodes += 1

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self.started


@dataclass
class MoveStats:
    """Rollout tally for one candidate move (Monte Carlo)."""
    action: Action
    wins: int = 0
    draws: int = 0
    losses: int = 0
    heuristic: float = 0.0

    @property
    def rollouts(self) -> int:
        return self.wins + self.draws + self.losses

    @property
    def win_rate(self) -> float:
        return self.wins / self.rollouts if self.rollouts else -1.0


@dataclass
class SearchStats:
    """What the last search did."""
    strategy: str
    nodes: int = 0
    rollouts: int = 0
    depth_reached: int = 0
    elapsed: float = 0.0
    budget_exhausted: bool = False
    best_score: Optional[float] = None
    moves: List[MoveStats] = field(default_factory=list)


class SearchStrategy(ABC):
    """Base class for move recommendation algorithms."""

    name = 'base'

    def __init__(self):
        self.stats = SearchStats(strategy=self.name)
        self._rng: Optional[np.random.Generator] = None

    def rng(self, config: GameConfig) -> np.random.Generator:
        """Generator seeded from the config on first use, then reused across moves."""
        if self._rng is None:
            self._rng = np.random.default_rng(config.seed)
        return self._rng

    @abstractmethod
    def best_move(self, session, config: GameConfig) -> Optional[Action]:
        """
        Recommend an action for the player to move.

        Args:
            session: A GameSession the strategy may mutate (a search clone)
            config: Search settings (depth, rollouts, budgets, seed)

        Returns:
            A legal action, or None if no move could be produced
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RandomStrategy(SearchStrategy):
    """Uniformly random legal move."""

    name = 'random'

    def best_move(self, session, config: GameConfig) -> Optional[Action]:
        self.stats = SearchStats(strategy=self.name)
        moves = session.legal_moves()
        if not moves:
            return None
        return moves[int(self.rng(config).integers(len(moves)))]


class HeuristicStrategy(SearchStrategy):
    """One-ply greedy: the move after which the static evaluation is best."""

    name = 'heuristic'

    def best_move(self, session, config: GameConfig) -> Optional[Action]:
        self.stats = SearchStats(strategy=self.name)
        budget = SearchBudget(config.time_budget, config.max_nodes)
        if session.is_game_over() or budget.expired():
            self.stats.budget_exhausted = not session.is_game_over()
            return None

        evaluator = MoveEvaluator(session.rules)
        candidates = session.rules.candidate_moves(session.board, config.candidate_radius)
        ranked = evaluator.rank_moves(session, candidates)
        self.stats.nodes = len(ranked)
        self.stats.elapsed = budget.elapsed
        if not ranked:
            return None

        best_score = max(value for _, value in ranked)
        tied = [action for action, value in ranked if value == best_score]
        self.stats.best_score = best_score
        return tied[int(self.rng(config).integers(len(tied)))]


def strategy_registry() -> Dict[str, Type[SearchStrategy]]:
    """Map of strategy names to classes."""
    # imported here because the search modules import this one
    from boardai.ai.minimax import MinimaxStrategy
    from boardai.ai.monte_carlo import MonteCarloStrategy

    return {
        RandomStrategy.name: RandomStrategy,
        HeuristicStrategy.name: HeuristicStrategy,
        MinimaxStrategy.name: MinimaxStrategy,
        MonteCarloStrategy.name: MonteCarloStrategy,
    }


def create_strategy(name: str) -> SearchStrategy:
    """
    Instantiate a strategy by name.

    Raises:
        ConfigError: If the name is unknown
    """
    registry = strategy_registry()
    if name not in registry:
        raise ConfigError(f"Unknown strategy '{name}', expected one of {tuple(registry)}")
    return registry[name]()
