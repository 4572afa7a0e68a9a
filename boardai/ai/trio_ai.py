"""
trio_ai.py - Computer opponent for the Trio puzzle

The AI collects a handful of solutions for the current board, scores them by
how "natural" they are for a person to spot and picks one according to its
difficulty:
- easy: finds 1 solution
- medium: finds up to 3, picks among the best quarter
- hard: finds up to 5, always plays the best
"""

import math
from itertools import combinations
from typing import Dict, List, Optional, Tuple

import numpy as np

from boardai.debug import debug
from boardai.game.trio import TrioGame, TrioSolution

SEARCH_LIMITS = {
    'easy': 1,
    'medium': 3,
    'hard': 5,
}


class TrioAI:
    """Picks a Trio solution for the current board."""

    def __init__(self, difficulty: str = 'medium', seed: Optional[int] = None):
        """
        Args:
            difficulty: 'easy', 'medium' or 'hard' (unknown values play as medium)
            seed: Seed for the tie-break noise in scoring
        """
        self.difficulty = difficulty
        self.max_solutions = SEARCH_LIMITS.get(difficulty, SEARCH_LIMITS['medium'])
        self._rng = np.random.default_rng(seed)
        self._cache: Dict[Tuple[int, bytes], Optional[TrioSolution]] = {}

    @staticmethod
    def position_distance(solution: TrioSolution) -> float:
        """Mean Euclidean distance between the three cells."""
        pairs = list(combinations(solution.positions, 2))
        total = sum(math.hypot(r1 - r2, c1 - c2) for (r1, c1), (r2, c2) in pairs)
        return total / len(pairs)

    def score_solution(self, solution: TrioSolution) -> float:
        """
        Higher is easier to spot: addition over subtraction, small numbers,
        cells close together, plus a little noise so play is not predictable.
        """
        score = 10.0 if solution.operation == '+' else 5.0
        score += max(0.0, 10 - sum(solution.numbers) / 3)
        score += max(0.0, 10 - self.position_distance(solution))
        score += float(self._rng.random()) * 3
        return score

    def find_best_solution(self, game: TrioGame) -> Optional[TrioSolution]:
        """
        Choose a solution for the game's current board.

        Returns:
            A solution, or None when the board has none
        """
        key = (game.target, game.grid.tobytes())
        if key in self._cache:
            return self._cache[key]

        with debug.timer("trio_search", "trio"):
            solutions = game.find_solutions(limit=self.max_solutions)

        if not solutions:
            debug.debug(f"No solution for target {game.target}", "trio")
            self._cache[key] = None
            return None

        ranked: List[Tuple[float, TrioSolution]] = sorted(
            ((self.score_solution(s), s) for s in solutions), key=lambda item: -item[0])

        if self.difficulty == 'easy':
            pool = math.ceil(len(ranked) / 2)
        elif self.difficulty == 'medium':
            pool = math.ceil(len(ranked) / 4)
        else:
            pool = 1
        choice = ranked[int(self._rng.integers(pool))][1]

        self._cache[key] = choice
        return choice

    def make_move(self, game: TrioGame) -> Optional[TrioSolution]:
        """
        Claim a solution for the player to move.

        Returns:
            The claimed solution, or None if none was found (the game is
            left unchanged in that case)
        """
        solution = self.find_best_solution(game)
        if solution is None:
            return None
        game.claim(solution.positions)
        return solution

    def __repr__(self) -> str:
        return f"TrioAI({self.difficulty})"
