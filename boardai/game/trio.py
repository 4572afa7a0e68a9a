"""
trio.py - The Trio number puzzle

Trio is played on a 7x7 grid of numbers 1-9. Players race to find three
different cells whose numbers a, b, c satisfy a*b+c == target or
a*b-c == target. A correct claim scores a chip and deals a new board.

The number distribution and the target range depend on the difficulty:
1. kinderfreundlich: many small numbers, targets 3-15
2. vollspektrum: balanced numbers, targets 5-25
3. strategisch: more medium and large numbers, targets 10-40
4. analytisch: mostly large numbers, targets 15-60
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from boardai.debug import debug
from boardai.utils import Cell, Player

TRIO_ROWS = 7
TRIO_COLS = 7

DIFFICULTY_NAMES = {
    1: 'kinderfreundlich',
    2: 'vollspektrum',
    3: 'strategisch',
    4: 'analytisch',
}

# How many of each number 1-9 go into the 49-card deck
NUMBER_COUNTS = {
    1: (8, 8, 6, 6, 5, 4, 3, 2, 1),
    2: (5, 5, 5, 5, 9, 5, 5, 5, 5),
    3: (3, 4, 5, 6, 7, 6, 6, 6, 6),
    4: (2, 3, 4, 5, 5, 6, 7, 8, 9),
}

TARGET_RANGES = {
    1: (3, 15),
    2: (5, 25),
    3: (10, 40),
    4: (15, 60),
}

DEFAULT_DIFFICULTY = 2


def difficulty_to_number(difficulty: Union[int, str]) -> int:
    """Map a difficulty name or number to 1-4 (unknown values mean vollspektrum)."""
    if isinstance(difficulty, str):
        for number, name in DIFFICULTY_NAMES.items():
            if name == difficulty.lower():
                return number
        return DEFAULT_DIFFICULTY
    return difficulty if difficulty in DIFFICULTY_NAMES else DEFAULT_DIFFICULTY


def difficulty_to_string(difficulty: int) -> str:
    return DIFFICULTY_NAMES.get(difficulty, DIFFICULTY_NAMES[DEFAULT_DIFFICULTY])


@dataclass(frozen=True)
class TrioSolution:
    """Three cells and the formula they make."""
    positions: Tuple[Cell, Cell, Cell]
    numbers: Tuple[int, int, int]
    operation: str  # '+' or '-'
    result: int

    @property
    def formula(self) -> str:
        a, b, c = self.numbers
        return f"{a} x {b} {self.operation} {c} = {self.result}"


class TrioGame:
    """
    A two-player Trio game.

    Attributes:
        difficulty: Difficulty level 1-4
        grid: 7x7 numpy array of numbers 1-9
        target: Number the current round asks for
        scores: Chips won per player
    """

    def __init__(self, difficulty: Union[int, str] = DEFAULT_DIFFICULTY, seed: Optional[int] = None):
        """
        Initialize a new game and deal the first board.

        Args:
            difficulty: Level 1-4 or its name
            seed: Seed for board generation (None for a random game)
        """
        self._rng = np.random.default_rng(seed)
        self.difficulty = difficulty_to_number(difficulty)
        self.grid = np.ones((TRIO_ROWS, TRIO_COLS), dtype=np.int8)
        self.target = 0
        self.scores: Dict[Player, int] = {Player.ONE: 0, Player.TWO: 0}
        self.current_player = Player.ONE
        self.claimed: List[Tuple[Player, TrioSolution]] = []
        self.new_board()

    def new_board(self, difficulty: Optional[Union[int, str]] = None) -> int:
        """
        Deal a fresh grid and target.

        Args:
            difficulty: New difficulty, or None to keep the current one

        Returns:
            The new target number
        """
        if difficulty is not None:
            self.difficulty = difficulty_to_number(difficulty)

        deck = np.repeat(np.arange(1, 10), NUMBER_COUNTS[self.difficulty])
        self._rng.shuffle(deck)
        cells = np.ones(TRIO_ROWS * TRIO_COLS, dtype=np.int8)  # short decks are padded with 1s
        count = min(len(deck), cells.size)
        cells[:count] = deck[:count]
        self.grid = cells.reshape(TRIO_ROWS, TRIO_COLS)

        low, high = TARGET_RANGES[self.difficulty]
        self.target = int(self._rng.integers(low, high, endpoint=True))
        debug.debug(f"New {difficulty_to_string(self.difficulty)} board, target {self.target}", "trio")
        return self.target

    def number_at(self, cell: Cell) -> int:
        row, col = cell
        if not (0 <= row < TRIO_ROWS and 0 <= col < TRIO_COLS):
            raise ValueError(f"Cell {cell} is outside the {TRIO_ROWS}x{TRIO_COLS} grid")
        return int(self.grid[row, col])

    def check(self, p1: Cell, p2: Cell, p3: Cell) -> Optional[TrioSolution]:
        """The solution formed by three cells (in order a, b, c), or None."""
        positions = (tuple(p1), tuple(p2), tuple(p3))
        if len(set(positions)) != 3:
            return None
        a, b, c = (self.number_at(cell) for cell in positions)
        if a * b + c == self.target:
            return TrioSolution(positions, (a, b, c), '+', self.target)
        if a * b - c == self.target:
            return TrioSolution(positions, (a, b, c), '-', self.target)
        return None

    def validate_trio(self, p1: Cell, p2: Cell, p3: Cell) -> Optional[int]:
        """
        Check a trio against the target.

        Args:
            p1, p2, p3: The cells holding a, b and c

        Returns:
            The target if a*b+c or a*b-c hits it, None otherwise (also for
            repeated cells)

        Raises:
            ValueError: If a cell is off the grid
        """
        solution = self.check(p1, p2, p3)
        return None if solution is None else solution.result

    def find_solutions(self, limit: Optional[int] = None) -> List[TrioSolution]:
        """
        Every ordered trio of distinct cells that hits the target.

        Cells are enumerated row-major for a, then b, then c.

        Args:
            limit: Stop after this many solutions (None for all)
        """
        values = self.grid.ravel().astype(np.int32)
        size = values.size
        product = np.multiply.outer(values, values)[:, :, None]
        plus = product + values[None, None, :] == self.target
        minus = product - values[None, None, :] == self.target

        index = np.arange(size)
        distinct = ((index[:, None, None] != index[None, :, None])
                    & (index[:, None, None] != index[None, None, :])
                    & (index[None, :, None] != index[None, None, :]))

        hits = np.argwhere((plus | minus) & distinct)
        if limit is not None:
            hits = hits[:limit]

        solutions = []
        for i, j, k in hits:
            cells = tuple(divmod(int(n), TRIO_COLS) for n in (i, j, k))
            operation = '+' if plus[i, j, k] else '-'
            numbers = (int(values[i]), int(values[j]), int(values[k]))
            solutions.append(TrioSolution(cells, numbers, operation, self.target))
        return solutions

    def claim(self, positions: Sequence[Cell]) -> bool:
        """
        The current player claims a trio.

        A correct claim earns a chip and deals a new board. The turn passes
        to the other player either way.

        Returns:
            True if the claim was correct
        """
        if len(positions) != 3:
            raise ValueError(f"A trio needs exactly 3 cells, got {len(positions)}")

        player = self.current_player
        solution = self.check(*positions)
        self.current_player = player.other()

        if solution is None:
            debug.debug(f"{player.name} claimed an invalid trio {list(positions)}", "trio")
            return False

        self.scores[player] += 1
        self.claimed.append((player, solution))
        debug.info(f"{player.name} found {solution.formula}", "trio")
        self.new_board()
        return True

    def leader(self) -> Optional[Player]:
        """Player with more chips, None on a tie."""
        one, two = self.scores[Player.ONE], self.scores[Player.TWO]
        if one == two:
            return None
        return Player.ONE if one > two else Player.TWO

    def render(self, highlight: Sequence[Cell] = ()) -> str:
        """Grid as text, highlighted cells in brackets."""
        marked = {tuple(cell) for cell in highlight}
        lines = [f"Target: {self.target}"]
        for row in range(TRIO_ROWS):
            cells = []
            for col in range(TRIO_COLS):
                value = int(self.grid[row, col])
                cells.append(f"[{value}]" if (row, col) in marked else f" {value} ")
            lines.append("".join(cells) + f"  {row}")
        lines.append("".join(f" {col} " for col in range(TRIO_COLS)))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (f"TrioGame({difficulty_to_string(self.difficulty)}, target={self.target}, "
                f"scores={self.scores[Player.ONE]}-{self.scores[Player.TWO]})")
