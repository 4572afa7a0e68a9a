"""
config.py - Game variants, difficulty presets and session configuration

A GameConfig fully describes one session: board geometry, rules, who starts
and how the AI opponent searches. Use make_config() to build one from a
variant preset plus overrides; it validates the combination.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from boardai.errors import ConfigError
from boardai.utils import Player

# Board geometry and default AI per variant
VARIANTS: Dict[str, Dict[str, Any]] = {
    'connect4': {
        'rows': 6,
        'cols': 7,
        'win_length': 4,
        'gravity': True,
        'strategy': 'minimax',
    },
    'gomoku': {
        'rows': 15,
        'cols': 15,
        'win_length': 5,
        'gravity': False,
        'strategy': 'monte_carlo',
    },
}

# Search effort per difficulty
DIFFICULTY: Dict[str, Dict[str, int]] = {
    'easy': {'search_depth': 1, 'rollout_count': 50},
    'medium': {'search_depth': 3, 'rollout_count': 200},
    'hard': {'search_depth': 5, 'rollout_count': 500},
    'expert': {'search_depth': 7, 'rollout_count': 1000},
}

STRATEGY_NAMES = ('random', 'heuristic', 'minimax', 'monte_carlo')
DOUBLE_THREAT_POLICIES = ('block_first', 'search')


@dataclass(frozen=True)
class GameConfig:
    """Configuration for a single game session and its AI opponent."""

    variant: str = 'connect4'
    rows: int = 6
    cols: int = 7
    win_length: int = 4
    gravity: bool = True
    starting_player: Player = Player.ONE

    # AI
    strategy: str = 'minimax'
    difficulty: str = 'medium'
    search_depth: int = 3
    rollout_count: int = 200
    time_budget: Optional[float] = 2.0        # seconds for one whole search, None = unbounded
    max_nodes: Optional[int] = None           # minimax node budget, None = unbounded
    rollout_time_budget: Optional[float] = None  # seconds of rollouts per candidate move
    candidate_radius: int = 1                 # free placement: search cells near stones only
    seed: Optional[int] = None
    workers: int = 1
    double_threat_policy: str = 'block_first'

    def validate(self) -> 'GameConfig':
        if self.rows < 1 or self.cols < 1:
            raise ConfigError(f"Board must have at least one cell, got {self.rows}x{self.cols}")
        if self.win_length < 2:
            raise ConfigError(f"win_length must be >= 2, got {self.win_length}")
        if self.win_length > max(self.rows, self.cols):
            raise ConfigError(
                f"win_length {self.win_length} does not fit on a {self.rows}x{self.cols} board")
        if self.starting_player not in (Player.ONE, Player.TWO):
            raise ConfigError("starting_player must be Player.ONE or Player.TWO")
        if self.strategy not in STRATEGY_NAMES:
            raise ConfigError(f"Unknown strategy '{self.strategy}', expected one of {STRATEGY_NAMES}")
        if self.difficulty not in DIFFICULTY:
            raise ConfigError(f"Unknown difficulty '{self.difficulty}'")
        if self.search_depth < 0:
            raise ConfigError("search_depth must be >= 0")
        if self.rollout_count < 0:
            raise ConfigError("rollout_count must be >= 0")
        if self.time_budget is not None and self.time_budget < 0:
            raise ConfigError("time_budget must be >= 0")
        if self.max_nodes is not None and self.max_nodes < 0:
            raise ConfigError("max_nodes must be >= 0")
        if self.workers < 1:
            raise ConfigError("workers must be >= 1")
        if self.double_threat_policy not in DOUBLE_THREAT_POLICIES:
            raise ConfigError(f"Unknown double_threat_policy '{self.double_threat_policy}'")
        return self

    def with_overrides(self, **overrides) -> 'GameConfig':
        return make_config(self.variant, base=self, **overrides)


def make_config(variant: str = 'connect4', base: Optional[GameConfig] = None,
                **overrides) -> GameConfig:
    """
    Build a validated GameConfig.

    Values are layered: dataclass defaults, then the variant preset, then the
    difficulty preset (search depth / rollout count), then explicit overrides.

    Args:
        variant: Name of a preset in VARIANTS
        base: Existing config to start from instead of the variant preset
        **overrides: Any GameConfig field

    Returns:
        The validated configuration
    """
    known = {f.name for f in fields(GameConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigError(f"Unknown config field(s): {', '.join(sorted(unknown))}")

    if isinstance(overrides.get('starting_player'), int):
        overrides['starting_player'] = Player(overrides['starting_player'])

    if base is None:
        if variant not in VARIANTS:
            raise ConfigError(f"Unknown game variant '{variant}', expected one of {tuple(VARIANTS)}")
        base = GameConfig(variant=variant, **VARIANTS[variant])
        apply_preset = True
    else:
        # keep the search settings already on the base unless difficulty changes
        apply_preset = 'difficulty' in overrides

    difficulty = overrides.get('difficulty', base.difficulty)
    if difficulty not in DIFFICULTY:
        raise ConfigError(f"Unknown difficulty '{difficulty}', expected one of {tuple(DIFFICULTY)}")
    if apply_preset:
        preset = {key: value for key, value in DIFFICULTY[difficulty].items()
                  if key not in overrides}
        overrides = {**preset, **overrides}

    return replace(base, **overrides).validate()
