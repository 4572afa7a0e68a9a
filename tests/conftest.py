"""
Shared pytest fixtures for the boardai tests.

Positions are written as strings, top row first: '.' empty, 'X' player one,
'O' player two.
"""

import numpy as np
import pytest

from boardai.config import make_config
from boardai.game.session import GameSession

SYMBOLS = {'.': 0, 'X': 1, 'O': 2}


def parse_grid(rows):
    return np.array([[SYMBOLS[ch] for ch in row.replace(' ', '')] for row in rows], dtype=np.int8)


@pytest.fixture
def grid():
    """Turn a list of row strings into a numpy grid."""
    return parse_grid


@pytest.fixture
def connect4():
    return GameSession(make_config('connect4', time_budget=None))


@pytest.fixture
def gomoku():
    return GameSession(make_config('gomoku', time_budget=None))


@pytest.fixture
def position():
    """Build a session from row strings: position(rows, variant='connect4', to_move=None, **overrides)."""
    def load(rows, variant='connect4', to_move=None, **overrides):
        overrides.setdefault('time_budget', None)
        session = GameSession(make_config(variant, **overrides))
        session.load_position(parse_grid(rows), to_move)
        return session
    return load


@pytest.fixture
def random_positions():
    """Sessions reached by seeded random play, some finished, most not."""
    def build(variant='connect4', count=20, seed=1234, max_moves=30, **overrides):
        rng = np.random.default_rng(seed)
        sessions = []
        for _ in range(count):
            session = GameSession(make_config(variant, time_budget=None, **overrides))
            for _ in range(int(rng.integers(0, max_moves))):
                moves = session.legal_moves()
                if not moves:
                    break
                session.apply(moves[int(rng.integers(len(moves)))])
            sessions.append(session)
        return sessions
    return build
