import pytest

from boardai.ai.monte_carlo import MonteCarloStrategy
from boardai.config import make_config
from boardai.game.session import GameSession

X_TO_WIN = ['.......',
            '.......',
            '.......',
            '.......',
            'OO.....',
            'XXX...O']


@pytest.fixture
def small_gomoku():
    """A 7x7 five-in-a-row game with a few stones down."""
    session = GameSession(make_config('gomoku', rows=7, cols=7, rollout_count=20,
                                      time_budget=None, seed=42))
    for cell in [(3, 3), (3, 4), (2, 2)]:
        session.apply(cell)
    return session


def run(session, config):
    strategy = MonteCarloStrategy()
    action = strategy.best_move(session.clone_for_search(), config)
    return action, strategy.stats


def tallies(stats):
    return [(m.action, m.wins, m.draws, m.losses) for m in stats.moves]


def test_fixed_seed_is_reproducible(small_gomoku):
    config = small_gomoku.config
    first, first_stats = run(small_gomoku, config)
    second, second_stats = run(small_gomoku, config)
    assert first == second
    assert tallies(first_stats) == tallies(second_stats)
    assert first in small_gomoku.legal_moves()


def test_thread_pool_gives_the_same_answer(small_gomoku):
    serial, serial_stats = run(small_gomoku, small_gomoku.config)
    parallel, parallel_stats = run(small_gomoku, small_gomoku.config.with_overrides(workers=4))
    assert serial == parallel
    assert tallies(serial_stats) == tallies(parallel_stats)


def test_rollout_counts(small_gomoku):
    _, stats = run(small_gomoku, small_gomoku.config)
    candidates = small_gomoku.rules.candidate_moves(small_gomoku.board)
    assert [m.action for m in stats.moves] == candidates
    assert all(m.rollouts == 20 for m in stats.moves)
    assert stats.rollouts == 20 * len(candidates)
    assert not stats.budget_exhausted


def test_takes_immediate_win(position):
    session = position(X_TO_WIN, rollout_count=10, seed=3)
    action, stats = run(session, session.config)
    assert action == 3
    winning = next(m for m in stats.moves if m.action == 3)
    assert winning.win_rate == 1.0


def test_search_leaves_session_untouched(small_gomoku):
    clone = small_gomoku.clone_for_search()
    before = clone.board.copy()
    MonteCarloStrategy().best_move(clone, small_gomoku.config)
    assert clone.board == before
    assert clone.move_count == 3


def test_no_rollouts_returns_none(small_gomoku):
    action, _ = run(small_gomoku, small_gomoku.config.with_overrides(rollout_count=0))
    assert action is None


def test_zero_time_budget_returns_none(small_gomoku):
    action, stats = run(small_gomoku, small_gomoku.config.with_overrides(rollout_time_budget=0.0))
    assert action is None
    assert stats.rollouts == 0
    assert stats.budget_exhausted
