import pytest

from boardai.ai.minimax import MinimaxStrategy
from boardai.ai.strategies import (HeuristicStrategy, RandomStrategy, SearchBudget,
                                   SearchBudgetExhausted, create_strategy)
from boardai.config import make_config
from boardai.errors import ConfigError

X_TO_WIN = ['.......',
            '.......',
            '.......',
            '.......',
            'OO.....',
            'XXX...O']

O_MUST_BLOCK = ['.......',
                '.......',
                '.......',
                '.......',
                'OO.....',
                'XXX....']


def search(session, **overrides):
    config = session.config.with_overrides(**overrides)
    strategy = MinimaxStrategy()
    action = strategy.best_move(session.clone_for_search(), config)
    return action, strategy.stats


def test_finds_immediate_win(position):
    session = position(X_TO_WIN)
    action, stats = search(session, search_depth=1)
    assert action == 3
    assert stats.depth_reached == 1
    assert not stats.budget_exhausted


def test_blocks_opponent_win(position):
    session = position(O_MUST_BLOCK)
    action, _ = search(session, search_depth=2)
    assert action == 3


@pytest.mark.parametrize('depth', [1, 2, 3, 4])
def test_win_found_at_every_depth(position, depth):
    session = position(X_TO_WIN)
    action, _ = search(session, search_depth=depth)
    assert action == 3


def test_zero_depth_returns_none(position):
    session = position(X_TO_WIN)
    action, stats = search(session, search_depth=0)
    assert action is None
    assert stats.nodes == 0


def test_zero_time_budget_returns_none(connect4):
    action, stats = search(connect4, time_budget=0.0)
    assert action is None
    assert stats.budget_exhausted


def test_node_budget_keeps_best_completed_move(connect4):
    action, stats = search(connect4, search_depth=7, max_nodes=60)
    assert action in connect4.legal_moves()
    assert stats.budget_exhausted
    assert stats.nodes <= 60
    assert stats.depth_reached >= 1


def test_search_leaves_session_untouched(position):
    session = position(O_MUST_BLOCK)
    clone = session.clone_for_search()
    before = clone.board.copy()
    MinimaxStrategy().best_move(clone, session.config.with_overrides(search_depth=3))
    assert clone.board == before
    assert clone.move_count == 0


def test_search_is_deterministic(connect4):
    first, _ = search(connect4, search_depth=3)
    second, _ = search(connect4, search_depth=3)
    assert first == second
    assert first in connect4.legal_moves()


def test_gomoku_search_uses_nearby_cells(gomoku):
    gomoku.apply((7, 7))
    action, stats = search(gomoku, search_depth=2)
    row, col = action
    assert max(abs(row - 7), abs(col - 7)) == 1
    assert stats.nodes > 0


def test_budget_charge_raises_when_spent():
    budget = SearchBudget(max_nodes=2)
    budget.charge()
    budget.charge()
    with pytest.raises(SearchBudgetExhausted):
        budget.charge()
    assert budget.nodes == 2


def test_create_strategy_by_name():
    assert isinstance(create_strategy('minimax'), MinimaxStrategy)
    assert isinstance(create_strategy('random'), RandomStrategy)
    with pytest.raises(ConfigError):
        create_strategy('alphazero')


def test_random_strategy_is_seeded(connect4):
    config = make_config('connect4', strategy='random', seed=5)
    picks = [RandomStrategy().best_move(connect4, config) for _ in range(3)]
    assert len(set(picks)) == 1
    assert picks[0] in connect4.legal_moves()


def test_heuristic_strategy_takes_the_win(position):
    session = position(X_TO_WIN)
    config = session.config.with_overrides(strategy='heuristic', seed=1)
    assert HeuristicStrategy().best_move(session.clone_for_search(), config) == 3
