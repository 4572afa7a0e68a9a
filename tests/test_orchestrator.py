import pytest

from boardai.ai.orchestrator import AIOrchestrator, AIStage
from boardai.ai.strategies import SearchStrategy
from boardai.errors import IllegalMove
from boardai.utils import Player

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

# X wins at column 0 or column 4; O cannot stop both
DOUBLE_THREAT = ['.......',
                 '.......',
                 '.......',
                 '.......',
                 '.OO....',
                 '.XXX...']

# Column 3 would let X complete row 4 on top of it
POISONED_COLUMN = ['.......',
                   '.......',
                   '.......',
                   '.......',
                   'XXX....',
                   'OXO..OO']


class IllegalStrategy(SearchStrategy):
    name = 'illegal'

    def best_move(self, session, config):
        return 99


def test_stage_one_takes_the_win(position):
    session = position(X_TO_WIN)
    decision = AIOrchestrator(session.config).choose(session)
    assert decision.action == 3
    assert decision.stage == AIStage.WIN
    assert not decision.double_threat
    assert decision.stats is None


def test_win_has_priority_over_block(position):
    session = position(['.......',
                        '.......',
                        '.......',
                        '.......',
                        '.......',
                        'XXX.OOO'])
    decision = AIOrchestrator(session.config).choose(session)
    assert decision.stage == AIStage.WIN
    assert decision.action == 3


def test_stage_two_blocks(position):
    session = position(O_MUST_BLOCK)
    decision = AIOrchestrator(session.config).choose(session)
    assert decision.action == 3
    assert decision.stage == AIStage.BLOCK
    assert not decision.double_threat


def test_double_threat_is_flagged_and_first_threat_blocked(position):
    session = position(DOUBLE_THREAT)
    decision = AIOrchestrator(session.config).choose(session)
    assert decision.double_threat
    assert decision.stage == AIStage.BLOCK
    assert decision.action == 0


def test_double_threat_can_defer_to_search(position):
    session = position(DOUBLE_THREAT, double_threat_policy='search', search_depth=2)
    decision = AIOrchestrator(session.config).choose(session)
    assert decision.double_threat
    assert decision.stage == AIStage.SEARCH
    assert decision.action in session.legal_moves()
    assert decision.stats.strategy == 'minimax'


def test_stage_three_searches(connect4):
    decision = AIOrchestrator(connect4.config.with_overrides(search_depth=2)).choose(connect4)
    assert decision.stage == AIStage.SEARCH
    assert decision.action in connect4.legal_moves()
    assert decision.stats.nodes > 0


@pytest.mark.parametrize('overrides', [
    {'search_depth': 0},
    {'time_budget': 0.0},
    {'max_nodes': 0},
])
def test_no_search_budget_still_moves(connect4, overrides):
    decision = AIOrchestrator(connect4.config.with_overrides(**overrides)).choose(connect4)
    assert decision.stage == AIStage.FALLBACK
    assert decision.action in connect4.legal_moves()


def test_fallback_avoids_poisoned_column(position):
    session = position(POISONED_COLUMN, to_move=Player.TWO, search_depth=0, seed=11)
    orchestrator = AIOrchestrator(session.config)
    assert orchestrator.safe_moves(session) == [0, 1, 2, 4, 5, 6]

    decision = orchestrator.choose(session)
    assert decision.stage == AIStage.FALLBACK
    assert decision.action != 3


def test_illegal_strategy_result_is_discarded(connect4):
    decision = AIOrchestrator(connect4.config, strategy=IllegalStrategy()).choose(connect4)
    assert decision.stage == AIStage.FALLBACK
    assert decision.action in connect4.legal_moves()


def test_choose_does_not_modify_session(position):
    session = position(O_MUST_BLOCK)
    before = session.board.copy()
    AIOrchestrator(session.config.with_overrides(double_threat_policy='search')).choose(session)
    assert session.board == before
    assert session.move_count == 0


def test_finished_game_is_rejected(position):
    session = position(['.......',
                        '.......',
                        '.......',
                        '.......',
                        'OOO....',
                        'XXXX...'])
    with pytest.raises(IllegalMove):
        AIOrchestrator(session.config).choose(session)


def test_gomoku_uses_monte_carlo(gomoku):
    config = gomoku.config.with_overrides(rollout_count=5, seed=1)
    gomoku.apply((7, 7))
    decision = AIOrchestrator(config).choose(gomoku)
    assert decision.stage == AIStage.SEARCH
    assert decision.stats.strategy == 'monte_carlo'
    assert decision.action in gomoku.legal_moves()
