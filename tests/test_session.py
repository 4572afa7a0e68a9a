import numpy as np
import pytest

from boardai.config import make_config
from boardai.errors import EmptyHistory, IllegalMove
from boardai.game.session import GameSession
from boardai.utils import GameResult, Player


def play(session, actions):
    for action in actions:
        session.apply(action)
    return session


def test_new_session_defaults(connect4):
    assert connect4.current_player == Player.ONE
    assert connect4.result == GameResult.IN_PROGRESS
    assert connect4.history() == ()
    assert connect4.last_move is None
    assert connect4.legal_moves() == list(range(7))


def test_players_alternate(connect4):
    connect4.apply(3)
    assert connect4.current_player == Player.TWO
    connect4.apply(3)
    assert connect4.current_player == Player.ONE
    assert [m.player for m in connect4.history()] == [Player.ONE, Player.TWO]
    assert connect4.last_move.cell == (4, 3)


def test_configured_starting_player():
    session = GameSession(make_config('connect4', starting_player=2))
    assert session.current_player == Player.TWO
    session.apply(0)
    assert session.board.get(5, 0) == Player.TWO


def test_vertical_win_ends_game(connect4):
    result = play(connect4, [0, 1, 0, 1, 0, 1]).apply(0)
    assert result == GameResult.PLAYER_ONE_WIN
    assert connect4.is_game_over()
    assert connect4.winner() == Player.ONE
    assert connect4.legal_moves() == []
    assert sorted(connect4.winning_line()) == [(2, 0), (3, 0), (4, 0), (5, 0)]
    # the winner stays on move; nobody can move anyway
    assert connect4.current_player == Player.ONE


def test_moves_after_game_over_are_rejected(connect4):
    play(connect4, [0, 1, 0, 1, 0, 1, 0])
    with pytest.raises(IllegalMove) as excinfo:
        connect4.apply(2)
    assert excinfo.value.reason == 'game_over'
    assert not connect4.is_legal(2)


def test_illegal_move_leaves_state_unchanged(connect4):
    connect4.apply(3)
    before = connect4.snapshot()
    with pytest.raises(IllegalMove):
        connect4.apply(9)
    assert np.array_equal(connect4.snapshot(), before)
    assert connect4.current_player == Player.TWO
    assert connect4.move_count == 1


def test_undo_with_empty_history(connect4):
    with pytest.raises(EmptyHistory):
        connect4.undo()


def test_undo_after_win_reopens_game(connect4):
    play(connect4, [0, 1, 0, 1, 0, 1, 0])
    move = connect4.undo()
    assert move.cell == (2, 0)
    assert connect4.result == GameResult.IN_PROGRESS
    assert connect4.current_player == Player.ONE
    assert connect4.winner() is None


@pytest.mark.parametrize('variant', ['connect4', 'gomoku'])
def test_apply_then_undo_restores_everything(variant, random_positions):
    rng = np.random.default_rng(99)
    for session in random_positions(variant, count=15):
        if session.is_game_over():
            continue
        board = session.board.copy()
        player = session.current_player
        history = session.history()

        moves = session.legal_moves()
        session.apply(moves[int(rng.integers(len(moves)))])
        session.undo()

        assert session.board == board
        assert session.board.stone_count == board.stone_count
        assert session.current_player == player
        assert session.result == GameResult.IN_PROGRESS
        assert session.history() == history


def test_reset(connect4):
    play(connect4, [3, 3, 4])
    connect4.reset()
    assert connect4.board.is_empty_board()
    assert connect4.history() == ()
    assert connect4.current_player == Player.ONE


def test_clone_for_search_is_independent(connect4):
    play(connect4, [3, 4])
    clone = connect4.clone_for_search()
    clone.apply(3)
    clone.apply(3)
    assert connect4.move_count == 2
    assert connect4.board.stone_count == 2
    assert clone.move_count == 4
    assert clone.config is connect4.config

    clone.undo()
    clone.undo()
    clone.undo()
    assert connect4.move_count == 2


def test_gomoku_session(gomoku):
    gomoku.apply((7, 7))
    gomoku.apply((0, 0))
    assert gomoku.board.get(7, 7) == Player.ONE
    assert gomoku.board.get(0, 0) == Player.TWO
    with pytest.raises(IllegalMove) as excinfo:
        gomoku.apply((7, 7))
    assert excinfo.value.reason == 'occupied'


def test_gomoku_five_in_a_row(gomoku):
    for col in range(4):
        gomoku.apply((7, col))
        gomoku.apply((9, col))
    assert gomoku.apply((7, 4)) == GameResult.PLAYER_ONE_WIN


def test_load_position_infers_player_to_move(position):
    session = position(['.......',
                        '.......',
                        '.......',
                        '.......',
                        '.......',
                        '...X...'])
    assert session.current_player == Player.TWO
    assert session.result == GameResult.IN_PROGRESS
    assert session.history() == ()


def test_load_position_detects_finished_games(position):
    session = position(['.......',
                        '.......',
                        'O......',
                        'OX.....',
                        'OXX....',
                        'OXXX...'])
    assert session.result == GameResult.PLAYER_TWO_WIN
    assert sorted(session.winning_line()) == [(2, 0), (3, 0), (4, 0), (5, 0)]


def test_load_position_rejects_wrong_shape(connect4):
    with pytest.raises(ValueError):
        connect4.load_position(np.zeros((7, 7), dtype=np.int8))


def test_render_mentions_every_column(connect4):
    text = connect4.render()
    assert "0 1 2 3 4 5 6" in text
