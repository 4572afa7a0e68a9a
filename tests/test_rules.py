import pytest

from boardai.errors import IllegalMove
from boardai.game.board import Board
from boardai.game.rules import Move, Rules
from boardai.utils import DIRECTION_VECTORS, GameResult, Player

# A full 6x7 grid with no four in a row: colours swap every two rows and every column
DRAWN_CONNECT4 = [
    'XOXOXOX',
    'XOXOXOX',
    'OXOXOXO',
    'OXOXOXO',
    'XOXOXOX',
    'XOXOXOX',
]


def test_gravity_legal_moves_skip_full_columns():
    rules = Rules(4, gravity=True)
    board = Board()
    for row in range(6):
        board.place(row, 2, Player.ONE if row % 2 else Player.TWO)
    assert rules.legal_moves(board) == [0, 1, 3, 4, 5, 6]


def test_free_legal_moves_are_empty_cells():
    rules = Rules(5, gravity=False)
    board = Board(15, 15)
    assert len(rules.legal_moves(board)) == 225
    board.place(0, 0, Player.ONE)
    moves = rules.legal_moves(board)
    assert len(moves) == 224
    assert moves[0] == (0, 1)


def test_gravity_move_lands_on_lowest_empty_row():
    rules = Rules()
    board = Board()
    first = rules.apply(board, 3, Player.ONE)
    second = rules.apply(board, 3, Player.TWO)
    assert first == Move(5, 3, Player.ONE, 3)
    assert second.cell == (4, 3)


@pytest.mark.parametrize('action, reason', [
    (-1, 'out_of_range'),
    (7, 'out_of_range'),
    ('3', 'bad_action'),
    ((5, 3), 'bad_action'),
    (True, 'bad_action'),
])
def test_gravity_illegal_actions(action, reason):
    rules = Rules()
    with pytest.raises(IllegalMove) as excinfo:
        rules.apply(Board(), action, Player.ONE)
    assert excinfo.value.reason == reason


def test_full_column_is_rejected():
    rules = Rules()
    board = Board()
    for i in range(6):
        rules.apply(board, 0, Player.ONE if i % 2 == 0 else Player.TWO)
    with pytest.raises(IllegalMove) as excinfo:
        rules.apply(board, 0, Player.ONE)
    assert excinfo.value.reason == 'column_full'
    assert not rules.is_legal(board, 0)


@pytest.mark.parametrize('action, reason', [
    ((15, 0), 'out_of_range'),
    ((0, -1), 'out_of_range'),
    ((7, 7), 'occupied'),
    (7, 'bad_action'),
    ((1, 2, 3), 'bad_action'),
    ((1.0, 2), 'bad_action'),
])
def test_free_illegal_actions(action, reason):
    rules = Rules(5, gravity=False)
    board = Board(15, 15)
    board.place(7, 7, Player.TWO)
    with pytest.raises(IllegalMove) as excinfo:
        rules.apply(board, action, Player.ONE)
    assert excinfo.value.reason == reason


@pytest.mark.parametrize('variant', ['connect4', 'gomoku'])
def test_legal_moves_agree_with_apply(variant, random_positions):
    for session in random_positions(variant, count=10):
        rules, board = session.rules, session.board
        legal = rules.legal_moves(board)
        if rules.gravity:
            everything = list(range(-1, board.cols + 1))
        else:
            everything = [(r, c) for r in range(board.rows) for c in range(board.cols)]

        for action in everything:
            trial = board.copy()
            if action in legal:
                move = rules.apply(trial, action, Player.ONE)
                assert trial.get(move.row, move.col) == Player.ONE
            else:
                with pytest.raises(IllegalMove):
                    rules.apply(trial, action, Player.ONE)


def line_cells(size, win_length, dr, dc):
    center = size // 2
    offsets = range(-(win_length // 2), win_length - win_length // 2)
    return [(center + i * dr, center + i * dc) for i in offsets]


@pytest.mark.parametrize('win_length', [4, 5])
@pytest.mark.parametrize('direction', list(DIRECTION_VECTORS))
def test_win_detected_on_every_axis(win_length, direction):
    dr, dc = DIRECTION_VECTORS[direction]
    rules = Rules(win_length, gravity=False)
    board = Board(9, 9)
    cells = line_cells(9, win_length, dr, dc)

    # finish the line in the middle so both directions are counted
    last = cells[len(cells) // 2]
    for cell in cells:
        if cell != last:
            board.place(*cell, Player.TWO)
    assert rules.winning_actions(board, Player.TWO) == [last]

    move = rules.apply(board, last, Player.TWO)
    assert rules.detect_terminal(board, move) == GameResult.PLAYER_TWO_WIN
    assert sorted(rules.winning_line(board, move)) == sorted(cells)


@pytest.mark.parametrize('direction', list(DIRECTION_VECTORS))
def test_short_line_is_not_a_win(direction):
    dr, dc = DIRECTION_VECTORS[direction]
    rules = Rules(4, gravity=False)
    board = Board(9, 9)
    cells = line_cells(9, 4, dr, dc)[:3]
    for cell in cells[:-1]:
        board.place(*cell, Player.ONE)
    move = rules.apply(board, cells[-1], Player.ONE)
    assert rules.detect_terminal(board, move) == GameResult.IN_PROGRESS
    assert rules.winning_line(board, move) == []


def test_mixed_line_is_not_a_win():
    rules = Rules(4, gravity=True)
    board = Board()
    for col, player in zip(range(4), (Player.ONE, Player.ONE, Player.TWO, Player.ONE)):
        rules.apply(board, col, player)
    assert rules.scan_result(board) == GameResult.IN_PROGRESS


def test_full_board_without_line_is_a_draw(grid):
    rules = Rules()
    board = Board.from_grid(grid(DRAWN_CONNECT4))
    assert rules.scan_result(board) == GameResult.DRAW

    board.clear(0, 3)
    move = rules.apply(board, 3, Player.TWO)
    assert rules.detect_terminal(board, move) == GameResult.DRAW


def test_free_placement_full_board_is_a_draw(grid):
    rules = Rules(3, gravity=False)
    board = Board.from_grid(grid(['XOX',
                                  'XOO',
                                  'OX.']))
    move = rules.apply(board, (2, 2), Player.ONE)
    assert rules.detect_terminal(board, move) == GameResult.DRAW


def test_scan_result_rejects_two_winners(grid):
    rules = Rules()
    board = Board.from_grid(grid(['.......',
                                  '.......',
                                  '.......',
                                  '.......',
                                  'OOOO...',
                                  'XXXX...']))
    with pytest.raises(ValueError):
        rules.scan_result(board)


def test_undo_restores_board():
    rules = Rules()
    board = Board()
    move = rules.apply(board, 2, Player.ONE)
    rules.undo(board, move)
    assert board == Board()


def test_undo_requires_top_piece():
    rules = Rules()
    board = Board()
    lower = rules.apply(board, 2, Player.ONE)
    rules.apply(board, 2, Player.TWO)
    with pytest.raises(ValueError):
        rules.undo(board, lower)


def test_wins_if_played_leaves_board_unchanged(grid):
    rules = Rules()
    board = Board.from_grid(grid(['.......',
                                  '.......',
                                  '.......',
                                  '.......',
                                  'OO.....',
                                  'XXX....']))
    before = board.copy()
    assert rules.wins_if_played(board, 3, Player.ONE)
    assert not rules.wins_if_played(board, 3, Player.TWO)
    assert not rules.wins_if_played(board, 9, Player.ONE)
    assert board == before


def test_candidate_moves_gravity_center_first():
    assert Rules().candidate_moves(Board()) == [3, 2, 4, 1, 5, 0, 6]


def test_candidate_moves_free_placement():
    rules = Rules(5, gravity=False)
    board = Board(15, 15)
    assert rules.candidate_moves(board) == [(7, 7)]

    board.place(7, 7, Player.ONE)
    candidates = rules.candidate_moves(board)
    assert len(candidates) == 8
    assert candidates[:4] == [(6, 7), (7, 6), (7, 8), (8, 7)]

    assert len(rules.candidate_moves(board, radius=2)) == 24
