import pytest

from srs_data import (I_KICKS, I_KICKS_180, JLSTZ_KICKS, JLSTZ_KICKS_180, KICK_DATA, get_kick_offsets,
                      rotation_step, try_rotate, try_rotate_with_kick_info)
from tetrominoes import LEFT, PIECE_TYPES, REVERSE, RIGHT, SPAWN, Piece
from tetris_board import TetrisBoard


@pytest.fixture
def board():
    return TetrisBoard()


def test_every_quarter_turn_has_five_kicks():
    quarter_turns = [(a, b) for a in range(4) for b in range(4) if rotation_step(a, b) in (1, 3)]
    for table in (JLSTZ_KICKS, I_KICKS):
        assert sorted(table) == sorted(quarter_turns)
        assert all(len(kicks) == 5 and kicks[0] == (0, 0) for kicks in table.values())
    for table in (JLSTZ_KICKS_180, I_KICKS_180):
        assert sorted(table) == [(0, 2), (1, 3), (2, 0), (3, 1)]


def test_kick_table_families():
    assert KICK_DATA['I'] is I_KICKS
    assert all(KICK_DATA[p] is JLSTZ_KICKS for p in 'JLSTZ')
    assert KICK_DATA['O'] == {}
    assert set(KICK_DATA) == set(PIECE_TYPES)


def test_get_kick_offsets_selects_table_by_step():
    assert get_kick_offsets('T', SPAWN, RIGHT) == JLSTZ_KICKS[(0, 1)]
    assert get_kick_offsets('I', LEFT, SPAWN) == I_KICKS[(3, 0)]
    assert get_kick_offsets('T', SPAWN, REVERSE) is None
    assert get_kick_offsets('T', SPAWN, REVERSE, allow_180=True) == JLSTZ_KICKS_180[(0, 2)]
    assert get_kick_offsets('I', RIGHT, LEFT, allow_180=True) == I_KICKS_180[(1, 3)]
    assert get_kick_offsets('T', RIGHT, RIGHT) is None


def test_get_kick_offsets_rejects_malformed_input():
    with pytest.raises(ValueError):
        get_kick_offsets('Q', SPAWN, RIGHT)
    with pytest.raises(ValueError):
        get_kick_offsets('T', SPAWN, 7)


def test_open_rotation_uses_first_candidate(board):
    piece = Piece.spawn('T')
    rotated, index = try_rotate_with_kick_info(piece, RIGHT, board)
    assert index == 0
    assert rotated == Piece('T', RIGHT, 3, -2)


def test_first_legal_kick_wins_against_left_wall(board):
    # T facing right flush against the left wall; the reverse state needs one more column.
    rotated, index = try_rotate_with_kick_info(Piece('T', RIGHT, -1, 5), REVERSE, board)
    assert index == 1
    assert rotated == Piece('T', REVERSE, 0, 5)


def test_first_legal_kick_wins_against_right_wall(board):
    rotated, index = try_rotate_with_kick_info(Piece('T', LEFT, 8, 5), SPAWN, board)
    assert index == 1
    assert rotated == Piece('T', SPAWN, 7, 5)


def test_i_piece_kicks_are_tried_in_order(board):
    # (0,0) and (+1,0) leave the box hanging off the right wall; (-2,0) is third.
    rotated, index = try_rotate_with_kick_info(Piece('I', LEFT, 8, 5), SPAWN, board)
    assert index == 2
    assert rotated == Piece('I', SPAWN, 6, 5)


def test_floor_kick_lifts_the_piece(board):
    # Flat I resting on the floor; only the last candidate (+1, up 2) fits vertically.
    rotated, index = try_rotate_with_kick_info(Piece('I', SPAWN, 3, 18), RIGHT, board)
    assert index == 4
    assert rotated == Piece('I', RIGHT, 4, 16)


def test_180_rotation_requires_the_option(board):
    piece = Piece.spawn('T')
    assert try_rotate(piece, REVERSE, board) is None
    assert try_rotate(piece, REVERSE, board, allow_180=True) == Piece('T', REVERSE, 3, -2)
    assert try_rotate_with_kick_info(piece, REVERSE, board) == (None, -1)


def test_o_piece_rotates_in_place(board):
    piece = Piece.spawn('O')
    assert try_rotate(piece, RIGHT, board) == piece._replace(rotation=RIGHT)
    assert try_rotate(piece, LEFT, board) == piece._replace(rotation=LEFT)
    assert try_rotate(piece, REVERSE, board) is None
    assert try_rotate(piece, REVERSE, board, allow_180=True) == piece._replace(rotation=REVERSE)


def test_piece_rotate_delegates_to_resolver(board):
    assert Piece.spawn('S').rotate(LEFT, board) == Piece('S', LEFT, 3, -2)
