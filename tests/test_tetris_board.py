import pytest

from tetrominoes import RIGHT, SPAWN, Piece
from tetris_board import TetrisBoard


@pytest.fixture
def board():
    return TetrisBoard()


def test_defaults_and_config(board):
    assert (board.board_width, board.board_height) == (10, 20)
    custom = TetrisBoard({'board_width': 6, 'board_height': 12})
    assert (custom.board_width, custom.board_height) == (6, 12)
    with pytest.raises(ValueError):
        TetrisBoard({'board_width': 3})


def test_horizontal_bounds(board):
    assert board.is_legal('T', SPAWN, 0, 0)
    assert board.is_legal('T', SPAWN, 7, 0)
    assert not board.is_legal('T', SPAWN, -1, 0)
    assert not board.is_legal('T', SPAWN, 8, 0)
    # Vertical I hangs two columns of empty box past the left wall.
    assert board.is_legal('I', RIGHT, -2, 0)
    assert not board.is_legal('I', RIGHT, -3, 0)


def test_floor_is_the_only_vertical_limit(board):
    assert board.is_legal('T', SPAWN, 3, 18)
    assert not board.is_legal('T', SPAWN, 3, 19)
    assert board.is_legal('T', SPAWN, 3, -50)


def test_move_by(board):
    piece = Piece.spawn('T')
    assert board.move_by(piece, -1, 0) == piece._replace(x=2)
    assert board.move_by(piece._replace(x=0), -1, 0) is None
    assert board.move_by(piece._replace(y=18), 0, 1) is None


def test_move_to_wall(board):
    piece = Piece.spawn('T')
    assert board.move_to_wall(piece, -1) == piece._replace(x=0)
    assert board.move_to_wall(piece, 1) == piece._replace(x=7)
    at_wall = piece._replace(x=0)
    assert board.move_to_wall(at_wall, -1) == at_wall
    with pytest.raises(ValueError):
        board.move_to_wall(piece, 0)


def test_drop_to_floor(board):
    assert board.drop_to_floor(Piece.spawn('T')).y == 18
    assert board.drop_to_floor(Piece.spawn('I')).y == 18
    assert board.drop_to_floor(Piece('I', RIGHT, 3, -1)).y == 16
    assert board.ghost_y(Piece.spawn('O')) == 18


def test_column_range(board):
    assert list(board.column_range()) == list(range(-2, 10))
