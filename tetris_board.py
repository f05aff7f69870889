# tetris_board.py
# Collision primitives over the canonical empty playfield.

from tetrominoes import shape_of


class TetrisBoard:
    """
    A rectangular playfield used for finesse search. Only the outer walls and
    the floor block a piece: locked cells are never consulted, and rows above
    row 0 (the vanish zone) are always open.
    """
    def __init__(self, config=None):
        config = config or {}
        self.board_width = config.get('board_width', 10)
        self.board_height = config.get('board_height', 20)
        if self.board_width < 4 or self.board_height < 4:
            raise ValueError(f"Board {self.board_width}x{self.board_height} cannot hold a tetromino")

    def __repr__(self):
        return f"TetrisBoard(width={self.board_width}, height={self.board_height})"

    def is_valid_position(self, shape_coords, piece_x, piece_y):
        for dx, dy in shape_coords:
            c, r = piece_x + dx, piece_y + dy
            if not (0 <= c < self.board_width and r < self.board_height):
                return False
        return True

    def is_legal(self, piece_type, rotation, x, y):
        return self.is_valid_position(shape_of(piece_type, rotation), x, y)

    def move_by(self, piece, dx, dy):
        """Returns the shifted piece if legal, otherwise None."""
        if self.is_valid_position(piece.shape_coords, piece.x + dx, piece.y + dy):
            return piece._replace(x=piece.x + dx, y=piece.y + dy)
        return None

    def move_to_wall(self, piece, direction):
        """Slides the piece one column at a time toward `direction` (-1 or 1) until blocked."""
        if direction not in (-1, 1):
            raise ValueError(f"Wall direction must be -1 or 1, got {direction!r}")
        while True:
            moved = self.move_by(piece, direction, 0)
            if moved is None:
                return piece
            piece = moved

    def drop_to_floor(self, piece):
        """Hard-drop landing spot: same column and rotation, lowest legal row."""
        return piece._replace(y=self.ghost_y(piece))

    def ghost_y(self, piece):
        y = piece.y
        while self.is_valid_position(piece.shape_coords, piece.x, y + 1):
            y += 1
        return y

    def column_range(self, margin=2):
        """Bounding-box columns worth probing; boxes may hang up to `margin` columns past the left wall."""
        return range(-margin, self.board_width)
