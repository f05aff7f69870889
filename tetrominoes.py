# tetrominoes.py

from collections import namedtuple

# Rotation states, clockwise order.
SPAWN, RIGHT, REVERSE, LEFT = 0, 1, 2, 3
ROTATION_STATES = (SPAWN, RIGHT, REVERSE, LEFT)
ROTATION_NAMES = ('spawn', 'right', 'reverse', 'left')

# Define shapes of tetrominoes
# Each shape is a list of (dx, dy) offsets from the top-left corner of the
# piece's SRS bounding box. y grows downward (row 0 is the top of the field).
TETROMINOES = {
    'I': [
        [(0, 1), (1, 1), (2, 1), (3, 1)],  # spawn
        [(2, 0), (2, 1), (2, 2), (2, 3)],  # right
        [(0, 2), (1, 2), (2, 2), (3, 2)],  # reverse
        [(1, 0), (1, 1), (1, 2), (1, 3)]   # left
    ],
    'O': [
        # All four states are congruent; stored four times for uniform lookup.
        [(1, 0), (2, 0), (1, 1), (2, 1)],
        [(1, 0), (2, 0), (1, 1), (2, 1)],
        [(1, 0), (2, 0), (1, 1), (2, 1)],
        [(1, 0), (2, 0), (1, 1), (2, 1)]
    ],
    'T': [
        [(1, 0), (0, 1), (1, 1), (2, 1)],
        [(1, 0), (1, 1), (2, 1), (1, 2)],
        [(0, 1), (1, 1), (2, 1), (1, 2)],
        [(1, 0), (0, 1), (1, 1), (1, 2)]
    ],
    'S': [
        [(1, 0), (2, 0), (0, 1), (1, 1)],
        [(1, 0), (1, 1), (2, 1), (2, 2)],
        [(1, 1), (2, 1), (0, 2), (1, 2)],
        [(0, 0), (0, 1), (1, 1), (1, 2)]
    ],
    'Z': [
        [(0, 0), (1, 0), (1, 1), (2, 1)],
        [(2, 0), (1, 1), (2, 1), (1, 2)],
        [(0, 1), (1, 1), (1, 2), (2, 2)],
        [(1, 0), (0, 1), (1, 1), (0, 2)]
    ],
    'J': [
        [(0, 0), (0, 1), (1, 1), (2, 1)],
        [(1, 0), (2, 0), (1, 1), (1, 2)],
        [(0, 1), (1, 1), (2, 1), (2, 2)],
        [(1, 0), (1, 1), (0, 2), (1, 2)]
    ],
    'L': [
        [(2, 0), (0, 1), (1, 1), (2, 1)],
        [(1, 0), (1, 1), (1, 2), (2, 2)],
        [(0, 1), (1, 1), (2, 1), (0, 2)],
        [(0, 0), (1, 0), (1, 1), (1, 2)]
    ]
}

# Spawn reference positions (col, row) of the bounding box's top-left corner.
# Negative rows are the vanish zone above the visible field.
INITIAL_POSITIONS = {
    'I': (3, -1),
    'O': (4, -2),
    'T': (3, -2),
    'S': (3, -2),
    'Z': (3, -2),
    'J': (3, -2),
    'L': (3, -2)
}

PIECE_TYPES = list(TETROMINOES.keys())

_ROTATION_STEPS = {'CW': 1, 'CCW': -1, '180': 2}


def check_piece_type(piece_type):
    if piece_type not in TETROMINOES:
        raise ValueError(f"Unknown piece type {piece_type!r}; expected one of {PIECE_TYPES}")
    return piece_type


def check_rotation(rotation):
    # bool is an int subclass; True/False are never rotation states.
    if isinstance(rotation, bool) or rotation not in ROTATION_STATES:
        raise ValueError(f"Invalid rotation state {rotation!r}; expected 0..3")
    return rotation


def shape_of(piece_type, rotation):
    """Returns the 4 (dx, dy) cell offsets of a piece in a rotation state."""
    return TETROMINOES[check_piece_type(piece_type)][check_rotation(rotation)]


def spawn_of(piece_type):
    """Returns the (col, row) spawn reference position of a piece."""
    return INITIAL_POSITIONS[check_piece_type(piece_type)]


def canonical_rotation(piece_type, rotation):
    """
    Collapses geometrically identical rotation states. Only the O piece has
    congruent states, so every O rotation maps to SPAWN.
    """
    check_rotation(rotation)
    if check_piece_type(piece_type) == 'O':
        return SPAWN
    return rotation


def next_rotation(rotation, direction):
    """Rotation state reached from `rotation` by one 'CW', 'CCW' or '180' input."""
    if direction not in _ROTATION_STEPS:
        raise ValueError(f"Unknown rotation direction {direction!r}")
    return (check_rotation(rotation) + _ROTATION_STEPS[direction]) % 4


def rotation_name(rotation):
    return ROTATION_NAMES[check_rotation(rotation)]


def parse_rotation(value):
    """Accepts 0..3, a digit string, or one of spawn/right/reverse/left (also '0','R','2','L', 'two')."""
    if isinstance(value, int) and not isinstance(value, bool):
        return check_rotation(value)
    text = str(value).strip().lower()
    aliases = {'0': SPAWN, 'r': RIGHT, '2': REVERSE, 'two': REVERSE, 'l': LEFT,
               '1': RIGHT, '3': LEFT}
    if text in ROTATION_NAMES:
        return ROTATION_NAMES.index(text)
    if text in aliases:
        return aliases[text]
    raise ValueError(f"Cannot parse rotation {value!r}")


class Piece(namedtuple('Piece', ['type', 'rotation', 'x', 'y'])):
    """
    Immutable active-piece state: kind, rotation state and the column/row of
    the bounding box's top-left corner. Moves and rotations return new values.
    """
    __slots__ = ()

    @classmethod
    def spawn(cls, piece_type):
        x, y = spawn_of(piece_type)
        return cls(piece_type, SPAWN, x, y)

    @property
    def shape_coords(self):
        return shape_of(self.type, self.rotation)

    def get_absolute_block_coords(self):
        """Returns a list of (col, row) for each block of the piece on the board."""
        return [(self.x + dx, self.y + dy) for dx, dy in self.shape_coords]

    def rotate(self, target_rotation, board, allow_180=False):
        """Attempts an SRS rotation; returns the rotated piece or None."""
        from srs_data import try_rotate  # Local import to avoid circular dependency
        return try_rotate(self, target_rotation, board, allow_180=allow_180)

    def matches(self, target_x, target_rotation):
        """True when this piece sits in the target column and (congruent) rotation."""
        return (self.x == target_x and
                canonical_rotation(self.type, self.rotation) == canonical_rotation(self.type, target_rotation))
