# srs_data.py
# SRS wall-kick tables and the rotation resolver.
# Offsets are (dx, dy) with positive dy pointing UP, as published for SRS;
# the resolver negates dy because board rows grow downward.

import logging

from tetrominoes import check_piece_type, check_rotation

logger = logging.getLogger(__name__)

# J, L, S, T, Z piece kick data
JLSTZ_KICKS = {
    (0, 1): [(0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)],
    (1, 0): [(0, 0), (1, 0), (1, -1), (0, 2), (1, 2)],
    (1, 2): [(0, 0), (1, 0), (1, -1), (0, 2), (1, 2)],
    (2, 1): [(0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)],
    (2, 3): [(0, 0), (1, 0), (1, 1), (0, -2), (1, -2)],
    (3, 2): [(0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)],
    (3, 0): [(0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)],
    (0, 3): [(0, 0), (1, 0), (1, 1), (0, -2), (1, -2)],
}

# I piece kick data
I_KICKS = {
    (0, 1): [(0, 0), (-2, 0), (1, 0), (-2, -1), (1, 2)],
    (1, 0): [(0, 0), (2, 0), (-1, 0), (2, 1), (-1, -2)],
    (1, 2): [(0, 0), (-1, 0), (2, 0), (-1, 2), (2, -1)],
    (2, 1): [(0, 0), (1, 0), (-2, 0), (1, -2), (-2, 1)],
    (2, 3): [(0, 0), (2, 0), (-1, 0), (2, 1), (-1, -2)],
    (3, 2): [(0, 0), (-2, 0), (1, 0), (-2, -1), (1, 2)],
    (3, 0): [(0, 0), (1, 0), (-2, 0), (1, -2), (-2, 1)],
    (0, 3): [(0, 0), (-1, 0), (2, 0), (-1, 2), (2, -1)],
}

# 180-degree kick data
JLSTZ_KICKS_180 = {
    (0, 2): [(0, 0), (1, 0), (-2, 0), (1, -1), (-2, -1)],
    (2, 0): [(0, 0), (-1, 0), (2, 0), (-1, 1), (2, 1)],
    (1, 3): [(0, 0), (2, 0), (-1, 0), (2, 1), (-1, 1)],
    (3, 1): [(0, 0), (-2, 0), (1, 0), (-2, -1), (1, -1)],
}

I_KICKS_180 = {
    (0, 2): [(0, 0), (-1, 0), (2, 0), (-1, 1), (2, 1)],
    (2, 0): [(0, 0), (1, 0), (-2, 0), (1, -1), (-2, -1)],
    (1, 3): [(0, 0), (1, 0), (-2, 0), (1, -2), (-2, -2)],
    (3, 1): [(0, 0), (-1, 0), (2, 0), (-1, 2), (2, 2)],
}

KICK_DATA = {
    'I': I_KICKS, 'J': JLSTZ_KICKS, 'L': JLSTZ_KICKS,
    'S': JLSTZ_KICKS, 'T': JLSTZ_KICKS, 'Z': JLSTZ_KICKS, 'O': {}
}

KICK_DATA_180 = {
    'I': I_KICKS_180, 'J': JLSTZ_KICKS_180, 'L': JLSTZ_KICKS_180,
    'S': JLSTZ_KICKS_180, 'T': JLSTZ_KICKS_180, 'Z': JLSTZ_KICKS_180, 'O': {}
}


def rotation_step(from_rotation, to_rotation):
    """Quarter turns clockwise from one state to another (0..3)."""
    return (check_rotation(to_rotation) - check_rotation(from_rotation)) % 4


def get_kick_offsets(piece_type, from_rotation, to_rotation, allow_180=False):
    """
    Retrieve the ordered kick candidates for one rotation transition, or None
    when the transition is not an available single input (same state, or a
    180 turn while 180 rotation is disabled).

    A 90-degree transition missing from the tables means the tables themselves
    are broken, so that raises KeyError instead of returning None.
    """
    step = rotation_step(from_rotation, to_rotation)
    check_piece_type(piece_type)
    if step == 0:
        return None
    if step == 2:
        if not allow_180:
            return None
        return KICK_DATA_180[piece_type][(from_rotation, to_rotation)]
    return KICK_DATA[piece_type][(from_rotation, to_rotation)]


def try_rotate_with_kick_info(piece, target_rotation, board, allow_180=False):
    """
    Attempts to rotate `piece` to `target_rotation` on `board`.

    Candidates are tried in table order and the first legal one wins. Returns
    (rotated_piece, kick_index); a failed rotation is (None, -1). The O piece
    always succeeds in place with kick index 0 since all its states coincide,
    except for a 180 turn while 180 rotation is disabled: that input does not
    exist, so it fails like any other piece's.
    """
    check_rotation(target_rotation)
    if piece.type == 'O':
        if piece.rotation == target_rotation:
            return piece, 0
        if rotation_step(piece.rotation, target_rotation) == 2 and not allow_180:
            return None, -1
        return piece._replace(rotation=target_rotation), 0

    kick_test_set = get_kick_offsets(piece.type, piece.rotation, target_rotation, allow_180)
    if kick_test_set is None:
        return None, -1

    target_shape = piece._replace(rotation=target_rotation).shape_coords
    for index, (dx_kick, dy_kick) in enumerate(kick_test_set):
        potential_x = piece.x + dx_kick
        potential_y = piece.y - dy_kick  # y-up kick data on a y-down board
        if board.is_valid_position(target_shape, potential_x, potential_y):
            return piece._replace(rotation=target_rotation, x=potential_x, y=potential_y), index

    logger.debug("No legal kick for %s %d->%d at x=%d", piece.type, piece.rotation, target_rotation, piece.x)
    return None, -1


def try_rotate(piece, target_rotation, board, allow_180=False):
    """Rotation with wall kicks; returns the rotated piece or None."""
    rotated, _ = try_rotate_with_kick_info(piece, target_rotation, board, allow_180)
    return rotated
