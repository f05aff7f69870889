# operation_module.py
# Finesse search: every shortest input sequence from spawn to a target
# (column, rotation) on the empty board, via BFS over placements.

import logging
from collections import deque
from functools import lru_cache

import numpy as np

from srs_data import try_rotate
from tetris_board import TetrisBoard
from tetrominoes import (Piece, ROTATION_STATES, canonical_rotation, check_piece_type,
                         check_rotation, next_rotation)

logger = logging.getLogger(__name__)

MOVE_LEFT = 'MoveLeft'
MOVE_RIGHT = 'MoveRight'
DAS_LEFT = 'DASLeft'
DAS_RIGHT = 'DASRight'
ROTATE_CW = 'RotateCW'
ROTATE_CCW = 'RotateCCW'
ROTATE_180 = 'Rotate180'
SOFT_DROP = 'SoftDrop'
HARD_DROP = 'HardDrop'

FINESSE_ACTIONS = (MOVE_LEFT, MOVE_RIGHT, DAS_LEFT, DAS_RIGHT,
                   ROTATE_CW, ROTATE_CCW, ROTATE_180, SOFT_DROP, HARD_DROP)

# Edge order of the search. Fixed so that repeated calls list ties identically.
SEARCH_ACTIONS = (MOVE_LEFT, MOVE_RIGHT, DAS_LEFT, DAS_RIGHT, ROTATE_CW, ROTATE_CCW)

ACTION_ICONS = {
    MOVE_LEFT: '←',
    MOVE_RIGHT: '→',
    DAS_LEFT: '⇤',
    DAS_RIGHT: '⇥',
    ROTATE_CW: '↻',
    ROTATE_CCW: '↺',
    ROTATE_180: '⟲',
    SOFT_DROP: '⇩',
    HARD_DROP: '⤓',
}

# Bounding boxes can hang this many columns past the left wall (vertical I).
COLUMN_MARGIN = 2

_ROTATION_DIRECTIONS = {ROTATE_CW: 'CW', ROTATE_CCW: 'CCW', ROTATE_180: '180'}


def format_sequence(sequence, icons=True):
    if icons:
        return ' '.join(ACTION_ICONS[action] for action in sequence)
    return ', '.join(sequence)


def apply_action(piece, action, board, allow_180=False):
    """
    Applies one finesse input to an active piece.

    Returns the resulting piece, or None when the input has no legal outcome
    (a tap into the wall, a rotation with no legal kick, a disabled 180).
    DAS into a wall returns the piece unchanged; SoftDrop is a signal only.
    """
    if action == MOVE_LEFT:
        return board.move_by(piece, -1, 0)
    if action == MOVE_RIGHT:
        return board.move_by(piece, 1, 0)
    if action == DAS_LEFT:
        return board.move_to_wall(piece, -1)
    if action == DAS_RIGHT:
        return board.move_to_wall(piece, 1)
    if action in _ROTATION_DIRECTIONS:
        if action == ROTATE_180 and not allow_180:
            return None
        target = next_rotation(piece.rotation, _ROTATION_DIRECTIONS[action])
        return try_rotate(piece, target, board, allow_180=allow_180)
    if action == SOFT_DROP:
        return piece
    if action == HARD_DROP:
        return board.drop_to_floor(piece)
    raise ValueError(f"Unknown finesse action {action!r}")


def replay_sequence(piece_type, sequence, config=None):
    """
    Plays a sequence of finesse actions from the spawn state and returns the
    final piece. Blocked inputs leave the piece where it is, as in the game.
    """
    config = config or {}
    board = TetrisBoard(config)
    allow_180 = bool(config.get('allow_180', False))
    piece = Piece.spawn(piece_type)
    for action in sequence:
        moved = apply_action(piece, action, board, allow_180)
        if moved is not None:
            piece = moved
    return piece


def _node_key(piece):
    return canonical_rotation(piece.type, piece.rotation), piece.x


def _unwind(key, predecessors):
    """All action paths from the start node to `key` through the predecessor DAG."""
    incoming = predecessors[key]
    if not incoming:
        return [()]
    paths = []
    for parent_key, action in incoming:
        for path in _unwind(parent_key, predecessors):
            paths.append(path + (action,))
    return paths


@lru_cache(maxsize=4096)
def _optimal_paths(piece_type, target_x, target_rotation, allow_180, board_width, board_height):
    board = TetrisBoard({'board_width': board_width, 'board_height': board_height})
    # On an empty board a footprint fits at some row iff it fits horizontally.
    if not board.is_legal(piece_type, target_rotation, target_x, 0):
        logger.debug("No finesse exists for %s x=%d rot=%d: footprint out of bounds",
                     piece_type, target_x, target_rotation)
        return ()

    start = Piece.spawn(piece_type)
    goal = (canonical_rotation(piece_type, target_rotation), target_x)
    actions = SEARCH_ACTIONS + ((ROTATE_180,) if allow_180 else ())

    start_key = _node_key(start)
    distance = {start_key: 0}
    predecessors = {start_key: []}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        current_key = _node_key(current)
        current_distance = distance[current_key]
        # Every node one level above the goal has been expanded.
        if goal in distance and current_distance >= distance[goal]:
            break
        for action in actions:
            successor = apply_action(current, action, board, allow_180)
            if successor is None:
                continue
            key = _node_key(successor)
            if key not in distance:
                distance[key] = current_distance + 1
                predecessors[key] = [(current_key, action)]
                queue.append(successor)
            elif distance[key] == current_distance + 1:
                predecessors[key].append((current_key, action))

    if goal not in distance:
        logger.debug("No finesse exists for %s x=%d rot=%d: unreachable from spawn",
                     piece_type, target_x, target_rotation)
        return ()

    sequences = tuple(path + (HARD_DROP,) for path in _unwind(goal, predecessors))
    logger.debug("Finesse for %s x=%d rot=%d: %d sequence(s) of length %d",
                 piece_type, target_x, target_rotation, len(sequences), len(sequences[0]))
    return sequences


def compute_optimal_sequences(piece_type, target_x, target_rotation, config=None):
    """
    Every minimal finesse sequence that places `piece_type` (from its spawn
    state) at bounding-box column `target_x` in `target_rotation`.

    Returns a tuple of action tuples, each ending in HardDrop, listed in a
    stable order. An empty tuple means the target cannot be reached.
    """
    config = config or {}
    check_piece_type(piece_type)
    check_rotation(target_rotation)
    if isinstance(target_x, bool) or not isinstance(target_x, (int, np.integer)):
        raise ValueError(f"Target column must be an integer, got {target_x!r}")
    board_width = config.get('board_width', 10)
    # No footprint fits a box outside these columns; keep such keys out of the cache.
    if not -COLUMN_MARGIN <= target_x < board_width:
        return ()
    return _optimal_paths(piece_type, int(target_x), target_rotation,
                          bool(config.get('allow_180', False)),
                          board_width, config.get('board_height', 20))


def optimal_length(piece_type, target_x, target_rotation, config=None):
    """Minimal number of inputs (HardDrop included), or None when unreachable."""
    sequences = compute_optimal_sequences(piece_type, target_x, target_rotation, config)
    if not sequences:
        return None
    return min(len(sequence) for sequence in sequences)


def generate_move_sequence(piece_type, target_x, target_rotation, config=None):
    """First optimal sequence as a list (for hints and ghost playback), or None."""
    sequences = compute_optimal_sequences(piece_type, target_x, target_rotation, config)
    if not sequences:
        return None
    return list(sequences[0])


def finesse_cost_table(piece_type, config=None):
    """
    Minimal input counts for every placement of a piece, as an int array of
    shape (4, board_width + COLUMN_MARGIN). Entry [rot, x + COLUMN_MARGIN]
    holds the length for bounding-box column x, or -1 if unreachable.
    """
    board = TetrisBoard(config)
    columns = board.column_range(COLUMN_MARGIN)
    table = np.full((len(ROTATION_STATES), len(columns)), -1, dtype=int)
    for rotation in ROTATION_STATES:
        for index, x in enumerate(columns):
            length = optimal_length(piece_type, x, rotation, config)
            if length is not None:
                table[rotation, index] = length
    return table


def clear_cache():
    _optimal_paths.cache_clear()
