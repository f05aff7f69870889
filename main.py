# main.py

import argparse
import logging
import os
import sys

import yaml

from finesse_analyzer import grade
from operation_module import (FINESSE_ACTIONS, HARD_DROP, COLUMN_MARGIN, compute_optimal_sequences,
                              finesse_cost_table, format_sequence, replay_sequence)
from tetrominoes import PIECE_TYPES, Piece, ROTATION_NAMES, parse_rotation, rotation_name
from tetris_board import TetrisBoard

logger = logging.getLogger(__name__)


def load_config(config_path='config.yaml'):
    """Loads the YAML configuration file; a missing file means all defaults."""
    if not os.path.exists(config_path):
        logger.warning("Config file %s not found, using defaults.", config_path)
        return {}
    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def setup_logging(config):
    logging.basicConfig(level=config.get('log_level', 'INFO'),
                        format='[FINESSE] %(asctime)s - %(levelname)s - %(message)s')


def parse_trace(text):
    """Parses a comma separated list of finesse actions, e.g. 'DASLeft,RotateCW,HardDrop'."""
    if not text:
        return []
    actions = [token.strip() for token in text.split(',') if token.strip()]
    unknown = [a for a in actions if a not in FINESSE_ACTIONS]
    if unknown:
        raise ValueError(f"Unknown finesse action(s) {unknown}; expected any of {list(FINESSE_ACTIONS)}")
    return actions


def optimal_mode(config, piece_type, target_x, target_rotation):
    sequences = compute_optimal_sequences(piece_type, target_x, target_rotation, config)
    target = f"{piece_type} x={target_x} rot={rotation_name(target_rotation)}"
    if not sequences:
        print(f"{target}: no finesse exists (target unreachable).")
        return
    print(f"{target}: {len(sequences[0])} inputs, {len(sequences)} optimal sequence(s)")
    for sequence in sequences:
        print(f"  {format_sequence(sequence)}   [{format_sequence(sequence, icons=False)}]")


def grade_mode(config, piece_type, target_x, target_rotation, trace, locked_x=None, locked_rotation=None):
    if locked_x is None and locked_rotation is None:
        # No explicit lock position: replay the trace on the empty board.
        locked_piece = replay_sequence(piece_type, trace, config)
        if HARD_DROP not in trace:
            locked_piece = TetrisBoard(config).drop_to_floor(locked_piece)
    else:
        spawn = Piece.spawn(piece_type)
        locked_piece = spawn._replace(
            x=spawn.x if locked_x is None else locked_x,
            rotation=spawn.rotation if locked_rotation is None else locked_rotation)

    verdict = grade(trace, locked_piece, target_x, target_rotation, config=config)
    print(f"Verdict: {verdict.kind.upper()}")
    print(f"  You:     {format_sequence(verdict.player_sequence) or '(nothing)'}")
    for sequence in verdict.optimal_sequences:
        print(f"  Optimal: {format_sequence(sequence)}")
    for fault in verdict.faults:
        print(f"  Fault [{fault.type}]: {fault.description}")
    return verdict


def table_mode(config, piece_type):
    table = finesse_cost_table(piece_type, config)
    columns = TetrisBoard(config).column_range(COLUMN_MARGIN)
    print(f"Finesse input counts for {piece_type} (-- = unreachable)")
    print('        ' + ''.join(f"{x:>4}" for x in columns))
    for rotation, row in enumerate(table):
        cells = ''.join(f"{v:>4}" if v >= 0 else '  --' for v in row)
        print(f"{ROTATION_NAMES[rotation]:>8}{cells}")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Finesse trainer: optimal input search and grading")
    parser.add_argument('--mode', type=str, default='optimal', choices=['optimal', 'grade', 'table'],
                        help="'optimal': list minimal sequences, 'grade': grade a trace, 'table': cost table")
    parser.add_argument('--config', type=str, default='config.yaml', help="Path to the YAML config file.")
    parser.add_argument('--piece', type=str.upper, default='T', choices=PIECE_TYPES)
    parser.add_argument('--x', type=int, default=None, help="Target bounding-box column (defaults to spawn).")
    parser.add_argument('--rot', type=str, default='spawn', help="Target rotation: spawn/right/reverse/left or 0-3.")
    parser.add_argument('--trace', type=str, default='', help="Player actions, comma separated (grade mode).")
    parser.add_argument('--locked-x', type=int, default=None, help="Column the piece actually locked at.")
    parser.add_argument('--locked-rot', type=str, default=None, help="Rotation the piece actually locked in.")
    parser.add_argument('--allow-180', action='store_true', help="Enable the Rotate180 input.")
    args = parser.parse_args()

    game_config = load_config(args.config)
    setup_logging(game_config)
    if args.allow_180:
        game_config['allow_180'] = True

    try:
        target_rot = parse_rotation(args.rot)
        target_x = args.x if args.x is not None else Piece.spawn(args.piece).x
        if args.mode == 'optimal':
            optimal_mode(game_config, args.piece, target_x, target_rot)
        elif args.mode == 'grade':
            locked_rot = parse_rotation(args.locked_rot) if args.locked_rot is not None else None
            grade_mode(game_config, args.piece, target_x, target_rot, parse_trace(args.trace),
                       args.locked_x, locked_rot)
        elif args.mode == 'table':
            table_mode(game_config, args.piece)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
