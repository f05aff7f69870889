# export_finesse_table.py
# Precomputes the optimal finesse for every (piece, rotation, column) and
# writes it as JSON and CSV for the guided-mode card generator.

import argparse
import json
import logging
import os

import pandas as pd

from main import load_config, setup_logging
from operation_module import COLUMN_MARGIN, compute_optimal_sequences
from tetris_board import TetrisBoard
from tetrominoes import PIECE_TYPES, ROTATION_STATES, rotation_name

logger = logging.getLogger(__name__)

OUTPUT_JSON_NAME = "finesse_table.json"
OUTPUT_CSV_NAME = "finesse_table.csv"


def build_finesse_table(config=None, pieces=None, include_unreachable=False):
    """One row per placement: piece, x, rot, length (0 = unreachable), sequences."""
    config = config or {}
    board = TetrisBoard(config)
    rows = []
    for piece_type in pieces or PIECE_TYPES:
        for rotation in ROTATION_STATES:
            for x in board.column_range(COLUMN_MARGIN):
                sequences = compute_optimal_sequences(piece_type, x, rotation, config)
                if not sequences and not include_unreachable:
                    continue
                rows.append({
                    'piece': piece_type,
                    'x': x,
                    'rot': rotation_name(rotation),
                    'length': len(sequences[0]) if sequences else 0,
                    'sequences': [list(sequence) for sequence in sequences],
                })
    return pd.DataFrame(rows, columns=['piece', 'x', 'rot', 'length', 'sequences'])


def export_finesse_table(output_dir, config=None, pieces=None, include_unreachable=False):
    """Writes the table to `output_dir` and returns the (json_path, csv_path) pair."""
    table_df = build_finesse_table(config, pieces, include_unreachable)
    if table_df.empty:
        raise ValueError("Finesse table is empty; check the board configuration.")

    os.makedirs(output_dir, exist_ok=True)
    json_path = os.path.join(output_dir, OUTPUT_JSON_NAME)
    csv_path = os.path.join(output_dir, OUTPUT_CSV_NAME)

    table_df.to_json(json_path, orient='records', indent=2)

    # Sequences are JSON-encoded in the CSV so the nested lists survive.
    csv_df = table_df.copy()
    csv_df['sequences'] = csv_df['sequences'].apply(json.dumps)
    csv_df.to_csv(csv_path, index=False)

    logger.info("Exported %d placements to %s and %s", len(table_df), json_path, csv_path)
    return json_path, csv_path


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Export the optimal finesse table to JSON and CSV.")
    parser.add_argument('--config', type=str, default='config.yaml', help="Path to the YAML config file.")
    parser.add_argument('--output_dir', type=str, default=None,
                        help="Directory for the exported files (defaults to export_dir in the config).")
    parser.add_argument('--pieces', nargs='+', type=str.upper, choices=PIECE_TYPES,
                        help="Only export these pieces. If not provided, all pieces are exported.")
    parser.add_argument('--include_unreachable', action='store_true',
                        help="Also write rows for placements that have no finesse.")
    args = parser.parse_args()

    export_config = load_config(args.config)
    setup_logging(export_config)
    output_dir = args.output_dir or export_config.get('export_dir', 'generated/')
    json_out, csv_out = export_finesse_table(output_dir, export_config, args.pieces, args.include_unreachable)
    print(f"Success! Finesse table written to '{json_out}' and '{csv_out}'")
