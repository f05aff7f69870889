# finesse_analyzer.py
# Input-log normalization and grading of a player's trace against the
# optimal finesse set.

import logging
from collections import namedtuple

from operation_module import (DAS_LEFT, DAS_RIGHT, HARD_DROP, MOVE_LEFT, MOVE_RIGHT, ROTATE_180,
                              ROTATE_CCW, ROTATE_CW, SOFT_DROP, compute_optimal_sequences)
from tetrominoes import rotation_name

logger = logging.getLogger(__name__)

# Raw input event kinds, as logged by the input layer.
TAP_MOVE = 'TapMove'
HOLD_MOVE = 'HoldMove'      # DAS charge start
REPEAT_MOVE = 'RepeatMove'  # ARR repeat, never a finesse input
ROTATE = 'Rotate'
SOFT_DROP_EVENT = 'SoftDrop'
HARD_DROP_EVENT = 'HardDrop'
HOLD = 'Hold'
TICK = 'Tick'

EVENT_KINDS = (TAP_MOVE, HOLD_MOVE, REPEAT_MOVE, ROTATE, SOFT_DROP_EVENT, HARD_DROP_EVENT, HOLD, TICK)
_IGNORED_KINDS = (REPEAT_MOVE, TICK)

# Fault types
WRONG_TARGET = 'wrong_target'
INFEASIBLE_TARGET = 'infeasible_target'
EXTRA_INPUT = 'extra_input'
SUBOPTIMAL_PATH = 'suboptimal_path'

# Verdict kinds
OPTIMAL = 'optimal'
FAULTY = 'faulty'

DEFAULT_CANCEL_WINDOW_MS = 50

_ROTATE_ACTIONS = {'CW': ROTATE_CW, 'CCW': ROTATE_CCW, '180': ROTATE_180}

InputEvent = namedtuple('InputEvent', ['kind', 't_ms', 'value', 'optimistic'], defaults=(None, False))
InputEvent.__doc__ = """
One raw input-log entry. `value` is the direction (-1/1) for TapMove,
HoldMove and RepeatMove, 'CW'/'CCW'/'180' for Rotate, and on/off (bool) for
SoftDrop. `optimistic` marks a tap emitted on key-down before the input layer
knew whether the key would be held.
"""

Fault = namedtuple('Fault', ['type', 'description', 'position', 'count'], defaults=(None, None))


class FaultVerdict(namedtuple('FaultVerdict', ['kind', 'player_sequence', 'optimal_sequences', 'faults'])):
    """Outcome of grading one piece lock. Built once, never mutated."""
    __slots__ = ()

    @property
    def is_optimal(self):
        return self.kind == OPTIMAL

    @property
    def optimal_length(self):
        if not self.optimal_sequences:
            return None
        return min(len(sequence) for sequence in self.optimal_sequences)

    @property
    def fault_types(self):
        return tuple(fault.type for fault in self.faults)


def coerce_event(event):
    """Accepts an InputEvent, a mapping or a (kind, t_ms[, value[, optimistic]]) sequence."""
    if isinstance(event, InputEvent):
        return event
    if isinstance(event, dict):
        return InputEvent(**event)
    return InputEvent(*event)


def _drop_optimistic_taps(events):
    """An optimistic tap followed by a DAS start in the same direction is part of that DAS."""
    kept = []
    for i, event in enumerate(events):
        if event.kind == TAP_MOVE and event.optimistic:
            following = next((e for e in events[i + 1:] if e.kind in (TAP_MOVE, HOLD_MOVE)), None)
            if following is not None and following.kind == HOLD_MOVE and following.value == event.value:
                continue
        kept.append(event)
    return kept


def _find_cancellation_pairs(events, cancel_window_ms):
    removed = set()
    for i, current in enumerate(events):
        # A tap without a direction moves nothing and pairs with nothing.
        if i in removed or current.kind != TAP_MOVE or current.value not in (-1, 1):
            continue
        for j in range(i + 1, len(events)):
            if j in removed:
                continue
            following = events[j]
            if following.t_ms - current.t_ms > cancel_window_ms:
                break
            if following.kind == TAP_MOVE and following.value == -current.value:
                removed.update((i, j))
                break
    return removed


def _to_finesse_action(event, soft_drop_on):
    """Maps one surviving event to a finesse action (or None) and the new soft-drop state."""
    if event.kind == TAP_MOVE:
        return {-1: MOVE_LEFT, 1: MOVE_RIGHT}.get(event.value), soft_drop_on
    if event.kind == HOLD_MOVE:
        return {-1: DAS_LEFT, 1: DAS_RIGHT}.get(event.value), soft_drop_on
    if event.kind == ROTATE:
        return _ROTATE_ACTIONS.get(event.value), soft_drop_on
    if event.kind == HARD_DROP_EVENT:
        return HARD_DROP, soft_drop_on
    if event.kind == SOFT_DROP_EVENT:
        on = bool(event.value)
        return (SOFT_DROP if on and not soft_drop_on else None), on
    return None, soft_drop_on


def normalize_input_events(events, cancel_window_ms=DEFAULT_CANCEL_WINDOW_MS):
    """
    Reduces a raw input log to the finesse alphabet.

    Events are ordered by timestamp (stable for ties). Ticks and ARR repeats
    are dropped, an optimistic tap absorbed by a following DAS start in the
    same direction is dropped, and a tap followed within `cancel_window_ms`
    by an opposite tap cancels with it. Rotations, holds and drops never
    cancel. SoftDrop counts once per engagement. Hold is not a finesse input
    and does not appear in the result.
    """
    ordered = sorted((coerce_event(e) for e in events), key=lambda e: e.t_ms)
    relevant = []
    for event in ordered:
        if event.kind not in EVENT_KINDS:
            logger.warning("Ignoring unknown input event kind %r", event.kind)
            continue
        if event.kind not in _IGNORED_KINDS:
            relevant.append(event)

    relevant = _drop_optimistic_taps(relevant)
    removed = _find_cancellation_pairs(relevant, cancel_window_ms)

    actions = []
    soft_drop_on = False
    for i, event in enumerate(relevant):
        if i in removed:
            continue
        action, soft_drop_on = _to_finesse_action(event, soft_drop_on)
        if action is not None:
            actions.append(action)
    return actions


def grade(player_trace, locked_piece, target_x, target_rotation, optimal_sequences=None, config=None):
    """
    Grades a normalized finesse trace for one locked piece.

    The comparison is by length: any trace as short as the shortest optimal
    sequence is optimal, whichever optimal path it took. `optimal_sequences`
    defaults to the search result for the locked piece's kind.
    """
    player_sequence = tuple(player_trace)
    if optimal_sequences is None:
        optimal_sequences = compute_optimal_sequences(locked_piece.type, target_x, target_rotation, config)
    optimal_sequences = tuple(tuple(sequence) for sequence in optimal_sequences)

    faults = []
    if not locked_piece.matches(target_x, target_rotation):
        faults.append(Fault(
            WRONG_TARGET,
            f"Expected x={target_x}, rot={rotation_name(target_rotation)}; "
            f"locked at x={locked_piece.x}, rot={rotation_name(locked_piece.rotation)}"))
    if not optimal_sequences:
        faults.append(Fault(
            INFEASIBLE_TARGET,
            f"No placement exists for {locked_piece.type} at x={target_x}, rot={rotation_name(target_rotation)}"))

    if not faults:
        minimal = min(len(sequence) for sequence in optimal_sequences)
        played = len(player_sequence)
        if played > minimal:
            faults.append(Fault(EXTRA_INPUT, f"Used {played} inputs instead of optimal {minimal}",
                                minimal, played - minimal))
            if not player_sequence or player_sequence[-1] != HARD_DROP:
                faults.append(Fault(SUBOPTIMAL_PATH, "Piece locked without a hard drop", played))
        elif played < minimal:
            faults.append(Fault(SUBOPTIMAL_PATH,
                                f"Sequence incomplete or mismatched; expected {minimal} inputs", played))

    return FaultVerdict(FAULTY if faults else OPTIMAL, player_sequence, optimal_sequences, tuple(faults))


def analyze_piece_lock(raw_events, locked_piece, target_x=None, target_rotation=None, config=None):
    """
    Normalizes the raw input log of one piece and grades it. Without an
    explicit target (free play) the locked placement itself is the target.
    """
    config = config or {}
    if target_x is None:
        target_x = locked_piece.x
    if target_rotation is None:
        target_rotation = locked_piece.rotation

    trace = normalize_input_events(raw_events, config.get('finesse_cancel_ms', DEFAULT_CANCEL_WINDOW_MS))
    verdict = grade(trace, locked_piece, target_x, target_rotation, config=config)
    if verdict.is_optimal:
        logger.info("%s x=%d rot=%s: optimal (%d inputs)", locked_piece.type, target_x,
                    rotation_name(target_rotation), len(trace))
    else:
        logger.info("%s x=%d rot=%s: faulty %s", locked_piece.type, target_x,
                    rotation_name(target_rotation), ', '.join(verdict.fault_types))
    return verdict
