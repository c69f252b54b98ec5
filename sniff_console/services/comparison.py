"""
Differential comparison of frame snapshots.

The operator captures a baseline, applies a stimulus (presses a button,
turns a knob) and asks which identifiers moved up or down. Each pass keeps
only the identifiers that moved in the requested direction, so alternating
stimulus and classification narrows the candidate set.
"""
from enum import Enum
from typing import Dict, Iterable, List, Sequence

from sniff_console.models.can_frame import CanFrame


class Direction(Enum):
    INCREASE = 'increase'
    DECREASE = 'decrease'


class CompareMode(Enum):
    """Granularity used when comparing a current frame with its baseline."""
    WHOLE = 'whole'
    PAIR = 'pair'


def latest_per_id(frames: Sequence[CanFrame]) -> Dict[int, CanFrame]:
    """Collapse a frame history into the most recent frame per identifier.
    
    Scans from newest to oldest; the first frame seen for an identifier wins.
    The returned dict is ordered newest first.
    """
    latest: Dict[int, CanFrame] = {}
    for frame in reversed(frames):
        if frame.can_id not in latest:
            latest[frame.can_id] = frame
    return latest


def _moved(current: int, baseline: int, direction: Direction) -> bool:
    if direction is Direction.INCREASE:
        return current > baseline
    return current < baseline


def _whole_value_moved(current: CanFrame, baseline: CanFrame, direction: Direction) -> bool:
    return _moved(current.whole_value, baseline.whole_value, direction)


def _byte_pair_moved(current: CanFrame, baseline: CanFrame, direction: Direction) -> bool:
    # Only pairs present in both payloads can be compared; first match wins.
    pairs = min(len(current.data), len(baseline.data)) - 1
    for i in range(max(pairs, 0)):
        if _moved(current.pair_value(i), baseline.pair_value(i), direction):
            return True
    return False


def classify(current: Iterable[CanFrame], baseline: Iterable[CanFrame],
             direction: Direction, mode: CompareMode = CompareMode.WHOLE) -> List[CanFrame]:
    """Select the current frames whose value moved in `direction` against the baseline.
    
    Both inputs are reduced to their latest frame per identifier first.
    Identifiers present in only one of them are dropped.
    
    Args:
        current: Current frame history (e.g. the ingestion buffer)
        baseline: Baseline frame history (e.g. the captured snapshot)
        direction: INCREASE keeps strictly greater values, DECREASE strictly smaller
        mode: WHOLE compares the whole payload as one integer, PAIR compares
            adjacent 16-bit byte pairs and keeps the frame on the first match
        
    Returns:
        Latest current frames that moved, newest first
    """
    current_latest = latest_per_id(list(current))
    baseline_latest = latest_per_id(list(baseline))
    moved = _byte_pair_moved if mode is CompareMode.PAIR else _whole_value_moved
    
    result = []
    for can_id, frame in current_latest.items():
        reference = baseline_latest.get(can_id)
        if reference is None:
            continue
        if moved(frame, reference, direction):
            result.append(frame)
    return result
