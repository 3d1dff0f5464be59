"""
scoring.py
Derivation rules that turn a candidate score vector into the quality metrics stored on each MoveEvent.
Related modules:
- events.py: MoveEvent.create() calls these helpers.
- session_analysis.py: Re-derives decision difficulty from stored candidate scores.
"""

import math
from typing import List, Optional, Sequence

from .moves import Move

# score of a direction that would not change the board
SENTINEL_SCORE = -1.0

# relative loss above which a move counts as bad
BAD_MOVE_THRESHOLD = 0.1

# std-dev bounds for EASY / MEDIUM decisions; anything above is HARD
EASY_MAX_DEVIATION = 50.0
MEDIUM_MAX_DEVIATION = 200.0


def check_scores(scores: Sequence[float]) -> List[float]:
    """
    Validate that a candidate vector has one score per direction (Up, Down, Left, Right).
    Raises:
        ValueError: If the vector does not have exactly four entries.
    """
    values = [float(s) for s in scores]
    if len(values) != 4:
        raise ValueError(f"Expected 4 candidate scores (Up, Down, Left, Right), got {len(values)}")
    return values


def best_score(scores: Sequence[float]) -> float:
    """
    Maximum over all four candidate scores, sentinels included.
    NaN entries are skipped; if nothing comparable is left the sentinel is returned.
    """
    best: Optional[float] = None
    for score in scores:
        if math.isnan(score):
            continue
        if best is None or score > best:
            best = score
    return SENTINEL_SCORE if best is None else best


def chosen_score(scores: Sequence[float], move: Move) -> float:
    return scores[move.index]


def _std_dev(values: Sequence[float]) -> float:
    mean = sum(values) / len(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


def dispersion(scores: Sequence[float]) -> float:
    """Population standard deviation over all four raw scores, sentinels included."""
    return _std_dev(scores)


def valid_dispersion(scores: Sequence[float]) -> Optional[float]:
    """
    Population standard deviation over the legal (non-sentinel) scores only.
    Returns None when no direction is legal.
    """
    valid = [s for s in scores if s != SENTINEL_SCORE]
    if not valid:
        return None
    return _std_dev(valid)


def is_bad_move(best: float, chosen: float) -> bool:
    """
    True when the chosen score is more than 10% below the best one.
    A non-positive best score never flags a move.
    """
    if best > 0:
        return (best - chosen) / best > BAD_MOVE_THRESHOLD
    return False


def classify_difficulty(scores: Sequence[float]) -> str:
    """
    EASY / MEDIUM / HARD from the spread of the legal candidate scores, NONE if no move is legal.
    """
    deviation = valid_dispersion(scores)
    if deviation is None:
        return "NONE"
    if deviation < EASY_MAX_DEVIATION:
        return "EASY"
    if deviation < MEDIUM_MAX_DEVIATION:
        return "MEDIUM"
    return "HARD"
