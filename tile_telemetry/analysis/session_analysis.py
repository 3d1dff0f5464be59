"""
session_analysis.py
Per-move statistics for a single session, computed from its detailed log.
Reports timing, decision quality, move preferences, early-vs-late progression, decision-time buckets,
decision difficulty and the rolling good-move trend.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from tile_telemetry.core.moves import MOVE_ORDER
from tile_telemetry.core.scoring import classify_difficulty
from tile_telemetry.persistence import csv_io
from tile_telemetry.persistence.events import MoveEvent

# (label, upper bound in seconds); the last bucket is open-ended
TIME_BUCKETS = (
    ("Fast (0-1s)", 1.0),
    ("Normal (1-3s)", 3.0),
    ("Slow (3-5s)", 5.0),
    ("Very Slow (5s+)", None),
)
DIFFICULTY_LEVELS = ("EASY", "MEDIUM", "HARD", "NONE")
TREND_WINDOW = 20


@dataclass
class HalfStats:
    """Bad-move rate and mean latency of one half of a session. Rates are None for an empty half."""
    moves: int
    bad_moves: int
    bad_move_pct: Optional[float]
    avg_time_s: Optional[float]


@dataclass
class MoveStats:
    total_moves: int
    avg_time_s: float
    min_time_s: float
    max_time_s: float
    bad_moves: int
    bad_move_pct: float
    avg_score_loss: float
    avg_variation: float
    move_counts: Dict[str, int]
    early: HalfStats
    late: HalfStats
    time_buckets: Dict[str, int] = field(default_factory=dict)
    difficulty_counts: Dict[str, int] = field(default_factory=dict)
    good_move_trend: List[float] = field(default_factory=list)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def half_stats(events: Sequence[MoveEvent]) -> HalfStats:
    bad = sum(1 for e in events if e.is_bad_move)
    if not events:
        return HalfStats(moves=0, bad_moves=0, bad_move_pct=None, avg_time_s=None)
    return HalfStats(
        moves=len(events),
        bad_moves=bad,
        bad_move_pct=bad / len(events) * 100.0,
        avg_time_s=_mean([e.time_taken_ms for e in events]) / 1000.0,
    )


def split_progression(events: Sequence[MoveEvent]) -> Tuple[List[MoveEvent], List[MoveEvent]]:
    """Split at n // 2 into the early half [0, mid) and the late half [mid, n)."""
    mid = len(events) // 2
    return list(events[:mid]), list(events[mid:])


def time_bucket(time_taken_ms: int) -> str:
    seconds = time_taken_ms / 1000.0
    for label, upper in TIME_BUCKETS:
        if upper is None or seconds <= upper:
            return label
    return TIME_BUCKETS[-1][0]


def good_move_trend(events: Sequence[MoveEvent], window: int = TREND_WINDOW) -> List[float]:
    """
    Percentage of good (not bad) moves in each sliding window of `window` moves.
    Empty when the session is shorter than one window.
    """
    flags = [0 if e.is_bad_move else 1 for e in events]
    if len(flags) < window:
        return []
    trend = []
    good = sum(flags[:window])
    trend.append(good / window * 100.0)
    for i in range(window, len(flags)):
        good += flags[i] - flags[i - window]
        trend.append(good / window * 100.0)
    return trend


def compute_move_stats(events: Sequence[MoveEvent]) -> MoveStats:
    """
    Compute every per-session statistic.
    Raises:
        ValueError: If `events` is empty.
    """
    if not events:
        raise ValueError("No move events to analyze")
    n = len(events)
    times = [e.time_taken_ms for e in events]
    bad = sum(1 for e in events if e.is_bad_move)

    move_counts = {m.label: 0 for m in MOVE_ORDER}
    for e in events:
        move_counts[e.move_chosen] += 1

    time_buckets = {label: 0 for label, _ in TIME_BUCKETS}
    for t in times:
        time_buckets[time_bucket(t)] += 1

    difficulty_counts = {level: 0 for level in DIFFICULTY_LEVELS}
    for e in events:
        difficulty_counts[classify_difficulty(e.candidate_scores)] += 1

    early, late = split_progression(events)
    return MoveStats(
        total_moves=n,
        avg_time_s=_mean(times) / 1000.0,
        min_time_s=min(times) / 1000.0,
        max_time_s=max(times) / 1000.0,
        bad_moves=bad,
        bad_move_pct=bad / n * 100.0,
        avg_score_loss=_mean([e.score_loss for e in events]),
        avg_variation=_mean([e.variation_score for e in events]),
        move_counts=move_counts,
        early=half_stats(early),
        late=half_stats(late),
        time_buckets=time_buckets,
        difficulty_counts=difficulty_counts,
        good_move_trend=good_move_trend(events),
    )


def _pct(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.1f}%"


def _secs(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.2f}s"


def format_move_report(stats: MoveStats) -> List[str]:
    lines = [
        "=== Player Performance Analysis ===",
        f"Total moves analyzed: {stats.total_moves}",
        "",
        "--- Timing Analysis ---",
        f"Average time per move: {stats.avg_time_s:.2f}s",
        f"Fastest move: {stats.min_time_s:.2f}s",
        f"Slowest move: {stats.max_time_s:.2f}s",
    ]
    for label, count in stats.time_buckets.items():
        lines.append(f"{label}: {count} ({count / stats.total_moves * 100.0:.1f}%)")

    lines += [
        "",
        "--- Decision Quality ---",
        f"Bad moves: {stats.bad_moves} ({stats.bad_move_pct:.1f}%)",
        f"Average score loss per move: {stats.avg_score_loss:.1f}",
        f"Average decision difficulty: {stats.avg_variation:.1f}",
    ]
    for level, count in stats.difficulty_counts.items():
        if level == "NONE" and count == 0:
            continue
        lines.append(f"{level}: {count} ({count / stats.total_moves * 100.0:.1f}%)")

    lines += ["", "--- Move Preferences ---"]
    for label, count in stats.move_counts.items():
        lines.append(f"{label}: {count} ({count / stats.total_moves * 100.0:.1f}%)")

    early, late = stats.early, stats.late
    lines += [
        "",
        "--- Game Progression ---",
        f"Early game bad moves: {early.bad_moves}/{early.moves} ({_pct(early.bad_move_pct)})",
        f"Late game bad moves: {late.bad_moves}/{late.moves} ({_pct(late.bad_move_pct)})",
        f"Early game avg time: {_secs(early.avg_time_s)}",
        f"Late game avg time: {_secs(late.avg_time_s)}",
    ]
    if stats.good_move_trend:
        trend = stats.good_move_trend
        lines.append(
            f"Good moves per {TREND_WINDOW}-move window: first {trend[0]:.1f}%, "
            f"last {trend[-1]:.1f}%, best {max(trend):.1f}%"
        )
    return lines


def analyze_session_moves(path: str, echo: Callable[[str], None] = print) -> Optional[MoveStats]:
    """
    Load a detailed log, print its report and return the statistics.
    Returns None (after an informational message) when the log holds no moves.
    Raises:
        SinkIOError: If the log cannot be read.
        MalformedDataError: If the log is not in the detailed-log format.
    """
    events = csv_io.read_move_events(path)
    if not events:
        echo(f"No move data found in {path}")
        return None
    stats = compute_move_stats(events)
    for line in format_move_report(stats):
        echo(line)
    return stats
