"""
ledger_analysis.py
Cross-session statistics from the cumulative ledger (or from one monthly aggregate).
"""

import os
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from tile_telemetry.persistence import csv_io, serializer
from tile_telemetry.persistence.events import SessionSummary


@dataclass
class SessionStats:
    """
    Fields:
        avg_bad_move_rate (float|None): Mean of each session's own bad_moves/total_moves (0..1).
            Sessions without moves are left out; None if no session has moves.
        score_improvement_pct (float|None): Change of the mean final score between the first and
            last quarter of sessions (by start time); None with fewer than 4 sessions.
    """
    total_sessions: int
    avg_final_score: float
    best_score: int
    highest_tile: int
    avg_moves: float
    avg_bad_move_rate: Optional[float]
    score_improvement_pct: Optional[float]


def average_bad_move_rate(sessions: Sequence[SessionSummary]) -> Optional[float]:
    """Average of per-session rates, not the ratio of summed bad moves to summed moves."""
    rates = [s.bad_move_rate for s in sessions if s.bad_move_rate is not None]
    if not rates:
        return None
    return sum(rates) / len(rates)


def score_improvement(sessions: Sequence[SessionSummary]) -> Optional[float]:
    ordered = sorted(sessions, key=lambda s: s.start_time)
    quarter = len(ordered) // 4
    if quarter == 0:
        return None
    first = sum(s.final_score for s in ordered[:quarter]) / quarter
    last = sum(s.final_score for s in ordered[-quarter:]) / quarter
    if first == 0:
        return None
    return (last - first) / first * 100.0


def compute_session_stats(sessions: Sequence[SessionSummary]) -> SessionStats:
    """
    Raises:
        ValueError: If `sessions` is empty.
    """
    if not sessions:
        raise ValueError("No sessions to analyze")
    n = len(sessions)
    return SessionStats(
        total_sessions=n,
        avg_final_score=sum(s.final_score for s in sessions) / n,
        best_score=max(s.final_score for s in sessions),
        highest_tile=max(s.highest_tile for s in sessions),
        avg_moves=sum(s.total_moves for s in sessions) / n,
        avg_bad_move_rate=average_bad_move_rate(sessions),
        score_improvement_pct=score_improvement(sessions),
    )


def format_session_report(stats: SessionStats) -> List[str]:
    rate = "n/a" if stats.avg_bad_move_rate is None else f"{stats.avg_bad_move_rate * 100.0:.1f}%"
    lines = [
        "=== Session Summary ===",
        f"Total sessions: {stats.total_sessions}",
        f"Average final score: {stats.avg_final_score:.0f}",
        f"Best score: {stats.best_score}",
        f"Highest tile achieved: {stats.highest_tile}",
        f"Average moves per game: {stats.avg_moves:.1f}",
        f"Average bad move rate: {rate}",
    ]
    if stats.score_improvement_pct is not None:
        lines.append(f"Score improvement (first vs last quarter): {stats.score_improvement_pct:+.1f}%")
    return lines


def _report(sessions: List[SessionSummary], echo: Callable[[str], None]) -> Optional[SessionStats]:
    if not sessions:
        echo("No session data found")
        return None
    stats = compute_session_stats(sessions)
    echo("")
    for line in format_session_report(stats):
        echo(line)
    return stats


def analyze_all_sessions(ledger_path: str = "player_sessions.csv",
                         echo: Callable[[str], None] = print) -> Optional[SessionStats]:
    """
    Print the cross-session report of the cumulative ledger.
    A missing, empty or header-only ledger is not an error: an informational message is printed and None returned.
    Raises:
        SinkIOError / MalformedDataError: If the ledger exists but cannot be read or parsed.
    """
    if not os.path.exists(ledger_path):
        echo(f"No sessions file found: {ledger_path}")
        return None
    return _report(csv_io.read_ledger(ledger_path), echo)


def analyze_month(monthly_path: str, echo: Callable[[str], None] = print) -> Optional[SessionStats]:
    """
    Same report as analyze_all_sessions(), restricted to one monthly aggregate.
    """
    if not os.path.exists(monthly_path):
        echo(f"No monthly sessions file found: {monthly_path}")
        return None
    return _report(serializer.load_summaries(monthly_path), echo)
