"""
events.py
Defines the MoveEvent and SessionSummary dataclasses: the shared data contract between the recorder,
the finalizer and the offline analyzer.
Related modules:
- recorder.py: Creates MoveEvent objects, one per move.
- finalizer.py: Builds the SessionSummary at game end.
- csv_io.py / serializer.py: Convert both types to and from their file formats.
"""

import datetime
from dataclasses import dataclass
from typing import List, Optional, Sequence

from tile_telemetry.core.moves import Move
from tile_telemetry.core import scoring


@dataclass(frozen=True)
class MoveEvent:
    """
    One committed move with its timing, candidate scores and derived quality metrics.
    Fields:
        timestamp (datetime): Wall-clock time when the move was recorded (UTC).
        board_state (str): The 16 tile values before the move, comma-joined.
        move_chosen (str): 'Up', 'Down', 'Left' or 'Right'.
        time_taken_ms (int): Decision latency.
        up_score, down_score, left_score, right_score (float): Candidate scores (-1 = illegal direction).
        best_score (float): Maximum candidate score.
        chosen_score (float): Candidate score of move_chosen.
        variation_score (float): Population std-dev of the four candidate scores.
        is_bad_move (bool): Chosen score more than 10% below the best.
        game_score (int): Game score when the move was made.
        move_number (int): 1-based index within the session.
    """
    timestamp: datetime.datetime
    board_state: str
    move_chosen: str
    time_taken_ms: int
    up_score: float
    down_score: float
    left_score: float
    right_score: float
    best_score: float
    chosen_score: float
    variation_score: float
    is_bad_move: bool
    game_score: int
    move_number: int

    @classmethod
    def create(cls, timestamp: datetime.datetime, board_state: str, move: Move, time_taken_ms: int,
               candidate_scores: Sequence[float], game_score: int, move_number: int) -> "MoveEvent":
        """
        Build an event and derive best/chosen/variation/bad-move from the candidate scores.
        Raises:
            ValueError: If candidate_scores does not hold exactly four values.
        """
        scores = scoring.check_scores(candidate_scores)
        best = scoring.best_score(scores)
        chosen = scoring.chosen_score(scores, move)
        up, down, left, right = scores
        return cls(
            timestamp=timestamp,
            board_state=board_state,
            move_chosen=move.label,
            time_taken_ms=int(time_taken_ms),
            up_score=up,
            down_score=down,
            left_score=left,
            right_score=right,
            best_score=best,
            chosen_score=chosen,
            variation_score=scoring.dispersion(scores),
            is_bad_move=scoring.is_bad_move(best, chosen),
            game_score=int(game_score),
            move_number=int(move_number),
        )

    @property
    def candidate_scores(self) -> List[float]:
        return [self.up_score, self.down_score, self.left_score, self.right_score]

    @property
    def move(self) -> Move:
        return Move.parse(self.move_chosen)

    @property
    def score_loss(self) -> float:
        return self.best_score - self.chosen_score


@dataclass(frozen=True)
class SessionSummary:
    """
    Per-session aggregate persisted at game end.
    Fields:
        session_id (str): Sortable id derived from the start time (YYYYMMDD_HHMMSS).
        start_time (datetime): Session start (UTC).
        end_time (datetime|None): Session end; None only for summaries built outside the finalizer.
        final_score (int): Game score at the end.
        highest_tile (int): Largest tile reached.
        total_moves (int): Number of recorded moves.
        bad_moves (int): Number of moves flagged as bad.
        average_time_per_move_ms (float): Mean decision latency (0 with no moves).
    """
    session_id: str
    start_time: datetime.datetime
    end_time: Optional[datetime.datetime]
    final_score: int
    highest_tile: int
    total_moves: int
    bad_moves: int
    average_time_per_move_ms: float

    @classmethod
    def from_events(cls, session_id: str, start_time: datetime.datetime, end_time: Optional[datetime.datetime],
                    events: Sequence[MoveEvent], final_score: int, highest_tile: int) -> "SessionSummary":
        total_moves = len(events)
        bad_moves = sum(1 for e in events if e.is_bad_move)
        total_time_ms = sum(e.time_taken_ms for e in events)
        average = total_time_ms / total_moves if total_moves > 0 else 0.0
        return cls(
            session_id=session_id,
            start_time=start_time,
            end_time=end_time,
            final_score=int(final_score),
            highest_tile=int(highest_tile),
            total_moves=total_moves,
            bad_moves=bad_moves,
            average_time_per_move_ms=average,
        )

    @property
    def month_key(self) -> str:
        """Key of the monthly aggregate this session belongs to (YYYYMM of the start time)."""
        return month_key(self.start_time)

    @property
    def bad_move_rate(self) -> Optional[float]:
        """bad_moves / total_moves, or None for a session without moves."""
        if self.total_moves == 0:
            return None
        return self.bad_moves / self.total_moves


def make_session_id(start_time: datetime.datetime) -> str:
    return start_time.strftime("%Y%m%d_%H%M%S")


def month_key(moment: datetime.datetime) -> str:
    return moment.strftime("%Y%m")
