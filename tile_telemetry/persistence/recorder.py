"""
recorder.py
Implements the per-session move recorder. One MoveEvent is appended in memory for every committed move;
nothing touches the disk until SessionFinalizer.save_session() runs at game end.
Related modules:
- events.py: Defines MoveEvent.
- finalizer.py: Reads the recorded events and writes them to the sinks.
"""

import datetime
from typing import Callable, List, Optional, Sequence, Union

from tile_telemetry.core.board import BoardLike, board_to_string
from tile_telemetry.core.moves import Move
from .events import MoveEvent, make_session_id


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class MoveRecorder:
    """
    Records MoveEvent objects for a single session.
    Methods:
        record_move(...): Derive and append a new event.
        events(): Get all recorded events, in order.
        flush(): Drop the in-memory events once they are persisted.
    """
    def __init__(self, clock: Optional[Callable[[], datetime.datetime]] = None):
        self._clock = clock or utc_now
        self.session_start = self._clock()
        self.session_id = make_session_id(self.session_start)
        self._events: List[MoveEvent] = []

    def now(self) -> datetime.datetime:
        return self._clock()

    def record_move(self, board: BoardLike, move: Union[Move, str], time_taken_ms: int,
                    candidate_scores: Sequence[float], game_score: int, move_number: int) -> None:
        """
        Append one MoveEvent for a committed move.
        Args:
            board: Board before the move (BoardState, 16 values or 4x4 grid).
            move: Direction chosen by the player.
            time_taken_ms (int): Decision latency.
            candidate_scores: [Up, Down, Left, Right] evaluator scores, -1 for illegal directions.
            game_score (int): Current game score.
            move_number (int): 1-based index of the move.
        """
        event = MoveEvent.create(
            timestamp=self._clock(),
            board_state=board_to_string(board),
            move=Move.parse(move),
            time_taken_ms=time_taken_ms,
            candidate_scores=candidate_scores,
            game_score=game_score,
            move_number=move_number,
        )
        self._events.append(event)

    def events(self) -> List[MoveEvent]:
        """Return all recorded events as a list."""
        return list(self._events)

    def flush(self) -> None:
        """Discard recorded events."""
        self._events.clear()

    def __len__(self):
        return len(self._events)
