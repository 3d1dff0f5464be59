"""
finalizer.py
Writes a finished session to the three sinks: the detailed move log, the monthly aggregate and the
cumulative ledger.

The sinks are not written transactionally. save_session() runs four steps in order and stops at the
first failure, leaving whatever was already written in place:
    detailed_log -> summary -> monthly_aggregate -> ledger
A failure in monthly_aggregate, for example, leaves a detailed log whose session is missing from both
aggregates. The returned SaveResult names the failed step so callers can report it.
Related modules:
- recorder.py: Source of the session id, start time and events.
- csv_io.py / serializer.py: File formats of the sinks.
"""

import os
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from tile_telemetry.core.config import TelemetryConfig
from . import csv_io, serializer
from .errors import PersistenceError, SinkIOError
from .events import SessionSummary
from .recorder import MoveRecorder

logger = logging.getLogger(__name__)


class FinalizeStep(str, Enum):
    DETAILED_LOG = "detailed_log"
    SUMMARY = "summary"
    MONTHLY_AGGREGATE = "monthly_aggregate"
    LEDGER = "ledger"


@dataclass
class SaveResult:
    """
    Outcome of SessionFinalizer.save_session().
    Fields:
        ok (bool): True when all four steps completed.
        summary (SessionSummary|None): The computed summary (None if step 1 failed).
        completed_steps (list[FinalizeStep]): Steps that finished, in order.
        failed_step (FinalizeStep|None): The step that raised, if any.
        error (PersistenceError|None): The failure of that step.
        moves_path, monthly_path, ledger_path (str|None): Sink locations.
    """
    ok: bool
    summary: Optional[SessionSummary] = None
    completed_steps: List[FinalizeStep] = field(default_factory=list)
    failed_step: Optional[FinalizeStep] = None
    error: Optional[PersistenceError] = None
    moves_path: Optional[str] = None
    monthly_path: Optional[str] = None
    ledger_path: Optional[str] = None


class SessionFinalizer:
    """
    Persists the recorder's session at game end.
    """
    def __init__(self, recorder: MoveRecorder, config: Optional[TelemetryConfig] = None):
        self.recorder = recorder
        self.config = config or TelemetryConfig()

    def save_session(self, final_score: int, highest_tile: int) -> SaveResult:
        """
        Run the four finalization steps.
        Args:
            final_score (int): Score at game end.
            highest_tile (int): Largest tile reached.
        Returns:
            SaveResult: ok=True on success, otherwise the failed step and its error.
        """
        recorder = self.recorder
        events = recorder.events()
        result = SaveResult(
            ok=False,
            moves_path=self.config.moves_path(recorder.session_id),
            ledger_path=self.config.ledger_path(),
        )

        # 1. detailed log (write-once)
        try:
            os.makedirs(self.config.data_dir, exist_ok=True)
        except OSError as e:
            error = SinkIOError(f"Cannot create data directory: {e}", self.config.data_dir, "mkdir")
            error.__cause__ = e
            return self._fail(result, FinalizeStep.DETAILED_LOG, error)
        if not self._run(result, FinalizeStep.DETAILED_LOG, csv_io.write_move_events, events, result.moves_path):
            return result
        logger.info("Wrote %d moves to %s", len(events), result.moves_path)

        # 2. summary, from memory only
        summary = SessionSummary.from_events(
            session_id=recorder.session_id,
            start_time=recorder.session_start,
            end_time=recorder.now(),
            events=events,
            final_score=final_score,
            highest_tile=highest_tile,
        )
        result.summary = summary
        result.completed_steps.append(FinalizeStep.SUMMARY)
        result.monthly_path = self.config.monthly_path(summary.month_key)

        # 3. monthly aggregate (load, append, atomic replace)
        if not self._run(result, FinalizeStep.MONTHLY_AGGREGATE, serializer.append_summary, result.monthly_path, summary):
            return result
        logger.info("Added session %s to %s", summary.session_id, result.monthly_path)

        # 4. cumulative ledger (append-only)
        if not self._run(result, FinalizeStep.LEDGER, csv_io.append_summary_to_ledger, summary, result.ledger_path):
            return result
        logger.info("Appended session %s to %s", summary.session_id, result.ledger_path)

        result.ok = True
        recorder.flush()
        return result

    def _run(self, result: SaveResult, step: FinalizeStep, func, *args) -> bool:
        try:
            func(*args)
        except PersistenceError as e:
            self._fail(result, step, e)
            return False
        result.completed_steps.append(step)
        return True

    @staticmethod
    def _fail(result: SaveResult, step: FinalizeStep, error: PersistenceError) -> SaveResult:
        logger.error("Session save failed at %s: %s", step.value, error)
        result.failed_step = step
        result.error = error
        return result
