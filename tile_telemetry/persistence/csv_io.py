"""
csv_io.py
Persistence utilities for the two tabular sinks: the per-session detailed move log (write-once)
and the cumulative session ledger (append-only, header written on creation).
"""

import os
import csv
import datetime
from typing import Any, Callable, Dict, List, Sequence

from tile_telemetry.core.moves import Move
from .errors import MalformedDataError, SinkIOError
from .events import MoveEvent, SessionSummary

MOVES_HEADER = [
    "timestamp", "board_state", "move_chosen", "time_taken_ms",
    "up_score", "down_score", "left_score", "right_score",
    "best_score", "chosen_score", "variation_score", "is_bad_move",
    "game_score", "move_number",
]
LEDGER_HEADER = [
    "session_id", "start_time", "end_time", "final_score", "highest_tile",
    "total_moves", "bad_moves", "average_time_per_move_ms",
]

# fixed-width timestamp format of the ledger
LEDGER_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def append_row_to_csv(row: Dict[str, Any], csv_path: str, header: List[str]):
    write_header = not os.path.exists(csv_path)
    with open(csv_path, "a", newline='', encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=header)
        if write_header:
            writer.writeheader()
        writer.writerow(row)


def write_rows_to_new_csv(rows: List[Dict[str, Any]], csv_path: str, header: List[str]):
    # "x" refuses an existing file: detailed logs are never overwritten
    with open(csv_path, "x", newline='', encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=header)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)


def read_rows_from_csv(csv_path: str, header: List[str]) -> List[Dict[str, str]]:
    """
    Read every data row of a CSV file whose header must equal `header`.
    An empty file yields no rows.
    Raises:
        MalformedDataError: On a header mismatch, a row with the wrong number of fields, bytes that are not
            UTF-8 or content the csv module cannot parse.
    """
    try:
        with open(csv_path, "r", newline='', encoding="utf-8") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None:
                return []
            if list(reader.fieldnames) != header:
                raise MalformedDataError(f"Unexpected header {reader.fieldnames}", csv_path, row=1)
            rows = []
            for row in reader:
                # DictReader puts extra fields under None and fills missing ones with None
                if None in row or any(v is None for v in row.values()):
                    raise MalformedDataError("Wrong number of fields", csv_path, row=reader.line_num)
                rows.append(row)
            return rows
    except (UnicodeDecodeError, csv.Error) as e:
        raise MalformedDataError(f"Unreadable CSV content: {e}", csv_path) from e


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"not a boolean: {text!r}")


def format_ledger_time(moment: datetime.datetime) -> str:
    return moment.strftime(LEDGER_TIME_FORMAT)


def _parse_ledger_time(text: str) -> datetime.datetime:
    parsed = datetime.datetime.strptime(text.strip(), LEDGER_TIME_FORMAT)
    return parsed.replace(tzinfo=datetime.timezone.utc)


def _parse_optional_ledger_time(text: str):
    return _parse_ledger_time(text) if text.strip() else None


MOVE_CONVERTERS: Dict[str, Callable[[str], Any]] = {
    "timestamp": datetime.datetime.fromisoformat,
    "board_state": str,
    "move_chosen": lambda s: Move.parse(s).label,
    "time_taken_ms": int,
    "up_score": float,
    "down_score": float,
    "left_score": float,
    "right_score": float,
    "best_score": float,
    "chosen_score": float,
    "variation_score": float,
    "is_bad_move": _parse_bool,
    "game_score": int,
    "move_number": int,
}


LEDGER_CONVERTERS: Dict[str, Callable[[str], Any]] = {
    "session_id": str,
    "start_time": _parse_ledger_time,
    "end_time": _parse_optional_ledger_time,
    "final_score": int,
    "highest_tile": int,
    "total_moves": int,
    "bad_moves": int,
    "average_time_per_move_ms": float,
}


def _convert_row(row: Dict[str, str], converters: Dict[str, Callable[[str], Any]],
                 csv_path: str, row_number: int) -> Dict[str, Any]:
    values = {}
    for name, convert in converters.items():
        try:
            values[name] = convert(row[name])
        except (TypeError, ValueError) as e:
            raise MalformedDataError(f"Bad value for {name}: {e}", csv_path, row=row_number) from e
    return values


def move_event_to_row(event: MoveEvent) -> Dict[str, Any]:
    return {
        "timestamp": event.timestamp.isoformat(),
        "board_state": event.board_state,
        "move_chosen": event.move_chosen,
        "time_taken_ms": event.time_taken_ms,
        "up_score": event.up_score,
        "down_score": event.down_score,
        "left_score": event.left_score,
        "right_score": event.right_score,
        "best_score": event.best_score,
        "chosen_score": event.chosen_score,
        "variation_score": event.variation_score,
        "is_bad_move": _format_bool(event.is_bad_move),
        "game_score": event.game_score,
        "move_number": event.move_number,
    }


def summary_to_ledger_row(summary: SessionSummary) -> Dict[str, Any]:
    return {
        "session_id": summary.session_id,
        "start_time": format_ledger_time(summary.start_time),
        "end_time": format_ledger_time(summary.end_time) if summary.end_time is not None else "",
        "final_score": summary.final_score,
        "highest_tile": summary.highest_tile,
        "total_moves": summary.total_moves,
        "bad_moves": summary.bad_moves,
        "average_time_per_move_ms": f"{summary.average_time_per_move_ms:.2f}",
    }


def write_move_events(events: Sequence[MoveEvent], csv_path: str) -> None:
    """
    Write a session's events, in order, to a new detailed log.
    Raises:
        SinkIOError: If the file exists already or cannot be written.
    """
    rows = [move_event_to_row(e) for e in events]
    try:
        write_rows_to_new_csv(rows, csv_path, MOVES_HEADER)
    except OSError as e:
        raise SinkIOError(f"Cannot write detailed log: {e}", csv_path, "write") from e


def read_move_events(csv_path: str) -> List[MoveEvent]:
    """
    Load the ordered events of a detailed log.
    Raises:
        SinkIOError: If the file cannot be read.
        MalformedDataError: If the content does not match the detailed-log format.
    """
    try:
        rows = read_rows_from_csv(csv_path, MOVES_HEADER)
    except OSError as e:
        raise SinkIOError(f"Cannot read detailed log: {e}", csv_path, "read") from e
    # data rows start on line 2
    return [MoveEvent(**_convert_row(row, MOVE_CONVERTERS, csv_path, i + 2)) for i, row in enumerate(rows)]


def append_summary_to_ledger(summary: SessionSummary, csv_path: str) -> None:
    """
    Append one session row to the ledger, writing the header first if the file is new.
    Raises:
        SinkIOError: If the ledger cannot be opened or written.
    """
    try:
        append_row_to_csv(summary_to_ledger_row(summary), csv_path, LEDGER_HEADER)
    except OSError as e:
        raise SinkIOError(f"Cannot append to ledger: {e}", csv_path, "append") from e


def read_ledger(csv_path: str) -> List[SessionSummary]:
    """
    Load every session row of the ledger, in file order.
    Raises:
        SinkIOError: If the file cannot be read.
        MalformedDataError: If the content does not match the ledger format.
    """
    try:
        rows = read_rows_from_csv(csv_path, LEDGER_HEADER)
    except OSError as e:
        raise SinkIOError(f"Cannot read ledger: {e}", csv_path, "read") from e
    sessions = []
    for i, row in enumerate(rows):
        summary = SessionSummary(**_convert_row(row, LEDGER_CONVERTERS, csv_path, i + 2))
        if not 0 <= summary.bad_moves <= summary.total_moves:
            raise MalformedDataError("bad_moves outside [0, total_moves]", csv_path, row=i + 2)
        sessions.append(summary)
    return sessions
