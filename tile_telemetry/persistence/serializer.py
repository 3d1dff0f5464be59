"""
serializer.py
JSON serialization of SessionSummary collections for the monthly aggregate files.
Each monthly file holds a pretty-printed JSON array and is fully rewritten whenever a session is added.
"""

import os
import json
import datetime
from dataclasses import asdict
from typing import Any, Dict, List

from .errors import MalformedDataError, SinkIOError
from .events import SessionSummary

SUMMARY_FIELDS = (
    "session_id", "start_time", "end_time", "final_score", "highest_tile",
    "total_moves", "bad_moves", "average_time_per_move_ms",
)


def _default(o: Any):
    if isinstance(o, datetime.datetime):
        return o.isoformat()
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


def dumps(obj: Any) -> str:
    """
    Serialize a Python object (datetimes as ISO-8601 strings) to an indented JSON string.
    """
    return json.dumps(obj, default=_default, indent=2)


def loads(s: str):
    return json.loads(s)


def summary_to_dict(summary: SessionSummary) -> Dict[str, Any]:
    return asdict(summary)


def summary_from_dict(data: Dict[str, Any]) -> SessionSummary:
    """
    Rebuild a SessionSummary from its JSON object.
    Raises:
        KeyError / TypeError / ValueError: If fields are missing, have the wrong type or bad_moves is not
            within [0, total_moves].
    """
    if set(data) != set(SUMMARY_FIELDS):
        raise ValueError(f"fields {sorted(data)} do not match {sorted(SUMMARY_FIELDS)}")
    end_time = data["end_time"]
    summary = SessionSummary(
        session_id=str(data["session_id"]),
        start_time=datetime.datetime.fromisoformat(data["start_time"]),
        end_time=datetime.datetime.fromisoformat(end_time) if end_time is not None else None,
        final_score=int(data["final_score"]),
        highest_tile=int(data["highest_tile"]),
        total_moves=int(data["total_moves"]),
        bad_moves=int(data["bad_moves"]),
        average_time_per_move_ms=float(data["average_time_per_move_ms"]),
    )
    if not 0 <= summary.bad_moves <= summary.total_moves:
        raise ValueError("bad_moves outside [0, total_moves]")
    return summary


def load_summaries(path: str) -> List[SessionSummary]:
    """
    Load a monthly aggregate. A missing file is an empty collection.
    Raises:
        SinkIOError: If the file exists but cannot be read.
        MalformedDataError: If it is not a JSON array of session objects.
    """
    if not os.path.exists(path):
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise MalformedDataError(f"Monthly aggregate is not UTF-8: {e}", path) from e
    except OSError as e:
        raise SinkIOError(f"Cannot read monthly aggregate: {e}", path, "read") from e
    try:
        data = loads(content)
    except ValueError as e:
        raise MalformedDataError(f"Corrupt JSON: {e}", path) from e
    if not isinstance(data, list):
        raise MalformedDataError("Expected a JSON array of sessions", path)
    summaries = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise MalformedDataError(f"Entry {i} is not an object", path)
        try:
            summaries.append(summary_from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedDataError(f"Entry {i}: {e}", path) from e
    return summaries


def save_summaries(path: str, summaries: List[SessionSummary]) -> None:
    """
    Replace the monthly aggregate with `summaries`: write a temporary file next to it, then os.replace().
    Readers see either the old or the new collection, never a partial one.
    Raises:
        SinkIOError: If the temporary file cannot be written or moved into place.
    """
    tmp_path = f"{path}.tmp_{os.getpid()}"
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(dumps([summary_to_dict(s) for s in summaries]))
        os.replace(tmp_path, path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise SinkIOError(f"Cannot rewrite monthly aggregate: {e}", path, "rewrite") from e


def append_summary(path: str, summary: SessionSummary) -> int:
    """
    Load the monthly collection, append `summary` and rewrite it.
    Not locked: two processes appending to the same month concurrently can lose one entry.
    Returns:
        int: Size of the collection after the append.
    """
    summaries = load_summaries(path)
    summaries.append(summary)
    save_summaries(path, summaries)
    return len(summaries)
