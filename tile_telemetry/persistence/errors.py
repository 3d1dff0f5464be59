"""
errors.py
Exceptions raised while writing or reading the telemetry sinks.
"""

from typing import Optional


class PersistenceError(Exception):
    """
    Base class for sink failures.
    Attributes:
        sink (str): Path of the file involved.
        operation (str): What was being done ('write', 'append', 'read', ...).
    """
    def __init__(self, message: str, sink: str, operation: str):
        super().__init__(f"{message} [{operation} {sink}]")
        self.sink = sink
        self.operation = operation


class SinkIOError(PersistenceError):
    """
    Raised when a sink cannot be created, opened, written or read. The OSError is chained as __cause__.
    """
    pass


class MalformedDataError(PersistenceError):
    """
    Raised when persisted data does not match the expected format (wrong header, bad field, corrupt JSON).
    """
    def __init__(self, message: str, sink: str, operation: str = "read", row: Optional[int] = None):
        if row is not None:
            message = f"{message} (row {row})"
        super().__init__(message, sink, operation)
        self.row = row
