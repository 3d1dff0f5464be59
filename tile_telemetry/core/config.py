"""
config.py
Defines the TelemetryConfig dataclass, which centralizes where session telemetry is written and read.
Related modules:
- finalizer.py: Uses TelemetryConfig to locate the detailed log, monthly aggregate and ledger.
- analysis/cli.py: Builds a TelemetryConfig from command-line flags.
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class TelemetryConfig:
    """
    Centralizes file locations for the three persistence sinks.
    Fields:
        data_dir (str): Directory holding every sink (created on first save).
        moves_prefix (str): Prefix of per-session detailed logs (<prefix>_<session_id>.csv).
        sessions_prefix (str): Prefix of monthly aggregates (<prefix>_<YYYYMM>.json).
        ledger_filename (str): Name of the cumulative, append-only session ledger.
    """
    data_dir: str = "."
    moves_prefix: str = "player_moves"
    sessions_prefix: str = "player_sessions"
    ledger_filename: str = "player_sessions.csv"

    def moves_path(self, session_id: str) -> str:
        return os.path.join(self.data_dir, f"{self.moves_prefix}_{session_id}.csv")

    def monthly_path(self, month_key: str) -> str:
        return os.path.join(self.data_dir, f"{self.sessions_prefix}_{month_key}.json")

    def ledger_path(self) -> str:
        return os.path.join(self.data_dir, self.ledger_filename)
