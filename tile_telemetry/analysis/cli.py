"""
Analyze recorded sessions: per-move statistics of one detailed log (optional) and the
cross-session summary of the cumulative ledger.
Usage: tile-telemetry-analyze [player_moves_<session_id>.csv] [--data-dir DIR] [--month YYYYMM] [--plot out.png]
"""
import re
import sys
import logging
import argparse
from typing import List, Optional

from tile_telemetry.core.config import TelemetryConfig
from tile_telemetry.persistence.errors import PersistenceError
from .ledger_analysis import analyze_all_sessions, analyze_month
from .session_analysis import TREND_WINDOW, analyze_session_moves


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Analyze recorded tile-game sessions')
    parser.add_argument('moves_file', nargs='?', default=None, help='Detailed move log of one session')
    parser.add_argument('--data-dir', type=str, default='.', help='Directory holding the session ledger and monthly files')
    parser.add_argument('--month', type=str, default=None, help='Also summarize the monthly aggregate YYYYMM')
    parser.add_argument('--plot', type=str, default=None, help='Save the good-move trend of moves_file to this PNG')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable info logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    if args.month is not None and not re.fullmatch(r"\d{6}", args.month):
        parser.error(f"--month must look like YYYYMM, got {args.month!r}")
    if args.plot and not args.moves_file:
        parser.error("--plot needs a moves_file")

    config = TelemetryConfig(data_dir=args.data_dir)
    try:
        if args.moves_file:
            print(f"Analyzing moves file: {args.moves_file}")
            stats = analyze_session_moves(args.moves_file)
            if args.plot:
                if stats is not None and stats.good_move_trend:
                    from .plots import plot_good_move_trend
                    plot_good_move_trend(stats.good_move_trend, TREND_WINDOW, args.plot)
                    print(f"Good-move trend chart: {args.plot}")
                else:
                    print(f"Fewer than {TREND_WINDOW} moves; skipping plot generation: {args.plot}")
        else:
            print("Usage: tile-telemetry-analyze [moves_file.csv]")
            print("If no file specified, will analyze session summary only.\n")

        analyze_all_sessions(config.ledger_path())
        if args.month:
            analyze_month(config.monthly_path(args.month))
    except PersistenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
