"""
Analyze recorded sessions from a source checkout.
Usage: python scripts/analyze.py [player_moves_<session_id>.csv] --data-dir data
"""
import sys

from tile_telemetry.analysis.cli import main


if __name__ == '__main__':
    sys.exit(main())
