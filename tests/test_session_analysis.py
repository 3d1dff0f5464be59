import os
import datetime
import tempfile
import unittest

from tile_telemetry.analysis import session_analysis
from tile_telemetry.core.moves import Move
from tile_telemetry.persistence import csv_io
from tile_telemetry.persistence.events import MoveEvent

BOARD = "0,0,0,0,0,0,0,0,0,0,0,0,0,0,2,2"
GOOD = [20.0, 10.0, 10.0, -1.0]   # Up is best
BAD = [10.0, 20.0, 5.0, -1.0]     # Up loses 50%


def make_events(specs):
    """specs: list of (move, scores, time_taken_ms)."""
    start = datetime.datetime(2024, 3, 9, 14, 5, 0, tzinfo=datetime.timezone.utc)
    return [
        MoveEvent.create(start + datetime.timedelta(seconds=i), BOARD, move, ms, scores, 4 * i, i)
        for i, (move, scores, ms) in enumerate(specs, start=1)
    ]


class TestSessionAnalysis(unittest.TestCase):
    """
    Tests for per-session statistics: timing, quality, fixed-order preferences and the
    floor(n/2) early/late split.
    """

    def test_five_move_split(self):
        events = make_events([(Move.UP, GOOD, 1000)] * 5)
        early, late = session_analysis.split_progression(events)
        self.assertEqual([e.move_number for e in early], [1, 2])
        self.assertEqual([e.move_number for e in late], [3, 4, 5])

    def test_statistics(self):
        events = make_events([
            (Move.UP, BAD, 500),
            (Move.UP, GOOD, 1500),
            (Move.LEFT, GOOD, 4000),
            (Move.UP, BAD, 6000),
        ])
        stats = session_analysis.compute_move_stats(events)
        self.assertEqual(stats.total_moves, 4)
        self.assertAlmostEqual(stats.avg_time_s, 3.0)
        self.assertAlmostEqual(stats.min_time_s, 0.5)
        self.assertAlmostEqual(stats.max_time_s, 6.0)
        self.assertEqual(stats.bad_moves, 3)
        self.assertAlmostEqual(stats.bad_move_pct, 75.0)
        # losses: 10, 0, 10, 10
        self.assertAlmostEqual(stats.avg_score_loss, 7.5)
        self.assertEqual(list(stats.move_counts.items()), [("Up", 3), ("Down", 0), ("Left", 1), ("Right", 0)])
        self.assertEqual(stats.early.bad_moves, 1)
        self.assertAlmostEqual(stats.early.bad_move_pct, 50.0)
        self.assertAlmostEqual(stats.early.avg_time_s, 1.0)
        self.assertEqual(stats.late.bad_moves, 2)
        self.assertAlmostEqual(stats.late.avg_time_s, 5.0)
        self.assertEqual(stats.time_buckets, {
            "Fast (0-1s)": 1, "Normal (1-3s)": 1, "Slow (3-5s)": 1, "Very Slow (5s+)": 1,
        })
        self.assertEqual(stats.difficulty_counts["EASY"], 4)
        self.assertEqual(stats.good_move_trend, [])

    def test_single_move_has_empty_early_half(self):
        stats = session_analysis.compute_move_stats(make_events([(Move.UP, GOOD, 800)]))
        self.assertEqual(stats.early.moves, 0)
        self.assertIsNone(stats.early.bad_move_pct)
        self.assertIsNone(stats.early.avg_time_s)
        self.assertEqual(stats.late.moves, 1)
        lines = session_analysis.format_move_report(stats)
        self.assertIn("Early game bad moves: 0/0 (n/a)", lines)

    def test_good_move_trend(self):
        specs = [(Move.UP, GOOD, 100)] * 20 + [(Move.UP, BAD, 100)] * 5
        trend = session_analysis.good_move_trend(make_events(specs))
        self.assertEqual(len(trend), 6)
        self.assertEqual(trend[0], 100.0)
        self.assertEqual(trend[-1], 75.0)

    def test_empty_events_rejected(self):
        with self.assertRaises(ValueError):
            session_analysis.compute_move_stats([])


class TestAnalyzeSessionMoves(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self._tmp.name, "player_moves_20240309_140500.csv")
        self.lines = []

    def tearDown(self):
        self._tmp.cleanup()

    def test_report_from_file(self):
        csv_io.write_move_events(make_events([(Move.UP, GOOD, 1000), (Move.RIGHT, GOOD, 2000)]), self.path)
        stats = session_analysis.analyze_session_moves(self.path, echo=self.lines.append)
        self.assertEqual(stats.total_moves, 2)
        self.assertEqual(self.lines[0], "=== Player Performance Analysis ===")
        self.assertIn("Average time per move: 1.50s", self.lines)
        self.assertIn("Right: 1 (50.0%)", self.lines)

    def test_empty_log_is_not_an_error(self):
        csv_io.write_move_events([], self.path)
        self.assertIsNone(session_analysis.analyze_session_moves(self.path, echo=self.lines.append))
        self.assertEqual(self.lines, [f"No move data found in {self.path}"])


if __name__ == '__main__':
    unittest.main()
